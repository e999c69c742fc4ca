"""Tree-to-output projections for communitytree.

Both projections read a built tree and never touch the store. Their output
is plain data handed to an external page assembler:

- ReferenceProjection: a Reference per group, carrying at most one leaf
  grouping and at most one sub-group grouping.
- ListProjection: nested link lists, one emphasized link per group and at
  most one sub-list per group.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .node import TreeNode, Unit

SUMMARY_LIST = "summaryList"


@dataclass
class Reference:
    """A reference to one unit, optionally with nested groupings."""

    unit: Unit
    groupings: List['ReferenceGroup'] = field(default_factory=list)

    def add_grouping(self, kind: str) -> 'ReferenceGroup':
        grouping = ReferenceGroup(kind=kind)
        self.groupings.append(grouping)
        return grouping

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'type': self.unit.unit_type.value,
            'handle': self.unit.handle,
            'name': self.unit.name,
        }
        if self.groupings:
            data['groupings'] = [g.to_dict() for g in self.groupings]
        return data


@dataclass
class ReferenceGroup:
    """An ordered set of references of one kind (leaves or groups)."""

    kind: str
    render_type: str = SUMMARY_LIST
    references: List[Reference] = field(default_factory=list)

    def add_reference(self, unit: Unit) -> Reference:
        reference = Reference(unit)
        self.references.append(reference)
        return reference

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'render_type': self.render_type,
            'references': [r.to_dict() for r in self.references],
        }


@dataclass
class LinkItem:
    """One link in a nested list."""

    label: str
    target: str
    emphasized: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'label': self.label, 'target': self.target, 'emphasized': self.emphasized}


@dataclass
class NestedList:
    """An ordered list of links and sub-lists."""

    name: str
    items: List[Union[LinkItem, 'NestedList']] = field(default_factory=list)

    def add_link(self, label: str, target: str, emphasized: bool = False) -> LinkItem:
        item = LinkItem(label, target, emphasized)
        self.items.append(item)
        return item

    def add_list(self, name: str) -> 'NestedList':
        sub_list = NestedList(name)
        self.items.append(sub_list)
        return sub_list

    @property
    def links(self) -> List[LinkItem]:
        return [item for item in self.items if isinstance(item, LinkItem)]

    @property
    def sub_lists(self) -> List['NestedList']:
        return [item for item in self.items if isinstance(item, NestedList)]

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'items': [item.to_dict() for item in self.items]}


class ReferenceProjection:
    """Projects group nodes onto nested reference groupings."""

    LEAVES = "leaves"
    GROUPS = "groups"

    def to_reference_groups(self,
                            node: TreeNode,
                            into: Optional[ReferenceGroup] = None) -> Reference:
        """Build the reference for one group node and its descendants.

        Args:
            node: A group node of a built tree
            into: Grouping that receives the new reference, if any

        Returns:
            The reference created for ``node``
        """
        reference = into.add_reference(node.unit) if into is not None else Reference(node.unit)

        groups, leaves = node.partition_children()

        if leaves:
            leaf_set = reference.add_grouping(self.LEAVES)
            for leaf in leaves:
                leaf_set.add_reference(leaf.unit)

        if groups:
            group_set = reference.add_grouping(self.GROUPS)
            for group in groups:
                self.to_reference_groups(group, group_set)

        return reference


class ListProjection:
    """Projects group nodes onto nested link lists."""

    def __init__(self, link_prefix: str = "handle"):
        """Initialize projection.

        Args:
            link_prefix: Path segment placed between the base path and a
                unit handle (empty for none)
        """
        self.link_prefix = link_prefix.strip("/")

    def link_for(self, base_path: str, unit: Unit) -> str:
        base = base_path.rstrip("/")
        if self.link_prefix:
            return f"{base}/{self.link_prefix}/{unit.handle}"
        return f"{base}/{unit.handle}"

    def to_nested_list(self, base_path: str, node: TreeNode, into: NestedList) -> None:
        """Append one group node and its descendants to ``into``.

        The group gets one emphasized link. If it has any children, a single
        sub-list follows, holding the leaf links first and then each
        sub-group expanded the same way.
        """
        unit = node.unit
        into.add_link(unit.name, self.link_for(base_path, unit), emphasized=True)

        groups, leaves = node.partition_children()
        if not groups and not leaves:
            return

        sub_list = into.add_list(f"sub-list-{unit.identifier()}")

        for leaf in leaves:
            sub_list.add_link(leaf.unit.name, self.link_for(base_path, leaf.unit))

        for group in groups:
            self.to_nested_list(base_path, group, sub_list)
