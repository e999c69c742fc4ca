"""Configuration system for communitytree.

This module defines the options consulted while building trees and cache
descriptors: whether item counts feed the validity, how long a result may be
assumed valid, and which projection a browser renders.
"""

import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional

from .errors import ConfigurationError


DEFAULT_DEPTH = 999

# Property names as they appear in a flat configuration mapping
CACHE_ITEM_COUNTS = "cache-item-counts"
ASSUMED_VALID_DURATION = "assumed-valid-duration"
RENDER_FULL = "render-full"
LINK_PREFIX = "link-prefix"

_DURATION_UNITS: Dict[str, timedelta] = {
    "ms": timedelta(milliseconds=1),
    "millisecond": timedelta(milliseconds=1),
    "milliseconds": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "sec": timedelta(seconds=1),
    "second": timedelta(seconds=1),
    "seconds": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "min": timedelta(minutes=1),
    "minute": timedelta(minutes=1),
    "minutes": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "hour": timedelta(hours=1),
    "hours": timedelta(hours=1),
    "d": timedelta(days=1),
    "day": timedelta(days=1),
    "days": timedelta(days=1),
    "w": timedelta(weeks=1),
    "week": timedelta(weeks=1),
    "weeks": timedelta(weeks=1),
}

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([a-zA-Z]*)\s*$")

_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0", ""}


def parse_duration(text: str) -> timedelta:
    """Parse an assumed-valid duration such as ``"30 minutes"``.

    A bare integer is read as milliseconds.

    Args:
        text: Duration text

    Returns:
        The parsed duration

    Raises:
        ConfigurationError: If the text is not a recognised duration
    """
    match = _DURATION_RE.match(text)
    if not match:
        raise ConfigurationError(f"Cannot parse duration: {text!r}")

    amount = int(match.group(1))
    unit = match.group(2).lower() or "ms"
    if unit not in _DURATION_UNITS:
        raise ConfigurationError(
            f"Unknown duration unit {match.group(2)!r} in {text!r}"
        )
    return _DURATION_UNITS[unit] * amount


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Property {name!r} is not a boolean: {value!r}")


@dataclass
class HierarchyConfig:
    """Options consulted by the helper, the validity walk and the browser."""

    # Add a size:<n> token per unit to cache descriptors
    cache_item_counts: bool = False

    # Skip token comparison for this long after a result is stored
    assumed_valid_duration: Optional[str] = None

    # Browser renders reference groupings (True) or nested link lists (False)
    render_full: bool = True

    # Path segment between the base path and a unit handle in list links
    link_prefix: str = "handle"

    # Parsed from assumed_valid_duration at construction
    _assumed_valid_delta: Optional[timedelta] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        if self.assumed_valid_duration is not None:
            self._assumed_valid_delta = parse_duration(self.assumed_valid_duration)

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> 'HierarchyConfig':
        """Create a config from a flat property mapping.

        Missing properties take their defaults. An empty
        ``assumed-valid-duration`` counts as absent. A bad duration is
        rejected by the constructor itself.

        Raises:
            ConfigurationError: If a property value cannot be interpreted
        """
        duration = properties.get(ASSUMED_VALID_DURATION)
        if duration is not None and not str(duration).strip():
            duration = None

        config = cls(
            cache_item_counts=_parse_bool(
                CACHE_ITEM_COUNTS, properties.get(CACHE_ITEM_COUNTS, False)
            ),
            assumed_valid_duration=str(duration) if duration is not None else None,
            render_full=_parse_bool(RENDER_FULL, properties.get(RENDER_FULL, True)),
            link_prefix=str(properties.get(LINK_PREFIX, "handle")),
        )

        errors = config.validate()
        if errors:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(errors)}")
        return config

    @property
    def assumed_valid_delta(self) -> Optional[timedelta]:
        """The assumed-valid duration as a timedelta, or None if absent."""
        return self._assumed_valid_delta

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if "/" in self.link_prefix.strip("/"):
            errors.append("link_prefix must be a single path segment")

        return errors
