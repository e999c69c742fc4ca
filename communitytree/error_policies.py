"""
Metric error policies for communitytree.

The validity walk asks an item counter for a count per unit. A counter
failure must not cost the whole descriptor, so each failure is handed to a
policy that decides whether to omit the size token (and how loudly) or to
re-raise.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class ErrorPolicy(ABC):
    """
    Base class for metric error handling policies.

    ``handle`` is called with the exception raised by the counter and the
    unit being counted. Returning normally means the size token is omitted.
    """

    @abstractmethod
    def handle(self, error: Exception, unit: Any) -> None:
        """
        Handle a failed item count.

        Args:
            error: The exception raised by the counter
            unit: The unit whose count failed

        Raises:
            The original error, if the policy does not recover
        """
        pass


class FailFastPolicy(ErrorPolicy):
    """
    Policy that re-raises every counter error.

    Only useful when debugging a counter; the validity computation fails
    with the counter's exception.
    """

    def handle(self, error: Exception, unit: Any) -> None:
        """Re-raise the error immediately."""
        raise error


class SkipMetricPolicy(ErrorPolicy):
    """
    Default policy: omit the size token and log at debug level.
    """

    def __init__(self):
        self.skipped = 0

    def handle(self, error: Exception, unit: Any) -> None:
        self.skipped += 1
        logger.debug("Omitting size token for %r: %s", unit, error)


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that omits the size token and keeps a record of every failure.

    Useful when a caller wants to report partial metrics after the walk.
    """

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []

    def handle(self, error: Exception, unit: Any) -> None:
        self.errors.append({
            'unit': unit,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        })

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about collected failures.

        Returns:
            Dictionary with the total and per-type counts
        """
        by_type: Dict[str, int] = {}
        for record in self.errors:
            by_type[record['error_type']] = by_type.get(record['error_type'], 0) + 1
        return {
            'total_errors': len(self.errors),
            'by_type': by_type,
        }

    def clear(self) -> None:
        self.errors.clear()
