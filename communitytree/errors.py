"""Exception hierarchy for communitytree.

RetrievalFailure is fatal to the call that raised it. MetricFailure is
recovered locally by the validity walk and never escapes it unless a
FailFastPolicy is configured.
"""


class CommunityTreeError(Exception):
    """Base class for all communitytree errors."""
    pass


class RetrievalFailure(CommunityTreeError):
    """Raised when the unit store cannot supply groups or leaves.

    Attributes:
        unit: The unit being expanded when the failure occurred (None when
            listing top-level groups)
        operation: Name of the store operation that failed
    """

    def __init__(self, message: str, unit=None, operation: str = None):
        super().__init__(message)
        self.unit = unit
        self.operation = operation


class MetricFailure(CommunityTreeError):
    """Raised by an item counter when a count cannot be determined."""

    def __init__(self, message: str, unit=None):
        super().__init__(message)
        self.unit = unit


class ConfigurationError(CommunityTreeError):
    """Raised when configuration values cannot be interpreted."""
    pass


class ConcurrentUseError(CommunityTreeError):
    """Raised when one helper instance is shared across threads."""
    pass
