"""Exception hierarchy for soft-delete, cascade and account lifecycle errors."""

from typing import Any, Optional


class LifecycleError(Exception):
    """Base class for all lifecycle engine errors."""
    pass


class InvalidTransitionError(LifecycleError):
    """Raised when a lifecycle transition is not allowed from the current state.

    No state change is performed when this is raised.
    """
    pass


class CascadeConfigurationError(LifecycleError):
    """Raised when an entity declares an ownership edge that cannot be walked."""
    pass


class CascadeError(LifecycleError):
    """Raised when a cascade soft-delete fails part way.

    The unit of work containing the parent and all cascaded children has been
    rolled back before this is raised.

    Attributes:
        root: Entity the cascade was started from
        failed_node: Entity that could not be marked (None if the flush failed)
    """

    def __init__(self, message: str, root: Any, failed_node: Optional[Any] = None):
        super().__init__(message)
        self.root = root
        self.failed_node = failed_node
