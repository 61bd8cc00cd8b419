"""Soft-delete lifecycle engine.

This package provides:
- SoftDeleteMixin: the mark_deleted/restore/is_active contract
- The active-row query filter (registered on import)
- CascadePropagator: generic cascade over declared ownership edges
- LifecycleService: application-facing operations
"""

from .clock import utcnow
from .contract import SoftDeleteMixin
from .exceptions import (
    LifecycleError,
    InvalidTransitionError,
    CascadeError,
    CascadeConfigurationError,
)
from . import query_filter  # noqa: F401  (registers the do_orm_execute listener)
from .query_filter import INCLUDE_DELETED

__all__ = [
    "utcnow",
    "SoftDeleteMixin",
    "LifecycleError",
    "InvalidTransitionError",
    "CascadeError",
    "CascadeConfigurationError",
    "INCLUDE_DELETED",
]
