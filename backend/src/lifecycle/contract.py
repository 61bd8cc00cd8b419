"""Soft-delete capability shared by every deletable entity.

A model opts in by mixing in SoftDeleteMixin. It gains a ``deleted_at``
column, the mark_deleted/restore/is_active contract, and may declare the
relationship collections it owns:

    class Board(SoftDeleteMixin, Base):
        __tablename__ = "board"
        __soft_delete_cascade__ = ("posts",)

        posts = relationship("Post", back_populates="board")

The declaration is only data. Walking it is the job of
lifecycle.cascade.CascadePropagator; the mixin never touches children itself.
"""

from datetime import datetime
from typing import Iterator, Optional, Tuple

from sqlalchemy import Column, DateTime
from sqlalchemy.ext.hybrid import hybrid_property

from .clock import utcnow


class SoftDeleteMixin:
    """Mixin adding logical deletion to a declarative model.

    Invariant: ``deleted_at is not None`` exactly when the row is logically
    deleted. Deleted rows are hidden from ORM SELECTs by the active-row filter
    unless the statement carries ``include_deleted=True``.
    """

    __soft_delete_cascade__: Tuple[str, ...] = ()

    deleted_at = Column(DateTime, nullable=True, index=True)

    @hybrid_property
    def is_active(self) -> bool:
        return self.deleted_at is None

    @is_active.expression
    def is_active(cls):
        return cls.deleted_at.is_(None)

    def mark_deleted(self, now: Optional[datetime] = None) -> bool:
        """Mark this entity deleted.

        Idempotent: an existing ``deleted_at`` is never overwritten.

        Args:
            now: Deletion timestamp (defaults to current UTC time)

        Returns:
            True if the entity transitioned to deleted, False if it already was
        """
        if self.deleted_at is not None:
            return False
        self.deleted_at = now or utcnow()
        return True

    def restore(self) -> bool:
        """Clear the deletion mark. Children are not restored.

        Returns:
            True if the entity was deleted and is now active, False otherwise
        """
        if self.deleted_at is None:
            return False
        self.deleted_at = None
        return True

    @classmethod
    def cascade_edges(cls) -> Tuple[str, ...]:
        """Names of the relationship attributes this entity owns."""
        return tuple(cls.__soft_delete_cascade__)

    def owned_children(self) -> Iterator["SoftDeleteMixin"]:
        """Yield every member of every declared child collection."""
        for name in self.cascade_edges():
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, SoftDeleteMixin):
                yield value
                continue
            for child in list(value):
                yield child
