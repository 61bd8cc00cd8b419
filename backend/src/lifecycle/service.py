"""Application-facing soft-delete operations.

LifecycleService is what controllers and other services call. mark_deleted()
runs the cascade and commits it as one unit of work; restore() is shallow.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .cascade import CascadePropagator, CascadeResult
from .contract import SoftDeleteMixin

logger = logging.getLogger(__name__)


class LifecycleService:
    """Soft-delete, restore and activity checks for any deletable entity."""

    def __init__(self, db: Session, propagator: Optional[CascadePropagator] = None):
        self.db = db
        self.propagator = propagator or CascadePropagator(db)

    def mark_deleted(
        self,
        entity: SoftDeleteMixin,
        now: Optional[datetime] = None,
    ) -> CascadeResult:
        """Soft-delete ``entity`` and everything it owns, then commit.

        Raises:
            CascadeError: Nothing was persisted; the session was rolled back
        """
        result = self.propagator.soft_delete(entity, now=now)
        self.db.commit()
        return result

    def restore(self, entity: SoftDeleteMixin) -> bool:
        """Restore ``entity`` only. Children deleted by a cascade stay deleted.

        Returns:
            True if the entity was deleted and has been restored
        """
        restored = entity.restore()
        if restored:
            self.db.commit()
            logger.info(f"Restored {type(entity).__name__}")
        return restored

    @staticmethod
    def is_active(entity: SoftDeleteMixin) -> bool:
        return entity.is_active
