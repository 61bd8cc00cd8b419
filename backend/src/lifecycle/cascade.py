"""Cascade soft-delete over declared ownership edges.

The propagator walks the ownership graph depth-first from a root entity,
calling mark_deleted() on every node before descending into the node's
declared child collections. Parent and children are flushed together and the
session is rolled back if any node fails, so a partial cascade is never
persisted.
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session, with_parent

from observability.metrics import cascade_failures_total, cascade_soft_deletes_total

from .clock import utcnow
from .contract import SoftDeleteMixin
from .exceptions import CascadeConfigurationError, CascadeError
from .query_filter import INCLUDE_DELETED

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    """Outcome of one cascade soft-delete."""

    root_type: str
    root_id: Any
    deleted_at: datetime
    marked: int = 0
    already_deleted: int = 0
    marked_ids: Dict[str, List[Any]] = field(default_factory=lambda: defaultdict(list))

    @property
    def visited(self) -> int:
        return self.marked + self.already_deleted

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root_type": self.root_type,
            "root_id": self.root_id,
            "deleted_at": self.deleted_at.isoformat(),
            "marked": self.marked,
            "already_deleted": self.already_deleted,
            "marked_ids": dict(self.marked_ids),
        }


def validate_cascade_edges(model: type) -> None:
    """Check that every declared edge is a relationship to a deletable class.

    Raises:
        CascadeConfigurationError: If an edge is unknown or points at a class
            that does not use SoftDeleteMixin
    """
    mapper = inspect(model)
    for name in model.cascade_edges():
        relationship = mapper.relationships.get(name)
        if relationship is None:
            raise CascadeConfigurationError(
                f"{model.__name__}.{name} is declared in __soft_delete_cascade__ "
                f"but is not a relationship"
            )
        target = relationship.mapper.class_
        if not issubclass(target, SoftDeleteMixin):
            raise CascadeConfigurationError(
                f"{model.__name__}.{name} targets {target.__name__}, "
                f"which does not support soft delete"
            )


class CascadePropagator:
    """Soft-delete an entity and everything it owns in one unit of work.

    Usage:
        propagator = CascadePropagator(session)
        result = propagator.soft_delete(board, now=now)
        session.commit()
    """

    def __init__(self, db: Session):
        self.db = db
        self._validated: Set[type] = set()

    def soft_delete(
        self,
        root: SoftDeleteMixin,
        now: Optional[datetime] = None,
    ) -> CascadeResult:
        """Mark ``root`` and all transitively owned children deleted.

        Changes are flushed but not committed; the caller owns the commit.
        Re-running on an already-deleted subtree writes nothing.

        Args:
            root: Entity to delete
            now: Deletion timestamp shared by every node (defaults to UTC now)

        Returns:
            CascadeResult with per-type counts

        Raises:
            CascadeError: A node failed to be marked or the flush failed.
                The session has been rolled back.
            CascadeConfigurationError: An ownership declaration is invalid
        """
        if not isinstance(root, SoftDeleteMixin):
            raise CascadeConfigurationError(
                f"{type(root).__name__} does not support soft delete"
            )

        now = now or utcnow()
        result = CascadeResult(
            root_type=type(root).__name__,
            root_id=_identity(root),
            deleted_at=now,
        )
        visited: Set[int] = set()

        try:
            self._walk(root, now, visited, result)
            self.db.flush()
        except CascadeConfigurationError:
            self.db.rollback()
            raise
        except _NodeFailure as failure:
            self.db.rollback()
            cascade_failures_total.labels(entity_type=result.root_type).inc()
            logger.error(
                f"Cascade soft-delete failed at {type(failure.node).__name__} "
                f"under {result.root_type} {result.root_id}",
                exc_info=failure.__cause__,
                extra={"root_type": result.root_type, "root_id": str(result.root_id)},
            )
            raise CascadeError(
                f"Cascade soft-delete of {result.root_type} {result.root_id} failed "
                f"at {type(failure.node).__name__} {_identity(failure.node)}: "
                f"{failure.__cause__}",
                root=root,
                failed_node=failure.node,
            ) from failure.__cause__
        except Exception as e:
            self.db.rollback()
            cascade_failures_total.labels(entity_type=result.root_type).inc()
            logger.error(
                f"Cascade soft-delete flush failed for {result.root_type} {result.root_id}",
                exc_info=True,
                extra={"root_type": result.root_type, "root_id": str(result.root_id)},
            )
            raise CascadeError(
                f"Cascade soft-delete of {result.root_type} {result.root_id} failed: {e}",
                root=root,
            ) from e

        counts = Counter({name: len(ids) for name, ids in result.marked_ids.items()})
        for entity_type, count in counts.items():
            cascade_soft_deletes_total.labels(entity_type=entity_type).inc(count)

        logger.info(
            f"Soft-deleted {result.root_type} {result.root_id} "
            f"({result.marked} marked, {result.already_deleted} already deleted)",
            extra={
                "root_type": result.root_type,
                "root_id": str(result.root_id),
                "marked": result.marked,
                "already_deleted": result.already_deleted,
            },
        )
        return result

    def _walk(
        self,
        node: SoftDeleteMixin,
        now: datetime,
        visited: Set[int],
        result: CascadeResult,
    ) -> None:
        if id(node) in visited:
            return
        visited.add(id(node))

        model = type(node)
        if model not in self._validated:
            validate_cascade_edges(model)
            self._validated.add(model)

        try:
            changed = node.mark_deleted(now)
        except Exception as e:
            raise _NodeFailure(node) from e

        if changed:
            result.marked += 1
            result.marked_ids[model.__name__].append(_identity(node))
        else:
            result.already_deleted += 1

        # Children are walked even when the node was already deleted: a
        # shallow restore followed by new children must not leave them active.
        for child in self._owned_children(node):
            self._walk(child, now, visited, result)

    def _owned_children(self, node: SoftDeleteMixin) -> List[SoftDeleteMixin]:
        """Every child on every declared edge, soft-deleted ones included.

        Lazy loads inherit the active-row criterion of the query that loaded
        ``node``, so a deleted intermediate child would hide the active rows
        beneath it. Persisted children are selected with the opt-out; members
        already held in memory cover children that are not flushed yet.
        """
        children = list(node.owned_children())
        state = inspect(node)
        if not state.persistent:
            return children

        model = type(node)
        for name in model.cascade_edges():
            target = state.mapper.relationships[name].mapper.class_
            stmt = (
                select(target)
                .where(with_parent(node, getattr(model, name)))
                .execution_options(**{INCLUDE_DELETED: True})
            )
            children.extend(self.db.scalars(stmt).all())
        return children


class _NodeFailure(Exception):
    def __init__(self, node: Any):
        super().__init__(type(node).__name__)
        self.node = node


def _identity(entity: Any) -> Any:
    identity = inspect(entity).identity
    if identity is None:
        return None
    return identity[0] if len(identity) == 1 else identity
