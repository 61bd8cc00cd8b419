"""Automatic exclusion of soft-deleted rows from ORM queries.

Registers a ``do_orm_execute`` listener on every Session. Each ORM SELECT gets
a loader criterion ``deleted_at IS NULL`` for all SoftDeleteMixin classes it
touches, and the criterion propagates to relationship lazy loads of the
objects it returns. Bulk UPDATE/DELETE statements are left alone.

Opt out per statement:

    stmt = select(Account).where(Account.id == account_id)
    session.execute(stmt.execution_options(include_deleted=True))
"""

from sqlalchemy import event
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria

from .contract import SoftDeleteMixin

INCLUDE_DELETED = "include_deleted"


@event.listens_for(Session, "do_orm_execute")
def exclude_soft_deleted_rows(execute_state: ORMExecuteState) -> None:
    """Add the active-row criterion to ORM SELECT statements."""
    if (
        not execute_state.is_select
        or execute_state.is_column_load
        or execute_state.is_relationship_load
        or execute_state.execution_options.get(INCLUDE_DELETED, False)
    ):
        return

    execute_state.statement = execute_state.statement.options(
        with_loader_criteria(
            SoftDeleteMixin,
            lambda cls: cls.deleted_at.is_(None),
            include_aliases=True,
        )
    )
