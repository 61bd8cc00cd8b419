"""Related-data policy for erased accounts.

Before an account row is physically deleted, every table that references it
is handled according to a fixed policy:

- ERASE: rows that only make sense for the account itself (tokens,
  verification codes, hashtag links, notifications, memberships) are hard
  deleted.
- ANONYMIZE: content the account contributed to a team (posts, comments,
  chat messages, task comments, schedules, announcements, workspace
  ownership) is kept and detached by setting the reference to NULL.

All statements are bulk UPDATE/DELETE, so they reach soft-deleted rows too.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from models import (
    Account,
    Announcement,
    ChatMember,
    ChatMessage,
    Comment,
    EmailVerification,
    KanbanTaskComment,
    KanbanTaskMember,
    NotificationLog,
    Post,
    RefreshToken,
    Schedule,
    TeamMember,
    UserHashtagList,
    Workspace,
    WorkspaceMember,
)

logger = logging.getLogger(__name__)


class ErasureAction(str, Enum):
    ERASE = "erase"
    ANONYMIZE = "anonymize"


@dataclass(frozen=True)
class RelatedDataPolicy:
    """How one table referencing an account is handled on erasure.

    ``column`` names the referencing column; ``match_on`` is the account
    attribute it holds (``id`` for foreign keys, ``email`` for tables keyed by
    address).
    """

    model: type
    action: ErasureAction
    column: str = "account_id"
    match_on: str = "id"

    @property
    def table(self) -> str:
        return self.model.__tablename__


ACCOUNT_DATA_POLICIES: Tuple[RelatedDataPolicy, ...] = (
    # Credentials and personal settings
    RelatedDataPolicy(RefreshToken, ErasureAction.ERASE),
    RelatedDataPolicy(EmailVerification, ErasureAction.ERASE, column="email", match_on="email"),
    RelatedDataPolicy(UserHashtagList, ErasureAction.ERASE),
    RelatedDataPolicy(NotificationLog, ErasureAction.ERASE),
    # Memberships
    RelatedDataPolicy(WorkspaceMember, ErasureAction.ERASE),
    RelatedDataPolicy(TeamMember, ErasureAction.ERASE),
    RelatedDataPolicy(ChatMember, ErasureAction.ERASE),
    RelatedDataPolicy(KanbanTaskMember, ErasureAction.ERASE),
    # Shared content
    RelatedDataPolicy(Post, ErasureAction.ANONYMIZE),
    RelatedDataPolicy(Comment, ErasureAction.ANONYMIZE),
    RelatedDataPolicy(ChatMessage, ErasureAction.ANONYMIZE),
    RelatedDataPolicy(KanbanTaskComment, ErasureAction.ANONYMIZE),
    RelatedDataPolicy(Schedule, ErasureAction.ANONYMIZE),
    RelatedDataPolicy(Announcement, ErasureAction.ANONYMIZE),
    RelatedDataPolicy(Workspace, ErasureAction.ANONYMIZE, column="owner_id"),
)


@dataclass
class ErasureResult:
    """Rows touched per table while purging one account's related data."""

    erased: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    anonymized: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    @property
    def total_erased(self) -> int:
        return sum(self.erased.values())

    @property
    def total_anonymized(self) -> int:
        return sum(self.anonymized.values())


class AccountDataEraser:
    """Apply ACCOUNT_DATA_POLICIES for one account.

    Flushes but never commits: the caller erases related data, writes the
    tombstone and deletes the account in a single transaction.
    """

    def __init__(self, db: Session, policies: Tuple[RelatedDataPolicy, ...] = ACCOUNT_DATA_POLICIES):
        self.db = db
        self.policies = policies

    def purge_related_data(self, account: Account) -> ErasureResult:
        """Erase or anonymize every row that references ``account``.

        Args:
            account: Account about to be physically deleted

        Returns:
            ErasureResult with per-table row counts
        """
        result = ErasureResult()

        for policy in self.policies:
            column = getattr(policy.model, policy.column)
            value = getattr(account, policy.match_on)

            if policy.action == ErasureAction.ERASE:
                stmt = delete(policy.model).where(column == value)
            else:
                stmt = update(policy.model).where(column == value).values({policy.column: None})

            # Rows are re-read after the per-account commit; no in-session sync
            affected = self.db.execute(
                stmt, execution_options={"synchronize_session": False}
            ).rowcount or 0
            if not affected:
                continue

            if policy.action == ErasureAction.ERASE:
                result.erased[policy.table] += affected
            else:
                result.anonymized[policy.table] += affected

        self.db.flush()

        logger.debug(
            f"Purged related data for account {account.id}: "
            f"{result.total_erased} erased, {result.total_anonymized} anonymized",
            extra={"account_id": account.id},
        )
        return result
