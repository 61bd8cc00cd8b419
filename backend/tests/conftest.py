"""Pytest fixtures for lifecycle testing.

Provides reusable test fixtures for:
- In-memory SQLite database, schema created and dropped per test
- Database sessions (one shared per test, plus a factory for fresh ones)
- Accounts in every lifecycle state
- A team board with posts and comments

Usage:
    def test_board_delete(db_session, make_board_tree):
        board, posts, comments = make_board_tree()
        LifecycleService(db_session).mark_deleted(board)
"""

import sys
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

# Import directly from modules (avoid relative import issues)
from models import (
    Account,
    Base,
    Board,
    Comment,
    Post,
    Team,
    Workspace,
)


# Reference time used across tests
T0 = datetime(2024, 3, 1, 9, 0, 0)

# Single shared connection so every session sees the same in-memory database
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def schema() -> Generator[None, None, None]:
    """Create all tables before the test and drop them after."""
    Base.metadata.create_all(bind=test_engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def db_session(schema) -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Each test gets a clean database state.
    """
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(schema) -> sessionmaker:
    """Session factory bound to the test database (for code that opens its own sessions)."""
    return TestingSessionLocal


@pytest.fixture(scope="function")
def now() -> datetime:
    return T0


@pytest.fixture(scope="function")
def make_account(db_session: Session):
    """Factory creating committed accounts.

    make_account("a@test.com")                          -> ACTIVE
    make_account("b@test.com", withdrawn_at=T0)         -> withdrawn, 30-day grace
    make_account("c@test.com", withdrawn_at=T0, grace_days=0)
    """
    def _make(
        email: str,
        withdrawn_at: datetime = None,
        grace_days: int = 30,
        name: str = "Test User",
    ) -> Account:
        account = Account(
            email=email,
            password_hash="$argon2id$test",
            name=name,
        )
        if withdrawn_at is not None:
            account.deleted_at = withdrawn_at
            account.permanent_deletion_date = withdrawn_at + timedelta(days=grace_days)

        db_session.add(account)
        db_session.commit()
        db_session.refresh(account)
        return account

    return _make


@pytest.fixture(scope="function")
def team(db_session: Session) -> Team:
    """Create a workspace with one team."""
    workspace = Workspace(name="Test Workspace", url="test-workspace")
    team = Team(name="Test Team", workspace=workspace)

    db_session.add_all([workspace, team])
    db_session.commit()
    db_session.refresh(team)
    return team


@pytest.fixture(scope="function")
def make_board_tree(db_session: Session, team: Team):
    """Factory creating a board with ``posts`` posts of ``comments_per_post`` comments.

    Returns:
        (board, posts, comments)
    """
    def _make(posts: int = 2, comments_per_post: int = 1, author: Account = None):
        board = Board(team=team)
        created_posts = []
        created_comments = []

        for post_no in range(1, posts + 1):
            post = Post(
                board=board,
                post_no=post_no,
                title=f"Post {post_no}",
                account_id=author.id if author else None,
            )
            created_posts.append(post)
            for comment_no in range(comments_per_post):
                created_comments.append(Comment(
                    post=post,
                    content=f"Comment {comment_no} on post {post_no}",
                    account_id=author.id if author else None,
                ))

        db_session.add(board)
        db_session.commit()
        return board, created_posts, created_comments

    return _make
