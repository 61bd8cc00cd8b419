"""Unit tests for the soft-delete contract (SoftDeleteMixin)."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from lifecycle.exceptions import InvalidTransitionError
from lifecycle.service import LifecycleService
from models import Account, Comment, Post

T0 = datetime(2024, 3, 1, 9, 0, 0)


class TestMarkDeleted:
    """Test mark_deleted() on a single entity."""

    def test_sets_deleted_at(self):
        """Test that mark_deleted records the given time."""
        comment = Comment(content="hello")

        assert comment.mark_deleted(T0) is True
        assert comment.deleted_at == T0
        assert comment.is_active is False

    def test_idempotent(self):
        """Test that a second call never overwrites the first timestamp."""
        comment = Comment(content="hello")
        comment.mark_deleted(T0)

        assert comment.mark_deleted(T0 + timedelta(days=1)) is False
        assert comment.deleted_at == T0

    def test_defaults_to_current_time(self):
        """Test that omitting now still marks the entity deleted."""
        comment = Comment(content="hello")
        comment.mark_deleted()

        assert comment.deleted_at is not None

    def test_does_not_touch_children(self):
        """Test that the mixin itself never cascades."""
        post = Post(title="Post")
        comment = Comment(content="hello", post=post)

        post.mark_deleted(T0)

        assert comment.is_active is True


class TestRestore:
    """Test restore() on a single entity."""

    def test_restore_after_delete_is_active(self):
        """Test that mark_deleted followed by restore yields an active entity."""
        comment = Comment(content="hello")
        comment.mark_deleted(T0)

        assert comment.restore() is True
        assert comment.is_active is True
        assert comment.deleted_at is None

    def test_restore_active_is_noop(self):
        """Test that restoring an active entity changes nothing."""
        comment = Comment(content="hello")

        assert comment.restore() is False
        assert comment.is_active is True


class TestOwnedChildren:
    """Test ownership declarations."""

    def test_yields_declared_collections(self):
        """Test that owned_children yields members of every declared collection."""
        post = Post(title="Post")
        first = Comment(content="1", post=post)
        second = Comment(content="2", post=post)

        assert set(post.owned_children()) == {first, second}

    def test_leaf_has_no_children(self):
        """Test that an entity without declarations owns nothing."""
        assert list(Comment(content="leaf").owned_children()) == []


class TestAccountGuard:
    """Accounts only change state through the withdrawal service."""

    def test_generic_mark_deleted_refused(self):
        account = Account(email="guard@test.com", password_hash="x", name="Guard")

        with pytest.raises(InvalidTransitionError):
            account.mark_deleted(T0)

        assert account.deleted_at is None

    def test_generic_restore_refused(self):
        account = Account(email="guard@test.com", password_hash="x", name="Guard")

        with pytest.raises(InvalidTransitionError):
            account.restore()


class TestLifecycleServiceIsActive:
    """Test is_active against the database."""

    def test_deleted_entity_not_active_in_same_unit_of_work(self, db_session, make_board_tree):
        """Test that after mark_deleted the entity is not returned as active."""
        board, posts, _ = make_board_tree(posts=1, comments_per_post=0)
        service = LifecycleService(db_session)

        posts[0].mark_deleted(T0)
        db_session.flush()

        assert service.is_active(posts[0]) is False
        assert db_session.scalars(select(Post)).all() == []
