"""
Schema verification tests for database table conventions.

Ensures all tables follow the lifecycle conventions:
- Every table has an integer primary key 'id'
- Every soft-deletable table has a nullable, indexed deleted_at column
- The account table keeps its withdrawal columns consistent
- Author references on shared content are nullable (anonymized on erasure)
"""

from datetime import datetime

import pytest
from sqlalchemy import inspect, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.types import DateTime, Integer

from lifecycle.contract import SoftDeleteMixin
from models import Base

SOFT_DELETE_TABLES = sorted(
    mapper.class_.__tablename__
    for mapper in Base.registry.mappers
    if issubclass(mapper.class_, SoftDeleteMixin)
)

# Content kept for the team after its author is erased
ANONYMIZED_COLUMNS = [
    ("post", "account_id"),
    ("comment", "account_id"),
    ("chat_message", "account_id"),
    ("kanban_task_comment", "account_id"),
    ("schedule", "account_id"),
    ("announcement", "account_id"),
    ("workspace", "owner_id"),
]


class TestTableConventions:
    """Verify all tables follow lifecycle database conventions."""

    @pytest.fixture
    def inspector(self, db_session):
        """Create SQLAlchemy inspector for schema introspection."""
        return inspect(db_session.get_bind())

    def test_soft_delete_tables_registered(self):
        """Verify the ownership graph tables are all soft-deletable."""
        for table_name in ("workspace", "team", "board", "post", "comment", "account"):
            assert table_name in SOFT_DELETE_TABLES

    def test_all_tables_have_id_column(self, inspector):
        """Verify every table has an integer 'id' primary key."""
        for table_name in inspector.get_table_names():
            columns = {col["name"]: col for col in inspector.get_columns(table_name)}

            assert "id" in columns, f"Table '{table_name}' missing 'id' column"
            assert isinstance(columns["id"]["type"], Integer)

            pk_constraint = inspector.get_pk_constraint(table_name)
            assert (
                pk_constraint["constrained_columns"] == ["id"]
            ), f"Table '{table_name}' id column must be primary key"

    @pytest.mark.parametrize("table_name", SOFT_DELETE_TABLES)
    def test_deleted_at_nullable_and_indexed(self, inspector, table_name):
        """Verify deleted_at exists, is nullable and indexed."""
        columns = {col["name"]: col for col in inspector.get_columns(table_name)}

        assert "deleted_at" in columns, f"Table '{table_name}' missing 'deleted_at'"
        assert isinstance(columns["deleted_at"]["type"], DateTime)
        assert columns["deleted_at"]["nullable"]

        indexed = {
            column
            for index in inspector.get_indexes(table_name)
            for column in index["column_names"]
        }
        assert "deleted_at" in indexed, f"Table '{table_name}' deleted_at must be indexed"

    @pytest.mark.parametrize("table_name,column_name", ANONYMIZED_COLUMNS)
    def test_author_references_nullable(self, inspector, table_name, column_name):
        """Verify anonymized references can be set to NULL."""
        columns = {col["name"]: col for col in inspector.get_columns(table_name)}

        assert columns[column_name]["nullable"]

    def test_withdrawal_columns_must_be_set_together(self, db_session):
        """Verify the database rejects a deletion date without deleted_at."""
        with pytest.raises(IntegrityError):
            db_session.execute(insert(Base.metadata.tables["account"]).values(
                email="broken@test.com",
                password_hash="x",
                name="Broken",
                role="USER",
                permanent_deletion_date=datetime(2024, 4, 1),
                created_at=datetime(2024, 3, 1),
                updated_at=datetime(2024, 3, 1),
            ))
        db_session.rollback()
