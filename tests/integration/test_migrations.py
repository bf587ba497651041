"""Test Alembic migrations: upgrade, downgrade, and structural checks.

Runs against a throwaway SQLite file so no database server is needed.
"""

import os

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from groupware.db.base import Base
from groupware.db import models  # noqa: F401


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ALEMBIC_INI = os.path.join(os.path.dirname(__file__), "..", "..", "alembic.ini")

EXPECTED_TABLES = {
    "roles",
    "users",
    "sessions",
    "approval_templates",
    "approvals",
    "approval_steps",
}


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'migrations.db'}"


@pytest.fixture
def alembic_cfg(database_url):
    cfg = Config(ALEMBIC_INI)
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


@pytest.fixture
def upgraded(alembic_cfg, database_url):
    """Inspector over a database migrated to head."""
    command.upgrade(alembic_cfg, "head")
    engine = create_engine(database_url)
    yield inspect(engine)
    engine.dispose()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestMigrations:
    """Run upgrade → verify → downgrade → verify cycle."""

    def test_upgrade_creates_all_tables(self, upgraded):
        tables = set(upgraded.get_table_names())
        assert EXPECTED_TABLES <= tables
        assert "alembic_version" in tables

    def test_upgrade_is_idempotent(self, alembic_cfg):
        command.upgrade(alembic_cfg, "head")
        command.upgrade(alembic_cfg, "head")  # should be a no-op

    @pytest.mark.parametrize("table", sorted(EXPECTED_TABLES))
    def test_columns_match_models(self, upgraded, table):
        migrated = {c["name"] for c in upgraded.get_columns(table)}
        modelled = {c.name for c in Base.metadata.tables[table].columns}
        assert migrated == modelled

    def test_approvals_carry_version_counter(self, upgraded):
        columns = {c["name"]: c for c in upgraded.get_columns("approvals")}
        assert columns["version"]["nullable"] is False

    def test_step_order_unique_per_approval(self, upgraded):
        constraints = upgraded.get_unique_constraints("approval_steps")
        assert {
            "name": "uq_approval_steps_approval_id_step_order",
            "column_names": ["approval_id", "step_order"],
        } in [{"name": uc["name"], "column_names": uc["column_names"]} for uc in constraints]

    def test_foreign_keys(self, upgraded):
        step_fks = {fk["referred_table"] for fk in upgraded.get_foreign_keys("approval_steps")}
        assert step_fks == {"approvals", "users"}

        approval_fks = {fk["referred_table"] for fk in upgraded.get_foreign_keys("approvals")}
        assert approval_fks == {"users", "approval_templates"}

    def test_indexes(self, upgraded):
        user_idx = {idx["name"] for idx in upgraded.get_indexes("users")}
        assert "ix_users_email" in user_idx

        approval_idx = {idx["name"] for idx in upgraded.get_indexes("approvals")}
        assert {"ix_approvals_requester_id", "ix_approvals_status", "ix_approvals_created_at"} <= approval_idx

        session_idx = {idx["name"] for idx in upgraded.get_indexes("sessions")}
        assert "ix_sessions_token_jti" in session_idx

    def test_downgrade_removes_all_tables(self, alembic_cfg, database_url):
        command.upgrade(alembic_cfg, "head")
        command.downgrade(alembic_cfg, "base")

        engine = create_engine(database_url)
        tables = set(inspect(engine).get_table_names())
        engine.dispose()

        assert not (EXPECTED_TABLES & tables)
