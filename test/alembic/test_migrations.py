# test/alembic/test_migrations.py
# =====================================================
"""
Test delle migration Alembic.

Applica le revisioni su un database SQLite temporaneo e verifica
che lo schema coincida con i model registrati.
"""

import pytest
from pathlib import Path
from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect

from tempcontrol.models import Base, verify_models_registered

PROJECT_ROOT = Path(__file__).resolve().parents[2]

EXPECTED_TABLES = {
    "users",
    "products",
    "temperature_forms",
    "temperature_records",
    "temperature_alerts",
    "audit_logs",
}


@pytest.fixture
def alembic_config():
    # Config senza alembic.ini: il logging dei test resta invariato
    cfg = Config()
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return cfg


@pytest.fixture
def migration_db(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


class TestRevisions:

    def test_single_head(self, alembic_config):
        script = ScriptDirectory.from_config(alembic_config)

        revisions = list(script.walk_revisions())
        print(f"Revisions found: {len(revisions)}")

        assert len(script.get_heads()) == 1
        assert revisions[-1].down_revision is None


class TestUpgradeDowngrade:

    def test_upgrade_creates_model_tables(self, alembic_config, migration_db):
        command.upgrade(alembic_config, "head")

        inspector = inspect(create_engine(migration_db))
        tables = set(inspector.get_table_names())
        assert EXPECTED_TABLES <= tables
        assert EXPECTED_TABLES == set(Base.metadata.tables)
        assert verify_models_registered() == len(EXPECTED_TABLES)

        # Ogni colonna dei model esiste nella migration
        for table in Base.metadata.sorted_tables:
            migrated = {column["name"] for column in inspector.get_columns(table.name)}
            assert set(table.columns.keys()) <= migrated, table.name

        print("✅ Migration upgrade OK")

    def test_downgrade_to_base(self, alembic_config, migration_db):
        command.upgrade(alembic_config, "head")
        command.downgrade(alembic_config, "base")

        tables = set(inspect(create_engine(migration_db)).get_table_names())
        assert not (EXPECTED_TABLES & tables)
