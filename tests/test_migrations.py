"""
test_migrations.py

Runs the Alembic migrations against a fresh SQLite file and checks that
the resulting schema is usable by the recording workflow.
"""

import pytest
from decimal import Decimal
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from pokerboard.core.database import Database
from pokerboard.schemas.game import GameSubmission
from pokerboard.services.game_recorder import record_game
from pokerboard.services.queries import list_leaderboard

pytestmark = pytest.mark.integration

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"


@pytest.fixture
def migrated_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'poker.db'}"
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    config.set_main_option("sqlalchemy.url", url)
    command.upgrade(config, "head")
    yield url
    command.downgrade(config, "base")


def test_upgrade_creates_tables(migrated_url):
    database = Database(migrated_url)
    try:
        tables = set(inspect(database.engine).get_table_names())
    finally:
        database.dispose()
    assert {"players", "sessions", "leaderboard", "alembic_version"} <= tables


def test_migrated_schema_records_games(migrated_url):
    database = Database(migrated_url)
    session = database.SessionLocal()
    try:
        outcome = record_game(
            session,
            GameSubmission(
                player_name="Alice", result="win", amount=Decimal("100"), game_type="holdem"
            ),
        )
        assert outcome.leaderboard.ok is True
        assert [e.name for e in list_leaderboard(session)] == ["Alice"]
    finally:
        session.close()
        database.dispose()
