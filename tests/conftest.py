import os

# Settings are read at import time; point them at SQLite before the app loads
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from pokerboard.main import app  # noqa: E402
from pokerboard.core.database import Database  # noqa: E402
from pokerboard.core.limiter import limiter  # noqa: E402
from pokerboard.models.player import Player  # noqa: E402


def _make_player(name: str, **stats) -> Player:
    """Unsaved Player with every counter zeroed unless overridden."""
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    fields = dict(
        name=name,
        total_winnings=Decimal("0"),
        games_played=0,
        wins=0,
        losses=0,
        biggest_win=Decimal("0"),
        total_won=Decimal("0"),
        total_lost=Decimal("0"),
        created_at=now,
        updated_at=now,
    )
    fields.update(stats)
    return Player(**fields)


@pytest.fixture(autouse=True)
def _disable_rate_limiter():
    """Disable the rate limiter for all tests so rapid requests don't return 429."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture(scope="function")
def database():
    # In-memory SQLite; StaticPool ensures one shared DB across all connections
    database = Database("sqlite://", poolclass=StaticPool)
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture(scope="function")
def db(database):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(database):
    app.state.database = database
    with TestClient(app) as test_client:
        yield test_client
    app.state.database = None


@pytest.fixture
def unreachable_database(tmp_path):
    """A handle whose SQLite file lives in a directory that does not exist."""
    database = Database(f"sqlite:///{tmp_path / 'missing' / 'poker.db'}")
    yield database
    database.dispose()


@pytest.fixture
def make_player():
    return _make_player
