"""
test_leaderboard.py

Unit tests for leaderboard ranking and materialization.
rank_players() is exercised on unsaved Player objects; the materializer
runs against the in-memory SQLite session from conftest.py.
"""

import uuid
from types import SimpleNamespace

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from pokerboard.models.leaderboard import LeaderboardEntry
from pokerboard.services import leaderboard as leaderboard_service
from pokerboard.services.leaderboard import (
    average_win,
    lock_leaderboard,
    materialize_leaderboard,
    rank_players,
    win_rate,
)
from pokerboard.services.queries import list_leaderboard

pytestmark = pytest.mark.unit

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


# ===========================================================================
# Derived ratios
# ===========================================================================


def test_win_rate_zero_games_is_zero():
    assert win_rate(0, 0) == 0


def test_win_rate_percentage():
    assert win_rate(1, 2) == 50
    assert win_rate(3, 3) == 100


def test_average_win_zero_wins_is_zero():
    assert average_win(Decimal("0"), 0) == 0


def test_average_win_divides_total_won():
    assert average_win(Decimal("300"), 2) == 150.0


# ===========================================================================
# rank_players
# ===========================================================================


def test_rank_players_orders_by_total_winnings_desc(make_player):
    """Alice at 60 and Bob at 200 rank Bob first."""
    alice = make_player("Alice", total_winnings=Decimal("60"))
    bob = make_player("Bob", total_winnings=Decimal("200"))

    entries = rank_players([alice, bob], NOW)

    assert [(e.name, e.rank) for e in entries] == [("Bob", 1), ("Alice", 2)]


def test_rank_players_ties_broken_by_name(make_player):
    players = [
        make_player("Carol", total_winnings=Decimal("50")),
        make_player("alice", total_winnings=Decimal("50")),
        make_player("Bob", total_winnings=Decimal("50")),
    ]

    entries = rank_players(players, NOW)

    # Case-sensitive ordering: uppercase names sort before lowercase
    assert [e.name for e in entries] == ["Bob", "Carol", "alice"]
    assert [e.rank for e in entries] == [1, 2, 3]


def test_rank_players_dense_ranks_with_negative_totals(make_player):
    players = [
        make_player("A", total_winnings=Decimal("-20")),
        make_player("B", total_winnings=Decimal("0")),
        make_player("C", total_winnings=Decimal("-20")),
        make_player("D", total_winnings=Decimal("35.50")),
    ]

    entries = rank_players(players, NOW)

    assert sorted(e.rank for e in entries) == list(range(1, len(players) + 1))
    assert [e.name for e in entries] == ["D", "B", "A", "C"]


def test_rank_players_empty():
    assert rank_players([], NOW) == []


def test_rank_players_derives_ratios_and_copies_stats(make_player):
    player = make_player(
        "Alice",
        total_winnings=Decimal("50"),
        games_played=3,
        wins=1,
        losses=2,
        biggest_win=Decimal("100"),
        total_won=Decimal("100"),
        total_lost=Decimal("50"),
    )

    (entry,) = rank_players([player], NOW)

    assert entry.win_rate == pytest.approx(100 / 3)
    assert entry.avg_win == 100.0
    assert entry.games_played == 3
    assert entry.biggest_win == Decimal("100")
    assert entry.total_lost == Decimal("50")
    assert entry.created_at == player.created_at
    assert entry.updated_at == NOW


def test_rank_players_zero_games_gives_zero_ratios(make_player):
    (entry,) = rank_players([make_player("Idle")], NOW)
    assert entry.win_rate == 0
    assert entry.avg_win == 0


# ===========================================================================
# materialize_leaderboard
# ===========================================================================


def test_materialize_writes_ranked_snapshot(db, make_player):
    db.add_all(
        [
            make_player("Alice", total_winnings=Decimal("60"), games_played=2, wins=1,
                        losses=1, total_won=Decimal("100"), total_lost=Decimal("40"),
                        biggest_win=Decimal("100")),
            make_player("Bob", total_winnings=Decimal("200"), games_played=1, wins=1,
                        total_won=Decimal("200"), biggest_win=Decimal("200")),
        ]
    )
    db.commit()

    result = materialize_leaderboard(db, NOW)

    assert result.ok is True
    assert result.entries == 2
    board = list_leaderboard(db)
    assert [(e.name, e.rank) for e in board] == [("Bob", 1), ("Alice", 2)]
    assert board[1].win_rate == 50
    assert board[1].avg_win == 100


def test_materialize_is_idempotent(db, make_player):
    db.add_all(
        [
            make_player("Alice", total_winnings=Decimal("10"), games_played=4, wins=3,
                        losses=1, total_won=Decimal("30"), total_lost=Decimal("20")),
            make_player("Bob", total_winnings=Decimal("10"), games_played=1, wins=1,
                        total_won=Decimal("10")),
            make_player("Cleo", total_winnings=Decimal("-5"), games_played=1, losses=1,
                        total_lost=Decimal("5")),
        ]
    )
    db.commit()

    materialize_leaderboard(db, NOW)
    first = [(e.name, e.rank, e.win_rate, e.avg_win) for e in list_leaderboard(db)]
    materialize_leaderboard(db, datetime(2026, 10, 19, 13, 0, tzinfo=timezone.utc))
    second = [(e.name, e.rank, e.win_rate, e.avg_win) for e in list_leaderboard(db)]

    assert first == second
    assert len(second) == 3


def test_materialize_without_players_clears_snapshot(db, make_player):
    # A stale row left behind by an earlier snapshot
    stale = make_player("Ghost")
    db.add(
        LeaderboardEntry(
            id=uuid.uuid4(),
            name=stale.name,
            total_winnings=0,
            games_played=0,
            wins=0,
            losses=0,
            biggest_win=0,
            total_won=0,
            total_lost=0,
            created_at=stale.created_at,
            rank=1,
            win_rate=0.0,
            avg_win=0.0,
            updated_at=stale.updated_at,
        )
    )
    db.commit()

    result = materialize_leaderboard(db, NOW)

    assert result.ok is True
    assert result.entries == 0
    assert list_leaderboard(db) == []


def test_materialize_failure_is_reported_not_raised(db, make_player, monkeypatch):
    db.add(make_player("Alice", total_winnings=Decimal("5")))
    db.commit()
    materialize_leaderboard(db, NOW)

    def _broken(players, now):
        raise RuntimeError("ranking exploded")

    monkeypatch.setattr(leaderboard_service, "rank_players", _broken)

    result = materialize_leaderboard(db, NOW)

    assert result.ok is False
    assert "ranking exploded" in result.error
    # Previous snapshot survives the failed recomputation
    assert [e.name for e in list_leaderboard(db)] == ["Alice"]


class _RecordingSession:
    """Stands in for a Session bound to the given dialect."""

    def __init__(self, dialect):
        self.bind = SimpleNamespace(dialect=SimpleNamespace(name=dialect))
        self.statements = []

    def get_bind(self):
        return self.bind

    def execute(self, statement):
        self.statements.append(str(statement))


def test_lock_leaderboard_serializes_rebuilds_on_postgresql():
    session = _RecordingSession("postgresql")
    lock_leaderboard(session)
    assert session.statements == ["LOCK TABLE leaderboard IN EXCLUSIVE MODE"]


def test_lock_leaderboard_is_noop_on_sqlite():
    session = _RecordingSession("sqlite")
    lock_leaderboard(session)
    assert session.statements == []
