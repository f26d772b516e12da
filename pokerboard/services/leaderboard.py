import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional, Union

from sqlalchemy import text
from sqlalchemy.orm import Session

from pokerboard.core.errors import MaterializationFailure
from pokerboard.models.leaderboard import LeaderboardEntry
from pokerboard.models.player import Player
from pokerboard.services.store import Repository, translate_store_errors

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]


@dataclass
class MaterializationResult:
    """Outcome of one leaderboard recomputation. Only ever logged by callers."""

    ok: bool
    entries: int = 0
    error: Optional[str] = None


def win_rate(wins: int, games_played: int) -> float:
    """Percentage of games won; 0 when nothing has been played."""
    if games_played > 0:
        return wins / games_played * 100
    return 0.0


def average_win(total_won: Number, wins: int) -> float:
    """Mean winning amount; 0 when the player has never won."""
    if wins > 0:
        return float(total_won / wins)
    return 0.0


def rank_players(players: Iterable[Player], now: datetime) -> List[LeaderboardEntry]:
    """
    Build a fresh, fully ranked leaderboard from the given players.

    Ordering is total_winnings descending, then name ascending so that
    ties rank deterministically. Ranks are positional (1..N), never shared.
    """
    ordered = sorted(players, key=lambda p: (-p.total_winnings, p.name))

    return [
        LeaderboardEntry(
            id=player.id,
            name=player.name,
            total_winnings=player.total_winnings,
            games_played=player.games_played,
            wins=player.wins,
            losses=player.losses,
            biggest_win=player.biggest_win,
            total_won=player.total_won,
            total_lost=player.total_lost,
            created_at=player.created_at,
            rank=index + 1,
            win_rate=win_rate(player.wins, player.games_played),
            avg_win=average_win(player.total_won, player.wins),
            updated_at=now,
        )
        for index, player in enumerate(ordered)
    ]


def lock_leaderboard(db: Session):
    """
    Serialize rebuilds on PostgreSQL until the current transaction ends.

    Two unserialized rebuilds both delete and then insert the same player
    ids; the later one fails on the primary key and the snapshot stays
    stale until the next submission. SQLite already allows one writer.
    """
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text(f"LOCK TABLE {LeaderboardEntry.__tablename__} IN EXCLUSIVE MODE"))


def replace_leaderboard(db: Session, now: Optional[datetime] = None) -> int:
    """
    Recompute the leaderboard from every player and swap the stored
    snapshot for it in one transaction.

    Returns the number of entries written. Raises MaterializationFailure
    after rolling back, leaving the previous snapshot in place.
    """
    now = now or datetime.now(timezone.utc)
    players = Repository(db, Player)
    board = Repository(db, LeaderboardEntry)

    try:
        with translate_store_errors("lock on leaderboard"):
            lock_leaderboard(db)
        entries = rank_players(players.find(), now)
        board.delete_all()
        board.insert_many(entries)
        board.commit()
    except Exception as exc:
        db.rollback()
        raise MaterializationFailure(f"Leaderboard recomputation failed: {exc}") from exc

    return len(entries)


def materialize_leaderboard(
    db: Session, now: Optional[datetime] = None
) -> MaterializationResult:
    """
    Best-effort wrapper around replace_leaderboard.

    Failures are logged and reported in the result; they never propagate,
    since the leaderboard is a derived view and may lag behind players.
    """
    try:
        count = replace_leaderboard(db, now)
    except MaterializationFailure as exc:
        logger.error(str(exc), exc_info=True)
        return MaterializationResult(ok=False, error=str(exc))

    logger.info(f"Leaderboard recomputed with {count} entries")
    return MaterializationResult(ok=True, entries=count)
