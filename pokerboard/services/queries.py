"""Read-only projections. No derivation happens here."""

from typing import List

from sqlalchemy.orm import Session

from pokerboard.models.leaderboard import LeaderboardEntry
from pokerboard.models.player import Player
from pokerboard.models.session import GameSession
from pokerboard.services.store import Repository

DEFAULT_RECENT_SESSIONS = 50


def list_players(db: Session) -> List[Player]:
    return Repository(db, Player).find()


def list_recent_sessions(db: Session, limit: int = DEFAULT_RECENT_SESSIONS) -> List[GameSession]:
    """Newest sessions first, at most ``limit`` of them."""
    return Repository(db, GameSession).find(
        order_by=GameSession.created_at.desc(), limit=limit
    )


def list_leaderboard(db: Session) -> List[LeaderboardEntry]:
    return Repository(db, LeaderboardEntry).find(order_by=LeaderboardEntry.rank.asc())
