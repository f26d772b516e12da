import uuid
from sqlalchemy import Column, String, Integer, Numeric, DateTime
from sqlalchemy import Uuid
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from pokerboard.core.database import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Player(Base):
    __tablename__ = "players"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Natural key, case-sensitive
    name = Column(String, unique=True, nullable=False, index=True)

    total_winnings = Column(Numeric(12, 2), default=0, nullable=False)
    games_played = Column(Integer, default=0, nullable=False)
    wins = Column(Integer, default=0, nullable=False)
    losses = Column(Integer, default=0, nullable=False)
    biggest_win = Column(Numeric(12, 2), default=0, nullable=False)
    total_won = Column(Numeric(12, 2), default=0, nullable=False)
    total_lost = Column(Numeric(12, 2), default=0, nullable=False)

    created_at = Column(DateTime, default=_utc_now, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, nullable=False)

    # Relationships
    sessions = relationship("GameSession", back_populates="player")

    def __repr__(self):
        return f"Player({self.name!r}, total_winnings={self.total_winnings})"
