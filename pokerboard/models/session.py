import uuid
from enum import Enum
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from pokerboard.core.database import Base
from pokerboard.models.player import _utc_now


class GameResult(str, Enum):
    WIN = "win"
    LOSS = "loss"


class GameSession(Base):
    """One submitted game result. Append-only."""

    __tablename__ = "sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    player_id = Column(Uuid(as_uuid=True), ForeignKey("players.id"), nullable=False)
    player_name = Column(String, nullable=False)  # denormalized copy of players.name
    result = Column(String, nullable=False)  # win, loss
    # Signed delta applied to the player's total_winnings
    amount = Column(Numeric(12, 2), nullable=False)
    game_type = Column(String, nullable=False)
    date = Column(DateTime, default=_utc_now, nullable=False)
    created_at = Column(DateTime, default=_utc_now, nullable=False, index=True)

    # Relationships
    player = relationship("Player", back_populates="sessions")
