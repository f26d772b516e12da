from sqlalchemy import Column, String, Integer, Float, Numeric, DateTime, Uuid

from pokerboard.core.database import Base


class LeaderboardEntry(Base):
    """
    Derived snapshot row: a copy of one player's statistics plus its rank
    and ratios. The whole table is replaced on every recomputation.
    """

    __tablename__ = "leaderboard"

    # Same id as the player the row was copied from
    id = Column(Uuid(as_uuid=True), primary_key=True)
    name = Column(String, nullable=False)

    total_winnings = Column(Numeric(12, 2), nullable=False)
    games_played = Column(Integer, nullable=False)
    wins = Column(Integer, nullable=False)
    losses = Column(Integer, nullable=False)
    biggest_win = Column(Numeric(12, 2), nullable=False)
    total_won = Column(Numeric(12, 2), nullable=False)
    total_lost = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, nullable=False)

    rank = Column(Integer, nullable=False, index=True)
    win_rate = Column(Float, nullable=False)
    avg_win = Column(Float, nullable=False)
    # Recomputation time, not the player's last mutation
    updated_at = Column(DateTime, nullable=False)
