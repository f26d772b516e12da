from pokerboard.schemas.player import PlayerResponse


class LeaderboardEntryResponse(PlayerResponse):
    """Player statistics plus rank and derived ratios; updated_at is the recomputation time."""

    rank: int
    win_rate: float
    avg_win: float
