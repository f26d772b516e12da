import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PlayerResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: uuid.UUID
    name: str
    total_winnings: float
    games_played: int
    wins: int
    losses: int
    biggest_win: float
    total_won: float
    total_lost: float
    created_at: datetime
    updated_at: datetime
