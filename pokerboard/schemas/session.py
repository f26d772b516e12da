import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SessionResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: uuid.UUID
    player_id: uuid.UUID
    player_name: str
    result: str
    # Signed: negative for losses
    amount: float
    game_type: str
    date: datetime
    created_at: datetime
