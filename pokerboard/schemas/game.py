from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class GameSubmission(BaseModel):
    """
    Body of POST /api/game.

    Every field is optional at the schema level so that presence checks
    happen in the recording service and answer with a single 400 message.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    player_name: Optional[str] = None
    # win | loss
    result: Optional[str] = None
    # Magnitude only; the sign comes from result
    amount: Optional[Decimal] = None
    game_type: Optional[str] = None


class GameRecorded(BaseModel):
    success: bool = True
    message: str = "Game recorded successfully"
