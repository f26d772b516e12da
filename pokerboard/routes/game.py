import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pokerboard.core.config import settings
from pokerboard.core.database import get_db
from pokerboard.core.errors import GameValidationError, PlayerNotFound, StoreUnavailable
from pokerboard.core.limiter import limiter
from pokerboard.schemas.game import GameRecorded, GameSubmission
from pokerboard.services.game_recorder import record_game

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/game", response_model=GameRecorded)
@limiter.limit(settings.GAME_RATE_LIMIT)
def submit_game(
    request: Request,
    submission: GameSubmission,
    db: Session = Depends(get_db),
):
    """Record one game result and refresh the leaderboard."""

    try:
        outcome = record_game(db, submission)
    except GameValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        )
    except (StoreUnavailable, PlayerNotFound, SQLAlchemyError) as exc:
        logger.error(f"Error recording game: {exc}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record game",
        )

    # Log outcome
    log_record = logging.LogRecord(
        name="game",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg="Game recorded",
        args=(),
        exc_info=None,
    )
    log_record.player_name = outcome.player_name
    log_record.game_result = outcome.result.value
    log_record.amount = float(outcome.amount)
    log_record.game_type = submission.game_type
    log_record.leaderboard_updated = outcome.leaderboard.ok
    logger.handle(log_record)

    return GameRecorded()
