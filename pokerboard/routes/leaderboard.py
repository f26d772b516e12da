import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pokerboard.core.database import get_db
from pokerboard.core.errors import StoreUnavailable
from pokerboard.schemas.leaderboard import LeaderboardEntryResponse
from pokerboard.services.queries import list_leaderboard

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/leaderboard", response_model=List[LeaderboardEntryResponse])
def get_leaderboard(db: Session = Depends(get_db)):
    """Current leaderboard snapshot, ordered by rank."""
    try:
        return list_leaderboard(db)
    except (StoreUnavailable, SQLAlchemyError) as exc:
        logger.error(f"Error fetching leaderboard: {exc}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch leaderboard",
        )
