import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pokerboard.core.database import get_db
from pokerboard.core.errors import StoreUnavailable
from pokerboard.schemas.player import PlayerResponse
from pokerboard.services.queries import list_players

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/players", response_model=List[PlayerResponse])
def get_players(db: Session = Depends(get_db)):
    try:
        return list_players(db)
    except (StoreUnavailable, SQLAlchemyError) as exc:
        logger.error(f"Error fetching players: {exc}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch players",
        )
