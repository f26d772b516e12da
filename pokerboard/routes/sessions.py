import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pokerboard.core.config import settings
from pokerboard.core.database import get_db
from pokerboard.core.errors import StoreUnavailable
from pokerboard.schemas.session import SessionResponse
from pokerboard.services.queries import list_recent_sessions

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/sessions", response_model=List[SessionResponse])
def get_recent_sessions(db: Session = Depends(get_db)):
    """Most recent sessions, newest first."""
    try:
        return list_recent_sessions(db, limit=settings.RECENT_SESSIONS_LIMIT)
    except (StoreUnavailable, SQLAlchemyError) as exc:
        logger.error(f"Error fetching sessions: {exc}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch sessions",
        )
