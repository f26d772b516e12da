import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pokerboard.core.errors import GameValidationError, PlayerNotFound
from pokerboard.models.player import Player
from pokerboard.models.session import GameResult, GameSession
from pokerboard.schemas.game import GameSubmission
from pokerboard.services.leaderboard import MaterializationResult, materialize_leaderboard
from pokerboard.services.store import Repository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "All fields are required"

# Money columns are Numeric(12, 2)
AMOUNT_STEP = Decimal("0.01")
MAX_AMOUNT = Decimal("10000000000")


@dataclass
class GameRecordOutcome:
    """
    Result of a recorded game.

    The player fold and session append are the primary outcome: if this
    object exists they are committed. ``leaderboard`` describes the
    follow-up recomputation separately and never changes that.
    """

    player_id: uuid.UUID
    player_name: str
    session_id: uuid.UUID
    result: GameResult
    amount: Decimal  # signed delta applied to total_winnings
    leaderboard: MaterializationResult


def validate_submission(submission: GameSubmission) -> GameResult:
    """
    Check a submission before anything is written.
    Raises GameValidationError; returns the parsed result on success.
    """
    if (
        not submission.player_name
        or not submission.result
        or not submission.amount
        or not submission.game_type
    ):
        raise GameValidationError(REQUIRED_FIELDS_MESSAGE)

    try:
        result = GameResult(submission.result)
    except ValueError:
        raise GameValidationError("result must be 'win' or 'loss'")

    # The sign is derived from result, so only magnitudes are accepted
    if submission.amount < 0:
        raise GameValidationError("amount must be a positive number")

    if submission.amount >= MAX_AMOUNT:
        raise GameValidationError(f"amount must be less than {MAX_AMOUNT}")

    if submission.amount != submission.amount.quantize(AMOUNT_STEP):
        raise GameValidationError("amount must have at most 2 decimal places")

    return result


def signed_amount(result: GameResult, amount: Decimal) -> Decimal:
    return amount if result is GameResult.WIN else -amount


def fold_values(result: GameResult, amount: Decimal, now: datetime) -> dict:
    """
    Column updates that fold one game into a player's statistics.

    Every value is an expression over the stored row, so the store applies
    the whole fold atomically and concurrent submissions cannot lose updates.
    """
    values = {
        "total_winnings": Player.total_winnings + signed_amount(result, amount),
        "games_played": Player.games_played + 1,
        "updated_at": now,
    }
    if result is GameResult.WIN:
        values["wins"] = Player.wins + 1
        values["total_won"] = Player.total_won + amount
        values["biggest_win"] = case(
            (Player.biggest_win < amount, amount), else_=Player.biggest_win
        )
    else:
        values["losses"] = Player.losses + 1
        values["total_lost"] = Player.total_lost + amount
    return values


def _locate_or_create_player(players: Repository, name: str, now: datetime) -> uuid.UUID:
    player = players.find_one(name=name)
    if player is not None:
        return player.id

    try:
        player_id = players.insert(
            Player(
                name=name,
                total_winnings=0,
                games_played=0,
                wins=0,
                losses=0,
                biggest_win=0,
                total_won=0,
                total_lost=0,
                created_at=now,
                updated_at=now,
            )
        )
        players.commit()
    except IntegrityError:
        # A concurrent submission created the same name first
        players.db.rollback()
        player = players.find_one(name=name)
        if player is None:
            raise
        return player.id

    logger.info(f"Created player {name!r}")
    return player_id


def record_game(
    db: Session, submission: GameSubmission, now: Optional[datetime] = None
) -> GameRecordOutcome:
    """
    Fold one game result into its player's statistics, append it to the
    session log and recompute the leaderboard.

    Raises GameValidationError before any write, StoreUnavailable if the
    store cannot be reached, PlayerNotFound if the fold matched no row.
    Leaderboard failures are reported on the returned outcome only.
    """
    result = validate_submission(submission)
    now = now or datetime.now(timezone.utc)
    amount = submission.amount
    game_amount = signed_amount(result, amount)

    players = Repository(db, Player)
    sessions = Repository(db, GameSession)

    try:
        player_id = _locate_or_create_player(players, submission.player_name, now)
        matched = players.update_fields(player_id, fold_values(result, amount, now))
        if matched != 1:
            raise PlayerNotFound(f"Player {submission.player_name!r} disappeared before the fold")
        session_id = sessions.insert(
            GameSession(
                player_id=player_id,
                player_name=submission.player_name,
                result=result.value,
                amount=game_amount,
                game_type=submission.game_type,
                date=now,
                created_at=now,
            )
        )
        sessions.commit()
    except Exception:
        db.rollback()
        raise

    leaderboard = materialize_leaderboard(db, now)
    if not leaderboard.ok:
        logger.warning(
            f"Game for {submission.player_name!r} recorded but leaderboard is stale"
        )

    return GameRecordOutcome(
        player_id=player_id,
        player_name=submission.player_name,
        session_id=session_id,
        result=result,
        amount=game_amount,
        leaderboard=leaderboard,
    )
