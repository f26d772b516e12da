"""
Error taxonomy for the leaderboard service.

GameValidationError is surfaced to HTTP callers as 400; StoreUnavailable
and PlayerNotFound as 500. MaterializationFailure never leaves the
leaderboard service: it is logged and folded into a failed
MaterializationResult.
"""


class PokerboardError(Exception):
    """Base class for all service errors."""


class GameValidationError(PokerboardError):
    """A game submission is missing fields or carries invalid values."""


class StoreUnavailable(PokerboardError):
    """The store could not be reached or did not answer in time."""


class MaterializationFailure(PokerboardError):
    """The leaderboard snapshot could not be replaced."""


class PlayerNotFound(PokerboardError):
    """The player row matched no update while folding a game."""
