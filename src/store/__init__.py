"""Access to the hosted league store."""

from .base import (
    DEFAULT_TIMEOUT,
    AuthError,
    RateLimitError,
    RequestError,
    RestClient,
    StoreError,
    eq,
)
from .league import (
    DRAFT_PICKS_KEY,
    GAME_PARTICIPANTS_KEY,
    GAME_TEAMS_KEY,
    LeagueStore,
)

__all__ = [
    # Base
    "DEFAULT_TIMEOUT",
    "AuthError",
    "RateLimitError",
    "RequestError",
    "RestClient",
    "StoreError",
    "eq",
    # League
    "DRAFT_PICKS_KEY",
    "GAME_PARTICIPANTS_KEY",
    "GAME_TEAMS_KEY",
    "LeagueStore",
]
