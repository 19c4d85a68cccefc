"""Application settings read from the environment."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .draft import PICK_SECONDS
from .store import DEFAULT_TIMEOUT


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration.

    Attributes:
        store_url: Base URL of the hosted store.
        store_key: Public API key of the hosted store.
        pick_seconds: Seconds allowed per draft pick.
        request_timeout: Per-request timeout in seconds.
        log_level: Root logging level name.
    """

    store_url: Optional[str] = None
    store_key: Optional[str] = None
    pick_seconds: int = PICK_SECONDS
    request_timeout: int = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @property
    def has_store(self) -> bool:
        """Check if store credentials are configured."""
        return bool(self.store_url and self.store_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from ``LEAGUEDESK_*`` environment variables.

        Raises:
            ValueError: If a numeric variable is not a positive integer.
        """
        return cls(
            store_url=os.environ.get("LEAGUEDESK_STORE_URL") or None,
            store_key=os.environ.get("LEAGUEDESK_STORE_KEY") or None,
            pick_seconds=_int_env("LEAGUEDESK_PICK_SECONDS", PICK_SECONDS),
            request_timeout=_int_env("LEAGUEDESK_REQUEST_TIMEOUT", DEFAULT_TIMEOUT),
            log_level=os.environ.get("LEAGUEDESK_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)
