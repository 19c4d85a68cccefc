"""Exceptions raised by the draft engine."""


class DraftError(Exception):
    """Base exception for draft errors."""

    pass


class DraftSetupError(DraftError):
    """Raised when a draft cannot be set up; no state is created."""

    pass


class DraftStateError(DraftError):
    """Raised when an event is not valid for the current draft state."""

    pass
