"""Snake draft engine: roster resolution, turn sequencing, clock and finalize."""

from .errors import DraftError, DraftSetupError, DraftStateError
from .roster import RosterResolution, resolve_roster
from .sequencer import (
    PICK_SECONDS,
    AutoPick,
    DraftEvent,
    DraftSession,
    DraftState,
    DraftStatus,
    EndDraft,
    LastPick,
    MakePick,
    Tick,
    next_turn,
    start_draft,
    transition,
    upcoming_team_indices,
)
from .clock import PickClock
from .finalizer import (
    BatchOutcome,
    FinalizePlan,
    FinalizeResult,
    FinalizeStatus,
    GameParticipation,
    GameTeam,
    TeamAssignment,
    build_finalize_plan,
    finalize_draft,
    picks_by_team,
)

__all__ = [
    # Errors
    "DraftError",
    "DraftSetupError",
    "DraftStateError",
    # Roster
    "RosterResolution",
    "resolve_roster",
    # Sequencer
    "PICK_SECONDS",
    "AutoPick",
    "DraftEvent",
    "DraftSession",
    "DraftState",
    "DraftStatus",
    "EndDraft",
    "LastPick",
    "MakePick",
    "Tick",
    "next_turn",
    "start_draft",
    "transition",
    "upcoming_team_indices",
    # Clock
    "PickClock",
    # Finalizer
    "BatchOutcome",
    "FinalizePlan",
    "FinalizeResult",
    "FinalizeStatus",
    "GameParticipation",
    "GameTeam",
    "TeamAssignment",
    "build_finalize_plan",
    "finalize_draft",
    "picks_by_team",
]
