"""
Turn a completed draft into persisted records.

Finalizing produces four independent batches: team assignments, game-team
associations, game participation, and draft picks. The batches are
submitted concurrently; a failure in one does not stop or undo the others.
Every write is keyed on natural identifiers, so running the finalizer again
after a partial failure overwrites rather than duplicates.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, Sequence

from ..models import DraftPick
from ..store import LeagueStore, StoreError
from .errors import DraftStateError
from .sequencer import DraftState


logger = logging.getLogger(__name__)

BATCH_TEAM_ASSIGNMENTS = "team_assignments"
BATCH_GAME_TEAMS = "game_teams"
BATCH_GAME_PARTICIPANTS = "game_participants"
BATCH_DRAFT_PICKS = "draft_picks"


@dataclass(frozen=True)
class TeamAssignment:
    """A participant's new current team."""

    participant_id: str
    team_id: str


@dataclass(frozen=True)
class GameTeam:
    """A team's association with a game."""

    game_id: str
    team_id: str

    def to_row(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GameParticipation:
    """A participant's enrolment in a game."""

    game_id: str
    player_id: str
    team_id: str
    is_manager: bool = False

    def to_row(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FinalizePlan:
    """
    Records to write for a finished draft.

    Attributes:
        game_id: Game the draft belongs to.
        team_assignments: One per participant on any roster, managers included.
        game_teams: One per team in the draft.
        participants: Participation rows; managers only when requested.
        picks: Non-manager picks renumbered 1..K by provisional pick number.
    """

    game_id: str
    team_assignments: tuple[TeamAssignment, ...]
    game_teams: tuple[GameTeam, ...]
    participants: tuple[GameParticipation, ...]
    picks: tuple[DraftPick, ...]


def build_finalize_plan(
    state: DraftState,
    game_id: str,
    include_managers: bool = True,
) -> FinalizePlan:
    """
    Build the records for a completed draft.

    Overall pick numbers are reassigned as the 1-based position of each
    non-manager pick after sorting by provisional pick number. Round
    numbers are carried over unchanged.

    Args:
        state: A completed draft.
        game_id: Game the draft belongs to.
        include_managers: Whether managers are enrolled as game participants.

    Returns:
        FinalizePlan with all four batches.

    Raises:
        DraftStateError: If the draft has not completed.
    """
    if not state.is_completed:
        raise DraftStateError("Only a completed draft can be finalized")

    assignments: list[TeamAssignment] = []
    game_teams: list[GameTeam] = []
    participants: list[GameParticipation] = []
    drafted = []

    for team in state.teams:
        game_teams.append(GameTeam(game_id=game_id, team_id=team.id))
        for entry in team.entries:
            participant_id = entry.participant.id
            assignments.append(TeamAssignment(participant_id=participant_id, team_id=team.id))
            if not entry.is_manager or include_managers:
                participants.append(
                    GameParticipation(
                        game_id=game_id,
                        player_id=participant_id,
                        team_id=team.id,
                        is_manager=entry.is_manager,
                    )
                )
            if not entry.is_manager:
                drafted.append((entry, team.id))

    drafted.sort(key=lambda item: item[0].pick_number)
    picks = tuple(
        DraftPick(
            game_id=game_id,
            player_id=entry.participant.id,
            team_id=team_id,
            pick_number=overall,
            round_number=entry.round_number,
        )
        for overall, (entry, team_id) in enumerate(drafted, start=1)
    )

    return FinalizePlan(
        game_id=game_id,
        team_assignments=tuple(assignments),
        game_teams=tuple(game_teams),
        participants=tuple(participants),
        picks=picks,
    )


class FinalizeStatus(Enum):
    """Overall outcome of finalizing a draft."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class BatchOutcome:
    """
    Outcome of one finalize batch.

    Attributes:
        name: Batch name.
        attempted: Number of records in the batch.
        failed: Number of records that were not written.
        errors: Error messages collected while writing.
    """

    name: str
    attempted: int
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Check if every record in the batch was written."""
        return self.failed == 0


@dataclass
class FinalizeResult:
    """Outcomes of all finalize batches."""

    outcomes: list[BatchOutcome]

    @property
    def status(self) -> FinalizeStatus:
        """SUCCESS if every batch succeeded, FAILED if none did, else PARTIAL."""
        succeeded = sum(1 for o in self.outcomes if o.ok)
        if succeeded == len(self.outcomes):
            return FinalizeStatus.SUCCESS
        if succeeded == 0:
            return FinalizeStatus.FAILED
        return FinalizeStatus.PARTIAL

    @property
    def failed_batches(self) -> list[str]:
        """Names of batches with at least one failed record."""
        return [o.name for o in self.outcomes if not o.ok]

    @property
    def message(self) -> str:
        """Summary suitable for a status banner."""
        if self.status == FinalizeStatus.SUCCESS:
            return "Draft saved: team assignments, game teams, participants and picks updated."
        failed = ", ".join(self.failed_batches)
        if self.status == FinalizeStatus.PARTIAL:
            return f"Draft saved with failures in: {failed}. Finalize again to retry."
        return "Draft could not be saved. Finalize again to retry."


def finalize_draft(store: LeagueStore, plan: FinalizePlan, max_workers: int = 4) -> FinalizeResult:
    """
    Submit a finalize plan as four concurrent, independent batches.

    Args:
        store: League store to write to.
        plan: Output of ``build_finalize_plan``.
        max_workers: Thread pool size.

    Returns:
        FinalizeResult with one outcome per batch, in a fixed order.
    """
    batches: list[tuple[str, Callable[[], BatchOutcome]]] = [
        (BATCH_TEAM_ASSIGNMENTS, lambda: _write_assignments(store, plan.team_assignments)),
        (
            BATCH_GAME_TEAMS,
            lambda: _write_batch(
                BATCH_GAME_TEAMS,
                len(plan.game_teams),
                lambda: store.upsert_game_teams([g.to_row() for g in plan.game_teams]),
            ),
        ),
        (
            BATCH_GAME_PARTICIPANTS,
            lambda: _write_batch(
                BATCH_GAME_PARTICIPANTS,
                len(plan.participants),
                lambda: store.upsert_game_participants([p.to_row() for p in plan.participants]),
            ),
        ),
        (
            BATCH_DRAFT_PICKS,
            lambda: _write_batch(
                BATCH_DRAFT_PICKS,
                len(plan.picks),
                lambda: store.upsert_draft_picks(plan.picks),
            ),
        ),
    ]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(run) for _, run in batches]
        outcomes = [f.result() for f in futures]

    result = FinalizeResult(outcomes=outcomes)
    if result.status == FinalizeStatus.SUCCESS:
        logger.info(
            "Finalized draft for game %s: %d picks, %d participants",
            plan.game_id,
            len(plan.picks),
            len(plan.participants),
        )
    else:
        logger.warning(
            "Finalize for game %s ended %s; failed batches: %s",
            plan.game_id,
            result.status.value,
            ", ".join(result.failed_batches),
        )
    return result


def _write_batch(name: str, size: int, write: Callable[[], None]) -> BatchOutcome:
    """Run a single-request batch, converting store errors into an outcome."""
    if size == 0:
        return BatchOutcome(name=name, attempted=0)
    try:
        write()
    except StoreError as e:
        logger.error("Finalize batch %s failed: %s", name, e, exc_info=True)
        return BatchOutcome(name=name, attempted=size, failed=size, errors=[str(e)])
    return BatchOutcome(name=name, attempted=size)


def _write_assignments(store: LeagueStore, assignments: tuple[TeamAssignment, ...]) -> BatchOutcome:
    """Update each participant's team, tallying per-record failures."""
    outcome = BatchOutcome(name=BATCH_TEAM_ASSIGNMENTS, attempted=len(assignments))
    for assignment in assignments:
        try:
            store.assign_team(assignment.participant_id, assignment.team_id)
        except StoreError as e:
            logger.error(
                "Could not assign %s to team %s: %s",
                assignment.participant_id,
                assignment.team_id,
                e,
            )
            outcome.failed += 1
            outcome.errors.append(f"{assignment.participant_id}: {e}")
    return outcome


def picks_by_team(picks: Sequence[DraftPick]) -> dict[str, list[DraftPick]]:
    """Group persisted picks per team, each list in overall pick order."""
    grouped: dict[str, list[DraftPick]] = {}
    for pick in sorted(picks, key=lambda p: p.pick_number):
        grouped.setdefault(pick.team_id, []).append(pick)
    return grouped
