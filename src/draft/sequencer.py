"""
Snake draft turn sequencing.

The draft is modelled as an immutable ``DraftState`` and a pure
``transition(state, event)`` function. ``DraftSession`` owns the current
state and serializes every event, whether it came from a user click or
the pick clock, through a single FIFO queue.
"""

import logging
import random
import threading
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Union

from ..models import DraftTeam, Participant, RosterEntry
from .errors import DraftStateError
from .roster import RosterResolution


logger = logging.getLogger(__name__)

# Seconds each team has to make a pick
PICK_SECONDS = 60


class DraftStatus(Enum):
    """Lifecycle of a draft."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class MakePick:
    """Draft ``participant_id`` for the team on the clock."""

    participant_id: str


@dataclass(frozen=True)
class Tick:
    """Let ``seconds`` of the pick clock elapse."""

    seconds: int = 1


@dataclass(frozen=True)
class AutoPick:
    """Draft a random available participant for the team on the clock."""


@dataclass(frozen=True)
class EndDraft:
    """Close the draft early, keeping the picks made so far."""


DraftEvent = Union[MakePick, Tick, AutoPick, EndDraft]


@dataclass(frozen=True)
class LastPick:
    """The most recent pick, kept for UI feedback."""

    participant: Participant
    team_name: str
    round_number: int
    pick_number: int
    auto: bool = False


@dataclass(frozen=True)
class DraftState:
    """
    Complete state of a draft session.

    Attributes:
        status: Where the draft is in its lifecycle.
        available: Participants not yet drafted, in display order.
        teams: Teams in draft order with their rosters.
        round_number: Current round, starting at 1.
        pick_number: Provisional overall pick, starting at 1.
        team_index: Index into ``teams`` of the team on the clock.
        direction: +1 while moving down the order, -1 on the way back.
        seconds_remaining: Countdown for the current pick.
        pick_seconds: Countdown length restored after every pick.
        last_pick: The most recent pick, if any.
    """

    status: DraftStatus
    available: tuple[Participant, ...]
    teams: tuple[DraftTeam, ...]
    round_number: int = 1
    pick_number: int = 1
    team_index: int = 0
    direction: int = 1
    seconds_remaining: int = PICK_SECONDS
    pick_seconds: int = PICK_SECONDS
    last_pick: Optional[LastPick] = None

    @property
    def is_active(self) -> bool:
        """Check if picks are currently being made."""
        return self.status == DraftStatus.IN_PROGRESS

    @property
    def is_completed(self) -> bool:
        """Check if the draft has finished."""
        return self.status == DraftStatus.COMPLETED

    @property
    def current_team(self) -> Optional[DraftTeam]:
        """The team on the clock, or None when the draft is not active."""
        if not self.is_active or not self.teams:
            return None
        return self.teams[self.team_index]

    @property
    def picks_made(self) -> int:
        """Number of participants drafted so far."""
        return sum(len(t.picks) for t in self.teams)

    def find_available(self, participant_id: str) -> Optional[Participant]:
        """Look up a participant that is still in the pool."""
        return next((p for p in self.available if p.id == participant_id), None)


def start_draft(resolution: RosterResolution, pick_seconds: int = PICK_SECONDS) -> DraftState:
    """
    Create an in-progress draft from a resolved roster.

    Args:
        resolution: Output of ``resolve_roster``.
        pick_seconds: Countdown length for each pick.

    Returns:
        DraftState with the first team on the clock.

    Raises:
        DraftStateError: If there is nobody to draft or no team to draft for.
    """
    if pick_seconds < 1:
        raise ValueError("pick_seconds must be at least 1")
    if not resolution.teams or not resolution.available:
        raise DraftStateError("A draft needs at least one team and one available participant")
    return DraftState(
        status=DraftStatus.IN_PROGRESS,
        available=resolution.available,
        teams=resolution.teams,
        seconds_remaining=pick_seconds,
        pick_seconds=pick_seconds,
    )


def next_turn(team_index: int, direction: int, team_count: int) -> tuple[int, int, bool]:
    """
    Compute the serpentine successor of a turn.

    Args:
        team_index: Index of the team that just picked.
        direction: Current direction (+1 or -1).
        team_count: Number of teams in the draft.

    Returns:
        Tuple of (next index, next direction, whether a new round starts).
    """
    next_index = team_index + direction
    if next_index > team_count - 1:
        return team_count - 1, -1, True
    if next_index < 0:
        return 0, 1, True
    return next_index, direction, False


def upcoming_team_indices(state: DraftState, count: int) -> list[int]:
    """List the indices of the next ``count`` teams to pick, starting with the current one."""
    if not state.is_active:
        return []
    indices = []
    index, direction = state.team_index, state.direction
    for _ in range(count):
        indices.append(index)
        index, direction, _ = next_turn(index, direction, len(state.teams))
    return indices


def transition(
    state: DraftState,
    event: DraftEvent,
    rng: Optional[random.Random] = None,
) -> DraftState:
    """
    Apply one event to a draft state.

    Args:
        state: The current state. It is never modified.
        event: The event to apply.
        rng: Random source for auto-picks. Defaults to the ``random`` module.

    Returns:
        The new state.

    Raises:
        DraftStateError: If a pick is made outside an active draft or for a
            participant who is not available.
    """
    if isinstance(event, MakePick):
        if not state.is_active:
            raise DraftStateError("The draft is not in progress")
        participant = state.find_available(event.participant_id)
        if participant is None:
            raise DraftStateError(
                f"Participant {event.participant_id} is not available or already drafted"
            )
        return _apply_pick(state, participant, auto=False)

    if isinstance(event, AutoPick):
        if not state.is_active:
            raise DraftStateError("The draft is not in progress")
        return _expire(state, rng)

    if isinstance(event, Tick):
        if event.seconds < 0:
            raise ValueError("Tick seconds cannot be negative")
        # Ticks queued behind a completing pick are harmless
        for _ in range(event.seconds):
            if not state.is_active:
                break
            if state.seconds_remaining <= 1:
                state = _expire(state, rng)
            else:
                state = replace(state, seconds_remaining=state.seconds_remaining - 1)
        return state

    if isinstance(event, EndDraft):
        if state.is_completed:
            return state
        return replace(state, status=DraftStatus.COMPLETED, seconds_remaining=0)

    raise DraftStateError(f"Unknown draft event: {event!r}")


def _expire(state: DraftState, rng: Optional[random.Random]) -> DraftState:
    """Handle an expired pick clock: auto-pick, or complete if the pool is empty."""
    if not state.available:
        return replace(state, status=DraftStatus.COMPLETED, seconds_remaining=0)
    chooser = rng or random
    participant = state.available[chooser.randrange(len(state.available))]
    return _apply_pick(state, participant, auto=True)


def _apply_pick(state: DraftState, participant: Participant, auto: bool) -> DraftState:
    """Record a pick for the team on the clock, then advance or complete."""
    team = state.teams[state.team_index]
    entry = RosterEntry.drafted(participant, state.round_number, state.pick_number)
    teams = tuple(
        t.with_entry(entry) if i == state.team_index else t for i, t in enumerate(state.teams)
    )
    available = tuple(p for p in state.available if p.id != participant.id)
    last_pick = LastPick(
        participant=participant,
        team_name=team.name,
        round_number=state.round_number,
        pick_number=state.pick_number,
        auto=auto,
    )
    state = replace(state, teams=teams, available=available, last_pick=last_pick)

    if not available:
        return replace(state, status=DraftStatus.COMPLETED, seconds_remaining=0)

    index, direction, new_round = next_turn(state.team_index, state.direction, len(teams))
    return replace(
        state,
        team_index=index,
        direction=direction,
        round_number=state.round_number + 1 if new_round else state.round_number,
        pick_number=state.pick_number + 1,
        seconds_remaining=state.pick_seconds,
    )


Listener = Callable[[DraftState, DraftState], None]


class DraftSession:
    """
    Single-writer owner of a draft's state.

    Events are appended to a FIFO queue by ``submit`` and applied one at a
    time by ``drain``. Only one caller drains at a time; a caller that finds
    a drain already running leaves its event for that drain to apply.
    """

    def __init__(
        self,
        state: DraftState,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize the session.

        Args:
            state: Initial draft state, usually from ``start_draft``.
            rng: Random source for auto-picks.
        """
        self._state = state
        self._rng = rng
        self._queue: deque[DraftEvent] = deque()
        self._queue_lock = threading.Lock()
        self._drain_lock = threading.Lock()
        self._listeners: list[Listener] = []
        self.last_error: Optional[str] = None

    @property
    def state(self) -> DraftState:
        """The current draft state."""
        return self._state

    @property
    def pending(self) -> int:
        """Number of queued events not yet applied."""
        with self._queue_lock:
            return len(self._queue)

    def add_listener(self, listener: Listener) -> None:
        """Register a callback invoked with (old, new) after each state change."""
        self._listeners.append(listener)

    def submit(self, event: DraftEvent) -> None:
        """Queue an event for the next drain."""
        with self._queue_lock:
            self._queue.append(event)

    def dispatch(self, event: DraftEvent) -> DraftState:
        """Queue an event and drain the queue."""
        self.submit(event)
        return self.drain()

    def drain(self) -> DraftState:
        """
        Apply queued events in order.

        Rejected events are logged and dropped; ``last_error`` keeps the
        message of the most recent rejection.

        Returns:
            The state after the queue was drained.
        """
        while self._drain_lock.acquire(blocking=False):
            try:
                while True:
                    with self._queue_lock:
                        if not self._queue:
                            break
                        event = self._queue.popleft()
                    self._apply(event)
            finally:
                self._drain_lock.release()
            # An event queued while the lock was held is picked up here
            with self._queue_lock:
                if not self._queue:
                    break
        return self._state

    def _apply(self, event: DraftEvent) -> None:
        old = self._state
        try:
            new = transition(old, event, self._rng)
        except DraftStateError as e:
            logger.warning("Rejected draft event %r: %s", event, e)
            self.last_error = str(e)
            return

        self._state = new
        self.last_error = None
        if new is old:
            return

        if new.last_pick is not None and new.last_pick is not old.last_pick:
            pick = new.last_pick
            logger.info(
                "Pick %d (round %d): %s -> %s%s",
                pick.pick_number,
                pick.round_number,
                pick.participant.name,
                pick.team_name,
                " [auto]" if pick.auto else "",
            )
        if new.is_completed and not old.is_completed:
            logger.info("Draft completed after %d picks", new.picks_made)

        for listener in list(self._listeners):
            listener(old, new)
