"""Participant data model for league drafts."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class EntryRole(Enum):
    """How a participant came to be on a team's roster."""

    DRAFTED = "drafted"
    MANAGER = "manager"


@dataclass(frozen=True)
class Participant:
    """
    A person eligible to be drafted.

    Attributes:
        id: Unique identifier of the participant's profile.
        first_name: Given name, if known.
        last_name: Family name, if known.
        display_name: Preferred display name, if set.
        email: Contact email.
        team_id: Team the participant currently belongs to, if any.
    """

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    team_id: Optional[str] = None

    @property
    def name(self) -> str:
        """Name shown in the UI: display name, then first+last, first, last."""
        display = (self.display_name or "").strip()
        if display:
            return display
        first = (self.first_name or "").strip()
        last = (self.last_name or "").strip()
        if first and last:
            return f"{first} {last}"
        return first or last or self.id

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Participant":
        """Build a participant from a ``profiles`` row."""
        return cls(
            id=str(row["id"]),
            first_name=row.get("first_name"),
            last_name=row.get("last_name"),
            display_name=row.get("display_name"),
            email=row.get("email"),
            team_id=row.get("team_id"),
        )


@dataclass(frozen=True)
class RosterEntry:
    """
    A participant placed on an in-draft team.

    Managers are pre-assigned before the draft and carry no round or pick.
    Drafted entries carry the provisional round and pick number recorded
    at selection time.

    Attributes:
        participant: The participant on the roster.
        role: Whether the participant was drafted or pre-assigned.
        round_number: Provisional round (0 for managers).
        pick_number: Provisional overall pick (0 for managers).
    """

    participant: Participant
    role: EntryRole
    round_number: int = 0
    pick_number: int = 0

    def __post_init__(self) -> None:
        """Validate role-specific numbering."""
        if self.role == EntryRole.DRAFTED:
            if self.round_number < 1 or self.pick_number < 1:
                raise ValueError("drafted entries need a round and pick of at least 1")
        elif self.round_number != 0 or self.pick_number != 0:
            raise ValueError("manager entries cannot carry a round or pick")

    @property
    def is_manager(self) -> bool:
        """Check if this entry is a pre-assigned manager."""
        return self.role == EntryRole.MANAGER

    @classmethod
    def manager(cls, participant: Participant) -> "RosterEntry":
        """Create a pre-assigned manager entry."""
        return cls(participant=participant, role=EntryRole.MANAGER)

    @classmethod
    def drafted(
        cls, participant: Participant, round_number: int, pick_number: int
    ) -> "RosterEntry":
        """Create a drafted entry with its provisional round and pick."""
        return cls(
            participant=participant,
            role=EntryRole.DRAFTED,
            round_number=round_number,
            pick_number=pick_number,
        )
