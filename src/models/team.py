"""League team and in-draft team data models."""

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from .participant import EntryRole, Participant, RosterEntry


# Palette assigned to draft teams by their position in the full team list
TEAM_COLORS = (
    "#EF5350",  # red
    "#42A5F5",  # blue
    "#66BB6A",  # green
    "#FFCA28",  # yellow
    "#AB47BC",  # purple
    "#78909C",  # blue grey
    "#FF7043",  # deep orange
    "#26A69A",  # teal
)


def team_color(index: int) -> str:
    """Pick a palette color for the team at ``index`` in the full team list."""
    if index < 0:
        return TEAM_COLORS[0]
    return TEAM_COLORS[index % len(TEAM_COLORS)]


@dataclass(frozen=True)
class Team:
    """
    A league team as stored in the ``teams`` table.

    Attributes:
        id: Unique identifier for the team.
        name: Team name.
        manager_id: Participant ID of the team's manager, if any.
        color: Stored team color, if any.
    """

    id: str
    name: str
    manager_id: Optional[str] = None
    color: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Team":
        """Build a team from a ``teams`` row."""
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            manager_id=row.get("manager_id"),
            color=row.get("color"),
        )


@dataclass(frozen=True)
class DraftTeam:
    """
    A team taking part in a draft, with the roster built so far.

    Attributes:
        team: The underlying league team.
        color: Palette color used on the draft board.
        entries: Roster entries in the order they were added.
    """

    team: Team
    color: str
    entries: tuple[RosterEntry, ...] = field(default_factory=tuple)

    @property
    def id(self) -> str:
        """ID of the underlying team."""
        return self.team.id

    @property
    def name(self) -> str:
        """Name of the underlying team."""
        return self.team.name

    @property
    def manager(self) -> Optional[Participant]:
        """The pre-assigned manager, if one was placed on this team."""
        for entry in self.entries:
            if entry.role == EntryRole.MANAGER:
                return entry.participant
        return None

    @property
    def picks(self) -> list[RosterEntry]:
        """Drafted entries, excluding the manager."""
        return [e for e in self.entries if e.role == EntryRole.DRAFTED]

    def with_entry(self, entry: RosterEntry) -> "DraftTeam":
        """Return a copy of this team with ``entry`` appended."""
        return replace(self, entries=self.entries + (entry,))
