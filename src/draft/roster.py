"""Resolve the draft pool and pre-assigned managers before a draft starts."""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..models import DraftTeam, Participant, RosterEntry, Team, team_color
from .errors import DraftSetupError


@dataclass(frozen=True)
class RosterResolution:
    """
    Result of roster resolution.

    Attributes:
        available: Participants that can be drafted, in display order.
        teams: Teams in draft order, each holding at most one manager.
    """

    available: tuple[Participant, ...]
    teams: tuple[DraftTeam, ...]

    @property
    def managers(self) -> list[Participant]:
        """Participants pre-assigned to a team as its manager."""
        return [t.manager for t in self.teams if t.manager is not None]


def resolve_roster(
    participants: Sequence[Participant],
    selected_teams: Sequence[Team],
    number_of_teams: int,
    all_teams: Optional[Sequence[Team]] = None,
) -> RosterResolution:
    """
    Build the available pool and the initial per-team rosters.

    A participant whose ID matches a selected team's ``manager_id`` is
    placed on that team and removed from the pool, whether or not they
    would otherwise be draftable.

    Args:
        participants: Every participant in the organization.
        selected_teams: Teams taking part, in draft order.
        number_of_teams: Team count configured on the game.
        all_teams: Full team list, used to pick stable palette colors.
            Defaults to ``selected_teams``.

    Returns:
        RosterResolution with the pool and teams.

    Raises:
        DraftSetupError: If the team selection does not match the game,
            a team is selected twice, or nobody is left to draft.
    """
    if not selected_teams or len(selected_teams) != number_of_teams:
        raise DraftSetupError(
            f"Select exactly {number_of_teams} teams to start the draft "
            f"({len(selected_teams)} selected)"
        )

    team_ids = [t.id for t in selected_teams]
    if len(set(team_ids)) != len(team_ids):
        raise DraftSetupError("A team cannot be selected more than once")

    if not participants:
        raise DraftSetupError("No participants found for this organization")

    palette_order = [t.id for t in (all_teams or selected_teams)]
    by_id = {p.id: p for p in participants}
    manager_ids: set[str] = set()

    teams: list[DraftTeam] = []
    for position, team in enumerate(selected_teams):
        index = palette_order.index(team.id) if team.id in palette_order else position
        draft_team = DraftTeam(team=team, color=team_color(index))

        manager = by_id.get(team.manager_id) if team.manager_id else None
        if manager is not None and manager.id not in manager_ids:
            draft_team = draft_team.with_entry(RosterEntry.manager(manager))
            manager_ids.add(manager.id)

        teams.append(draft_team)

    available = tuple(p for p in participants if p.id not in manager_ids)
    if not available:
        raise DraftSetupError("No participants are available to draft")

    return RosterResolution(available=available, teams=tuple(teams))
