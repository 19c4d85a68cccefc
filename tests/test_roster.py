"""Tests for draft roster resolution."""

import pytest

from src.draft import DraftSetupError, resolve_roster
from src.models import TEAM_COLORS, Participant, Team


def make_participants(count: int) -> list[Participant]:
    """Helper to create test participants p1..pN."""
    return [Participant(id=f"p{i}", display_name=f"Player {i}") for i in range(1, count + 1)]


class TestResolveRoster:
    """Tests for resolve_roster."""

    def test_managers_removed_from_pool(self) -> None:
        """A team's manager is placed on the team and never draftable."""
        participants = make_participants(6)
        teams = [Team(id="a", name="A", manager_id="p2"), Team(id="b", name="B", manager_id="p5")]

        result = resolve_roster(participants, teams, 2)

        assert [p.id for p in result.available] == ["p1", "p3", "p4", "p6"]
        assert result.teams[0].manager.id == "p2"
        assert result.teams[1].manager.id == "p5"
        assert [m.id for m in result.managers] == ["p2", "p5"]

    def test_unknown_manager_ignored(self) -> None:
        """A manager ID not among the participants leaves the team empty."""
        result = resolve_roster(make_participants(3), [Team(id="a", name="A", manager_id="zz")], 1)
        assert result.teams[0].manager is None
        assert len(result.available) == 3

    def test_keeps_pool_order(self) -> None:
        """The pool keeps the order participants were given in."""
        participants = list(reversed(make_participants(4)))
        result = resolve_roster(participants, [Team(id="a", name="A")], 1)
        assert [p.id for p in result.available] == ["p4", "p3", "p2", "p1"]

    def test_team_count_must_match(self) -> None:
        """Selecting the wrong number of teams fails."""
        with pytest.raises(DraftSetupError, match="Select exactly 3 teams"):
            resolve_roster(make_participants(4), [Team(id="a", name="A")], 3)

    def test_no_teams_fails(self) -> None:
        """A draft needs teams."""
        with pytest.raises(DraftSetupError):
            resolve_roster(make_participants(4), [], 0)

    def test_duplicate_team_fails(self) -> None:
        """The same team cannot be selected twice."""
        team = Team(id="a", name="A")
        with pytest.raises(DraftSetupError):
            resolve_roster(make_participants(4), [team, team], 2)

    def test_no_participants_fails(self) -> None:
        """An organization without participants cannot draft."""
        with pytest.raises(DraftSetupError):
            resolve_roster([], [Team(id="a", name="A")], 1)

    def test_empty_pool_fails(self) -> None:
        """If every participant is a manager there is nobody to draft."""
        participants = make_participants(2)
        teams = [Team(id="a", name="A", manager_id="p1"), Team(id="b", name="B", manager_id="p2")]
        with pytest.raises(DraftSetupError, match="No participants are available"):
            resolve_roster(participants, teams, 2)

    def test_colors_follow_full_team_list(self) -> None:
        """Colors come from each team's position in the full list."""
        all_teams = [Team(id=t, name=t.upper()) for t in "abc"]
        result = resolve_roster(make_participants(2), [all_teams[2], all_teams[0]], 2, all_teams)
        assert result.teams[0].color == TEAM_COLORS[2]
        assert result.teams[1].color == TEAM_COLORS[0]
