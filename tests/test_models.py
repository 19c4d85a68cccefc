"""Tests for data models."""

from datetime import date

import pytest

from src.models import (
    TEAM_COLORS,
    DraftPick,
    DraftTeam,
    EntryRole,
    Game,
    GameParticipant,
    H2HMatch,
    Kpi,
    Participant,
    RosterEntry,
    StatRecord,
    Team,
    team_color,
)


class TestParticipant:
    """Tests for the Participant model."""

    def test_name_prefers_display_name(self) -> None:
        """Display name wins over first and last names."""
        p = Participant(id="p1", first_name="Ada", last_name="Lovelace", display_name="Countess")
        assert p.name == "Countess"

    def test_name_falls_back_to_full_name(self) -> None:
        """Without a display name, first and last are joined."""
        p = Participant(id="p1", first_name="Ada", last_name="Lovelace", display_name="  ")
        assert p.name == "Ada Lovelace"

    def test_name_falls_back_to_single_part(self) -> None:
        """A single name part is used alone."""
        assert Participant(id="p1", first_name="Ada").name == "Ada"
        assert Participant(id="p1", last_name="Lovelace").name == "Lovelace"

    def test_name_falls_back_to_id(self) -> None:
        """With no name at all, the ID is shown."""
        assert Participant(id="p1").name == "p1"

    def test_from_row(self) -> None:
        """Should build from a profiles row."""
        p = Participant.from_row({"id": 7, "first_name": "Ada", "email": "ada@example.com"})
        assert p.id == "7"
        assert p.first_name == "Ada"
        assert p.email == "ada@example.com"
        assert p.last_name is None


class TestRosterEntry:
    """Tests for roster entries."""

    def test_manager_entry(self) -> None:
        """Manager entries carry no round or pick."""
        entry = RosterEntry.manager(Participant(id="m1"))
        assert entry.is_manager
        assert entry.role == EntryRole.MANAGER
        assert entry.round_number == 0
        assert entry.pick_number == 0

    def test_drafted_entry(self) -> None:
        """Drafted entries carry their round and pick."""
        entry = RosterEntry.drafted(Participant(id="p1"), 2, 5)
        assert not entry.is_manager
        assert entry.round_number == 2
        assert entry.pick_number == 5

    def test_drafted_requires_numbers(self) -> None:
        """Drafted entries must have a round and pick of at least 1."""
        with pytest.raises(ValueError):
            RosterEntry(participant=Participant(id="p1"), role=EntryRole.DRAFTED)

    def test_manager_rejects_numbers(self) -> None:
        """Manager entries cannot carry a pick."""
        with pytest.raises(ValueError):
            RosterEntry(
                participant=Participant(id="m1"),
                role=EntryRole.MANAGER,
                round_number=1,
                pick_number=1,
            )


class TestTeam:
    """Tests for league and draft teams."""

    def test_team_color_cycles(self) -> None:
        """Palette colors wrap around the palette."""
        assert team_color(0) == TEAM_COLORS[0]
        assert team_color(len(TEAM_COLORS)) == TEAM_COLORS[0]
        assert team_color(len(TEAM_COLORS) + 2) == TEAM_COLORS[2]

    def test_draft_team_manager_and_picks(self) -> None:
        """Manager is reported separately from picks."""
        team = DraftTeam(team=Team(id="t1", name="Red"), color=TEAM_COLORS[0])
        team = team.with_entry(RosterEntry.manager(Participant(id="m1")))
        team = team.with_entry(RosterEntry.drafted(Participant(id="p1"), 1, 1))

        assert team.manager.id == "m1"
        assert [e.participant.id for e in team.picks] == ["p1"]
        assert team.id == "t1"
        assert team.name == "Red"

    def test_with_entry_returns_copy(self) -> None:
        """Adding an entry leaves the original untouched."""
        team = DraftTeam(team=Team(id="t1", name="Red"), color=TEAM_COLORS[0])
        updated = team.with_entry(RosterEntry.drafted(Participant(id="p1"), 1, 1))
        assert team.entries == ()
        assert len(updated.entries) == 1


class TestGame:
    """Tests for game records."""

    def test_from_row_parses_dates(self) -> None:
        """Dates and timestamps are parsed to dates."""
        game = Game.from_row(
            {
                "id": "g1",
                "name": "Spring League",
                "number_of_teams": "4",
                "start_date": "2024-03-01",
                "end_date": "2024-03-31T00:00:00+00:00",
            }
        )
        assert game.number_of_teams == 4
        assert game.start_date == date(2024, 3, 1)
        assert game.end_date == date(2024, 3, 31)

    def test_rejects_end_before_start(self) -> None:
        """End date cannot precede start date."""
        with pytest.raises(ValueError):
            Game(id="g1", name="x", number_of_teams=2, start_date=date(2024, 3, 2), end_date=date(2024, 3, 1))

    def test_kpi_from_row(self) -> None:
        """Points default to zero."""
        kpi = Kpi.from_row({"id": "k1", "name": "Calls"})
        assert kpi.points == 0.0


class TestRecords:
    """Tests for persisted record types."""

    def test_draft_pick_validation(self) -> None:
        """Pick and round numbers start at 1."""
        with pytest.raises(ValueError):
            DraftPick(game_id="g1", player_id="p1", team_id="t1", pick_number=0, round_number=1)

    def test_draft_pick_round_trip(self) -> None:
        """A pick survives serialization."""
        pick = DraftPick(game_id="g1", player_id="p1", team_id="t1", pick_number=3, round_number=1)
        assert DraftPick.from_row(pick.to_row()) == pick

    def test_stat_record_to_row(self) -> None:
        """Stat rows carry all insert columns."""
        stat = StatRecord("g1", "p1", "t1", "k1", 4, "2024-03-01")
        assert stat.to_row() == {
            "game_id": "g1",
            "player_id": "p1",
            "team_id": "t1",
            "kpi_id": "k1",
            "value": 4,
            "date_recorded": "2024-03-01",
        }

    def test_match_requires_one_kind_of_side(self) -> None:
        """A match is either between teams or between players."""
        with pytest.raises(ValueError):
            H2HMatch(game_id="g1", match_number=1)
        with pytest.raises(ValueError):
            H2HMatch(game_id="g1", match_number=1, team1_id="a", player1_id="b")

    def test_match_to_row(self) -> None:
        """Unsaved matches omit the id and isoformat the date."""
        match = H2HMatch(game_id="g1", match_number=1, match_date=date(2024, 3, 1), team1_id="a", team2_id="b")
        row = match.to_row()
        assert "id" not in row
        assert row["match_date"] == "2024-03-01"
        assert match.side_ids == ("a", "b")
        assert match.is_team_based

    def test_game_participant_from_row(self) -> None:
        """Embedded profile and team are read."""
        gp = GameParticipant.from_row(
            {
                "player_id": "p1",
                "team_id": "t1",
                "is_manager": False,
                "profiles": {"id": "p1", "first_name": "Ada", "last_name": "Lovelace"},
                "teams": {"id": "t1", "name": "Red"},
            }
        )
        assert gp.participant.name == "Ada Lovelace"
        assert gp.team_name == "Red"
        assert not gp.is_manager
