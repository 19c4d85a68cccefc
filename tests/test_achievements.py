"""Tests for end-of-game achievements."""

import pytest

from src.analysis.achievements import DEFAULT_MERITS, calculate_game_achievements
from src.models import DraftPick, Kpi, Participant, StatRecord, Team


KPIS = [Kpi(id="k1", name="Calls", points=1.0), Kpi(id="k2", name="Sales", points=5.0)]
TEAMS = [Team(id="a", name="A"), Team(id="b", name="B")]


@pytest.fixture
def stats() -> list[StatRecord]:
    return [
        StatRecord("g1", "p1", "a", "k1", 10, "2024-03-01"),
        StatRecord("g1", "p2", "a", "k2", 4, "2024-03-01"),
        StatRecord("g1", "p3", "b", "k1", 7, "2024-03-01"),
        StatRecord("g1", "p4", "b", "k1", 1, "2024-03-01"),
    ]


@pytest.fixture
def picks() -> list[DraftPick]:
    return [
        DraftPick("g1", "p3", "b", 1, 1),
        DraftPick("g1", "p1", "a", 2, 1),
        DraftPick("g1", "p5", "a", 3, 2),
    ]


def amounts(result, transaction_type: str) -> dict[str, int]:
    """Merit amounts of one transaction type by player."""
    return {t.player_id: t.amount for t in result.merit_transactions if t.transaction_type == transaction_type}


class TestCalculateGameAchievements:
    """Tests for calculate_game_achievements."""

    def test_overall_mvp_and_podium(self, stats, picks) -> None:
        result = calculate_game_achievements("g1", stats, KPIS, TEAMS, picks)
        payload = result.payload
        assert payload["overall_mvp_player_id"] == "p2"
        assert [f["player_id"] for f in payload["podium_finishers"]] == ["p2", "p1", "p3"]
        assert amounts(result, "achievement_reward") == {"p2": 500, "p1": 200, "p3": 150}

    def test_kpi_winners(self, stats, picks) -> None:
        result = calculate_game_achievements("g1", stats, KPIS, TEAMS, picks)
        assert result.payload["kpi_winners"] == [
            {"value": 10, "kpi_id": "k1", "player_id": "p1"},
            {"value": 4, "kpi_id": "k2", "player_id": "p2"},
        ]
        bonuses = [t for t in result.merit_transactions if t.transaction_type == "kpi_bonus"]
        assert {(t.player_id, t.kpi_id) for t in bonuses} == {("p1", "k1"), ("p2", "k2")}

    def test_kpi_without_positive_value_has_no_winner(self, picks) -> None:
        stats = [StatRecord("g1", "p1", "a", "k1", 0, "2024-03-01")]
        result = calculate_game_achievements("g1", stats, KPIS, TEAMS, picks)
        assert result.payload["kpi_winners"] == []

    def test_winning_team_members_rewarded(self, stats, picks) -> None:
        """Members from stats and draft picks both count."""
        result = calculate_game_achievements("g1", stats, KPIS, TEAMS, picks)
        assert result.payload["winning_team_id"] == "a"
        assert result.payload["team_scores"] == {"a": 30.0, "b": 8.0}
        assert set(amounts(result, "team_win_reward")) == {"p1", "p2", "p5"}

    def test_team_leader_mvps(self, stats, picks) -> None:
        result = calculate_game_achievements("g1", stats, KPIS, TEAMS, picks)
        leaders = {m["team_id"]: m["leader_profile_id"] for m in result.payload["team_leader_mvps"]}
        assert leaders == {"a": "p2", "b": "p3"}
        assert amounts(result, "team_mvp_reward") == {"p2": 300, "p3": 300}

    def test_performance_only_for_drafted(self, stats, picks) -> None:
        result = calculate_game_achievements("g1", stats, KPIS, TEAMS, picks)
        performance = {p["profile_id"]: p for p in result.payload["performance_data"]}
        assert set(performance) == {"p1", "p3"}
        assert performance["p3"]["draft_rank"] == 1
        assert performance["p3"]["performance_rank"] == 3

    def test_definition_overrides_reward(self, stats, picks) -> None:
        definitions = [{"id": "d1", "name": "Overall Game MVP", "merit_reward": 1000}]
        result = calculate_game_achievements("g1", stats, KPIS, TEAMS, picks, definitions)
        mvp = next(t for t in result.merit_transactions if t.source_achievement_definition_id == "d1")
        assert mvp.amount == 1000
        assert mvp.player_id == "p2"

    def test_merits_by_player(self, stats, picks) -> None:
        result = calculate_game_achievements("g1", stats, KPIS, TEAMS, picks)
        expected = (
            DEFAULT_MERITS["Overall Game MVP"]
            + DEFAULT_MERITS["KPI Achiever"]
            + DEFAULT_MERITS["Winning Team Member"]
            + DEFAULT_MERITS["Team Leader MVP"]
        )
        assert result.merits_by_player["p2"] == expected

    def test_display_names_from_profiles(self, stats, picks) -> None:
        profiles = [Participant(id="p2", display_name="Alan")]
        result = calculate_game_achievements("g1", stats, KPIS, TEAMS, picks, profiles=profiles)
        assert result.payload["podium_finishers"][0]["player_display_name"] == "Alan"

    def test_no_stats(self) -> None:
        result = calculate_game_achievements("g1", [], KPIS, TEAMS)
        assert result.payload["overall_mvp_player_id"] is None
        assert result.merit_transactions == []

    def test_transaction_rows(self, stats, picks) -> None:
        result = calculate_game_achievements("g1", stats, KPIS, TEAMS, picks)
        row = result.merit_transactions[0].to_row()
        assert row["source_game_id"] == "g1"
        assert set(row) == {
            "player_id",
            "amount",
            "transaction_type",
            "description",
            "source_game_id",
            "source_achievement_definition_id",
            "kpi_id",
        }
