"""Tests for leaderboards."""

import pytest

from src.analysis.leaderboard import player_team_map, score_players, score_teams
from src.models import DraftPick, Kpi, StatRecord, Team


KPIS = [Kpi(id="k1", name="Calls", points=1.0), Kpi(id="k2", name="Sales", points=5.0)]


@pytest.fixture
def stats() -> list[StatRecord]:
    return [
        StatRecord("g1", "p1", "a", "k1", 10, "2024-03-01"),
        StatRecord("g1", "p1", "a", "k2", 1, "2024-03-02"),
        StatRecord("g1", "p2", "a", "k2", 4, "2024-03-01"),
        StatRecord("g1", "p3", "b", "k1", 7, "2024-03-01"),
        StatRecord("g1", "p3", "b", "zz", 100, "2024-03-01"),
    ]


class TestScorePlayers:
    """Tests for score_players."""

    def test_weighted_scores_and_ranks(self, stats) -> None:
        players = score_players(stats, KPIS, {"p1": "Ada", "p2": "Alan", "p3": "Grace"})
        assert [(p.player_id, p.total_score, p.rank) for p in players] == [
            ("p2", 20.0, 1),
            ("p1", 15.0, 2),
            ("p3", 7.0, 3),
        ]

    def test_kpi_totals_are_raw(self, stats) -> None:
        players = {p.player_id: p for p in score_players(stats, KPIS)}
        assert players["p1"].kpi_totals == {"k1": 10, "k2": 1}

    def test_unknown_kpis_ignored(self, stats) -> None:
        players = {p.player_id: p for p in score_players(stats, KPIS)}
        assert "zz" not in players["p3"].kpi_totals

    def test_ties_broken_by_name(self) -> None:
        stats = [
            StatRecord("g1", "p1", "a", "k1", 5, "2024-03-01"),
            StatRecord("g1", "p2", "a", "k1", 5, "2024-03-01"),
        ]
        players = score_players(stats, KPIS, {"p1": "Zed", "p2": "Amy"})
        assert [p.name for p in players] == ["Amy", "Zed"]

    def test_no_stats(self) -> None:
        assert score_players([], KPIS) == []


class TestScoreTeams:
    """Tests for score_teams."""

    def test_team_totals_and_mvp(self, stats) -> None:
        teams = score_teams(score_players(stats, KPIS), [Team(id="a", name="A"), Team(id="b", name="B")])
        assert [(t.team_id, t.total_score, t.rank) for t in teams] == [("a", 35.0, 1), ("b", 7.0, 2)]
        assert teams[0].mvp_player_id == "p2"
        assert teams[0].mvp_score == 20.0

    def test_members_without_stats(self, stats) -> None:
        teams = score_teams(
            score_players(stats, KPIS),
            [Team(id="a", name="A"), Team(id="b", name="B")],
            {"p9": "b"},
        )
        team_b = next(t for t in teams if t.team_id == "b")
        assert team_b.member_ids == ["p3", "p9"]

    def test_team_without_members(self) -> None:
        teams = score_teams([], [Team(id="a", name="A")])
        assert teams[0].total_score == 0
        assert teams[0].mvp_player_id is None


class TestPlayerTeamMap:
    """Tests for player_team_map."""

    def test_stats_then_picks(self, stats) -> None:
        picks = [DraftPick("g1", "p1", "b", 1, 1), DraftPick("g1", "p8", "b", 2, 1)]
        assert player_team_map(stats, picks) == {"p1": "a", "p2": "a", "p3": "b", "p8": "b"}
