"""KPI-weighted player and team leaderboards."""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..models import DraftPick, Kpi, StatRecord, Team


@dataclass
class PlayerScore:
    """
    A participant's aggregated score in a game.

    Attributes:
        player_id: Participant ID.
        name: Display name used on the board.
        team_id: Team the participant's stats were recorded for.
        total_score: Sum of value x KPI points over all stats.
        kpi_totals: Raw value totals per KPI ID.
        rank: 1-based position on the board.
    """

    player_id: str
    name: str
    team_id: Optional[str] = None
    total_score: float = 0.0
    kpi_totals: dict[str, int] = field(default_factory=dict)
    rank: int = 0


@dataclass
class TeamScore:
    """
    A team's aggregated score in a game.

    Attributes:
        team_id: Team ID.
        name: Team name.
        total_score: Sum of member scores.
        member_ids: Participants counted for the team.
        mvp_player_id: Highest-scoring member, if the team has any.
        mvp_score: Score of the MVP.
        rank: 1-based position on the board.
    """

    team_id: str
    name: str
    total_score: float = 0.0
    member_ids: list[str] = field(default_factory=list)
    mvp_player_id: Optional[str] = None
    mvp_score: float = 0.0
    rank: int = 0


def score_players(
    stats: Sequence[StatRecord],
    kpis: Sequence[Kpi],
    names: Optional[dict[str, str]] = None,
) -> list[PlayerScore]:
    """
    Aggregate stats into a ranked player leaderboard.

    Stats for KPIs not tracked by the game are ignored. A participant's
    team is the team of their first counted stat.

    Args:
        stats: Stats recorded for the game.
        kpis: KPIs tracked for the game.
        names: Participant ID to display name.

    Returns:
        Player scores sorted by score (highest first), ties by name.
    """
    names = names or {}
    points = {k.id: k.points for k in kpis}
    scores: dict[str, PlayerScore] = {}

    for stat in stats:
        if stat.kpi_id not in points:
            continue
        score = scores.get(stat.player_id)
        if score is None:
            score = PlayerScore(
                player_id=stat.player_id,
                name=names.get(stat.player_id, "Unknown Player"),
                team_id=stat.team_id or None,
            )
            scores[stat.player_id] = score
        score.total_score += stat.value * points[stat.kpi_id]
        score.kpi_totals[stat.kpi_id] = score.kpi_totals.get(stat.kpi_id, 0) + stat.value

    ranked = sorted(scores.values(), key=lambda s: (-s.total_score, s.name.lower()))
    for rank, score in enumerate(ranked, start=1):
        score.rank = rank
    return ranked


def player_team_map(
    stats: Sequence[StatRecord],
    draft_picks: Sequence[DraftPick] = (),
) -> dict[str, str]:
    """
    Map participants to teams from stats, falling back to draft picks.

    A participant with stats for several teams keeps the first one seen.
    """
    teams: dict[str, str] = {}
    for stat in stats:
        if stat.player_id and stat.team_id:
            teams.setdefault(stat.player_id, stat.team_id)
    for pick in draft_picks:
        teams.setdefault(pick.player_id, pick.team_id)
    return teams


def score_teams(
    player_scores: Sequence[PlayerScore],
    teams: Sequence[Team],
    memberships: Optional[dict[str, str]] = None,
) -> list[TeamScore]:
    """
    Roll player scores up into a ranked team leaderboard.

    Args:
        player_scores: Output of ``score_players``.
        teams: Teams taking part in the game.
        memberships: Participant ID to team ID for members without stats.

    Returns:
        Team scores sorted by score (highest first), ties by name.
    """
    by_team = {t.id: TeamScore(team_id=t.id, name=t.name) for t in teams}

    for score in player_scores:
        team = by_team.get(score.team_id) if score.team_id else None
        if team is None:
            continue
        team.total_score += score.total_score
        team.member_ids.append(score.player_id)
        if team.mvp_player_id is None or score.total_score > team.mvp_score:
            team.mvp_player_id = score.player_id
            team.mvp_score = score.total_score

    for player_id, team_id in (memberships or {}).items():
        team = by_team.get(team_id)
        if team is not None and player_id not in team.member_ids:
            team.member_ids.append(player_id)

    ranked = sorted(by_team.values(), key=lambda t: (-t.total_score, t.name.lower()))
    for rank, team in enumerate(ranked, start=1):
        team.rank = rank
    return ranked
