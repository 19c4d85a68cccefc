"""End-of-game achievements and merit awards."""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Sequence

from ..models import DraftPick, Kpi, Participant, StatRecord, Team
from .leaderboard import player_team_map, score_players, score_teams


logger = logging.getLogger(__name__)

# Achievement definition names and the merits awarded when a definition
# carries no reward of its own
OVERALL_MVP = "Overall Game MVP"
PODIUM_SECOND = "Podium Finisher (2nd Place)"
PODIUM_THIRD = "Podium Finisher (3rd Place)"
KPI_ACHIEVER = "KPI Achiever"
WINNING_TEAM_MEMBER = "Winning Team Member"
TEAM_LEADER_MVP = "Team Leader MVP"

DEFAULT_MERITS = {
    OVERALL_MVP: 500,
    PODIUM_SECOND: 200,
    PODIUM_THIRD: 150,
    KPI_ACHIEVER: 250,
    WINNING_TEAM_MEMBER: 100,
    TEAM_LEADER_MVP: 300,
}

PODIUM_SIZE = 3


@dataclass(frozen=True)
class MeritTransaction:
    """A merit award for one participant."""

    player_id: str
    amount: int
    transaction_type: str
    description: str
    source_game_id: str
    source_achievement_definition_id: Optional[str] = None
    kpi_id: Optional[str] = None

    def to_row(self) -> dict[str, Any]:
        """Serialize for a ``merit_transactions`` insert."""
        return asdict(self)


@dataclass
class GameAchievements:
    """
    Result of closing out a game.

    Attributes:
        payload: Row for the ``game_achievements`` table.
        merit_transactions: Positive merit awards to insert.
    """

    payload: dict[str, Any]
    merit_transactions: list[MeritTransaction] = field(default_factory=list)

    @property
    def merits_by_player(self) -> dict[str, int]:
        """Total merits earned in the game per participant."""
        totals: dict[str, int] = {}
        for tx in self.merit_transactions:
            totals[tx.player_id] = totals.get(tx.player_id, 0) + tx.amount
        return totals


class _MeritLedger:
    """Collects merit transactions, resolving rewards from definitions."""

    def __init__(self, game_id: str, definitions: Sequence[dict[str, Any]]) -> None:
        self.game_id = game_id
        self.definitions = {d.get("name"): d for d in definitions}
        self.transactions: list[MeritTransaction] = []

    def award(
        self,
        achievement: str,
        player_id: str,
        transaction_type: str,
        description: str,
        kpi_id: Optional[str] = None,
    ) -> None:
        definition = self.definitions.get(achievement)
        if definition is None:
            logger.warning('Achievement definition "%s" not found, using default reward', achievement)
            definition = {}
        amount = int(definition.get("merit_reward") or DEFAULT_MERITS[achievement])
        if amount <= 0:
            return
        self.transactions.append(
            MeritTransaction(
                player_id=player_id,
                amount=amount,
                transaction_type=transaction_type,
                description=description,
                source_game_id=self.game_id,
                source_achievement_definition_id=definition.get("id"),
                kpi_id=kpi_id,
            )
        )


def calculate_game_achievements(
    game_id: str,
    stats: Sequence[StatRecord],
    kpis: Sequence[Kpi],
    teams: Sequence[Team],
    draft_picks: Sequence[DraftPick] = (),
    definitions: Sequence[dict[str, Any]] = (),
    profiles: Sequence[Participant] = (),
) -> GameAchievements:
    """
    Work out a finished game's achievements and merit awards.

    Awards the overall MVP, 2nd and 3rd place on the podium, the top
    performer of each KPI (only when their total is positive), every member
    of the winning team, and each team's highest scorer. Also records how
    each drafted participant performed against their draft position.

    Args:
        game_id: Game being closed.
        stats: Stats recorded for the game.
        kpis: KPIs tracked for the game.
        teams: Teams taking part.
        draft_picks: Persisted picks, used for team membership and draft rank.
        definitions: Achievement definitions (id, name, merit_reward).
        profiles: Participant profiles, used for display names.

    Returns:
        GameAchievements with the payload and merit transactions.
    """
    names = {p.id: p.name for p in profiles}
    players = score_players(stats, kpis, names)
    team_scores = score_teams(players, teams, player_team_map(stats, draft_picks))
    ledger = _MeritLedger(game_id, definitions)

    overall_mvp = players[0].player_id if players else None
    if overall_mvp:
        ledger.award(OVERALL_MVP, overall_mvp, "achievement_reward", f"Overall MVP for game {game_id}")

    podium = [
        {
            "player_id": p.player_id,
            "player_display_name": p.name,
            "rank": p.rank,
            "score": p.total_score,
        }
        for p in players[:PODIUM_SIZE]
    ]
    for finisher, achievement, place in zip(podium[1:], (PODIUM_SECOND, PODIUM_THIRD), ("2nd", "3rd")):
        ledger.award(
            achievement,
            finisher["player_id"],
            "achievement_reward",
            f"Finished {place} place on the podium for game {game_id}",
        )

    kpi_winners = []
    for kpi in kpis:
        top_player, top_value = None, 0
        for p in players:
            value = p.kpi_totals.get(kpi.id, 0)
            if value > top_value:
                top_player, top_value = p.player_id, value
        if top_player is None:
            continue
        kpi_winners.append({"value": top_value, "kpi_id": kpi.id, "player_id": top_player})
        ledger.award(
            KPI_ACHIEVER,
            top_player,
            "kpi_bonus",
            f"Top performer for KPI: {kpi.name} with value {top_value} in game {game_id}",
            kpi_id=kpi.id,
        )

    winning_team = team_scores[0] if team_scores else None
    if winning_team:
        for player_id in winning_team.member_ids:
            ledger.award(
                WINNING_TEAM_MEMBER,
                player_id,
                "team_win_reward",
                f"Member of winning team for game {game_id}",
            )

    team_leader_mvps = []
    for team in team_scores:
        if team.mvp_player_id is None:
            continue
        team_leader_mvps.append(
            {"team_id": team.team_id, "leader_profile_id": team.mvp_player_id, "score": team.mvp_score}
        )
        ledger.award(
            TEAM_LEADER_MVP,
            team.mvp_player_id,
            "team_mvp_reward",
            f"Team Leader MVP for team {team.name} in game {game_id}",
        )

    draft_ranks = {pick.player_id: pick.pick_number for pick in draft_picks}
    performance = [
        {
            "profile_id": p.player_id,
            "draft_rank": draft_ranks[p.player_id],
            "performance_rank": p.rank,
            "total_score": p.total_score,
            "team_id": p.team_id,
        }
        for p in players
        if p.player_id in draft_ranks
    ]

    payload = {
        "game_id": game_id,
        "overall_mvp_player_id": overall_mvp,
        "winning_team_id": winning_team.team_id if winning_team else None,
        "kpi_winners": kpi_winners,
        "team_leader_mvps": team_leader_mvps,
        "performance_data": performance,
        "team_scores": {t.team_id: t.total_score for t in team_scores},
        "podium_finishers": podium,
    }
    logger.info(
        "Game %s achievements: MVP %s, winning team %s, %d merit awards",
        game_id,
        overall_mvp,
        payload["winning_team_id"],
        len(ledger.transactions),
    )
    return GameAchievements(payload=payload, merit_transactions=ledger.transactions)
