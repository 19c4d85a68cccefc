"""League data access over the store's REST API."""

import logging
from typing import Any, Optional, Sequence

from ..models import (
    DraftPick,
    Game,
    GameParticipant,
    H2HMatch,
    Kpi,
    Participant,
    StatRecord,
    Team,
)
from .base import RestClient, eq


logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id,first_name,last_name,display_name,email,team_id"
KPI_COLUMNS = "id,name,description,points,icon_name"
GAME_PARTICIPANT_COLUMNS = (
    "player_id,team_id,is_manager,"
    "profiles!player_id(id,display_name,first_name,last_name,email),"
    "teams(id,name,color)"
)

# Natural keys used for idempotent writes
GAME_TEAMS_KEY = "game_id,team_id"
GAME_PARTICIPANTS_KEY = "game_id,player_id"
DRAFT_PICKS_KEY = "game_id,pick_number"


class LeagueStore:
    """
    Typed reads and writes for games, rosters, drafts, stats and matches.

    Each method is a single request; callers decide how failures of
    independent writes are combined.
    """

    def __init__(self, client: RestClient) -> None:
        """
        Initialize the store.

        Args:
            client: Configured REST client.
        """
        self.client = client

    # Games and rosters

    def list_games(self) -> list[Game]:
        """Fetch all games visible to the current user."""
        rows = self.client.select("games", order="start_date.desc")
        return [Game.from_row(r) for r in rows]

    def get_game(self, game_id: str) -> Optional[Game]:
        """Fetch a game by ID, or None if it does not exist."""
        rows = self.client.select("games", filters={"id": eq(game_id)}, limit=1)
        return Game.from_row(rows[0]) if rows else None

    def get_participants(self, company: str) -> list[Participant]:
        """Fetch every profile that belongs to ``company``."""
        rows = self.client.select(
            "profiles",
            columns=PROFILE_COLUMNS,
            filters={"company": eq(company)},
            order="display_name.asc",
        )
        return [Participant.from_row(r) for r in rows]

    def get_teams(self) -> list[Team]:
        """Fetch all teams."""
        rows = self.client.select("teams", columns="id,name,manager_id,color", order="name.asc")
        return [Team.from_row(r) for r in rows]

    def get_game_teams(self, game_id: str) -> list[Team]:
        """Fetch the teams associated with a game."""
        rows = self.client.select(
            "game_teams",
            columns="teams(id,name,manager_id,color)",
            filters={"game_id": eq(game_id)},
        )
        return [Team.from_row(r["teams"]) for r in rows if r.get("teams")]

    def get_game_participants(self, game_id: str) -> list[GameParticipant]:
        """Fetch a game's participants with their profiles and teams."""
        rows = self.client.select(
            "game_participants",
            columns=GAME_PARTICIPANT_COLUMNS,
            filters={"game_id": eq(game_id)},
        )
        return [GameParticipant.from_row(r) for r in rows]

    def get_game_kpis(self, game_id: str) -> list[Kpi]:
        """Fetch the KPIs tracked for a game."""
        rows = self.client.select(
            "game_kpis",
            columns=f"kpis({KPI_COLUMNS})",
            filters={"game_id": eq(game_id)},
        )
        return [Kpi.from_row(r["kpis"]) for r in rows if r.get("kpis")]

    # Draft writes

    def assign_team(self, participant_id: str, team_id: str) -> None:
        """Set a participant's current team."""
        self.client.update("profiles", {"team_id": team_id}, {"id": eq(participant_id)})

    def upsert_game_teams(self, rows: Sequence[dict[str, Any]]) -> None:
        """Associate teams with a game, keyed on (game_id, team_id)."""
        self.client.upsert("game_teams", rows, on_conflict=GAME_TEAMS_KEY)

    def upsert_game_participants(self, rows: Sequence[dict[str, Any]]) -> None:
        """Enrol participants in a game, keyed on (game_id, player_id)."""
        self.client.upsert("game_participants", rows, on_conflict=GAME_PARTICIPANTS_KEY)

    def upsert_draft_picks(self, picks: Sequence[DraftPick]) -> None:
        """Write draft picks, keyed on (game_id, pick_number)."""
        self.client.upsert("draft_picks", [p.to_row() for p in picks], on_conflict=DRAFT_PICKS_KEY)

    def get_draft_picks(self, game_id: str) -> list[DraftPick]:
        """Fetch a game's draft picks in overall pick order."""
        rows = self.client.select(
            "draft_picks",
            columns="game_id,player_id,team_id,pick_number,round_number",
            filters={"game_id": eq(game_id)},
            order="pick_number.asc",
        )
        return [DraftPick.from_row(r) for r in rows]

    def delete_draft_picks(self, game_id: str) -> None:
        """Remove every draft pick recorded for a game."""
        self.client.delete("draft_picks", {"game_id": eq(game_id)})
        logger.info("Deleted draft picks for game %s", game_id)

    # Stats

    def insert_player_stat(self, record: StatRecord) -> None:
        """Insert one stat record."""
        self.client.insert("player_stats", [record.to_row()])

    def get_player_stats(self, game_id: str) -> list[StatRecord]:
        """Fetch every stat recorded for a game, newest first."""
        rows = self.client.select(
            "player_stats",
            columns="game_id,player_id,team_id,kpi_id,value,date_recorded",
            filters={"game_id": eq(game_id)},
            order="date_recorded.desc",
        )
        return [StatRecord.from_row(r) for r in rows]

    # Head-to-head matches

    def count_h2h_matches(self, game_id: str) -> int:
        """Count the matches scheduled for a game."""
        return self.client.count("h2h_matches", {"game_id": eq(game_id)})

    def get_h2h_matches(self, game_id: str) -> list[H2HMatch]:
        """Fetch a game's matches in match order."""
        rows = self.client.select(
            "h2h_matches",
            filters={"game_id": eq(game_id)},
            order="match_number.asc",
        )
        return [H2HMatch.from_row(r) for r in rows]

    def replace_h2h_matches(self, game_id: str, matches: Sequence[H2HMatch]) -> None:
        """Delete a game's existing schedule and insert ``matches``."""
        self.client.delete("h2h_matches", {"game_id": eq(game_id)})
        if matches:
            self.client.insert("h2h_matches", [m.to_row() for m in matches])
        logger.info("Saved %d H2H matches for game %s", len(matches), game_id)

    def save_match_result(self, match: H2HMatch) -> None:
        """Store a scored match."""
        if match.id is None:
            raise ValueError("Cannot save the result of a match without an id")
        self.client.update(
            "h2h_matches",
            {
                "player1_score": match.player1_score,
                "player2_score": match.player2_score,
                "winner_id": match.winner_id,
                "loser_id": match.loser_id,
                "status": match.status,
            },
            {"id": eq(match.id)},
        )

    # Achievements

    def get_achievement_definitions(self) -> list[dict[str, Any]]:
        """Fetch achievement definitions (id, name, merit_reward)."""
        return self.client.select("achievement_definitions", columns="id,name,merit_reward")

    def save_game_achievements(self, payload: dict[str, Any]) -> None:
        """Store a game's achievements, replacing any earlier result."""
        self.client.upsert("game_achievements", [payload], on_conflict="game_id")

    def create_merit_transactions(self, rows: Sequence[dict[str, Any]]) -> None:
        """Insert merit transactions."""
        if rows:
            self.client.insert("merit_transactions", rows)

    def complete_game(self, game_id: str) -> None:
        """Mark a game as completed."""
        self.client.update("games", {"status": "completed"}, {"id": eq(game_id)})
