"""Game, KPI, and persisted record data models."""

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Optional

from .participant import Participant


def _parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date (or timestamp) string; pass through dates and None."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class Game:
    """
    A league game (season) that teams are drafted into.

    Attributes:
        id: Unique identifier for the game.
        name: Game name.
        number_of_teams: How many teams must take part in the draft.
        start_date: First day of play.
        end_date: Last day of play.
        game_type_id: Identifier of the game type (e.g. an H2H variant).
        status: Lifecycle status as stored (e.g. "active", "completed").
    """

    id: str
    name: str
    number_of_teams: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    game_type_id: Optional[str] = None
    status: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate game configuration."""
        if self.number_of_teams < 0:
            raise ValueError("number_of_teams cannot be negative")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Game":
        """Build a game from a ``games`` row."""
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            number_of_teams=int(row.get("number_of_teams") or 0),
            start_date=_parse_date(row.get("start_date")),
            end_date=_parse_date(row.get("end_date")),
            game_type_id=row.get("game_type_id"),
            status=row.get("status"),
        )


@dataclass(frozen=True)
class Kpi:
    """
    A named, points-weighted statistic tracked for a game.

    Attributes:
        id: Unique identifier for the KPI.
        name: KPI name (e.g. "assists").
        points: Points awarded per unit of the statistic.
        description: Optional longer description.
        icon_name: Optional icon identifier used by the UI.
    """

    id: str
    name: str
    points: float = 0.0
    description: Optional[str] = None
    icon_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Kpi":
        """Build a KPI from a ``kpis`` row."""
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            points=float(row.get("points") or 0),
            description=row.get("description"),
            icon_name=row.get("icon_name"),
        )


@dataclass(frozen=True)
class StatRecord:
    """A single KPI value recorded for a participant on a date."""

    game_id: str
    player_id: str
    team_id: str
    kpi_id: str
    value: int
    date_recorded: str

    def to_row(self) -> dict[str, Any]:
        """Serialize for a ``player_stats`` insert."""
        return asdict(self)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "StatRecord":
        """Build a stat record from a ``player_stats`` row."""
        return cls(
            game_id=str(row.get("game_id") or ""),
            player_id=str(row["player_id"]),
            team_id=str(row.get("team_id") or ""),
            kpi_id=str(row["kpi_id"]),
            value=int(row.get("value") or 0),
            date_recorded=str(row.get("date_recorded") or ""),
        )


@dataclass(frozen=True)
class DraftPick:
    """
    A finalized draft pick.

    Attributes:
        game_id: Game the draft belongs to.
        player_id: Participant who was picked.
        team_id: Team that made the pick.
        pick_number: Gapless overall pick number, starting at 1.
        round_number: Round in which the pick was made.
    """

    game_id: str
    player_id: str
    team_id: str
    pick_number: int
    round_number: int

    def __post_init__(self) -> None:
        """Validate pick numbering."""
        if self.pick_number < 1:
            raise ValueError("pick_number must be at least 1")
        if self.round_number < 1:
            raise ValueError("round_number must be at least 1")

    def to_row(self) -> dict[str, Any]:
        """Serialize for a ``draft_picks`` write."""
        return asdict(self)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "DraftPick":
        """Build a pick from a ``draft_picks`` row."""
        return cls(
            game_id=str(row["game_id"]),
            player_id=str(row["player_id"]),
            team_id=str(row["team_id"]),
            pick_number=int(row["pick_number"]),
            round_number=int(row["round_number"]),
        )


@dataclass
class H2HMatch:
    """
    A scheduled head-to-head match between two teams or two participants.

    Exactly one pair of sides is set: ``team1_id``/``team2_id`` for
    team-based games, ``player1_id``/``player2_id`` otherwise.
    """

    game_id: str
    match_number: int
    match_date: Optional[date] = None
    team1_id: Optional[str] = None
    team2_id: Optional[str] = None
    player1_id: Optional[str] = None
    player2_id: Optional[str] = None
    status: str = "scheduled"
    player1_score: Optional[int] = None
    player2_score: Optional[int] = None
    winner_id: Optional[str] = None
    loser_id: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate that exactly one kind of side is set."""
        has_teams = self.team1_id is not None or self.team2_id is not None
        has_players = self.player1_id is not None or self.player2_id is not None
        if has_teams == has_players:
            raise ValueError("a match needs either two teams or two players")
        if self.match_number < 1:
            raise ValueError("match_number must be at least 1")

    @property
    def is_team_based(self) -> bool:
        """Check if the match is between teams."""
        return self.team1_id is not None or self.team2_id is not None

    @property
    def side_ids(self) -> tuple[Optional[str], Optional[str]]:
        """IDs of side 1 and side 2."""
        if self.is_team_based:
            return self.team1_id, self.team2_id
        return self.player1_id, self.player2_id

    def to_row(self) -> dict[str, Any]:
        """Serialize for an ``h2h_matches`` insert."""
        row = asdict(self)
        if row["id"] is None:
            del row["id"]
        if self.match_date is not None:
            row["match_date"] = self.match_date.isoformat()
        return row

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "H2HMatch":
        """Build a match from an ``h2h_matches`` row."""
        return cls(
            id=row.get("id"),
            game_id=str(row["game_id"]),
            match_number=int(row["match_number"]),
            match_date=_parse_date(row.get("match_date")),
            team1_id=row.get("team1_id"),
            team2_id=row.get("team2_id"),
            player1_id=row.get("player1_id"),
            player2_id=row.get("player2_id"),
            status=row.get("status") or "scheduled",
            player1_score=row.get("player1_score"),
            player2_score=row.get("player2_score"),
            winner_id=row.get("winner_id"),
            loser_id=row.get("loser_id"),
        )


@dataclass(frozen=True)
class GameParticipant:
    """
    A participant's enrolment in a game, joined with profile and team names.

    Attributes:
        player_id: Participant ID.
        team_id: Team the participant plays for in this game, if any.
        is_manager: Whether the participant manages their team.
        participant: Joined profile, when the row carried one.
        team_name: Joined team name, when the row carried one.
    """

    player_id: str
    team_id: Optional[str] = None
    is_manager: bool = False
    participant: Optional[Participant] = None
    team_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "GameParticipant":
        """Build from a ``game_participants`` row with ``profiles`` and ``teams`` embedded."""
        profile = row.get("profiles")
        team = row.get("teams") or {}
        return cls(
            player_id=str(row["player_id"]),
            team_id=row.get("team_id"),
            is_manager=bool(row.get("is_manager")),
            participant=Participant.from_row(profile) if profile else None,
            team_name=team.get("name"),
        )
