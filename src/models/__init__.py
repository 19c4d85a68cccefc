"""Data models for league drafts and stats."""

from .participant import EntryRole, Participant, RosterEntry
from .team import TEAM_COLORS, DraftTeam, Team, team_color
from .game import DraftPick, Game, GameParticipant, H2HMatch, Kpi, StatRecord

__all__ = [
    # Participant
    "EntryRole",
    "Participant",
    "RosterEntry",
    # Team
    "TEAM_COLORS",
    "DraftTeam",
    "Team",
    "team_color",
    # Game
    "DraftPick",
    "Game",
    "GameParticipant",
    "H2HMatch",
    "Kpi",
    "StatRecord",
]
