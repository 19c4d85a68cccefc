"""Analysis modules for stat import, leaderboards, achievements and H2H schedules."""

from .csv_import import (
    ColumnMapping,
    CsvImportError,
    CsvTable,
    ParticipantRef,
    ReconcileResult,
    SubmissionSummary,
    build_participant_lookup,
    build_team_lookup,
    read_csv,
    reconcile_rows,
    submit_stats,
    validate_mapping,
)
from .stat_entry import build_manual_records, participant_label
from .leaderboard import (
    PlayerScore,
    TeamScore,
    player_team_map,
    score_players,
    score_teams,
)
from .achievements import (
    DEFAULT_MERITS,
    GameAchievements,
    MeritTransaction,
    calculate_game_achievements,
)
from .schedule import (
    generate_round_robin,
    schedule_matches,
    score_match,
    side_total,
)

__all__ = [
    # Stat import
    "ColumnMapping",
    "CsvImportError",
    "CsvTable",
    "ParticipantRef",
    "ReconcileResult",
    "SubmissionSummary",
    "build_participant_lookup",
    "build_team_lookup",
    "read_csv",
    "reconcile_rows",
    "submit_stats",
    "validate_mapping",
    # Manual entry
    "build_manual_records",
    "participant_label",
    # Leaderboard
    "PlayerScore",
    "TeamScore",
    "player_team_map",
    "score_players",
    "score_teams",
    # Achievements
    "DEFAULT_MERITS",
    "GameAchievements",
    "MeritTransaction",
    "calculate_game_achievements",
    # Schedule
    "generate_round_robin",
    "schedule_matches",
    "score_match",
    "side_total",
]
