"""Validate KPI values typed into the manual stat entry grid."""

import logging
from typing import Mapping, Sequence

from ..models import GameParticipant, Kpi, StatRecord
from .csv_import import DATE_PATTERN, INTEGER_PATTERN, ReconcileResult


logger = logging.getLogger(__name__)

# Grid cells are keyed by (player_id, kpi_id)
CellKey = tuple[str, str]


def participant_label(participant: GameParticipant) -> str:
    """Display name for a grid row."""
    if participant.participant is not None:
        return participant.participant.name
    return participant.player_id


def build_manual_records(
    values: Mapping[CellKey, str],
    participants: Sequence[GameParticipant],
    kpis: Sequence[Kpi],
    game_id: str,
    date_recorded: str,
) -> ReconcileResult:
    """
    Turn a participant x KPI grid of typed values into stat records.

    Blank cells are skipped. Every other cell must be a base-10 integer; a
    bad cell rejects only itself. Participants without a team in the game
    are reported once and their cells are not recorded. An invalid date
    rejects the whole grid.

    Args:
        values: Raw cell text keyed by (player_id, kpi_id).
        participants: Game participants shown as grid rows.
        kpis: KPIs shown as grid columns.
        game_id: Game the stats belong to.
        date_recorded: Date applied to every record, as YYYY-MM-DD.

    Returns:
        ReconcileResult with records and cell-scoped errors.
    """
    result = ReconcileResult()
    date_recorded = date_recorded.strip()
    if not DATE_PATTERN.fullmatch(date_recorded):
        result.errors.append(f'Date "{date_recorded}" is missing or invalid (expected YYYY-MM-DD).')
        return result

    for gp in participants:
        name = participant_label(gp)
        cells = [(kpi, (values.get((gp.player_id, kpi.id)) or "").strip()) for kpi in kpis]
        cells = [(kpi, raw) for kpi, raw in cells if raw]
        if not cells:
            continue
        if not gp.team_id:
            result.errors.append(f'Player "{name}" has no team in this game; their values were skipped.')
            continue

        for kpi, raw in cells:
            if not INTEGER_PATTERN.fullmatch(raw):
                result.errors.append(f'Player "{name}", KPI "{kpi.name}": Value "{raw}" is not a valid number.')
                continue
            result.records.append(
                StatRecord(
                    game_id=game_id,
                    player_id=gp.player_id,
                    team_id=gp.team_id,
                    kpi_id=kpi.id,
                    value=int(raw),
                    date_recorded=date_recorded,
                )
            )

    logger.info(
        "Manual entry for game %s: %d records, %d errors",
        game_id,
        len(result.records),
        len(result.errors),
    )
    return result
