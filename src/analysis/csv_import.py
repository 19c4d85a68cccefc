"""Reconcile uploaded CSV rows into KPI stat records."""

import csv
import io
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..models import GameParticipant, Kpi, StatRecord
from ..store import LeagueStore, StoreError


logger = logging.getLogger(__name__)

# Dates must be written as YYYY-MM-DD in ASCII digits
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Base-10 ASCII integers with an optional sign
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

PREVIEW_ROW_COUNT = 5


class CsvImportError(Exception):
    """Raised when an uploaded file cannot be read as a CSV table."""

    pass


@dataclass
class CsvTable:
    """
    A parsed CSV file.

    Attributes:
        headers: Column names, trimmed, in file order.
        rows: One dict per non-empty data row, keyed by header.
    """

    headers: list[str]
    rows: list[dict[str, str]]

    def preview(self, count: int = PREVIEW_ROW_COUNT) -> list[dict[str, str]]:
        """First ``count`` rows for display."""
        return self.rows[:count]


def read_csv(text: str) -> CsvTable:
    """
    Parse CSV text with a header row.

    Header names are trimmed, blank lines are skipped and values beyond the
    header's width are ignored.

    Args:
        text: File contents.

    Returns:
        CsvTable with headers and rows.

    Raises:
        CsvImportError: If the text is not valid CSV or has no header.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    try:
        header_row = next(reader, None)
        if not header_row or not any(h.strip() for h in header_row):
            raise CsvImportError("CSV file has no headers or data. Please check file format.")
        headers = [h.strip() for h in header_row]

        rows: list[dict[str, str]] = []
        for values in reader:
            if not any(v.strip() for v in values):
                continue
            rows.append({h: v for h, v in zip(headers, values) if h})
    except csv.Error as e:
        raise CsvImportError(f"CSV parsing failed: {e}")

    return CsvTable(headers=[h for h in headers if h], rows=rows)


@dataclass(frozen=True)
class ParticipantRef:
    """Resolved participant and the team they play for in the game."""

    player_id: str
    team_id: Optional[str]


def _key(value: str) -> str:
    return value.strip().lower()


def build_participant_lookup(participants: Sequence[GameParticipant]) -> dict[str, ParticipantRef]:
    """
    Map the name variants of each game participant to their IDs.

    Variants: display name, "first last", "last, first", and first or last
    name alone when the participant has only that one. Keys are lowercase
    and trimmed.

    Args:
        participants: Game participants with joined profiles.

    Returns:
        Dictionary from name key to ParticipantRef.
    """
    lookup: dict[str, ParticipantRef] = {}
    for gp in participants:
        profile = gp.participant
        if profile is None:
            continue
        ref = ParticipantRef(player_id=gp.player_id, team_id=gp.team_id)

        display = (profile.display_name or "").strip()
        if display:
            lookup[_key(display)] = ref

        first = (profile.first_name or "").strip()
        last = (profile.last_name or "").strip()
        if first and last:
            lookup[_key(f"{first} {last}")] = ref
            lookup[_key(f"{last}, {first}")] = ref
        elif first:
            lookup[_key(first)] = ref
        elif last:
            lookup[_key(last)] = ref
    return lookup


def build_team_lookup(participants: Sequence[GameParticipant]) -> dict[str, str]:
    """Map lowercase team names to team IDs for the teams in a game."""
    return {
        _key(gp.team_name): gp.team_id
        for gp in participants
        if gp.team_name and gp.team_id
    }


@dataclass
class ColumnMapping:
    """
    Which CSV columns hold which values.

    Names come either from one full-name column (``name_column``) or from
    separate first/last name columns.

    Attributes:
        name_column: Column holding the full name.
        first_name_column: Column holding the first name.
        last_name_column: Column holding the last name.
        team_column: Optional column holding the team name.
        date_column: Column holding the date recorded.
        kpi_columns: KPI ID to column name.
    """

    name_column: Optional[str] = None
    first_name_column: Optional[str] = None
    last_name_column: Optional[str] = None
    team_column: Optional[str] = None
    date_column: Optional[str] = None
    kpi_columns: dict[str, str] = field(default_factory=dict)

    @property
    def uses_separate_names(self) -> bool:
        """Check if names come from separate first/last columns."""
        return not self.name_column and bool(self.first_name_column or self.last_name_column)


def validate_mapping(mapping: ColumnMapping, kpis: Sequence[Kpi]) -> list[str]:
    """
    Check that the required columns are mapped.

    Returns:
        List of problems. Empty if the mapping is usable.
    """
    errors: list[str] = []
    if mapping.uses_separate_names:
        if not (mapping.first_name_column and mapping.last_name_column):
            errors.append('Please map both "First Name" and "Last Name" columns.')
    elif not mapping.name_column:
        errors.append('Please map the "Full Name" column.')

    if not mapping.date_column:
        errors.append('Please map the "Date Recorded" column.')

    if kpis and not any(mapping.kpi_columns.get(k.id) for k in kpis):
        errors.append("Please map at least one KPI value column.")
    return errors


@dataclass
class ReconcileResult:
    """
    Outcome of reconciling CSV rows.

    Attributes:
        records: Stat records that passed validation.
        errors: Human-readable, row-scoped problems.
        mapping_ok: False when the column mapping itself was incomplete,
            in which case no rows were processed.
    """

    records: list[StatRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    mapping_ok: bool = True

    @property
    def message(self) -> str:
        """Summary suitable for a status banner."""
        if not self.mapping_ok:
            return "Missing required column mappings. Please complete all mappings."
        if self.errors:
            return f"Found {len(self.errors)} error(s) during data processing."
        if not self.records:
            return "No valid stats could be generated from the CSV with current mappings."
        return f"Ready to submit {len(self.records)} valid stats."


def _cell(row: dict[str, str], column: Optional[str]) -> str:
    if not column:
        return ""
    return (row.get(column) or "").strip()


def _resolve_participant(
    row: dict[str, str],
    line: int,
    mapping: ColumnMapping,
    lookup: dict[str, ParticipantRef],
    errors: list[str],
) -> tuple[Optional[ParticipantRef], str]:
    """Find the row's participant; returns (ref or None, name used in messages)."""
    if not mapping.uses_separate_names:
        name = _cell(row, mapping.name_column)
        if not name:
            errors.append(f'Row {line}: Player name is missing in column "{mapping.name_column}".')
            return None, ""
        ref = lookup.get(_key(name))
        if ref is None:
            errors.append(f'Row {line}: Player "{name}" not found in game participants.')
        return ref, name

    first = _cell(row, mapping.first_name_column)
    last = _cell(row, mapping.last_name_column)
    if first and last:
        name = f"{first} {last}"
        ref = lookup.get(_key(name)) or lookup.get(_key(f"{last}, {first}"))
        if ref is None:
            errors.append(f'Row {line}: Player "{name}" not found in game participants.')
        return ref, name
    if first:
        ref = lookup.get(_key(first))
        if ref is None:
            errors.append(f'Row {line}: Player (first name only) "{first}" not found.')
        return ref, first
    if last:
        ref = lookup.get(_key(last))
        if ref is None:
            errors.append(f'Row {line}: Player (last name only) "{last}" not found.')
        return ref, last
    errors.append(f"Row {line}: Player first name or last name is missing in CSV columns.")
    return None, ""


def reconcile_rows(
    rows: Sequence[dict[str, str]],
    mapping: ColumnMapping,
    kpis: Sequence[Kpi],
    participant_lookup: dict[str, ParticipantRef],
    team_lookup: dict[str, str],
    game_id: str,
) -> ReconcileResult:
    """
    Turn CSV rows into validated stat records.

    For each row the participant is resolved by name, the team from the
    mapped team column or else the participant's own team, and the date is
    checked against YYYY-MM-DD. Each mapped KPI column with a non-blank
    value must be a base-10 integer; a bad value rejects only that
    (row, KPI) pair. A record is emitted only when participant, team and
    date are all valid and the KPI value parsed.

    Args:
        rows: Parsed CSV rows keyed by header.
        mapping: Column mapping chosen by the user.
        kpis: KPIs tracked for the game.
        participant_lookup: Output of ``build_participant_lookup``.
        team_lookup: Output of ``build_team_lookup``.
        game_id: Game the stats belong to.

    Returns:
        ReconcileResult with records and row-scoped errors.
    """
    mapping_errors = validate_mapping(mapping, kpis)
    if mapping_errors:
        return ReconcileResult(errors=mapping_errors, mapping_ok=False)

    result = ReconcileResult()
    errors = result.errors

    for index, row in enumerate(rows):
        # Data starts on line 2, after the header
        line = index + 2

        ref, name = _resolve_participant(row, line, mapping, participant_lookup, errors)

        team_id: Optional[str] = None
        team_name = _cell(row, mapping.team_column)
        if team_name:
            team_id = team_lookup.get(_key(team_name))
            if team_id is None:
                errors.append(f'Row {line}: Team "{team_name}" from CSV not found.')
        if team_id is None and ref is not None:
            team_id = ref.team_id
        if team_id is None and ref is not None:
            errors.append(
                f'Row {line}: Could not determine team for player "{name}". '
                "Please ensure player has a team or map the team column correctly."
            )

        date_recorded = _cell(row, mapping.date_column)
        date_ok = bool(DATE_PATTERN.fullmatch(date_recorded))
        if not date_ok:
            errors.append(
                f'Row {line}: Date "{date_recorded}" in column "{mapping.date_column}" '
                "is missing or invalid (expected YYYY-MM-DD)."
            )

        for kpi in kpis:
            column = mapping.kpi_columns.get(kpi.id)
            if not column or row.get(column) is None:
                continue
            raw = row[column].strip()
            if raw == "":
                continue
            if not INTEGER_PATTERN.fullmatch(raw):
                errors.append(f'Row {line}, KPI "{kpi.name}": Value "{raw}" is not a valid number.')
                continue
            if ref is not None and team_id is not None and date_ok:
                result.records.append(
                    StatRecord(
                        game_id=game_id,
                        player_id=ref.player_id,
                        team_id=team_id,
                        kpi_id=kpi.id,
                        value=int(raw),
                        date_recorded=date_recorded,
                    )
                )

    logger.info(
        "Reconciled %d CSV rows: %d records, %d errors",
        len(rows),
        len(result.records),
        len(errors),
    )
    return result


@dataclass
class SubmissionSummary:
    """Tally of a stat submission."""

    succeeded: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        """Summary suitable for a status banner."""
        if self.succeeded == 0 and self.failed == 0:
            return "No stats to submit."
        if self.failed == 0:
            return f"Successfully uploaded {self.succeeded} stats."
        if self.succeeded > 0:
            return f"Uploaded {self.succeeded} stats with {self.failed} failures."
        return f"All {self.failed} stats failed to upload."


def submit_stats(
    store: LeagueStore,
    records: Sequence[StatRecord],
    max_workers: int = 8,
) -> SubmissionSummary:
    """
    Insert stat records as independent concurrent writes.

    Failures are counted per record; successful writes are kept.

    Args:
        store: League store to write to.
        records: Validated stat records.
        max_workers: Thread pool size.

    Returns:
        SubmissionSummary with success and failure counts.
    """
    summary = SubmissionSummary()
    if not records:
        return summary

    def _submit(record: StatRecord) -> Optional[str]:
        try:
            store.insert_player_stat(record)
        except StoreError as e:
            logger.error("Failed to submit stat %s: %s", record, e)
            return str(e)
        return None

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        for error in pool.map(_submit, records):
            if error is None:
                summary.succeeded += 1
            else:
                summary.failed += 1
                summary.errors.append(error)

    logger.info("Stat upload: %d succeeded, %d failed", summary.succeeded, summary.failed)
    return summary
