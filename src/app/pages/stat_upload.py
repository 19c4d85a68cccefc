"""Stat upload page for importing KPI values from CSV."""

from typing import Optional

import streamlit as st

from ...analysis import (
    ColumnMapping,
    CsvImportError,
    build_participant_lookup,
    build_team_lookup,
    read_csv,
    reconcile_rows,
    submit_stats,
)
from ...models import Game, Kpi
from ...store import LeagueStore
from ..components import render_reconcile_result, render_submission
from ..services import get_store, select_game


NOT_MAPPED = "(not mapped)"

SESSION_KEYS = ("csv_table", "csv_game_id", "reconcile_result", "submission")


def _init_session_state() -> None:
    """Initialize session state variables."""
    if "csv_table" not in st.session_state:
        st.session_state.csv_table = None
    if "csv_game_id" not in st.session_state:
        st.session_state.csv_game_id = None
    if "reconcile_result" not in st.session_state:
        st.session_state.reconcile_result = None
    if "submission" not in st.session_state:
        st.session_state.submission = None


def reset_state() -> None:
    """Forget the uploaded file and results."""
    for key in SESSION_KEYS:
        st.session_state.pop(key, None)


def _scope_to_game(game_id: str) -> None:
    """Drop results processed for a different game."""
    if st.session_state.csv_game_id != game_id:
        st.session_state.reconcile_result = None
        st.session_state.submission = None
        st.session_state.csv_game_id = game_id


def _column_select(label: str, headers: list[str], key: str) -> Optional[str]:
    """Selectbox over the CSV headers with a "not mapped" option."""
    choice = st.selectbox(label, [NOT_MAPPED] + headers, key=key)
    return None if choice == NOT_MAPPED else choice


def _render_mapping(headers: list[str], kpis: list[Kpi]) -> ColumnMapping:
    """Render the column mapping form."""
    st.subheader("Map Columns")
    separate = st.radio(
        "Player names",
        ["Single full-name column", "Separate first and last name columns"],
        horizontal=True,
        key="csv_name_mode",
    ).startswith("Separate")

    mapping = ColumnMapping()
    if separate:
        col1, col2 = st.columns(2)
        with col1:
            mapping.first_name_column = _column_select("First Name", headers, "csv_first")
        with col2:
            mapping.last_name_column = _column_select("Last Name", headers, "csv_last")
    else:
        mapping.name_column = _column_select("Full Name", headers, "csv_name")

    col1, col2 = st.columns(2)
    with col1:
        mapping.date_column = _column_select("Date Recorded", headers, "csv_date")
    with col2:
        mapping.team_column = _column_select("Team (optional)", headers, "csv_team")

    if kpis:
        st.markdown("**KPI columns**")
        for kpi in kpis:
            column = _column_select(f"{kpi.name} ({kpi.points:g} pts)", headers, f"csv_kpi_{kpi.id}")
            if column:
                mapping.kpi_columns[kpi.id] = column
    return mapping


def _process(store: LeagueStore, game: Game, mapping: ColumnMapping, kpis: list[Kpi]) -> None:
    """Reconcile the uploaded rows against the game's participants."""
    participants = store.get_game_participants(game.id)
    st.session_state.reconcile_result = reconcile_rows(
        st.session_state.csv_table.rows,
        mapping,
        kpis,
        build_participant_lookup(participants),
        build_team_lookup(participants),
        game.id,
    )
    st.session_state.submission = None


def render() -> None:
    """Render the stat upload page."""
    _init_session_state()

    st.title("Stat Upload")

    store = get_store()
    if store is None:
        st.info("Connect a store to upload stats.")
        return

    game = select_game(store, key="upload_game_select")
    if game is None:
        return
    _scope_to_game(game.id)
    kpis = store.get_game_kpis(game.id)
    if not kpis:
        st.warning("This game has no KPIs configured.")

    uploaded = st.file_uploader("CSV file", type=["csv"], key="csv_upload")
    if uploaded is None:
        reset_state()
        return

    try:
        st.session_state.csv_table = read_csv(uploaded.getvalue().decode("utf-8-sig"))
    except (CsvImportError, UnicodeDecodeError) as e:
        st.error(f"Could not read the file: {e}")
        return

    table = st.session_state.csv_table
    st.caption(f"{len(table.rows)} rows · columns: {', '.join(table.headers)}")
    st.dataframe(table.preview(), use_container_width=True)

    mapping = _render_mapping(table.headers, kpis)

    if st.button("Process Data", type="primary"):
        _process(store, game, mapping, kpis)

    result = st.session_state.reconcile_result
    if result is None:
        return
    render_reconcile_result(result)

    if result.records:
        if st.button(f"Submit {len(result.records)} Stats", disabled=not result.mapping_ok):
            with st.spinner("Uploading stats..."):
                st.session_state.submission = submit_stats(store, result.records)

    if st.session_state.submission is not None:
        render_submission(st.session_state.submission)
