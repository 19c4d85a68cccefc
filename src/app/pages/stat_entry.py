"""Manual stat entry page: a participant x KPI grid for one date."""

from datetime import date

import streamlit as st

from ...analysis import build_manual_records, participant_label, submit_stats
from ...models import Game, GameParticipant, Kpi
from ...store import LeagueStore
from ..components import render_reconcile_result, render_submission
from ..services import get_store, select_game


SESSION_KEYS = ("entry_game_id", "entry_result", "entry_submission")


def _init_session_state() -> None:
    """Initialize session state variables."""
    if "entry_game_id" not in st.session_state:
        st.session_state.entry_game_id = None
    if "entry_result" not in st.session_state:
        st.session_state.entry_result = None
    if "entry_submission" not in st.session_state:
        st.session_state.entry_submission = None


def reset_state() -> None:
    """Forget the checked grid and submission."""
    for key in SESSION_KEYS:
        st.session_state.pop(key, None)


def _scope_to_game(game_id: str) -> None:
    """Drop a grid checked for a different game."""
    if st.session_state.entry_game_id != game_id:
        st.session_state.entry_result = None
        st.session_state.entry_submission = None
        st.session_state.entry_game_id = game_id


def _render_grid(game: Game, participants: list[GameParticipant], kpis: list[Kpi]):
    """Render the entry form and return (submitted, date text, cell values)."""
    values: dict[tuple[str, str], str] = {}
    with st.form(f"stat_entry_{game.id}"):
        day = st.date_input("Date Recorded", value=date.today())

        header = st.columns([2] + [1] * len(kpis))
        header[0].markdown("**Player**")
        for col, kpi in zip(header[1:], kpis):
            col.markdown(f"**{kpi.name}** ({kpi.points:g} pts)")

        for gp in participants:
            row = st.columns([2] + [1] * len(kpis))
            row[0].markdown(participant_label(gp))
            if gp.team_name:
                row[0].caption(gp.team_name)
            for col, kpi in zip(row[1:], kpis):
                values[(gp.player_id, kpi.id)] = col.text_input(
                    f"{kpi.name} for {participant_label(gp)}",
                    key=f"entry_{game.id}_{gp.player_id}_{kpi.id}",
                    label_visibility="collapsed",
                )

        submitted = st.form_submit_button("Check Values", type="primary")
    return submitted, day.isoformat() if day else "", values


def _submit(store: LeagueStore) -> None:
    """Insert the checked records."""
    result = st.session_state.entry_result
    st.session_state.entry_submission = submit_stats(store, result.records)
    st.session_state.entry_result = None


def render() -> None:
    """Render the manual stat entry page."""
    _init_session_state()

    st.title("Enter Stats")

    store = get_store()
    if store is None:
        st.info("Connect a store to enter stats.")
        return

    game = select_game(store, key="entry_game_select")
    if game is None:
        return
    _scope_to_game(game.id)

    kpis = store.get_game_kpis(game.id)
    participants = store.get_game_participants(game.id)
    if not kpis:
        st.warning("No KPIs found.")
        return
    if not participants:
        st.warning("No game participants found (cannot determine teams or players/managers).")
        return

    submitted, day, values = _render_grid(game, participants, kpis)
    if submitted:
        st.session_state.entry_result = build_manual_records(values, participants, kpis, game.id, day)
        st.session_state.entry_submission = None

    if st.session_state.entry_submission is not None:
        render_submission(st.session_state.entry_submission)

    result = st.session_state.entry_result
    if result is None:
        return
    if not result.records and not result.errors:
        st.info("Enter at least one value.")
        return
    render_reconcile_result(result)

    if result.records:
        st.button(f"Submit {len(result.records)} Stats", on_click=_submit, args=(store,))
