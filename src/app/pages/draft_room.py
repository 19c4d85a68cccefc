"""Draft room page for running a snake draft."""

import random

import streamlit as st

from ...draft import (
    DraftError,
    DraftSession,
    EndDraft,
    MakePick,
    PickClock,
    build_finalize_plan,
    finalize_draft,
    picks_by_team,
    resolve_roster,
    start_draft,
)
from ...models import Game
from ...store import LeagueStore, StoreError
from ..components import (
    render_draft_board,
    render_finalize_result,
    render_pick_clock,
    render_pick_order,
)
from ..services import get_settings, get_store, select_game


SESSION_KEYS = (
    "draft_session",
    "draft_clock",
    "draft_game",
    "draft_include_managers",
    "finalize_result",
)


def _init_session_state() -> None:
    """Initialize session state variables."""
    if "draft_session" not in st.session_state:
        st.session_state.draft_session = None
    if "draft_clock" not in st.session_state:
        st.session_state.draft_clock = None
    if "draft_game" not in st.session_state:
        st.session_state.draft_game = None
    if "draft_include_managers" not in st.session_state:
        st.session_state.draft_include_managers = True
    if "finalize_result" not in st.session_state:
        st.session_state.finalize_result = None


def reset_state() -> None:
    """Forget the current draft."""
    for key in SESSION_KEYS:
        st.session_state.pop(key, None)


def _start(
    store: LeagueStore,
    game: Game,
    company: str,
    team_ids: list[str],
    include_managers: bool = True,
) -> None:
    """Resolve the roster and start a draft session."""
    all_teams = store.get_teams()
    by_id = {t.id: t for t in all_teams}
    selected = [by_id[i] for i in team_ids if i in by_id]
    participants = store.get_participants(company)

    resolution = resolve_roster(participants, selected, game.number_of_teams, all_teams)
    state = start_draft(resolution, get_settings().pick_seconds)
    session = DraftSession(state, random.Random())
    clock = PickClock(session)
    clock.start()

    st.session_state.draft_session = session
    st.session_state.draft_clock = clock
    st.session_state.draft_game = game
    st.session_state.draft_include_managers = include_managers
    st.session_state.finalize_result = None


def _make_pick(participant_id: str) -> None:
    """Draft a participant to the team on the clock."""
    st.session_state.draft_session.dispatch(MakePick(participant_id))


def _end_draft() -> None:
    """End the draft early."""
    st.session_state.draft_session.dispatch(EndDraft())


def _finalize(store: LeagueStore) -> None:
    """Persist the completed draft."""
    session: DraftSession = st.session_state.draft_session
    game: Game = st.session_state.draft_game
    plan = build_finalize_plan(
        session.state,
        game.id,
        include_managers=st.session_state.draft_include_managers,
    )
    st.session_state.finalize_result = finalize_draft(store, plan)


def _render_setup(store: LeagueStore) -> None:
    """Render the form that starts a draft."""
    game = select_game(store, key="draft_game_select")
    if game is None:
        return

    teams = store.get_teams()
    company = st.text_input("Company", key="draft_company")
    team_ids = st.multiselect(
        f"Teams in draft order ({game.number_of_teams} required)",
        [t.id for t in teams],
        format_func=lambda i: next((t.name for t in teams if t.id == i), i),
        key="draft_team_select",
    )
    include_managers = st.checkbox(
        "Include team managers as game participants",
        value=True,
        key="draft_include_managers_input",
    )

    if st.button("Start Draft", type="primary", disabled=not company):
        try:
            _start(store, game, company, team_ids, include_managers)
        except DraftError as e:
            st.error(str(e))
            return
        st.rerun()

    _render_saved_results(store, game)


def _render_saved_results(store: LeagueStore, game: Game) -> None:
    """Show the picks already stored for a game, with a reset option."""
    picks = store.get_draft_picks(game.id)
    if not picks:
        return

    st.divider()
    st.subheader("Saved Draft Results")
    names = {t.id: t.name for t in store.get_teams()}
    for team_id, team_picks in picks_by_team(picks).items():
        with st.expander(f"{names.get(team_id, team_id)} ({len(team_picks)} picks)"):
            for pick in team_picks:
                st.markdown(f"Pick {pick.pick_number} · Round {pick.round_number} · `{pick.player_id}`")

    if st.button("Reset Draft Results"):
        try:
            store.delete_draft_picks(game.id)
        except StoreError as e:
            st.error(f"Could not reset draft: {e}")
            return
        st.success("Draft results cleared.")
        st.rerun()


def _render_pool(session: DraftSession) -> None:
    """Render the available participants with pick buttons."""
    state = session.state
    st.subheader(f"Available ({len(state.available)})")
    search = st.text_input("Search", key="draft_pool_search").strip().lower()

    for participant in state.available:
        if search and search not in participant.name.lower():
            continue
        cols = st.columns([4, 1])
        with cols[0]:
            st.markdown(f"**{participant.name}**")
            if participant.email:
                st.caption(participant.email)
        with cols[1]:
            st.button(
                "Pick",
                key=f"pick_{participant.id}",
                on_click=_make_pick,
                args=(participant.id,),
                disabled=not state.is_active,
            )


def render() -> None:
    """Render the draft room page."""
    _init_session_state()

    st.title("Draft Room")

    store = get_store()
    if store is None:
        st.info("Connect a store to run a draft.")
        return

    session: DraftSession = st.session_state.draft_session
    if session is None:
        _render_setup(store)
        return

    state = session.state
    game: Game = st.session_state.draft_game
    st.caption(game.name)

    if session.last_error:
        st.error(session.last_error)

    if state.last_pick is not None:
        pick = state.last_pick
        how = "auto-picked" if pick.auto else "picked"
        st.info(f"{pick.team_name} {how} {pick.participant.name} (pick {pick.pick_number})")

    if state.is_active:
        clock_col, action_col = st.columns([3, 1])
        with clock_col:
            render_pick_clock(session, st.session_state.draft_clock)
            render_pick_order(state)
        with action_col:
            st.button("End Draft", on_click=_end_draft)
    else:
        st.success(f"Draft complete: {state.picks_made} picks made.")
        finalize_col, new_col = st.columns(2)
        with finalize_col:
            if st.button("Finalize Draft", type="primary"):
                _finalize(store)
        with new_col:
            st.button("New Draft", on_click=reset_state)
        if st.session_state.finalize_result is not None:
            render_finalize_result(st.session_state.finalize_result)

    st.divider()
    board_col, pool_col = st.columns([2, 1])
    with board_col:
        st.subheader("Draft Board")
        render_draft_board(state)
    with pool_col:
        _render_pool(session)
