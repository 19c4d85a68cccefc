"""Draft board component showing each team's roster."""

import streamlit as st

from ...draft import DraftState, upcoming_team_indices
from ...models import DraftTeam


def _render_team(team: DraftTeam, on_clock: bool) -> None:
    """Render one team column."""
    marker = " ⏱" if on_clock else ""
    st.markdown(
        f"<div style='border-top: 6px solid {team.color}; padding-top: 4px'>"
        f"<strong>{team.name}</strong>{marker}</div>",
        unsafe_allow_html=True,
    )

    manager = team.manager
    if manager is not None:
        st.caption(f"Manager: {manager.name}")

    picks = team.picks
    if not picks:
        st.caption("No picks yet")
    for entry in picks:
        st.markdown(f"{entry.pick_number}. {entry.participant.name}  \nRound {entry.round_number}")


def render_draft_board(state: DraftState) -> None:
    """
    Render every team's roster side by side.

    Args:
        state: Draft state to display.
    """
    if not state.teams:
        return
    current = state.current_team
    columns = st.columns(len(state.teams))
    for column, team in zip(columns, state.teams):
        with column:
            _render_team(team, current is not None and team.id == current.id)


def render_pick_order(state: DraftState, count: int = 6) -> None:
    """Show the teams due to pick next, starting with the one on the clock."""
    if not state.is_active:
        return
    names = [state.teams[i].name for i in upcoming_team_indices(state, count)]
    st.caption("Up next: " + " → ".join(names))
