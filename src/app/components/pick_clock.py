"""Pick clock component."""

import streamlit as st

from ...draft import DraftSession, PickClock


def render_pick_clock(session: DraftSession, clock: PickClock) -> None:
    """
    Render the countdown, advancing the clock once a second.

    When a tick changes the pick (an auto-pick) or ends the draft the whole
    page is rerun so the board and pool refresh.

    Args:
        session: Draft session the clock feeds.
        clock: Pick clock bound to the session.
    """

    @st.fragment(run_every=1)
    def _countdown() -> None:
        before = session.state
        clock.poll()
        state = session.state
        if state.pick_number != before.pick_number or state.status != before.status:
            st.rerun()

        if not state.is_active:
            return
        team = state.current_team
        seconds = state.seconds_remaining
        st.metric(
            label=f"On the clock: {team.name}" if team else "On the clock",
            value=f"{seconds}s",
            delta=f"Round {state.round_number} · Pick {state.pick_number}",
            delta_color="off",
        )
        st.progress(max(0.0, min(seconds / state.pick_seconds, 1.0)))

    _countdown()
