"""Main Streamlit application entry point."""

import logging
import sys
from pathlib import Path

# Add project root to path for direct execution
_project_root = Path(__file__).parent.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import streamlit as st

from src.app.pages import draft_room, h2h_schedule, leaderboard, stat_entry, stat_upload
from src.app.services import get_settings, render_sign_in
from src.config import configure_logging


logger = logging.getLogger(__name__)

# Navigation
PAGES = {
    "Draft Room": draft_room,
    "Enter Stats": stat_entry,
    "Stat Upload": stat_upload,
    "Leaderboard": leaderboard,
    "H2H Schedule": h2h_schedule,
}


def _reset_page(page) -> None:
    """Clear a page's session state after an unexpected error."""
    reset = getattr(page, "reset_state", None)
    if reset is not None:
        reset()


def main() -> None:
    """Run the main application."""
    st.set_page_config(
        page_title="LeagueDesk - League Draft Dashboard",
        page_icon="🏆",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    configure_logging(get_settings().log_level)

    st.sidebar.title("LeagueDesk")
    st.sidebar.markdown("*League draft and stats dashboard*")
    st.sidebar.divider()

    # Page selection
    page_name = st.sidebar.radio("Navigation", list(PAGES.keys()), label_visibility="collapsed")

    st.sidebar.divider()
    render_sign_in()

    # Run selected page
    page = PAGES[page_name]
    try:
        page.render()
    except Exception as e:
        logger.exception("Unhandled error on page %s", page_name)
        st.error(f"Something went wrong: {e}")
        st.button("Try again", on_click=_reset_page, args=(page,))


if __name__ == "__main__":
    main()
