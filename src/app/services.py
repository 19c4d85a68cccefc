"""Settings and store access shared by the dashboard pages."""

import logging
from typing import Optional

import streamlit as st

from ..config import Settings
from ..store import AuthError, LeagueStore, RestClient


logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    """Settings for this browser session, read once from the environment."""
    if "settings" not in st.session_state:
        st.session_state.settings = Settings.from_env()
    return st.session_state.settings


def get_store() -> Optional[LeagueStore]:
    """
    The league store for this browser session.

    Returns:
        LeagueStore, or None if the store is not configured.
    """
    if "store" in st.session_state:
        return st.session_state.store

    settings = get_settings()
    if not settings.has_store:
        return None

    client = RestClient(
        settings.store_url,
        settings.store_key,
        timeout=settings.request_timeout,
    )
    st.session_state.store = LeagueStore(client)
    return st.session_state.store


def render_sign_in() -> None:
    """Sidebar sign-in form; requests use the API key until a user signs in."""
    store = get_store()
    if store is None:
        st.sidebar.warning("Store not configured. Set LEAGUEDESK_STORE_URL and LEAGUEDESK_STORE_KEY.")
        return

    if store.client.is_authenticated:
        st.sidebar.caption(f"Signed in as {st.session_state.get('user_email', 'user')}")
        if st.sidebar.button("Sign out"):
            store.client.sign_out()
            st.session_state.pop("user_email", None)
            st.rerun()
        return

    with st.sidebar.form("sign_in"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        try:
            store.client.sign_in(email, password)
        except AuthError as e:
            st.sidebar.error(f"Sign-in failed: {e}")
            return
        st.session_state.user_email = email
        st.rerun()


def select_game(store: LeagueStore, key: str):
    """
    Game picker shared by the pages.

    Returns:
        The selected Game, or None if there are no games.
    """
    games = store.list_games()
    if not games:
        st.info("No games found.")
        return None
    return st.selectbox(
        "Game",
        games,
        format_func=lambda g: f"{g.name} ({g.status or 'unknown'})",
        key=key,
    )
