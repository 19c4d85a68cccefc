"""Head-to-head schedule page."""

from itertools import groupby

import streamlit as st

from ...analysis import schedule_matches, score_match
from ...models import Game, H2HMatch
from ...store import LeagueStore, StoreError
from ..services import get_store, select_game


def _generate(store: LeagueStore, game: Game, team_based: bool) -> None:
    """Build and store a fresh schedule for the game."""
    if game.start_date is None or game.end_date is None:
        st.error("The game needs a start and end date to generate a schedule.")
        return

    if team_based:
        entity_ids = [t.id for t in store.get_game_teams(game.id)]
    else:
        entity_ids = [gp.player_id for gp in store.get_game_participants(game.id)]

    if len(entity_ids) < 2:
        st.error("Not enough players/teams found for this game. Add at least two to generate a schedule.")
        return

    matches = schedule_matches(game.id, entity_ids, game.start_date, game.end_date, team_based)
    try:
        store.replace_h2h_matches(game.id, matches)
    except StoreError as e:
        st.error(f"Could not save the schedule: {e}")
        return
    st.success(f"Scheduled {len(matches)} matches.")


def _save_round(store: LeagueStore, game: Game, matches: list[H2HMatch]) -> None:
    """Score one day's matches from that day's stats and store the results."""
    stats = store.get_player_stats(game.id)
    failed = 0
    for match in matches:
        score_match(match, stats, same_day_only=True)
        try:
            store.save_match_result(match)
        except (StoreError, ValueError) as e:
            failed += 1
            st.error(f"Match {match.match_number}: {e}")
    if failed == 0:
        st.success(f"Saved {len(matches)} match results.")


def render() -> None:
    """Render the H2H schedule page."""
    st.title("H2H Schedule")

    store = get_store()
    if store is None:
        st.info("Connect a store to manage schedules.")
        return

    game = select_game(store, key="h2h_game_select")
    if game is None:
        return

    team_based = st.toggle("Team-based matches", value=True, key="h2h_team_based")
    existing = store.count_h2h_matches(game.id)
    label = "Regenerate Schedule" if existing else "Generate Schedule"
    if existing:
        st.caption(f"{existing} matches scheduled. Regenerating replaces them.")
    if st.button(label, type="primary"):
        _generate(store, game, team_based)

    matches = store.get_h2h_matches(game.id)
    if not matches:
        return

    names = {t.id: t.name for t in store.get_game_teams(game.id)}
    for gp in store.get_game_participants(game.id):
        if gp.participant is not None:
            names[gp.player_id] = gp.participant.name

    dated = sorted(matches, key=lambda m: (m.match_date is None, m.match_date, m.match_number))
    for match_date, group in groupby(dated, key=lambda m: m.match_date):
        day = list(group)
        with st.expander(f"{match_date or 'Unscheduled'} ({len(day)} matches)"):
            for match in day:
                side1, side2 = match.side_ids
                line = f"#{match.match_number}: {names.get(side1, side1)} vs {names.get(side2, side2)}"
                if match.status == "completed":
                    line += f" · {match.player1_score}-{match.player2_score}"
                st.markdown(line)
            st.button(
                "Save Round Results",
                key=f"save_round_{match_date}",
                on_click=_save_round,
                args=(store, game, day),
            )
