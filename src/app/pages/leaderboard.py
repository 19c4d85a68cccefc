"""Leaderboard page with player and team standings and game close-out."""

import streamlit as st

from ...analysis import calculate_game_achievements, player_team_map, score_players, score_teams
from ...models import Game
from ...store import LeagueStore, StoreError
from ..services import get_store, select_game


def _end_game(store: LeagueStore, game: Game) -> None:
    """Compute achievements, award merits and mark the game completed."""
    stats = store.get_player_stats(game.id)
    participants = store.get_game_participants(game.id)
    result = calculate_game_achievements(
        game.id,
        stats,
        store.get_game_kpis(game.id),
        store.get_game_teams(game.id),
        store.get_draft_picks(game.id),
        store.get_achievement_definitions(),
        [gp.participant for gp in participants if gp.participant is not None],
    )

    try:
        store.save_game_achievements(result.payload)
        store.create_merit_transactions([tx.to_row() for tx in result.merit_transactions])
        store.complete_game(game.id)
    except StoreError as e:
        st.error(f"Could not save game results: {e}")
        return
    st.success(
        f"Game results saved: {len(result.merit_transactions)} merit awards, "
        f"{sum(result.merits_by_player.values())} merits in total."
    )


def render() -> None:
    """Render the leaderboard page."""
    st.title("Leaderboard")

    store = get_store()
    if store is None:
        st.info("Connect a store to view standings.")
        return

    game = select_game(store, key="leaderboard_game_select")
    if game is None:
        return

    stats = store.get_player_stats(game.id)
    kpis = store.get_game_kpis(game.id)
    participants = store.get_game_participants(game.id)
    names = {gp.player_id: gp.participant.name for gp in participants if gp.participant}

    players = score_players(stats, kpis, names)
    teams = score_teams(players, store.get_game_teams(game.id), player_team_map(stats))
    kpi_names = {k.id: k.name for k in kpis}

    player_tab, team_tab = st.tabs(["Players", "Teams"])
    with player_tab:
        if not players:
            st.info("No stats recorded yet.")
        else:
            st.dataframe(
                [
                    {
                        "Rank": p.rank,
                        "Player": p.name,
                        "Score": round(p.total_score, 2),
                        **{kpi_names[k]: v for k, v in p.kpi_totals.items()},
                    }
                    for p in players
                ],
                hide_index=True,
                use_container_width=True,
            )
    with team_tab:
        st.dataframe(
            [
                {
                    "Rank": t.rank,
                    "Team": t.name,
                    "Score": round(t.total_score, 2),
                    "Members": len(t.member_ids),
                    "MVP": names.get(t.mvp_player_id, "-") if t.mvp_player_id else "-",
                }
                for t in teams
            ],
            hide_index=True,
            use_container_width=True,
        )

    if game.status != "completed":
        st.divider()
        if st.button("End Game and Award Merits", type="primary"):
            _end_game(store, game)
