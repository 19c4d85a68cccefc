"""Tests for the Streamlit app module."""

from unittest.mock import MagicMock, patch

import pytest

pytest.importorskip("streamlit")

from src.analysis import ReconcileResult, SubmissionSummary  # noqa: E402
from src.app import main  # noqa: E402
from src.app.pages import draft_room, h2h_schedule, leaderboard, stat_entry, stat_upload  # noqa: E402
from src.models import Game  # noqa: E402


class FakeSessionState(dict):
    """Dict with attribute access, like st.session_state."""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __setattr__(self, name, value):
        self[name] = value


def fake_streamlit(**state) -> MagicMock:
    """Helper to create a streamlit stand-in with session state."""
    fake_st = MagicMock()
    fake_st.session_state = FakeSessionState(state)
    return fake_st


class TestNavigation:
    """Tests for page registration."""

    def test_all_pages_registered(self) -> None:
        assert list(main.PAGES) == ["Draft Room", "Enter Stats", "Stat Upload", "Leaderboard", "H2H Schedule"]

    def test_pages_render_callable(self) -> None:
        for page in (draft_room, h2h_schedule, leaderboard, stat_entry, stat_upload):
            assert callable(page.render)


class TestResetState:
    """Tests for clearing page state after an error."""

    def test_draft_room_reset(self) -> None:
        fake_st = fake_streamlit(draft_session=object(), draft_clock=object(), draft_include_managers=False, other=1)
        with patch.object(draft_room, "st", fake_st):
            main._reset_page(draft_room)
        assert fake_st.session_state == {"other": 1}

    def test_stat_upload_reset(self) -> None:
        fake_st = fake_streamlit(csv_table=object(), csv_game_id="g1", reconcile_result=object())
        with patch.object(stat_upload, "st", fake_st):
            main._reset_page(stat_upload)
        assert fake_st.session_state == {}

    def test_stat_entry_reset(self) -> None:
        fake_st = fake_streamlit(entry_game_id="g1", entry_result=object())
        with patch.object(stat_entry, "st", fake_st):
            main._reset_page(stat_entry)
        assert fake_st.session_state == {}

    def test_page_without_reset(self) -> None:
        """Pages without session state are left alone."""
        main._reset_page(leaderboard)


class TestDraftRoomManagers:
    """Tests for carrying the include-managers choice into finalize."""

    @pytest.mark.parametrize("include", [True, False])
    def test_start_records_choice(self, include: bool) -> None:
        fake_st = fake_streamlit()
        store = MagicMock()
        store.get_teams.return_value = []
        game = Game(id="g1", name="Spring", number_of_teams=2)
        with patch.object(draft_room, "st", fake_st), patch.object(
            draft_room, "resolve_roster"
        ), patch.object(draft_room, "start_draft"), patch.object(
            draft_room, "DraftSession"
        ), patch.object(draft_room, "PickClock"), patch.object(
            draft_room, "get_settings"
        ):
            draft_room._start(store, game, "acme", [], include_managers=include)
        assert fake_st.session_state.draft_include_managers is include

    def test_finalize_passes_choice(self) -> None:
        session = MagicMock()
        game = Game(id="g1", name="Spring", number_of_teams=2)
        fake_st = fake_streamlit(draft_session=session, draft_game=game, draft_include_managers=False)
        store = MagicMock()
        with patch.object(draft_room, "st", fake_st), patch.object(
            draft_room, "build_finalize_plan"
        ) as build, patch.object(draft_room, "finalize_draft") as finalize:
            draft_room._finalize(store)

        build.assert_called_once_with(session.state, "g1", include_managers=False)
        finalize.assert_called_once_with(store, build.return_value)
        assert fake_st.session_state.finalize_result is finalize.return_value


class TestGameScopedResults:
    """Tests for dropping results when another game is selected."""

    def test_upload_results_cleared_on_game_change(self) -> None:
        fake_st = fake_streamlit(
            csv_game_id="g1",
            reconcile_result=ReconcileResult(),
            submission=SubmissionSummary(succeeded=1),
        )
        with patch.object(stat_upload, "st", fake_st):
            stat_upload._scope_to_game("g2")
        assert fake_st.session_state.reconcile_result is None
        assert fake_st.session_state.submission is None
        assert fake_st.session_state.csv_game_id == "g2"

    def test_upload_results_kept_for_same_game(self) -> None:
        result = ReconcileResult()
        fake_st = fake_streamlit(csv_game_id="g1", reconcile_result=result, submission=None)
        with patch.object(stat_upload, "st", fake_st):
            stat_upload._scope_to_game("g1")
        assert fake_st.session_state.reconcile_result is result

    def test_entry_results_cleared_on_game_change(self) -> None:
        fake_st = fake_streamlit(entry_game_id="g1", entry_result=ReconcileResult(), entry_submission=None)
        with patch.object(stat_entry, "st", fake_st):
            stat_entry._scope_to_game("g2")
        assert fake_st.session_state.entry_result is None
        assert fake_st.session_state.entry_game_id == "g2"

    def test_entry_submit_clears_checked_grid(self) -> None:
        """A submitted grid cannot be submitted a second time."""
        fake_st = fake_streamlit(entry_result=ReconcileResult(), entry_submission=None)
        with patch.object(stat_entry, "st", fake_st), patch.object(stat_entry, "submit_stats") as submit:
            stat_entry._submit(MagicMock())
        assert fake_st.session_state.entry_submission is submit.return_value
        assert fake_st.session_state.entry_result is None
