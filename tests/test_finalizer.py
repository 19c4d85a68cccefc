"""Tests for draft finalization."""

from unittest.mock import MagicMock

import pytest

from src.draft import (
    DraftStateError,
    EndDraft,
    FinalizeStatus,
    MakePick,
    build_finalize_plan,
    finalize_draft,
    picks_by_team,
    resolve_roster,
    start_draft,
    transition,
)
from src.models import DraftPick, Participant, Team
from src.store import LeagueStore, RequestError


@pytest.fixture
def completed_state():
    """A finished two-team draft with managers m1 and m2 and four picks."""
    participants = [Participant(id=f"p{i}") for i in range(1, 5)]
    participants += [Participant(id="m1"), Participant(id="m2")]
    teams = [Team(id="a", name="A", manager_id="m1"), Team(id="b", name="B", manager_id="m2")]
    state = start_draft(resolve_roster(participants, teams, 2))
    for pid in ("p3", "p1", "p4", "p2"):
        state = transition(state, MakePick(pid))
    assert state.is_completed
    return state


@pytest.fixture
def store() -> MagicMock:
    return MagicMock(spec=LeagueStore)


class TestBuildFinalizePlan:
    """Tests for build_finalize_plan."""

    def test_requires_completed_draft(self) -> None:
        participants = [Participant(id="p1"), Participant(id="p2")]
        state = start_draft(resolve_roster(participants, [Team(id="a", name="A")], 1))
        with pytest.raises(DraftStateError):
            build_finalize_plan(state, "g1")

    def test_picks_gapless_and_ordered(self, completed_state) -> None:
        """Picks are numbered 1..K in the order they were made."""
        plan = build_finalize_plan(completed_state, "g1")
        assert [p.pick_number for p in plan.picks] == [1, 2, 3, 4]
        assert [p.player_id for p in plan.picks] == ["p3", "p1", "p4", "p2"]
        assert [p.team_id for p in plan.picks] == ["a", "b", "b", "a"]
        assert [p.round_number for p in plan.picks] == [1, 1, 2, 2]

    def test_managers_excluded_from_picks(self, completed_state) -> None:
        plan = build_finalize_plan(completed_state, "g1")
        assert not {"m1", "m2"} & {p.player_id for p in plan.picks}

    def test_team_assignments_include_managers(self, completed_state) -> None:
        plan = build_finalize_plan(completed_state, "g1")
        assignments = {(a.participant_id, a.team_id) for a in plan.team_assignments}
        assert ("m1", "a") in assignments
        assert ("m2", "b") in assignments
        assert len(assignments) == 6

    def test_participants_flag_managers(self, completed_state) -> None:
        plan = build_finalize_plan(completed_state, "g1")
        managers = {p.player_id for p in plan.participants if p.is_manager}
        assert managers == {"m1", "m2"}
        assert len(plan.participants) == 6

    def test_participants_without_managers(self, completed_state) -> None:
        plan = build_finalize_plan(completed_state, "g1", include_managers=False)
        assert len(plan.participants) == 4
        assert all(not p.is_manager for p in plan.participants)

    def test_game_teams(self, completed_state) -> None:
        plan = build_finalize_plan(completed_state, "g1")
        assert [g.to_row() for g in plan.game_teams] == [
            {"game_id": "g1", "team_id": "a"},
            {"game_id": "g1", "team_id": "b"},
        ]

    def test_early_end_renumbers_made_picks(self) -> None:
        """Ending early keeps only the picks made, still gapless."""
        participants = [Participant(id=f"p{i}") for i in range(1, 6)]
        state = start_draft(resolve_roster(participants, [Team(id="a", name="A"), Team(id="b", name="B")], 2))
        state = transition(state, MakePick("p5"))
        state = transition(state, MakePick("p2"))
        state = transition(state, EndDraft())

        plan = build_finalize_plan(state, "g1")
        assert [(p.pick_number, p.player_id) for p in plan.picks] == [(1, "p5"), (2, "p2")]


class TestFinalizeDraft:
    """Tests for finalize_draft."""

    def test_success(self, completed_state, store) -> None:
        plan = build_finalize_plan(completed_state, "g1")
        result = finalize_draft(store, plan)

        assert result.status == FinalizeStatus.SUCCESS
        assert [o.name for o in result.outcomes] == [
            "team_assignments",
            "game_teams",
            "game_participants",
            "draft_picks",
        ]
        assert store.assign_team.call_count == 6
        store.upsert_game_teams.assert_called_once()
        store.upsert_game_participants.assert_called_once()
        store.upsert_draft_picks.assert_called_once_with(plan.picks)

    def test_partial_failure_keeps_other_batches(self, completed_state, store) -> None:
        """One failing batch does not stop the others."""
        store.upsert_draft_picks.side_effect = RequestError("boom", 500)
        plan = build_finalize_plan(completed_state, "g1")

        result = finalize_draft(store, plan)

        assert result.status == FinalizeStatus.PARTIAL
        assert result.failed_batches == ["draft_picks"]
        store.upsert_game_teams.assert_called_once()
        store.upsert_game_participants.assert_called_once()
        assert "draft_picks" in result.message

    def test_assignment_failures_counted_per_record(self, completed_state, store) -> None:
        store.assign_team.side_effect = [None, RequestError("nope", 403)] + [None] * 4
        plan = build_finalize_plan(completed_state, "g1")

        result = finalize_draft(store, plan)

        outcome = result.outcomes[0]
        assert outcome.attempted == 6
        assert outcome.failed == 1
        assert result.status == FinalizeStatus.PARTIAL

    def test_all_batches_fail(self, completed_state, store) -> None:
        error = RequestError("down")
        store.assign_team.side_effect = error
        store.upsert_game_teams.side_effect = error
        store.upsert_game_participants.side_effect = error
        store.upsert_draft_picks.side_effect = error

        result = finalize_draft(store, build_finalize_plan(completed_state, "g1"))

        assert result.status == FinalizeStatus.FAILED

    def test_rerun_writes_same_records(self, completed_state, store) -> None:
        """Finalizing twice sends identical keyed rows."""
        plan = build_finalize_plan(completed_state, "g1")
        finalize_draft(store, plan)
        finalize_draft(store, plan)
        first, second = store.upsert_draft_picks.call_args_list
        assert first == second


class TestPicksByTeam:
    """Tests for grouping stored picks."""

    def test_groups_in_pick_order(self) -> None:
        picks = [
            DraftPick("g1", "p2", "b", 2, 1),
            DraftPick("g1", "p1", "a", 1, 1),
            DraftPick("g1", "p3", "b", 3, 2),
        ]
        grouped = picks_by_team(picks)
        assert [p.player_id for p in grouped["b"]] == ["p2", "p3"]
        assert [p.player_id for p in grouped["a"]] == ["p1"]
