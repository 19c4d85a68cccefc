"""Status display components for import and finalize results."""

import streamlit as st

from ...analysis import ReconcileResult, SubmissionSummary
from ...draft import FinalizeResult, FinalizeStatus


# Number of row errors listed before the rest are collapsed
MAX_LISTED_ERRORS = 20


def render_reconcile_result(result: ReconcileResult) -> None:
    """
    Render the outcome of reconciling CSV rows.

    Args:
        result: Reconcile result to display.
    """
    if not result.mapping_ok:
        st.warning(result.message)
        for error in result.errors:
            st.error(f"❌ {error}")
        return

    if result.errors:
        st.warning(result.message)
        with st.expander(f"Errors ({len(result.errors)})", expanded=True):
            for error in result.errors[:MAX_LISTED_ERRORS]:
                st.error(f"❌ {error}")
            hidden = len(result.errors) - MAX_LISTED_ERRORS
            if hidden > 0:
                st.caption(f"...and {hidden} more")
    elif result.records:
        st.success(result.message)
    else:
        st.info(result.message)


def render_submission(summary: SubmissionSummary) -> None:
    """Render the outcome of a stat submission."""
    if summary.failed == 0:
        st.success(summary.message)
    elif summary.succeeded > 0:
        st.warning(summary.message)
    else:
        st.error(summary.message)


def render_finalize_result(result: FinalizeResult) -> None:
    """Render one line per finalize batch under an overall banner."""
    if result.status == FinalizeStatus.SUCCESS:
        st.success(result.message)
    elif result.status == FinalizeStatus.PARTIAL:
        st.warning(result.message)
    else:
        st.error(result.message)

    for outcome in result.outcomes:
        if outcome.ok:
            st.caption(f"✅ {outcome.name}: {outcome.attempted} written")
        else:
            st.caption(f"❌ {outcome.name}: {outcome.failed} of {outcome.attempted} failed")
            for error in outcome.errors[:MAX_LISTED_ERRORS]:
                st.caption(f"   {error}")
