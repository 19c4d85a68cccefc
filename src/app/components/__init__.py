"""Reusable UI components for the LeagueDesk dashboard."""

from .draft_board import render_draft_board, render_pick_order
from .pick_clock import render_pick_clock
from .validation_display import render_finalize_result, render_reconcile_result, render_submission

__all__ = [
    "render_draft_board",
    "render_finalize_result",
    "render_pick_clock",
    "render_pick_order",
    "render_reconcile_result",
    "render_submission",
]
