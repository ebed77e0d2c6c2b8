"""
ESE Study Tracker Viewer - HTML rendering helpers for the Streamlit app.

This module provides:
- Subject cards and chips
- Today's schedule
- Selected-subject preview
- Overall progress ring
"""

from .cards import (
    get_tracker_css,
    status_label,
    category_color,
    render_subject_card,
    render_schedule_card,
    render_today_schedule,
    render_subject_chip,
    render_subject_preview,
    render_progress_ring,
    STATUS_LABELS,
)

__all__ = [
    "get_tracker_css",
    "status_label",
    "category_color",
    "render_subject_card",
    "render_schedule_card",
    "render_today_schedule",
    "render_subject_chip",
    "render_subject_preview",
    "render_progress_ring",
    "STATUS_LABELS",
]
