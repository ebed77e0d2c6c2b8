"""
Card renderer - Subject cards, schedule rows and the progress ring.

Provides:
- Subject card rendering for the subjects grid
- Today's schedule rows for active subjects
- Subject chips and the selected-subject preview
- Overall progress ring (SVG)
"""

import html
import math
from typing import Optional

from esetracker.schemas import SubjectStatus
from esetracker.tracker import SubjectPace


STATUS_LABELS = {
    SubjectStatus.ACTIVE: "Active",
    SubjectStatus.UPCOMING: "Upcoming",
    SubjectStatus.COMPLETED: "Finished",
}

STATUS_COLORS = {
    SubjectStatus.ACTIVE: "#10b981",
    SubjectStatus.UPCOMING: "#6366f1",
    SubjectStatus.COMPLETED: "#94a3b8",
}

DEFAULT_CATEGORY_COLOR = "#64748b"
RING_RADIUS = 52


def get_tracker_css() -> str:
    """Get CSS styles for tracker cards."""
    return """
    <style>
    .subject-card {
        background: white;
        border: 1px solid #e2e8f0;
        border-radius: 12px;
        padding: 1em 1.2em;
        margin: 0.5em 0;
        box-shadow: 0 2px 4px rgba(0,0,0,0.05);
    }
    .subject-card-header {
        display: flex;
        justify-content: space-between;
        align-items: center;
        margin-bottom: 0.6em;
    }
    .subject-name {
        font-weight: 600;
        font-size: 1.05em;
        color: #1e293b;
    }
    .status-badge {
        font-size: 0.75em;
        padding: 0.2em 0.6em;
        border-radius: 999px;
        color: white;
    }
    .progress-bar {
        background: #f1f5f9;
        border-radius: 999px;
        height: 8px;
        overflow: hidden;
        margin: 0.5em 0;
    }
    .progress-bar-fill {
        height: 100%;
        border-radius: 999px;
    }
    .subject-stats {
        display: flex;
        gap: 1em;
        font-size: 0.85em;
        color: #64748b;
    }
    .schedule-card {
        border-left: 4px solid #10b981;
        background: #f8fafc;
        border-radius: 8px;
        padding: 0.6em 1em;
        margin: 0.4em 0;
    }
    .schedule-target {
        font-weight: 600;
        color: #047857;
    }
    .subject-chip {
        display: inline-block;
        padding: 0.3em 0.7em;
        margin: 0.2em;
        border-radius: 999px;
        border: 1px solid #e2e8f0;
        font-size: 0.85em;
        color: #334155;
    }
    .subject-chip.selected {
        background: #e0e7ff;
        border-color: #6366f1;
    }
    .subject-chip.active {
        border-left: 3px solid #10b981;
    }
    .preview-placeholder {
        color: #94a3b8;
        padding: 1em;
        text-align: center;
    }
    </style>
    """


def status_label(status: SubjectStatus) -> str:
    return STATUS_LABELS.get(status, status.value)


def _status_badge(status: SubjectStatus) -> str:
    color = STATUS_COLORS.get(status, DEFAULT_CATEGORY_COLOR)
    return f'<span class="status-badge" style="background:{color};">{html.escape(status_label(status))}</span>'


def _progress_bar(percentage: int, color: str) -> str:
    width = max(0, min(100, percentage))
    return (
        '<div class="progress-bar">'
        f'<div class="progress-bar-fill" style="width:{width}%;background:{html.escape(color)};"></div>'
        '</div>'
    )


def category_color(category: Optional[str], category_colors: dict) -> str:
    """Color for a subject category; colors are opaque strings from the catalog."""
    if not category:
        return DEFAULT_CATEGORY_COLOR
    value = category_colors.get(category)
    return value if isinstance(value, str) else DEFAULT_CATEGORY_COLOR


def render_subject_card(item: SubjectPace, category_colors: Optional[dict] = None) -> str:
    """
    Render a subject card for the grid.

    Args:
        item: SubjectPace for the subject
        category_colors: Optional category -> color mapping from the catalog

    Returns:
        HTML string for the card
    """
    subject = item.subject
    color = category_color(subject.category, category_colors or {})

    parts = ['<div class="subject-card">']
    parts.append('<div class="subject-card-header">')
    parts.append(f'<span class="subject-name">{html.escape(subject.name)}</span>')
    parts.append(_status_badge(item.status))
    parts.append('</div>')

    parts.append(_progress_bar(item.percentage, color))

    parts.append('<div class="subject-stats">')
    parts.append(f'<span>{item.progress.completed}/{item.progress.total_lectures} lectures ({item.percentage}%)</span>')
    parts.append(f'<span>{item.remaining} left</span>')
    parts.append(f'<span>{item.days_remaining} days left</span>')
    parts.append(f'<span>{item.daily_target:.1f}/day</span>')
    parts.append('</div>')

    parts.append(
        f'<div class="subject-stats">{subject.start_date:%d %b %Y} → {subject.end_date:%d %b %Y}'
        f' · {item.total_days} days</div>'
    )
    parts.append('</div>')
    return ''.join(parts)


def render_schedule_card(item: SubjectPace) -> str:
    """Render one row of today's schedule."""
    parts = ['<div class="schedule-card">']
    parts.append(f'<div class="subject-name">{html.escape(item.subject.name)}</div>')
    parts.append(f'<div class="schedule-target">{item.daily_target:.1f} lectures today</div>')
    parts.append(f'<div class="subject-stats">Remaining: {item.remaining} | {item.days_remaining} days</div>')
    parts.append('</div>')
    return ''.join(parts)


def render_today_schedule(items: list[SubjectPace]) -> str:
    """Render today's schedule, or a placeholder when nothing is active."""
    if not items:
        return '<p style="color:#64748b;">No active subjects today.</p>'
    return ''.join(render_schedule_card(item) for item in items)


def render_subject_chip(item: SubjectPace, selected: bool = False) -> str:
    classes = ["subject-chip"]
    if selected:
        classes.append("selected")
    if item.status == SubjectStatus.ACTIVE:
        classes.append("active")
    return (
        f'<span class="{" ".join(classes)}" data-subject-id="{html.escape(item.subject.id)}">'
        f'{html.escape(item.subject.name)} · {item.percentage}%'
        '</span>'
    )


def render_subject_preview(item: Optional[SubjectPace]) -> str:
    """Render the selected-subject preview panel."""
    if item is None:
        return '<div class="preview-placeholder">Select a subject to see details</div>'

    parts = ['<div class="subject-card">']
    parts.append('<div class="subject-card-header">')
    parts.append(f'<span class="subject-name">{html.escape(item.subject.name)}</span>')
    parts.append(_status_badge(item.status))
    parts.append('</div>')
    parts.append(_progress_bar(item.percentage, STATUS_COLORS[SubjectStatus.ACTIVE]))
    parts.append('<div class="subject-stats">')
    parts.append(f'<span>{item.daily_target:.1f} lectures/day</span>')
    parts.append(f'<span>{item.remaining} remaining</span>')
    parts.append(f'<span>{item.days_remaining} of {item.total_days} days left</span>')
    parts.append('</div>')
    parts.append('</div>')
    return ''.join(parts)


def render_progress_ring(percentage: int, radius: int = RING_RADIUS) -> str:
    """
    Render the overall progress ring as inline SVG.

    The stroke offset is the uncovered share of the circumference.
    """
    percentage = max(0, min(100, percentage))
    circumference = 2 * math.pi * radius
    offset = circumference - (percentage / 100) * circumference
    size = radius * 2 + 16
    center = size / 2

    return (
        f'<svg width="{size}" height="{size}" viewBox="0 0 {size} {size}">'
        '<defs><linearGradient id="progressGradient" x1="0%" y1="0%" x2="100%" y2="100%">'
        '<stop offset="0%" stop-color="#6366f1"/><stop offset="100%" stop-color="#10b981"/>'
        '</linearGradient></defs>'
        f'<circle cx="{center}" cy="{center}" r="{radius}" fill="none" stroke="#e2e8f0" stroke-width="10"/>'
        f'<circle cx="{center}" cy="{center}" r="{radius}" fill="none" stroke="url(#progressGradient)" '
        f'stroke-width="10" stroke-linecap="round" '
        f'stroke-dasharray="{circumference:.2f}" stroke-dashoffset="{offset:.2f}" '
        f'transform="rotate(-90 {center} {center})"/>'
        f'<text x="50%" y="50%" text-anchor="middle" dominant-baseline="central" '
        f'font-size="20" font-weight="600" fill="#1e293b">{percentage}%</text>'
        '</svg>'
    )
