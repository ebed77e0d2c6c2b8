"""Tests for the HTML rendering helpers."""

import math
from datetime import date

from esetracker.schemas import Subject, SubjectProgress
from esetracker.tracker import pace
from esetracker.viewer import (
    category_color,
    render_progress_ring,
    render_subject_card,
    render_subject_chip,
    render_subject_preview,
    render_today_schedule,
)
from esetracker.viewer.cards import DEFAULT_CATEGORY_COLOR, RING_RADIUS


TODAY = date(2025, 1, 10)


def make_pace(name="Electric Circuits", category=None, completed=5):
    subject = Subject(
        id="circuits",
        name=name,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 1, 20),
        total_lectures=20,
        category=category,
    )
    return pace(subject, SubjectProgress(completed=completed, total_lectures=20), TODAY)


class TestSubjectCard:

    def test_shows_counts_and_target(self):
        card = render_subject_card(make_pace())
        assert "Electric Circuits" in card
        assert "5/20 lectures (25%)" in card
        assert "15 left" in card
        assert "1.5/day" in card
        assert "Active" in card

    def test_escapes_subject_name(self):
        card = render_subject_card(make_pace(name="<script>alert(1)</script>"))
        assert "<script>" not in card
        assert "&lt;script&gt;" in card

    def test_uses_category_color(self):
        card = render_subject_card(make_pace(category="technical"), {"technical": "#123456"})
        assert "#123456" in card


class TestCategoryColor:

    def test_known_category(self):
        assert category_color("technical", {"technical": "#6366f1"}) == "#6366f1"

    def test_missing_category_falls_back(self):
        assert category_color(None, {"technical": "#6366f1"}) == DEFAULT_CATEGORY_COLOR
        assert category_color("other", {"technical": "#6366f1"}) == DEFAULT_CATEGORY_COLOR

    def test_non_string_value_falls_back(self):
        assert category_color("technical", {"technical": 42}) == DEFAULT_CATEGORY_COLOR


class TestSchedule:

    def test_empty_schedule_placeholder(self):
        assert "No active subjects today." in render_today_schedule([])

    def test_lists_each_item(self):
        html = render_today_schedule([make_pace(), make_pace(name="Control Systems")])
        assert html.count('class="schedule-card"') == 2
        assert "1.5 lectures today" in html


class TestChipsAndPreview:

    def test_selected_active_chip(self):
        chip = render_subject_chip(make_pace(), selected=True)
        assert "selected" in chip
        assert "active" in chip
        assert "25%" in chip

    def test_preview_placeholder(self):
        assert "Select a subject to see details" in render_subject_preview(None)

    def test_preview_details(self):
        preview = render_subject_preview(make_pace())
        assert "15 remaining" in preview
        assert "10 of 19 days left" in preview


class TestProgressRing:

    def test_zero_percent_offsets_full_circle(self):
        circumference = 2 * math.pi * RING_RADIUS
        ring = render_progress_ring(0)
        assert f'stroke-dashoffset="{circumference:.2f}"' in ring
        assert ">0%<" in ring

    def test_full_ring(self):
        assert 'stroke-dashoffset="0.00"' in render_progress_ring(100)

    def test_clamps_out_of_range(self):
        ring = render_progress_ring(150)
        assert 'stroke-dashoffset="0.00"' in ring
        assert ">100%<" in ring
