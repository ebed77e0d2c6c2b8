"""
Aggregation - Whole-catalog rollups of per-subject pacing.

Only active subjects feed today's target, completed and remaining figures.
The overall percentage covers every subject regardless of status.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Sequence

from esetracker.schemas import Subject, SubjectProgress, SubjectStatus
from esetracker.utils import round_half_up

from .pacing import SubjectPace, daily_target, pace, subject_status


@dataclass(frozen=True)
class Overview:
    """Today's rollup across active subjects."""
    today_target: int
    completed: int
    remaining: int
    active_count: int


def progress_or_default(
    subject: Subject,
    progress_map: Mapping[str, SubjectProgress],
) -> SubjectProgress:
    """Stored progress for a subject, or a fresh counter if none exists yet."""
    progress = progress_map.get(subject.id)
    if progress is None:
        return SubjectProgress(completed=0, total_lectures=subject.total_lectures)
    return progress


def active_subjects(subjects: Sequence[Subject], today: Optional[date] = None) -> list[Subject]:
    return [s for s in subjects if subject_status(s, today) == SubjectStatus.ACTIVE]


def overview(
    subjects: Sequence[Subject],
    progress_map: Mapping[str, SubjectProgress],
    today: Optional[date] = None,
) -> Overview:
    """
    Roll up active subjects.

    today_target is rounded up so the displayed requirement is never
    under-stated.
    """
    total_today = 0.0
    completed = 0
    remaining = 0

    active = active_subjects(subjects, today)
    for subject in active:
        progress = progress_or_default(subject, progress_map)
        total_today += daily_target(subject, progress, today)
        completed += progress.completed
        remaining += progress.total_lectures - progress.completed

    return Overview(
        today_target=math.ceil(total_today),
        completed=completed,
        remaining=remaining,
        active_count=len(active),
    )


def overall_percentage(
    subjects: Sequence[Subject],
    progress_map: Mapping[str, SubjectProgress],
) -> int:
    """Completed / total lectures over the entire catalog, as 0..100."""
    total_completed = 0
    total_lectures = 0
    for subject in subjects:
        progress = progress_or_default(subject, progress_map)
        total_completed += progress.completed
        total_lectures += progress.total_lectures

    if total_lectures <= 0:
        return 0
    return round_half_up(total_completed / total_lectures * 100)


def today_schedule(
    subjects: Sequence[Subject],
    progress_map: Mapping[str, SubjectProgress],
    today: Optional[date] = None,
) -> list[SubjectPace]:
    """Pacing for each active subject, in catalog order."""
    return [
        pace(subject, progress_or_default(subject, progress_map), today)
        for subject in active_subjects(subjects, today)
    ]
