"""
Pacing - Subject status, day counts, and daily lecture targets.

All functions are pure and work at day granularity. `today` defaults to the
local calendar date; an end date counts as active through the whole day.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from esetracker.schemas import Settings, Subject, SubjectProgress, SubjectStatus


@dataclass(frozen=True)
class SubjectPace:
    """Everything a subject card or schedule row needs."""
    subject: Subject
    progress: SubjectProgress
    status: SubjectStatus
    days_remaining: int
    total_days: int
    remaining: int
    percentage: int
    daily_target: float


def _today(today: Optional[date]) -> date:
    return today or date.today()


# -----------------------------------------------------------------------------
# Status and day counts
# -----------------------------------------------------------------------------

def subject_status(subject: Subject, today: Optional[date] = None) -> SubjectStatus:
    """Upcoming before the start date, completed after the end date, otherwise active."""
    today = _today(today)
    if today < subject.start_date:
        return SubjectStatus.UPCOMING
    if today > subject.end_date:
        return SubjectStatus.COMPLETED
    return SubjectStatus.ACTIVE


def days_remaining(end_date: date, today: Optional[date] = None) -> int:
    """Whole days from today until end_date, never negative."""
    return max(0, (end_date - _today(today)).days)


def total_days(subject: Subject) -> int:
    """Declared duration_days, else the start..end span (at least 1)."""
    if subject.duration_days:
        return subject.duration_days
    return max(1, (subject.end_date - subject.start_date).days)


# -----------------------------------------------------------------------------
# Daily target
# -----------------------------------------------------------------------------

def daily_target(
    subject: Subject,
    progress: SubjectProgress,
    today: Optional[date] = None,
) -> float:
    """
    Required lectures per day for a subject.

    Two branches:
    - Crunch mode (total_days >= days_remaining): spread what is left over the
      days that are left.
    - Otherwise the subject has not reached its dense phase yet, so use its
      designed cadence (total lectures over its duration).

    The branch boundary is discontinuous; that is the documented policy.
    """
    duration = total_days(subject)
    left = days_remaining(subject.end_date, today)
    remaining = progress.total_lectures - progress.completed

    if duration >= left:
        return remaining / max(1, left)
    return progress.total_lectures / max(1, duration)


def pace(
    subject: Subject,
    progress: SubjectProgress,
    today: Optional[date] = None,
) -> SubjectPace:
    """Compute all pacing figures for one subject."""
    today = _today(today)
    return SubjectPace(
        subject=subject,
        progress=progress,
        status=subject_status(subject, today),
        days_remaining=days_remaining(subject.end_date, today),
        total_days=total_days(subject),
        remaining=progress.remaining,
        percentage=progress.percentage,
        daily_target=daily_target(subject, progress, today),
    )


# -----------------------------------------------------------------------------
# Course-wide counters
# -----------------------------------------------------------------------------

def course_days_remaining(settings: Settings, today: Optional[date] = None) -> int:
    """Days left until the course end date (header badge)."""
    return days_remaining(settings.end_date, today)


def course_day_number(settings: Settings, today: Optional[date] = None) -> int:
    """1-based day of the course; 1 before the course starts."""
    return max(1, (_today(today) - settings.start_date).days + 1)
