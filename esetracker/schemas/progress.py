"""
Progress tracking schemas for the ESE Study Tracker.

Defines Pydantic models for:
- Subject status (upcoming / active / completed)
- Per-subject lecture counters
- Course settings
- The persisted/exported snapshot document
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from esetracker.utils.numbers import round_half_up


DEFAULT_START_DATE = date(2025, 11, 17)
DEFAULT_END_DATE = date(2026, 12, 30)


class SubjectStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


class SubjectProgress(BaseModel):
    """Completion counter for one subject. completed <= total_lectures is kept by the store."""
    model_config = ConfigDict(populate_by_name=True)

    completed: int = Field(default=0, ge=0)
    total_lectures: int = Field(..., ge=1, alias="totalLectures")

    @property
    def remaining(self) -> int:
        # Raw difference; pacing divides it as-is
        return self.total_lectures - self.completed

    @property
    def percentage(self) -> int:
        if self.total_lectures <= 0:
            return 0
        return round_half_up(self.completed / self.total_lectures * 100)

    def clamp(self):
        """Clamp completed to the target."""
        if self.completed > self.total_lectures:
            self.completed = self.total_lectures


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_date: date = Field(default=DEFAULT_START_DATE, alias="startDate")
    end_date: date = Field(default=DEFAULT_END_DATE, alias="endDate")


class ProgressSnapshot(BaseModel):
    """
    Persisted/exported document: {progress, settings, lastUpdated}.

    `settings` is optional on input so that an import without settings keeps
    the current ones.
    """
    model_config = ConfigDict(populate_by_name=True)

    progress: dict[str, SubjectProgress] = {}
    settings: Optional[Settings] = None
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")

    def to_json_dict(self) -> dict:
        """Dump with camelCase keys, omitting an absent timestamp."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
