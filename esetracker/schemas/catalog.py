"""
Catalog schemas for the ESE Study Tracker.

Defines Pydantic models for the subject catalog including:
- Subjects with lecture targets and time windows
- Course-wide configuration (start/end dates)
- The catalog document itself (subjects + config + category colors)

Wire format keys are camelCase (startDate, totalLectures, ...); attributes are
snake_case. Both spellings are accepted on input.
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# -----------------------------------------------------------------------------
# Subject
# -----------------------------------------------------------------------------


class Subject(BaseModel):
    """A catalog entry: one course/topic with a lecture target and a window."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")
    total_lectures: int = Field(..., ge=1, alias="totalLectures")
    duration_days: Optional[int] = Field(default=None, ge=1, alias="durationDays")
    category: Optional[str] = None  # key into Catalog.category_colors


# -----------------------------------------------------------------------------
# Course config + catalog document
# -----------------------------------------------------------------------------


class CourseConfig(BaseModel):
    """Course-wide dates; both optional so a catalog can omit them."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")


class Catalog(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subjects: list[Subject] = []
    course_config: CourseConfig = Field(default_factory=CourseConfig, alias="courseConfig")
    category_colors: dict[str, Any] = Field(default_factory=dict, alias="categoryColors")

    @field_validator('subjects', mode='before')
    @classmethod
    def null_subjects(cls, v):
        # "subjects": null means no subjects
        return [] if v is None else v

    @field_validator('course_config', 'category_colors', mode='before')
    @classmethod
    def null_mapping(cls, v):
        return {} if v is None else v

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        """Look up a subject by ID."""
        for subject in self.subjects:
            if subject.id == subject_id:
                return subject
        return None

    @property
    def is_empty(self) -> bool:
        return not self.subjects
