"""
ESE Study Tracker Schemas - Pydantic models for the study tracker.

This module exports all schema classes for:
- Catalog: subjects, course config, catalog document
- Progress: subject status, lecture counters, settings, snapshots
"""

# Catalog schemas
from .catalog import (
    Subject,
    CourseConfig,
    Catalog,
)

# Progress schemas
from .progress import (
    SubjectStatus,
    SubjectProgress,
    Settings,
    ProgressSnapshot,
    DEFAULT_START_DATE,
    DEFAULT_END_DATE,
)

__all__ = [
    # Catalog
    'Subject',
    'CourseConfig',
    'Catalog',
    # Progress
    'SubjectStatus',
    'SubjectProgress',
    'Settings',
    'ProgressSnapshot',
    'DEFAULT_START_DATE',
    'DEFAULT_END_DATE',
]
