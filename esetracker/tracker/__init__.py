"""
ESE Study Tracker runtime - Loading, progress, pacing and navigation.

This module provides:
- CatalogLoader: Load the subject catalog with fallbacks
- ProgressStore: Track and persist lecture progress
- Pacing / aggregation: daily targets and dashboard rollups
- Selection: filter, search and pagination state
- Navigator: the application object tying these together
"""

from .errors import (
    TrackerError,
    SourceUnavailable,
    ValidationError,
    FormatError,
)

from .loader import (
    CatalogLoader,
    CatalogLoadResult,
    CatalogSource,
    JsonCatalogProvider,
    EmbeddedCatalogProvider,
    apply_course_config,
)

from .progress import (
    ProgressStore,
    LocalStateStore,
    ProgressLoadResult,
    ProgressSource,
    LogResult,
    ImportResult,
    parse_snapshot,
    DEFAULT_STATE_DB,
)

from .pacing import (
    SubjectPace,
    subject_status,
    days_remaining,
    total_days,
    daily_target,
    pace,
    course_days_remaining,
    course_day_number,
)

from .aggregate import (
    Overview,
    overview,
    overall_percentage,
    today_schedule,
    progress_or_default,
)

from .selection import (
    PAGE_SIZE,
    SessionState,
    SubjectFilter,
    Page,
    filtered_subjects,
    chip_order,
    paginate,
    visible_page_numbers,
)

from .navigator import Navigator

__all__ = [
    # Errors
    "TrackerError",
    "SourceUnavailable",
    "ValidationError",
    "FormatError",
    # Loader
    "CatalogLoader",
    "CatalogLoadResult",
    "CatalogSource",
    "JsonCatalogProvider",
    "EmbeddedCatalogProvider",
    "apply_course_config",
    # Progress
    "ProgressStore",
    "LocalStateStore",
    "ProgressLoadResult",
    "ProgressSource",
    "LogResult",
    "ImportResult",
    "parse_snapshot",
    "DEFAULT_STATE_DB",
    # Pacing
    "SubjectPace",
    "subject_status",
    "days_remaining",
    "total_days",
    "daily_target",
    "pace",
    "course_days_remaining",
    "course_day_number",
    # Aggregation
    "Overview",
    "overview",
    "overall_percentage",
    "today_schedule",
    "progress_or_default",
    # Selection
    "PAGE_SIZE",
    "SessionState",
    "SubjectFilter",
    "Page",
    "filtered_subjects",
    "chip_order",
    "paginate",
    "visible_page_numbers",
    # Navigator
    "Navigator",
]
