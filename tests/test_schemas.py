"""
Schema validation tests for the ESE Study Tracker.

Tests all Pydantic models to ensure they validate correctly.
"""

import pytest
from datetime import date, datetime, timezone

from esetracker.schemas import (
    # Catalog
    Subject,
    CourseConfig,
    Catalog,
    # Progress
    SubjectStatus,
    SubjectProgress,
    Settings,
    ProgressSnapshot,
    DEFAULT_START_DATE,
    DEFAULT_END_DATE,
)


class TestCatalogSchemas:
    """Test catalog-related schemas."""

    def test_subject_from_wire_format(self):
        subject = Subject.model_validate({
            "id": "S1",
            "name": "Electric Circuits",
            "startDate": "2025-01-01",
            "endDate": "2025-01-20",
            "totalLectures": 20,
        })
        assert subject.start_date == date(2025, 1, 1)
        assert subject.end_date == date(2025, 1, 20)
        assert subject.total_lectures == 20
        assert subject.duration_days is None

    def test_subject_accepts_attribute_names(self):
        subject = Subject(
            id="S1",
            name="Control Systems",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 2, 1),
            total_lectures=10,
            duration_days=14,
        )
        assert subject.duration_days == 14

    def test_subject_is_immutable(self):
        subject = Subject(
            id="S1", name="A", start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 2), total_lectures=1,
        )
        with pytest.raises(ValueError):
            subject.total_lectures = 5

    def test_subject_total_lectures_must_be_positive(self):
        with pytest.raises(ValueError):
            Subject(
                id="S1", name="A", start_date=date(2025, 1, 1),
                end_date=date(2025, 1, 2), total_lectures=0,
            )

    def test_subject_duration_days_must_be_positive(self):
        with pytest.raises(ValueError):
            Subject(
                id="S1", name="A", start_date=date(2025, 1, 1),
                end_date=date(2025, 1, 2), total_lectures=3, duration_days=0,
            )

    def test_subject_requires_id(self):
        with pytest.raises(ValueError):
            Subject(
                id="", name="A", start_date=date(2025, 1, 1),
                end_date=date(2025, 1, 2), total_lectures=3,
            )

    def test_course_config_optional_dates(self):
        config = CourseConfig.model_validate({"startDate": "2025-11-17"})
        assert config.start_date == date(2025, 11, 17)
        assert config.end_date is None

    def test_catalog_defaults(self):
        catalog = Catalog()
        assert catalog.subjects == []
        assert catalog.category_colors == {}
        assert catalog.is_empty

    def test_catalog_passes_category_colors_through(self):
        colors = {"technical": "#6366f1", "nested": {"bg": "#fff", "fg": "#000"}}
        catalog = Catalog.model_validate({"subjects": [], "categoryColors": colors})
        assert catalog.category_colors == colors

    def test_catalog_get_subject(self):
        catalog = Catalog.model_validate({
            "subjects": [
                {"id": "a", "name": "A", "startDate": "2025-01-01", "endDate": "2025-01-10", "totalLectures": 5},
                {"id": "b", "name": "B", "startDate": "2025-01-01", "endDate": "2025-01-10", "totalLectures": 5},
            ]
        })
        assert catalog.get_subject("b").name == "B"
        assert catalog.get_subject("missing") is None


class TestProgressSchemas:
    """Test progress tracking schemas."""

    def test_subject_status_values(self):
        assert SubjectStatus.UPCOMING.value == "upcoming"
        assert SubjectStatus.ACTIVE.value == "active"
        assert SubjectStatus.COMPLETED.value == "completed"

    def test_subject_progress_defaults(self):
        progress = SubjectProgress(total_lectures=10)
        assert progress.completed == 0
        assert progress.remaining == 10
        assert progress.percentage == 0

    def test_subject_progress_percentage_rounds_half_up(self):
        # 1/8 = 12.5% -> 13, not banker's 12
        assert SubjectProgress(completed=1, total_lectures=8).percentage == 13
        assert SubjectProgress(completed=2, total_lectures=3).percentage == 67

    def test_subject_progress_rejects_negative_completed(self):
        with pytest.raises(ValueError):
            SubjectProgress(completed=-1, total_lectures=10)

    def test_subject_progress_clamp(self):
        progress = SubjectProgress(completed=5, total_lectures=10)
        progress.completed = 14
        progress.clamp()
        assert progress.completed == 10

    def test_settings_defaults(self):
        settings = Settings()
        assert settings.start_date == DEFAULT_START_DATE
        assert settings.end_date == DEFAULT_END_DATE

    def test_snapshot_json_uses_wire_keys(self):
        snapshot = ProgressSnapshot(
            progress={"S1": SubjectProgress(completed=2, total_lectures=20)},
            settings=Settings(start_date=date(2025, 1, 1), end_date=date(2025, 6, 30)),
            last_updated=datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc),
        )
        data = snapshot.to_json_dict()
        assert data["progress"] == {"S1": {"completed": 2, "totalLectures": 20}}
        assert data["settings"] == {"startDate": "2025-01-01", "endDate": "2025-06-30"}
        assert data["lastUpdated"].startswith("2025-01-10T12:00:00")

    def test_snapshot_omits_missing_timestamp(self):
        data = ProgressSnapshot(progress={}, settings=Settings()).to_json_dict()
        assert "lastUpdated" not in data


class TestSchemaImports:
    """Test that all schemas can be imported from the main module."""

    def test_import_from_esetracker_schemas(self):
        from esetracker.schemas import Catalog, ProgressSnapshot, Subject, SubjectProgress
        assert Catalog is not None
        assert ProgressSnapshot is not None
        assert Subject is not None
        assert SubjectProgress is not None
