"""Tests for catalog loading and provider fallback."""

import json
from datetime import date
from http.client import IncompleteRead, InvalidURL, RemoteDisconnected
from urllib.error import URLError

import pytest

from esetracker.schemas import CourseConfig, Settings
from esetracker.tracker import loader as loader_module
from esetracker.tracker.errors import SourceUnavailable
from esetracker.tracker.loader import (
    CatalogLoader,
    CatalogSource,
    EmbeddedCatalogProvider,
    JsonCatalogProvider,
    apply_course_config,
)


CATALOG_DOC = {
    "subjects": [
        {
            "id": "S1",
            "name": "Electric Circuits",
            "startDate": "2025-01-01",
            "endDate": "2025-01-20",
            "totalLectures": 20,
        },
        {
            "id": "S2",
            "name": "Control Systems",
            "startDate": "2025-01-21",
            "endDate": "2025-02-20",
            "totalLectures": 30,
            "durationDays": 25,
            "category": "technical",
        },
    ],
    "courseConfig": {"startDate": "2025-01-01", "endDate": "2025-06-30"},
    "categoryColors": {"technical": "#6366f1"},
}


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "subjects.json"
    path.write_text(json.dumps(CATALOG_DOC), encoding="utf-8")
    return path


class FakeResponse:
    def __init__(self, body: bytes):
        self.body = body

    def read(self):
        return self.body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class TestJsonCatalogProvider:

    def test_reads_file(self, catalog_file):
        catalog = JsonCatalogProvider(catalog_file).fetch()
        assert [s.id for s in catalog.subjects] == ["S1", "S2"]
        assert catalog.subjects[1].duration_days == 25
        assert catalog.course_config.end_date == date(2025, 6, 30)
        assert catalog.category_colors == {"technical": "#6366f1"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceUnavailable, match="file not found"):
            JsonCatalogProvider(tmp_path / "nope.json").fetch()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "subjects.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(SourceUnavailable, match="invalid JSON"):
            JsonCatalogProvider(path).fetch()

    def test_invalid_schema(self, tmp_path):
        doc = {"subjects": [{"id": "S1", "name": "x", "startDate": "2025-01-01",
                             "endDate": "2025-01-02", "totalLectures": 0}]}
        path = tmp_path / "subjects.json"
        path.write_text(json.dumps(doc), encoding="utf-8")
        with pytest.raises(SourceUnavailable, match="invalid catalog"):
            JsonCatalogProvider(path).fetch()

    def test_null_sections_read_as_empty(self, tmp_path):
        path = tmp_path / "subjects.json"
        path.write_text('{"subjects": null, "courseConfig": null, "categoryColors": null}', encoding="utf-8")
        catalog = JsonCatalogProvider(path).fetch()
        assert catalog.subjects == []
        assert catalog.course_config.start_date is None
        assert catalog.category_colors == {}

    def test_non_object_document(self, tmp_path):
        path = tmp_path / "subjects.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(SourceUnavailable):
            JsonCatalogProvider(path).fetch()

    def test_remote_fetch(self, monkeypatch):
        body = json.dumps(CATALOG_DOC).encode("utf-8")
        monkeypatch.setattr(loader_module, "urlopen", lambda req, timeout: FakeResponse(body))
        catalog = JsonCatalogProvider("https://example.org/subjects.json").fetch()
        assert len(catalog.subjects) == 2

    def test_remote_failure(self, monkeypatch):
        def fail(req, timeout):
            raise URLError("connection refused")

        monkeypatch.setattr(loader_module, "urlopen", fail)
        with pytest.raises(SourceUnavailable, match="fetch failed"):
            JsonCatalogProvider("http://localhost:9/subjects.json").fetch()


    @pytest.mark.parametrize("error", [
        ConnectionResetError("connection reset by peer"),
        RemoteDisconnected("Remote end closed connection without response"),
        IncompleteRead(b"{\"subj"),
        InvalidURL("nonnumeric port"),
    ])
    def test_dropped_connection_is_unavailable(self, monkeypatch, error):
        def fail(req, timeout):
            raise error

        monkeypatch.setattr(loader_module, "urlopen", fail)
        with pytest.raises(SourceUnavailable, match="fetch failed"):
            JsonCatalogProvider("http://localhost:9/subjects.json").fetch()

    def test_failed_read_falls_back(self, monkeypatch):
        class DroppedResponse(FakeResponse):
            def read(self):
                raise ConnectionResetError("connection reset by peer")

        monkeypatch.setattr(loader_module, "urlopen", lambda req, timeout: DroppedResponse(b""))
        result = CatalogLoader.default("https://example.org/subjects.json").load()
        assert result.source == CatalogSource.FALLBACK
        assert len(result.catalog.subjects) > 0


class TestEmbeddedCatalogProvider:

    def test_bundled_catalog_loads(self):
        catalog = EmbeddedCatalogProvider().fetch()
        assert len(catalog.subjects) > 0
        assert len({s.id for s in catalog.subjects}) == len(catalog.subjects)
        assert catalog.course_config.start_date is not None

    def test_custom_data_dir(self, tmp_path):
        (tmp_path / "mini.yaml").write_text(
            "subjects:\n"
            "  - id: a\n"
            "    name: A\n"
            "    startDate: '2025-01-01'\n"
            "    endDate: '2025-01-05'\n"
            "    totalLectures: 4\n",
            encoding="utf-8",
        )
        catalog = EmbeddedCatalogProvider("mini", data_dir=tmp_path).fetch()
        assert catalog.subjects[0].id == "a"

    def test_missing_resource(self, tmp_path):
        with pytest.raises(SourceUnavailable):
            EmbeddedCatalogProvider("missing", data_dir=tmp_path).fetch()


class TestCatalogLoader:

    def test_primary_source(self, catalog_file):
        result = CatalogLoader.default(catalog_file).load()
        assert result.source == CatalogSource.PRIMARY
        assert not result.used_fallback
        assert result.failures == []
        assert len(result.catalog.subjects) == 2

    def test_falls_back_to_embedded(self, tmp_path):
        result = CatalogLoader.default(tmp_path / "missing.json").load()
        assert result.source == CatalogSource.FALLBACK
        assert result.used_fallback
        assert result.provider.startswith("embedded:")
        assert len(result.failures) == 1
        assert len(result.catalog.subjects) > 0

    def test_all_sources_fail_gives_empty_catalog(self, tmp_path):
        loader = CatalogLoader([
            JsonCatalogProvider(tmp_path / "missing.json"),
            EmbeddedCatalogProvider("missing", data_dir=tmp_path),
        ])
        result = loader.load()
        assert result.source == CatalogSource.EMPTY
        assert result.catalog.subjects == []
        assert result.catalog.category_colors == {}
        assert len(result.failures) == 2

    def test_no_providers(self):
        assert CatalogLoader([]).load().source == CatalogSource.EMPTY


class TestApplyCourseConfig:

    def test_overrides_both_dates(self):
        settings = apply_course_config(
            Settings(),
            CourseConfig(start_date=date(2025, 1, 1), end_date=date(2025, 6, 30)),
        )
        assert settings.start_date == date(2025, 1, 1)
        assert settings.end_date == date(2025, 6, 30)

    def test_absent_dates_keep_current(self):
        base = Settings(start_date=date(2025, 2, 1), end_date=date(2025, 9, 1))
        settings = apply_course_config(base, CourseConfig(end_date=date(2025, 12, 1)))
        assert settings.start_date == date(2025, 2, 1)
        assert settings.end_date == date(2025, 12, 1)
        assert base.end_date == date(2025, 9, 1)
