"""
Navigator - Application object tying catalog, progress and session state.

Provides:
- Startup sequencing (catalog, then settings, then progress)
- Dashboard figures (overview, schedule, overall percentage)
- Filtered/paginated subject listing and chip ordering
- Selection-aware logging, settings edits, export and import
"""

import logging
from datetime import date
from typing import Mapping, Optional

from esetracker.config import TrackerConfig
from esetracker.schemas import Catalog, Settings, Subject

from . import selection
from .aggregate import Overview, overall_percentage, overview, today_schedule
from .loader import CatalogLoader, CatalogLoadResult, CatalogSource, apply_course_config
from .pacing import SubjectPace, course_day_number, course_days_remaining, pace
from .progress import ImportResult, LogResult, ProgressLoadResult, ProgressStore
from .selection import Page, SessionState, SubjectFilter


logger = logging.getLogger(__name__)


class Navigator:
    """
    Owns the loaded catalog, the progress store and the session state.

    Session transitions go through the pure functions in `selection`; the
    navigator only keeps the latest state.
    """

    def __init__(
        self,
        catalog: Catalog,
        store: ProgressStore,
        state: Optional[SessionState] = None,
    ):
        self.catalog = catalog
        self.store = store
        self.state = state or SessionState()
        self.catalog_result: Optional[CatalogLoadResult] = None
        self.progress_result: Optional[ProgressLoadResult] = None

    @classmethod
    def bootstrap(
        cls,
        config: TrackerConfig,
        loader: Optional[CatalogLoader] = None,
    ) -> "Navigator":
        """
        Load everything in order: the catalog first (progress reconciliation
        needs the subjects), then persisted progress.
        """
        loader = loader or CatalogLoader.default(config.catalog_source)
        catalog_result = loader.load()
        catalog = catalog_result.catalog

        settings = apply_course_config(Settings(), catalog.course_config)
        store = ProgressStore(
            local_db_path=config.state_db,
            primary_path=config.progress_file,
            snapshot_path=config.export_path,
            settings=settings,
        )
        progress_result = store.load()
        store.initialize(catalog.subjects)

        navigator = cls(catalog, store)
        navigator.catalog_result = catalog_result
        navigator.progress_result = progress_result
        logger.info(
            f"Tracker ready: {len(catalog.subjects)} subjects "
            f"(catalog: {catalog_result.source.value}, progress: {progress_result.source.value})"
        )
        return navigator

    # -------------------------------------------------------------------------
    # Catalog access
    # -------------------------------------------------------------------------

    @property
    def subjects(self) -> list[Subject]:
        return self.catalog.subjects

    @property
    def settings(self) -> Settings:
        return self.store.settings

    @property
    def category_colors(self) -> dict:
        return self.catalog.category_colors

    @property
    def catalog_source(self) -> CatalogSource:
        return self.catalog_result.source if self.catalog_result else CatalogSource.PRIMARY

    def get_subject(self, subject_id: Optional[str]) -> Optional[Subject]:
        if not subject_id:
            return None
        return self.catalog.get_subject(subject_id)

    def pace_for(self, subject: Subject, today: Optional[date] = None) -> SubjectPace:
        return pace(subject, self.store.progress_for(subject), today)

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    def overview(self, today: Optional[date] = None) -> Overview:
        return overview(self.subjects, self.store.progress, today)

    def overall_percentage(self) -> int:
        return overall_percentage(self.subjects, self.store.progress)

    def today_schedule(self, today: Optional[date] = None) -> list[SubjectPace]:
        return today_schedule(self.subjects, self.store.progress, today)

    def course_days_remaining(self, today: Optional[date] = None) -> int:
        return course_days_remaining(self.settings, today)

    def course_day_number(self, today: Optional[date] = None) -> int:
        return course_day_number(self.settings, today)

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def filtered_subjects(self, today: Optional[date] = None) -> list[Subject]:
        return selection.filtered_subjects(
            self.subjects, self.state.filter, self.state.search_query, today
        )

    def current_page(self, today: Optional[date] = None) -> Page:
        """
        Current page of the filtered listing.

        If the filtered set shrank below the current page, the stored page
        number is clamped as well.
        """
        page = selection.paginate(
            self.filtered_subjects(today), self.state.current_page, self.state.page_size
        )
        if page.page != self.state.current_page:
            self.state = selection.go_to_page(self.state, page.page)
        return page

    def chips(self, today: Optional[date] = None) -> list[SubjectPace]:
        return [self.pace_for(s, today) for s in selection.chip_order(self.subjects, today)]

    def preview(self, today: Optional[date] = None) -> Optional[SubjectPace]:
        """Pacing for the selected subject, if any."""
        subject = self.get_subject(self.state.selected_subject_id)
        if subject is None:
            return None
        return self.pace_for(subject, today)

    # -------------------------------------------------------------------------
    # Session transitions
    # -------------------------------------------------------------------------

    def set_filter(self, subject_filter: SubjectFilter | str):
        self.state = selection.set_filter(self.state, subject_filter)

    def set_search(self, query: str):
        self.state = selection.set_search(self.state, query)

    def select(self, subject_id: Optional[str]):
        self.state = selection.select(self.state, subject_id)

    def toggle_selection(self, subject_id: str):
        self.state = selection.toggle_selection(self.state, subject_id)

    def picker_options(self, today: Optional[date] = None) -> list[str]:
        """Subject IDs in picker order, shared by the selectbox and the arrows."""
        return selection.select_options(self.subjects, today)

    def step_selection(self, step: int, today: Optional[date] = None):
        options = self.picker_options(today)
        self.state = selection.select(
            self.state, selection.step_selection(options, self.state.selected_subject_id, step)
        )

    def go_to_page(self, page: int):
        self.state = selection.go_to_page(self.state, page)

    def next_page(self, today: Optional[date] = None):
        pages = selection.total_pages(len(self.filtered_subjects(today)), self.state.page_size)
        self.state = selection.next_page(self.state, pages)

    def prev_page(self):
        self.state = selection.prev_page(self.state)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def log(self, subject_id: Optional[str], count: int) -> LogResult:
        return self.store.log(subject_id, count)

    def log_selected(self, count: int) -> LogResult:
        """Log against the selected subject, then clear the selection."""
        result = self.store.log(self.state.selected_subject_id, count)
        self.state = selection.clear_selection(self.state)
        return result

    def save_settings(
        self,
        targets: Mapping[str, int],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ):
        self.store.save_settings(targets, start_date, end_date)

    def export(self) -> bytes:
        return self.store.export()

    def import_snapshot(self, blob: bytes | str) -> ImportResult:
        """
        Import a snapshot and reload dependent state: targets are re-synced
        from the catalog and the session starts fresh.
        """
        result = self.store.import_snapshot(blob)
        if result.reload_required:
            self.reload()
        return result

    def reload(self):
        self.store.initialize(self.subjects)
        self.state = SessionState()
