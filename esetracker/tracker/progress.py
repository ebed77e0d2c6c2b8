"""
ProgressStore - Per-subject lecture counters and course settings.

Persistence is two-tier:
- Primary: a read-only JSON snapshot (e.g. a progress.json shipped next to
  the catalog). Used at startup when it holds any progress.
- Local: a SQLite key-value store in ~/.esetracker/state.db. Always writable;
  every mutation is written here.

Every save also refreshes a downloadable JSON snapshot
({progress, settings, lastUpdated}) next to the local database.
"""

import json
import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

import pydantic

from esetracker.config import DEFAULT_STATE_DB
from esetracker.schemas import ProgressSnapshot, Settings, Subject, SubjectProgress

from .aggregate import progress_or_default
from .errors import FormatError, SourceUnavailable, ValidationError


logger = logging.getLogger(__name__)

SNAPSHOT_FILENAME = "ese-study-tracker-progress.json"
STATE_KEY = "eseStudyTrackerState"


class ProgressSource(str, Enum):
    PRIMARY = "primary"
    LOCAL = "local"
    EMPTY = "empty"


@dataclass
class ProgressLoadResult:
    source: ProgressSource
    failures: list[SourceUnavailable] = field(default_factory=list)


@dataclass(frozen=True)
class LogResult:
    """Feedback for a successful log: subject, requested count, new total."""
    subject: Subject
    count: int
    completed: int
    clamped: bool


@dataclass(frozen=True)
class ImportResult:
    subject_count: int
    settings: Settings
    reload_required: bool = True


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_snapshot(blob: bytes | str) -> ProgressSnapshot:
    """
    Parse a {progress, settings} document.

    Raises:
        FormatError: If the payload is not UTF-8 JSON of the expected shape
    """
    try:
        text = blob.decode("utf-8") if isinstance(blob, (bytes, bytearray)) else blob
        document = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise FormatError(f"Not a valid JSON document: {e}") from e

    if not isinstance(document, dict):
        raise FormatError("Backup must be a JSON object")

    # A null or missing progress map means "no progress"
    if document.get("progress") is None:
        document = {**document, "progress": {}}

    try:
        return ProgressSnapshot.model_validate(document)
    except pydantic.ValidationError as e:
        raise FormatError(f"Invalid backup: {e.error_count()} validation errors") from e


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


# -----------------------------------------------------------------------------
# Local SQLite store
# -----------------------------------------------------------------------------

class LocalStateStore:
    """Small key-value table in SQLite, one JSON payload per key."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else DEFAULT_STATE_DB
        self._ensure_database()

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS app_state (
                    key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def read(self, key: str) -> Optional[str]:
        conn = self._get_connection()
        try:
            cursor = conn.execute("SELECT payload FROM app_state WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row["payload"] if row else None
        finally:
            conn.close()

    def write(self, key: str, payload: str):
        conn = self._get_connection()
        try:
            now = datetime.now().isoformat()
            conn.execute(
                """INSERT INTO app_state (key, payload, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                     payload = excluded.payload,
                     updated_at = excluded.updated_at""",
                (key, payload, now)
            )
            conn.commit()
        finally:
            conn.close()


# -----------------------------------------------------------------------------
# Progress store
# -----------------------------------------------------------------------------

class ProgressStore:
    """
    Owns the progress map and settings.

    The catalog passed to initialize() is the source of truth for lecture
    targets; recorded completion survives catalog reloads.
    """

    def __init__(
        self,
        local_db_path: Optional[Path] = None,
        primary_path: Optional[Path] = None,
        snapshot_path: Optional[Path] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Initialize the store.

        Args:
            local_db_path: SQLite state database (default: ~/.esetracker/state.db)
            primary_path: Optional read-only progress.json tried first on load
            snapshot_path: Downloadable snapshot file (default: next to the database)
            settings: Starting settings (defaults overlaid with course config)
            clock: Timestamp source for snapshots
        """
        self.local = LocalStateStore(local_db_path)
        self.primary_path = Path(primary_path) if primary_path else None
        self.snapshot_path = Path(snapshot_path) if snapshot_path else self.local.db_path.parent / SNAPSHOT_FILENAME
        self.settings = settings or Settings()
        self.progress: dict[str, SubjectProgress] = {}
        self.clock = clock
        self.last_snapshot: Optional[dict] = None
        self._subjects: dict[str, Subject] = {}

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _read_primary(self) -> ProgressSnapshot:
        name = f"primary:{self.primary_path}"
        if not self.primary_path.exists():
            raise SourceUnavailable(name, "file not found")
        try:
            return parse_snapshot(self.primary_path.read_bytes())
        except OSError as e:
            raise SourceUnavailable(name, f"read failed: {e}") from e
        except FormatError as e:
            raise SourceUnavailable(name, str(e)) from e

    def _read_local(self) -> Optional[ProgressSnapshot]:
        name = f"local:{self.local.db_path}"
        try:
            payload = self.local.read(STATE_KEY)
        except sqlite3.Error as e:
            raise SourceUnavailable(name, f"read failed: {e}") from e
        if payload is None:
            return None
        try:
            return parse_snapshot(payload)
        except FormatError as e:
            raise SourceUnavailable(name, str(e)) from e

    def _apply(self, snapshot: ProgressSnapshot):
        progress = {sid: entry.model_copy() for sid, entry in snapshot.progress.items()}
        for entry in progress.values():
            entry.clamp()
        self.progress = progress
        if snapshot.settings is not None:
            self.settings = snapshot.settings.model_copy()

    def load(self) -> ProgressLoadResult:
        """
        Restore persisted state.

        The primary snapshot wins when it holds any progress; otherwise the
        local store is used. Unreadable sources are skipped.
        """
        failures: list[SourceUnavailable] = []

        if self.primary_path is not None:
            try:
                snapshot = self._read_primary()
            except SourceUnavailable as e:
                logger.info(f"Primary progress source skipped: {e}")
                failures.append(e)
            else:
                if snapshot.progress:
                    self._apply(snapshot)
                    logger.info(f"Restored progress for {len(self.progress)} subjects from {self.primary_path}")
                    return ProgressLoadResult(ProgressSource.PRIMARY, failures)

        try:
            snapshot = self._read_local()
        except SourceUnavailable as e:
            logger.warning(f"Local progress source unreadable: {e}")
            failures.append(e)
            snapshot = None

        if snapshot is not None:
            self._apply(snapshot)
            logger.info(f"Restored progress for {len(self.progress)} subjects from local state")
            return ProgressLoadResult(ProgressSource.LOCAL, failures)

        return ProgressLoadResult(ProgressSource.EMPTY, failures)

    def initialize(self, subjects: Sequence[Subject]):
        """
        Reconcile progress with the catalog.

        Missing entries are created; existing entries take the subject's
        current total_lectures and keep their completed count.
        """
        self._subjects = {subject.id: subject for subject in subjects}
        for subject in subjects:
            entry = self.progress.get(subject.id)
            if entry is None:
                self.progress[subject.id] = SubjectProgress(
                    completed=0, total_lectures=subject.total_lectures
                )
            else:
                entry.total_lectures = subject.total_lectures
                entry.clamp()
        self.save()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def snapshot(self, with_timestamp: bool = False) -> ProgressSnapshot:
        """Copy of the current state as a snapshot document."""
        return ProgressSnapshot(
            progress={sid: entry.model_copy() for sid, entry in self.progress.items()},
            settings=self.settings.model_copy(),
            last_updated=self.clock() if with_timestamp else None,
        )

    def save(self):
        """Write state to the local store and refresh the downloadable snapshot."""
        state = self.snapshot().to_json_dict()
        self.local.write(STATE_KEY, json.dumps(state, ensure_ascii=False))
        self._refresh_snapshot()

    def _refresh_snapshot(self):
        document = self.snapshot(with_timestamp=True).to_json_dict()
        self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.snapshot_path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        self.last_snapshot = document

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, subject_id: str) -> Optional[SubjectProgress]:
        return self.progress.get(subject_id)

    def progress_for(self, subject: Subject) -> SubjectProgress:
        """Stored entry, or an unsaved default for subjects not seen yet."""
        return progress_or_default(subject, self.progress)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def log(self, subject_id: Optional[str], count: int) -> LogResult:
        """
        Record `count` completed lectures for a subject.

        Raises:
            ValidationError: No subject, unknown subject, or count < 1
        """
        if not subject_id:
            raise ValidationError("Select a subject first")
        subject = self._subjects.get(subject_id)
        if subject is None:
            raise ValidationError(f"Unknown subject: {subject_id}")
        if not _is_positive_int(count):
            raise ValidationError(f"Lecture count must be a positive integer, got {count!r}")

        entry = self.progress.get(subject_id)
        if entry is None:
            entry = SubjectProgress(completed=0, total_lectures=subject.total_lectures)
            self.progress[subject_id] = entry

        entry.completed += count
        clamped = entry.completed > entry.total_lectures
        entry.clamp()
        self.save()

        logger.info(f"Logged {count} lectures for {subject_id} ({entry.completed}/{entry.total_lectures})")
        return LogResult(subject=subject, count=count, completed=entry.completed, clamped=clamped)

    def edit_target(self, subject_id: str, total_lectures: int):
        """
        Set a subject's lecture target. Does not persist.

        Raises:
            ValidationError: Empty subject ID or target < 1
        """
        if not subject_id:
            raise ValidationError("Subject ID is required")
        if not _is_positive_int(total_lectures):
            raise ValidationError(
                f"Target for {subject_id} must be a positive integer, got {total_lectures!r}"
            )

        entry = self.progress.get(subject_id)
        if entry is None:
            self.progress[subject_id] = SubjectProgress(completed=0, total_lectures=total_lectures)
        else:
            entry.total_lectures = total_lectures
            entry.clamp()

    def save_settings(
        self,
        targets: Mapping[str, int],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ):
        """
        Bulk settings edit: all targets are validated before any is applied,
        then state is saved once.
        """
        for subject_id, total in targets.items():
            if not subject_id or not _is_positive_int(total):
                raise ValidationError(f"Target for {subject_id} must be a positive integer, got {total!r}")

        for subject_id, total in targets.items():
            self.edit_target(subject_id, total)

        updates = {}
        if start_date is not None:
            updates["start_date"] = start_date
        if end_date is not None:
            updates["end_date"] = end_date
        if updates:
            self.settings = self.settings.model_copy(update=updates)

        self.save()
        logger.info(f"Saved settings ({len(targets)} targets)")

    # -------------------------------------------------------------------------
    # Export / Import
    # -------------------------------------------------------------------------

    def export(self) -> bytes:
        """Full snapshot as pretty-printed UTF-8 JSON."""
        document = self.snapshot(with_timestamp=True).to_json_dict()
        return json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")

    def import_snapshot(self, blob: bytes | str) -> ImportResult:
        """
        Replace progress and settings from an exported snapshot.

        The payload is fully parsed before anything changes, so a rejected
        import leaves state untouched.

        Raises:
            FormatError: If the payload is not a valid snapshot
        """
        snapshot = parse_snapshot(blob)
        self._apply(snapshot)
        self.save()

        logger.info(f"Imported progress for {len(self.progress)} subjects")
        return ImportResult(subject_count=len(self.progress), settings=self.settings)
