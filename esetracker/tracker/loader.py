"""
CatalogLoader - Load the subject catalog from an ordered list of providers.

Providers:
- JsonCatalogProvider: subjects.json from a local path or an http(s) URL
- EmbeddedCatalogProvider: the YAML catalog bundled with the package

The loader never raises. If every provider fails, it returns an empty catalog
and reports which providers failed and why.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from http.client import HTTPException
from pathlib import Path
from typing import Any, Protocol, Sequence
from urllib.request import Request, urlopen

import pydantic
import yaml

from esetracker.schemas import Catalog, CourseConfig, Settings
from esetracker.utils import load_yaml_resource

from .errors import SourceUnavailable


logger = logging.getLogger(__name__)

FETCH_TIMEOUT_SECONDS = 10


class CatalogSource(str, Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"
    EMPTY = "empty"


@dataclass
class CatalogLoadResult:
    """Outcome of a catalog load: the catalog plus how it was obtained."""
    catalog: Catalog
    source: CatalogSource
    provider: str | None = None
    failures: list[SourceUnavailable] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return self.source == CatalogSource.FALLBACK


class CatalogProvider(Protocol):
    name: str

    def fetch(self) -> Catalog:
        """Return a catalog or raise SourceUnavailable."""
        ...


def parse_catalog(document: Any, source: str) -> Catalog:
    """Validate a decoded catalog document."""
    if not isinstance(document, dict):
        raise SourceUnavailable(source, "catalog document is not an object")
    try:
        return Catalog.model_validate(document)
    except pydantic.ValidationError as e:
        raise SourceUnavailable(source, f"invalid catalog: {e.error_count()} validation errors") from e


# -----------------------------------------------------------------------------
# Providers
# -----------------------------------------------------------------------------

class JsonCatalogProvider:
    """subjects.json from a filesystem path or an http(s) URL."""

    def __init__(self, location: str | Path, timeout: float = FETCH_TIMEOUT_SECONDS):
        self.location = str(location)
        self.timeout = timeout
        self.name = f"json:{self.location}"

    @property
    def is_remote(self) -> bool:
        return self.location.startswith(("http://", "https://"))

    def _read_text(self) -> str:
        if self.is_remote:
            # URLError, TimeoutError and dropped connections are OSErrors;
            # InvalidURL and bad UTF-8 are ValueErrors
            try:
                req = Request(self.location, headers={"Accept": "application/json"})
                with urlopen(req, timeout=self.timeout) as response:
                    return response.read().decode("utf-8")
            except (OSError, HTTPException, ValueError) as e:
                raise SourceUnavailable(self.name, f"fetch failed: {e}") from e

        path = Path(self.location)
        if not path.exists():
            raise SourceUnavailable(self.name, "file not found")
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnavailable(self.name, f"read failed: {e}") from e

    def fetch(self) -> Catalog:
        text = self._read_text()
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise SourceUnavailable(self.name, f"invalid JSON: {e}") from e
        return parse_catalog(document, self.name)


class EmbeddedCatalogProvider:
    """The catalog bundled as esetracker/data/<resource>.yaml."""

    def __init__(self, resource: str = "subjects", data_dir: Path | None = None):
        self.resource = resource
        self.data_dir = data_dir
        self.name = f"embedded:{resource}"

    def fetch(self) -> Catalog:
        try:
            document = load_yaml_resource(self.resource, self.data_dir)
        except (FileNotFoundError, yaml.YAMLError) as e:
            raise SourceUnavailable(self.name, str(e)) from e
        return parse_catalog(document, self.name)


# -----------------------------------------------------------------------------
# Loader
# -----------------------------------------------------------------------------

class CatalogLoader:
    """
    Try each provider in order and return the first catalog obtained.

    The first provider is the primary source; any later one counts as a
    fallback.
    """

    def __init__(self, providers: Sequence[CatalogProvider]):
        self.providers = list(providers)

    @classmethod
    def default(cls, primary_location: str | Path) -> "CatalogLoader":
        """Primary JSON source followed by the embedded catalog."""
        return cls([JsonCatalogProvider(primary_location), EmbeddedCatalogProvider()])

    def load(self) -> CatalogLoadResult:
        failures: list[SourceUnavailable] = []

        for index, provider in enumerate(self.providers):
            try:
                catalog = provider.fetch()
            except SourceUnavailable as e:
                logger.warning(f"Catalog source unavailable, trying next: {e}")
                failures.append(e)
                continue

            source = CatalogSource.PRIMARY if index == 0 else CatalogSource.FALLBACK
            logger.info(f"Loaded {len(catalog.subjects)} subjects from {provider.name} ({source.value})")
            return CatalogLoadResult(
                catalog=catalog,
                source=source,
                provider=provider.name,
                failures=failures,
            )

        logger.warning("No catalog source available; continuing with an empty catalog")
        return CatalogLoadResult(catalog=Catalog(), source=CatalogSource.EMPTY, failures=failures)


def apply_course_config(settings: Settings, course_config: CourseConfig) -> Settings:
    """Overlay course config dates on settings; absent dates keep the current values."""
    updates = {}
    if course_config.start_date:
        updates["start_date"] = course_config.start_date
    if course_config.end_date:
        updates["end_date"] = course_config.end_date
    return settings.model_copy(update=updates)
