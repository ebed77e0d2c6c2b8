"""
Error taxonomy for the tracker runtime.

- SourceUnavailable: a catalog or persisted-state source could not be read.
  Always absorbed by the loader/store fallback chains.
- ValidationError: an invalid user request (logging, target edits). The
  operation is a no-op.
- FormatError: an import payload that is not a valid snapshot. Existing
  state is left untouched.
"""


class TrackerError(Exception):
    """Base class for tracker errors."""


class SourceUnavailable(TrackerError):
    """A data source failed to produce a usable document."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class ValidationError(TrackerError, ValueError):
    """Rejected user request."""


class FormatError(TrackerError, ValueError):
    """Import payload is not parseable as a progress snapshot."""
