"""ESE Study Tracker - lecture pacing and progress tracking."""

__version__ = "0.1.0"
