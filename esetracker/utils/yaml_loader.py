"""
YAML resource loader for the ESE Study Tracker.

Loads YAML documents bundled in the esetracker/data/ directory (e.g. the
embedded fallback catalog).
"""

from pathlib import Path
from typing import Any
import yaml


# Bundled data directory (inside the package)
DATA_DIR = Path(__file__).parent.parent / "data"


def load_yaml_resource(name: str, data_dir: Path | None = None) -> Any:
    """
    Load a bundled YAML document by name.

    Args:
        name: Resource name without .yaml extension (e.g., "subjects")
        data_dir: Optional custom data directory

    Returns:
        The parsed YAML document (usually a dict)

    Raises:
        FileNotFoundError: If the resource file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    dir_path = data_dir or DATA_DIR
    file_path = dir_path / f"{name}.yaml"

    if not file_path.exists():
        raise FileNotFoundError(f"Data resource not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def get_available_resources(data_dir: Path | None = None) -> list[str]:
    """List bundled YAML resources (names without extension)."""
    dir_path = data_dir or DATA_DIR
    if not dir_path.exists():
        return []
    return sorted(p.stem for p in dir_path.glob("*.yaml"))
