"""ESE Study Tracker utilities."""

from .numbers import round_half_up
from .yaml_loader import load_yaml_resource, get_available_resources, DATA_DIR

__all__ = ["round_half_up", "load_yaml_resource", "get_available_resources", "DATA_DIR"]
