"""Configuration schema, loading and persistence for nodesize."""

from .loader import ConfigStore, load_sizing_config
from .schema import NUMERIC_SETTINGS, SizingConfig

__all__ = [
    "ConfigStore",
    "NUMERIC_SETTINGS",
    "SizingConfig",
    "load_sizing_config",
]
