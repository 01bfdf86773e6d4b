"""Configuration module -- exports Settings and load_config."""

from persistmap.config.loader import load_config
from persistmap.config.settings import Settings

__all__ = ["Settings", "load_config"]
