"""Utility modules for persistmap.

- **errors** -- Exception hierarchy rooted at PersistMapError; adapter
  failures on awaited paths surface as AdapterError with the adapter's name.
- **logging** -- opt-in structlog setup with coloured console output in development
  and structured JSON in production.
"""

from persistmap.utils.errors import (
    AdapterError,
    ConfigurationError,
    InvalidArgumentError,
    PersistMapError,
)
from persistmap.utils.logging import configure_logging, configure_logging_from_config, get_logger

__all__ = [
    "AdapterError",
    "ConfigurationError",
    "InvalidArgumentError",
    "PersistMapError",
    "configure_logging",
    "configure_logging_from_config",
    "get_logger",
]
