"""Unit tests for the persistmap exception hierarchy and logging setup."""

from __future__ import annotations

import logging
import subprocess
import sys

import pytest
import structlog

from persistmap.utils.errors import (
    AdapterError,
    ConfigurationError,
    InvalidArgumentError,
    PersistMapError,
)
from persistmap.utils.logging import configure_logging, configure_logging_from_config, get_logger


class TestErrors:
    def test_provider_prefix(self) -> None:
        err = AdapterError("database is locked", provider_name="sqlite")
        assert str(err) == "[sqlite] database is locked"
        assert err.message == "database is locked"
        assert err.provider_name == "sqlite"

    def test_without_provider(self) -> None:
        assert str(ConfigurationError("no adapter")) == "no adapter"

    def test_default_messages(self) -> None:
        assert AdapterError().message == "Backing store operation failed"
        assert InvalidArgumentError().message == "Invalid argument"

    @pytest.mark.parametrize("cls", [AdapterError, ConfigurationError, InvalidArgumentError])
    def test_all_inherit_base(self, cls) -> None:
        assert issubclass(cls, PersistMapError)

    def test_invalid_argument_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            raise InvalidArgumentError("bad count")


class TestLogging:
    def test_get_logger_leaves_global_config_alone(self) -> None:
        structlog.reset_defaults()
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        get_logger("persistmap.test").info("test_event", key="k")
        assert not structlog.is_configured()
        assert root.handlers == handlers
        assert root.level == level

    def test_import_keeps_host_root_logger(self) -> None:
        script = (
            "import logging, sys\n"
            "host = logging.StreamHandler(sys.stderr)\n"
            "root = logging.getLogger()\n"
            "root.addHandler(host)\n"
            "root.setLevel(logging.WARNING)\n"
            "import persistmap\n"
            "assert root.handlers == [host], root.handlers\n"
            "assert root.level == logging.WARNING, root.level\n"
        )
        result = subprocess.run([sys.executable, "-c", script], capture_output=True, text=True)
        assert result.returncode == 0, result.stderr

    def test_configure_logging_json(self) -> None:
        logger = configure_logging("DEBUG", json_output=True)
        assert structlog.is_configured()
        logger.debug("json_event", key="k")

    def test_configure_logging_from_config(self) -> None:
        configure_logging_from_config({"logging": {"level": "WARNING", "json_output": True}})
        assert logging.getLogger().level == logging.WARNING
        configure_logging_from_config({})
        assert logging.getLogger().level == logging.INFO
