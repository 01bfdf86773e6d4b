"""YAML configuration loader with environment variable overrides.

Configuration is layered (later layers override earlier):

  1. config/persistmap.yaml -- static defaults checked into the host project
  2. .env file              -- local developer overrides
  3. Environment variables  -- deploy-time values

Only values that were explicitly set in the environment or ``.env`` override
the YAML file; unset fields leave the YAML (or the built-in defaults) alone.
"""

from pathlib import Path

import yaml

from persistmap.config.settings import Settings


def load_config(path: str = "config/persistmap.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file. A missing file is not an error.
        settings: Pre-built settings, mainly for tests. Read from the
                  environment when omitted.

    Returns:
        Configuration dictionary with ``map``, ``sqlite`` and ``logging`` sections.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    if settings is None:
        settings = Settings()

    defaults = {
        "map": {"fetch_all": settings.fetch_all, "ttl": settings.default_ttl},
        "sqlite": {"db_path": settings.sqlite_db_path},
        "logging": {
            "level": settings.log_level,
            "json_output": settings.app_env == "production",
        },
    }
    _deep_merge(defaults, yaml_config)

    explicit = settings.model_fields_set
    env_overrides: dict = {"map": {}, "sqlite": {}, "logging": {}}
    if "fetch_all" in explicit:
        env_overrides["map"]["fetch_all"] = settings.fetch_all
    if "default_ttl" in explicit:
        env_overrides["map"]["ttl"] = settings.default_ttl
    if "sqlite_db_path" in explicit:
        env_overrides["sqlite"]["db_path"] = settings.sqlite_db_path
    if "log_level" in explicit:
        env_overrides["logging"]["level"] = settings.log_level
    if "app_env" in explicit:
        env_overrides["logging"]["json_output"] = settings.app_env == "production"

    _deep_merge(defaults, env_overrides)
    return defaults


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
