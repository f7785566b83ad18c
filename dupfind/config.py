"""Load ~/.dupfind.config (TOML) with env-var overrides."""
from __future__ import annotations
import os
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]  # Python < 3.11 backport
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from dupfind.errors import ConfigError
from dupfind.exclusions import DEFAULT_IGNORE_DIRS


class Config(BaseModel):
    storage_location: str = str(Path.home() / ".dupfind.duckdb")
    search_path: str = "."
    result_output_path: str = "dupfind-result.csv"
    concurrency_limit: int = Field(default=10, ge=1)
    ignore_dirs: list[str] = Field(default_factory=lambda: sorted(DEFAULT_IGNORE_DIRS))


# Env var -> config key
_ENV_OVERRIDES = {
    "DUPFIND_DB_PATH": "storage_location",
    "DUPFIND_SEARCH_PATH": "search_path",
    "DUPFIND_RESULT_PATH": "result_output_path",
    "DUPFIND_CONCURRENCY": "concurrency_limit",
}


def get_config_path() -> Path:
    # Config file resolution order:
    #   1. DUPFIND_CONFIG_PATH env var
    #   2. ~/.dupfind.config
    if "DUPFIND_CONFIG_PATH" in os.environ:
        return Path(os.environ["DUPFIND_CONFIG_PATH"])
    return Path.home() / ".dupfind.config"


def load_config() -> Config:
    values: dict[str, Any] = {}

    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                values.update(tomllib.load(f))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"{config_path}: {e}") from e

    for env_var, key in _ENV_OVERRIDES.items():
        if val := os.environ.get(env_var):
            values[key] = val

    try:
        return Config.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}") from e


# Module-level singleton, loaded once per process
_config: Config | None = None


def get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config
