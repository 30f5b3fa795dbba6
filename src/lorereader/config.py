"""YAML configuration loading.

The CLI reads archive, parser and logging settings from one YAML file,
checked against the pydantic models in config_schema. The parsed result is
cached for the life of the process. Library code (parsers, client,
session) never consults the cache; it receives its settings as arguments.

Lookup order for the file:
    1. An explicit path (``--config`` or a function argument)
    2. $LOREREADER_CONFIG_PATH
    3. config/config.yaml in the working directory, if present
    4. Built-in defaults

Usage:
    from lorereader.config import get_config

    archive = get_config().archive
    client = ArchiveClient(archive.base_url, timeout=archive.timeout_seconds)
"""

import os
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from lorereader.config_schema import CURRENT_SCHEMA_VERSION, AppConfig
from lorereader.core.errors import ConfigLoadError, ConfigValidationError
from lorereader.core.logging import get_logger

logger = get_logger(__name__)

CONFIG_PATH_ENV = "LOREREADER_CONFIG_PATH"
DEFAULT_CONFIG_PATH = Path("config/config.yaml")

_lock = threading.Lock()
_cached: AppConfig | None = None


def resolve_config_path(path: Path | None = None) -> tuple[Path, bool]:
    """Pick the config file to read.

    Returns:
        (path, explicit): explicit is False only for the implicit default,
        which may be absent
    """
    if path is not None:
        return path, True
    from_env = os.environ.get(CONFIG_PATH_ENV)
    if from_env:
        return Path(from_env), True
    return DEFAULT_CONFIG_PATH, False


def describe_validation_error(error: ValidationError) -> str:
    """One indented line per failing field, dotted path first."""
    lines = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<root>"
        if detail["type"] == "missing":
            lines.append(f"  - {location}: required but not set")
        else:
            lines.append(f"  - {location}: {detail['msg']}")
    return "\n".join(lines)


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML mapping from disk.

    An empty file reads as an empty mapping.

    Raises:
        ConfigLoadError: If the file is missing, is not YAML, or is not a mapping
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigLoadError(
            f"Config file {path} not found. "
            f"Create it, or unset {CONFIG_PATH_ENV} to run with defaults."
        ) from e
    except OSError as e:
        raise ConfigLoadError(f"Cannot read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Config file {path} is not valid YAML:\n{e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            f"Config file {path} must hold a YAML mapping at the top level, "
            f"found {type(data).__name__}"
        )
    return data


def parse_config(data: dict[str, Any], source: Path | str = "<memory>") -> AppConfig:
    """Build an AppConfig from already-parsed YAML.

    Raises:
        ConfigValidationError: If a field is invalid or the schema is too new
    """
    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(
            f"Invalid settings in {source}:\n{describe_validation_error(e)}"
        ) from e

    if config.schema_version > CURRENT_SCHEMA_VERSION:
        raise ConfigValidationError(
            f"{source} declares schema_version {config.schema_version}, but this "
            f"lorereader only understands up to {CURRENT_SCHEMA_VERSION}. "
            "Upgrade lorereader or lower schema_version."
        )
    return config


def load_config(path: Path | None = None) -> AppConfig:
    """Read and validate a config file without touching the cache.

    Args:
        path: File to read; defaults to $LOREREADER_CONFIG_PATH, then
            config/config.yaml

    Raises:
        ConfigLoadError: If the file cannot be read
        ConfigValidationError: If its contents are invalid
    """
    config_path, _ = resolve_config_path(path)
    config = parse_config(read_config_file(config_path), config_path)
    logger.info(
        "Loaded config",
        path=str(config_path),
        base_url=config.archive.base_url,
        lookback=config.parser.nesting_lookback,
    )
    return config


def get_config() -> AppConfig:
    """Cached process-wide config, loaded on first use.

    Falls back to built-in defaults only when no path was given through
    the environment and config/config.yaml does not exist.
    """
    global _cached

    with _lock:
        if _cached is None:
            config_path, explicit = resolve_config_path()
            if explicit or config_path.exists():
                _cached = load_config(config_path)
            else:
                logger.debug("No config file found, using defaults", path=str(config_path))
                _cached = AppConfig()
        return _cached


def set_config(config: AppConfig) -> None:
    """Install config as the cached instance."""
    global _cached
    with _lock:
        _cached = config


def reset_config() -> None:
    """Drop the cached instance so the next get_config() reloads."""
    global _cached
    with _lock:
        _cached = None


def validate_config_file(path: Path | None = None) -> tuple[bool, str]:
    """Check a config file and summarize it.

    Returns:
        (ok, report) where report is a summary on success or the error text
    """
    try:
        config = load_config(path)
    except ConfigLoadError as e:
        return False, f"Could not load config: {e}"
    except ConfigValidationError as e:
        return False, f"Config is invalid: {e}"

    summary = [
        f"Config OK (schema_version {config.schema_version})",
        f"  archive          {config.archive.base_url}",
        f"  timeout          {config.archive.timeout_seconds:g}s",
        f"  nesting lookback {config.parser.nesting_lookback} chars",
        f"  log level        {config.logging.level}",
    ]
    return True, "\n".join(summary)
