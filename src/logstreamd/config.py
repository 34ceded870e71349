"""Configuration helpers for the logstreamd daemon.

This module reads the optional daemon settings file, validates it with
Pydantic models, and applies CLI overrides.

Example:
    >>> from logstreamd.config import resolve_settings
    >>> resolve_settings(None, ticker_interval=60).ticker_interval
    60
"""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from . import paths
from .errors import SettingsError
from .models import DirectoryInputConfig

SETTINGS_TABLE = "logstreamd"


def load_toml(path: Path) -> dict | None:
    """Load a TOML file if it exists.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed payload as a dict, or ``None`` if the file does not exist.

    Raises:
        SettingsError: If the file cannot be read or parsed.

    Example:
        >>> from pathlib import Path
        >>> load_toml(Path("missing.toml")) is None
        True
    """
    if not path.exists():
        return None
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise SettingsError(f"cannot read settings file {path}: {exc}") from exc


def parse_directory_input_config(
    payload: dict, source: Path | str | None = None
) -> DirectoryInputConfig:
    """Validate a daemon settings payload."""
    try:
        return DirectoryInputConfig.model_validate(payload)
    except ValidationError as exc:
        location = f" at {source}" if source else ""
        raise SettingsError(f"invalid logstreamd settings{location}:\n{exc}") from exc


def load_settings(path: Path | None) -> DirectoryInputConfig:
    """Load daemon settings from the ``[logstreamd]`` table of ``path``.

    A missing path or missing table yields the defaults. An explicitly
    requested file that does not exist is an error.
    """
    if path is None:
        return DirectoryInputConfig()
    payload = load_toml(path)
    if payload is None:
        raise SettingsError(
            f"settings file not found: {path}",
            recovery_hint="pass an existing file to --config or omit it",
        )
    table = payload.get(SETTINGS_TABLE, {})
    if not isinstance(table, dict):
        raise SettingsError(f"[{SETTINGS_TABLE}] in {path} must be a table")
    return parse_directory_input_config(table, path)


def resolve_settings(
    path: Path | None,
    *,
    logstreamer_dir: str | None = None,
    ticker_interval: int | None = None,
    share_dir: str | None = None,
    worker_factory: str | None = None,
    max_workers: int | None = None,
) -> DirectoryInputConfig:
    """Load settings and apply non-empty CLI overrides on top."""
    settings = load_settings(path)
    overrides = {
        "logstreamer_dir": logstreamer_dir,
        "ticker_interval": ticker_interval,
        "share_dir": share_dir,
        "worker_factory": worker_factory,
        "max_workers": max_workers,
    }
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return settings
    merged = {**settings.model_dump(), **updates}
    return parse_directory_input_config(merged, "command line")


def resolve_logstreamer_dir(settings: DirectoryInputConfig) -> Path:
    """Return the absolute directory tree to scan for ``settings``."""
    return paths.prepend_share_dir(settings.logstreamer_dir, settings.share_dir)
