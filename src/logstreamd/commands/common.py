"""Helpers shared by the logstreamd commands."""

from __future__ import annotations

from pathlib import Path

from .. import config
from ..models import DirectoryInputConfig


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


def settings_from_args(args: object) -> DirectoryInputConfig:
    """Resolve daemon settings from parsed command arguments.

    Raises:
        SettingsError: If the settings file or an override is invalid.
    """
    config_path = getattr(args, "config", None)
    return config.resolve_settings(
        Path(config_path) if config_path is not None else None,
        logstreamer_dir=_optional_str(getattr(args, "dir", None)),
        ticker_interval=getattr(args, "interval", None),
        share_dir=_optional_str(getattr(args, "share_dir", None)),
        worker_factory=getattr(args, "worker_factory", None),
        max_workers=getattr(args, "max_workers", None),
    )
