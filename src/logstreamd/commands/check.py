"""Validate a single stream reader file."""

from __future__ import annotations

import json
from pathlib import Path

from ..errors import ConfigLoadError
from ..io import die, say
from ..loader import load_record
from ..worker import NullStreamReader


def check_file(args: object) -> None:
    """Print the prepared configuration of ``args.path`` as JSON."""
    path = Path(getattr(args, "path"))
    try:
        maker = load_record(path, worker_factory=NullStreamReader)
        payload = {
            "name": maker.name,
            "type": maker.plugin_type,
            "config": maker.prepare_config().model_dump(),
            "common": maker.prepare_common_config().model_dump(),
        }
    except ConfigLoadError as exc:
        die(ConfigLoadError(f"{path}: {exc}", recovery_hint=exc.recovery_hint))
    say(json.dumps(payload, indent=2, sort_keys=True))
