"""Pydantic models for stream reader and directory input configuration."""

from __future__ import annotations

import re
import socket
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

STREAM_READER_TYPE = "LogstreamerInput"
DEFAULT_LOGSTREAMER_DIR = "logstreamers.d"
DEFAULT_TICKER_INTERVAL = 300
DEFAULT_WORKER_FACTORY = "logstreamd.worker:NullStreamReader"

_DURATION_UNITS = {
    "ns": (1, 1_000_000_000),
    "us": (1, 1_000_000),
    "µs": (1, 1_000_000),
    "ms": (1, 1_000),
    "s": (1, 1),
    "m": (60, 1),
    "h": (3600, 1),
}
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str | int | float) -> float:
    """Parse a Go-style duration into seconds.

    Bare numbers are read as seconds.

    Args:
        value: Duration such as ``"250ms"``, ``"1m30s"`` or ``5``.

    Returns:
        Duration in seconds.

    Raises:
        ValueError: If the value is negative or not a duration.

    Example:
        >>> parse_duration("250ms")
        0.25
        >>> parse_duration("1m30s")
        90.0
        >>> parse_duration(2)
        2.0
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"invalid duration: {value!r}")
        return float(value)
    text = value.strip()
    if not text:
        raise ValueError("invalid duration: empty string")
    if text == "0":
        return 0.0
    position = 0
    total = 0.0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != position:
            break
        number, unit = match.groups()
        multiplier, divisor = _DURATION_UNITS[unit]
        total += float(number) * multiplier / divisor
        position = match.end()
    if position != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    return total


def _validate_duration(value: object) -> object:
    if isinstance(value, str):
        normalized = value.strip()
        parse_duration(normalized)
        return normalized
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        parse_duration(value)
        return f"{value}s"
    return value


class RetryOptions(BaseModel):
    """Restart policy for a worker that fails.

    Attributes:
        max_delay: Upper bound for the backoff delay.
        delay: Initial backoff delay, doubled after each failure.
        max_retries: Retry budget; ``-1`` retries forever.

    Example:
        >>> RetryOptions().max_retries
        -1
    """

    model_config = ConfigDict(extra="forbid")

    max_delay: str = "30s"
    delay: str = "250ms"
    max_retries: int = Field(default=-1, ge=-1)

    @field_validator("max_delay", "delay", mode="before")
    @classmethod
    def normalize_duration(cls, value: object) -> object:
        return _validate_duration(value)

    @property
    def delay_seconds(self) -> float:
        return parse_duration(self.delay)

    @property
    def max_delay_seconds(self) -> float:
        return parse_duration(self.max_delay)


class CommonInputConfig(BaseModel):
    """Host-level settings that share a section with the worker fields.

    ``can_exit`` and ``retries`` stay ``None`` until the managed defaults
    are applied during preparation.
    """

    model_config = ConfigDict(extra="forbid")

    type: str = ""
    ticker_interval: int = Field(default=0, ge=0)
    decoder: str = ""
    synchronous_decode: bool = False
    send_decode_failures: bool = False
    log_decode_failures: bool = True
    can_exit: bool | None = None
    retries: RetryOptions | None = None


COMMON_INPUT_KEYS = frozenset(CommonInputConfig.model_fields)


class StreamReaderConfig(BaseModel):
    """Desired behavior of one stream reader worker.

    Attributes:
        hostname: Host identifier stamped on emitted records.
        oldest_duration: Skip log files older than this duration.
        journal_directory: Where read positions are journaled.
        log_directory: Root directory of the logs to tail.
        file_match: Regular expression matched against log file paths.
        priority: Ordering rules for rotated files.
        differentiator: Parts composing the logger name of each stream.
        translation: Token to numeric replacement tables, per match group.
        rescan_interval: How often the log directory is rescanned.
        check_data_interval: How often open files are checked for data.
        splitter: Name of the record splitter.
        initial_tail: Start from the end of files seen for the first time.
    """

    model_config = ConfigDict(extra="forbid")

    hostname: str = Field(default_factory=socket.gethostname)
    oldest_duration: str = "720h"
    journal_directory: str = ""
    log_directory: str
    file_match: str
    priority: list[str] = Field(default_factory=list)
    differentiator: list[str] = Field(default_factory=list)
    translation: dict[str, dict[str, int]] = Field(default_factory=dict)
    rescan_interval: str = "1m"
    check_data_interval: str = "250ms"
    splitter: str = "TokenSplitter"
    initial_tail: bool = False

    @field_validator("oldest_duration", "rescan_interval", "check_data_interval", mode="before")
    @classmethod
    def normalize_duration(cls, value: object) -> object:
        return _validate_duration(value)

    @field_validator("log_directory", "file_match", mode="before")
    @classmethod
    def require_text(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("priority", "differentiator", mode="before")
    @classmethod
    def normalize_sequence(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class DirectoryInputConfig(BaseModel):
    """Settings for the directory reconciler itself.

    Attributes:
        logstreamer_dir: Root of the tree holding stream reader files.
        ticker_interval: Seconds between rescans.
        share_dir: Base for resolving a relative ``logstreamer_dir``.
        worker_factory: ``module:attr`` import path of the worker factory.
        max_workers: Optional cap on concurrently registered workers.

    Example:
        >>> DirectoryInputConfig().ticker_interval
        300
    """

    model_config = ConfigDict(extra="allow")

    logstreamer_dir: str = DEFAULT_LOGSTREAMER_DIR
    ticker_interval: int = Field(default=DEFAULT_TICKER_INTERVAL, ge=1)
    share_dir: str | None = None
    worker_factory: str = DEFAULT_WORKER_FACTORY
    max_workers: int | None = Field(default=None, ge=1)

    @field_validator("logstreamer_dir", mode="before")
    @classmethod
    def normalize_dir(cls, value: object) -> object:
        if value is None:
            return DEFAULT_LOGSTREAMER_DIR
        if isinstance(value, str):
            normalized = value.strip()
            return normalized or DEFAULT_LOGSTREAMER_DIR
        return value

    @field_validator("share_dir", mode="before")
    @classmethod
    def normalize_optional_dir(cls, value: object) -> object:
        if isinstance(value, str):
            normalized = value.strip()
            return normalized or None
        return value


def configs_equivalent(left: BaseModel | None, right: BaseModel | None) -> bool:
    """Return whether two configuration models are structurally equal.

    Sequences must match element by element in order; mappings must have
    the same keys with equivalent values, regardless of insertion order.

    Example:
        >>> a = StreamReaderConfig(log_directory="/var/log", file_match="x", priority=["a", "b"])
        >>> b = a.model_copy(update={"priority": ["b", "a"]})
        >>> configs_equivalent(a, a.model_copy()), configs_equivalent(a, b)
        (True, False)
    """
    if left is None or right is None:
        return left is None and right is None
    if type(left) is not type(right):
        return False
    return all(
        _values_equivalent(getattr(left, name), getattr(right, name))
        for name in type(left).model_fields
    )


def _values_equivalent(left: object, right: object) -> bool:
    if isinstance(left, BaseModel) or isinstance(right, BaseModel):
        if not (isinstance(left, BaseModel) and isinstance(right, BaseModel)):
            return False
        return configs_equivalent(left, right)
    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if set(left) != set(right):
            return False
        return all(_values_equivalent(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) or isinstance(right, (list, tuple)):
        if not (isinstance(left, (list, tuple)) and isinstance(right, (list, tuple))):
            return False
        if len(left) != len(right):
            return False
        return all(_values_equivalent(a, b) for a, b in zip(left, right))
    return left == right
