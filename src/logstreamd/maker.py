"""Worker makers and the configuration preparation pipeline.

A maker holds the raw section of one stream reader file. Preparation runs
in two stages: a typed decode of the section, then each registered
preparer in order. Preparers are pure functions; adding one returns a new
maker rather than mutating the existing one.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace

from pydantic import ValidationError

from .errors import MakerError
from .host import WorkerRunner
from .models import COMMON_INPUT_KEYS, CommonInputConfig, RetryOptions, StreamReaderConfig
from .worker import WorkerFactory

ConfigPreparer = Callable[[StreamReaderConfig], StreamReaderConfig]
CommonPreparer = Callable[[CommonInputConfig], CommonInputConfig]

MANAGED_RETRIES = RetryOptions(max_delay="30s", delay="250ms", max_retries=-1)


def apply_managed_defaults(common: CommonInputConfig) -> CommonInputConfig:
    """Fill in the retry policy and exit permission the reconciler manages.

    Values supplied in the file are kept as they are.

    Example:
        >>> prepared = apply_managed_defaults(CommonInputConfig())
        >>> prepared.can_exit, prepared.retries.max_retries
        (True, -1)
    """
    updates: dict[str, object] = {}
    if common.retries is None:
        updates["retries"] = MANAGED_RETRIES.model_copy()
    if common.can_exit is None:
        updates["can_exit"] = True
    if not updates:
        return common
    return common.model_copy(update=updates)


def split_section(section: Mapping[str, object]) -> tuple[dict[str, object], dict[str, object]]:
    """Split a raw section into worker fields and host-level fields."""
    worker_fields: dict[str, object] = {}
    common_fields: dict[str, object] = {}
    for key, value in section.items():
        if key in COMMON_INPUT_KEYS:
            common_fields[key] = value
        else:
            worker_fields[key] = value
    return worker_fields, common_fields


@dataclass(frozen=True)
class WorkerMaker:
    """Factory for one worker built from a decoded file section.

    Attributes:
        plugin_type: Declared worker type of the section.
        section: Raw section payload as decoded from TOML.
        factory: Worker factory handed to the runner.
        config_preparers: Applied in order after the typed decode.
        common_preparers: Applied in order after the common typed decode.
    """

    plugin_type: str
    section: Mapping[str, object]
    factory: WorkerFactory
    config_preparers: tuple[ConfigPreparer, ...] = ()
    common_preparers: tuple[CommonPreparer, ...] = ()
    _name: str = field(default="")

    @property
    def name(self) -> str:
        return self._name or self.plugin_type

    def set_name(self, name: str) -> WorkerMaker:
        """Return a maker that reports ``name`` as its display name."""
        return replace(self, _name=name)

    def with_config_preparer(self, preparer: ConfigPreparer) -> WorkerMaker:
        return replace(self, config_preparers=(*self.config_preparers, preparer))

    def with_common_preparer(self, preparer: CommonPreparer) -> WorkerMaker:
        return replace(self, common_preparers=(*self.common_preparers, preparer))

    def prepare_config(self) -> StreamReaderConfig:
        """Decode and prepare the worker configuration.

        Raises:
            MakerError: If the section does not decode into a worker config.
        """
        worker_fields, _common = split_section(self.section)
        try:
            config = StreamReaderConfig.model_validate(worker_fields)
        except ValidationError as exc:
            raise MakerError(f"invalid {self.plugin_type} section '{self.name}':\n{exc}") from exc
        for preparer in self.config_preparers:
            config = preparer(config)
        return config

    def prepare_common_config(self) -> CommonInputConfig:
        """Decode and prepare the host-level configuration.

        Raises:
            MakerError: If the common fields are invalid.
        """
        _worker, common_fields = split_section(self.section)
        try:
            common = CommonInputConfig.model_validate(common_fields)
        except ValidationError as exc:
            raise MakerError(f"invalid common settings in '{self.name}':\n{exc}") from exc
        for preparer in self.common_preparers:
            common = preparer(common)
        return common

    def make_runnable(self) -> WorkerRunner:
        """Prepare both configurations and build an unstarted runner."""
        return WorkerRunner(
            self.name,
            plugin_type=self.plugin_type,
            config=self.prepare_config(),
            common=self.prepare_common_config(),
            factory=self.factory,
        )
