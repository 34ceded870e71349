"""Runtime entries pairing a prepared configuration with its live handle."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .maker import WorkerMaker
from .models import CommonInputConfig, StreamReaderConfig, configs_equivalent
from .ports import WorkerHandle


@dataclass(frozen=True)
class Entry:
    """One worker declared by one file.

    Attributes:
        name: Worker name, the identity key across files.
        path: File the entry was loaded from.
        config: Prepared worker configuration.
        common: Prepared host-level configuration.
        runner: Live handle; the entry is responsible for stopping it.
    """

    name: str
    path: Path
    config: StreamReaderConfig
    common: CommonInputConfig
    runner: WorkerHandle

    def equivalent(self, other: Entry) -> bool:
        """Return whether ``other`` describes the same running worker."""
        return (
            self.name == other.name
            and configs_equivalent(self.config, other.config)
            and configs_equivalent(self.common, other.common)
        )


def make_entry(maker: WorkerMaker, path: Path) -> Entry:
    """Build the runner for ``maker`` and wrap it as a transient entry.

    Raises:
        MakerError: If preparing the configuration fails.
    """
    runner = maker.make_runnable()
    runner.set_transient(True)
    return Entry(
        name=runner.name,
        path=path,
        config=runner.config,
        common=runner.common,
        runner=runner,
    )
