# ruff: noqa: E402

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import logstreamd.log as logstreamd_log

DOCTEST_MODULES = {
    ROOT / "src" / "logstreamd" / "__init__.py",
    ROOT / "src" / "logstreamd" / "config.py",
    ROOT / "src" / "logstreamd" / "io.py",
    ROOT / "src" / "logstreamd" / "loader.py",
    ROOT / "src" / "logstreamd" / "maker.py",
    ROOT / "src" / "logstreamd" / "models.py",
    ROOT / "src" / "logstreamd" / "paths.py",
}


@pytest.fixture(autouse=True)
def _reset_log_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("LOGSTREAMD_LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOGSTREAMD_LOG_TIME", raising=False)
    monkeypatch.setattr(logstreamd_log, "_configured_level", None)
    monkeypatch.setattr(logstreamd_log, "_no_color_override", True)
    monkeypatch.setattr(logstreamd_log, "_timestamps_override", None)
    yield


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
