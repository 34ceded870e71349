from pathlib import Path

import pytest

import logstreamd.config as config
from logstreamd.errors import SettingsError


def test_load_settings_without_file_returns_defaults() -> None:
    settings = config.load_settings(None)

    assert settings.logstreamer_dir == "logstreamers.d"
    assert settings.ticker_interval == 300


def test_load_settings_reads_logstreamd_table(tmp_path: Path) -> None:
    path = tmp_path / "logstreamd.toml"
    path.write_text(
        '[logstreamd]\nlogstreamer_dir = "/etc/streams.d"\nticker_interval = 15\n'
        "max_workers = 4\n",
        encoding="utf-8",
    )

    settings = config.load_settings(path)

    assert settings.logstreamer_dir == "/etc/streams.d"
    assert settings.ticker_interval == 15
    assert settings.max_workers == 4


def test_load_settings_without_table_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "logstreamd.toml"
    path.write_text('[other]\nkey = "value"\n', encoding="utf-8")

    assert config.load_settings(path).ticker_interval == 300


def test_load_settings_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(SettingsError) as excinfo:
        config.load_settings(tmp_path / "absent.toml")

    assert excinfo.value.code == "settings_invalid"
    assert excinfo.value.recovery_hint


def test_load_settings_rejects_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "logstreamd.toml"
    path.write_text("[logstreamd\n", encoding="utf-8")

    with pytest.raises(SettingsError, match="cannot read settings file"):
        config.load_settings(path)


def test_load_settings_rejects_non_table(tmp_path: Path) -> None:
    path = tmp_path / "logstreamd.toml"
    path.write_text('logstreamd = "yes"\n', encoding="utf-8")

    with pytest.raises(SettingsError, match="must be a table"):
        config.load_settings(path)


def test_load_settings_rejects_invalid_values(tmp_path: Path) -> None:
    path = tmp_path / "logstreamd.toml"
    path.write_text("[logstreamd]\nticker_interval = -5\n", encoding="utf-8")

    with pytest.raises(SettingsError, match="invalid logstreamd settings"):
        config.load_settings(path)


def test_resolve_settings_applies_overrides(tmp_path: Path) -> None:
    path = tmp_path / "logstreamd.toml"
    path.write_text('[logstreamd]\nlogstreamer_dir = "a.d"\nticker_interval = 15\n', "utf-8")

    settings = config.resolve_settings(path, logstreamer_dir="b.d", share_dir="/srv")

    assert settings.logstreamer_dir == "b.d"
    assert settings.ticker_interval == 15
    assert settings.share_dir == "/srv"


def test_resolve_settings_validates_overrides() -> None:
    with pytest.raises(SettingsError, match="command line"):
        config.resolve_settings(None, ticker_interval=0)


def test_resolve_logstreamer_dir_joins_share_dir() -> None:
    settings = config.resolve_settings(None, share_dir="/srv/share")

    assert config.resolve_logstreamer_dir(settings) == Path("/srv/share/logstreamers.d")


def test_load_settings_rejects_non_utf8(tmp_path: Path) -> None:
    path = tmp_path / "logstreamd.toml"
    path.write_bytes(b'[logstreamd]\nlogstreamer_dir = "caf\xe9.d"\n')

    with pytest.raises(SettingsError, match="cannot read settings file"):
        config.load_settings(path)
