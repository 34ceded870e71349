from __future__ import annotations

import pytest

from logstreamd.errors import MakerError
from logstreamd.host import RunnerState
from logstreamd.maker import MANAGED_RETRIES, WorkerMaker, apply_managed_defaults, split_section
from logstreamd.models import CommonInputConfig, RetryOptions, StreamReaderConfig
from logstreamd.worker import NullStreamReader

SECTION = {
    "type": "LogstreamerInput",
    "log_directory": "/var/log/nginx",
    "file_match": r"access\.log",
    "hostname": "testhost",
    "decoder": "nginx_decoder",
}


def _maker(**extra: object) -> WorkerMaker:
    return WorkerMaker(
        plugin_type="LogstreamerInput",
        section={**SECTION, **extra},
        factory=NullStreamReader,
    )


def test_split_section_separates_host_settings() -> None:
    worker_fields, common_fields = split_section(SECTION)

    assert common_fields == {"type": "LogstreamerInput", "decoder": "nginx_decoder"}
    assert "log_directory" in worker_fields
    assert "type" not in worker_fields


def test_missing_retry_settings_get_managed_defaults() -> None:
    common = _maker().with_common_preparer(apply_managed_defaults).prepare_common_config()

    assert common.retries == MANAGED_RETRIES
    assert common.retries.delay_seconds == 0.25
    assert common.retries.max_delay_seconds == 30.0
    assert common.retries.max_retries == -1
    assert common.can_exit is True


def test_explicit_retry_settings_are_kept() -> None:
    maker = _maker(retries={"delay": "1s", "max_delay": "5s", "max_retries": 3}, can_exit=False)

    common = maker.with_common_preparer(apply_managed_defaults).prepare_common_config()

    assert common.retries == RetryOptions(delay="1s", max_delay="5s", max_retries=3)
    assert common.can_exit is False


def test_apply_managed_defaults_returns_same_object_when_complete() -> None:
    common = CommonInputConfig(can_exit=False, retries=RetryOptions(max_retries=2))

    assert apply_managed_defaults(common) is common


def test_defaults_are_applied_at_preparation_not_decode() -> None:
    maker = _maker()

    assert maker.prepare_common_config().retries is None
    assert maker.with_common_preparer(apply_managed_defaults).prepare_common_config().retries


def test_preparers_return_new_makers() -> None:
    maker = _maker()

    def tail(config: StreamReaderConfig) -> StreamReaderConfig:
        return config.model_copy(update={"initial_tail": True})

    prepared = maker.with_config_preparer(tail)

    assert maker.config_preparers == ()
    assert prepared.prepare_config().initial_tail is True
    assert maker.prepare_config().initial_tail is False


def test_set_name_overrides_plugin_type() -> None:
    maker = _maker()

    assert maker.name == "LogstreamerInput"
    assert maker.set_name("nginx").name == "nginx"
    assert maker.name == "LogstreamerInput"


def test_invalid_worker_fields_raise_maker_error() -> None:
    maker = _maker(file_match="").set_name("nginx")

    with pytest.raises(MakerError, match="invalid LogstreamerInput section 'nginx'"):
        maker.prepare_config()


def test_invalid_common_fields_raise_maker_error() -> None:
    with pytest.raises(MakerError, match="invalid common settings"):
        _maker(retries={"max_retries": -5}).prepare_common_config()


def test_make_runnable_builds_unstarted_runner() -> None:
    runner = _maker().set_name("nginx").make_runnable()

    assert runner.name == "nginx"
    assert runner.plugin_type == "LogstreamerInput"
    assert runner.state is RunnerState.PENDING
    assert runner.config.log_directory == "/var/log/nginx"
    assert runner.common.decoder == "nginx_decoder"
    assert runner.is_alive is False
