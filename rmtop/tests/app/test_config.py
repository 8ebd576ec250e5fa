from __future__ import annotations

import pytest

from rmtop.app.config import MonitorConfig
from rmtop.core.errors import ConfigError


def test_defaults():
    cfg = MonitorConfig()

    assert cfg.interval_s == 60
    assert cfg.timeout_s == 3
    assert cfg.driver == "tcp"
    assert cfg.transport_params() == {"host": "127.0.0.1", "port": 6379, "connect_timeout": 3.0}


@pytest.mark.parametrize("interval", [0, 3601])
def test_interval_bounds(interval):
    with pytest.raises(ConfigError) as ei:
        MonitorConfig(interval_s=interval)
    assert ei.value.code == "config_error"
    assert "1 and 3600" in ei.value.hint


@pytest.mark.parametrize("timeout", [0, 301])
def test_timeout_bounds(timeout):
    with pytest.raises(ConfigError):
        MonitorConfig(timeout_s=timeout)


def test_invalid_workers_and_command():
    with pytest.raises(ConfigError):
        MonitorConfig(decode_workers=0)
    with pytest.raises(ConfigError):
        MonitorConfig(monitor_command="  ")


def test_url_selects_url_driver():
    cfg = MonitorConfig(url="socket://10.0.0.5:7000")

    assert cfg.driver == "url"
    assert cfg.transport_params() == {"url": "socket://10.0.0.5:7000"}
