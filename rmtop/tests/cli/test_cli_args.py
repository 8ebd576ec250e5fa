from __future__ import annotations

import pytest

from rmtop.cli.args import config_from_args, parse_args, resolve_command


def test_defaults_map_to_config():
    cfg = config_from_args(parse_args([]))

    assert cfg.host == "127.0.0.1"
    assert cfg.port == 6379
    assert cfg.password is None
    assert cfg.timeout_s == 3
    assert cfg.interval_s == 60
    assert cfg.monitor_command == "MONITOR"
    assert cfg.color is True
    assert cfg.decode_workers == 1


def test_short_flags_match_redis_cli_conventions():
    args = parse_args(["-h", "192.168.0.123", "-p", "6821", "-t", "15", "-i", "30", "-a", "pw", "-nc", "MY_MONITOR"])
    cfg = config_from_args(args)

    assert cfg.host == "192.168.0.123"
    assert cfg.port == 6821
    assert cfg.timeout_s == 15
    assert cfg.interval_s == 30
    assert cfg.password == "pw"
    assert cfg.color is False
    assert cfg.monitor_command == "MY_MONITOR"


@pytest.mark.parametrize("argv", [["-i", "0"], ["-i", "3601"], ["-t", "301"], ["-p", "x"]])
def test_out_of_range_values_exit_2(argv, capsys):
    with pytest.raises(SystemExit) as ei:
        parse_args(argv)
    assert ei.value.code == 2


def test_monitor_spelling_keeps_default():
    assert resolve_command("monitor") == "MONITOR"
    assert resolve_command("Monitor") == "MONITOR"
    assert resolve_command("my_monitor") == "my_monitor"


def test_extra_options():
    args = parse_args(["--url", "loop://", "--records-file", "r.jsonl", "--commands", "c.yml", "--workers", "3"])
    cfg = config_from_args(args)

    assert cfg.url == "loop://"
    assert cfg.driver == "url"
    assert cfg.records_file == "r.jsonl"
    assert cfg.commands_path == "c.yml"
    assert cfg.decode_workers == 3


def test_help_and_version_flags():
    assert parse_args(["--help"]).help is True
    assert parse_args(["-u"]).help is True
    assert parse_args(["-v"]).version is True
    assert parse_args(["--ver"]).version is True
