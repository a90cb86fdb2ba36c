"""
Alert Relay - Command Line Tests
"""

from pathlib import Path

import pytest

from alertrelay.core.config import DEFAULT_CONFIG_PATH
from alertrelay.main import parse_args, run


def test_parse_args_defaults():
    args = parse_args([])

    assert args.config == DEFAULT_CONFIG_PATH
    assert args.listen is None
    assert args.template == ""
    assert args.debug is False


def test_parse_args_flags():
    args = parse_args(["-c", "/etc/relay.yaml", "-l", "127.0.0.1:8080", "-t", "alert.tmpl", "-d"])

    assert args.config == "/etc/relay.yaml"
    assert args.listen == "127.0.0.1:8080"
    assert args.template == "alert.tmpl"
    assert args.debug is True


def test_run_exits_on_missing_config(tmp_path: Path):
    with pytest.raises(SystemExit) as exc_info:
        run(["-c", str(tmp_path / "missing.yaml")])

    assert exc_info.value.code == 1
