"""
Alert Relay - Configuration Tests
"""

from pathlib import Path

import pytest

from alertrelay.core.config import (
    DEFAULT_SPLIT_SIZE,
    load_settings,
    parse_listen_address,
    read_config_file,
)
from alertrelay.core.exceptions import ConfigurationError


@pytest.fixture
def config_file(tmp_path: Path, default_template_path: str):
    """Write a YAML configuration file, extra keys override the defaults."""

    def _write(content: str = None, **values) -> str:
        path = tmp_path / "config.yaml"
        if content is None:
            data = {
                "telegram_token": "123:abc",
                "template_path": default_template_path,
                "time_zone": "Europe/Rome",
            }
            data.update(values)
            content = "".join(f"{key}: {value!r}\n" for key, value in data.items())
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


class TestLoadSettings:
    """Tests for loading settings from a YAML file."""

    def test_defaults(self, config_file):
        settings = load_settings(config_file())

        assert settings.telegram_token.get_secret_value() == "123:abc"
        assert settings.split_msg_byte == DEFAULT_SPLIT_SIZE
        assert settings.split_token == "|"
        assert settings.time_outdata == "%d/%m/%Y %H:%M:%S"
        assert settings.listen_address == ":9087"
        assert settings.debug is False
        assert str(settings.zone) == "Europe/Rome"

    def test_zero_split_size_means_default(self, config_file):
        settings = load_settings(config_file(split_msg_byte=0))

        assert settings.split_msg_byte == DEFAULT_SPLIT_SIZE

    def test_custom_split_size(self, config_file):
        assert load_settings(config_file(split_msg_byte=1000)).split_msg_byte == 1000

    def test_negative_split_size(self, config_file):
        with pytest.raises(ConfigurationError):
            load_settings(config_file(split_msg_byte=-5))

    def test_command_line_overrides(self, config_file, write_template):
        other = write_template("cli.tmpl", "cli")

        settings = load_settings(
            config_file(),
            template_path=other,
            listen_address="127.0.0.1:8080",
            debug=True,
        )

        assert settings.template_path == other
        assert settings.listen_address == "127.0.0.1:8080"
        assert settings.reload_templates is True

    def test_environment_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("ALERTRELAY_SPLIT_MSG_BYTE", "123")

        settings = load_settings(config_file(split_msg_byte=1000))

        assert settings.split_msg_byte == 123

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(str(tmp_path / "missing.yaml"))

        assert "Problem reading configuration file" in exc_info.value.message

    def test_malformed_yaml(self, config_file):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config_file("telegram_token: [unclosed\n"))

        assert "Error parsing configuration file" in exc_info.value.message

    def test_top_level_must_be_mapping(self, config_file):
        with pytest.raises(ConfigurationError):
            read_config_file(config_file("- a\n- b\n"))

    def test_missing_token(self, config_file):
        with pytest.raises(ConfigurationError):
            load_settings(config_file("template_path: x\ntime_zone: UTC\n"))

    def test_missing_template_path(self, config_file):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config_file(template_path=""))

        assert "template path" in exc_info.value.message

    def test_template_path_from_command_line_only(self, config_file, default_template_path):
        settings = load_settings(config_file(template_path=""), template_path=default_template_path)

        assert settings.template_path == default_template_path

    def test_missing_time_zone(self, config_file):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config_file(time_zone=""))

        assert "time_zone" in exc_info.value.message

    def test_unknown_time_zone(self, config_file):
        with pytest.raises(ConfigurationError):
            load_settings(config_file(time_zone="Mars/Olympus_Mons"))


class TestParseListenAddress:
    """Tests for listen address parsing."""

    def test_port_only(self):
        assert parse_listen_address(":9087") == ("0.0.0.0", 9087)

    def test_host_and_port(self):
        assert parse_listen_address("127.0.0.1:8080") == ("127.0.0.1", 8080)

    @pytest.mark.parametrize("address", ["9087", "host:port"])
    def test_invalid(self, address):
        with pytest.raises(ConfigurationError):
            parse_listen_address(address)
