"""Tests for environment-based configuration."""

import dataclasses

import pytest

from vpsbot.config import DEFAULT_COMMAND_TIMEOUT, DEFAULT_POLL_TIMEOUT, Config, load_config
from vpsbot.core.errors import ConfigError


def test_missing_token_is_fatal():
    with pytest.raises(ConfigError, match="TELEGRAM_BOT_TOKEN"):
        load_config({})


def test_blank_token_is_fatal():
    with pytest.raises(ConfigError):
        load_config({"TELEGRAM_BOT_TOKEN": "   "})


def test_defaults():
    config = load_config({"TELEGRAM_BOT_TOKEN": "123:abc"})

    assert config == Config(bot_token="123:abc")
    assert config.admin_chat_id == 0
    assert config.poll_timeout == DEFAULT_POLL_TIMEOUT == 30
    assert config.command_timeout == DEFAULT_COMMAND_TIMEOUT == 600
    assert config.keyboard_style == "inline"
    assert config.disk_path == "/"


def test_values_from_environment():
    config = load_config({
        "TELEGRAM_BOT_TOKEN": "123:abc",
        "ADMIN_CHAT_ID": " 4242 ",
        "POLL_TIMEOUT_SECONDS": "10",
        "COMMAND_TIMEOUT_SECONDS": "60",
        "KEYBOARD_STYLE": "Reply",
        "DISK_PATH": "/srv",
        "LOG_LEVEL": "debug",
    })

    assert config.admin_chat_id == 4242
    assert config.poll_timeout == 10
    assert config.command_timeout == 60
    assert config.keyboard_style == "reply"
    assert config.disk_path == "/srv"
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["", "abc", "0", "-5"])
def test_bad_timeouts_fall_back_to_default(value):
    config = load_config({"TELEGRAM_BOT_TOKEN": "t", "POLL_TIMEOUT_SECONDS": value})

    assert config.poll_timeout == DEFAULT_POLL_TIMEOUT


def test_unparsable_admin_id_means_everyone():
    config = load_config({"TELEGRAM_BOT_TOKEN": "t", "ADMIN_CHAT_ID": "me"})

    assert config.admin_chat_id == 0


def test_unknown_keyboard_style_falls_back_to_inline():
    config = load_config({"TELEGRAM_BOT_TOKEN": "t", "KEYBOARD_STYLE": "fancy"})

    assert config.keyboard_style == "inline"


def test_config_is_immutable():
    config = load_config({"TELEGRAM_BOT_TOKEN": "t"})

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.admin_chat_id = 1
