"""Configuration loaded from environment variables."""

import os
from dataclasses import dataclass

from vpsbot.core.errors import ConfigError

DEFAULT_POLL_TIMEOUT = 30
DEFAULT_COMMAND_TIMEOUT = 600  # 10 minutes
KEYBOARD_STYLES = ("inline", "reply")


@dataclass(frozen=True)
class Config:
    bot_token: str
    admin_chat_id: int = 0  # 0 = every chat is allowed
    poll_timeout: int = DEFAULT_POLL_TIMEOUT
    command_timeout: int = DEFAULT_COMMAND_TIMEOUT
    keyboard_style: str = "inline"
    disk_path: str = "/"
    log_level: str = "INFO"


def _int_or(value, default):
    try:
        return int(value.strip())
    except (AttributeError, ValueError):
        return default


def _positive_or(value, default):
    number = _int_or(value, default)
    return number if number > 0 else default


def load_config(environ=None):
    """Build a Config from the environment. Raises ConfigError without a token."""
    env = os.environ if environ is None else environ

    token = env.get("TELEGRAM_BOT_TOKEN", "").strip()
    if not token:
        raise ConfigError("TELEGRAM_BOT_TOKEN is required")

    style = env.get("KEYBOARD_STYLE", "inline").strip().lower()
    if style not in KEYBOARD_STYLES:
        style = "inline"

    return Config(
        bot_token=token,
        admin_chat_id=_int_or(env.get("ADMIN_CHAT_ID"), 0),
        poll_timeout=_positive_or(env.get("POLL_TIMEOUT_SECONDS"), DEFAULT_POLL_TIMEOUT),
        command_timeout=_positive_or(env.get("COMMAND_TIMEOUT_SECONDS"), DEFAULT_COMMAND_TIMEOUT),
        keyboard_style=style,
        disk_path=env.get("DISK_PATH", "").strip() or "/",
        log_level=env.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
