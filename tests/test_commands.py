"""Tests for slash-command matching."""

import pytest

from vpsbot.core.commands import TEXT_COMMANDS, CommandTable
from vpsbot.core.errors import UnknownCommandError


@pytest.fixture
def table():
    return CommandTable()


@pytest.mark.parametrize(
    "text,action_id",
    [
        ("/status", "status"),
        ("  /status  ", "status"),
        ("/status extra text", "status"),
        ("/status\tnow", "status"),
        ("/status@vps_admin_bot", "status"),
        ("/install", "menu_install"),
        ("/install_tools", "install_tools"),
        ("/install_tools now", "install_tools"),
        ("/uninstall", "menu_uninstall"),
        ("/uninstall_tools", "uninstall_tools"),
        ("/monitor 📈 Monitor", "menu_monitor"),
        ("/back ⬅️ Back", "menu_main"),
        ("/start", "menu_main"),
    ],
)
def test_match(table, text, action_id):
    assert table.match(text) == action_id


@pytest.mark.parametrize("text", ["/statusx", "/Status", "status", "/install_toolsx", "", "   ", "hello /cpu"])
def test_no_match(table, text):
    with pytest.raises(UnknownCommandError):
        table.match(text)


def test_longest_literal_first(table):
    literals = [literal for literal, _ in table]

    assert literals.index("/install_tools") < literals.index("/install")
    assert literals.index("/uninstall_tools") < literals.index("/uninstall")
    assert sorted(literals) == sorted(TEXT_COMMANDS)


def test_order_is_deterministic():
    assert list(CommandTable()) == list(CommandTable(dict(reversed(list(TEXT_COMMANDS.items())))))
