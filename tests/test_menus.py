"""Tests for the static menu graph."""

from vpsbot.core.menus import VIEWS, MenuView, all_actions, render_view

VIEW_ACTIONS = {
    "menu_main": MenuView.MAIN,
    "menu_monitor": MenuView.MONITOR,
    "menu_ops": MenuView.OPS,
    "menu_install": MenuView.INSTALL,
    "menu_uninstall": MenuView.UNINSTALL,
}


def test_every_view_is_defined():
    assert set(VIEWS) == set(MenuView)


def test_render_view_is_idempotent():
    for view in MenuView:
        assert render_view(view) == render_view(view)


def test_monitor_view_lists_metrics_and_back():
    ids = [action.action_id for action in VIEWS[MenuView.MONITOR].actions()]

    assert ids == ["status", "cpu", "mem", "disk", "uptime", "menu_main"]


def test_every_non_main_view_has_a_back_edge_to_main():
    for view in MenuView:
        ids = [action.action_id for action in VIEWS[view].actions()]
        if view is MenuView.MAIN:
            assert "menu_main" not in ids
        else:
            assert ids[-1] == "menu_main"


def test_every_view_is_reachable_from_a_menu():
    targets = {VIEW_ACTIONS[action.action_id] for _, action in all_actions() if action.action_id in VIEW_ACTIONS}

    assert targets == set(MenuView)


def test_button_commands_start_with_a_slash():
    for _, action in all_actions():
        assert action.command.startswith("/")
        assert " " not in action.command
