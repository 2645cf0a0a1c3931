"""Static menu graph.

MAIN is the root; every other view is one hop away and its Back button
leads straight to MAIN. Views are transport-neutral: bot/keyboards.py
turns their rows into inline or reply keyboards.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class MenuView(Enum):
    MAIN = "main"
    MONITOR = "monitor"
    OPS = "ops"
    INSTALL = "install"
    UNINSTALL = "uninstall"


@dataclass(frozen=True)
class MenuAction:
    label: str
    action_id: str
    command: str


@dataclass(frozen=True)
class ViewSpec:
    title: str
    rows: Tuple[Tuple[MenuAction, ...], ...]

    def actions(self):
        return [action for row in self.rows for action in row]


BACK = MenuAction("⬅️ Back", "menu_main", "/back")

VIEWS = {
    MenuView.MAIN: ViewSpec(
        title="*VPS Admin Bot*\nChoose a module:",
        rows=(
            (
                MenuAction("📈 Monitor", "menu_monitor", "/monitor"),
                MenuAction("🛠️ Ops", "menu_ops", "/ops"),
            ),
            (MenuAction("❓ Help", "help", "/help"),),
        ),
    ),
    MenuView.MONITOR: ViewSpec(
        title="*Monitoring*\nPick a metric:",
        rows=(
            (
                MenuAction("📊 Status", "status", "/status"),
                MenuAction("🧠 CPU", "cpu", "/cpu"),
                MenuAction("💾 Memory", "mem", "/mem"),
            ),
            (
                MenuAction("🗄️ Disk", "disk", "/disk"),
                MenuAction("⏱️ Uptime", "uptime", "/uptime"),
            ),
            (BACK,),
        ),
    ),
    MenuView.OPS: ViewSpec(
        title="*Ops panel*",
        rows=(
            (
                MenuAction("📦 Install", "menu_install", "/install"),
                MenuAction("🗑️ Uninstall", "menu_uninstall", "/uninstall"),
            ),
            (MenuAction("🔄 Update system", "update", "/update"),),
            (BACK,),
        ),
    ),
    MenuView.INSTALL: ViewSpec(
        title="*Install tools*",
        rows=(
            (
                MenuAction("✅ Install base tools", "install_tools", "/install_tools"),
                MenuAction("📋 List tools", "list_tools", "/list_tools"),
            ),
            (BACK,),
        ),
    ),
    MenuView.UNINSTALL: ViewSpec(
        title="*Uninstall tools*",
        rows=(
            (
                MenuAction("🗑️ Uninstall base tools", "uninstall_tools", "/uninstall_tools"),
                MenuAction("📋 List tools", "list_uninstall", "/list_uninstall"),
            ),
            (BACK,),
        ),
    ),
}

HELP_TEXT = "\n".join([
    "VPS Bot Commands",
    "/start - main menu",
    "/monitor - monitoring panel",
    "/status - CPU, memory, disk and uptime at once",
    "/cpu, /mem, /disk, /uptime - single metrics",
    "/ops - ops panel",
    "/update - update system packages",
    "/install - install menu",
    "/uninstall - uninstall menu",
    "/install_tools - install base tools",
    "/list_tools - show install tools list",
    "/uninstall_tools - uninstall base tools",
    "/list_uninstall - show uninstall tools list",
])


def render_view(view):
    """Return (text, rows) for a view. Pure: same view, same result."""
    spec = VIEWS[view]
    return spec.title, spec.rows


def all_actions():
    """Every (view, action) pair reachable from a rendered menu."""
    return [(view, action) for view, spec in VIEWS.items() for action in spec.actions()]
