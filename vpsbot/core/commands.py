"""Text command table.

Maps slash-command literals to callback action ids, so a typed command and
the matching button run the same handler. Literals are tried longest first
and must end at a word boundary: "/status now" and "/status@mybot" match
/status, "/statusx" matches nothing.
"""

from vpsbot.core.errors import UnknownCommandError

TEXT_COMMANDS = {
    "/start": "menu_main",
    "/back": "menu_main",
    "/help": "help",
    "/monitor": "menu_monitor",
    "/ops": "menu_ops",
    "/install": "menu_install",
    "/uninstall": "menu_uninstall",
    "/status": "status",
    "/cpu": "cpu",
    "/mem": "mem",
    "/disk": "disk",
    "/uptime": "uptime",
    "/update": "update",
    "/install_tools": "install_tools",
    "/list_tools": "list_tools",
    "/uninstall_tools": "uninstall_tools",
    "/list_uninstall": "list_uninstall",
}


class CommandTable:
    def __init__(self, commands=None):
        commands = TEXT_COMMANDS if commands is None else commands
        # Longest literal first; ties broken alphabetically for a stable order.
        self._entries = tuple(sorted(commands.items(), key=lambda kv: (-len(kv[0]), kv[0])))

    def __iter__(self):
        return iter(self._entries)

    def match(self, text):
        """Return the action id for `text` or raise UnknownCommandError."""
        text = (text or "").strip()
        for literal, action_id in self._entries:
            if _matches(text, literal):
                return action_id
        raise UnknownCommandError(f"unknown command: {text.split()[0] if text else '(empty)'}")


def _matches(text, literal):
    if not text.startswith(literal):
        return False
    rest = text[len(literal):]
    return rest == "" or rest[0].isspace() or rest[0] == "@"
