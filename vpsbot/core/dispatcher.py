"""Dispatcher: inbound chat events in, render instructions out.

One instance is built at startup from an immutable Config. For every event it
checks the sender, resolves a text command or button id to an action, runs
the action and hands the result to a render sink. Failures inside an action
are rendered back to the chat; nothing raised by a handler escapes handle().
"""

import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from typing import Awaitable, Callable, Optional

from vpsbot.core.commands import CommandTable
from vpsbot.core.errors import AuthorizationError, TelemetryError, TransportError, UnknownCommandError
from vpsbot.core.events import CallbackAction, InboundEvent, Render, RenderKind, TextMessage
from vpsbot.core.menus import HELP_TEXT, MenuView, all_actions, render_view

logger = logging.getLogger(__name__)

UNKNOWN_COMMAND_TEXT = "Unknown command. Use /help"
UNKNOWN_ACTION_TEXT = "Unknown action. Use /help"
MAX_OUTPUT_CHARS = 3000  # keeps replies under Telegram's 4096 limit

# action id -> (label, telemetry method)
METRICS = {
    "cpu": ("CPU", "cpu_percent"),
    "mem": ("Memory", "memory_usage"),
    "disk": ("Disk", "disk_usage"),
    "uptime": ("Uptime", "uptime"),
}


@dataclass(frozen=True)
class Reply:
    text: str
    view: Optional[MenuView] = None
    markdown: bool = False


@dataclass(frozen=True)
class Action:
    action_id: str
    handler: Callable[[], Awaitable[Reply]]
    ack: Optional[str] = None  # toast shown when a button starts a slow action


class Dispatcher:
    def __init__(self, config, telemetry, ops, commands=None):
        self.config = config
        self.telemetry = telemetry
        self.ops = ops
        self.commands = commands or CommandTable()
        self.actions = {action.action_id: action for action in self._build_actions()}
        self._unknown_command = Action("unknown_command", partial(self._fixed, UNKNOWN_COMMAND_TEXT))
        self._unknown_action = Action("unknown_action", partial(self._fixed, UNKNOWN_ACTION_TEXT))
        self._check_table()

    def _build_actions(self):
        tools = ", ".join(self.ops.base_tools()) or "(empty)"
        actions = [
            Action("menu_main", partial(self._show, MenuView.MAIN)),
            Action("menu_monitor", partial(self._show, MenuView.MONITOR)),
            Action("menu_ops", partial(self._show, MenuView.OPS)),
            Action("menu_install", partial(self._show, MenuView.INSTALL)),
            Action("menu_uninstall", partial(self._show, MenuView.UNINSTALL)),
            Action("help", self._help),
            Action("status", self._status, ack="Collecting status..."),
            Action("update", self._update_system, ack="Updating system packages..."),
            Action("install_tools", self._install_tools, ack=f"Installing base tools: {tools}"),
            Action("uninstall_tools", self._uninstall_tools, ack=f"Uninstalling base tools: {tools}"),
            Action("list_tools", partial(self._list_tools, "Base tools", MenuView.INSTALL)),
            Action("list_uninstall", partial(self._list_tools, "Uninstall tools", MenuView.UNINSTALL)),
        ]
        for action_id, (label, _) in METRICS.items():
            actions.append(Action(action_id, partial(self._metric, action_id), ack=f"Reading {label}..."))
        return actions

    def _check_table(self):
        wanted = {action.action_id for _, action in all_actions()}
        wanted.update(action_id for _, action_id in self.commands)
        missing = wanted - set(self.actions)
        if missing:
            raise ValueError(f"no handler for action ids: {', '.join(sorted(missing))}")

    # ─── Routing ─────────────────────────────────────────────

    def authorize(self, sender_id):
        allowed = self.config.admin_chat_id
        return allowed == 0 or sender_id == allowed

    def resolve(self, event):
        if isinstance(event, CallbackAction):
            return self.actions.get(event.action_id, self._unknown_action)
        try:
            action_id = self.commands.match(event.text)
        except UnknownCommandError as e:
            logger.info("chat %s: %s", event.chat_id, e)
            return self._unknown_command
        return self.actions[action_id]

    async def handle(self, event: InboundEvent, sink):
        """Process one event and send its renders to `sink`."""
        is_callback = isinstance(event, CallbackAction)

        if not self.authorize(event.sender_id):
            logger.warning("rejected sender %s in chat %s", event.sender_id, event.chat_id)
            denied = str(AuthorizationError())
            if is_callback:
                await self._emit(sink, Render(RenderKind.ACK, event.chat_id, denied, alert=True))
            else:
                await self._emit(sink, Render(RenderKind.MESSAGE, event.chat_id, denied, reply_to=event.message_id))
            return

        action = self.resolve(event)
        if is_callback:
            await self._emit(sink, Render(RenderKind.ACK, event.chat_id, action.ack or ""))

        try:
            reply = await action.handler()
        except Exception as e:
            logger.exception("action %s failed", action.action_id)
            reply = Reply(f"Error: {e}")

        await self._emit(sink, self._primary(event, reply))

    async def consume(self, events, sink):
        """Handle events from an async iterator one at a time until it ends."""
        async for event in events:
            await self.handle(event, sink)

    def _primary(self, event, reply):
        if isinstance(event, CallbackAction) and event.message_id is not None:
            return Render(
                RenderKind.EDIT, event.chat_id, reply.text,
                message_id=event.message_id, view=reply.view, markdown=reply.markdown,
            )
        reply_to = event.message_id if isinstance(event, TextMessage) else None
        return Render(
            RenderKind.MESSAGE, event.chat_id, reply.text,
            reply_to=reply_to, view=reply.view, markdown=reply.markdown,
        )

    async def _emit(self, sink, render):
        try:
            await sink.render(render)
        except TransportError as e:
            logger.warning("%s to chat %s failed: %s", render.kind.value, render.chat_id, e)

    # ─── Handlers ────────────────────────────────────────────

    async def _fixed(self, text):
        return Reply(text, view=MenuView.MAIN)

    async def _show(self, view):
        text, _ = render_view(view)
        return Reply(text, view=view, markdown=True)

    async def _help(self):
        return Reply(HELP_TEXT, view=MenuView.MAIN)

    async def _read_metric(self, action_id):
        label, method = METRICS[action_id]
        try:
            value = await asyncio.to_thread(getattr(self.telemetry, method))
        except TelemetryError as e:
            return f"{label} error: {e}"
        return f"{label}: {value}"

    async def _metric(self, action_id):
        return Reply(await self._read_metric(action_id), view=MenuView.MONITOR)

    async def _status(self):
        lines = ["Status"]
        for action_id in METRICS:
            lines.append(await self._read_metric(action_id))
        return Reply("\n".join(lines), view=MenuView.MONITOR)

    async def _list_tools(self, title, view):
        tools = self.ops.base_tools()
        if not tools:
            return Reply(f"{title} list is empty.", view=view)
        return Reply(f"{title}: {', '.join(tools)}", view=view)

    async def _install_tools(self):
        return _ops_reply("Install", await self.ops.install_base_tools(), MenuView.INSTALL)

    async def _uninstall_tools(self):
        return _ops_reply("Uninstall", await self.ops.uninstall_base_tools(), MenuView.UNINSTALL)

    async def _update_system(self):
        return _ops_reply("Update", await self.ops.update_system(), MenuView.OPS)


def _ops_reply(verb, result, view):
    if result.ok:
        return Reply(f"{verb} finished.", view=view)
    text = f"{verb} failed: {result.error}"
    output = result.text().strip()
    if output:
        if len(output) > MAX_OUTPUT_CHARS:
            output = "..." + output[-MAX_OUTPUT_CHARS:]
        text += "\n" + output
    return Reply(text, view=view)
