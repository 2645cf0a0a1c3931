"""Inbound chat events and outbound render instructions.

Both are transport-neutral: the Telegram layer builds events from updates
and turns renders back into API calls.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from vpsbot.core.menus import MenuView


@dataclass(frozen=True)
class TextMessage:
    sender_id: int
    chat_id: int
    text: str
    message_id: int


@dataclass(frozen=True)
class CallbackAction:
    sender_id: int
    chat_id: int
    action_id: str
    message_id: Optional[int]


InboundEvent = Union[TextMessage, CallbackAction]


class RenderKind(Enum):
    MESSAGE = "message"  # new message
    EDIT = "edit"  # edit the message that carried the pressed button
    ACK = "ack"  # answer the button press


@dataclass(frozen=True)
class Render:
    kind: RenderKind
    chat_id: int
    text: str = ""
    reply_to: Optional[int] = None
    message_id: Optional[int] = None
    view: Optional[MenuView] = None
    markdown: bool = False
    alert: bool = False
