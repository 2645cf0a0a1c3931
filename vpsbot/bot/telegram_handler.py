import logging

from telegram import ReplyParameters, Update
from telegram.constants import ParseMode
from telegram.error import BadRequest, TelegramError
from telegram.ext import ContextTypes

from vpsbot.bot.keyboards import InlineKeyboards
from vpsbot.core.errors import TransportError
from vpsbot.core.events import CallbackAction, RenderKind, TextMessage

logger = logging.getLogger(__name__)


class TelegramRenderSink:
    """Carries out render instructions for one update."""

    def __init__(self, bot, keyboards, query=None):
        self.bot = bot
        self.keyboards = keyboards
        self.query = query
        self._inline = InlineKeyboards()

    async def render(self, render):
        parse_mode = ParseMode.MARKDOWN if render.markdown else None
        try:
            if render.kind is RenderKind.ACK:
                await self._answer(render)
            elif render.kind is RenderKind.EDIT:
                # Only inline keyboards can be attached to an edited message.
                markup = self._inline.build(render.view) if render.view else None
                await self.bot.edit_message_text(
                    text=render.text,
                    chat_id=render.chat_id,
                    message_id=render.message_id,
                    reply_markup=markup,
                    parse_mode=parse_mode,
                )
            else:
                markup = self.keyboards.build(render.view) if render.view else None
                reply = ReplyParameters(message_id=render.reply_to) if render.reply_to else None
                await self.bot.send_message(
                    chat_id=render.chat_id,
                    text=render.text,
                    reply_parameters=reply,
                    reply_markup=markup,
                    parse_mode=parse_mode,
                )
        except BadRequest as e:
            # Pressing the button of the view already on screen.
            if "not modified" in str(e).lower():
                return
            raise TransportError(str(e)) from e
        except TelegramError as e:
            raise TransportError(str(e)) from e

    async def _answer(self, render):
        if self.query is None:
            return
        await self.query.answer(text=render.text or None, show_alert=render.alert)


class TelegramFrontend:
    """Feeds Telegram updates to the dispatcher."""

    def __init__(self, dispatcher, keyboards):
        self.dispatcher = dispatcher
        self.keyboards = keyboards

    async def handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle incoming text messages and slash commands."""
        message = update.effective_message
        if message is None or message.text is None:
            return
        chat_id = update.effective_chat.id
        event = TextMessage(
            sender_id=chat_id,
            chat_id=chat_id,
            text=message.text,
            message_id=message.message_id,
        )
        await self.dispatcher.handle(event, TelegramRenderSink(context.bot, self.keyboards))

    async def handle_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle inline button presses."""
        query = update.callback_query
        message = query.message
        chat_id = message.chat.id if message else query.from_user.id
        event = CallbackAction(
            sender_id=chat_id,
            chat_id=chat_id,
            action_id=query.data or "",
            message_id=message.message_id if message else None,
        )
        sink = TelegramRenderSink(context.bot, self.keyboards, query=query)
        await self.dispatcher.handle(event, sink)


async def handle_error(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Log errors raised while polling or inside handlers."""
    logger.error("error while handling update %s", update, exc_info=context.error)
