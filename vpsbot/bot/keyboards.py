"""Turn menu views into Telegram keyboards.

Inline keyboards carry action ids as callback data. Reply keyboards are
persistent buttons whose text starts with the slash command, so pressing one
sends the command as an ordinary message.
"""

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, KeyboardButton, ReplyKeyboardMarkup

from vpsbot.core.menus import render_view


class InlineKeyboards:
    def build(self, view):
        _, rows = render_view(view)
        return InlineKeyboardMarkup([
            [InlineKeyboardButton(action.label, callback_data=action.action_id) for action in row]
            for row in rows
        ])


class ReplyKeyboards:
    def build(self, view):
        _, rows = render_view(view)
        return ReplyKeyboardMarkup(
            [[KeyboardButton(f"{action.command} {action.label}") for action in row] for row in rows],
            resize_keyboard=True,
            one_time_keyboard=False,
        )


def keyboards_for(style):
    return ReplyKeyboards() if style == "reply" else InlineKeyboards()
