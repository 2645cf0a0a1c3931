import logging
import sys

from dotenv import load_dotenv
from telegram import BotCommand, Update
from telegram.error import InvalidToken, NetworkError
from telegram.ext import Application, CallbackQueryHandler, MessageHandler, filters

from vpsbot.bot.keyboards import keyboards_for
from vpsbot.bot.telegram_handler import TelegramFrontend, handle_error
from vpsbot.config import load_config
from vpsbot.core.dispatcher import Dispatcher
from vpsbot.core.errors import ConfigError
from vpsbot.integrations.system_monitor import SystemMonitor
from vpsbot.ops.controller import OpsController
from vpsbot.ops.executor import PrivilegedExecutor

logger = logging.getLogger("vpsbot")

# Edited messages are not new commands; handling them would re-run apt jobs.
NEW_TEXT_MESSAGES = filters.UpdateType.MESSAGE & filters.TEXT

BOT_COMMANDS = [
    BotCommand("start", "main menu"),
    BotCommand("help", "list commands"),
    BotCommand("monitor", "monitoring panel"),
    BotCommand("status", "CPU, memory, disk and uptime"),
    BotCommand("cpu", "CPU usage"),
    BotCommand("mem", "memory usage"),
    BotCommand("disk", "disk usage"),
    BotCommand("uptime", "host uptime"),
    BotCommand("ops", "ops panel"),
    BotCommand("update", "update system packages"),
    BotCommand("install_tools", "install base tools"),
]


def build_dispatcher(config):
    executor = PrivilegedExecutor(timeout=config.command_timeout)
    return Dispatcher(
        config,
        telemetry=SystemMonitor(disk_path=config.disk_path),
        ops=OpsController(executor),
    )


def build_application(config, dispatcher):
    async def post_init(app):
        me = await app.bot.get_me()
        logger.info("authorized on account %s", me.username)
        await app.bot.set_my_commands(BOT_COMMANDS)

    frontend = TelegramFrontend(dispatcher, keyboards_for(config.keyboard_style))
    app = Application.builder().token(config.bot_token).post_init(post_init).build()
    app.add_handler(MessageHandler(NEW_TEXT_MESSAGES, frontend.handle_message))
    app.add_handler(CallbackQueryHandler(frontend.handle_callback))
    app.add_error_handler(handle_error)
    return app


def main():
    load_dotenv()
    try:
        config = load_config()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO)
        logger.critical("%s", e)
        sys.exit(1)

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, config.log_level, logging.INFO),
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.info(
        "starting vps-bot (admin chat: %s, keyboards: %s, command timeout: %ss)",
        config.admin_chat_id or "any", config.keyboard_style, config.command_timeout,
    )

    app = build_application(config, build_dispatcher(config))
    try:
        app.run_polling(timeout=config.poll_timeout, allowed_updates=[Update.MESSAGE, Update.CALLBACK_QUERY])
    except (InvalidToken, NetworkError) as e:
        logger.critical("cannot start telegram session: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
