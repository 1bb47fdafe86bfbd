"""
Telegram bot for Notesbot.

Thin adapter between python-telegram-bot and the command router.
"""

import logging
import signal
from typing import Awaitable, Callable

from telegram import Update
from telegram.constants import ParseMode
from telegram.error import BadRequest
from telegram.ext import Application, CommandHandler, ContextTypes

from notesbot.config import BotConfig, get_bot_config
from notesbot.router import COMMANDS, CommandResult, CommandRouter, Sender

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

Callback = Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]


def sender_from_update(update: Update) -> Sender:
    """Build a Sender from the Telegram user."""
    user = update.effective_user
    return Sender(
        user_id=user.id,
        username=user.username,
        first_name=user.first_name,
    )


def parse_args(text: str | None) -> list[str]:
    """Whitespace-split arguments after the command token."""
    if not text:
        return []
    return text.split()[1:]


async def send_result(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    result: CommandResult,
) -> None:
    """Send replies to the sender and notifications to the admin."""
    for reply in result.replies:
        parse_mode = ParseMode.MARKDOWN if reply.markdown else None
        try:
            await update.message.reply_text(reply.text, parse_mode=parse_mode)
        except BadRequest as e:
            # One malformed Markdown reply must not hold back the rest
            logger.warning(f"Reply rejected by Telegram: {e} ({reply.text!r})")

    admin_id = context.bot_data["config"].admin_id
    for text in result.admin_notifications:
        if not admin_id:
            logger.warning("No admin configured, dropping notification")
            continue
        await context.bot.send_message(chat_id=admin_id, text=text)


def make_command_callback(name: str) -> Callback:
    """Create the handler callback for one command."""

    async def callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.effective_user or not update.message:
            return

        router: CommandRouter = context.bot_data["router"]
        result = router.dispatch(
            name,
            sender_from_update(update),
            parse_args(update.message.text),
        )
        await send_result(update, context, result)

    callback.__name__ = f"{name}_command"
    callback.__doc__ = f"Handle /{name} command."
    return callback


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log faults that escape a handler (storage errors included)."""
    logger.error(f"Error handling update {update}", exc_info=context.error)


def build_application(config: BotConfig, router: CommandRouter | None = None) -> Application:
    """Create the application with every command registered."""
    app = Application.builder().token(config.token).build()

    app.bot_data["config"] = config
    app.bot_data["router"] = router or CommandRouter(config)

    for name in COMMANDS:
        app.add_handler(CommandHandler(name, make_command_callback(name)))
    app.add_error_handler(error_handler)

    return app


def run_bot(config: BotConfig | None = None) -> None:
    """Run the Telegram bot until SIGINT or SIGTERM."""
    config = config or get_bot_config()
    app = build_application(config)

    if config.admin_id:
        logger.info(f"Bot is live. Admin: {config.admin_id}")
    else:
        logger.warning("No admin configured! Admin commands will be denied.")

    app.run_polling(
        allowed_updates=Update.ALL_TYPES,
        stop_signals=(signal.SIGINT, signal.SIGTERM),
    )


def main() -> int:
    """Entry point for CLI."""
    try:
        run_bot()
        return 0
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nBot stopped.")
        return 0


if __name__ == "__main__":
    import sys
    sys.exit(main())
