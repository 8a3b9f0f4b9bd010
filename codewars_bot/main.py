"""
Module: codewars_bot/main.py

Entry point for the Codewars Slack bot.
Loads the configuration, builds the bot context and serves the webhook endpoints.
"""
import uvicorn

from codewars_bot import config
from codewars_bot.bot_context import create_context
from codewars_bot.server import create_app
from codewars_bot.utils import log_message, set_log_level


def main():
    set_log_level(config.LOG_LEVEL)
    log_message("Bot is starting up...")
    context = create_context(
        config.SLACK_SIGNING_SECRET,
        config.SLACK_WEBHOOK_URL,
        database_path=config.DATABASE_PATH,
        tz=config.SCHEDULE_TIMEZONE,
        fetch_timeout=config.FETCH_TIMEOUT,
        signature_tolerance=config.SIGNATURE_TOLERANCE,
    )
    app = create_app(context)
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
