# === ./codewars_bot/config.py === #
import os
from zoneinfo import ZoneInfo
from dotenv import load_dotenv
from datetime import timedelta
from codewars_bot.utils import parse_interval, interval_to_timedelta

load_dotenv()

SLACK_SIGNING_SECRET = os.getenv('SLACK_SIGNING_SECRET')
SLACK_WEBHOOK_URL = os.getenv('SLACK_WEBHOOK_URL')

if not SLACK_SIGNING_SECRET or not SLACK_WEBHOOK_URL:
    raise EnvironmentError("Missing SLACK_SIGNING_SECRET or SLACK_WEBHOOK_URL in .env file")

HOST = os.getenv('HOST', '0.0.0.0')
PORT = int(os.getenv('PORT', '8080'))
DATABASE_PATH = os.getenv('DATABASE_PATH', 'codewars-bot.db')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'info')

SCHEDULE_TIMEZONE = ZoneInfo(os.getenv('SCHEDULE_TIMEZONE', 'UTC'))

FETCH_TIMEOUT = interval_to_timedelta(
    *parse_interval(os.getenv('FETCH_TIMEOUT', '10s'))
) or timedelta(seconds=10)

SIGNATURE_TOLERANCE = interval_to_timedelta(
    *parse_interval(os.getenv('SIGNATURE_TOLERANCE', '5min'))
) or timedelta(minutes=5)
