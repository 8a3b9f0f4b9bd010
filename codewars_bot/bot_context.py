"""
Module: codewars_bot/bot_context.py

Builds the BotContext: the database, the roster, the schedule state, the
statistics reporter and the digest scheduler, wired together once at startup.
"""
from datetime import timedelta, UTC

from codewars_bot.database import Database
from codewars_bot.roster import RosterStore
from codewars_bot.scheduler.manager import ScheduleState, DigestScheduler
from codewars_bot.stats.baseline import BaselineStore
from codewars_bot.stats.codewars import CodewarsClient
from codewars_bot.stats.reporter import StatsReporter
from codewars_bot.stats.slack import SlackWebhook
from codewars_bot.utils import log_message


class BotContext:
    """
    Everything a request handler or the digest task needs, owned in one place.

    Attributes:
      signing_secret (str): Secret used to verify Slack requests.
      signature_tolerance (timedelta): Freshness window for request timestamps.
      db: Database instance.
      roster: RosterStore.
      schedule: ScheduleState.
      reporter: StatsReporter.
      scheduler: DigestScheduler.
    """
    def __init__(self, signing_secret, db, roster, schedule, reporter, scheduler,
                 signature_tolerance=timedelta(minutes=5), clients=()):
        self.signing_secret = signing_secret
        self.signature_tolerance = signature_tolerance
        self.db = db
        self.roster = roster
        self.schedule = schedule
        self.reporter = reporter
        self.scheduler = scheduler
        self._clients = list(clients)

    def start(self):
        self.scheduler.start()
        log_message("Digest scheduler started", "info")

    async def stop(self):
        await self.scheduler.stop()
        for client in self._clients:
            await client.close()
        self.db.close()
        log_message("Bot context shut down", "info")


def create_context(
    signing_secret,
    webhook_url,
    database_path='codewars-bot.db',
    tz=UTC,
    fetch_timeout=timedelta(seconds=10),
    signature_tolerance=timedelta(minutes=5),
):
    """
    Create the BotContext and load the persisted roster and schedule.
    """
    db = Database(database_path)
    roster = RosterStore(db)
    roster.load()
    schedule = ScheduleState(db)
    schedule.load()

    codewars = CodewarsClient(timeout=fetch_timeout.total_seconds())
    webhook = SlackWebhook(webhook_url)
    reporter = StatsReporter(
        roster,
        codewars,
        webhook,
        baselines=BaselineStore(db, tz=tz),
        timeout=fetch_timeout.total_seconds(),
    )
    scheduler = DigestScheduler(schedule, reporter, tz)
    return BotContext(
        signing_secret, db, roster, schedule, reporter, scheduler,
        signature_tolerance=signature_tolerance,
        clients=(codewars, webhook),
    )
