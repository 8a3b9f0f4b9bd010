"""Shared pytest fixtures and fakes for the codewars bot tests."""
import asyncio
from datetime import UTC

import pytest

from codewars_bot.bot_context import BotContext
from codewars_bot.database import Database
from codewars_bot.roster import RosterStore
from codewars_bot.scheduler.manager import ScheduleState, DigestScheduler
from codewars_bot.stats.codewars import CodewarsError, UserStats
from codewars_bot.stats.reporter import StatsReporter

SECRET = "8f742231b10e8888abcd99yyyzzz85a5"


def make_stats(username, honor=100, score=50, rank_name="6 kyu", completed=10):
    return UserStats(username, honor, score, rank_name, completed, None)


class FakeSource:
    """Statistics source answering from a dict; exceptions in the dict are raised."""

    def __init__(self, answers=None, delay=0):
        self.answers = answers or {}
        self.delay = delay
        self.requested = []

    async def fetch_user(self, username):
        self.requested.append(username)
        if self.delay:
            await asyncio.sleep(self.delay)
        answer = self.answers.get(username)
        if answer is None:
            raise CodewarsError("Codewars API error: 404")
        if isinstance(answer, Exception):
            raise answer
        return answer


class FakePoster:
    def __init__(self, fail_with=None):
        self.messages = []
        self.fail_with = fail_with

    async def post(self, text):
        if self.fail_with:
            raise self.fail_with
        self.messages.append(text)

    async def close(self):
        pass


@pytest.fixture
def db():
    database = Database(":memory:")
    try:
        yield database
    finally:
        database.close()


@pytest.fixture
def source():
    return FakeSource({
        "alice": make_stats("alice", honor=300),
        "bob": make_stats("bob", honor=120),
    })


@pytest.fixture
def poster():
    return FakePoster()


@pytest.fixture
def context(db, source, poster):
    """BotContext over an in-memory database and fake HTTP collaborators."""
    roster = RosterStore(db)
    schedule = ScheduleState(db)
    reporter = StatsReporter(roster, source, poster, timeout=1.0)
    scheduler = DigestScheduler(schedule, reporter, UTC)
    return BotContext(SECRET, db, roster, schedule, reporter, scheduler)
