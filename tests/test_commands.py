"""Tests for command handlers run through the interpreter."""
import asyncio
from datetime import date, time

from codewars_bot.commands import (
    AddUser, RemoveUser, Stats, Help, SetSchedule, SetNotify, interpret, respond,
)
from codewars_bot.commands.help import HELP_FIELDS
from codewars_bot.commands.interpreter import HANDLERS
from codewars_bot.stats.slack import SlackError
from tests.conftest import FakePoster


def run(coro):
    return asyncio.run(coro)


def test_every_command_has_a_handler():
    assert set(HANDLERS) == {AddUser, RemoveUser, Stats, Help, SetSchedule, SetNotify}


def test_add_and_remove_replies(context):
    assert run(interpret(AddUser("bob"), context)) == "✅ Now tracking *bob*."
    assert run(interpret(AddUser("bob"), context)) == "ℹ️ *bob* is already tracked."
    assert run(interpret(RemoveUser("bob"), context)) == "✅ Stopped tracking *bob*."
    assert run(interpret(RemoveUser("bob"), context)) == "ℹ️ *bob* was not tracked."


def test_help_lists_every_command(context):
    text = run(interpret(Help(), context))
    for usage, _ in HELP_FIELDS:
        assert usage in text


def test_respond_to_garbage_gives_usage(context):
    text = run(respond("   ", context))
    assert text.startswith("❌ Unknown command: `(empty)`")


def test_stats_summary(context, poster):
    run(context.roster.add("alice"))
    run(context.roster.add("ghost"))
    reply = run(interpret(Stats(since=None), context))
    assert reply == "📊 Posted statistics for 2 user(s), 1 could not be fetched."
    assert len(poster.messages) == 1


def test_stats_delivery_failure(context):
    context.reporter.poster = FakePoster(fail_with=SlackError("down"))
    run(context.roster.add("alice"))
    reply = run(interpret(Stats(since=date(2024, 1, 1)), context))
    assert reply == "❌ The statistics could not be posted to the channel."


def test_schedule_then_notify(context):
    reply = run(interpret(SetSchedule(0, time(9, 0)), context))
    assert reply.startswith("🗓️ Weekly digest scheduled every Monday at 09:00.")
    assert "notify on" in reply

    reply = run(interpret(SetNotify(True), context))
    assert reply == "🔔 Weekly digest turned on, posted every Monday at 09:00."

    assert run(interpret(SetNotify(False), context)) == "🔕 Weekly digest turned off."


def test_notify_without_schedule(context):
    reply = run(interpret(SetNotify(True), context))
    assert "schedule on <weekday>" in reply


def test_schedule_without_time_is_midnight(context):
    run(interpret(SetSchedule(3), context))
    assert context.schedule.current.time == time(0, 0)
    assert context.schedule.current.describe() == "every Thursday at 00:00"
