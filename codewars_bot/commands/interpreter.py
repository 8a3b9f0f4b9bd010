"""
Module: codewars_bot/commands/interpreter.py

Maps every parsed command to exactly one handler and runs it.
"""
from codewars_bot.commands.add import add_user
from codewars_bot.commands.delete import remove_user
from codewars_bot.commands.help import show_help, usage_for
from codewars_bot.commands.parser import (
    AddUser, RemoveUser, Stats, Help, SetSchedule, SetNotify, ParseError, parse,
)
from codewars_bot.commands.schedule import set_schedule, set_notify
from codewars_bot.commands.stats import post_stats
from codewars_bot.utils import log_message

HANDLERS = {
    AddUser: add_user,
    RemoveUser: remove_user,
    Stats: post_stats,
    Help: show_help,
    SetSchedule: set_schedule,
    SetNotify: set_notify,
}


async def interpret(command, context):
    """
    Run the handler for `command` and return the reply text.

    Args:
        command: A parsed command.
        context: BotContext giving access to the roster, the schedule and the reporter.
    """
    handler = HANDLERS[type(command)]
    log_message(f"Running {type(command).__name__} command", "debug")
    return await handler(command, context)


async def respond(text, context):
    """
    Parse `text` and interpret it. Input that is not a command gets the usage help.
    """
    command = parse(text)
    if isinstance(command, ParseError):
        log_message(f"Unparsable command: {command.raw!r}", "info")
        return usage_for(command.raw)
    return await interpret(command, context)
