"""
Module: codewars_bot/commands/help.py

Provides the `help` command and the usage text shown for unknown input.
"""
from codewars_bot.utils import log_message

HELP_FIELDS = [
    ("add <username>", "Start tracking a Codewars user"),
    ("remove <username> | rm <username>", "Stop tracking a Codewars user"),
    ("stats [since <yyyy/m/d>]", "Post statistics of all tracked users, optionally as progress since a date"),
    ("schedule on <weekday> [at <HH:MM>]", "Set the weekly digest, e.g. `schedule on monday at 09:00`"),
    ("notify on | notify off", "Turn the weekly digest on or off"),
    ("help", "Show this message"),
]


def help_text():
    lines = ["📚 *Codewars Bot Help*", "Here are the available commands:"]
    for usage, description in HELP_FIELDS:
        lines.append(f"• `{usage}`: {description}")
    return "\n".join(lines)


async def show_help(command, context):
    """
    Handle `help`.
    """
    log_message("Help requested", "debug")
    return help_text()


def usage_for(raw):
    """
    Reply for input that is not a command.
    """
    shown = raw.strip() or "(empty)"
    return f"❌ Unknown command: `{shown}`\n\n{help_text()}"
