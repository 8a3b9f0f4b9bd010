"""
Module: codewars_bot/commands/add.py

Defines the `add <username>` command, which starts tracking a Codewars user.
"""
from codewars_bot.utils import log_message


async def add_user(command, context):
    """
    Handle `add`. Adding a user that is already tracked changes nothing.
    """
    if await context.roster.add(command.name):
        log_message(f"Roster now has {len(context.roster)} user(s)", "debug")
        return f"✅ Now tracking *{command.name}*."
    return f"ℹ️ *{command.name}* is already tracked."
