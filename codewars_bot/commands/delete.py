"""
Module: codewars_bot/commands/delete.py

Defines the `remove <username>` command (alias `rm`), which stops tracking a user.
"""


async def remove_user(command, context):
    """
    Handle `remove`/`rm`. Removing a user that is not tracked changes nothing.
    """
    if await context.roster.remove(command.name):
        return f"✅ Stopped tracking *{command.name}*."
    return f"ℹ️ *{command.name}* was not tracked."
