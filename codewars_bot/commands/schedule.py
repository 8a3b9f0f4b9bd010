"""
Module: codewars_bot/commands/schedule.py

Defines `schedule on <weekday> [at <time>]` and `notify on|off`, which change
when and whether the weekly digest is posted.
"""


async def set_schedule(command, context):
    """
    Handle `schedule`. The running digest task picks the change up immediately.
    """
    config = await context.schedule.set_schedule(command.weekday, command.time)
    reply = f"🗓️ Weekly digest scheduled {config.describe()}."
    if not config.notify:
        reply += " Notifications are off, turn them on with `notify on`."
    return reply


async def set_notify(command, context):
    """
    Handle `notify on|off`.
    """
    config = await context.schedule.set_notify(command.enabled)
    if not config.notify:
        return "🔕 Weekly digest turned off."
    if not config.is_set:
        return "🔔 Weekly digest turned on. Set a day with `schedule on <weekday>`."
    return f"🔔 Weekly digest turned on, posted {config.describe()}."
