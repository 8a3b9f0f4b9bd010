"""
Module: codewars_bot/commands/stats.py

Defines the `stats [since <date>]` command, which posts a statistics report to the channel.
"""
from codewars_bot.stats.slack import SlackError
from codewars_bot.utils import log_message


async def post_stats(command, context):
    """
    Handle `stats`. The report itself goes to the channel through the webhook;
    the returned text only tells the invoking user how that went.
    """
    try:
        report = await context.reporter.send_report(command.since)
    except SlackError as e:
        log_message(f"Stats report could not be delivered: {e}", "error")
        return "❌ The statistics could not be posted to the channel."

    summary = f"📊 Posted statistics for {len(report.rows)} user(s)"
    if report.failed:
        summary += f", {len(report.failed)} could not be fetched"
    return summary + "."
