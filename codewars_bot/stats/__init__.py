"""
Package: codewars_bot/stats

Provides the Codewars client, the Slack webhook, the snapshot store and the StatsReporter.
"""
from .codewars import CodewarsClient, CodewarsError, UserStats
from .slack import SlackWebhook, SlackError
from .baseline import BaselineStore
from .reporter import StatsReporter, Report, ReportRow, format_report
