"""
Module: codewars_bot/stats/reporter.py

Defines StatsReporter: resolves every tracked user to Codewars statistics,
aggregates them into a Report and posts the formatted message to Slack.
"""
import asyncio
import sqlite3
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from codewars_bot.stats.codewars import CodewarsError
from codewars_bot.utils import log_message

DELTA_FIELDS = ("honor", "score", "completed")


@dataclass(frozen=True)
class ReportRow:
    """
    One line of a report.

    Attributes:
        username (str): Codewars username.
        stats (UserStats or None): Current statistics, None if the fetch failed.
        delta (dict or None): current - baseline per field in DELTA_FIELDS.
        error (str or None): Reason of a failed fetch.
        no_baseline (bool): A delta was asked for but no snapshot was available.
    """
    username: str
    stats: Optional[object] = None
    delta: Optional[dict] = None
    error: Optional[str] = None
    no_baseline: bool = False

    @property
    def ok(self):
        return self.error is None

    @property
    def sort_value(self):
        if self.delta is not None:
            return self.delta["honor"]
        return self.stats.honor


@dataclass
class Report:
    since: Optional[date] = None
    rows: List[ReportRow] = field(default_factory=list)

    @property
    def succeeded(self):
        return [row for row in self.rows if row.ok]

    @property
    def failed(self):
        return [row for row in self.rows if not row.ok]


def order_rows(rows):
    """
    Successful rows by value descending (ties by username), then failures by username.
    """
    good = sorted((r for r in rows if r.ok), key=lambda r: (-r.sort_value, r.username))
    bad = sorted((r for r in rows if not r.ok), key=lambda r: r.username)
    return good + bad


def _signed(value):
    return f"+{value}" if value > 0 else str(value)


def format_report(report, title=None):
    """
    Render a Report as a Slack mrkdwn message.
    """
    if title is None:
        title = ":crossed_swords: *Codewars statistics*"
        if report.since:
            title += f" since {report.since.isoformat()}"
    lines = [title]

    if not report.rows:
        lines.append("_No users are tracked yet. Add one with `add <username>`._")
        return "\n".join(lines)

    for position, row in enumerate(report.rows, start=1):
        if not row.ok:
            lines.append(f"{position}. *{row.username}* :warning: failed to fetch statistics ({row.error})")
            continue
        stats = row.stats
        if row.delta is not None:
            d = row.delta
            lines.append(
                f"{position}. *{row.username}* honor {_signed(d['honor'])}, "
                f"score {_signed(d['score'])}, kata {_signed(d['completed'])} "
                f"(now {stats.rank_name}, {stats.honor} honor)"
            )
        else:
            line = (
                f"{position}. *{row.username}* {stats.rank_name}, {stats.honor} honor, "
                f"score {stats.score}, {stats.completed} kata"
            )
            if row.no_baseline:
                line += " _(no baseline)_"
            lines.append(line)

    if report.failed:
        lines.append(f"_{len(report.failed)} of {len(report.rows)} user(s) could not be fetched._")
    return "\n".join(lines)


class StatsReporter:
    """
    Builds and posts statistics reports for the roster.

    Attributes:
        roster: RosterStore providing the tracked usernames.
        source: Statistics source with a `fetch_user(username)` coroutine.
        poster: Outgoing channel with a `post(text)` coroutine.
        baselines: Snapshot store with `record(stats)` and `lookup(username, day)`, or None.
        timeout (float): Budget in seconds for each user's fetch.
    """
    def __init__(self, roster, source, poster, baselines=None, timeout=10.0):
        self.roster = roster
        self.source = source
        self.poster = poster
        self.baselines = baselines
        self.timeout = timeout

    async def _fetch(self, username, since):
        try:
            stats = await asyncio.wait_for(self.source.fetch_user(username), timeout=self.timeout)
        except asyncio.TimeoutError:
            log_message(f"Fetching statistics of {username} timed out after {self.timeout}s", "warning")
            return ReportRow(username, error="timed out")
        except CodewarsError as e:
            log_message(f"Fetching statistics of {username} failed: {e}", "warning")
            return ReportRow(username, error=str(e))
        except Exception as e:
            log_message(f"Unexpected error fetching statistics of {username}: {e}", "error")
            return ReportRow(username, error="unexpected error")

        if self.baselines is None:
            return ReportRow(username, stats=stats, no_baseline=since is not None)

        baseline = None
        try:
            if since:
                baseline = self.baselines.lookup(username, since)
            self.baselines.record(stats)
        except sqlite3.Error as e:
            log_message(f"Snapshot storage failed for {username}: {e}", "warning")
        if since is None:
            return ReportRow(username, stats=stats)
        if baseline is None:
            return ReportRow(username, stats=stats, no_baseline=True)
        delta = {name: getattr(stats, name) - getattr(baseline, name) for name in DELTA_FIELDS}
        return ReportRow(username, stats=stats, delta=delta)

    async def build_report(self, since=None):
        """
        Fetch all tracked users concurrently. A failing user becomes an error
        row and never prevents the others from being reported.
        """
        users = self.roster.list()
        rows = await asyncio.gather(*(self._fetch(name, since) for name in users))
        report = Report(since=since, rows=order_rows(rows))
        log_message(
            f"Built report for {len(users)} user(s), {len(report.failed)} failed",
            "info"
        )
        return report

    async def send_report(self, since=None):
        """
        Build the report and post it as a single message. Delivery errors propagate.
        """
        report = await self.build_report(since)
        await self.poster.post(format_report(report))
        return report

    async def send_digest(self):
        report = await self.build_report()
        await self.poster.post(format_report(report, title=":calendar: *Weekly Codewars digest*"))
        return report
