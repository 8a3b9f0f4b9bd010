"""
Module: codewars_bot/stats/baseline.py

Stores one statistics snapshot per user and day so that `stats since <date>`
can report what changed after that date.
"""
from datetime import datetime, UTC

from codewars_bot.stats.codewars import UserStats


class BaselineStore:
    """
    Snapshot storage backed by the snapshots table.

    Days are calendar days in `tz`, the zone the digest schedule uses.
    Any object with `record(stats, day)` and `lookup(username, day)` can take
    its place in the StatsReporter.
    """
    def __init__(self, db, tz=UTC, clock=None):
        self.db = db
        self.tz = tz
        self.clock = clock or (lambda: datetime.now(self.tz))

    def today(self):
        return self.clock().astimezone(self.tz).date()

    def record(self, stats, day=None):
        """
        Store `stats` as the snapshot of `day` (today in `tz` by default),
        replacing an earlier snapshot of the same day.
        """
        day = day or self.today()
        self.db.execute(
            'INSERT INTO snapshots (username, day, honor, score, rank_name, completed, leaderboard_position) '
            'VALUES (?, ?, ?, ?, ?, ?, ?) '
            'ON CONFLICT(username, day) DO UPDATE SET '
            'honor=excluded.honor, score=excluded.score, rank_name=excluded.rank_name, '
            'completed=excluded.completed, leaderboard_position=excluded.leaderboard_position',
            (stats.username, day.isoformat(), stats.honor, stats.score,
             stats.rank_name, stats.completed, stats.leaderboard_position)
        )

    def lookup(self, username, day):
        """
        Return the earliest snapshot of `username` taken on or after `day`,
        or None when there is none.
        """
        rows = self.db.fetchall(
            'SELECT username, honor, score, rank_name, completed, leaderboard_position '
            'FROM snapshots WHERE username = ? AND day >= ? ORDER BY day LIMIT 1',
            (username, day.isoformat())
        )
        if not rows:
            return None
        name, honor, score, rank_name, completed, position = rows[0]
        return UserStats(name, honor, score, rank_name, completed, position)
