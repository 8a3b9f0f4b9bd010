"""
Module: codewars_bot/scheduler/config.py

Provides ScheduleConfig, the weekly digest settings, and next_occurrence, which
computes the next trigger instant for a weekday/time pair.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta
from typing import Optional

from codewars_bot.commands.parser import WEEKDAYS

MIDNIGHT = time(0, 0)


@dataclass(frozen=True)
class ScheduleConfig:
    """
    Configuration of the weekly digest.

    Attributes:
        weekday (int or None): Day of the week (0 = Monday), None until first set.
        time (time): Time of day for the digest, 00:00 unless set.
        notify (bool): Whether the digest is actually posted when it fires.
    """
    weekday: Optional[int] = None
    time: time = MIDNIGHT
    notify: bool = False

    @property
    def is_set(self):
        return self.weekday is not None

    def with_schedule(self, weekday, at=None):
        return replace(self, weekday=weekday, time=at or MIDNIGHT)

    def with_notify(self, enabled):
        return replace(self, notify=enabled)

    def describe(self):
        if not self.is_set:
            return "no schedule set"
        return f"every {WEEKDAYS[self.weekday].capitalize()} at {self.time.strftime('%H:%M')}"


def next_occurrence(weekday, at, now):
    """
    Return the next instant after `now` that falls on `weekday` at time `at`.

    If `now` is exactly that instant, the occurrence counts as consumed and the
    result lies seven days later. The time zone of `now` is kept.

    Args:
        weekday (int): Target weekday, 0 is Monday.
        at (time): Target time of day.
        now (datetime): Reference instant.
    """
    days_ahead = (weekday - now.weekday()) % 7
    day = now.date() + timedelta(days=days_ahead)
    candidate = datetime.combine(day, at, tzinfo=now.tzinfo)
    if candidate <= now:
        candidate += timedelta(weeks=1)
    return candidate
