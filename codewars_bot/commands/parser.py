"""
Module: codewars_bot/commands/parser.py

Turns the free text of a Slack message into one of the commands the bot understands.

The grammar is a table of anchored regular expressions, one per command. Keywords
are matched case-insensitively while usernames keep their original case. Parsing
never raises: input that matches no rule produces a ParseError value.
"""
import datetime
import re
from dataclasses import dataclass
from typing import Optional, Union

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class AddUser:
    """Start tracking a Codewars user."""
    name: str


@dataclass(frozen=True)
class RemoveUser:
    """Stop tracking a Codewars user."""
    name: str


@dataclass(frozen=True)
class Stats:
    """Report statistics, optionally as a delta since the given date."""
    since: Optional[datetime.date] = None


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class SetSchedule:
    """Move the weekly digest. weekday follows date.weekday(): 0 is Monday."""
    weekday: int
    time: Optional[datetime.time] = None


@dataclass(frozen=True)
class SetNotify:
    enabled: bool


@dataclass(frozen=True)
class ParseError:
    """The input matched no command. raw holds the text as received."""
    raw: str


Command = Union[AddUser, RemoveUser, Stats, Help, SetSchedule, SetNotify]

_USERNAME = r'(?P<name>[!-~]+)'
_DATE = r'(?P<year>[0-9]{4})/(?P<month>[0-9]{1,2})/(?P<day>[0-9]{1,2})'
_TIME = r'(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2})'
_WEEKDAY = (
    r'(?P<weekday>mon(?:day)?|tue(?:sday)?|wed(?:nesday)?|thu(?:rsday)?'
    r'|fri(?:day)?|sat(?:urday)?|sun(?:day)?)'
)


def _weekday(value):
    return WEEKDAYS.index(next(d for d in WEEKDAYS if d.startswith(value[:3].lower())))


def _build_stats(m):
    if m.group('year') is None:
        return Stats()
    return Stats(since=datetime.date(int(m.group('year')), int(m.group('month')), int(m.group('day'))))


def _build_schedule(m):
    at = None
    if m.group('hour') is not None:
        at = datetime.time(int(m.group('hour')), int(m.group('minute')))
    return SetSchedule(weekday=_weekday(m.group('weekday')), time=at)


GRAMMAR = [
    (rf'add\s+{_USERNAME}', lambda m: AddUser(m.group('name'))),
    (rf'(?:remove|rm)\s+{_USERNAME}', lambda m: RemoveUser(m.group('name'))),
    (rf'stats(?:\s+since\s+{_DATE})?', _build_stats),
    (r'help', lambda m: Help()),
    (rf'schedule\s+on\s+{_WEEKDAY}(?:\s+at\s+{_TIME})?', _build_schedule),
    (r'notify\s+(?P<state>on|off)', lambda m: SetNotify(m.group('state').lower() == 'on')),
]

_RULES = [
    (re.compile(rf'\s*{pattern}\s*', re.IGNORECASE), build)
    for pattern, build in GRAMMAR
]


def parse(text):
    """
    Parse a message into a command.

    Returns:
        One of AddUser, RemoveUser, Stats, Help, SetSchedule, SetNotify,
        or ParseError(text) when the input is not a valid command. Dates that
        do not exist and times outside 00:00-23:59 are parse errors too.
    """
    if text is None:
        return ParseError("")
    for pattern, build in _RULES:
        match = pattern.fullmatch(text)
        if match is None:
            continue
        try:
            return build(match)
        except ValueError:
            return ParseError(text)
    return ParseError(text)
