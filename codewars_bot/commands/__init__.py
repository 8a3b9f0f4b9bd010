"""
Package: codewars_bot/commands

Command grammar and handlers. `parse` turns text into a command, `interpret`
runs it, `respond` does both.
"""
from .parser import (
    AddUser, RemoveUser, Stats, Help, SetSchedule, SetNotify, ParseError, Command, parse,
)
from .interpreter import interpret, respond
