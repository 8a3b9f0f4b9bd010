"""
Package: codewars_bot/scheduler

Provides ScheduleConfig, DigestTask, ScheduleState and DigestScheduler classes.
"""
from .config import ScheduleConfig, next_occurrence
from .task import DigestTask
from .manager import ScheduleState, DigestScheduler
