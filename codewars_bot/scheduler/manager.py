"""
Module: codewars_bot/scheduler/manager.py

Defines ScheduleState, the single owner of the persisted digest schedule, and
DigestScheduler, which runs the DigestTask as a background asyncio task and
manages its lifecycle (start, stop).
"""
import asyncio
from datetime import time

from codewars_bot.scheduler.config import MIDNIGHT, ScheduleConfig
from codewars_bot.scheduler.task import DigestTask
from codewars_bot.utils import log_message


class ScheduleState:
    """
    Owns the current ScheduleConfig.

    Mutations go through an asyncio.Lock, are persisted right away and then
    signalled through `changed` so a waiting DigestTask recomputes its target.
    Readers get `current`, an immutable snapshot.

    Attributes:
      db: Database used to persist the schedule settings.
      changed (asyncio.Event): Set after every mutation.
    """
    def __init__(self, db):
        self.db = db
        self.changed = asyncio.Event()
        self._lock = asyncio.Lock()
        self._config = ScheduleConfig()

    @property
    def current(self):
        return self._config

    def load(self):
        """
        Restore the schedule from the settings table.
        """
        weekday = self.db.get_setting('schedule_weekday')
        at = self.db.get_setting('schedule_time')
        notify = self.db.get_setting('notify', '0')
        self._config = ScheduleConfig(
            weekday=int(weekday) if weekday is not None else None,
            time=time.fromisoformat(at) if at else MIDNIGHT,
            notify=notify == '1'
        )
        log_message(f"Loaded schedule: {self._config.describe()}, notify={'on' if self._config.notify else 'off'}", "info")
        return self._config

    async def set_schedule(self, weekday, at=None):
        """
        Set the weekday and optional time of the digest. A missing time means 00:00.
        """
        async with self._lock:
            config = self._config.with_schedule(weekday, at)
            self.db.set_setting('schedule_weekday', str(config.weekday))
            self.db.set_setting('schedule_time', config.time.isoformat(timespec='minutes'))
            self._config = config
        self.changed.set()
        log_message(f"Schedule changed to {config.describe()}", "info")
        return config

    async def set_notify(self, enabled):
        async with self._lock:
            config = self._config.with_notify(enabled)
            self.db.set_setting('notify', '1' if enabled else '0')
            self._config = config
        self.changed.set()
        log_message(f"Digest notifications turned {'on' if enabled else 'off'}", "info")
        return config


class DigestScheduler:
    """
    Starts and stops the background task that posts the weekly digest.

    Attributes:
      state: ScheduleState watched by the task.
      reporter: StatsReporter invoked when the digest fires.
      tz: Time zone in which the weekday and time are interpreted.
      task (asyncio.Task or None): The running DigestTask.
    """
    def __init__(self, state, reporter, tz):
        self.state = state
        self.reporter = reporter
        self.tz = tz
        self.task = None

    def start(self):
        if self.task and not self.task.done():
            return self.task
        self.task = asyncio.get_running_loop().create_task(
            DigestTask(self.state, self.reporter, self.tz).run()
        )
        return self.task

    async def stop(self):
        """
        Cancel the digest task and wait for it to finish.
        """
        if not self.task:
            return
        self.task.cancel()
        try:
            await self.task
        except asyncio.CancelledError:
            pass
        self.task = None
