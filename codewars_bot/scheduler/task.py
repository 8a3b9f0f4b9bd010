"""
Module: codewars_bot/scheduler/task.py

Defines DigestTask: waits for the next weekly trigger, posts the statistics digest
and starts over, recomputing the target whenever the schedule changes.
"""
import asyncio
from datetime import datetime, timedelta

from codewars_bot.scheduler.config import next_occurrence
from codewars_bot.utils import log_message, format_duration


class DigestTask:
    """
    Runs the weekly digest for the lifetime of the process.

    The task alternates between two states:
      - Waiting: the target instant is computed from the latest ScheduleConfig and
        the timer is raced against the state's `changed` event. A change aborts the
        wait and the target is computed again from the new configuration.
      - Firing: if notifications are on, the reporter posts the digest. Errors are
        logged and the task goes back to Waiting.

    Attributes:
      state: ScheduleState providing the configuration and the change signal.
      reporter: StatsReporter with a `send_digest()` coroutine.
      tz: Time zone used to interpret the configured weekday and time.
      clock: Callable returning the current aware datetime in `tz`.
      next_run (datetime or None): Target of the current wait.
      fire_count (int): Number of times the schedule has fired.
    """
    def __init__(self, state, reporter, tz, clock=None):
        self.state = state
        self.reporter = reporter
        self.tz = tz
        self.clock = clock or (lambda: datetime.now(self.tz))
        self.next_run = None
        self.fire_count = 0

    async def run(self):
        """
        Main loop. Never returns on its own; stops only when cancelled.
        """
        consumed = None
        try:
            while True:
                # Clear before reading so that a change made after the snapshot
                # still interrupts the wait below.
                self.state.changed.clear()
                config = self.state.current

                if not config.is_set:
                    self.next_run = None
                    log_message("No digest schedule configured, waiting for one", "debug")
                    await self.state.changed.wait()
                    continue

                now = self.clock()
                if consumed is not None and consumed > now:
                    now = consumed
                target = next_occurrence(config.weekday, config.time, now)
                self.next_run = target
                # Absolute seconds; same-zone subtraction drops DST offset changes.
                delay = target.timestamp() - self.clock().timestamp()
                log_message(
                    f"Next digest in {format_duration(timedelta(seconds=delay))} "
                    f"({target.strftime('%Y-%m-%d %H:%M %Z')})",
                    "debug"
                )

                if await self._wait_for_change(delay):
                    log_message("Digest schedule changed, recomputing next run", "debug")
                    continue

                consumed = target
                await self._fire(target)

        except asyncio.CancelledError:
            log_message("Cancelled digest task", "warning")
            raise

    async def _wait_for_change(self, delay):
        """
        Wait up to `delay` seconds for the schedule to change.

        Returns True if the schedule changed, False if the timer elapsed.
        """
        try:
            await asyncio.wait_for(self.state.changed.wait(), timeout=max(delay, 0))
            return True
        except asyncio.TimeoutError:
            return False

    async def _fire(self, when):
        """
        Post the digest for the occurrence at `when` unless notifications are off.
        """
        self.fire_count += 1
        config = self.state.current
        if not config.notify:
            log_message(
                f"Skipping digest for {when.strftime('%Y-%m-%d %H:%M %Z')}, notifications are off",
                "info"
            )
            return
        try:
            await self.reporter.send_digest()
            log_message(f"Posted digest scheduled for {when.strftime('%Y-%m-%d %H:%M %Z')}", "info")
        except Exception as e:
            log_message(f"Error posting digest scheduled for {when}: {e}", "error")
