"""
Daily digest scheduler.

A two-state machine around a single job (the digest pipeline):

    IDLE --trigger--> RUNNING --job returns/raises--> IDLE

Triggers come from:
- startup: once, immediately, when the timer thread starts
- the timer: every `interval_seconds` at a fixed rate, if the wall clock
  reads hour:minute of the configured trigger time
- manual: an operator request (web API, CLI)

At most one RUNNING instance exists. A trigger that arrives while RUNNING
is missed (counted, not queued). Startup and timer runs get their own
daemon thread, so the tick cadence does not depend on job duration.

There is no "already sent today" memory: every matching tick inside the
trigger minute sends a digest.
"""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from src.config import DIGEST_HOUR, DIGEST_MINUTE, SCHEDULER_INTERVAL

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class SchedulerStatus:
    """Point-in-time view of the scheduler, safe to hand to other threads."""
    state: SchedulerState = SchedulerState.IDLE
    runs_completed: int = 0
    missed_runs: int = 0
    last_reason: Optional[str] = None
    last_started_at: Optional[datetime] = None
    last_finished_at: Optional[datetime] = None
    last_error: Optional[str] = None
    timer_alive: bool = False

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "runs_completed": self.runs_completed,
            "missed_runs": self.missed_runs,
            "last_reason": self.last_reason,
            "last_started_at": self.last_started_at.isoformat() if self.last_started_at else None,
            "last_finished_at": self.last_finished_at.isoformat() if self.last_finished_at else None,
            "last_error": self.last_error,
            "timer_alive": self.timer_alive,
        }


class DigestScheduler:
    """
    Runs a job at a fixed wall-clock time each day, plus once at startup.

    Usage:
        scheduler = DigestScheduler(lambda: DigestPipeline(store).run())
        scheduler.start()          # immediate run, then check every interval
        ...
        scheduler.stop()

    The clock is injectable so tests can drive tick() deterministically.
    """

    def __init__(
        self,
        job: Callable[[], Any],
        hour: int = None,
        minute: int = None,
        interval_seconds: float = None,
        clock: Callable[[], datetime] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            job: Zero-argument callable to run on each trigger.
            hour: Trigger hour (0-23). Defaults to config.DIGEST_HOUR.
            minute: Trigger minute (0-59). Defaults to config.DIGEST_MINUTE.
            interval_seconds: Timer period. Defaults to config.SCHEDULER_INTERVAL.
            clock: Returns the current local time. Defaults to datetime.now.
        """
        self.job = job
        self.hour = hour if hour is not None else DIGEST_HOUR
        self.minute = minute if minute is not None else DIGEST_MINUTE
        self.interval_seconds = interval_seconds if interval_seconds is not None else SCHEDULER_INTERVAL
        self.clock = clock or datetime.now

        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour must be between 0 and 23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute must be between 0 and 59, got {self.minute}")
        if self.interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {self.interval_seconds}")

        # Guards _status; held only for state transitions, never while the job runs
        self._lock = threading.Lock()
        self._status = SchedulerStatus()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # =========================================================================
    # State machine
    # =========================================================================

    @property
    def state(self) -> SchedulerState:
        with self._lock:
            return self._status.state

    def _enter_running(self, reason: str) -> bool:
        """IDLE -> RUNNING. Returns False (and counts a miss) if already RUNNING."""
        with self._lock:
            if self._status.state is SchedulerState.RUNNING:
                self._status.missed_runs += 1
                missed = self._status.missed_runs
            else:
                self._status.state = SchedulerState.RUNNING
                self._status.last_reason = reason
                self._status.last_started_at = self.clock()
                missed = None

        if missed is not None:
            logger.warning(f"Trigger '{reason}' missed: digest already running (missed={missed})")
            return False

        logger.info(f"Scheduler RUNNING (trigger: {reason})")
        return True

    def _run_job(self) -> None:
        """Run the job, then RUNNING -> IDLE regardless of outcome."""
        error = None
        try:
            self.job()
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            logger.error(f"Scheduled job failed: {error}")
        finally:
            with self._lock:
                self._status.state = SchedulerState.IDLE
                self._status.runs_completed += 1
                self._status.last_finished_at = self.clock()
                self._status.last_error = error
            logger.info("Scheduler IDLE")

    def trigger(self, reason: str = "manual") -> bool:
        """
        Run the job synchronously on the calling thread, unless already running.

        Returns:
            True if the job ran, False if the trigger was missed.
        """
        if not self._enter_running(reason):
            return False
        self._run_job()
        return True

    def trigger_in_background(self, reason: str = "manual") -> bool:
        """
        Like trigger(), but run the job on a new daemon thread.

        Returns:
            True if a run was started, False if one is already in progress.
        """
        if not self._enter_running(reason):
            return False
        thread = threading.Thread(target=self._run_job, name=f"digest-{reason}", daemon=True)
        thread.start()
        return True

    # =========================================================================
    # Timer
    # =========================================================================

    def is_due(self, now: datetime = None) -> bool:
        """True when the wall clock is inside the configured trigger minute."""
        now = now or self.clock()
        return now.hour == self.hour and now.minute == self.minute

    def tick(self, background: bool = False) -> bool:
        """
        Handle one timer elapse.

        Args:
            background: Run the job on its own thread instead of the caller's.

        Returns:
            True if the job ran (or was started).
        """
        if not self.is_due():
            return False
        if background:
            return self.trigger_in_background("schedule")
        return self.trigger("schedule")

    def _run_loop(self, run_immediately: bool) -> None:
        logger.info(
            f"Scheduler started: daily at {self.hour:02d}:{self.minute:02d}, "
            f"checking every {self.interval_seconds}s"
        )

        # Jobs run off this thread; tick cadence must not depend on job duration
        if run_immediately:
            self.trigger_in_background("startup")

        next_deadline = time.monotonic() + self.interval_seconds

        # wait() returns True once stop() is called
        while not self._stop_event.wait(max(0.0, next_deadline - time.monotonic())):
            next_deadline += self.interval_seconds
            # Fixed rate; intervals already behind us are skipped, not replayed
            now = time.monotonic()
            while next_deadline <= now:
                next_deadline += self.interval_seconds

            try:
                self.tick(background=True)
            except Exception as e:
                logger.error(f"Scheduler tick error: {type(e).__name__}: {e}")

        logger.info("Scheduler stopped")

    def start(self, run_immediately: bool = True) -> None:
        """
        Start the timer thread.

        Args:
            run_immediately: Fire one startup trigger before the first interval.

        Raises:
            RuntimeError: If already started.
        """
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Scheduler already started")

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            args=(run_immediately,),
            name="digest-scheduler",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop accepting timer triggers.

        Waits for the timer thread to exit (at most `timeout` seconds when
        given). The timer thread never runs the job itself, so this returns
        promptly; an in-flight digest is neither interrupted nor drained.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def status(self) -> SchedulerStatus:
        """Return a copy of the current status."""
        with self._lock:
            snapshot = SchedulerStatus(**vars(self._status))
        snapshot.timer_alive = self.is_alive
        return snapshot

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} at={self.hour:02d}:{self.minute:02d} "
            f"state={self.state.value}>"
        )
