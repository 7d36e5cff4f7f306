"""
Scheduler Safety Tests

Verifies the IDLE/RUNNING state machine: trigger timing, the startup
trigger, missed (not queued) overlapping triggers, and recovery after
job failures.
"""

import threading
import time
from datetime import datetime, timedelta

import pytest

from src.scheduler import DigestScheduler, SchedulerState

from tests.test_config import CONFIG, EXPECTED


class FakeClock:
    """Settable clock for driving tick() deterministically."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class ScaledClock:
    """Wall clock that runs `factor` times faster than real time from `start`."""

    def __init__(self, start: datetime, factor: float):
        self.start = start
        self.factor = factor
        self._origin = time.monotonic()

    def __call__(self) -> datetime:
        elapsed = (time.monotonic() - self._origin) * self.factor
        return self.start + timedelta(seconds=elapsed)


class BlockingJob:
    """A job that blocks until released, to hold the scheduler in RUNNING."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def __call__(self):
        self.calls += 1
        self.started.set()
        self.release.wait(CONFIG["thread_join_timeout"])


@pytest.fixture
def calls():
    return []


@pytest.fixture
def job(calls):
    return lambda: calls.append(1)


@pytest.mark.scheduler_safety
class TestConstruction:

    def test_defaults_from_config(self, job):
        scheduler = DigestScheduler(job)
        assert scheduler.hour == EXPECTED["config"]["default_digest_hour"]
        assert scheduler.minute == EXPECTED["config"]["default_digest_minute"]

    @pytest.mark.parametrize("kwargs", [
        {"hour": 24},
        {"hour": -1},
        {"minute": 60},
        {"interval_seconds": 0},
    ])
    def test_invalid_arguments(self, job, kwargs):
        with pytest.raises(ValueError):
            DigestScheduler(job, **kwargs)

    def test_starts_idle(self, job):
        assert DigestScheduler(job).state is SchedulerState.IDLE


@pytest.mark.scheduler_safety
class TestTick:

    def test_fires_at_trigger_minute(self, job, calls):
        clock = FakeClock(datetime(2026, 10, 17, 6, 0, 30))
        scheduler = DigestScheduler(job, hour=6, minute=0, clock=clock)

        assert scheduler.tick() is True
        assert calls == [1]

    @pytest.mark.parametrize("now", [
        datetime(2026, 10, 17, 5, 59, 59),
        datetime(2026, 10, 17, 6, 1, 0),
        datetime(2026, 10, 17, 18, 0, 0),
        datetime(2026, 10, 17, 0, 0, 0),
    ])
    def test_does_not_fire_outside_trigger_minute(self, job, calls, now):
        scheduler = DigestScheduler(job, hour=6, minute=0, clock=FakeClock(now))

        assert scheduler.tick() is False
        assert calls == []

    def test_repeated_ticks_in_same_minute_each_fire(self, job, calls):
        """No 'already sent today' memory: each matching tick sends."""
        clock = FakeClock(datetime(2026, 10, 17, 6, 0, 0))
        scheduler = DigestScheduler(job, hour=6, minute=0, clock=clock)

        scheduler.tick()
        clock.now = datetime(2026, 10, 17, 6, 0, 45)
        scheduler.tick()

        assert calls == [1, 1]

    def test_fires_again_next_day(self, job, calls):
        clock = FakeClock(datetime(2026, 10, 17, 6, 0))
        scheduler = DigestScheduler(job, hour=6, minute=0, clock=clock)

        scheduler.tick()
        clock.now = datetime(2026, 10, 18, 6, 0)
        scheduler.tick()

        assert len(calls) == 2

    def test_is_due(self, job):
        scheduler = DigestScheduler(job, hour=21, minute=15)
        assert scheduler.is_due(datetime(2026, 1, 1, 21, 15, 59))
        assert not scheduler.is_due(datetime(2026, 1, 1, 21, 16))


@pytest.mark.scheduler_safety
class TestStateMachine:

    def test_returns_to_idle_after_run(self, job):
        scheduler = DigestScheduler(job)
        scheduler.trigger("manual")

        status = scheduler.status()
        assert status.state is SchedulerState.IDLE
        assert status.runs_completed == 1
        assert status.last_reason == "manual"
        assert status.last_error is None

    def test_returns_to_idle_after_job_raises(self):
        def broken():
            raise RuntimeError("pipeline blew up")

        scheduler = DigestScheduler(broken)

        assert scheduler.trigger() is True

        status = scheduler.status()
        assert status.state is SchedulerState.IDLE
        assert "pipeline blew up" in status.last_error

    def test_state_is_running_during_job(self):
        seen = []
        scheduler = None

        def job():
            seen.append(scheduler.state)

        scheduler = DigestScheduler(job)
        scheduler.trigger()

        assert seen == [SchedulerState.RUNNING]

    def test_overlapping_trigger_is_missed_not_queued(self):
        """
        GIVEN: A digest is RUNNING
        WHEN: Another trigger arrives
        THEN: It is missed, counted, and never runs later
        """
        blocking = BlockingJob()
        scheduler = DigestScheduler(blocking)

        assert scheduler.trigger_in_background("first") is True
        assert blocking.started.wait(CONFIG["thread_join_timeout"])

        assert scheduler.trigger("second") is False
        assert scheduler.trigger_in_background("third") is False

        blocking.release.set()
        _wait_for_idle(scheduler)

        status = scheduler.status()
        assert blocking.calls == 1
        assert status.missed_runs == 2
        assert status.runs_completed == 1

    def test_concurrent_triggers_run_at_most_once(self):
        blocking = BlockingJob()
        scheduler = DigestScheduler(blocking)
        barrier = threading.Barrier(8)
        results = []

        def fire():
            barrier.wait()
            results.append(scheduler.trigger_in_background("race"))

        threads = [threading.Thread(target=fire) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(CONFIG["thread_join_timeout"])

        blocking.release.set()
        _wait_for_idle(scheduler)

        assert results.count(True) == 1
        assert blocking.calls == 1

    def test_trigger_after_idle_runs_again(self, job, calls):
        scheduler = DigestScheduler(job)
        scheduler.trigger()
        scheduler.trigger()
        assert calls == [1, 1]

    def test_status_to_dict(self, job):
        scheduler = DigestScheduler(job)
        scheduler.trigger("manual")

        data = scheduler.status().to_dict()

        assert data["state"] == "idle"
        assert data["runs_completed"] == 1
        assert data["last_started_at"] is not None


@pytest.mark.scheduler_safety
class TestTimerThread:

    def test_startup_trigger_runs_immediately(self, job, calls):
        scheduler = DigestScheduler(
            job, hour=6, minute=0, interval_seconds=3600,
            clock=FakeClock(datetime(2026, 10, 17, 12, 0)),
        )

        scheduler.start()
        _wait_until(lambda: calls)
        scheduler.stop()

        assert calls == [1]
        assert scheduler.status().last_reason == "startup"
        assert not scheduler.is_alive

    def test_no_startup_trigger_when_disabled(self, job, calls):
        scheduler = DigestScheduler(
            job, hour=6, minute=0, interval_seconds=3600,
            clock=FakeClock(datetime(2026, 10, 17, 12, 0)),
        )

        scheduler.start(run_immediately=False)
        scheduler.stop()

        assert calls == []

    def test_timer_ticks_at_interval(self, job, calls):
        scheduler = DigestScheduler(
            job, hour=6, minute=0, interval_seconds=0.01,
            clock=FakeClock(datetime(2026, 10, 17, 6, 0)),
        )

        scheduler.start(run_immediately=False)
        _wait_until(lambda: len(calls) >= 2)
        scheduler.stop()

        assert scheduler.status().last_reason == "schedule"

    def test_start_twice_raises(self, job):
        scheduler = DigestScheduler(job, interval_seconds=3600)
        scheduler.start(run_immediately=False)
        try:
            with pytest.raises(RuntimeError):
                scheduler.start()
        finally:
            scheduler.stop()

    def test_stop_prevents_further_triggers(self, job, calls):
        clock = FakeClock(datetime(2026, 10, 17, 12, 0))
        scheduler = DigestScheduler(job, hour=6, minute=0, interval_seconds=0.01, clock=clock)

        scheduler.start(run_immediately=False)
        scheduler.stop()
        clock.now = datetime(2026, 10, 17, 6, 0)
        time.sleep(0.05)

        assert calls == []


@pytest.mark.scheduler_safety
class TestTimerCadence:

    def test_slow_startup_digest_does_not_skip_trigger_minute(self):
        """
        GIVEN: The process starts at 05:59:30 and the startup digest is slow
        WHEN: The timer keeps running past 06:00
        THEN: The 06:00 digest still runs, because job duration does not delay ticks
        """
        # 1 real second is one simulated minute
        clock = ScaledClock(datetime(2026, 10, 17, 5, 59, 30), factor=60)
        runs = []

        def job():
            runs.append(clock().strftime("%H:%M"))
            if len(runs) == 1:
                time.sleep(0.7)

        scheduler = DigestScheduler(job, hour=6, minute=0, interval_seconds=1.0, clock=clock)

        scheduler.start()
        try:
            _wait_until(lambda: len(runs) >= 2)
        finally:
            scheduler.stop()

        assert runs[0] == "05:59"
        assert runs[1] == "06:00"
        assert scheduler.status().last_reason == "schedule"

    def test_tick_while_running_is_missed_not_delayed(self):
        """A due tick during a long run is counted as missed; the timer keeps going."""
        blocking = BlockingJob()
        scheduler = DigestScheduler(
            blocking, hour=6, minute=0, interval_seconds=0.02,
            clock=FakeClock(datetime(2026, 10, 17, 6, 0)),
        )

        scheduler.start(run_immediately=False)
        try:
            assert blocking.started.wait(CONFIG["thread_join_timeout"])
            _wait_until(lambda: scheduler.status().missed_runs >= 2)
            assert scheduler.is_alive
        finally:
            scheduler.stop()
            blocking.release.set()

        _wait_for_idle(scheduler)
        assert blocking.calls == 1

    def test_stop_returns_while_job_in_flight(self):
        blocking = BlockingJob()
        scheduler = DigestScheduler(blocking, interval_seconds=3600)

        scheduler.start()
        try:
            assert blocking.started.wait(CONFIG["thread_join_timeout"])
            scheduler.stop()
            assert not scheduler.is_alive
            assert scheduler.state is SchedulerState.RUNNING
        finally:
            blocking.release.set()

        _wait_for_idle(scheduler)

    def test_background_tick_runs_off_caller_thread(self):
        threads = []
        scheduler = DigestScheduler(
            lambda: threads.append(threading.current_thread()),
            hour=6, minute=0, clock=FakeClock(datetime(2026, 10, 17, 6, 0)),
        )

        assert scheduler.tick(background=True) is True
        _wait_until(lambda: threads)

        assert threads[0] is not threading.current_thread()
        assert threads[0].name == "digest-schedule"


def _wait_until(predicate, timeout: float = CONFIG["thread_join_timeout"]):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            pytest.fail("condition not reached in time")
        time.sleep(0.005)


def _wait_for_idle(scheduler):
    _wait_until(lambda: scheduler.state is SchedulerState.IDLE)
