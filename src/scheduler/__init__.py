"""
Scheduler module.

Fires the daily digest at a fixed time and once at startup.
"""

from src.scheduler.scheduler import DigestScheduler, SchedulerState, SchedulerStatus

__all__ = [
    "DigestScheduler",
    "SchedulerState",
    "SchedulerStatus",
]
