"""
Scheduler de Jobs (APScheduler)
"""

from .scheduler import (
    SYNC_JOB_ID,
    create_scheduler,
    start_scheduler,
    stop_scheduler,
    get_scheduler_status,
)

__all__ = [
    "SYNC_JOB_ID",
    "create_scheduler",
    "start_scheduler",
    "stop_scheduler",
    "get_scheduler_status",
]
