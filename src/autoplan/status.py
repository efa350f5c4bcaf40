"""Deadline status of tasks relative to their schedule."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from .models import Task


class TaskStatus(str, Enum):
    """How a task stands against its deadline."""

    ON_TIME = "on-time"
    APPROACHING = "approaching"
    OVERDUE = "overdue"


def get_task_status(
    task: Task, now: datetime | None = None, warning_days: int = 1
) -> TaskStatus:
    """Classify a task against its deadline.

    The reference instant is the task's scheduled start, or now when the task
    is unscheduled. A task is overdue when its deadline has passed, the
    reference is after the deadline and the task is not completed. It is
    approaching when the reference is at most ``warning_days`` whole days
    before the deadline.

    Args:
        task: Task to classify
        now: Current instant (defaults to datetime.now())
        warning_days: Days before the deadline at which a task starts approaching

    Returns:
        The task's TaskStatus
    """
    now = now or datetime.now()  # noqa: DTZ005
    reference = task.scheduled_start or now

    if task.deadline < now and reference > task.deadline and not task.completed:
        return TaskStatus.OVERDUE

    # Whole days, truncated toward zero
    seconds = (task.deadline - reference).total_seconds()
    days_until_deadline = int(seconds / 86400)
    if 0 <= days_until_deadline <= warning_days:
        return TaskStatus.APPROACHING

    return TaskStatus.ON_TIME
