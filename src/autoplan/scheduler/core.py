"""Core dataclasses for the scheduling system."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from autoplan.models import Task


def _default_str_list() -> list[str]:
    return []


class TaskState(str, Enum):
    """Classification of a task at the start of a scheduling pass."""

    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"  # Protected: never moved or re-placed
    SCHEDULABLE = "schedulable"


@dataclass(frozen=True)
class TimeSlot:
    """A free (or occupied) interval within a working day."""

    start: datetime
    end: datetime
    available: bool = True

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


@dataclass
class SchedulingContext:
    """Per-pass partition of the input tasks."""

    completed_tasks: list[Task]
    tasks_in_progress: list[Task]
    tasks_to_schedule: list[Task]


@dataclass
class SchedulingResult:
    """Complete result of a scheduling pass including diagnostics."""

    tasks: list[Task]
    unscheduled_task_ids: list[str] = field(default_factory=_default_str_list)
    warnings: list[str] = field(default_factory=_default_str_list)

    @property
    def scheduled_count(self) -> int:
        return sum(1 for task in self.tasks if task.is_scheduled and not task.completed)
