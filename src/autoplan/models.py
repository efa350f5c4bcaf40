"""Data models for Autoplan."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from .exceptions import ValidationError


class Priority(str, Enum):
    """Task priority levels."""

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _default_dependencies() -> tuple[str, ...]:
    return ()


@dataclass(frozen=True)
class Task:
    """A unit of work to be placed on the calendar.

    Tasks are value objects: the scheduler never mutates them in place and
    always returns new instances via ``dataclasses.replace``.
    """

    id: str
    deadline: datetime
    estimated_duration: int  # Minutes
    title: str = ""
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    scheduled_start: datetime | None = None
    scheduled_end: datetime | None = None
    can_start_from: datetime | None = None  # Earliest instant the task may be placed
    dependencies: tuple[str, ...] = field(default_factory=_default_dependencies)
    project_id: str | None = None

    def __post_init__(self) -> None:
        if self.estimated_duration <= 0:
            raise ValidationError(
                f"Task '{self.id}' must have a positive estimated_duration, "
                f"got {self.estimated_duration}"
            )
        if not isinstance(self.priority, Priority):
            object.__setattr__(self, "priority", Priority(self.priority))
        # Normalize to a duplicate-free tuple, keeping declaration order
        deps = tuple(dict.fromkeys(self.dependencies))
        if self.id in deps:
            raise ValidationError(f"Task '{self.id}' cannot depend on itself")
        object.__setattr__(self, "dependencies", deps)

    @property
    def label(self) -> str:
        """Name used in log messages."""
        return self.title or self.id

    @property
    def is_scheduled(self) -> bool:
        """True if both schedule fields are set."""
        return self.scheduled_start is not None and self.scheduled_end is not None

    @property
    def effective_end(self) -> datetime | None:
        """Scheduled end, derived from start + duration when only the start is known."""
        if self.scheduled_end is not None:
            return self.scheduled_end
        if self.scheduled_start is not None:
            return self.scheduled_start + timedelta(minutes=self.estimated_duration)
        return None


@dataclass(frozen=True)
class Event:
    """A fixed, non-negotiable busy interval on the calendar."""

    id: str
    start_date: datetime
    end_date: datetime
    title: str = ""
    all_day: bool = False

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise ValidationError(f"Event '{self.id}' ends before it starts")

    @property
    def label(self) -> str:
        """Name used in log messages."""
        return self.title or self.id


@dataclass(frozen=True)
class Project:
    """An optional bounding window for its tasks."""

    id: str
    start_date: datetime
    deadline: datetime
    title: str = ""

    def __post_init__(self) -> None:
        if self.deadline < self.start_date:
            raise ValidationError(f"Project '{self.id}' has a deadline before its start date")

    @property
    def label(self) -> str:
        """Name used in log messages."""
        return self.title or self.id
