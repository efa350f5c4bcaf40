"""Pytest configuration and fixtures for autoplan tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from typing import Any

import pytest

from autoplan import context
from autoplan.logger import reset_logger
from autoplan.models import Event, Project, Task

# Monday morning, before working hours start
NOW = datetime(2026, 10, 19, 8, 0)
MONDAY = NOW.date()


def at(day: int, hour: int, minute: int = 0) -> datetime:
    """Instant in the week of NOW: day 0 is Monday 2026-10-19."""
    return datetime(2026, 10, 19 + day, hour, minute)


def make_task(task_id: str, **kwargs: Any) -> Task:
    """Create a task with a 60 minute duration due Friday evening unless overridden."""
    kwargs.setdefault("deadline", at(4, 18))
    kwargs.setdefault("estimated_duration", 60)
    return Task(id=task_id, **kwargs)


def make_event(event_id: str, start: datetime, end: datetime, **kwargs: Any) -> Event:
    return Event(id=event_id, start_date=start, end_date=end, **kwargs)


def make_project(project_id: str, start: datetime, deadline: datetime, **kwargs: Any) -> Project:
    return Project(id=project_id, start_date=start, deadline=deadline, **kwargs)


def by_id(tasks: list[Task]) -> dict[str, Task]:
    return {task.id: task for task in tasks}


@pytest.fixture(autouse=True)
def clean_state() -> Iterator[None]:
    """Reset logger and CLI context between tests for isolation."""
    reset_logger()
    context.reset()
    yield
    reset_logger()
    context.reset()
