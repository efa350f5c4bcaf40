"""Pydantic schemas for YAML plan file validation.

Instants are naive local times; timestamps carrying a UTC offset are rejected.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, Field, NaiveDatetime, field_validator

from .models import Priority


def _start_of_day(v: Any) -> Any:
    if isinstance(v, date) and not isinstance(v, datetime):
        return datetime.combine(v, time.min)
    return v


def _end_of_day(v: Any) -> Any:
    # A bare date deadline means "by the end of that day"
    if isinstance(v, date) and not isinstance(v, datetime):
        return datetime.combine(v, time(23, 59))
    return v


class TaskSchema(BaseModel):
    """Schema for a task entry."""

    title: str = ""
    deadline: NaiveDatetime
    priority: Priority = Priority.MEDIUM
    duration: int = Field(gt=0)  # Minutes
    completed: bool = False
    scheduled_start: NaiveDatetime | None = None
    scheduled_end: NaiveDatetime | None = None
    can_start_from: NaiveDatetime | None = None
    dependencies: list[str] = Field(default_factory=list)
    project: str | None = None

    @field_validator("dependencies", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Ensure value is a list."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]

    @field_validator("deadline", mode="before")
    @classmethod
    def deadline_end_of_day(cls, v: Any) -> Any:
        return _end_of_day(v)

    @field_validator("scheduled_start", "scheduled_end", "can_start_from", mode="before")
    @classmethod
    def instants_start_of_day(cls, v: Any) -> Any:
        return _start_of_day(v)


class EventSchema(BaseModel):
    """Schema for an event entry."""

    title: str = ""
    start: NaiveDatetime
    end: NaiveDatetime
    all_day: bool = False

    @field_validator("start", "end", mode="before")
    @classmethod
    def instants_start_of_day(cls, v: Any) -> Any:
        return _start_of_day(v)


class ProjectSchema(BaseModel):
    """Schema for a project entry."""

    title: str = ""
    start: NaiveDatetime
    deadline: NaiveDatetime

    @field_validator("start", mode="before")
    @classmethod
    def start_of_day(cls, v: Any) -> Any:
        return _start_of_day(v)

    @field_validator("deadline", mode="before")
    @classmethod
    def deadline_end_of_day(cls, v: Any) -> Any:
        return _end_of_day(v)


class PlanSchema(BaseModel):
    """Schema for the entire plan YAML data."""

    tasks: dict[str, TaskSchema] = Field(default_factory=dict)
    events: dict[str, EventSchema] = Field(default_factory=dict)
    projects: dict[str, ProjectSchema] = Field(default_factory=dict)

    @field_validator("tasks", "events", "projects", mode="before")
    @classmethod
    def normalize_section(cls, v: Any) -> Any:
        """Treat an empty section (``tasks:``) as an empty mapping and stringify ids."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(key): value for key, value in v.items()}  # type: ignore[misc]
        return v
