"""YAML plan file loading and schedule export.

A plan file holds three optional sections keyed by id::

    tasks:
      write_report:
        title: Write report
        deadline: 2026-10-23T17:00:00
        priority: high
        duration: 90
        dependencies: [collect_data]
        project: q4_review
    events:
      standup:
        start: 2026-10-20T10:00:00
        end: 2026-10-20T10:30:00
    projects:
      q4_review:
        start: 2026-10-19T09:00:00
        deadline: 2026-10-30T18:00:00
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from . import context
from .exceptions import ParseError, ValidationError
from .models import Event, Project, Task
from .schemas import PlanSchema
from .unified_config import DEFAULT_CONFIG_FILENAME, UnifiedConfig, load_unified_config

SCHEDULE_FILE_VERSION = 1


@dataclass
class Plan:
    """Tasks, events and projects loaded from a plan file."""

    tasks: list[Task] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)


def load_plan(path: Path | str) -> Plan:
    """Load a plan file into model records.

    Args:
        path: Path to the plan YAML file

    Returns:
        Plan with tasks, events and projects in file order

    Raises:
        ParseError: If the file is missing, is not valid YAML, or is not a mapping
        ValidationError: If an entry fails schema or model validation
    """
    path = Path(path)
    if not path.exists():
        raise ParseError(f"File not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse YAML: {e}") from e

    if data is None:
        return Plan()
    if not isinstance(data, dict):
        raise ParseError("YAML must contain a dictionary at the root level")

    return parse_plan(data)  # type: ignore[arg-type]


def parse_plan(data: dict[str, Any]) -> Plan:
    """Convert already-loaded plan data into model records."""
    try:
        schema = PlanSchema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid plan structure: {e}") from e

    tasks = [
        Task(
            id=task_id,
            title=entry.title,
            deadline=entry.deadline,
            priority=entry.priority,
            estimated_duration=entry.duration,
            completed=entry.completed,
            scheduled_start=entry.scheduled_start,
            scheduled_end=entry.scheduled_end,
            can_start_from=entry.can_start_from,
            dependencies=tuple(entry.dependencies),
            project_id=entry.project,
        )
        for task_id, entry in schema.tasks.items()
    ]
    events = [
        Event(
            id=event_id,
            title=entry.title,
            start_date=entry.start,
            end_date=entry.end,
            all_day=entry.all_day,
        )
        for event_id, entry in schema.events.items()
    ]
    projects = [
        Project(
            id=project_id,
            title=entry.title,
            start_date=entry.start,
            deadline=entry.deadline,
        )
        for project_id, entry in schema.projects.items()
    ]
    return Plan(tasks=tasks, events=events, projects=projects)


def write_schedule(path: Path, tasks: list[Task]) -> None:
    """Export the schedule fields of every task to a YAML file.

    Args:
        path: Path to write
        tasks: Tasks returned by a scheduling pass
    """
    tasks_data: dict[str, dict[str, Any]] = {}
    for task in tasks:
        tasks_data[task.id] = {
            "scheduled_start": _isoformat(task.scheduled_start),
            "scheduled_end": _isoformat(task.scheduled_end),
            "can_start_from": _isoformat(task.can_start_from),
            "completed": task.completed,
        }

    output: dict[str, Any] = {
        "version": SCHEDULE_FILE_VERSION,
        "tasks": tasks_data,
    }

    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(output, f, default_flow_style=False, sort_keys=False)


def _isoformat(value: Any) -> str | None:
    return value.isoformat() if value is not None else None


def discover_config(plan_path: Path | str, config_path: Path | None = None) -> UnifiedConfig:
    """Discover unified config from various locations.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. plan directory / autoplan_config.yaml
    4. Current directory / autoplan_config.yaml

    An explicitly named file (1 or 2) must exist. Returns the default
    configuration when no file is found in 3 or 4.

    Raises:
        FileNotFoundError: If an explicitly named config file doesn't exist
        ValueError: If the chosen config file is invalid
    """
    explicit = config_path or context.get_config_path()
    if explicit is not None:
        return load_unified_config(explicit)

    discovered = (Path(plan_path).parent / DEFAULT_CONFIG_FILENAME, Path(DEFAULT_CONFIG_FILENAME))
    for candidate in discovered:
        if candidate.exists():
            return load_unified_config(candidate)
    return UnifiedConfig()
