"""Read-only integrity checks over task, event and project collections."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .logger import get_logger
from .models import Event, Project, Task

logger = get_logger()


def _default_ref_dict() -> dict[str, list[str]]:
    return {}


def _default_str_list() -> list[str]:
    return []


@dataclass
class DataValidationReport:
    """Dangling references found in a plan. Nothing is repaired."""

    total_tasks: int
    total_events: int
    total_projects: int
    invalid_project_references: dict[str, str] = field(default_factory=dict)  # task -> project
    invalid_dependencies: dict[str, list[str]] = field(default_factory=_default_ref_dict)
    duplicate_task_ids: list[str] = field(default_factory=_default_str_list)

    @property
    def is_valid(self) -> bool:
        """True when every project reference resolves and task ids are unique.

        Dangling dependency ids do not invalidate a plan: the scheduler
        ignores them with a warning.
        """
        return not self.invalid_project_references and not self.duplicate_task_ids


def validate_data(
    tasks: Iterable[Task],
    events: Iterable[Event],
    projects: Iterable[Project],
) -> DataValidationReport:
    """Check project and dependency references across a plan.

    Args:
        tasks: All tasks
        events: All events (counted only)
        projects: All projects

    Returns:
        DataValidationReport listing every dangling reference
    """
    task_list = list(tasks)
    project_ids = {project.id for project in projects}
    report = DataValidationReport(
        total_tasks=len(task_list),
        total_events=len(list(events)),
        total_projects=len(project_ids),
    )

    seen: set[str] = set()
    for task in task_list:
        if task.id in seen and task.id not in report.duplicate_task_ids:
            report.duplicate_task_ids.append(task.id)
        seen.add(task.id)

    for task in task_list:
        if task.project_id is not None and task.project_id not in project_ids:
            report.invalid_project_references[task.id] = task.project_id
            logger.warning(f"Task '{task.label}' references unknown project '{task.project_id}'")

        missing = [dep_id for dep_id in task.dependencies if dep_id not in seen]
        if missing:
            report.invalid_dependencies[task.id] = missing
            logger.warning(f"Task '{task.label}' has unknown dependencies: {', '.join(missing)}")

    return report


def find_lost_constraints(before: Iterable[Task], after: Iterable[Task]) -> list[str]:
    """Return ids of tasks that had can_start_from before a pass but not after it."""
    after_by_id = {task.id: task for task in after}
    lost: list[str] = []
    for task in before:
        if task.can_start_from is None:
            continue
        updated = after_by_id.get(task.id)
        if updated is not None and updated.can_start_from is None:
            logger.error(f"Task '{task.label}' lost its can_start_from constraint")
            lost.append(task.id)
    return lost
