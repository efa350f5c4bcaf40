"""Per-task constraint resolution: classification, project bounds and earliest start."""

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timedelta

from autoplan.logger import get_logger
from autoplan.models import Project, Task

from .config import SchedulingOptions
from .core import TaskState

logger = get_logger()


class ConstraintResolver:
    """Computes the earliest permissible start of each task.

    The floor combines the task's explicit ``can_start_from``, the bounds of
    its project, the completion of its dependencies and the current instant.
    """

    def __init__(
        self,
        projects: Iterable[Project] | None = None,
        options: SchedulingOptions | None = None,
        now: datetime | None = None,
    ):
        """Initialize the resolver.

        Args:
            projects: Projects that tasks may reference through project_id
            options: Scheduling options (buffer between dependent tasks)
            now: Current instant (defaults to datetime.now())
        """
        self.projects = {project.id: project for project in projects or []}
        self.options = options or SchedulingOptions()
        self.now = now or datetime.now()  # noqa: DTZ005

    def is_task_in_progress(self, task: Task) -> bool:
        """True if the task's scheduled interval contains now."""
        if task.completed or task.scheduled_start is None:
            return False
        task_end = task.effective_end
        assert task_end is not None
        return task.scheduled_start <= self.now < task_end

    def classify(self, task: Task) -> TaskState:
        """Classify a task as completed, in progress or schedulable."""
        if task.completed:
            return TaskState.COMPLETED
        if self.is_task_in_progress(task):
            logger.checks(
                f"  Task '{task.label}' is in progress "
                f"({task.scheduled_start} - {task.effective_end}), protected"
            )
            return TaskState.IN_PROGRESS
        return TaskState.SCHEDULABLE

    def is_task_overdue(self, task: Task) -> bool:
        """True if the deadline has passed and the task is not completed.

        ``can_start_from`` never affects overdue status.
        """
        if task.completed:
            return False
        return task.deadline < self.now

    def apply_project_constraints(self, task: Task, is_rescheduling: bool = False) -> Task:
        """Clamp a task into its project's window and recompute its start floor.

        The deadline is clamped into [project.start_date, project.deadline].
        ``can_start_from`` follows a bidirectional rule: on a reschedule, if the
        project now starts earlier than the recorded floor, the floor may move
        earlier too; otherwise the recorded floor is kept as a lower bound. Now
        is always a hard lower bound.

        Args:
            task: Task to constrain
            is_rescheduling: True when re-running over previously scheduled tasks

        Returns:
            The task itself if it has no (known) project, otherwise an updated copy
        """
        if task.project_id is None:
            return task

        project = self.projects.get(task.project_id)
        if project is None:
            logger.warning(
                f"Project '{task.project_id}' not found for task '{task.label}'; "
                "scheduling without project bounds"
            )
            return task

        deadline = task.deadline
        if deadline > project.deadline:
            deadline = project.deadline
            logger.changes(
                f"  Task '{task.label}': deadline clamped to project end {deadline}"
            )
        if deadline < project.start_date:
            deadline = project.start_date
            logger.changes(
                f"  Task '{task.label}': deadline clamped to project start {deadline}"
            )

        existing = task.can_start_from
        project_start = project.start_date
        if not is_rescheduling or existing is None:
            can_start_from = max(project_start, self.now)
        elif project_start < existing:
            # Project moved earlier than the recorded floor: let the task follow it
            can_start_from = max(project_start, self.now)
            logger.changes(
                f"  Task '{task.label}': project '{project.label}' starts earlier "
                f"({project_start}), floor may move back from {existing}"
            )
        else:
            can_start_from = max(existing, project_start, self.now)

        if can_start_from != existing:
            logger.checks(f"  Task '{task.label}': can_start_from {existing} -> {can_start_from}")

        return replace(task, deadline=deadline, can_start_from=can_start_from)

    def calculate_earliest_start(
        self,
        task: Task,
        completed_tasks: Iterable[Task],
        scheduled_tasks: Iterable[Task],
    ) -> datetime:
        """Compute the earliest instant at which the task may start.

        Args:
            task: Task being placed
            completed_tasks: Tasks already completed (their dependents are free to start)
            scheduled_tasks: Tasks already placed, whose end pushes dependents later

        Returns:
            Earliest start, never before the task's can_start_from
        """
        # An explicit floor is respected even when it lies in the past
        earliest = task.can_start_from if task.can_start_from is not None else self.now

        if task.dependencies:
            completed_ids = {t.id for t in completed_tasks if t.completed}
            scheduled_by_id = {t.id: t for t in scheduled_tasks if t.scheduled_end is not None}
            buffer = timedelta(minutes=self.options.buffer_between_tasks)

            for dep_id in task.dependencies:
                if dep_id in completed_ids:
                    logger.debug(f"    Dependency '{dep_id}' of '{task.label}' is completed")
                    continue

                dependency = scheduled_by_id.get(dep_id)
                if dependency is None:
                    logger.warning(
                        f"Dependency '{dep_id}' of task '{task.label}' is neither completed "
                        "nor scheduled; ignoring it"
                    )
                    continue

                assert dependency.scheduled_end is not None
                candidate = dependency.scheduled_end + buffer
                if candidate > earliest:
                    earliest = candidate
                    logger.checks(
                        f"    Dependency '{dependency.label}' pushes '{task.label}' to {earliest}"
                    )

        if task.can_start_from is not None and earliest < task.can_start_from:
            logger.error(
                f"Earliest start {earliest} of '{task.label}' fell before its "
                f"can_start_from {task.can_start_from}; correcting"
            )
            earliest = task.can_start_from

        return earliest
