"""Scheduling orchestrator: one complete pass over tasks, events and projects."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any

from autoplan.exceptions import ValidationError
from autoplan.logger import get_logger
from autoplan.models import Event, Project, Task
from autoplan.validation import find_lost_constraints

from .config import SchedulingOptions, merge_scheduling_options
from .constraints import ConstraintResolver
from .core import SchedulingContext, SchedulingResult, TaskState
from .dependencies import DependencyGraph, prioritize_tasks
from .placement import SlotPlacer
from .timeslots import TimeWindowIndex

logger = get_logger()

OptionsInput = SchedulingOptions | Mapping[str, Any] | None


class SchedulingOrchestrator:
    """Composes constraint resolution, ordering and placement into one pass.

    A pass is a pure function of (tasks, events, projects, options, now): the
    orchestrator keeps no state between calls and never mutates its inputs.
    Completed and in-progress tasks are carried through untouched; every other
    task is either placed or returned unplaced with its constraints intact.
    """

    def __init__(
        self,
        events: Iterable[Event],
        options: OptionsInput = None,
        projects: Iterable[Project] | None = None,
        now: datetime | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            events: Fixed calendar events
            options: Scheduling options, or a partial mapping merged over the defaults
            projects: Projects referenced by tasks
            now: Current instant (defaults to datetime.now())
        """
        self.events = list(events)
        self.options = merge_scheduling_options(options)
        self.projects = list(projects or [])
        self.now = now or datetime.now()  # noqa: DTZ005
        self.constraint_resolver = ConstraintResolver(self.projects, self.options, self.now)
        self.time_windows = TimeWindowIndex(self.options)
        self.placer = SlotPlacer(self.events, self.time_windows, self.constraint_resolver)

    def schedule(self, tasks: Sequence[Task], is_rescheduling: bool = False) -> list[Task]:
        """Run one scheduling pass.

        Args:
            tasks: All tasks, in caller order
            is_rescheduling: True when re-running after tasks, events or projects changed

        Returns:
            completed ++ in-progress ++ placed-or-unplaced tasks; same ids as the input
        """
        return self.schedule_with_report(tasks, is_rescheduling).tasks

    def schedule_with_report(
        self, tasks: Sequence[Task], is_rescheduling: bool = False
    ) -> SchedulingResult:
        """Run one scheduling pass and collect diagnostics.

        Returns:
            SchedulingResult with the tasks, the ids left unplaced and warnings

        Raises:
            ValidationError: If two input tasks share an id
        """
        _check_unique_ids(tasks)
        mode = "Rescheduling" if is_rescheduling else "Scheduling"
        logger.changes(f"{mode} {len(tasks)} task(s) against {len(self.events)} event(s)")

        context = self._categorize_tasks(tasks)
        warnings: list[str] = []
        logger.checks(
            f"  {len(context.completed_tasks)} completed, "
            f"{len(context.tasks_in_progress)} in progress, "
            f"{len(context.tasks_to_schedule)} to schedule"
        )

        known_projects = {project.id for project in self.projects}
        constrained: list[Task] = []
        for task in context.tasks_to_schedule:
            if task.project_id is not None and task.project_id not in known_projects:
                warnings.append(
                    f"Task '{task.id}' references unknown project '{task.project_id}'"
                )
            updated = self.constraint_resolver.apply_project_constraints(task, is_rescheduling)
            if (
                is_rescheduling
                and task.can_start_from is not None
                and updated.can_start_from is None
            ):
                # A pre-existing floor is only ever moved by the project rule, never erased
                updated = replace(updated, can_start_from=task.can_start_from)
            constrained.append(updated)

        graph = DependencyGraph()
        ordered = graph.resolve_order(constrained)
        prioritized = graph.enforce_order(prioritize_tasks(ordered))
        for cycle in graph.cycles:
            warnings.append(f"Circular dependency ignored for ordering: {' -> '.join(cycle)}")
        for task_id, missing in graph.missing_dependencies.items():
            warnings.append(f"Task '{task_id}' depends on unknown task(s): {', '.join(missing)}")

        placed = self._schedule_sequentially(prioritized, context)
        placed = [self._enforce_start_floor(task, warnings) for task in placed]

        unscheduled = [task.id for task in placed if not task.is_scheduled]
        for task_id in unscheduled:
            warnings.append(f"Task '{task_id}' could not be scheduled before its deadline")

        all_tasks = context.completed_tasks + context.tasks_in_progress + placed

        for task_id in find_lost_constraints(tasks, all_tasks):
            warnings.append(f"Task '{task_id}' lost its can_start_from during the pass")

        logger.changes(
            f"{mode} finished: {len(placed) - len(unscheduled)} placed, "
            f"{len(unscheduled)} unplaced, {len(context.tasks_in_progress)} protected"
        )
        return SchedulingResult(
            tasks=all_tasks, unscheduled_task_ids=unscheduled, warnings=warnings
        )

    @classmethod
    def reschedule_all(
        cls,
        tasks: Sequence[Task],
        events: Iterable[Event],
        options: OptionsInput = None,
        projects: Iterable[Project] | None = None,
        now: datetime | None = None,
    ) -> list[Task]:
        """Re-run scheduling over all tasks, preserving start floors bidirectionally."""
        return cls(events, options, projects, now).schedule(tasks, is_rescheduling=True)

    def _categorize_tasks(self, tasks: Sequence[Task]) -> SchedulingContext:
        completed: list[Task] = []
        in_progress: list[Task] = []
        to_schedule: list[Task] = []
        for task in tasks:
            state = self.constraint_resolver.classify(task)
            if state is TaskState.COMPLETED:
                completed.append(task)
            elif state is TaskState.IN_PROGRESS:
                in_progress.append(task)
            else:
                to_schedule.append(task)
        return SchedulingContext(
            completed_tasks=completed,
            tasks_in_progress=in_progress,
            tasks_to_schedule=to_schedule,
        )

    def _schedule_sequentially(
        self, tasks: Sequence[Task], context: SchedulingContext
    ) -> list[Task]:
        results: list[Task] = []
        placed_so_far: list[Task] = []
        horizon_end = self.now + timedelta(days=self.options.search_horizon_days)

        for task in tasks:
            logger.checks(f"Scheduling '{task.label}'")
            # Any schedule from a previous pass is recomputed from scratch
            candidate = replace(task, scheduled_start=None, scheduled_end=None)

            earliest = self.constraint_resolver.calculate_earliest_start(
                candidate,
                context.completed_tasks,
                placed_so_far + context.tasks_in_progress,
            )
            placed = self.placer.place(
                candidate,
                earliest,
                horizon_end,
                placed_so_far + context.tasks_in_progress,
            )

            if placed is not None:
                placed = replace(placed, can_start_from=task.can_start_from)
                placed_so_far.append(placed)
                results.append(placed)
            else:
                results.append(candidate)

        return results

    def _enforce_start_floor(self, task: Task, warnings: list[str]) -> Task:
        """Snap a task that starts before its can_start_from onto that floor."""
        if (
            task.can_start_from is None
            or task.scheduled_start is None
            or task.scheduled_start >= task.can_start_from
        ):
            return task

        logger.error(
            f"Task '{task.label}' starts at {task.scheduled_start}, before its "
            f"can_start_from {task.can_start_from}; snapping to the floor"
        )
        warnings.append(f"Task '{task.id}' start corrected to its can_start_from")
        start = task.can_start_from
        return replace(
            task,
            scheduled_start=start,
            scheduled_end=start + timedelta(minutes=task.estimated_duration),
        )


def _check_unique_ids(tasks: Sequence[Task]) -> None:
    seen: set[str] = set()
    duplicates: list[str] = []
    for task in tasks:
        if task.id in seen and task.id not in duplicates:
            duplicates.append(task.id)
        seen.add(task.id)
    if duplicates:
        raise ValidationError(f"Duplicate task id(s): {', '.join(duplicates)}")


def schedule_tasks_automatically(
    tasks: Sequence[Task],
    events: Iterable[Event],
    options: OptionsInput = None,
    projects: Iterable[Project] | None = None,
    now: datetime | None = None,
) -> list[Task]:
    """Schedule tasks for the first time (fresh project floors)."""
    logger.debug(f"schedule_tasks_automatically: {len(tasks)} task(s)")
    return SchedulingOrchestrator(events, options, projects, now).schedule(tasks)


def reschedule_after_event_change(
    tasks: Sequence[Task],
    events: Iterable[Event],
    options: OptionsInput = None,
    projects: Iterable[Project] | None = None,
    now: datetime | None = None,
) -> list[Task]:
    """Reschedule after tasks, events or projects changed."""
    logger.debug(f"reschedule_after_event_change: {len(tasks)} task(s)")
    return SchedulingOrchestrator.reschedule_all(tasks, events, options, projects, now)
