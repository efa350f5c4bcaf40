"""Greedy first-fit placement of a single task."""

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta

from autoplan.logger import get_logger
from autoplan.models import Event, Task

from .constraints import ConstraintResolver
from .timeslots import TimeWindowIndex

logger = get_logger()


class SlotPlacer:
    """Searches forward, day by day, for the first free interval that fits a task.

    Candidates are tried in day order and, within a day, in slot order. The
    first one that satisfies every floor and clears every event wins.
    """

    def __init__(
        self,
        events: Sequence[Event],
        time_windows: TimeWindowIndex,
        constraint_resolver: ConstraintResolver,
    ):
        """Initialize the placer.

        Args:
            events: Fixed calendar events
            time_windows: Free-slot computation for working days
            constraint_resolver: Provides now and overdue classification
        """
        self.events = list(events)
        self.time_windows = time_windows
        self.constraint_resolver = constraint_resolver

    def place(
        self,
        task: Task,
        earliest_start: datetime,
        search_horizon_end: datetime,
        occupied_tasks: Sequence[Task],
    ) -> Task | None:
        """Find a slot for the task.

        Args:
            task: Task to place
            earliest_start: Floor computed by ConstraintResolver.calculate_earliest_start
            search_horizon_end: Far-future ceiling used when the task is already overdue
            occupied_tasks: Tasks already holding time (placed or in progress)

        Returns:
            Copy of the task with schedule fields set and can_start_from unchanged,
            or None if no valid interval exists in the search window
        """
        now = self.constraint_resolver.now
        floor = max(earliest_start, now)
        if task.can_start_from is not None:
            floor = max(floor, task.can_start_from)

        if self.constraint_resolver.is_task_overdue(task):
            window_end = search_horizon_end
            logger.checks(
                f"  Task '{task.label}' is overdue (deadline {task.deadline}), "
                f"searching until {window_end}"
            )
        else:
            window_end = min(task.deadline, search_horizon_end)

        duration = timedelta(minutes=task.estimated_duration)
        logger.checks(
            f"  Searching slot for '{task.label}' ({task.estimated_duration} min) "
            f"from {floor} to {window_end}"
        )

        for day in self.time_windows.candidate_days(floor, window_end):
            for slot in self.time_windows.available_slots(day, occupied_tasks, self.events):
                start = max(slot.start, floor)
                if start >= slot.end:
                    continue
                if start > window_end:
                    logger.checks(f"    Search window for '{task.label}' exhausted at {start}")
                    return None
                if task.can_start_from is not None and start < task.can_start_from:
                    logger.error(
                        f"Rejected candidate {start} for '{task.label}': before "
                        f"can_start_from {task.can_start_from}"
                    )
                    continue
                if (slot.end - start) < duration:
                    continue

                end = start + duration
                conflict = self.find_conflicting_event(start, end)
                if conflict is not None:
                    logger.checks(
                        f"    Candidate {start} - {end} conflicts with event "
                        f"'{conflict.label}', continuing"
                    )
                    continue

                logger.changes(f"  Placed '{task.label}': {start} - {end}")
                return replace(task, scheduled_start=start, scheduled_end=end)

        logger.changes(f"  No valid slot found for '{task.label}'")
        return None

    def find_conflicting_event(self, start: datetime, end: datetime) -> Event | None:
        """Return the first non-all-day event overlapping [start, end), if any."""
        for event in self.events:
            if event.all_day:
                continue
            if start < event.end_date and end > event.start_date:
                return event
        return None
