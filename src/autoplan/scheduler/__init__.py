"""Scheduler package - constraint-based placement of tasks on a working calendar.

This package provides a deterministic greedy scheduler with:
- Constraint resolution (project bounds, dependency completion, start floors)
- Dependency ordering with cycle tolerance, then priority/deadline ranking
- Day-by-day first-fit placement into free working-hour slots

Main entry points:
- SchedulingOrchestrator: One full scheduling pass
- schedule_tasks_automatically: Initial scheduling
- reschedule_after_event_change: Rescheduling with bidirectional start floors

Configuration:
- SchedulingOptions: Working hours, buffer, weekends, search horizon
"""

from .config import (
    DEFAULT_SCHEDULING_OPTIONS,
    SchedulingOptions,
    WorkingHours,
    merge_scheduling_options,
)
from .constraints import ConstraintResolver
from .core import SchedulingContext, SchedulingResult, TaskState, TimeSlot
from .dependencies import PRIORITY_WEIGHTS, DependencyGraph, prioritize_tasks
from .orchestrator import (
    SchedulingOrchestrator,
    reschedule_after_event_change,
    schedule_tasks_automatically,
)
from .placement import SlotPlacer
from .timeslots import TimeWindowIndex

__all__ = [
    # Core dataclasses
    "TimeSlot",
    "TaskState",
    "SchedulingContext",
    "SchedulingResult",
    # Configuration
    "SchedulingOptions",
    "WorkingHours",
    "DEFAULT_SCHEDULING_OPTIONS",
    "merge_scheduling_options",
    # Components
    "ConstraintResolver",
    "DependencyGraph",
    "PRIORITY_WEIGHTS",
    "prioritize_tasks",
    "TimeWindowIndex",
    "SlotPlacer",
    # Orchestration
    "SchedulingOrchestrator",
    "schedule_tasks_automatically",
    "reschedule_after_event_change",
]
