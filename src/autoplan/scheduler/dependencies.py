"""Dependency ordering and priority ranking of tasks."""

from collections.abc import Sequence
from enum import Enum

from autoplan.logger import get_logger
from autoplan.models import Priority, Task

logger = get_logger()

PRIORITY_WEIGHTS: dict[Priority, int] = {
    Priority.URGENT: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class _Mark(Enum):
    """Visitation state of a task during depth-first traversal."""

    WHITE = 0  # Not visited
    GREY = 1  # On the current traversal path
    BLACK = 2  # Emitted


class DependencyGraph:
    """Orders tasks so that each one comes after the tasks it depends on.

    Cycles never abort the traversal: the edge closing a cycle is ignored for
    ordering, a warning is logged, and every task is still emitted exactly once.
    After a call, ``cycles`` lists the detected cycles as id paths and
    ``missing_dependencies`` maps task ids to dependency ids outside the set.
    """

    def __init__(self) -> None:
        self.cycles: list[list[str]] = []
        self.missing_dependencies: dict[str, list[str]] = {}

    def resolve_order(self, tasks: Sequence[Task]) -> list[Task]:
        """Return the tasks in dependency order (stable, first-seen-then-resolved).

        Args:
            tasks: Tasks to order; dependencies on ids outside this set are ignored

        Returns:
            New list containing every input task exactly once
        """
        self.cycles = []
        self.missing_dependencies = {}
        resolved = self._traverse(tasks, report=True)

        if len(resolved) > 1:
            logger.checks("  Dependency order:")
            for index, task in enumerate(resolved, 1):
                deps = f"depends on {len(task.dependencies)}" if task.dependencies else "no deps"
                logger.checks(f"    {index}. {task.label} ({deps})")
        return resolved

    def enforce_order(self, tasks: Sequence[Task]) -> list[Task]:
        """Hoist each task's pending dependencies ahead of it, otherwise keeping order.

        Used after priority ranking so that a high-priority task is never placed
        before a lower-priority task it depends on. Cycles and missing ids are
        not reported again.
        """
        return self._traverse(tasks, report=False)

    def _traverse(self, tasks: Sequence[Task], *, report: bool) -> list[Task]:
        by_id = {task.id: task for task in tasks}
        marks = dict.fromkeys(by_id, _Mark.WHITE)
        resolved: list[Task] = []
        path: list[str] = []

        def visit(task_id: str) -> None:
            marks[task_id] = _Mark.GREY
            path.append(task_id)
            task = by_id[task_id]

            for dep_id in task.dependencies:
                if dep_id not in by_id:
                    if report:
                        self.missing_dependencies.setdefault(task_id, []).append(dep_id)
                        logger.warning(
                            f"Dependency '{dep_id}' of task '{task.label}' not found; ignoring it"
                        )
                    continue

                mark = marks[dep_id]
                if mark is _Mark.GREY:
                    if report:
                        cycle = path[path.index(dep_id) :] + [dep_id]
                        self.cycles.append(cycle)
                        logger.warning(
                            f"Circular dependency detected: {' -> '.join(cycle)}; "
                            f"ignoring edge '{task_id}' -> '{dep_id}' for ordering"
                        )
                    continue
                if mark is _Mark.WHITE:
                    visit(dep_id)

            path.pop()
            marks[task_id] = _Mark.BLACK
            resolved.append(task)

        for task in tasks:
            if marks[task.id] is _Mark.WHITE:
                visit(task.id)

        return resolved


def prioritize_tasks(tasks: Sequence[Task]) -> list[Task]:
    """Stable sort by priority weight (descending), then deadline (ascending).

    This is not a dependency-respecting sort; see DependencyGraph.enforce_order.
    """
    return sorted(tasks, key=lambda task: (-PRIORITY_WEIGHTS[task.priority], task.deadline))
