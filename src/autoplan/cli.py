"""Command-line interface for Autoplan."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .exceptions import AutoplanError
from .loader import Plan, discover_config, load_plan, write_schedule
from .logger import setup_logger
from .models import Task
from .scheduler import SchedulingOrchestrator, SchedulingResult
from .status import TaskStatus, get_task_status
from .unified_config import UnifiedConfig
from .validation import validate_data

app = typer.Typer(
    name="autoplan",
    help="Constraint-based automatic task scheduling",
    add_completion=False,
)

DATETIME_FORMAT = "%Y-%m-%d %H:%M"


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to unified config file (default: autoplan_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for autoplan commands."""
    setup_logger(verbose)
    context.configure(config)


def _parse_now_option(now_str: str | None) -> datetime | None:
    """Parse the --now option, exiting with an error message if malformed."""
    if now_str is None:
        return None
    try:
        parsed = datetime.fromisoformat(now_str)
    except ValueError:
        typer.echo(
            f"Error: Invalid --now value '{now_str}'. Use ISO format (YYYY-MM-DDTHH:MM)",
            err=True,
        )
        raise typer.Exit(1) from None
    if parsed.tzinfo is not None:
        typer.echo(
            f"Error: Invalid --now value '{now_str}'. Use local time without a UTC offset",
            err=True,
        )
        raise typer.Exit(1)
    return parsed


def _load_plan_or_exit(file: Path) -> Plan:
    try:
        return load_plan(file)
    except AutoplanError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _load_config_or_exit(file: Path) -> UnifiedConfig:
    try:
        return discover_config(file)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _format_instant(value: datetime | None) -> str:
    return value.strftime(DATETIME_FORMAT) if value is not None else "-"


def _display_schedule_results(result: SchedulingResult) -> None:
    """Display scheduling results to stdout."""
    typer.echo("Schedule Results")
    typer.echo("=" * 80)
    typer.echo("")

    for task in result.tasks:
        typer.echo(f"{task.label} ({task.id})")
        if task.completed:
            typer.echo("  Completed")
        elif task.is_scheduled:
            typer.echo(
                f"  Scheduled:      {_format_instant(task.scheduled_start)} - "
                f"{_format_instant(task.scheduled_end)}"
            )
        else:
            typer.echo("  Not scheduled")
        typer.echo(f"  Deadline:       {_format_instant(task.deadline)}")
        if task.can_start_from is not None:
            typer.echo(f"  Can start from: {_format_instant(task.can_start_from)}")
        typer.echo("")

    typer.echo(f"{result.scheduled_count} task(s) scheduled")


@app.command()
def schedule(
    file: Annotated[Path, typer.Argument(help="Path to the plan YAML file")] = Path("plan.yaml"),
    *,
    now: Annotated[
        str | None,
        typer.Option("--now", help="Current instant (ISO format). Defaults to the system clock"),
    ] = None,
    reschedule: Annotated[
        bool,
        typer.Option(
            "--reschedule",
            help="Treat existing can_start_from values as previously computed floors",
        ),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write scheduled fields to this YAML file"),
    ] = None,
) -> None:
    """Run a scheduling pass and display or persist the results."""
    parsed_now = _parse_now_option(now)
    plan = _load_plan_or_exit(file)
    config = _load_config_or_exit(file)

    orchestrator = SchedulingOrchestrator(
        plan.events, config.scheduler, plan.projects, parsed_now
    )
    result = orchestrator.schedule_with_report(plan.tasks, is_rescheduling=reschedule)

    if output:
        write_schedule(output, result.tasks)
        typer.echo(f"Schedule written to {output}")
    else:
        _display_schedule_results(result)

    if result.warnings:
        typer.echo("\nWarnings:", err=True)
        for warning in result.warnings:
            typer.echo(f"  - {warning}", err=True)


@app.command()
def validate(
    file: Annotated[Path, typer.Argument(help="Path to the plan YAML file")] = Path("plan.yaml"),
) -> None:
    """Check a plan for dangling project and dependency references."""
    plan = _load_plan_or_exit(file)
    report = validate_data(plan.tasks, plan.events, plan.projects)

    typer.echo(
        f"{report.total_tasks} task(s), {report.total_events} event(s), "
        f"{report.total_projects} project(s)"
    )
    for task_id in report.duplicate_task_ids:
        typer.echo(f"  Duplicate task id: {task_id}")
    for task_id, project_id in report.invalid_project_references.items():
        typer.echo(f"  Task '{task_id}' references unknown project '{project_id}'")
    for task_id, missing in report.invalid_dependencies.items():
        typer.echo(f"  Task '{task_id}' has unknown dependencies: {', '.join(missing)}")

    if not report.is_valid:
        typer.echo("Plan is invalid", err=True)
        raise typer.Exit(1)
    typer.echo("Plan is valid")


@app.command()
def status(
    file: Annotated[Path, typer.Argument(help="Path to the plan YAML file")] = Path("plan.yaml"),
    *,
    now: Annotated[
        str | None,
        typer.Option("--now", help="Current instant (ISO format). Defaults to the system clock"),
    ] = None,
) -> None:
    """Show each task's standing against its deadline."""
    parsed_now = _parse_now_option(now)
    plan = _load_plan_or_exit(file)
    config = _load_config_or_exit(file)

    markers = {
        TaskStatus.ON_TIME: "on-time",
        TaskStatus.APPROACHING: "approaching",
        TaskStatus.OVERDUE: "OVERDUE",
    }
    pending: list[Task] = [task for task in plan.tasks if not task.completed]
    for task in pending:
        task_status = get_task_status(task, parsed_now, config.status.warning_days)
        typer.echo(
            f"{markers[task_status]:<12} {task.label} (due {_format_instant(task.deadline)})"
        )


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
