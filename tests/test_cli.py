"""Tests for CLI commands."""

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from autoplan.cli import app, main

runner = CliRunner()

EXAMPLE_PLAN = str(Path(__file__).parent.parent / "examples" / "plan.yaml")
NOW_ARG = "2026-10-19T08:00"


def write_plan(tmp_path: Path, content: str) -> str:
    path = tmp_path / "plan.yaml"
    path.write_text(content)
    return str(path)


class TestScheduleCommand:
    """Test the schedule CLI command."""

    def test_schedule_example_plan(self) -> None:
        """Test scheduling the example plan with its bundled config."""
        result = runner.invoke(app, ["schedule", EXAMPLE_PLAN, "--now", NOW_ARG])

        assert result.exit_code == 0
        assert "Schedule Results" in result.stdout
        # Project q4_review opens at 13:00 on Monday
        assert "Scheduled:      2026-10-19 13:00 - 2026-10-19 15:00" in result.stdout
        # Low priority, fills the gap after standup
        assert "Scheduled:      2026-10-19 09:45 - 2026-10-19 10:15" in result.stdout
        # Working day ends at 17:30, so the report moves to Tuesday after planning
        assert "Scheduled:      2026-10-20 12:15 - 2026-10-20 15:15" in result.stdout
        assert "Completed" in result.stdout
        assert "4 task(s) scheduled" in result.stdout

    def test_schedule_output_file(self, tmp_path: Path) -> None:
        """Test writing the schedule to a YAML file."""
        output_file = tmp_path / "schedule.yaml"
        result = runner.invoke(
            app, ["schedule", EXAMPLE_PLAN, "--now", NOW_ARG, "--output", str(output_file)]
        )

        assert result.exit_code == 0
        assert f"Schedule written to {output_file}" in result.stdout
        data = yaml.safe_load(output_file.read_text())
        assert data["tasks"]["review_slides"]["scheduled_start"] == "2026-10-20T15:30:00"
        assert data["tasks"]["review_slides"]["can_start_from"] == "2026-10-20T14:00:00"
        assert data["tasks"]["onboarding_notes"]["completed"] is True

    def test_schedule_reports_warnings(self, tmp_path: Path) -> None:
        """Test that dangling references surface as warnings, not failures."""
        plan = write_plan(
            tmp_path,
            """
tasks:
  orphan:
    deadline: 2026-10-23T17:00:00
    duration: 60
    project: ghost
    dependencies: [missing]
""",
        )

        result = runner.invoke(app, ["schedule", plan, "--now", NOW_ARG])

        assert result.exit_code == 0
        assert "Warnings:" in result.output
        assert "unknown project 'ghost'" in result.output
        assert "unknown task(s): missing" in result.output

    def test_schedule_with_explicit_config(self, tmp_path: Path) -> None:
        """Test that --config overrides config discovery."""
        plan = write_plan(
            tmp_path,
            """
tasks:
  a:
    deadline: 2026-10-23T17:00:00
    duration: 60
""",
        )
        config = tmp_path / "custom.yaml"
        config.write_text('scheduler:\n  working_hours:\n    start: "07:00"\n')

        result = runner.invoke(
            app, ["--config", str(config), "schedule", plan, "--now", "2026-10-19T06:00"]
        )

        assert result.exit_code == 0
        assert "Scheduled:      2026-10-19 07:00 - 2026-10-19 08:00" in result.stdout

    def test_schedule_invalid_now(self) -> None:
        result = runner.invoke(app, ["schedule", EXAMPLE_PLAN, "--now", "next tuesday"])

        assert result.exit_code == 1
        assert "Invalid --now value" in result.output

    def test_schedule_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["schedule", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "Error: File not found" in result.output

    def test_schedule_invalid_plan(self, tmp_path: Path) -> None:
        plan = write_plan(tmp_path, "tasks:\n  a:\n    deadline: 2026-10-23\n    duration: 0\n")

        result = runner.invoke(app, ["schedule", plan])

        assert result.exit_code == 1
        assert "Invalid plan structure" in result.output

    def test_schedule_rejects_offset_timestamps(self, tmp_path: Path) -> None:
        plan = write_plan(
            tmp_path, "tasks:\n  a:\n    deadline: 2026-10-23T17:00:00Z\n    duration: 30\n"
        )

        result = runner.invoke(app, ["schedule", plan, "--now", NOW_ARG])

        assert result.exit_code == 1
        assert "Error: Invalid plan structure" in result.output

    def test_schedule_rejects_offset_now(self) -> None:
        result = runner.invoke(app, ["schedule", EXAMPLE_PLAN, "--now", "2026-10-19T08:00+00:00"])

        assert result.exit_code == 1
        assert "without a UTC offset" in result.output

    def test_schedule_invalid_config(self, tmp_path: Path) -> None:
        plan = write_plan(tmp_path, "tasks:\n  a:\n    deadline: 2026-10-23\n    duration: 30\n")
        config = tmp_path / "bad_config.yaml"
        config.write_text("scheduler:\n  buffer_between_tasks: -5\n")

        result = runner.invoke(app, ["--config", str(config), "schedule", plan, "--now", NOW_ARG])

        assert result.exit_code == 1
        assert "Error: Invalid configuration" in result.output

    def test_schedule_missing_config(self, tmp_path: Path) -> None:
        plan = write_plan(tmp_path, "tasks:\n  a:\n    deadline: 2026-10-23\n    duration: 30\n")

        result = runner.invoke(
            app, ["--config", str(tmp_path / "nope.yaml"), "schedule", plan, "--now", NOW_ARG]
        )

        assert result.exit_code == 1
        assert "Error: Config file not found" in result.output

    def test_verbose_shows_placements(self) -> None:
        result = runner.invoke(app, ["-v", "1", "schedule", EXAMPLE_PLAN, "--now", NOW_ARG])

        assert result.exit_code == 0
        assert "Placed 'Collect quarterly data'" in result.output


class TestValidateCommand:
    """Test the validate CLI command."""

    def test_validate_example_plan(self) -> None:
        result = runner.invoke(app, ["validate", EXAMPLE_PLAN])

        assert result.exit_code == 0
        assert "5 task(s), 3 event(s), 1 project(s)" in result.stdout
        assert "Plan is valid" in result.stdout

    def test_validate_unknown_project(self, tmp_path: Path) -> None:
        plan = write_plan(
            tmp_path,
            """
tasks:
  a:
    deadline: 2026-10-23
    duration: 30
    project: ghost
""",
        )

        result = runner.invoke(app, ["validate", plan])

        assert result.exit_code == 1
        assert "Task 'a' references unknown project 'ghost'" in result.stdout

    def test_validate_unknown_dependency_still_valid(self, tmp_path: Path) -> None:
        plan = write_plan(
            tmp_path,
            """
tasks:
  a:
    deadline: 2026-10-23
    duration: 30
    dependencies: [ghost]
""",
        )

        result = runner.invoke(app, ["validate", plan])

        assert result.exit_code == 0
        assert "Task 'a' has unknown dependencies: ghost" in result.stdout


class TestStatusCommand:
    """Test the status CLI command."""

    def test_status_example_plan(self) -> None:
        result = runner.invoke(app, ["status", EXAMPLE_PLAN, "--now", NOW_ARG])

        assert result.exit_code == 0
        assert "approaching  File expense claims" in result.stdout
        assert "on-time      Collect quarterly data" in result.stdout
        # Completed tasks are not listed
        assert "Onboarding notes" not in result.stdout

    def test_status_overdue(self, tmp_path: Path) -> None:
        plan = write_plan(
            tmp_path,
            """
tasks:
  late:
    title: Late task
    deadline: 2026-10-16T17:00:00
    duration: 30
""",
        )

        result = runner.invoke(app, ["status", plan, "--now", NOW_ARG])

        assert result.exit_code == 0
        assert "OVERDUE      Late task" in result.stdout


class TestMain:
    """Test the console script entry point."""

    def test_exit_code_comes_from_typer(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        plan = write_plan(
            tmp_path, "tasks:\n  a:\n    deadline: 2026-10-23\n    duration: 30\n    project: x\n"
        )
        monkeypatch.setattr("sys.argv", ["autoplan", "validate", plan])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1

    def test_success_exits_zero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.argv", ["autoplan", "validate", EXAMPLE_PLAN])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
