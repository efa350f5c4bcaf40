"""Configuration classes for the scheduling system."""

from collections.abc import Mapping
from datetime import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class WorkingHours(BaseModel):
    """Daily window (HH:MM, local time) within which tasks may be placed."""

    model_config = ConfigDict(frozen=True)

    start: str = "09:00"
    end: str = "18:00"

    @field_validator("start", "end")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        """Ensure the value is a valid HH:MM clock time."""
        try:
            hours, minutes = (int(part) for part in v.split(":"))
            time(hours, minutes)
        except ValueError as e:
            raise ValueError(f"Invalid working hour '{v}', expected HH:MM") from e
        return f"{hours:02d}:{minutes:02d}"

    @model_validator(mode="after")
    def validate_end_after_start(self) -> "WorkingHours":
        """Ensure the working day ends after it starts."""
        if self.end_time <= self.start_time:
            raise ValueError("working_hours.end must be after working_hours.start")
        return self

    @property
    def start_time(self) -> time:
        hours, minutes = (int(part) for part in self.start.split(":"))
        return time(hours, minutes)

    @property
    def end_time(self) -> time:
        hours, minutes = (int(part) for part in self.end.split(":"))
        return time(hours, minutes)


class SchedulingOptions(BaseModel):
    """Configuration for a scheduling pass."""

    model_config = ConfigDict(frozen=True)

    working_hours: WorkingHours = WorkingHours()
    buffer_between_tasks: int = Field(default=15, ge=0)  # Minutes left free after busy intervals
    # Reserved: declared for callers but not enforced by placement
    max_tasks_per_day: int = Field(default=8, ge=1)
    allow_weekends: bool = False
    # Ceiling for best-effort placement of overdue tasks
    search_horizon_days: int = Field(default=365, ge=1)
    # Free gaps shorter than this are discarded
    min_slot_minutes: int = Field(default=30, ge=1)


DEFAULT_SCHEDULING_OPTIONS = SchedulingOptions()


def merge_scheduling_options(
    overrides: "SchedulingOptions | Mapping[str, Any] | None" = None,
) -> SchedulingOptions:
    """Merge option overrides on top of the defaults.

    Args:
        overrides: Complete options, a partial mapping of option fields, or None.
            A ``working_hours`` mapping may itself be partial.

    Returns:
        A new validated SchedulingOptions

    Raises:
        pydantic.ValidationError: If any merged value is invalid
    """
    if overrides is None:
        return DEFAULT_SCHEDULING_OPTIONS
    if isinstance(overrides, SchedulingOptions):
        return overrides

    merged = DEFAULT_SCHEDULING_OPTIONS.model_dump()
    for key, value in overrides.items():
        if key == "working_hours" and isinstance(value, Mapping):
            merged["working_hours"] = {**merged["working_hours"], **value}
        else:
            merged[key] = value
    return SchedulingOptions.model_validate(merged)
