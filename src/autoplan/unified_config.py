"""Unified configuration loader.

A single configuration file (autoplan_config.yaml) holds the scheduler
options and display settings::

    scheduler:
      working_hours:
        start: "08:30"
        end: "17:00"
      buffer_between_tasks: 10
      allow_weekends: false
    status:
      warning_days: 2
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .scheduler import SchedulingOptions, merge_scheduling_options

DEFAULT_CONFIG_FILENAME = "autoplan_config.yaml"


class StatusConfig(BaseModel):
    """Configuration for deadline status reporting."""

    warning_days: int = Field(default=1, ge=0)


class UnifiedConfig(BaseModel):
    """Unified configuration containing scheduler and status settings."""

    scheduler: SchedulingOptions = SchedulingOptions()
    status: StatusConfig = StatusConfig()


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load unified configuration from YAML file.

    The ``scheduler`` section may be partial; missing fields take their defaults.

    Args:
        config_path: Path to autoplan_config.yaml

    Returns:
        UnifiedConfig with scheduler options and status settings

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open() as f:
        try:
            data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML in {config_path}: {e}") from e

    if not data:
        raise ValueError("Empty configuration file")
    if not isinstance(data, dict):
        raise ValueError("Config must contain a mapping at the root level")

    try:
        scheduler = merge_scheduling_options(data.get("scheduler") or {})
        status = StatusConfig.model_validate(data.get("status") or {})
    except PydanticValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e

    return UnifiedConfig(scheduler=scheduler, status=status)
