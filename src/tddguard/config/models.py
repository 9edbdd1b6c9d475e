#
# config/models.py
#
"""
Attrs-based data models for tddguard configuration.
"""

import logging
from pathlib import Path
from typing import Any

from attrs import define, field

PROJECT_ROOT_ENV_VAR = "TDD_GUARD_PROJECT_ROOT"
TOOL_ENV_VAR = "TDDGUARD_TOOL"
LOG_LEVEL_ENV_VAR = "TDDGUARD_LOG_LEVEL"


def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_tool(inst: Any, attr: Any, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f"Field '{attr.name}' must be a non-empty tool name")


def _optional_path(value: str | Path | None) -> Path | None:
    if value is None or value == "":
        return None
    return Path(value)


@define(frozen=True, slots=True)
class GuardConfig:
    """Root configuration object for tddguard.

    ``project_root`` is the raw override; it only takes effect when absolute.
    """

    project_root: Path | None = field(default=None, converter=_optional_path)
    tool: str = field(default="pytest", validator=_validate_tool)
    log_level: str = field(default="WARNING", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


# 🔼⚙️
