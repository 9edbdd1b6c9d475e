#
# config/__init__.py
#
"""
Configuration handling sub-package for tddguard.

Exports the loading function and core configuration model.
"""

from .loader import load_config
from .models import (
    LOG_LEVEL_ENV_VAR,
    PROJECT_ROOT_ENV_VAR,
    TOOL_ENV_VAR,
    GuardConfig,
)

__all__ = [
    "LOG_LEVEL_ENV_VAR",
    "PROJECT_ROOT_ENV_VAR",
    "TOOL_ENV_VAR",
    "GuardConfig",
    "load_config",
]

# 🔼⚙️
