#
# config/loader.py
#
"""
Builds a GuardConfig from environment variables.
"""

import os
from collections.abc import Mapping

import structlog

from tddguard.config.models import (
    LOG_LEVEL_ENV_VAR,
    PROJECT_ROOT_ENV_VAR,
    TOOL_ENV_VAR,
    GuardConfig,
)
from tddguard.exceptions import ConfigurationError

log = structlog.get_logger("config.loader")


def load_config(env: Mapping[str, str] | None = None, **overrides) -> GuardConfig:
    """
    Loads configuration from the environment.

    Keyword overrides (e.g. from CLI options) win over environment values;
    ``None`` overrides are ignored.
    """
    env = os.environ if env is None else env

    values: dict[str, str] = {}
    if env.get(PROJECT_ROOT_ENV_VAR):
        values["project_root"] = env[PROJECT_ROOT_ENV_VAR]
    if env.get(TOOL_ENV_VAR):
        values["tool"] = env[TOOL_ENV_VAR]
    if env.get(LOG_LEVEL_ENV_VAR):
        values["log_level"] = env[LOG_LEVEL_ENV_VAR]
    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        config = GuardConfig(**values)
    except (TypeError, ValueError) as e:
        log.error("Invalid tddguard configuration", error=str(e))
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    log.debug(
        "Configuration loaded",
        project_root=str(config.project_root) if config.project_root else None,
        tool=config.tool,
        log_level=config.log_level,
    )
    return config


# 🔼⚙️
