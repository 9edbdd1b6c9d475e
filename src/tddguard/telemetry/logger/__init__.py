# src/tddguard/telemetry/logger/__init__.py

from .base import StructLogger, configure_plugin_logging, setup_logging

__all__ = ["StructLogger", "configure_plugin_logging", "setup_logging"]
