#
# src/tddguard/telemetry/__init__.py
#
"""
Logging setup for tddguard.
"""
from .logger import StructLogger, configure_plugin_logging, setup_logging

__all__ = ["StructLogger", "configure_plugin_logging", "setup_logging"]

# 🔼⚙️
