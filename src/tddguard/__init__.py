#
# src/tddguard/__init__.py
#
"""
tddguard: normalizes test runner output into the TDD Guard result file.
"""
from tddguard.capture import (
    CapturedTestRun,
    ResultAggregator,
    ResultReporter,
    read_result,
    resolve_project_root,
    write_result,
)
from tddguard.testing import TestSupervisor

__all__ = [
    "CapturedTestRun",
    "ResultAggregator",
    "ResultReporter",
    "TestSupervisor",
    "read_result",
    "resolve_project_root",
    "write_result",
]

# 🔼⚙️
