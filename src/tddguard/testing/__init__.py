#
# src/tddguard/testing/__init__.py
#
"""
Test execution and build-failure classification sub-package for tddguard.
"""
from .classifier import BuildFailureClassifier, FailureSignature
from .factory import ToolProfile, get_tool_profile
from .protocols import TestRunResult, TestRunner
from .subprocess_runner import SubprocessTestRunner
from .supervisor import (
    SupervisedRun,
    SupervisionOutcome,
    TestSupervisor,
    ensure_capture_flag,
)

__all__ = [
    "BuildFailureClassifier",
    "FailureSignature",
    "SubprocessTestRunner",
    "SupervisedRun",
    "SupervisionOutcome",
    "TestRunResult",
    "TestRunner",
    "TestSupervisor",
    "ToolProfile",
    "ensure_capture_flag",
    "get_tool_profile",
]

# 🔼⚙️
