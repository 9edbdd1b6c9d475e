#
# src/tddguard/capture/__init__.py
#
"""
In-process result capture: event contract, aggregation and persistence.
"""
from .aggregator import ResultAggregator
from .events import (
    DiagnosticMessage,
    MessageLevel,
    ResultListener,
    RunStatistics,
    TestFinished,
)
from .models import (
    CapturedError,
    CapturedModule,
    CapturedTest,
    CapturedTestRun,
    CapturedUnhandledError,
    RunReason,
    TestOutcome,
    to_dict,
)
from .reporter import ResultReporter
from .root import resolve_project_root, result_path
from .storage import read_result, write_result

__all__ = [
    "CapturedError",
    "CapturedModule",
    "CapturedTest",
    "CapturedTestRun",
    "CapturedUnhandledError",
    "DiagnosticMessage",
    "MessageLevel",
    "ResultAggregator",
    "ResultListener",
    "ResultReporter",
    "RunReason",
    "RunStatistics",
    "TestFinished",
    "TestOutcome",
    "read_result",
    "resolve_project_root",
    "result_path",
    "to_dict",
    "write_result",
]

# 🔼⚙️
