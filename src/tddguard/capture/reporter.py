#
# src/tddguard/capture/reporter.py
#
"""
Connects the notification contract to the aggregator and the result file.
"""
from pathlib import Path

import structlog

from tddguard.capture.aggregator import ResultAggregator
from tddguard.capture.events import (
    DiagnosticMessage,
    ResultListener,
    RunStatistics,
    TestFinished,
)
from tddguard.capture.models import CapturedTestRun
from tddguard.capture.storage import write_result
from tddguard.telemetry import StructLogger

log: StructLogger = structlog.get_logger("capture.reporter")


class ResultReporter(ResultListener):
    """
    Hosts a ResultAggregator inside a test runner and writes its result
    when the run finishes.
    """
    def __init__(self, root: str | Path, aggregator: ResultAggregator | None = None):
        self.root = Path(root)
        self.aggregator = aggregator or ResultAggregator()
        self._log = log.bind(project_root=str(self.root))

    def on_test_result(self, event: TestFinished) -> None:
        self.aggregator.on_test_result(event)

    def on_message(self, message: DiagnosticMessage) -> None:
        self.aggregator.on_unhandled_message(message.level, message.text)

    def on_run_finished(self, stats: RunStatistics) -> CapturedTestRun | None:
        """Finishes aggregation and persists the run. Never raises."""
        try:
            run = self.aggregator.finish(stats)
        except Exception:
            self._log.exception("Failed to aggregate test results")
            return None

        write_result(self.root, run)
        return run

# 🔼⚙️
