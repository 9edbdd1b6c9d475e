#
# src/tddguard/capture/aggregator.py
#
"""
Accumulates streamed test outcomes and reduces them into a CapturedTestRun.
"""
import threading
from typing import Any

import structlog

from tddguard.capture.events import MessageLevel, RunStatistics, TestFinished
from tddguard.capture.models import (
    CapturedError,
    CapturedModule,
    CapturedTest,
    CapturedTestRun,
    CapturedUnhandledError,
    RunReason,
    TestOutcome,
)
from tddguard.telemetry import StructLogger

log: StructLogger = structlog.get_logger("capture.aggregator")

ASSERTION_ERROR_NAME = "AssertionError"
UNHANDLED_ERROR_NAME = "TestRunError"


def module_id_for(full_name: str, separator: str = ".") -> str:
    """Returns the qualifier of ``full_name`` without its last segment."""
    qualifier, sep, _ = full_name.rpartition(separator)
    if sep and qualifier:
        return qualifier
    return full_name


def determine_reason(tests: list[CapturedTest], stats: RunStatistics) -> RunReason:
    """Cancellation wins; otherwise any failed test fails the run."""
    if stats.interrupted:
        return RunReason.INTERRUPTED
    if tests:
        failed = any(test.state is TestOutcome.FAILED for test in tests)
    else:
        failed = stats.failed > 0
    return RunReason.FAILED if failed else RunReason.PASSED


class ResultAggregator:
    """
    Collects the events of a single run.

    Event handlers may be called from several dispatch threads; all access to
    the accumulated lists happens under one lock.
    """

    def __init__(self, qualifier_separator: str = "."):
        self._separator = qualifier_separator
        self._lock = threading.Lock()
        self._tests: list[CapturedTest] = []
        self._positions: dict[str, int] = {}
        self._unhandled: list[CapturedUnhandledError] = []

    def on_test_result(self, event: TestFinished) -> None:
        """Records one finished test. Never raises."""
        try:
            test = self._build_test(event)
        except Exception:
            log.exception("Failed to capture test result", test_event=repr(event))
            return

        with self._lock:
            position = self._positions.get(test.full_name)
            if position is None:
                self._positions[test.full_name] = len(self._tests)
                self._tests.append(test)
            else:
                log.debug("Replacing earlier result for rerun test", full_name=test.full_name)
                self._tests[position] = test

    def on_unhandled_message(self, level: Any, text: str, stack: str | None = None) -> None:
        """Records an out-of-band error; lower severities are ignored. Never raises."""
        try:
            if MessageLevel.coerce(level) is not MessageLevel.ERROR:
                return
            error = CapturedUnhandledError(
                message=str(text), name=UNHANDLED_ERROR_NAME, stack=stack
            )
        except Exception:
            log.exception("Failed to capture run message", level=repr(level))
            return

        with self._lock:
            self._unhandled.append(error)

    def finish(self, stats: RunStatistics | None = None) -> CapturedTestRun:
        """Reduces the accumulated events; repeated calls return equal runs."""
        stats = stats or RunStatistics()
        with self._lock:
            tests = list(self._tests)
            unhandled = list(self._unhandled)

        groups: dict[str, list[CapturedTest]] = {}
        for test in tests:
            groups.setdefault(module_id_for(test.full_name, self._separator), []).append(test)

        run = CapturedTestRun(
            test_modules=[
                CapturedModule(module_id=module_id, tests=members)
                for module_id, members in groups.items()
            ],
            unhandled_errors=unhandled,
            reason=determine_reason(tests, stats),
        )
        log.debug(
            "Aggregated test run",
            modules=len(run.test_modules),
            tests=len(tests),
            unhandled_errors=len(unhandled),
            reason=run.reason.value,
        )
        return run

    def _build_test(self, event: TestFinished) -> CapturedTest:
        state = TestOutcome.from_runner(event.outcome)
        full_name = str(event.full_name)
        errors = None
        if state is TestOutcome.FAILED and event.error_message is not None:
            errors = [
                CapturedError(
                    message=str(event.error_message),
                    stack=event.error_stack,
                    name=ASSERTION_ERROR_NAME,
                )
            ]
        return CapturedTest(
            name=str(event.display_name or full_name),
            full_name=full_name,
            state=state,
            errors=errors,
        )

# 🔼⚙️
