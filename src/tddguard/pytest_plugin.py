#
# src/tddguard/pytest_plugin.py
#
"""
pytest adapter: feeds pytest's hooks into a ResultReporter.

Loaded through the ``pytest11`` entry point; inactive unless ``--tddguard``
is given.
"""
import pytest
import structlog

from tddguard.capture import (
    DiagnosticMessage,
    MessageLevel,
    ResultAggregator,
    ResultReporter,
    RunStatistics,
    TestFinished,
    TestOutcome,
    resolve_project_root,
)
from tddguard.config import load_config
from tddguard.exceptions import ConfigurationError
from tddguard.telemetry import StructLogger, configure_plugin_logging

log: StructLogger = structlog.get_logger("pytest_plugin")

PLUGIN_NAME = "tddguard-reporter"
NODE_SEPARATOR = "::"


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("tddguard")
    group.addoption(
        "--tddguard",
        action="store_true",
        default=False,
        dest="tddguard",
        help="Write test results to .claude/tdd-guard/data/test.json under the project root.",
    )
    parser.addini(
        "tddguard_project_root",
        "Absolute project root for tddguard results (TDD_GUARD_PROJECT_ROOT takes precedence).",
        default="",
    )


def pytest_configure(config: pytest.Config) -> None:
    if not config.getoption("tddguard"):
        return

    try:
        guard_config = load_config()
    except ConfigurationError as e:
        raise pytest.UsageError(str(e)) from e
    configure_plugin_logging(guard_config.numeric_log_level)

    override = guard_config.project_root or config.getini("tddguard_project_root") or None
    root = resolve_project_root(override, config.invocation_params.dir)
    reporter = ResultReporter(root, ResultAggregator(qualifier_separator=NODE_SEPARATOR))
    config.pluginmanager.register(TddGuardPlugin(reporter), PLUGIN_NAME)
    log.debug("tddguard reporter registered", project_root=str(root))


def pytest_unconfigure(config: pytest.Config) -> None:
    plugin = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if plugin is not None:
        config.pluginmanager.unregister(plugin)


class _PendingTest:
    """Outcome of one test item folded across its setup/call/teardown reports."""

    __slots__ = ("outcome", "message", "stack")

    def __init__(self) -> None:
        self.outcome: str | None = None
        self.message: str | None = None
        self.stack: str | None = None


def _crash_message(report: pytest.TestReport) -> str:
    crash = getattr(report.longrepr, "reprcrash", None)
    message = getattr(crash, "message", None)
    return message or report.longreprtext or f"{report.when} failed"


class TddGuardPlugin:
    """
    Translates pytest reports into the three run notifications.
    """
    def __init__(self, reporter: ResultReporter):
        self.reporter = reporter
        self._pending: dict[str, _PendingTest] = {}
        self._counts = {outcome: 0 for outcome in TestOutcome}
        self._collection_errors = 0
        self._keyboard_interrupt = False

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        pending = self._pending.setdefault(report.nodeid, _PendingTest())
        if report.failed:
            if pending.outcome != "failed":
                pending.outcome = "failed"
                pending.message = _crash_message(report)
                pending.stack = report.longreprtext or None
        elif report.skipped:
            # xfail reports arrive as skipped as well.
            if report.when in ("setup", "call") and pending.outcome != "failed":
                pending.outcome = "skipped"
        elif report.when == "call" and pending.outcome is None:
            pending.outcome = "passed"

    def pytest_runtest_logfinish(self, nodeid: str) -> None:
        self._emit(nodeid)

    def pytest_collectreport(self, report: pytest.CollectReport) -> None:
        if report.failed:
            self._collection_errors += 1
            where = report.nodeid or "<session>"
            self.reporter.on_message(
                DiagnosticMessage(
                    level=MessageLevel.ERROR,
                    text=f"Collection failed for {where}:\n{report.longreprtext}",
                )
            )

    def pytest_keyboard_interrupt(self, excinfo) -> None:
        self._keyboard_interrupt = True

    def pytest_internalerror(self, excrepr) -> None:
        self.reporter.on_message(
            DiagnosticMessage(level=MessageLevel.ERROR, text=f"pytest internal error:\n{excrepr}")
        )

    @pytest.hookimpl(trylast=True)
    def pytest_sessionfinish(self, session: pytest.Session, exitstatus: int) -> None:
        for nodeid in list(self._pending):
            self._emit(nodeid)

        status = int(exitstatus)
        stats = RunStatistics(
            passed=self._counts[TestOutcome.PASSED],
            # A module that fails to import fails the run, like a build error.
            failed=self._counts[TestOutcome.FAILED] + self._collection_errors,
            skipped=self._counts[TestOutcome.SKIPPED],
            canceled=self._keyboard_interrupt,
            aborted=status in (pytest.ExitCode.INTERNAL_ERROR, pytest.ExitCode.USAGE_ERROR),
        )
        self.reporter.on_run_finished(stats)

    def _emit(self, nodeid: str) -> None:
        pending = self._pending.pop(nodeid, None)
        if pending is None:
            return
        self._counts[TestOutcome.from_runner(pending.outcome)] += 1
        self.reporter.on_test_result(
            TestFinished(
                display_name=nodeid.rpartition(NODE_SEPARATOR)[2] or nodeid,
                full_name=nodeid,
                outcome=pending.outcome,
                error_message=pending.message,
                error_stack=pending.stack,
            )
        )

# 🔼⚙️
