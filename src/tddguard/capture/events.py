#
# src/tddguard/capture/events.py
#
"""
The notification contract between a host test runner and tddguard.

A runner adapter maps its native events onto exactly three notifications:
a test finished, a diagnostic message was emitted, the run finished.
"""
from enum import IntEnum
from typing import Any, Protocol, runtime_checkable

from attrs import define, field


class MessageLevel(IntEnum):
    """Severity of a diagnostic message, ordered like stdlib logging levels."""

    INFORMATIONAL = 20
    WARNING = 30
    ERROR = 40

    @classmethod
    def coerce(cls, value: Any) -> "MessageLevel":
        """Accepts a member, a level name or a numeric level."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            if value >= cls.ERROR:
                return cls.ERROR
            return cls.WARNING if value >= cls.WARNING else cls.INFORMATIONAL
        name = str(getattr(value, "name", value)).strip().upper()
        if name in ("ERROR", "CRITICAL", "FATAL"):
            return cls.ERROR
        if name in ("WARNING", "WARN"):
            return cls.WARNING
        return cls.INFORMATIONAL


@define(frozen=True, slots=True)
class TestFinished:
    """One test has completed; ``outcome`` is the runner's own outcome value."""

    display_name: str
    full_name: str
    outcome: Any
    error_message: str | None = None
    error_stack: str | None = None


@define(frozen=True, slots=True)
class DiagnosticMessage:
    level: MessageLevel = field(converter=MessageLevel.coerce)
    text: str = field()


@define(frozen=True, slots=True)
class RunStatistics:
    """Aggregate statistics delivered with the "run finished" notification."""

    passed: int = 0
    failed: int = 0
    skipped: int = 0
    canceled: bool = False
    aborted: bool = False

    @property
    def interrupted(self) -> bool:
        return self.canceled or self.aborted


@runtime_checkable
class ResultListener(Protocol):
    """
    Protocol for anything that consumes the three run notifications.
    """
    def on_test_result(self, event: TestFinished) -> None:
        ...

    def on_message(self, message: DiagnosticMessage) -> None:
        ...

    def on_run_finished(self, stats: RunStatistics) -> Any:
        ...

# 🔼⚙️
