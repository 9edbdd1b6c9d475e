#
# src/tddguard/capture/models.py
#
"""
Immutable records describing one captured test run, and their JSON mapping.

Every record serializes with lowerCamelCase keys (taken from each field's
``json_name`` metadata). Fields holding ``None`` are left out of the
serialized form entirely.
"""

from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from typing import Any

import attrs
from attrs import define, field


class TestOutcome(str, Enum):
    """State of one executed test."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"

    @classmethod
    def from_runner(cls, value: Any) -> "TestOutcome":
        """Maps a runner-specific outcome; anything unrecognised is a failure."""
        if isinstance(value, cls):
            return value
        name = getattr(value, "name", value)
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            return cls.FAILED


class RunReason(str, Enum):
    """Overall classification of a finished run."""

    PASSED = "passed"
    FAILED = "failed"
    INTERRUPTED = "interrupted"


def _json(name: str) -> dict[str, str]:
    return {"json_name": name}


def _optional_tuple(value: Iterable | None) -> tuple | None:
    if value is None:
        return None
    value = tuple(value)
    return value or None


def _optional_reason(value: RunReason | str | None) -> RunReason | None:
    if value is None:
        return None
    return RunReason(value)


def _errors_only_on_failure(inst: "CapturedTest", attr: attrs.Attribute, value: Any) -> None:
    if value is not None and inst.state is not TestOutcome.FAILED:
        raise ValueError(
            f"Test '{inst.full_name}' has state '{inst.state.value}' but carries errors"
        )


@define(frozen=True, slots=True)
class CapturedError:
    """One failure detail attached to a test."""

    message: str = field(metadata=_json("message"))
    actual: str | None = field(default=None, kw_only=True, metadata=_json("actual"))
    expected: str | None = field(default=None, kw_only=True, metadata=_json("expected"))
    show_diff: bool | None = field(default=None, kw_only=True, metadata=_json("showDiff"))
    operator: str | None = field(default=None, kw_only=True, metadata=_json("operator"))
    diff: str | None = field(default=None, kw_only=True, metadata=_json("diff"))
    name: str | None = field(default=None, kw_only=True, metadata=_json("name"))
    ok: bool | None = field(default=None, kw_only=True, metadata=_json("ok"))
    stack: str | None = field(default=None, kw_only=True, metadata=_json("stack"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CapturedError":
        return cls(**_flat_kwargs(cls, data))


@define(frozen=True, slots=True)
class CapturedTest:
    """One executed (or synthesized) test."""

    name: str = field(metadata=_json("name"))
    full_name: str = field(metadata=_json("fullName"))
    state: TestOutcome = field(converter=TestOutcome.from_runner, metadata=_json("state"))
    errors: tuple[CapturedError, ...] | None = field(
        default=None,
        converter=_optional_tuple,
        validator=_errors_only_on_failure,
        metadata=_json("errors"),
    )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CapturedTest":
        errors = data.get("errors")
        return cls(
            name=data["name"],
            full_name=data["fullName"],
            state=data.get("state"),
            errors=[CapturedError.from_dict(e) for e in errors] if errors else None,
        )


@define(frozen=True, slots=True)
class CapturedModule:
    """Tests sharing one qualifier, in the order they were first observed."""

    module_id: str = field(metadata=_json("moduleId"))
    tests: tuple[CapturedTest, ...] = field(converter=tuple, metadata=_json("tests"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CapturedModule":
        return cls(
            module_id=data["moduleId"],
            tests=[CapturedTest.from_dict(t) for t in data.get("tests", [])],
        )


@define(frozen=True, slots=True)
class CapturedUnhandledError:
    """An error raised outside of any specific test."""

    message: str = field(metadata=_json("message"))
    name: str = field(metadata=_json("name"))
    stack: str | None = field(default=None, metadata=_json("stack"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CapturedUnhandledError":
        return cls(**_flat_kwargs(cls, data))


@define(frozen=True, slots=True)
class CapturedTestRun:
    """The root record persisted after every run."""

    test_modules: tuple[CapturedModule, ...] = field(
        converter=tuple, metadata=_json("testModules")
    )
    unhandled_errors: tuple[CapturedUnhandledError, ...] | None = field(
        default=None, converter=_optional_tuple, metadata=_json("unhandledErrors")
    )
    reason: RunReason | None = field(
        default=None, converter=_optional_reason, metadata=_json("reason")
    )

    def iter_tests(self) -> Iterator[CapturedTest]:
        for module in self.test_modules:
            yield from module.tests

    @property
    def has_failures(self) -> bool:
        return any(test.state is TestOutcome.FAILED for test in self.iter_tests())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CapturedTestRun":
        """Builds a run from its JSON form; missing optional keys become ``None``."""
        unhandled = data.get("unhandledErrors")
        return cls(
            test_modules=[CapturedModule.from_dict(m) for m in data.get("testModules") or []],
            unhandled_errors=(
                [CapturedUnhandledError.from_dict(e) for e in unhandled] if unhandled else None
            ),
            reason=data.get("reason"),
        )


def _flat_kwargs(cls: type, data: Mapping[str, Any]) -> dict[str, Any]:
    kwargs = {}
    for attribute in attrs.fields(cls):
        key = attribute.metadata.get("json_name", attribute.name)
        if data.get(key) is not None:
            kwargs[attribute.name] = data[key]
    return kwargs


def _encode(value: Any) -> Any:
    if attrs.has(type(value)):
        return to_dict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    return value


def to_dict(record: Any) -> dict[str, Any]:
    """Serializes any capture record to a JSON-ready dict, omitting ``None`` fields."""
    result: dict[str, Any] = {}
    for attribute in attrs.fields(type(record)):
        value = getattr(record, attribute.name)
        if value is None:
            continue
        result[attribute.metadata.get("json_name", attribute.name)] = _encode(value)
    return result


# 🔼⚙️
