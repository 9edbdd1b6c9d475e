# tests/unit/test_aggregator.py

"""Unit tests for the ResultAggregator."""

import threading

import pytest

from tddguard.capture.aggregator import ResultAggregator, module_id_for
from tddguard.capture.events import MessageLevel, RunStatistics, TestFinished
from tddguard.capture.models import RunReason, TestOutcome


def finished(full_name: str, outcome="passed", **kwargs) -> TestFinished:
    return TestFinished(
        display_name=kwargs.pop("display_name", full_name.rpartition(".")[2]),
        full_name=full_name,
        outcome=outcome,
        **kwargs,
    )


@pytest.fixture
def aggregator() -> ResultAggregator:
    return ResultAggregator()


class TestGrouping:
    def test_single_passed_test(self, aggregator: ResultAggregator) -> None:
        """One passing test ends up in the module named by its qualifier."""
        aggregator.on_test_result(
            finished("MyNamespace.MyClass.MyTest", display_name="Should Pass Test")
        )

        run = aggregator.finish(RunStatistics(passed=1))

        assert len(run.test_modules) == 1
        module = run.test_modules[0]
        assert module.module_id == "MyNamespace.MyClass"
        assert len(module.tests) == 1
        test = module.tests[0]
        assert test.name == "Should Pass Test"
        assert test.full_name == "MyNamespace.MyClass.MyTest"
        assert test.state is TestOutcome.PASSED
        assert test.errors is None
        assert run.reason is RunReason.PASSED

    def test_tests_grouped_by_qualifier(self, aggregator: ResultAggregator) -> None:
        for name in ("A.T1", "A.T2", "B.T3"):
            aggregator.on_test_result(finished(name))

        run = aggregator.finish(RunStatistics(passed=3))

        assert [m.module_id for m in run.test_modules] == ["A", "B"]
        assert [len(m.tests) for m in run.test_modules] == [2, 1]

    def test_first_seen_order_is_preserved(self, aggregator: ResultAggregator) -> None:
        for name in ("B.T1", "A.T1", "B.T2", "C.T1", "A.T2"):
            aggregator.on_test_result(finished(name))

        run = aggregator.finish()

        assert [m.module_id for m in run.test_modules] == ["B", "A", "C"]
        assert [t.full_name for t in run.test_modules[0].tests] == ["B.T1", "B.T2"]
        assert [t.full_name for t in run.test_modules[1].tests] == ["A.T1", "A.T2"]
        assert sum(len(m.tests) for m in run.test_modules) == 5

    def test_name_without_separator_is_its_own_module(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(finished("Standalone"))

        run = aggregator.finish()

        assert run.test_modules[0].module_id == "Standalone"
        assert run.test_modules[0].tests[0].full_name == "Standalone"

    def test_custom_separator(self) -> None:
        aggregator = ResultAggregator(qualifier_separator="::")
        aggregator.on_test_result(finished("tests/test_x.py::TestCart::test_total[1.5]"))

        run = aggregator.finish()

        assert run.test_modules[0].module_id == "tests/test_x.py::TestCart"

    def test_rerun_replaces_earlier_result(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(finished("A.T1", "failed", error_message="flaky"))
        aggregator.on_test_result(finished("A.T2"))
        aggregator.on_test_result(finished("A.T1", "passed"))

        run = aggregator.finish()

        tests = run.test_modules[0].tests
        assert [t.full_name for t in tests] == ["A.T1", "A.T2"]
        assert tests[0].state is TestOutcome.PASSED
        assert run.reason is RunReason.PASSED

    @pytest.mark.parametrize(
        ("full_name", "expected"),
        [("a.b.c", "a.b"), ("abc", "abc"), (".abc", ".abc")],
    )
    def test_module_id_for(self, full_name: str, expected: str) -> None:
        assert module_id_for(full_name) == expected


class TestFailures:
    def test_failed_test_carries_one_error(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(
            finished(
                "MyNamespace.MyClass.MyTest",
                "failed",
                error_message="Expected: 5\nActual: 3",
                error_stack="at MyNamespace.MyClass.MyTest() in Tests.cs:line 10",
            )
        )

        run = aggregator.finish(RunStatistics(failed=1))

        test = run.test_modules[0].tests[0]
        assert test.state is TestOutcome.FAILED
        assert len(test.errors) == 1
        assert test.errors[0].message == "Expected: 5\nActual: 3"
        assert test.errors[0].stack == "at MyNamespace.MyClass.MyTest() in Tests.cs:line 10"
        assert test.errors[0].name == "AssertionError"
        assert run.reason is RunReason.FAILED

    def test_failed_without_message_has_no_errors(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(finished("A.T1", "failed"))

        test = aggregator.finish().test_modules[0].tests[0]

        assert test.state is TestOutcome.FAILED
        assert test.errors is None

    def test_unknown_outcome_counts_as_failure(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(finished("A.T1", "NotFound"))

        run = aggregator.finish()

        assert run.test_modules[0].tests[0].state is TestOutcome.FAILED
        assert run.reason is RunReason.FAILED

    def test_skipped_message_is_not_attached(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(finished("A.T1", "skipped", error_message="not on CI"))

        test = aggregator.finish().test_modules[0].tests[0]

        assert test.state is TestOutcome.SKIPPED
        assert test.errors is None

    def test_bad_event_is_swallowed(self, aggregator: ResultAggregator) -> None:
        class Exploding:
            def __str__(self) -> str:
                raise RuntimeError("cannot render")

        aggregator.on_test_result(
            TestFinished(display_name="boom", full_name=Exploding(), outcome="passed")  # type: ignore[arg-type]
        )
        aggregator.on_test_result(finished("A.T1"))

        run = aggregator.finish()

        assert [t.full_name for t in run.iter_tests()] == ["A.T1"]


class TestUnhandledMessages:
    def test_error_messages_are_captured(self, aggregator: ResultAggregator) -> None:
        aggregator.on_unhandled_message(MessageLevel.ERROR, "adapter crashed")
        aggregator.on_unhandled_message("error", "second")

        run = aggregator.finish()

        assert [e.message for e in run.unhandled_errors] == ["adapter crashed", "second"]
        assert all(e.name == "TestRunError" for e in run.unhandled_errors)

    @pytest.mark.parametrize("level", [MessageLevel.INFORMATIONAL, MessageLevel.WARNING, "info", "warn"])
    def test_lower_levels_are_ignored(self, aggregator: ResultAggregator, level) -> None:
        aggregator.on_unhandled_message(level, "just chatter")

        assert aggregator.finish().unhandled_errors is None

    def test_unhandled_errors_do_not_change_reason(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(finished("A.T1"))
        aggregator.on_unhandled_message(MessageLevel.ERROR, "adapter crashed")

        assert aggregator.finish().reason is RunReason.PASSED


class TestReason:
    def test_cancellation_overrides_failures(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(finished("A.T1", "failed", error_message="x"))

        assert aggregator.finish(RunStatistics(failed=1, canceled=True)).reason is RunReason.INTERRUPTED

    def test_abort_is_interrupted(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(finished("A.T1"))

        assert aggregator.finish(RunStatistics(passed=1, aborted=True)).reason is RunReason.INTERRUPTED

    def test_zero_tests_passes(self, aggregator: ResultAggregator) -> None:
        run = aggregator.finish(RunStatistics())

        assert run.test_modules == ()
        assert run.unhandled_errors is None
        assert run.reason is RunReason.PASSED

    def test_zero_tests_uses_statistics(self, aggregator: ResultAggregator) -> None:
        assert aggregator.finish(RunStatistics(failed=2)).reason is RunReason.FAILED

    def test_captured_tests_win_over_statistics(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(finished("A.T1"))

        assert aggregator.finish(RunStatistics(failed=1)).reason is RunReason.PASSED


class TestLifecycle:
    def test_finish_is_repeatable(self, aggregator: ResultAggregator) -> None:
        aggregator.on_test_result(finished("A.T1", "failed", error_message="x"))
        aggregator.on_unhandled_message(MessageLevel.ERROR, "oops")
        stats = RunStatistics(failed=1)

        assert aggregator.finish(stats) == aggregator.finish(stats)

    def test_concurrent_dispatch_keeps_every_test(self, aggregator: ResultAggregator) -> None:
        def feed(worker: int) -> None:
            for index in range(200):
                aggregator.on_test_result(finished(f"W{worker}.T{index}"))
                aggregator.on_unhandled_message(MessageLevel.ERROR, f"{worker}-{index}")

        threads = [threading.Thread(target=feed, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        run = aggregator.finish()

        assert len(run.test_modules) == 8
        assert sum(len(m.tests) for m in run.test_modules) == 1600
        assert len(run.unhandled_errors) == 1600
