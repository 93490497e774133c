"""
Tests for the shared feedback state.

Covers the critical-issue invariant, snapshot copies and concurrent producers.
Run: python3 -m pytest tests/test_feedback_state.py -v
"""

import random
import sys
import os
import threading

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.feedback.models import (
    DiagnosticProgress,
    DiagnosticResult,
    DiagnosticStatus,
    FeedbackStatus,
    Severity,
)
from core.feedback.state import FeedbackState


class TestInitialState:
    """A fresh store starts RUNNING and empty."""

    def test_defaults(self):
        state = FeedbackState()
        assert state.get_status() == FeedbackStatus.RUNNING
        assert state.get_progress() is None
        assert state.get_results() == ()
        assert not state.has_critical_issues()
        assert state.get_critical_issues() == ()


class TestStatus:
    """Test status writes and compare-and-set."""

    def test_last_write_wins(self):
        state = FeedbackState()
        state.set_status(FeedbackStatus.PAUSED)
        state.set_status(FeedbackStatus.COMPLETED)
        assert state.get_status() == FeedbackStatus.COMPLETED

    def test_transition_allowed(self):
        state = FeedbackState()
        assert state.transition_status([FeedbackStatus.RUNNING], FeedbackStatus.PAUSED)
        assert state.get_status() == FeedbackStatus.PAUSED

    def test_transition_rejected(self):
        state = FeedbackState()
        assert not state.transition_status([FeedbackStatus.PAUSED], FeedbackStatus.RUNNING)
        assert state.get_status() == FeedbackStatus.RUNNING


class TestProgress:
    """Progress is replaced wholesale."""

    def test_update_replaces(self):
        state = FeedbackState()
        state.update_progress(DiagnosticProgress("a", 1, 3))
        state.update_progress(DiagnosticProgress("b", 2, 3))
        assert state.get_progress().current_item == "b"


class TestResults:
    """Test add_result and the critical-issue predicate."""

    def test_critical_issue_detection(self):
        state = FeedbackState()
        state.add_result(DiagnosticResult.error("disk", "full", 0.1, Severity.CRITICAL))

        assert state.has_critical_issues()
        issues = state.get_critical_issues()
        assert len(issues) == 1
        assert issues[0].item_name == "disk"
        assert issues[0].severity == Severity.CRITICAL

    def test_high_error_is_critical(self):
        state = FeedbackState()
        state.add_result(DiagnosticResult.error("iam", "denied", severity=Severity.HIGH))
        assert state.has_critical_issues()

    def test_medium_error_is_not_critical(self):
        state = FeedbackState()
        state.add_result(DiagnosticResult.error("dns", "slow", severity=Severity.MEDIUM))
        assert not state.has_critical_issues()
        assert len(state.get_results()) == 1

    def test_critical_warning_is_not_critical_issue(self):
        state = FeedbackState()
        state.add_result(DiagnosticResult.warning("sg", "wide open", severity=Severity.CRITICAL))
        assert not state.has_critical_issues()

    def test_insertion_order_preserved(self):
        state = FeedbackState()
        for name in ("one", "two", "three"):
            state.add_result(DiagnosticResult.success(name, "ok"))
        assert [r.item_name for r in state.get_results()] == ["one", "two", "three"]

    def test_clear_keeps_results(self):
        """Clearing critical issues never removes completed results."""
        state = FeedbackState()
        state.add_result(DiagnosticResult.error("disk", "full", severity=Severity.CRITICAL))
        state.add_result(DiagnosticResult.success("cpu", "ok"))

        assert state.clear_critical_issues() == 1
        assert not state.has_critical_issues()
        assert len(state.get_results()) == 2

    def test_clear_oldest_only(self):
        state = FeedbackState()
        for name in ("a", "b", "c"):
            state.add_result(DiagnosticResult.error(name, "bad", severity=Severity.HIGH))

        assert state.clear_critical_issues(upto=2) == 2
        assert [r.item_name for r in state.get_critical_issues()] == ["c"]

    def test_returned_sequences_are_copies(self):
        state = FeedbackState()
        state.add_result(DiagnosticResult.error("disk", "full", severity=Severity.CRITICAL))
        issues = state.get_critical_issues()
        results = state.get_results()

        state.clear_critical_issues()
        state.add_result(DiagnosticResult.success("cpu", "ok"))

        assert len(issues) == 1
        assert len(results) == 1


class TestSnapshot:
    """Snapshots are point-in-time copies."""

    def test_snapshot_contents(self):
        state = FeedbackState()
        state.update_progress(DiagnosticProgress("a", 1, 2))
        state.add_result(DiagnosticResult.error("disk", "full", severity=Severity.CRITICAL))
        state.set_status(FeedbackStatus.PAUSED)

        snap = state.snapshot()
        assert snap.status == FeedbackStatus.PAUSED
        assert snap.progress.current_item == "a"
        assert len(snap.results) == 1
        assert len(snap.critical_issues) == 1

    def test_snapshot_unaffected_by_later_writes(self):
        state = FeedbackState()
        snap = state.snapshot()
        state.add_result(DiagnosticResult.success("cpu", "ok"))
        assert snap.results == ()


class TestConcurrentProducers:
    """No lost updates and no duplicates under concurrent add_result."""

    def test_thousand_concurrent_results(self):
        state = FeedbackState()
        producers = 10
        per_producer = 100
        barrier = threading.Barrier(producers)
        generated = [[] for _ in range(producers)]

        def produce(index):
            rng = random.Random(index)
            barrier.wait()
            for n in range(per_producer):
                result = DiagnosticResult(
                    item_name=f"p{index}-{n}",
                    message="generated",
                    status=rng.choice(list(DiagnosticStatus)),
                    severity=rng.choice(list(Severity)),
                )
                generated[index].append(result)
                state.add_result(result)

        threads = [threading.Thread(target=produce, args=(i,)) for i in range(producers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        all_generated = [r for chunk in generated for r in chunk]
        expected_critical = sum(1 for r in all_generated if r.is_critical())

        results = state.get_results()
        issues = state.get_critical_issues()
        assert len(results) == 1000
        assert len({r.item_name for r in results}) == 1000
        assert len(issues) == expected_critical
        assert len({r.item_name for r in issues}) == expected_critical

    def test_critical_issue_visible_with_its_result(self):
        """A reader that sees a critical result also sees the critical issue."""
        state = FeedbackState()
        stop = threading.Event()
        violations = []

        def reader():
            while not stop.is_set():
                results = state.get_results()
                issues = {r.item_name for r in state.get_critical_issues()}
                for r in results:
                    if r.is_critical() and r.item_name not in issues:
                        violations.append(r.item_name)

        t = threading.Thread(target=reader)
        t.start()
        for n in range(300):
            state.add_result(DiagnosticResult.error(f"e{n}", "bad", severity=Severity.CRITICAL))
        stop.set()
        t.join(timeout=10)

        assert violations == []

    def test_snapshot_never_shows_critical_result_without_issue(self):
        state = FeedbackState()
        stop = threading.Event()
        violations = []

        def reader():
            while not stop.is_set():
                snap = state.snapshot()
                issues = {r.item_name for r in snap.critical_issues}
                violations.extend(r.item_name for r in snap.results
                                  if r.is_critical() and r.item_name not in issues)

        t = threading.Thread(target=reader)
        t.start()
        for n in range(300):
            state.add_result(DiagnosticResult.error(f"s{n}", "bad", severity=Severity.HIGH))
        stop.set()
        t.join(timeout=10)

        assert violations == []
