"""
Producer-facing adapters.

Diagnostic producers report through the FeedbackReporter interface and never
touch the display loop. StateReporter is the implementation backed by a
FeedbackState; tests can hand producers any other FeedbackReporter.
"""

from abc import ABC, abstractmethod
from typing import Callable

from .models import DiagnosticProgress, DiagnosticResult
from .state import FeedbackState

# === Callback Types ===

ProgressCallback = Callable[[DiagnosticProgress], None]
ResultCallback = Callable[[DiagnosticResult], None]


class FeedbackReporter(ABC):
    """Where producers send progress and results. Safe to call from any thread."""

    @abstractmethod
    def report_progress(self, progress: DiagnosticProgress) -> None:
        """Replace the current progress."""

    @abstractmethod
    def report_result(self, result: DiagnosticResult) -> None:
        """Record a completed diagnostic result."""


class StateReporter(FeedbackReporter):
    """Reporter writing straight into a shared FeedbackState."""

    def __init__(self, state: FeedbackState):
        self._state = state

    def report_progress(self, progress: DiagnosticProgress) -> None:
        self._state.update_progress(progress)

    def report_result(self, result: DiagnosticResult) -> None:
        self._state.add_result(result)


def create_progress_callback(manager) -> ProgressCallback:
    """Plain callable for producers that take a progress callback."""
    return manager.reporter.report_progress


def create_result_callback(manager) -> ResultCallback:
    """Plain callable for producers that take a result callback."""
    return manager.reporter.report_result
