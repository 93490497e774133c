"""
Shared feedback state.

One FeedbackState is owned by each RealtimeFeedbackManager and handed to the
display loop and to producer adapters. Every field has its own lock and no
lock is ever held while another is being acquired, so producers and the
display loop never deadlock against each other.
"""

import logging
import threading
from typing import Iterable, List, Optional, Tuple

from .models import (
    DiagnosticProgress,
    DiagnosticResult,
    FeedbackSnapshot,
    FeedbackStatus,
)

logger = logging.getLogger(__name__)


class FeedbackState:
    """Thread-safe store for status, progress, results and critical issues."""

    def __init__(self):
        self._status = FeedbackStatus.RUNNING
        self._status_lock = threading.Lock()

        self._progress: Optional[DiagnosticProgress] = None
        self._progress_lock = threading.Lock()

        # Append-only for the lifetime of the store
        self._results: List[DiagnosticResult] = []
        self._results_lock = threading.Lock()

        self._critical: List[DiagnosticResult] = []
        self._critical_lock = threading.Lock()

    # === Status ===

    def set_status(self, status: FeedbackStatus):
        with self._status_lock:
            self._status = status
        logger.debug(f"Feedback status set to {status.display_text}")

    def get_status(self) -> FeedbackStatus:
        with self._status_lock:
            return self._status

    def transition_status(self, allowed_from: Iterable[FeedbackStatus],
                          new_status: FeedbackStatus) -> bool:
        """
        Move to new_status only if the current status is in allowed_from.

        The check and the write happen under the status lock.

        Returns:
            True if the status changed
        """
        allowed = tuple(allowed_from)
        with self._status_lock:
            if self._status not in allowed:
                return False
            self._status = new_status
        return True

    # === Progress ===

    def update_progress(self, progress: DiagnosticProgress):
        with self._progress_lock:
            self._progress = progress

    def get_progress(self) -> Optional[DiagnosticProgress]:
        with self._progress_lock:
            return self._progress

    # === Results ===

    def add_result(self, result: DiagnosticResult):
        """
        Record a completed diagnostic result.

        Critical issues are appended to the critical list before the result
        list, so a reader that sees the result also sees the issue.
        """
        if result.is_critical():
            with self._critical_lock:
                self._critical.append(result)
            logger.warning(f"Critical issue detected: {result.item_name} - {result.message}")

        with self._results_lock:
            self._results.append(result)

    def get_results(self) -> Tuple[DiagnosticResult, ...]:
        with self._results_lock:
            return tuple(self._results)

    # === Critical issues ===

    def has_critical_issues(self) -> bool:
        with self._critical_lock:
            return bool(self._critical)

    def get_critical_issues(self) -> Tuple[DiagnosticResult, ...]:
        with self._critical_lock:
            return tuple(self._critical)

    def clear_critical_issues(self, upto: Optional[int] = None) -> int:
        """Drop pending critical issues. Results are kept.

        Args:
            upto: Only drop the oldest `upto` issues (all when None)

        Returns:
            Number of issues cleared
        """
        with self._critical_lock:
            if upto is None or upto >= len(self._critical):
                cleared = len(self._critical)
                self._critical.clear()
            else:
                cleared = max(upto, 0)
                del self._critical[:cleared]
        return cleared

    # === Snapshot ===

    def snapshot(self) -> FeedbackSnapshot:
        """
        Copy the state for rendering.

        Fields are read one lock at a time; a producer may slip in between
        reads. That is acceptable for a live display. Results are read before
        critical issues, so every critical result in the snapshot has its issue.
        """
        results = self.get_results()
        critical = self.get_critical_issues()
        progress = self.get_progress()
        status = self.get_status()
        return FeedbackSnapshot(
            status=status,
            progress=progress,
            results=results,
            critical_issues=critical,
        )
