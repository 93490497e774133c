"""
Real-time Feedback Manager

Coordinates the live diagnostic display:
1. Owns the FeedbackState shared with producers
2. Runs the display loop (redraw timer, key polling, termination checks)
3. Keeps the terminal in raw mode only while the loop runs

Usage:
    manager = RealtimeFeedbackManager(FeedbackConfig())
    run_diagnostics(reporter=manager.reporter)   # producers, own threads
    manager.start_feedback_display()             # blocks until the loop ends
"""

import logging
import threading
import time
from typing import Callable, Optional, Tuple

from utils.emoji import EmojiHelper
from utils.threads import ThreadManager, get_thread_manager

from .callbacks import FeedbackReporter, StateReporter
from .errors import TerminalError
from .keys import handle_key
from .models import (
    DiagnosticProgress,
    DiagnosticResult,
    FeedbackConfig,
    FeedbackStatus,
    ResultSummary,
)
from .render import render_frame
from .state import FeedbackState
from .terminal import Terminal

logger = logging.getLogger(__name__)

# Upper bound on how long a key poll blocks; also bounds stop() latency
KEY_POLL_TIMEOUT = 0.05
IDLE_SLEEP = 0.01
DISPLAY_THREAD_NAME = "feedback-display"


class RealtimeFeedbackManager:
    """
    Live feedback display for one diagnostic session.

    Producers report through `reporter` (or update_progress/add_result) from
    any thread. The display loop runs in whichever thread calls
    start_feedback_display(), or on a managed thread via start_in_background().
    """

    def __init__(self, config: Optional[FeedbackConfig] = None,
                 terminal: Optional[Terminal] = None,
                 emoji: Optional[EmojiHelper] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.config = config if config is not None else FeedbackConfig()
        self.state = FeedbackState()
        self.reporter: FeedbackReporter = StateReporter(self.state)

        self._terminal = terminal
        self._emoji = emoji
        self._clock = clock

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._error: Optional[BaseException] = None

    # === Display loop ===

    def start_feedback_display(self):
        """
        Run the display loop until it terminates.

        Raises:
            TerminalError: the terminal could not be set up, read or written
        """
        self._stop_event.clear()
        self._run()

    def start_in_background(self, thread_manager: Optional[ThreadManager] = None) -> threading.Thread:
        """Run the display loop on a managed thread. Use wait() to collect errors."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Feedback display is already running")

        self._stop_event.clear()
        self._error = None
        manager = thread_manager or get_thread_manager()
        self._thread = manager.start_thread(DISPLAY_THREAD_NAME, self._run_captured)
        return self._thread

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for a background display loop to finish.

        Returns:
            True if the loop has finished, False on timeout

        Raises:
            Whatever the display loop raised
        """
        if self._thread is None:
            return True
        self._thread.join(timeout)
        if self._thread.is_alive():
            return False

        error, self._error = self._error, None
        if error is not None:
            raise error
        return True

    def stop(self):
        """Ask the display loop to exit at its next iteration. Does not wait."""
        self._stop_event.set()
        logger.debug("Feedback display stop requested")

    def _run_captured(self):
        try:
            self._run()
        except Exception as e:
            self._error = e
            logger.error(f"Feedback display failed: {e}")

    def _run(self):
        logger.info("Starting real-time diagnostic feedback display")
        terminal = self._terminal or Terminal()

        with terminal.raw_mode():
            self._loop(terminal)

        logger.info("Real-time diagnostic feedback display completed")

    def _loop(self, terminal: Terminal):
        last_redraw: Optional[float] = None

        while True:
            if self._stop_event.is_set():
                logger.debug("Received stop signal")
                break

            now = self._clock()
            if last_redraw is None or (now - last_redraw) >= self.config.refresh_interval:
                self._redraw(terminal)
                last_redraw = self._clock()

            event = terminal.read_key(KEY_POLL_TIMEOUT)
            if event is not None and handle_key(event, self.state):
                self._redraw(terminal)
                break

            if self.state.get_status().is_terminal:
                self._redraw(terminal)
                break

            time.sleep(IDLE_SLEEP)

    def _redraw(self, terminal: Terminal):
        """Draw one frame. A frame that fails to render is logged and skipped."""
        snapshot = self.state.snapshot()
        try:
            terminal.draw(render_frame(snapshot, self.config, self._emoji))
        except TerminalError:
            raise
        except Exception as e:
            logger.error(f"Failed to update display: {e}", exc_info=True)
            return

        if self.config.auto_confirm_critical and snapshot.critical_issues:
            cleared = self.state.clear_critical_issues(upto=len(snapshot.critical_issues))
            if cleared:
                logger.info(f"Auto-confirmed {cleared} critical issue(s)")

    # === Owner-facing accessors ===

    def update_progress(self, progress: DiagnosticProgress):
        self.state.update_progress(progress)

    def add_result(self, result: DiagnosticResult):
        self.state.add_result(result)

    def set_status(self, status: FeedbackStatus):
        self.state.set_status(status)

    def get_status(self) -> FeedbackStatus:
        return self.state.get_status()

    def has_critical_issues(self) -> bool:
        return self.state.has_critical_issues()

    def get_critical_issues(self) -> Tuple[DiagnosticResult, ...]:
        return self.state.get_critical_issues()

    def get_results(self) -> Tuple[DiagnosticResult, ...]:
        return self.state.get_results()

    def summary(self) -> ResultSummary:
        return ResultSummary.from_results(self.state.get_results())

    @property
    def is_running(self) -> bool:
        """True while a background display loop is alive."""
        return self._thread is not None and self._thread.is_alive()
