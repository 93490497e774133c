"""
Real-time diagnostic feedback.

Live terminal display for a running diagnostic session: progress bar,
per-item results and critical-issue alerts, with keyboard control to pause,
resume, interrupt, quit, or confirm/abort on critical findings.

Usage:
    from core.feedback import RealtimeFeedbackManager, FeedbackConfig

    manager = RealtimeFeedbackManager(FeedbackConfig())
    start_producers(manager.reporter)
    manager.start_feedback_display()
"""

from .models import (
    DiagnosticStatus,
    Severity,
    FeedbackStatus,
    DiagnosticProgress,
    DiagnosticResult,
    FeedbackSnapshot,
    ResultSummary,
    FeedbackConfig,
)
from .errors import FeedbackError, TerminalError
from .state import FeedbackState
from .keys import KeyEvent, decode_keys, handle_key
from .render import render_frame
from .callbacks import (
    FeedbackReporter,
    StateReporter,
    create_progress_callback,
    create_result_callback,
)
from .terminal import Terminal
from .manager import RealtimeFeedbackManager

__all__ = [
    'RealtimeFeedbackManager',
    'FeedbackConfig',
    'FeedbackState',
    'FeedbackStatus',
    'FeedbackSnapshot',
    'DiagnosticStatus',
    'Severity',
    'DiagnosticProgress',
    'DiagnosticResult',
    'ResultSummary',
    'FeedbackError',
    'TerminalError',
    'KeyEvent',
    'decode_keys',
    'handle_key',
    'render_frame',
    'FeedbackReporter',
    'StateReporter',
    'create_progress_callback',
    'create_result_callback',
    'Terminal',
]
