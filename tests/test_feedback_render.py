"""
Tests for frame rendering.

Frames are printed to an in-memory Rich console and checked as text.
Run: python3 -m pytest tests/test_feedback_render.py -v
"""

import io
import sys
import os

import pytest
from rich.console import Console

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.feedback.models import (
    DiagnosticProgress,
    DiagnosticResult,
    FeedbackConfig,
    FeedbackSnapshot,
    FeedbackStatus,
    Severity,
)
from core.feedback.render import render_frame
from utils.emoji import EmojiHelper

EMOJI = EmojiHelper(enabled=True)
ASCII = EmojiHelper(enabled=False)


def to_text(renderable, color=False):
    """Print a renderable to a string, optionally with ANSI colors."""
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=100,
        force_terminal=color,
        color_system="standard" if color else None,
        legacy_windows=False,
    )
    console.print(renderable)
    return buffer.getvalue()


def frame(status=FeedbackStatus.RUNNING, progress=None, results=(), critical=(),
          config=None, emoji=EMOJI, color=False):
    snapshot = FeedbackSnapshot(status, progress, tuple(results), tuple(critical))
    return to_text(render_frame(snapshot, config or FeedbackConfig(), emoji), color=color)


class TestHeader:

    def test_title_shown(self):
        assert "SSM Connection Diagnostics" in frame()

    def test_custom_title(self):
        assert "Fleet Health" in frame(config=FeedbackConfig(title="Fleet Health"))


class TestProgress:
    """Progress bar and detailed status line."""

    def test_no_progress_section_without_progress(self):
        output = frame()
        assert "Progress:" not in output
        assert "Current:" not in output

    def test_bar_and_percentage(self):
        output = frame(progress=DiagnosticProgress("ssm_agent", 5, 10))
        assert "50.0%" in output
        assert "█" * 25 + "░" * 25 in output

    def test_empty_plan(self):
        output = frame(progress=DiagnosticProgress("none", 0, 0))
        assert "0.0%" in output
        assert "░" * 50 in output

    def test_ascii_bar(self):
        output = frame(progress=DiagnosticProgress("x", 1, 2), emoji=ASCII)
        assert "#" * 25 + "-" * 25 in output

    def test_bar_hidden(self):
        config = FeedbackConfig(show_progress_bar=False)
        output = frame(progress=DiagnosticProgress("ssm_agent", 5, 10), config=config)
        assert "Progress:" not in output
        assert "Current: ssm_agent (5/10)" in output

    def test_detailed_line_with_estimate(self):
        progress = DiagnosticProgress("iam", 3, 10, elapsed=3.0, estimated_remaining=7.04)
        output = frame(progress=progress)
        assert "Current: iam (3/10)" in output
        assert "Estimated remaining: 7.0s" in output

    def test_detailed_line_without_estimate(self):
        output = frame(progress=DiagnosticProgress("iam", 0, 10))
        assert "Estimated remaining" not in output

    def test_detailed_hidden(self):
        config = FeedbackConfig(show_detailed_status=False)
        output = frame(progress=DiagnosticProgress("iam", 3, 10), config=config)
        assert "Current:" not in output
        assert "30.0%" in output


class TestResults:
    """Result lines in insertion order."""

    def test_success_line(self):
        output = frame(results=[DiagnosticResult.success("disk", "ok", 1.234)])
        assert "Diagnostic Results:" in output
        assert "✅ disk (1.23s): ok" in output
        assert "Severity" not in output

    def test_ascii_glyphs(self):
        results = [
            DiagnosticResult.success("a", "ok"),
            DiagnosticResult.warning("b", "hmm"),
            DiagnosticResult.error("c", "bad", severity=Severity.LOW),
            DiagnosticResult.skipped("d", "n/a"),
        ]
        output = frame(results=results, emoji=ASCII)
        assert "[OK] a (0.00s): ok" in output
        assert "[!] b (0.00s): hmm" in output
        assert "[X] c (0.00s): bad" in output
        assert "[>>] d (0.00s): n/a" in output

    def test_warning_severity_line(self):
        result = DiagnosticResult.warning("sg", "port closed", 0.5, Severity.MEDIUM).with_auto_fixable()
        output = frame(results=[result])
        assert "Severity: Medium (Auto-fixable)" in output

    def test_error_severity_without_fix(self):
        output = frame(results=[DiagnosticResult.error("dns", "timeout", severity=Severity.LOW)])
        assert "Severity: Low" in output
        assert "Auto-fixable" not in output

    def test_order_preserved(self):
        results = [DiagnosticResult.success(name, "ok") for name in ("first", "second", "third")]
        output = frame(results=results)
        assert output.index("first") < output.index("second") < output.index("third")

    def test_no_results_section_when_empty(self):
        assert "Diagnostic Results:" not in frame()


class TestCriticalIssues:
    """Critical issues block."""

    def test_hidden_when_empty(self):
        assert "CRITICAL ISSUES DETECTED" not in frame()

    def test_numbered_issues(self):
        issues = [
            DiagnosticResult.error("disk", "full", severity=Severity.CRITICAL),
            DiagnosticResult.error("iam", "denied", severity=Severity.HIGH).with_auto_fixable(),
        ]
        output = frame(results=issues, critical=issues)
        assert "CRITICAL ISSUES DETECTED" in output
        assert "1. disk: full" in output
        assert "2. iam: denied" in output
        assert "→ Auto-fix available" in output
        assert "[Y] Continue | [N] Abort" in output

    def test_no_prompt_when_auto_confirm(self):
        issues = [DiagnosticResult.error("disk", "full", severity=Severity.CRITICAL)]
        output = frame(critical=issues, config=FeedbackConfig(auto_confirm_critical=True))
        assert "1. disk: full" in output
        assert "[Y] Continue" not in output


class TestStatusLine:
    """Status text and control hints."""

    @pytest.mark.parametrize("status,hint", [
        (FeedbackStatus.RUNNING, "[Ctrl+C] Interrupt | [P] Pause | [Q] Quit"),
        (FeedbackStatus.PAUSED, "[R] Resume | [Ctrl+C] Interrupt | [Q] Quit"),
        (FeedbackStatus.INTERRUPTED, "[R] Resume | [Q] Quit"),
        (FeedbackStatus.COMPLETED, "Press any key to continue..."),
        (FeedbackStatus.FAILED, "Press any key to continue..."),
    ])
    def test_hints(self, status, hint):
        output = frame(status=status)
        assert f"Status: {status.name}" in output
        assert hint in output

    def test_status_line_is_last(self):
        output = frame(results=[DiagnosticResult.success("disk", "ok")])
        assert output.rindex("Status: RUNNING") > output.rindex("disk")


class TestColors:
    """Color is decoration only."""

    def sample(self, config, color):
        issues = [DiagnosticResult.error("disk", "full", severity=Severity.CRITICAL)]
        return frame(
            progress=DiagnosticProgress("disk", 1, 2),
            results=issues + [DiagnosticResult.warning("sg", "open")],
            critical=issues,
            config=config,
            color=color,
        )

    def test_colors_emitted_when_enabled(self):
        assert "\x1b[" in self.sample(FeedbackConfig(enable_colors=True), color=True)

    def test_no_colors_when_disabled(self):
        assert "\x1b[" not in self.sample(FeedbackConfig(enable_colors=False), color=True)

    def test_text_identical_with_and_without_colors(self):
        with_colors = self.sample(FeedbackConfig(enable_colors=True), color=False)
        without = self.sample(FeedbackConfig(enable_colors=False), color=False)
        assert with_colors == without
