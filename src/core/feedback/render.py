"""
Frame rendering for the live feedback display.

render_frame() turns a FeedbackSnapshot into a Rich renderable. It has no side
effects; the terminal layer clears the screen and prints the result, so every
refresh is a full repaint.

Colors are decoration only: every status also carries a glyph and a text
label, and with enable_colors off the text is unchanged.
"""

from typing import List, Optional

from rich.box import DOUBLE
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from utils.emoji import EmojiHelper, get_helper

from .models import (
    DiagnosticProgress,
    DiagnosticResult,
    DiagnosticStatus,
    FeedbackConfig,
    FeedbackSnapshot,
    FeedbackStatus,
    Severity,
)

BAR_WIDTH = 50
RULE = "─" * 77
DOUBLE_RULE = "═" * 77

STATUS_GLYPHS = {
    DiagnosticStatus.SUCCESS: ('✅', "green"),
    DiagnosticStatus.WARNING: ('⚠️', "yellow"),
    DiagnosticStatus.ERROR: ('❌', "red"),
    DiagnosticStatus.SKIPPED: ('⏭️', "blue"),
}

SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.HIGH: "magenta",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
    Severity.INFO: "white",
}

STATUS_COLORS = {
    FeedbackStatus.RUNNING: "green",
    FeedbackStatus.PAUSED: "yellow",
    FeedbackStatus.INTERRUPTED: "red",
    FeedbackStatus.COMPLETED: "blue",
    FeedbackStatus.FAILED: "red",
}

CONTROL_HINTS = {
    FeedbackStatus.RUNNING: "Controls: [Ctrl+C] Interrupt | [P] Pause | [Q] Quit",
    FeedbackStatus.PAUSED: "Controls: [R] Resume | [Ctrl+C] Interrupt | [Q] Quit",
    FeedbackStatus.INTERRUPTED: "Controls: [R] Resume | [Q] Quit",
}
DISMISS_HINT = "Press any key to continue..."
CONFIRM_HINT = "Continue despite critical issues? [Y] Continue | [N] Abort"


def _style(config: FeedbackConfig, style: str) -> Optional[str]:
    """Return style only when colors are enabled."""
    return style if config.enable_colors else None


def render_header(config: FeedbackConfig) -> RenderableType:
    """Double-lined banner with the session title."""
    return Panel(
        Text(config.title, justify="center", style=_style(config, "bold cyan")),
        box=DOUBLE,
        border_style=_style(config, "cyan") or "none",
        width=80,
    )


def render_progress_bar(progress: DiagnosticProgress, config: FeedbackConfig,
                        emoji: EmojiHelper) -> Text:
    percentage = progress.progress_percentage
    filled = int(percentage / 100.0 * BAR_WIDTH)
    bar = emoji.get('█') * filled + emoji.get('░') * (BAR_WIDTH - filled)
    return Text(f"Progress: [{bar}] {percentage:.1f}%", style=_style(config, "green"))


def render_detailed_status(progress: DiagnosticProgress) -> Text:
    text = Text(f"Current: {progress.current_item} ({progress.completed}/{progress.total})")
    if progress.estimated_remaining is not None:
        text.append(f"\nEstimated remaining: {progress.estimated_remaining:.1f}s")
    return text


def render_progress(progress: DiagnosticProgress, config: FeedbackConfig,
                    emoji: EmojiHelper) -> List[RenderableType]:
    parts: List[RenderableType] = []
    if config.show_progress_bar:
        parts.append(render_progress_bar(progress, config, emoji))
    if config.show_detailed_status:
        parts.append(render_detailed_status(progress))
        parts.append(Text(""))
    return parts


def render_result(result: DiagnosticResult, config: FeedbackConfig,
                  emoji: EmojiHelper) -> Text:
    """One result line, plus a severity line for warnings and errors."""
    glyph, color = STATUS_GLYPHS[result.status]
    text = Text(
        f"{emoji.get(glyph)} {result.item_name} ({result.duration:.2f}s): {result.message}",
        style=_style(config, color),
    )
    if result.status in (DiagnosticStatus.WARNING, DiagnosticStatus.ERROR):
        severity_line = f"\n   Severity: {result.severity.label}"
        if result.auto_fixable:
            severity_line += " (Auto-fixable)"
        text.append(severity_line, style=_style(config, SEVERITY_COLORS[result.severity]))
    return text


def render_results(results, config: FeedbackConfig,
                   emoji: EmojiHelper) -> List[RenderableType]:
    if not results:
        return []
    parts: List[RenderableType] = [Text("Diagnostic Results:"), Text(RULE)]
    parts.extend(render_result(result, config, emoji) for result in results)
    parts.append(Text(""))
    return parts


def render_critical_issues(issues, config: FeedbackConfig,
                           emoji: EmojiHelper) -> List[RenderableType]:
    if not issues:
        return []
    banner = emoji.get('⚠️')
    parts: List[RenderableType] = [
        Text(f"{banner}  CRITICAL ISSUES DETECTED {banner}\n{DOUBLE_RULE}",
             style=_style(config, "bold red")),
    ]
    for index, issue in enumerate(issues, 1):
        parts.append(Text(f"{index}. {issue.item_name}: {issue.message}",
                          style=_style(config, "yellow")))
        if issue.auto_fixable:
            parts.append(Text(f"   {emoji.get('→')} Auto-fix available",
                              style=_style(config, "green")))
    if not config.auto_confirm_critical:
        parts.append(Text(CONFIRM_HINT, style=_style(config, "bold")))
    parts.append(Text(""))
    return parts


def render_status_line(status: FeedbackStatus, config: FeedbackConfig) -> Text:
    text = Text(f"{RULE}\nStatus: ")
    text.append(status.display_text, style=_style(config, STATUS_COLORS[status]))
    text.append("\n" + CONTROL_HINTS.get(status, DISMISS_HINT))
    return text


def render_frame(snapshot: FeedbackSnapshot, config: FeedbackConfig,
                 emoji: Optional[EmojiHelper] = None) -> Group:
    """Build the full frame for one refresh."""
    if emoji is None:
        emoji = get_helper()

    parts: List[RenderableType] = [render_header(config), Text("")]
    if snapshot.progress is not None:
        parts.extend(render_progress(snapshot.progress, config, emoji))
    parts.extend(render_results(snapshot.results, config, emoji))
    parts.extend(render_critical_issues(snapshot.critical_issues, config, emoji))
    parts.append(render_status_line(snapshot.status, config))
    return Group(*parts)
