"""
Feedback Data Models

Value types shared by diagnostic producers and the feedback coordinator:
- Progress and result records are frozen dataclasses, safe to hand between threads
- JSON serialization built-in for CLI/JSON output
- FeedbackConfig carries the display options for one session
"""

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Any, Dict, Optional, Tuple


# === Status Enums ===

class DiagnosticStatus(Enum):
    """Outcome of a single diagnostic item."""
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    SKIPPED = "skipped"


class Severity(IntEnum):
    """Severity of a diagnostic finding. Higher value = more urgent."""
    INFO = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        """Human-readable name ("Critical", "High", ...)."""
        return self.name.title()


class FeedbackStatus(Enum):
    """State of the feedback coordinator."""
    RUNNING = "running"
    PAUSED = "paused"
    INTERRUPTED = "interrupted"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True once the display loop should wind down."""
        return self in (FeedbackStatus.COMPLETED, FeedbackStatus.FAILED)

    @property
    def display_text(self) -> str:
        return self.name


# === Core Value Types ===

@dataclass(frozen=True)
class DiagnosticProgress:
    """
    Progress of a running diagnostic sequence.

    Producers overwrite the current progress wholesale; no history is kept.

    Attributes:
        current_item: Name of the item being checked right now
        completed: Number of items finished
        total: Number of items planned
        elapsed: Seconds since the sequence started
        estimated_remaining: Seconds left, if an estimate is available
    """
    current_item: str
    completed: int
    total: int
    elapsed: float = 0.0
    estimated_remaining: Optional[float] = None

    @classmethod
    def create(cls, current_item: str, completed: int, total: int,
               elapsed: float) -> 'DiagnosticProgress':
        """Build a progress record, estimating time left from the average so far."""
        estimated_remaining = None
        if completed > 0:
            per_item = elapsed / completed
            estimated_remaining = per_item * max(total - completed, 0)
        return cls(
            current_item=current_item,
            completed=completed,
            total=total,
            elapsed=elapsed,
            estimated_remaining=estimated_remaining,
        )

    @property
    def progress_percentage(self) -> float:
        """Completion in percent, clamped to [0, 100]. An empty plan is 0%."""
        if self.total <= 0:
            return 0.0
        percentage = self.completed / self.total * 100.0
        return min(max(percentage, 0.0), 100.0)

    def to_dict(self) -> dict:
        """Serialize for JSON output."""
        return {
            "current_item": self.current_item,
            "completed": self.completed,
            "total": self.total,
            "elapsed": self.elapsed,
            "estimated_remaining": self.estimated_remaining,
            "progress_percentage": self.progress_percentage,
        }


@dataclass(frozen=True)
class DiagnosticResult:
    """
    Outcome of one completed diagnostic item.

    Attributes:
        item_name: Diagnostic item identifier (e.g., "ssm_agent")
        message: Short description of the outcome
        status: SUCCESS, WARNING, ERROR or SKIPPED
        severity: How urgent the finding is
        duration: Seconds the item took
        auto_fixable: Whether an automatic fix exists
        details: Additional structured data
    """
    item_name: str
    message: str
    status: DiagnosticStatus
    severity: Severity = Severity.INFO
    duration: float = 0.0
    auto_fixable: bool = False
    details: Optional[Dict[str, Any]] = field(default=None, compare=False)

    @classmethod
    def success(cls, item_name: str, message: str, duration: float = 0.0) -> 'DiagnosticResult':
        return cls(item_name, message, DiagnosticStatus.SUCCESS, Severity.INFO, duration)

    @classmethod
    def warning(cls, item_name: str, message: str, duration: float = 0.0,
                severity: Severity = Severity.MEDIUM) -> 'DiagnosticResult':
        return cls(item_name, message, DiagnosticStatus.WARNING, severity, duration)

    @classmethod
    def error(cls, item_name: str, message: str, duration: float = 0.0,
              severity: Severity = Severity.HIGH) -> 'DiagnosticResult':
        return cls(item_name, message, DiagnosticStatus.ERROR, severity, duration)

    @classmethod
    def skipped(cls, item_name: str, message: str, duration: float = 0.0) -> 'DiagnosticResult':
        return cls(item_name, message, DiagnosticStatus.SKIPPED, Severity.INFO, duration)

    def with_auto_fixable(self, auto_fixable: bool = True) -> 'DiagnosticResult':
        return replace(self, auto_fixable=auto_fixable)

    def with_details(self, details: Dict[str, Any]) -> 'DiagnosticResult':
        return replace(self, details=details)

    def is_critical(self) -> bool:
        """Return True if this result must be confirmed by the user."""
        return (self.status == DiagnosticStatus.ERROR
                and self.severity in (Severity.HIGH, Severity.CRITICAL))

    def to_dict(self) -> dict:
        """Serialize for JSON output."""
        return {
            "item_name": self.item_name,
            "message": self.message,
            "status": self.status.value,
            "severity": self.severity.name.lower(),
            "duration": self.duration,
            "auto_fixable": self.auto_fixable,
            "details": self.details,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DiagnosticResult':
        """Deserialize from dict."""
        return cls(
            item_name=data['item_name'],
            message=data['message'],
            status=DiagnosticStatus(data['status']),
            severity=Severity[data.get('severity', 'info').upper()],
            duration=float(data.get('duration', 0.0)),
            auto_fixable=bool(data.get('auto_fixable', False)),
            details=data.get('details'),
        )


@dataclass(frozen=True)
class FeedbackSnapshot:
    """Copied, point-in-time view of the coordinator state used for one frame."""
    status: FeedbackStatus
    progress: Optional[DiagnosticProgress]
    results: Tuple[DiagnosticResult, ...] = ()
    critical_issues: Tuple[DiagnosticResult, ...] = ()


@dataclass(frozen=True)
class ResultSummary:
    """Counts over the completed results of a session."""
    success: int = 0
    warning: int = 0
    error: int = 0
    skipped: int = 0
    critical: int = 0
    total: int = 0

    @classmethod
    def from_results(cls, results) -> 'ResultSummary':
        counts = {status: 0 for status in DiagnosticStatus}
        critical = 0
        total = 0
        for result in results:
            counts[result.status] += 1
            total += 1
            if result.status == DiagnosticStatus.ERROR and result.severity == Severity.CRITICAL:
                critical += 1
        return cls(
            success=counts[DiagnosticStatus.SUCCESS],
            warning=counts[DiagnosticStatus.WARNING],
            error=counts[DiagnosticStatus.ERROR],
            skipped=counts[DiagnosticStatus.SKIPPED],
            critical=critical,
            total=total,
        )

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "warning": self.warning,
            "error": self.error,
            "skipped": self.skipped,
            "critical": self.critical,
            "total": self.total,
        }


# === Configuration ===

@dataclass
class FeedbackConfig:
    """
    Display options for a feedback session.

    Attributes:
        show_progress_bar: Render the progress bar
        show_detailed_status: Render the current item / ETA line
        enable_colors: Apply terminal colors (text is identical without them)
        auto_confirm_critical: Confirm critical issues without waiting for [Y]
        refresh_interval_ms: Minimum milliseconds between full redraws
        title: Header banner text
    """
    show_progress_bar: bool = True
    show_detailed_status: bool = True
    enable_colors: bool = True
    auto_confirm_critical: bool = False
    refresh_interval_ms: int = 100
    title: str = "SSM Connection Diagnostics"

    def __post_init__(self):
        if self.refresh_interval_ms < 0:
            raise ValueError(
                f"refresh_interval_ms must be >= 0, got {self.refresh_interval_ms}"
            )

    @property
    def refresh_interval(self) -> float:
        """Refresh interval in seconds."""
        return self.refresh_interval_ms / 1000.0
