"""
Simulated diagnostic producers.

Stands in for real diagnostic workers when demonstrating or exercising the
feedback display: a pool of threads works through a list of diagnostic items,
reporting progress and randomised results through a FeedbackReporter.
Workers hold while the session is paused or interrupted and give up once
it has failed or been stopped.
"""

import logging
import queue
import random
import threading
import time
from typing import Callable, List, Optional, Sequence, Tuple

from utils.threads import ThreadManager

from .callbacks import FeedbackReporter
from .models import (
    DiagnosticProgress,
    DiagnosticResult,
    FeedbackStatus,
    Severity,
)

logger = logging.getLogger(__name__)

DEFAULT_ITEMS = (
    "instance_state",
    "ssm_agent_status",
    "iam_instance_profile",
    "iam_permissions",
    "security_groups",
    "network_acls",
    "vpc_endpoints",
    "dns_resolution",
    "local_port_availability",
    "aws_credentials",
    "aws_region_config",
    "session_manager_plugin",
)

HOLD_STATUSES = (FeedbackStatus.PAUSED, FeedbackStatus.INTERRUPTED)
HOLD_POLL_INTERVAL = 0.05

# (weight, factory) pairs used to pick an outcome per item
OUTCOMES: Tuple[Tuple[int, Callable[[random.Random, str, float], DiagnosticResult]], ...] = (
    (60, lambda rng, name, d: DiagnosticResult.success(name, "Check passed", d)),
    (15, lambda rng, name, d: DiagnosticResult.warning(
        name, "Configuration looks unusual", d,
        rng.choice([Severity.LOW, Severity.MEDIUM])).with_auto_fixable(rng.random() < 0.5)),
    (15, lambda rng, name, d: DiagnosticResult.error(
        name, "Check failed", d,
        rng.choice([Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL])
    ).with_auto_fixable(rng.random() < 0.3)),
    (10, lambda rng, name, d: DiagnosticResult.skipped(name, "Not applicable", d)),
)


class DiagnosticSimulator:
    """Pool of fake diagnostic workers reporting into a FeedbackReporter."""

    def __init__(self, reporter: FeedbackReporter,
                 items: Sequence[str] = DEFAULT_ITEMS,
                 workers: int = 2,
                 status_source: Optional[Callable[[], FeedbackStatus]] = None,
                 item_delay: Tuple[float, float] = (0.2, 0.8),
                 seed: Optional[int] = None):
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.reporter = reporter
        self.items = list(items)
        self.workers = workers
        self.status_source = status_source
        self.item_delay = item_delay

        self._rng = random.Random(seed)
        self._rng_lock = threading.Lock()
        self._completed = 0
        self._completed_lock = threading.Lock()
        self._results: List[DiagnosticResult] = []
        self._start = 0.0

    def run(self, stop_event: Optional[threading.Event] = None) -> List[DiagnosticResult]:
        """Run every item across the worker pool and return the results produced."""
        if stop_event is None:
            stop_event = threading.Event()

        work: "queue.Queue[str]" = queue.Queue()
        for item in self.items:
            work.put(item)

        self._start = time.monotonic()
        total = len(self.items)
        logger.info(f"Running {total} simulated diagnostics on {self.workers} workers")

        threads = ThreadManager()
        for index in range(self.workers):
            threads.start_thread(
                f"diagnostic-worker-{index}", self._worker,
                args=(work, total, stop_event), stop_event=stop_event, daemon=True,
            )
        threads.join_all()

        with self._completed_lock:
            return list(self._results)

    def _worker(self, work: "queue.Queue[str]", total: int, stop_event: threading.Event):
        while not stop_event.is_set():
            try:
                item = work.get_nowait()
            except queue.Empty:
                return

            if not self._hold(stop_event):
                return

            with self._completed_lock:
                completed = self._completed
            self.reporter.report_progress(DiagnosticProgress.create(
                item, completed, total, time.monotonic() - self._start))

            started = time.monotonic()
            with self._rng_lock:
                delay = self._rng.uniform(*self.item_delay)
            if stop_event.wait(delay):
                return
            result = self._make_result(item, time.monotonic() - started)

            with self._completed_lock:
                self._completed += 1
                completed = self._completed
                self._results.append(result)
            self.reporter.report_result(result)
            self.reporter.report_progress(DiagnosticProgress.create(
                item, completed, total, time.monotonic() - self._start))

    def _hold(self, stop_event: threading.Event) -> bool:
        """Block while paused. Returns False if the session should end."""
        if self.status_source is None:
            return True
        while True:
            status = self.status_source()
            if status == FeedbackStatus.FAILED:
                return False
            if status not in HOLD_STATUSES:
                return True
            if stop_event.wait(HOLD_POLL_INTERVAL):
                return False

    def _make_result(self, item: str, duration: float) -> DiagnosticResult:
        with self._rng_lock:
            weights = [weight for weight, _ in OUTCOMES]
            _, factory = self._rng.choices(OUTCOMES, weights=weights)[0]
            return factory(self._rng, item, duration)
