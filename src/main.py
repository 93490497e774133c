#!/usr/bin/env python3
"""
Interactive Diagnostics - Live Feedback Demo

Runs a simulated diagnostic session under the real-time feedback display,
then prints a final summary.

Usage:
    python3 src/main.py [options]

Controls while running:
    Ctrl+C  Interrupt       P  Pause        R  Resume       Q  Quit
    Y       Continue despite critical issues
    N       Abort because of critical issues

Examples:
    python3 src/main.py                     # Default session
    python3 src/main.py --no-color          # Plain text output
    python3 src/main.py --auto-confirm      # Don't stop for critical issues
    python3 src/main.py --json              # JSON summary for scripting
"""

import argparse
import json
import logging
import sys
import threading
from pathlib import Path

# Allow running as a script from a checkout
sys.path.insert(0, str(Path(__file__).parent))

from __version__ import __version__
from core.feedback import (
    FeedbackError,
    FeedbackStatus,
    RealtimeFeedbackManager,
)
from core.feedback.simulator import DEFAULT_ITEMS, DiagnosticSimulator
from utils import emoji as em
from utils.console import get_console, print_error, print_heading, print_success, print_warning
from utils.env_config import (
    get_config,
    initialize_config,
    load_feedback_config,
    show_config_summary,
)
from utils.logging_config import default_log_file, setup_logging
from utils.threads import ThreadManager

logger = logging.getLogger(__name__)

# Seconds each simulated diagnostic takes (min, max)
ITEM_DELAY = (0.2, 0.8)

STATUS_MESSAGES = {
    FeedbackStatus.INTERRUPTED: (
        "Diagnostics were interrupted by user.",
        "Run the command again to restart the session.",
    ),
    FeedbackStatus.FAILED: (
        "Diagnostics failed due to critical issues.",
        "User chose to abort due to critical problems.",
    ),
    FeedbackStatus.PAUSED: (
        "Diagnostics were left paused when the display closed.",
        "Results collected so far are shown above.",
    ),
    FeedbackStatus.RUNNING: (
        "Display closed before diagnostics finished.",
        "Results collected so far are shown above.",
    ),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Interactive diagnostics with real-time feedback",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 src/main.py                  # Default session
  python3 src/main.py --items 20       # Longer session
  python3 src/main.py --no-color       # Plain text output
  python3 src/main.py --show-config    # Show effective configuration
        """
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable colored output')
    parser.add_argument('--refresh-interval', type=int, metavar='MS',
                        help='Minimum milliseconds between redraws (default: 100)')
    parser.add_argument('--auto-confirm', action='store_true',
                        help='Continue past critical issues without asking')
    parser.add_argument('--items', type=int, default=len(DEFAULT_ITEMS),
                        help=f'Number of simulated diagnostics (default: {len(DEFAULT_ITEMS)})')
    parser.add_argument('--workers', '-w', type=int, default=2,
                        help='Concurrent simulated producers (default: 2)')
    parser.add_argument('--seed', type=int,
                        help='Random seed for reproducible sessions')
    parser.add_argument('--json', action='store_true',
                        help='Print the final summary as JSON')
    parser.add_argument('--log-file',
                        help=f'Log file (default: $FEEDBACK_LOG_FILE or {default_log_file()})')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--show-config', action='store_true',
                        help='Show current configuration and exit')
    return parser


def item_names(count: int):
    """Default items, numbered once the list runs out."""
    names = list(DEFAULT_ITEMS[:count])
    for index in range(len(names), count):
        names.append(f"extra_check_{index + 1}")
    return names


def print_summary(manager: RealtimeFeedbackManager):
    """Print the post-run summary."""
    console = get_console()
    summary = manager.summary()

    print_heading("Interactive Diagnostics Completed")
    console.print(f"   {em.get('✅')} Success:  {summary.success}")
    console.print(f"   {em.get('⚠️')} Warnings: {summary.warning}")
    console.print(f"   {em.get('❌')} Errors:   {summary.error}")
    console.print(f"   {em.get('🚨')} Critical: {summary.critical}")
    console.print(f"   Total: {summary.total}")

    issues = manager.get_critical_issues()
    if issues:
        console.print()
        print_warning(f"Critical Issues Detected ({len(issues)}):")
        for index, issue in enumerate(issues, 1):
            console.print(f"   {index}. {issue.item_name}: {issue.message}", markup=False)
            if issue.auto_fixable:
                console.print(f"      {em.get('🔧')} Auto-fix available")

    console.print()
    status = manager.get_status()
    if status == FeedbackStatus.COMPLETED:
        if summary.critical == 0:
            print_success("All diagnostics completed successfully!")
        else:
            print_warning("Diagnostics completed with critical issues.")
            console.print("   Please resolve critical issues before connecting.")
    else:
        headline, detail = STATUS_MESSAGES[status]
        if status == FeedbackStatus.FAILED:
            print_error(headline)
        else:
            print_warning(headline)
        console.print(f"   {detail}")


def summary_json(manager: RealtimeFeedbackManager) -> dict:
    return {
        "status": manager.get_status().value,
        "summary": manager.summary().to_dict(),
        "results": [r.to_dict() for r in manager.get_results()],
        "critical_issues": [r.to_dict() for r in manager.get_critical_issues()],
    }


def run_session(args) -> int:
    """Run producers and the live display. Returns the process exit code."""
    config = load_feedback_config()
    if args.no_color:
        config.enable_colors = False
    if args.auto_confirm:
        config.auto_confirm_critical = True
    if args.refresh_interval is not None:
        if args.refresh_interval < 0:
            print_error("--refresh-interval must be >= 0")
            return 2
        config.refresh_interval_ms = args.refresh_interval

    manager = RealtimeFeedbackManager(config)
    simulator = DiagnosticSimulator(
        manager.reporter,
        items=item_names(args.items),
        workers=args.workers,
        status_source=manager.get_status,
        item_delay=ITEM_DELAY,
        seed=args.seed,
    )

    stop_producers = threading.Event()
    threads = ThreadManager()

    def produce():
        simulator.run(stop_producers)
        if not stop_producers.is_set() and not manager.get_status().is_terminal:
            manager.set_status(FeedbackStatus.COMPLETED)

    threads.start_thread("diagnostics", produce, stop_event=stop_producers, daemon=True)

    exit_code = 0
    try:
        manager.start_feedback_display()
    except FeedbackError as e:
        logger.error(f"Feedback display failed: {e}")
        print_error(f"Feedback display failed: {e}")
        exit_code = 1
    finally:
        threads.shutdown(timeout=2.0)

    if args.json:
        print(json.dumps(summary_json(manager), indent=2))
    else:
        print_summary(manager)

    if exit_code == 0 and manager.get_status() == FeedbackStatus.FAILED:
        exit_code = 1
    return exit_code


def resolve_log_file(args) -> str:
    """--log-file, then FEEDBACK_LOG_FILE, then the per-user default."""
    return args.log_file or get_config('FEEDBACK_LOG_FILE') or str(default_log_file())


def main(argv=None) -> int:
    """CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    validation = initialize_config()
    get_console(no_color=True if args.no_color else None)

    if args.show_config:
        show_config_summary()
        for warning in validation['warnings']:
            print_warning(warning)
        for error in validation['errors']:
            print_error(error)
        return 0 if validation['valid'] else 1

    if args.items < 1 or args.workers < 1:
        print_error("--items and --workers must be at least 1")
        return 2

    level_name = validation['config']['log_level']
    level = logging.DEBUG if args.debug else getattr(logging, level_name, logging.INFO)
    setup_logging(level=level, log_file=resolve_log_file(args), console=False)

    return run_session(args)


if __name__ == "__main__":
    sys.exit(main())
