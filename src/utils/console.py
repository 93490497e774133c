"""
Console Manager

Provides a singleton Rich Console instance for consistent output formatting
across the application. The live feedback display and the CLI summary share
it, so color settings apply to both.

Usage:
    from utils.console import get_console
    c = get_console(no_color=True)
    c.print("[green]Success![/green]")
"""

from rich.console import Console
from rich.theme import Theme
from typing import Optional
import threading

# Thread-safe singleton
_console: Optional[Console] = None
_lock = threading.Lock()

FEEDBACK_THEME = Theme({
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "red bold",
    "heading": "bold magenta",
    "highlight": "bold cyan",
    "dim": "dim white",
    "critical": "bold red",
})


def get_console(force_terminal: bool = None,
                no_color: bool = None,
                width: int = None) -> Console:
    """
    Get the singleton Console instance.

    Arguments only take effect on the first call (or after reset_console()).

    Args:
        force_terminal: Force terminal mode (for testing)
        no_color: Disable color output
        width: Override console width

    Returns:
        The shared Console instance
    """
    global _console

    if _console is None:
        with _lock:
            # Double-check locking
            if _console is None:
                _console = Console(
                    theme=FEEDBACK_THEME,
                    force_terminal=force_terminal,
                    no_color=no_color,
                    width=width,
                    highlight=False,
                    markup=True,
                )

    return _console


def reset_console():
    """
    Reset the console singleton (useful for testing).
    """
    global _console
    with _lock:
        _console = None


# Convenience functions
def print_success(message: str):
    """Print a success message"""
    get_console().print(f"[success]✓ {message}[/success]")


def print_error(message: str):
    """Print an error message"""
    get_console().print(f"[error]✗ {message}[/error]")


def print_warning(message: str):
    """Print a warning message"""
    get_console().print(f"[warning]⚠ {message}[/warning]")


def print_info(message: str):
    """Print an info message"""
    get_console().print(f"[info]ℹ {message}[/info]")


def print_heading(message: str):
    """Print a heading"""
    c = get_console()
    c.print(f"\n[heading]{message}[/heading]")
    c.print("[dim]" + "─" * len(message) + "[/dim]")
