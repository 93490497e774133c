"""Environment configuration loader and validator for the feedback display"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import dotenv_values
from rich.table import Table

from utils.console import get_console

logger = logging.getLogger(__name__)

# Default configuration values
DEFAULTS = {
    # Display
    'FEEDBACK_SHOW_PROGRESS_BAR': 'true',
    'FEEDBACK_SHOW_DETAILED_STATUS': 'true',
    'FEEDBACK_ENABLE_COLORS': 'true',
    'FEEDBACK_AUTO_CONFIRM_CRITICAL': 'false',
    'FEEDBACK_REFRESH_INTERVAL_MS': '100',
    'FEEDBACK_TITLE': 'SSM Connection Diagnostics',

    # Logging
    'LOG_LEVEL': 'INFO',
    'FEEDBACK_LOG_FILE': '',

    # UI settings
    'DISABLE_EMOJI': 'false',
}

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def find_env_file() -> Optional[Path]:
    """Find the .env file in standard locations"""
    search_paths = [
        Path.cwd() / '.env',
        Path.home() / '.config' / 'diagfeedback' / '.env',
    ]

    for path in search_paths:
        if path.is_file():
            return path

    return None


def load_env_file(env_path: Optional[Path] = None, override: bool = False) -> Dict[str, str]:
    """Load variables from a .env file into the environment

    Args:
        env_path: Optional path to .env file. If None, auto-discovers.
        override: Replace variables that are already set

    Returns:
        Dictionary of variables applied to the environment
    """
    if env_path is None:
        env_path = find_env_file()

    if env_path is None or not Path(env_path).is_file():
        return {}

    loaded = {}
    for key, value in dotenv_values(env_path).items():
        if value is None:
            continue
        if override or key not in os.environ:
            os.environ[key] = value
            loaded[key] = value

    logger.debug(f"Loaded {len(loaded)} settings from {env_path}")
    return loaded


def get_config(key: str, default: Optional[str] = None) -> str:
    """Get configuration value from environment or defaults

    Priority:
    1. Environment variable
    2. Provided default
    3. Built-in default
    """
    value = os.environ.get(key)
    if value is not None:
        return value
    if default is not None:
        return default
    return DEFAULTS.get(key, '')


def get_config_bool(key: str, default: Optional[bool] = None) -> bool:
    """Get boolean configuration value"""
    value = get_config(key, None if default is None else str(default).lower())
    return value.strip().lower() in ('true', 'yes', '1', 'on')


def get_config_int(key: str, default: Optional[int] = None) -> int:
    """Get integer configuration value, falling back on parse errors"""
    fallback = default if default is not None else int(DEFAULTS.get(key, '0') or 0)
    try:
        return int(get_config(key, str(fallback)))
    except ValueError:
        logger.warning(f"Invalid integer for {key}: {os.environ.get(key)!r}, using {fallback}")
        return fallback


def load_feedback_config():
    """Build a FeedbackConfig from the environment

    NO_COLOR (https://no-color.org) turns colors off regardless of
    FEEDBACK_ENABLE_COLORS.
    """
    from core.feedback.models import FeedbackConfig

    enable_colors = get_config_bool('FEEDBACK_ENABLE_COLORS')
    if os.environ.get('NO_COLOR'):
        enable_colors = False

    refresh = get_config_int('FEEDBACK_REFRESH_INTERVAL_MS')
    if refresh < 0:
        logger.warning(f"Negative FEEDBACK_REFRESH_INTERVAL_MS ({refresh}), using default")
        refresh = int(DEFAULTS['FEEDBACK_REFRESH_INTERVAL_MS'])

    return FeedbackConfig(
        show_progress_bar=get_config_bool('FEEDBACK_SHOW_PROGRESS_BAR'),
        show_detailed_status=get_config_bool('FEEDBACK_SHOW_DETAILED_STATUS'),
        enable_colors=enable_colors,
        auto_confirm_critical=get_config_bool('FEEDBACK_AUTO_CONFIRM_CRITICAL'),
        refresh_interval_ms=refresh,
        title=get_config('FEEDBACK_TITLE'),
    )


def validate_config() -> Dict[str, Any]:
    """Validate current configuration and return status

    Returns:
        Dictionary with validation results
    """
    results = {
        'valid': True,
        'warnings': [],
        'errors': [],
        'config': {}
    }

    log_level = get_config('LOG_LEVEL').upper()
    if log_level not in VALID_LOG_LEVELS:
        results['errors'].append(f"Invalid LOG_LEVEL: {log_level}")
        results['valid'] = False
    results['config']['log_level'] = log_level

    raw_refresh = get_config('FEEDBACK_REFRESH_INTERVAL_MS')
    try:
        refresh = int(raw_refresh)
        if refresh < 0:
            results['errors'].append(f"FEEDBACK_REFRESH_INTERVAL_MS must be >= 0: {refresh}")
            results['valid'] = False
        elif refresh < 20:
            results['warnings'].append(f"Very short refresh interval: {refresh}ms")
    except ValueError:
        results['errors'].append(f"Invalid FEEDBACK_REFRESH_INTERVAL_MS: {raw_refresh}")
        results['valid'] = False
    results['config']['refresh_interval_ms'] = raw_refresh

    for key in ('FEEDBACK_SHOW_PROGRESS_BAR', 'FEEDBACK_SHOW_DETAILED_STATUS',
                'FEEDBACK_ENABLE_COLORS', 'FEEDBACK_AUTO_CONFIRM_CRITICAL'):
        results['config'][key.lower()] = get_config_bool(key)

    return results


def show_config_summary():
    """Display current configuration summary"""
    console = get_console()
    table = Table(title="Current Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source", style="yellow")

    env_file = find_env_file()

    for key in sorted(DEFAULTS.keys()):
        env_value = os.environ.get(key)
        if env_value is not None:
            table.add_row(key, env_value, "env")
        else:
            table.add_row(key, DEFAULTS[key], "default")

    console.print(table)

    if env_file:
        console.print(f"\n[dim]Loaded from: {env_file}[/dim]")
    else:
        console.print("\n[dim]No .env file found, using defaults[/dim]")


def initialize_config(env_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the .env file and validate the result

    Call this at application startup
    """
    loaded = load_env_file(env_path)
    if loaded:
        logger.info(f"Loaded {len(loaded)} settings from .env")

    return validate_config()
