"""Version information for the diagnostic feedback display"""

__version__ = "1.0.0"
__version_info__ = (1, 0, 0)
__release_date__ = "2026-10-19"

# Version history
VERSION_HISTORY = [
    {
        "version": "1.0.0",
        "date": "2026-10-19",
        "changes": [
            "Real-time feedback display with progress bar, results and critical issues",
            "Keyboard controls: pause, resume, interrupt, quit, confirm/abort",
            "Optional auto-confirmation of critical issues",
            "ASCII fallbacks for terminals without emoji support",
            "Simulated diagnostic session with JSON summary output",
        ]
    },
]


def get_version():
    """Get current version string"""
    return __version__


def get_version_info():
    """Get version as tuple"""
    return __version_info__
