"""
Diagnostic Feedback Core

This module contains:
- The real-time feedback coordinator (core.feedback)
- Simulated diagnostic producers for demos and exercising the display
"""

__version__ = '1.0.0'
