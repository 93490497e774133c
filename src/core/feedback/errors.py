"""Exceptions raised by the feedback coordinator."""


class FeedbackError(Exception):
    """Base error for the feedback display."""


class TerminalError(FeedbackError):
    """The terminal could not be configured, read from, or written to."""
