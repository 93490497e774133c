"""
Keyboard control for the feedback display.

Maps one key press to at most one state change:

    Ctrl+C  any status            -> INTERRUPTED
    p       RUNNING               -> PAUSED
    r       PAUSED / INTERRUPTED  -> RUNNING
    q       any                   -> stop the display loop
    y       critical issues       -> clear critical issues
    n       critical issues       -> FAILED, stop the display loop

Only unmodified lower-case letters count: Shift+Q or Q under Caps Lock does
not quit. Everything else is ignored.
"""

import logging
from dataclasses import dataclass
from typing import List

from .models import FeedbackStatus
from .state import FeedbackState

logger = logging.getLogger(__name__)

ESC = '\x1b'


@dataclass(frozen=True)
class KeyEvent:
    """A single key press, exactly as typed (no case folding)."""
    char: str
    ctrl: bool = False


def _skip_escape(text: str, start: int) -> int:
    """Index just past the escape sequence beginning at text[start]."""
    pos = start + 1
    if pos >= len(text):
        return pos
    if text[pos] not in '[O':
        # Alt+key
        return pos + 1
    pos += 1
    while pos < len(text) and not '\x40' <= text[pos] <= '\x7e':
        pos += 1
    return pos + 1


def decode_keys(data: bytes, decoder=None) -> List[KeyEvent]:
    """
    Decode every key press in a chunk read from a terminal in raw mode.

    Args:
        data: Raw bytes from one read
        decoder: Optional incremental UTF-8 decoder carried across reads, so a
            multi-byte character split between two reads is not lost

    Returns:
        Key events in the order they were typed. Escape sequences (arrow keys,
        Alt chords) and undecodable bytes are skipped.
    """
    if decoder is not None:
        text = decoder.decode(data)
    else:
        text = data.decode('utf-8', errors='ignore')

    events: List[KeyEvent] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char == ESC:
            pos = _skip_escape(text, pos)
            continue
        code = ord(char)
        if 1 <= code <= 26:
            events.append(KeyEvent(chr(code + 96), ctrl=True))
        elif char.isprintable():
            events.append(KeyEvent(char))
        pos += 1
    return events


def handle_key(event: KeyEvent, state: FeedbackState) -> bool:
    """
    Apply a key press to the shared state.

    Returns:
        True if the display loop should terminate
    """
    if event.ctrl:
        if event.char == 'c':
            state.set_status(FeedbackStatus.INTERRUPTED)
            logger.info("Diagnostic interrupted by user")
        return False

    key = event.char
    if key == 'p':
        if state.transition_status([FeedbackStatus.RUNNING], FeedbackStatus.PAUSED):
            logger.info("Diagnostic paused by user")
    elif key == 'r':
        if state.transition_status(
                [FeedbackStatus.PAUSED, FeedbackStatus.INTERRUPTED], FeedbackStatus.RUNNING):
            logger.info("Diagnostic resumed by user")
    elif key == 'q':
        logger.info("Diagnostic quit by user")
        return True
    elif key == 'y':
        if state.clear_critical_issues():
            logger.info("User confirmed to continue despite critical issues")
    elif key == 'n':
        if state.has_critical_issues():
            logger.info("User chose to abort due to critical issues")
            state.set_status(FeedbackStatus.FAILED)
            return True

    return False
