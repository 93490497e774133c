"""
Terminal access for the feedback display (POSIX).

Terminal owns the three things the display loop needs from the TTY:
raw keyboard input, bounded key polling, and full-screen repaints through a
Rich console.
"""

import codecs
import logging
import os
import select
import sys
import termios
import time
import tty
from collections import deque
from contextlib import contextmanager
from typing import Optional

from rich.console import Console, RenderableType

from .errors import TerminalError
from .keys import KeyEvent, decode_keys

logger = logging.getLogger(__name__)

RESET_COLORS = "\x1b[0m"


class Terminal:
    """Keyboard and screen access for one display session."""

    def __init__(self, console: Optional[Console] = None, stdin=None):
        if console is None:
            from utils.console import get_console
            console = get_console()
        self.console = console
        self._stdin = stdin if stdin is not None else sys.stdin
        self._raw = False
        # Keys decoded from one read but not yet handed out
        self._pending = deque()
        self._decoder = codecs.getincrementaldecoder('utf-8')(errors='ignore')

    @property
    def interactive(self) -> bool:
        """True if keyboard input can be read from a TTY."""
        try:
            return self._stdin.isatty()
        except (AttributeError, ValueError, OSError):
            return False

    @contextmanager
    def raw_mode(self):
        """
        Put stdin into raw keyboard mode for the duration of the block.

        Key presses are delivered unbuffered and without echo, and Ctrl+C
        arrives as a key instead of SIGINT. Terminal attributes, cursor
        visibility and colors are restored on every exit path.
        """
        if not self.interactive:
            logger.debug("stdin is not a TTY, keyboard controls disabled")
            try:
                yield self
            finally:
                self._restore_screen()
            return

        fd = self._stdin.fileno()
        try:
            saved = termios.tcgetattr(fd)
        except (termios.error, OSError) as e:
            raise TerminalError(f"Failed to enter raw mode: {e}") from e

        try:
            try:
                tty.setcbreak(fd)
                attrs = termios.tcgetattr(fd)
                attrs[3] &= ~termios.ISIG
                termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
            except (termios.error, OSError) as e:
                raise TerminalError(f"Failed to enter raw mode: {e}") from e

            self._raw = True
            try:
                self.console.show_cursor(False)
            except OSError as e:
                raise TerminalError(f"Failed to hide cursor: {e}") from e
            yield self
        finally:
            self._raw = False
            self._pending.clear()
            self._decoder.reset()
            try:
                termios.tcsetattr(fd, termios.TCSADRAIN, saved)
            except (termios.error, OSError) as e:
                logger.error(f"Failed to restore terminal mode: {e}")
            self._restore_screen()

    def _restore_screen(self):
        try:
            self.console.show_cursor(True)
            if self.console.is_terminal:
                self.console.file.write(RESET_COLORS)
            self.console.file.flush()
        except OSError as e:
            logger.error(f"Failed to restore cursor and colors: {e}")

    def read_key(self, timeout: float) -> Optional[KeyEvent]:
        """
        Wait up to timeout seconds for a key press.

        One read may return several keys (typed during a slow redraw, or
        pasted). They are queued and handed out one per call, in order.

        Returns:
            The next key, or None if nothing usable arrived
        """
        if self._pending:
            return self._pending.popleft()
        if not self._raw:
            time.sleep(timeout)
            return None

        fd = self._stdin.fileno()
        try:
            ready, _, _ = select.select([fd], [], [], timeout)
            if not ready:
                return None
            data = os.read(fd, 32)
        except OSError as e:
            raise TerminalError(f"Failed to read keyboard input: {e}") from e
        self._pending.extend(decode_keys(data, self._decoder))
        return self._pending.popleft() if self._pending else None

    def draw(self, renderable: RenderableType):
        """Clear the screen, home the cursor and print a full frame."""
        try:
            self.console.clear()
            self.console.print(renderable)
            self.console.file.flush()
        except OSError as e:
            raise TerminalError(f"Failed to write to terminal: {e}") from e
