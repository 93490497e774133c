"""Emoji utility with ASCII fallback support for plain terminals"""

import os


class EmojiHelper:
    """Helper class for emoji display with ASCII fallbacks"""

    def __init__(self, enabled=None):
        if enabled is None:
            enabled = self._detect_emoji_support()
        self.emoji_enabled = enabled

    def _detect_emoji_support(self):
        """Detect if terminal supports emoji"""
        term = os.environ.get('TERM', '').lower()
        lang = (os.environ.get('LC_ALL') or os.environ.get('LANG', '')).lower()

        # Disable emojis if explicitly requested
        if os.environ.get('DISABLE_EMOJI', '').lower() in ('1', 'true', 'yes'):
            return False
        if os.environ.get('ENABLE_EMOJI', '').lower() in ('1', 'true', 'yes'):
            return True

        # Remote sessions often land on consoles without emoji fonts
        if os.environ.get('SSH_CONNECTION') or os.environ.get('SSH_TTY'):
            return False

        # Basic terminals that don't render emojis well
        basic_terms = ['linux', 'dumb', 'unknown', 'cons25', 'vt100', 'vt220']
        if not term or any(t == term for t in basic_terms):
            return False

        return 'utf' in lang

    # Emoji mappings with ASCII fallbacks
    EMOJI_MAP = {
        # Result status
        '✅': '[OK]',
        '⚠️': '[!]',
        '❌': '[X]',
        '⏭️': '[>>]',

        # Critical issues
        '🚨': '[!!]',
        '🔧': '[FIX]',
        '→': '->',

        # Progress bar cells
        '█': '#',
        '░': '-',
    }

    def get(self, emoji, fallback=None):
        """Get emoji or ASCII fallback

        Args:
            emoji: The emoji character
            fallback: Optional custom fallback (uses default if None)

        Returns:
            Emoji if supported, otherwise ASCII fallback
        """
        if self.emoji_enabled:
            return emoji

        if fallback:
            return fallback

        return self.EMOJI_MAP.get(emoji, emoji)

    def enable(self):
        """Force enable emoji"""
        self.emoji_enabled = True

    def disable(self):
        """Force disable emoji"""
        self.emoji_enabled = False

    def is_enabled(self):
        """Check if emoji is enabled"""
        return self.emoji_enabled


# Global instance
_emoji = EmojiHelper()


def get_helper():
    """Return the process-wide helper"""
    return _emoji


def get(emoji, fallback=None):
    """Get emoji or fallback (convenience function)"""
    return _emoji.get(emoji, fallback)


def enable():
    """Enable emoji globally"""
    _emoji.enable()


def disable():
    """Disable emoji globally"""
    _emoji.disable()


def is_enabled():
    """Check if emoji is enabled"""
    return _emoji.is_enabled()
