"""
ANSI color codes and the rotating color allocator used for container prefixes.
"""
import threading
from typing import Sequence


class Colors:
    """ANSI color codes for terminal output."""

    RED = "\x1b[0;31m"
    GREEN = "\x1b[0;32m"
    BROWN = "\x1b[0;33m"
    BLUE = "\x1b[0;34m"
    PURPLE = "\x1b[0;35m"
    CYAN = "\x1b[0;36m"

    BOLD = "\x1b[1m"
    BOLD_BLUE = "\x1b[1;34m"

    RESET = "\x1b[0m"

    @staticmethod
    def colorize(text: str, color: str) -> str:
        """Apply color to text."""
        return f"{color}{text}{Colors.RESET}"

    @staticmethod
    def bold(text: str) -> str:
        return Colors.colorize(text, Colors.BOLD)


PALETTE = (
    Colors.RED,
    Colors.GREEN,
    Colors.BROWN,
    Colors.BLUE,
    Colors.PURPLE,
    Colors.CYAN,
)


class ColorAllocator:
    """
    Hands out palette colors in rotation, one per tail session.

    Colors are not tied to a container: once the palette wraps, two containers
    may share a color and are told apart by their name prefix. `next()` is safe
    to call from any session thread.
    """

    def __init__(self, palette: Sequence[str] = PALETTE) -> None:
        if not palette:
            raise ValueError("palette must contain at least one color")
        self._palette = tuple(palette)
        self._index = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._palette)

    def next(self) -> str:
        with self._lock:
            color = self._palette[self._index]
            self._index = (self._index + 1) % len(self._palette)
        return color


def make_prefix(color: str, name: str) -> str:
    """Prefix shown in front of every line of a container's output."""
    return f"{color}{name}{Colors.RESET}  "
