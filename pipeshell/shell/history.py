"""
Command History

In-memory record of the lines entered in this session.

Author: YSNRFD
Version: 1.0.0
"""

from collections import deque
from typing import List, Tuple


class CommandHistory:
    """
    Bounded list of past input lines.

    Numbering is absolute and 1-based: once old entries fall off the
    front, the remaining ones keep the numbers they were given.
    """

    def __init__(self, max_size: int = 1000):
        if max_size < 1:
            raise ValueError("history size must be at least 1")
        self._lines: deque[str] = deque(maxlen=max_size)
        self._dropped = 0

    def add(self, line: str) -> None:
        """Record a line. Blank lines are ignored."""
        line = line.rstrip('\n')
        if not line.strip():
            return
        if len(self._lines) == self._lines.maxlen:
            self._dropped += 1
        self._lines.append(line)

    def entries(self) -> List[Tuple[int, str]]:
        """Return (index, line) pairs, oldest first."""
        return [
            (self._dropped + offset, line)
            for offset, line in enumerate(self._lines, 1)
        ]

    def clear(self) -> None:
        self._lines.clear()
        self._dropped = 0

    def __len__(self) -> int:
        return len(self._lines)
