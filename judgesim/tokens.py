from __future__ import annotations

from collections import deque
from typing import Deque, Optional, TextIO


class TokenStream:
    """Whitespace-separated tokens read lazily, one line at a time."""

    def __init__(self, reader: TextIO):
        self.reader = reader
        self._tokens: Deque[str] = deque()

    def _fill(self) -> bool:
        while not self._tokens:
            line = self.reader.readline()
            if not line:
                return False
            self._tokens.extend(line.split())
        return True

    def has_more(self) -> bool:
        return self._fill()

    def next_token(self) -> Optional[str]:
        """Next token, or None at end of stream."""
        if not self._fill():
            return None
        return self._tokens.popleft()

    def next_int(self) -> Optional[int]:
        """Next token as int, None at end of stream; ValueError if it is not an integer."""
        token = self.next_token()
        if token is None:
            return None
        return int(token)
