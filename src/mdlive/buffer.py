"""Editable line buffer owning the document text and the logical cursor."""

from __future__ import annotations

import logging

from mdlive.cursor import Cursor

logger = logging.getLogger(__name__)


class LineBuffer:
    """Ordered list of text lines plus the cursor editing them.

    The buffer always holds at least one line and no line contains a
    newline.  Every mutation goes through the cursor position.
    """

    def __init__(self, text: str = "") -> None:
        self._lines: list[str] = text.split("\n") if text else [""]
        self.cursor = Cursor()

    # -- accessors -----------------------------------------------------------

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def line(self, index: int) -> str:
        return self._lines[index]

    # -- growth --------------------------------------------------------------

    def ensure_lines(self, n: int) -> None:
        """Grow the buffer with empty lines until it has ``n + 1`` entries."""
        missing = n + 1 - len(self._lines)
        if missing > 0:
            self._lines.extend([""] * missing)

    # -- editing -------------------------------------------------------------

    def push(self, ch: str) -> None:
        """Insert *ch* at the cursor and advance one column."""
        cur = self.cursor
        self.ensure_lines(cur.line)
        line = self._lines[cur.line]
        col = cur.clamped_col(self._lines)
        if col >= len(line):
            self._lines[cur.line] = line + ch
        else:
            self._lines[cur.line] = line[:col] + ch + line[col:]
        cur.col = col + 1

    def backspace(self) -> None:
        cur = self.cursor
        col = cur.clamped_col(self._lines)
        if cur.line == 0 and col == 0:
            return

        if col == 0:
            # Join onto the previous line
            moved = self._lines.pop(cur.line)
            cur.line -= 1
            cur.col = len(self._lines[cur.line])
            self._lines[cur.line] += moved
            return

        line = self._lines[cur.line]
        self._lines[cur.line] = line[: col - 1] + line[col:]
        cur.col = col - 1

    def new_line(self) -> None:
        """Split the current line at the cursor; cursor moves to the new line."""
        cur = self.cursor
        line = self._lines[cur.line]
        col = cur.clamped_col(self._lines)
        before, after = line[:col], line[col:]

        self._lines[cur.line] = before
        self._lines.insert(cur.line + 1, after)
        cur.line += 1
        cur.col = 0

    def paste(self, text: str) -> None:
        """Insert pasted *text* at the cursor, splitting on newlines."""
        clean = text.replace("\r\n", "\n").replace("\r", "\n").replace("\t", "    ")
        filtered = "".join(ch for ch in clean if ch == "\n" or ord(ch) >= 32)
        logger.debug("paste of %d chars (%d dropped)", len(filtered), len(clean) - len(filtered))

        for ch in filtered:
            if ch == "\n":
                self.new_line()
            else:
                self.push(ch)

    # -- navigation ----------------------------------------------------------

    def cursor_left(self) -> None:
        self.cursor.left(self._lines)

    def cursor_right(self) -> None:
        self.cursor.right(self._lines)

    def cursor_up(self) -> None:
        self.cursor.up(self._lines)

    def cursor_down(self) -> None:
        self.cursor.down(self._lines)
