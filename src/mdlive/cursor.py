"""Logical cursor with a remembered column for vertical navigation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Cursor:
    """Logical cursor position inside the line buffer.

    ``max_col`` is the sticky column: it is captured when moving up and
    restored (clamped) on the line above.  Moving down keeps ``col`` as is
    and never touches ``max_col``.
    """

    line: int = 0
    col: int = 0
    max_col: int = 0

    def left(self, lines: list[str]) -> None:
        if self.col > 0:
            self.col -= 1
        elif self.line > 0:
            self.line -= 1
            self.col = len(lines[self.line])

    def right(self, lines: list[str]) -> None:
        if self.col < len(lines[self.line]):
            self.col += 1
        elif self.line + 1 < len(lines):
            self.line += 1
            self.col = 0

    def up(self, lines: list[str]) -> None:
        if self.line == 0:
            return
        self.max_col = self.col
        self.line -= 1
        self.col = min(self.max_col, len(lines[self.line]))

    def down(self, lines: list[str]) -> None:
        if self.line + 1 < len(lines):
            self.line += 1

    def clamped_col(self, lines: list[str]) -> int:
        """Column bounded by the current line length."""
        return min(self.col, len(lines[self.line]))
