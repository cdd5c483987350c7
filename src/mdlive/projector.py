"""Cursor projection: logical (line, col) to physical (row, col).

The slot under the cursor is replaced by the raw source line so the user
sees exactly what they are typing on the line being edited.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mdlive.buffer import LineBuffer
from mdlive.screen import ScreenBuffer


@dataclass
class Frame:
    """Everything needed to draw one screen."""

    rows: list[str] = field(default_factory=list)
    cursor_row: int = 0
    cursor_col: int = 0

    def window(self, height: int) -> tuple[list[str], int]:
        """Rows visible in a terminal of *height* rows and the cursor row within them.

        The window scrolls only as far as needed to keep the cursor row on
        screen.
        """
        if height <= 0:
            return [], 0
        top = max(0, self.cursor_row - height + 1)
        return self.rows[top : top + height], self.cursor_row - top


def project_cursor(screen: ScreenBuffer, buffer: LineBuffer) -> Frame:
    """Walk *screen* slot by slot, accumulating physical rows.

    The raw line drawn in place of the cursor slot is always one row high.
    """
    cursor = buffer.cursor
    frame = Frame(cursor_col=cursor.col)

    draw_pos = 0
    for index, slot in enumerate(screen):
        if index == cursor.line:
            frame.cursor_row = draw_pos
            frame.rows.append(buffer.line(index))
            draw_pos += 1
        else:
            frame.rows.extend(slot.rows)
            draw_pos += slot.height
    return frame
