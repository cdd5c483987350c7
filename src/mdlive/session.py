"""Editor session: the event loop tying input, layout and drawing together.

Each event runs one synchronous cycle: mutate the line buffer, reparse the
whole document, rebuild the screen buffer, project the cursor and redraw.
"""

from __future__ import annotations

import logging
from typing import Callable

from mdlive.buffer import LineBuffer
from mdlive.config import Config
from mdlive.errors import ParseError
from mdlive.keys import Key
from mdlive.layout import LayoutProjector
from mdlive.parser import MarkdownParser
from mdlive.projector import Frame, project_cursor
from mdlive.screen import ScreenBuffer
from mdlive.terminal import Event, KeyPress, Paste, Resize, Terminal

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({Key.ctrl("c"), Key.ctrl("d")})


def draw(frame: Frame, terminal: Terminal) -> None:
    """Paint *frame* onto *terminal* and park the cursor."""
    rows, cursor_row = frame.window(terminal.rows)
    terminal.hide_cursor()
    terminal.clear_screen()
    for index, row in enumerate(rows):
        terminal.move_cursor(index, 0)
        terminal.write(row)
    terminal.move_cursor(cursor_row, frame.cursor_col)
    terminal.show_cursor()


class EditorSession:
    """One editing session over an in-memory document."""

    def __init__(self, terminal: Terminal, config: Config | None = None, text: str = "") -> None:
        self.terminal = terminal
        self.config = config or Config()
        self.buffer = LineBuffer(text)
        self.parser = MarkdownParser()
        self.projector = LayoutProjector(
            self._render_width(terminal.columns),
            bullet=self.config.bullet,
            double_height_headings=self.config.heading_double_height,
        )
        self.screen: ScreenBuffer | None = None
        self.frame: Frame | None = None

        self._bindings: dict[str, Callable[[], None]] = {
            Key.enter: self.buffer.new_line,
            Key.backspace: self.buffer.backspace,
            Key.left: self.buffer.cursor_left,
            Key.right: self.buffer.cursor_right,
            Key.up: self.buffer.cursor_up,
            Key.down: self.buffer.cursor_down,
        }

    def _render_width(self, columns: int) -> int:
        return self.config.render_width or columns

    # -- event handling -----------------------------------------------------

    def handle_event(self, event: Event) -> bool:
        """Apply *event* and redraw.  Returns ``False`` when the session should end."""
        if isinstance(event, KeyPress):
            if event.key in QUIT_KEYS:
                return False
            if not self._apply_key(event.key):
                logger.debug("unbound input %r", event.data)
                return True
        elif isinstance(event, Paste):
            self.buffer.paste(event.text)
        elif isinstance(event, Resize):
            self.projector.resize(self._render_width(event.columns))

        self.render()
        self.draw()
        return True

    def _apply_key(self, key: str | None) -> bool:
        if key is None:
            return False
        action = self._bindings.get(key)
        if action is not None:
            action()
            return True
        if len(key) == 1 and key.isprintable():
            self.buffer.push(key)
            return True
        return False

    # -- rendering ----------------------------------------------------------

    def render(self) -> Frame | None:
        """Rebuild the frame from the current buffer.

        A parse failure keeps the previous frame.  Layout errors propagate.
        """
        lines = self.buffer.lines
        try:
            root = self.parser.parse("\n".join(lines))
        except ParseError as e:
            logger.warning("parse failed, keeping previous frame: %s", e)
            return self.frame
        self.screen = self.projector.layout(root, lines)
        self.frame = project_cursor(self.screen, self.buffer)
        return self.frame

    def draw(self) -> None:
        if self.frame is not None:
            draw(self.frame, self.terminal)

    # -- lifecycle ----------------------------------------------------------

    async def run(self) -> None:
        """Run until a quit key; the terminal is restored on every exit path."""
        self.terminal.start()
        self.terminal.enter_alternate_screen()
        try:
            self.render()
            self.draw()
            while True:
                event = await self.terminal.poll_event(self.config.poll_interval)
                if event is None:
                    continue
                if not self.handle_event(event):
                    break
        finally:
            self.terminal.clear_screen()
            self.terminal.leave_alternate_screen()
            self.terminal.stop()
            logger.info("session ended")
