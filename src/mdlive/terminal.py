"""Terminal abstraction for raw-mode stdin/stdout interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` that
manages raw mode, the alternate screen, bracketed paste and SIGWINCH-based
resize detection, and turns stdin into a queue of editor events.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
import termios
import tty
from dataclasses import dataclass
from typing import Protocol, Union

from mdlive.keys import parse_key
from mdlive.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_BRACKETED_PASTE_ENABLE = "\x1b[?2004h"
_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"
_ALT_SCREEN_ENTER = "\x1b[?1049h"
_ALT_SCREEN_LEAVE = "\x1b[?1049l"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"
_MOVE_TO_FMT = "\x1b[{};{}H"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyPress:
    """A key press; *key* is a key id (``"a"``, ``"ctrl+c"``) or ``None`` if unknown."""

    key: str | None
    data: str = ""


@dataclass(frozen=True)
class Resize:
    rows: int
    columns: int


@dataclass(frozen=True)
class Paste:
    text: str


Event = Union[KeyPress, Resize, Paste]


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    async def poll_event(self, timeout: float) -> Event | None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def move_cursor(self, row: int, col: int) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def clear_screen(self) -> None: ...

    def enter_alternate_screen(self) -> None: ...

    def leave_alternate_screen(self) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by ``sys.stdin``/``sys.stdout``.

    Raw mode is managed via :mod:`tty` and :mod:`termios`; stdin is read
    from an asyncio reader, so :meth:`start` must run inside an event loop.
    """

    def __init__(self) -> None:
        self._events: asyncio.Queue[Event] = asyncio.Queue()
        self._stdin_buffer: StdinBuffer | None = None
        self._original_termios: list | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enable raw mode and bracketed paste, and begin reading stdin."""
        self._loop = asyncio.get_running_loop()
        fd = sys.stdin.fileno()

        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)
        self._raw_write(_BRACKETED_PASTE_ENABLE)

        self._stdin_buffer = StdinBuffer(timeout=0.01)
        self._stdin_buffer.on_data(self._on_data)
        self._stdin_buffer.on_paste(lambda text: self._events.put_nowait(Paste(text)))

        self._loop.add_reader(fd, self._on_stdin_readable)
        self._loop.add_signal_handler(signal.SIGWINCH, self._on_sigwinch)
        logger.debug("terminal started (%dx%d)", self.columns, self.rows)

    def stop(self) -> None:
        """Restore terminal state and clean up all handlers."""
        self._raw_write(_BRACKETED_PASTE_DISABLE)

        if self._stdin_buffer is not None:
            self._stdin_buffer.clear()
            self._stdin_buffer = None

        fd = sys.stdin.fileno()
        if self._loop is not None:
            self._loop.remove_reader(fd)
            self._loop.remove_signal_handler(signal.SIGWINCH)
            self._loop = None

        if self._original_termios is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._original_termios)
            self._original_termios = None
        logger.debug("terminal stopped")

    # -- events -------------------------------------------------------------

    async def poll_event(self, timeout: float) -> Event | None:
        """Wait up to *timeout* seconds for the next event."""
        try:
            return await asyncio.wait_for(self._events.get(), timeout)
        except asyncio.TimeoutError:
            return None

    def _on_data(self, data: str) -> None:
        self._events.put_nowait(KeyPress(parse_key(data), data))

    def _on_stdin_readable(self) -> None:
        try:
            raw = os.read(sys.stdin.fileno(), 4096)
        except OSError:
            return
        if raw and self._stdin_buffer is not None:
            self._stdin_buffer.process(raw.decode("utf-8", errors="replace"))

    def _on_sigwinch(self) -> None:
        self._events.put_nowait(Resize(self.rows, self.columns))

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        self._raw_write(data)

    def move_cursor(self, row: int, col: int) -> None:
        self._raw_write(_MOVE_TO_FMT.format(row + 1, col + 1))

    def hide_cursor(self) -> None:
        self._raw_write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._raw_write(_SHOW_CURSOR)

    def clear_screen(self) -> None:
        self._raw_write(_CLEAR_SCREEN)

    def enter_alternate_screen(self) -> None:
        self._raw_write(_ALT_SCREEN_ENTER)

    def leave_alternate_screen(self) -> None:
        self._raw_write(_ALT_SCREEN_LEAVE)

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            pass
