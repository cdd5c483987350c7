"""Splits raw stdin chunks into complete key sequences and pastes.

Escape sequences can arrive split across reads; a lone ``ESC`` is held
back until either the rest of the sequence arrives or a short timeout
expires (then it is a plain Escape key press).  Bracketed paste content is
collected whole and emitted separately.
"""

from __future__ import annotations

import asyncio
from typing import Callable

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"


def sequence_status(data: str) -> str:
    """Classify *data* as ``"complete"``, ``"incomplete"`` or ``"not-escape"``."""
    if not data.startswith(ESC):
        return "not-escape"
    if len(data) == 1:
        return "incomplete"

    introducer = data[1]
    if introducer == "[":
        if len(data) < 3:
            return "incomplete"
        # CSI ends with a final byte in 0x40..0x7E
        return "complete" if 0x40 <= ord(data[-1]) <= 0x7E else "incomplete"
    if introducer == "]":
        # OSC ends with BEL or ST
        return "complete" if data.endswith("\x07") or data.endswith(f"{ESC}\\") else "incomplete"
    if introducer == "O":
        return "complete" if len(data) >= 3 else "incomplete"
    # Meta key: ESC + one character
    return "complete"


def extract_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences and an incomplete remainder."""
    sequences: list[str] = []
    pos = 0
    while pos < len(buffer):
        if buffer[pos] != ESC:
            sequences.append(buffer[pos])
            pos += 1
            continue

        end = pos + 1
        while end <= len(buffer) and sequence_status(buffer[pos:end]) == "incomplete":
            end += 1
        if end > len(buffer):
            return sequences, buffer[pos:]
        sequences.append(buffer[pos:end])
        pos = end
    return sequences, ""


class StdinBuffer:
    """Buffers stdin input and emits complete sequences."""

    def __init__(self, *, timeout: float = 0.01) -> None:
        self._buffer = ""
        self._timeout = timeout
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._paste_mode = False
        self._paste_buffer = ""

        self._on_data: Callable[[str], None] | None = None
        self._on_paste: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        self._on_data = callback

    def on_paste(self, callback: Callable[[str], None]) -> None:
        self._on_paste = callback

    def _emit_data(self, data: str) -> None:
        if self._on_data:
            self._on_data(data)

    def _emit_paste(self, data: str) -> None:
        if self._on_paste:
            self._on_paste(data)

    def process(self, data: str) -> None:
        """Feed a chunk of input into the buffer."""
        self._cancel_timeout()

        if self._paste_mode:
            self._paste_buffer += data
            self._finish_paste_if_complete()
            return

        self._buffer += data
        start = self._buffer.find(BRACKETED_PASTE_START)
        if start != -1:
            sequences, _ = extract_sequences(self._buffer[:start])
            for sequence in sequences:
                self._emit_data(sequence)
            self._paste_mode = True
            self._paste_buffer = self._buffer[start + len(BRACKETED_PASTE_START) :]
            self._buffer = ""
            self._finish_paste_if_complete()
            return

        sequences, self._buffer = extract_sequences(self._buffer)
        for sequence in sequences:
            self._emit_data(sequence)

        if self._buffer:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                # No event loop - flush immediately
                for sequence in self.flush():
                    self._emit_data(sequence)
                return
            self._timeout_handle = loop.call_later(self._timeout, self._flush_timeout)

    def _finish_paste_if_complete(self) -> None:
        end = self._paste_buffer.find(BRACKETED_PASTE_END)
        if end == -1:
            return
        content = self._paste_buffer[:end]
        remaining = self._paste_buffer[end + len(BRACKETED_PASTE_END) :]
        self._paste_mode = False
        self._paste_buffer = ""
        self._emit_paste(content)
        if remaining:
            self.process(remaining)

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None

    def _flush_timeout(self) -> None:
        self._timeout_handle = None
        for sequence in self.flush():
            self._emit_data(sequence)

    def flush(self) -> list[str]:
        """Return whatever is buffered as one sequence and clear it."""
        self._cancel_timeout()
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def get_buffer(self) -> str:
        return self._buffer

    def clear(self) -> None:
        self._cancel_timeout()
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""
