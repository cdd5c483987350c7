"""Screen buffer: one render slot per source line."""

from __future__ import annotations

from dataclasses import dataclass

# DEC double-height line attributes (top half / bottom half)
DOUBLE_TOP = "\x1b#3"
DOUBLE_BOTTOM = "\x1b#4"


@dataclass
class ScreenSlot:
    """Rendered content for one source line.

    A slot of height 2 draws its text twice, as the top and bottom halves
    of a double-height glyph.
    """

    text: str = ""
    height: int = 1

    @classmethod
    def double(cls, text: str) -> ScreenSlot:
        return cls(text, height=2)

    @property
    def rows(self) -> list[str]:
        """Physical terminal rows this slot occupies."""
        if self.height == 2:
            return [f"{DOUBLE_TOP}{self.text}", f"{DOUBLE_BOTTOM}{self.text}"]
        return [self.text]


class ScreenBuffer:
    """Ordered render slots indexed by 0-based source line.

    The buffer only ever grows during a layout pass; a new pass starts
    from a fresh buffer.
    """

    def __init__(self, lines: list[str] | None = None) -> None:
        self._slots: list[ScreenSlot] = [ScreenSlot(line) for line in lines or []]

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self):
        return iter(self._slots)

    def __getitem__(self, index: int) -> ScreenSlot:
        return self._slots[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScreenBuffer):
            return NotImplemented
        return self._slots == other._slots

    @property
    def slots(self) -> list[ScreenSlot]:
        return list(self._slots)

    def ensure(self, index: int) -> None:
        """Grow with empty slots until *index* is addressable."""
        missing = index + 1 - len(self._slots)
        if missing > 0:
            self._slots.extend(ScreenSlot() for _ in range(missing))

    def set(self, index: int, slot: ScreenSlot) -> None:
        self.ensure(index)
        self._slots[index] = slot

    def write_lines(self, start: int, end: int, lines: list[str]) -> None:
        """Place *lines* into slots ``start..end`` (0-based, inclusive).

        Lines beyond the span are folded into the last slot of the span,
        joined by a single space, so slot indices never shift.  Slots of the
        span left over when there are fewer lines are blanked.
        """
        self.ensure(end)
        span = end - start + 1
        if len(lines) > span:
            lines = lines[: span - 1] + [" ".join(lines[span - 1 :])]
        lines = lines + [""] * (span - len(lines))
        for offset, line in enumerate(lines):
            self._slots[start + offset] = ScreenSlot(line)

    @property
    def physical_rows(self) -> int:
        return sum(slot.height for slot in self._slots)
