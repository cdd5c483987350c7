"""Tests for mdlive.screen."""

from __future__ import annotations

from mdlive.screen import DOUBLE_BOTTOM, DOUBLE_TOP, ScreenBuffer, ScreenSlot


class TestScreenSlot:
    def test_single_slot_has_one_row(self) -> None:
        slot = ScreenSlot("text")
        assert slot.height == 1
        assert slot.rows == ["text"]

    def test_double_slot_draws_both_halves(self) -> None:
        slot = ScreenSlot.double("Title")
        assert slot.height == 2
        assert slot.rows == [f"{DOUBLE_TOP}Title", f"{DOUBLE_BOTTOM}Title"]


class TestScreenBuffer:
    def test_starts_with_raw_lines(self) -> None:
        screen = ScreenBuffer(["a", "b"])
        assert [slot.text for slot in screen] == ["a", "b"]
        assert len(screen) == 2

    def test_ensure_grows_with_empty_slots(self) -> None:
        screen = ScreenBuffer()
        screen.ensure(2)
        assert screen.slots == [ScreenSlot(), ScreenSlot(), ScreenSlot()]

    def test_set_grows_buffer(self) -> None:
        screen = ScreenBuffer(["a"])
        screen.set(3, ScreenSlot("d"))
        assert len(screen) == 4
        assert screen[3].text == "d"

    def test_physical_rows_counts_heights(self) -> None:
        screen = ScreenBuffer(["a", "b", "c"])
        screen.set(0, ScreenSlot.double("a"))
        assert screen.physical_rows == 4

    def test_equality(self) -> None:
        assert ScreenBuffer(["a"]) == ScreenBuffer(["a"])
        assert ScreenBuffer(["a"]) != ScreenBuffer(["b"])


class TestWriteLines:
    def test_fills_span(self) -> None:
        screen = ScreenBuffer(["", "", ""])
        screen.write_lines(0, 1, ["x", "y"])
        assert [slot.text for slot in screen] == ["x", "y", ""]

    def test_fewer_lines_blank_rest_of_span(self) -> None:
        screen = ScreenBuffer(["raw0", "raw1", "raw2"])
        screen.write_lines(0, 1, ["x"])
        assert [slot.text for slot in screen] == ["x", "", "raw2"]

    def test_no_lines_blanks_whole_span(self) -> None:
        screen = ScreenBuffer(["raw0", "raw1"])
        screen.write_lines(0, 1, [])
        assert screen.slots == [ScreenSlot(), ScreenSlot()]

    def test_overflow_folds_into_last_slot(self) -> None:
        screen = ScreenBuffer(["", "", "next"])
        screen.write_lines(0, 1, ["a", "b", "c", "d"])
        assert [slot.text for slot in screen] == ["a", "b c d", "next"]

    def test_overflow_never_touches_following_slots(self) -> None:
        screen = ScreenBuffer(["", "keep"])
        screen.write_lines(0, 0, ["a", "b"])
        assert [slot.text for slot in screen] == ["a b", "keep"]
