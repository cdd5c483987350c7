"""Tests for mdlive.session: event handling, drawing and the run loop."""

from __future__ import annotations

import logging

import pytest

from mdlive.config import Config
from mdlive.errors import LayoutError, ParseError
from mdlive.projector import Frame
from mdlive.screen import DOUBLE_BOTTOM, DOUBLE_TOP
from mdlive.session import EditorSession, draw
from mdlive.terminal import KeyPress, Paste, Resize

from .virtual_terminal import VirtualTerminal


def make_session(text: str = "", rows: int = 24, columns: int = 40, **config) -> tuple[EditorSession, VirtualTerminal]:
    term = VirtualTerminal(rows=rows, columns=columns)
    return EditorSession(term, Config(**config), text), term


# ---------------------------------------------------------------------------
# draw
# ---------------------------------------------------------------------------


class TestDraw:
    def test_writes_rows_and_parks_cursor(self) -> None:
        term = VirtualTerminal(rows=5, columns=20)
        draw(Frame(rows=["a", "b"], cursor_row=1, cursor_col=1), term)
        assert term.screen_rows() == ["a", "b"]
        assert term.cursor == (1, 1)
        assert term.output.startswith("\x1b[?25l\x1b[2J\x1b[H")
        assert term.output.endswith("\x1b[?25h")
        assert term.cursor_visible

    def test_scrolls_when_cursor_below_screen(self) -> None:
        term = VirtualTerminal(rows=2, columns=20)
        draw(Frame(rows=["a", "b", "c", "d"], cursor_row=3, cursor_col=0), term)
        assert term.screen_rows() == ["c", "d"]
        assert term.cursor == (1, 0)


# ---------------------------------------------------------------------------
# Event handling
# ---------------------------------------------------------------------------


class TestHandleEvent:
    def test_typing_inserts_text(self) -> None:
        session, term = make_session()
        for ch in "# Hi":
            assert session.handle_event(KeyPress(ch, ch))
        assert session.buffer.lines == ["# Hi"]
        assert term.cursor == (0, 4)

    def test_rendered_when_cursor_leaves_line(self) -> None:
        session, term = make_session("# Title")
        session.buffer.cursor.col = 7
        session.handle_event(KeyPress("enter"))
        assert session.buffer.lines == ["# Title", ""]
        assert term.screen_rows() == [f"{DOUBLE_TOP}Title", f"{DOUBLE_BOTTOM}Title", ""]
        assert term.cursor == (2, 0)

    def test_navigation_keys(self) -> None:
        session, _ = make_session("ab\ncd")
        session.handle_event(KeyPress("down"))
        session.handle_event(KeyPress("right"))
        assert (session.buffer.cursor.line, session.buffer.cursor.col) == (1, 1)
        session.handle_event(KeyPress("up"))
        session.handle_event(KeyPress("left"))
        assert (session.buffer.cursor.line, session.buffer.cursor.col) == (0, 0)

    def test_backspace(self) -> None:
        session, _ = make_session("ab")
        session.buffer.cursor.col = 2
        session.handle_event(KeyPress("backspace"))
        assert session.buffer.lines == ["a"]

    def test_paste(self) -> None:
        session, _ = make_session()
        session.handle_event(Paste("- a\n- b"))
        assert session.buffer.lines == ["- a", "- b"]

    @pytest.mark.parametrize("key", ["ctrl+c", "ctrl+d"])
    def test_quit_keys(self, key: str) -> None:
        session, _ = make_session()
        assert session.handle_event(KeyPress(key)) is False

    def test_unbound_key_is_ignored(self) -> None:
        session, term = make_session("x")
        term.clear_buffer()
        assert session.handle_event(KeyPress("alt+x", "\x1bx"))
        assert session.buffer.lines == ["x"]
        assert term.output == ""

    def test_unknown_input_is_ignored(self) -> None:
        session, _ = make_session("x")
        assert session.handle_event(KeyPress(None, "\x1b[99z"))
        assert session.buffer.lines == ["x"]

    def test_resize_changes_render_width(self) -> None:
        session, _ = make_session("text\n\n---", columns=20)
        session.buffer.cursor.line = 0
        session.handle_event(Resize(24, 10))
        assert session.projector.width == 10
        assert session.screen is not None
        assert session.screen[2].text == " " + "─" * 8 + " "

    def test_configured_width_wins_over_terminal(self) -> None:
        session, _ = make_session(columns=20, render_width=12)
        session.handle_event(Resize(24, 100))
        assert session.projector.width == 12


# ---------------------------------------------------------------------------
# Rendering and errors
# ---------------------------------------------------------------------------


class _FailingParser:
    def parse(self, text: str):
        raise ParseError("bad input")


class TestRender:
    def test_render_is_idempotent(self) -> None:
        session, _ = make_session("# T\n\n- a\n- b\n\n| x | y |\n|---|---|\n| 1 | 2 |")
        session.buffer.cursor.line = 2
        first = session.render()
        first_screen = session.screen
        second = session.render()
        assert first == second
        assert first_screen == session.screen

    def test_parse_error_keeps_previous_frame(self, caplog: pytest.LogCaptureFixture) -> None:
        session, _ = make_session("hello")
        frame = session.render()
        session.parser = _FailingParser()  # type: ignore[assignment]
        session.buffer.push("x")
        with caplog.at_level(logging.WARNING, logger="mdlive.session"):
            assert session.render() is frame
        assert "bad input" in caplog.text

    def test_parse_error_before_first_frame_draws_nothing(self) -> None:
        session, term = make_session("hello")
        session.parser = _FailingParser()  # type: ignore[assignment]
        session.handle_event(KeyPress("a", "a"))
        assert term.output == ""


# ---------------------------------------------------------------------------
# Run loop
# ---------------------------------------------------------------------------


class TestRun:
    @pytest.mark.asyncio
    async def test_run_until_quit(self) -> None:
        session, term = make_session()
        term.feed_text("# Hi")
        term.feed_keys("enter")
        term.feed_text("text")
        term.feed_keys("ctrl+c")
        await session.run()
        assert session.buffer.lines == ["# Hi", "text"]
        assert not term.started
        assert not term.alternate_screen
        assert "\x1b[?1049h" in term.output
        assert term.output.endswith("\x1b[?1049l")

    @pytest.mark.asyncio
    async def test_terminal_restored_on_layout_error(self) -> None:
        session, term = make_session()

        def broken_layout(root, lines):
            raise LayoutError("table has no cells")

        session.projector.layout = broken_layout  # type: ignore[method-assign]
        with pytest.raises(LayoutError):
            await session.run()
        assert not term.started
        assert not term.alternate_screen
