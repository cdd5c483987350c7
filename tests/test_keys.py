"""Tests for mdlive.keys.parse_key."""

from __future__ import annotations

import pytest

from mdlive.keys import Key, parse_key


class TestParseKey:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ("\x1b[A", "up"),
            ("\x1b[B", "down"),
            ("\x1b[C", "right"),
            ("\x1b[D", "left"),
            ("\x1bOA", "up"),
            ("\x1b[3~", "delete"),
            ("\x1b[H", "home"),
        ],
    )
    def test_legacy_sequences(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    def test_modified_arrow(self) -> None:
        assert parse_key("\x1b[1;5C") == "ctrl+right"
        assert parse_key("\x1b[1;2A") == "shift+up"

    def test_enter_variants(self) -> None:
        assert parse_key("\r") == Key.enter
        assert parse_key("\n") == Key.enter

    def test_backspace_variants(self) -> None:
        assert parse_key("\x7f") == Key.backspace
        assert parse_key("\x08") == Key.backspace

    def test_ctrl_letters(self) -> None:
        assert parse_key("\x03") == Key.ctrl("c")
        assert parse_key("\x04") == Key.ctrl("d")

    def test_escape_and_tab(self) -> None:
        assert parse_key("\x1b") == Key.escape
        assert parse_key("\t") == Key.tab

    def test_alt_key(self) -> None:
        assert parse_key("\x1bx") == "alt+x"

    def test_printable(self) -> None:
        assert parse_key("a") == "a"
        assert parse_key("#") == "#"
        assert parse_key(" ") == " "
        assert parse_key("é") == "é"

    def test_unknown(self) -> None:
        assert parse_key("") is None
        assert parse_key("\x1b[99z") is None
