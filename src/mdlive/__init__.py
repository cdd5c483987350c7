"""mdlive: live markdown editor for the terminal."""

# Document model
from mdlive.buffer import LineBuffer
from mdlive.cursor import Cursor

# Errors
from mdlive.errors import (
    ConfigError,
    LayoutError,
    MdliveError,
    MissingPositionError,
    ParseError,
)

# Layout
from mdlive.layout import LayoutProjector
from mdlive.parser import MarkdownParser, Node, NodeKind, Span, parse
from mdlive.projector import Frame, project_cursor
from mdlive.screen import ScreenBuffer, ScreenSlot

__all__ = [
    "ConfigError",
    "Cursor",
    "Frame",
    "LayoutError",
    "LayoutProjector",
    "LineBuffer",
    "MarkdownParser",
    "MdliveError",
    "MissingPositionError",
    "Node",
    "NodeKind",
    "ParseError",
    "ScreenBuffer",
    "ScreenSlot",
    "Span",
    "parse",
    "project_cursor",
]
