"""Exception hierarchy for the live markdown editor.

``ParseError`` is recoverable: the render pass is skipped and the previous
frame stays on screen.  ``LayoutError`` signals a contract violation between
the parser and the layout projector and ends the session.
"""

from __future__ import annotations


class MdliveError(Exception):
    """Base class for all editor errors."""


class ConfigError(MdliveError):
    """The configuration file could not be read or holds invalid values."""


class ParseError(MdliveError):
    """The document text could not be turned into a node tree."""


class LayoutError(MdliveError):
    """The node tree is structurally invalid for layout."""


class MissingPositionError(LayoutError):
    """A block-level node carries no source line span."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind} node has no source position")
        self.kind = kind
