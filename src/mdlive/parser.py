"""Markdown parser adapter producing a typed, line-positioned node tree.

Built on ``markdown-it-py`` with tables and strikethrough enabled and the
``mdit-py-plugins`` dollar-math extension for ``$...$`` / ``$$...$$``.

markdown-it reports block positions as 0-based half-open ``map`` pairs;
:class:`Span` converts them to 1-based inclusive source lines.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.dollarmath import dollarmath_plugin

from mdlive.errors import ParseError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Node model
# ---------------------------------------------------------------------------


class NodeKind(enum.Enum):
    ROOT = "root"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BULLET_LIST = "bullet_list"
    ORDERED_LIST = "ordered_list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    THEMATIC_BREAK = "thematic_break"
    MATH_BLOCK = "math_block"
    CODE_BLOCK = "code_block"
    BLOCKQUOTE = "blockquote"
    HTML_BLOCK = "html_block"
    TEXT = "text"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    STRIKETHROUGH = "strikethrough"
    INLINE_CODE = "inline_code"
    INLINE_MATH = "inline_math"
    LINK = "link"
    IMAGE = "image"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    HTML_INLINE = "html_inline"


BLOCK_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.PARAGRAPH,
        NodeKind.HEADING,
        NodeKind.BULLET_LIST,
        NodeKind.ORDERED_LIST,
        NodeKind.LIST_ITEM,
        NodeKind.TABLE,
        NodeKind.TABLE_ROW,
        NodeKind.THEMATIC_BREAK,
        NodeKind.MATH_BLOCK,
        NodeKind.CODE_BLOCK,
        NodeKind.BLOCKQUOTE,
        NodeKind.HTML_BLOCK,
    }
)

INLINE_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.TEXT,
        NodeKind.EMPHASIS,
        NodeKind.STRONG,
        NodeKind.STRIKETHROUGH,
        NodeKind.INLINE_CODE,
        NodeKind.INLINE_MATH,
        NodeKind.LINK,
        NodeKind.IMAGE,
        NodeKind.SOFT_BREAK,
        NodeKind.HARD_BREAK,
        NodeKind.HTML_INLINE,
    }
)


@dataclass(frozen=True)
class Span:
    """Inclusive 1-based source line range of a block node."""

    start_line: int
    end_line: int

    @property
    def start_index(self) -> int:
        return self.start_line - 1

    @property
    def end_index(self) -> int:
        return self.end_line - 1


@dataclass
class Node:
    kind: NodeKind
    children: list[Node] = field(default_factory=list)
    span: Span | None = None
    content: str = ""
    level: int = 0  # headings
    markup: str = ""  # fence of fenced code
    info: str = ""  # fence info string
    href: str = ""  # links

    @property
    def is_block(self) -> bool:
        return self.kind in BLOCK_KINDS


# ---------------------------------------------------------------------------
# markdown-it token type -> NodeKind
# ---------------------------------------------------------------------------

_TYPE_KINDS: dict[str, NodeKind] = {
    "root": NodeKind.ROOT,
    "paragraph": NodeKind.PARAGRAPH,
    "heading": NodeKind.HEADING,
    "bullet_list": NodeKind.BULLET_LIST,
    "ordered_list": NodeKind.ORDERED_LIST,
    "list_item": NodeKind.LIST_ITEM,
    "table": NodeKind.TABLE,
    "tr": NodeKind.TABLE_ROW,
    "th": NodeKind.TABLE_CELL,
    "td": NodeKind.TABLE_CELL,
    "hr": NodeKind.THEMATIC_BREAK,
    "math_block": NodeKind.MATH_BLOCK,
    "math_block_label": NodeKind.MATH_BLOCK,
    "fence": NodeKind.CODE_BLOCK,
    "code_block": NodeKind.CODE_BLOCK,
    "blockquote": NodeKind.BLOCKQUOTE,
    "html_block": NodeKind.HTML_BLOCK,
    "text": NodeKind.TEXT,
    "em": NodeKind.EMPHASIS,
    "strong": NodeKind.STRONG,
    "s": NodeKind.STRIKETHROUGH,
    "code_inline": NodeKind.INLINE_CODE,
    "math_inline": NodeKind.INLINE_MATH,
    "math_inline_double": NodeKind.INLINE_MATH,
    "link": NodeKind.LINK,
    "image": NodeKind.IMAGE,
    "softbreak": NodeKind.SOFT_BREAK,
    "hardbreak": NodeKind.HARD_BREAK,
    "html_inline": NodeKind.HTML_INLINE,
}

# Wrappers whose children are spliced into the parent
_TRANSPARENT_TYPES = frozenset({"inline", "thead", "tbody"})


def _create_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark").enable("table").enable("strikethrough")
    md.use(dollarmath_plugin)
    return md


class MarkdownParser:
    """Turns document text into a :class:`Node` tree."""

    def __init__(self, md: MarkdownIt | None = None) -> None:
        self._md = md or _create_parser()

    def parse(self, text: str) -> Node:
        try:
            tokens = self._md.parse(text)
            tree = SyntaxTreeNode(tokens)
        except Exception as exc:
            raise ParseError(f"markdown parse failed: {exc}") from exc
        return self._convert(tree)

    def _convert(self, st: SyntaxTreeNode) -> Node:
        kind = _TYPE_KINDS.get(st.type)
        if kind is None:
            raise ParseError(f"unsupported token type: {st.type}")

        node = Node(kind=kind)
        if st.is_root:
            node.children = self._convert_children(st.children)
            return node

        if st.map is not None:
            start, end = st.map
            node.span = Span(start + 1, max(end, start + 1))

        if kind is NodeKind.HEADING:
            node.level = int(st.tag[1:]) if st.tag.startswith("h") else 1
        elif kind is NodeKind.CODE_BLOCK and st.type == "fence":
            node.markup = st.markup
            node.info = st.info
        elif kind is NodeKind.LINK:
            node.href = str(st.attrs.get("href", ""))

        if kind in (
            NodeKind.TEXT,
            NodeKind.INLINE_CODE,
            NodeKind.INLINE_MATH,
            NodeKind.MATH_BLOCK,
            NodeKind.CODE_BLOCK,
            NodeKind.HTML_BLOCK,
            NodeKind.HTML_INLINE,
            NodeKind.IMAGE,
        ):
            node.content = st.content
            return node

        node.children = self._convert_children(st.children)
        return node

    def _convert_children(self, children: list[SyntaxTreeNode]) -> list[Node]:
        converted: list[Node] = []
        for child in children:
            if child.type in _TRANSPARENT_TYPES:
                converted.extend(self._convert_children(child.children))
            else:
                converted.append(self._convert(child))
        return converted


_default_parser: MarkdownParser | None = None


def parse(text: str) -> Node:
    """Parse *text* with the shared parser instance."""
    global _default_parser
    if _default_parser is None:
        _default_parser = MarkdownParser()
    return _default_parser.parse(text)
