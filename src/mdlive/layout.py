"""Layout projector: fills a :class:`ScreenBuffer` from the parsed node tree.

Every block node owns the slots of its source line span.  Rendering is a
depth-first walk with one rule per :class:`NodeKind`; block rules write
slots, inline rules return styled strings.
"""

from __future__ import annotations

import logging
from typing import Callable

from mdlive import latex
from mdlive.errors import LayoutError, MissingPositionError
from mdlive.parser import Node, NodeKind
from mdlive.screen import ScreenBuffer, ScreenSlot
from mdlive.utils import center_pad, visible_width

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# SGR toggles
# ---------------------------------------------------------------------------

_EM = "\x1b[3m"
_END_EM = "\x1b[23m"
_STRONG = "\x1b[1m"
_END_STRONG = "\x1b[22m"
_STRIKE = "\x1b[9m"
_END_STRIKE = "\x1b[29m"
_UNDERLINE = "\x1b[4m"
_END_UNDERLINE = "\x1b[24m"
_REVERSE = "\x1b[7m"
_END_REVERSE = "\x1b[27m"
_DIM = "\x1b[2m"
_END_DIM = "\x1b[22m"
_GREY = "\x1b[90m"
_WHITE = "\x1b[37m"

DEFAULT_BULLET = f"{_GREY}{_WHITE}"
QUOTE_BAR = f"{_GREY}│{_WHITE} "
INDENT = "  "

MathResolver = Callable[[str], str]


class LayoutProjector:
    """Projects a node tree onto per-source-line screen slots."""

    def __init__(
        self,
        width: int = 80,
        *,
        bullet: str = DEFAULT_BULLET,
        double_height_headings: bool = True,
        resolve_math: MathResolver = latex.resolve,
    ) -> None:
        self.width = width
        self.bullet = bullet
        self.double_height_headings = double_height_headings
        self._resolve_math = resolve_math
        self._lines: list[str] = []

    def resize(self, width: int) -> None:
        self.width = width

    # -- entry point ---------------------------------------------------------

    def layout(self, root: Node, lines: list[str]) -> ScreenBuffer:
        """Build a fresh screen buffer for *root* over the source *lines*.

        Slots that no node touches show their raw source line.
        """
        self._lines = lines
        screen = ScreenBuffer(lines)
        self.render_block(root, screen, 0)
        screen.ensure(len(lines) - 1)
        logger.debug("layout pass: %d slots, %d rows", len(screen), screen.physical_rows)
        return screen

    # -- dispatch ------------------------------------------------------------

    def render_block(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        rule = _BLOCK_RULES.get(node.kind)
        if rule is None:
            raise LayoutError(f"{node.kind.value} node cannot appear at block level")
        rule(self, node, screen, depth)

    def render_inline(self, node: Node) -> str:
        rule = _INLINE_RULES.get(node.kind)
        if rule is None:
            raise LayoutError(f"{node.kind.value} node should not appear nested")
        return rule(self, node)

    def render_children(self, nodes: list[Node]) -> str:
        return "".join(self.render_inline(node) for node in nodes)

    # -- helpers -------------------------------------------------------------

    @staticmethod
    def _span(node: Node, screen: ScreenBuffer) -> tuple[int, int]:
        """0-based inclusive slot range of *node*, growing *screen* to cover it."""
        if node.span is None:
            raise MissingPositionError(node.kind.value)
        start, end = node.span.start_index, node.span.end_index
        screen.ensure(end)
        return start, end

    # -- block rules ---------------------------------------------------------

    def _render_root(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        for child in node.children:
            self.render_block(child, screen, depth)

    def _render_paragraph(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        start, end = self._span(node, screen)
        indent = INDENT * depth
        text = self.render_children(node.children)
        screen.write_lines(start, end, [indent + line for line in text.split("\n")])

    def _render_heading(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        start, end = self._span(node, screen)
        inner = self.render_children(node.children)
        if self.double_height_headings:
            screen.set(start, ScreenSlot.double(inner))
        else:
            screen.set(start, ScreenSlot(f"{_STRONG}{inner}{_END_STRONG}"))
        # setext underline rows
        for index in range(start + 1, end + 1):
            screen.set(index, ScreenSlot())

    def _render_list(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        self._span(node, screen)
        ordered = node.kind is NodeKind.ORDERED_LIST
        for idx, item in enumerate(node.children):
            if item.kind is not NodeKind.LIST_ITEM:
                raise LayoutError(f"{item.kind.value} node inside a list")
            marker = f"{idx + 1}." if ordered else self.bullet
            self._render_list_item(item, marker, screen, depth)

    def _render_list_item(self, item: Node, marker: str, screen: ScreenBuffer, depth: int) -> None:
        start, end = self._span(item, screen)
        indent = INDENT * depth
        lead = f"{indent}{marker} "
        continuation = " " * visible_width(lead)

        blocks = list(item.children)
        if not blocks:
            screen.set(start, ScreenSlot(lead.rstrip()))
            return
        if blocks[0].kind is not NodeKind.PARAGRAPH:
            self._render_nested_item(blocks, lead, start, screen, depth)
            return

        first, rest = blocks[0], blocks[1:]
        p_start, p_end = self._span(first, screen)
        text_lines = self.render_children(first.children).split("\n")
        rendered = [lead + text_lines[0]] + [continuation + line for line in text_lines[1:]]
        screen.write_lines(p_start, p_end, rendered)
        for block in rest:
            self.render_block(block, screen, depth + 1)

    def _render_nested_item(
        self, blocks: list[Node], lead: str, start: int, screen: ScreenBuffer, depth: int
    ) -> None:
        """Item opening with a heading, list, quote or code block.

        The blocks render first; the marker is then put in front of
        whatever landed on the item's first line.
        """
        for block in blocks:
            self.render_block(block, screen, depth + 1)

        first_start, _ = self._span(blocks[0], screen)
        if first_start != start:
            screen.set(start, ScreenSlot(lead.rstrip()))
            return

        slot = screen[start]
        nested = INDENT * (depth + 1)
        text = slot.text[len(nested) :] if slot.text.startswith(nested) else slot.text
        screen.set(start, ScreenSlot(lead + text, slot.height))

    def _render_table(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        start, _ = self._span(node, screen)

        rows: list[tuple[list[str], int]] = []
        for row in node.children:
            if row.kind is not NodeKind.TABLE_ROW:
                raise LayoutError(f"{row.kind.value} node inside a table")
            row_start, _ = self._span(row, screen)
            cells: list[str] = []
            for cell in row.children:
                if cell.kind is not NodeKind.TABLE_CELL:
                    raise LayoutError(f"{cell.kind.value} node inside a table row")
                cells.append(self.render_children(cell.children))
            rows.append((cells, row_start))

        if not rows or not rows[0][0]:
            raise LayoutError("table has no cells")

        col_widths = table_column_widths([cells for cells, _ in rows])

        # Separator sits on the delimiter row, directly above the body
        screen.set(start + 1, ScreenSlot(table_separator(col_widths)))
        for cells, row_start in rows:
            screen.set(row_start, ScreenSlot(table_row(cells, col_widths)))

    def _render_break(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        start, _ = self._span(node, screen)
        rule = "─" * max(0, self.width - 2)
        screen.set(start, ScreenSlot(f" {rule} "))

    def _render_math_block(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        start, end = self._span(node, screen)
        rendered = self._resolve_math(node.content.strip("\n")).split("\n")
        for index in range(start, end + 1):
            screen.set(index, ScreenSlot())
        # Multi-line blocks keep their $$ fences blank
        body_start = start + 1 if end > start + 1 else start
        body_end = end - 1 if end > start + 1 else end
        screen.write_lines(body_start, body_end, [f"{_EM}{line}{_END_EM}" for line in rendered])

    def _render_code_block(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        start, end = self._span(node, screen)
        indent = INDENT * depth
        rows = _content_lines(node.content)
        if node.markup:
            rows.insert(0, node.markup + node.info)
            # closing fence, unless the fence is still open at end of document
            if len(rows) < end - start + 1:
                rows.append(node.markup)
        screen.write_lines(start, end, [f"{indent}{_DIM}{row}{_END_DIM}" for row in rows])

    def _render_blockquote(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        start, end = self._span(node, screen)
        for child in node.children:
            self.render_block(child, screen, depth)
        for index in range(start, end + 1):
            slot = screen[index]
            text = slot.text
            if index < len(self._lines) and text == self._lines[index]:
                # untouched raw line: drop the quote marker itself
                text = text.lstrip()
                text = text[1:].lstrip() if text.startswith(">") else text
            screen.set(index, ScreenSlot(QUOTE_BAR + text, slot.height))

    def _render_html_block(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        start, end = self._span(node, screen)
        indent = INDENT * depth
        screen.write_lines(start, end, [indent + line for line in _content_lines(node.content)])

    def _reject_orphan(self, node: Node, screen: ScreenBuffer, depth: int) -> None:
        raise LayoutError(f"{node.kind.value} node outside of its container")

    # -- inline rules --------------------------------------------------------

    def _inline_text(self, node: Node) -> str:
        return node.content

    def _inline_emphasis(self, node: Node) -> str:
        return f"{_EM}{self.render_children(node.children)}{_END_EM}"

    def _inline_strong(self, node: Node) -> str:
        return f"{_STRONG}{self.render_children(node.children)}{_END_STRONG}"

    def _inline_strike(self, node: Node) -> str:
        return f"{_STRIKE}{self.render_children(node.children)}{_END_STRIKE}"

    def _inline_code(self, node: Node) -> str:
        return f"{_REVERSE}{node.content}{_END_REVERSE}"

    def _inline_math(self, node: Node) -> str:
        return self._resolve_math(node.content)

    def _inline_link(self, node: Node) -> str:
        return f"{_UNDERLINE}{self.render_children(node.children)}{_END_UNDERLINE}"

    def _inline_image(self, node: Node) -> str:
        return f"[{node.content or 'image'}]"

    def _inline_break(self, node: Node) -> str:
        return "\n"

    def _inline_paragraph(self, node: Node) -> str:
        return self.render_children(node.children)


def _content_lines(content: str) -> list[str]:
    """Lines of a leaf block's content, without the trailing newline."""
    return content.removesuffix("\n").split("\n") if content else []


# ---------------------------------------------------------------------------
# Table helpers
# ---------------------------------------------------------------------------


def table_column_widths(rows: list[list[str]]) -> list[int]:
    """Max visible width of each column across all rows."""
    num_cols = max(len(cells) for cells in rows)
    widths = [0] * num_cols
    for cells in rows:
        for col, cell in enumerate(cells):
            widths[col] = max(widths[col], visible_width(cell))
    return widths


def table_separator(col_widths: list[int]) -> str:
    parts = ["─" * (w + 2) for w in col_widths]
    return f"├{'┼'.join(parts)}┤"


def table_row(cells: list[str], col_widths: list[int]) -> str:
    padded = [
        center_pad(cells[col] if col < len(cells) else "", width)
        for col, width in enumerate(col_widths)
    ]
    return f"│ {' │ '.join(padded)} │"


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

_BLOCK_RULES: dict[NodeKind, Callable[[LayoutProjector, Node, ScreenBuffer, int], None]] = {
    NodeKind.ROOT: LayoutProjector._render_root,
    NodeKind.PARAGRAPH: LayoutProjector._render_paragraph,
    NodeKind.HEADING: LayoutProjector._render_heading,
    NodeKind.BULLET_LIST: LayoutProjector._render_list,
    NodeKind.ORDERED_LIST: LayoutProjector._render_list,
    NodeKind.LIST_ITEM: LayoutProjector._reject_orphan,
    NodeKind.TABLE: LayoutProjector._render_table,
    NodeKind.TABLE_ROW: LayoutProjector._reject_orphan,
    NodeKind.TABLE_CELL: LayoutProjector._reject_orphan,
    NodeKind.THEMATIC_BREAK: LayoutProjector._render_break,
    NodeKind.MATH_BLOCK: LayoutProjector._render_math_block,
    NodeKind.CODE_BLOCK: LayoutProjector._render_code_block,
    NodeKind.BLOCKQUOTE: LayoutProjector._render_blockquote,
    NodeKind.HTML_BLOCK: LayoutProjector._render_html_block,
}

_INLINE_RULES: dict[NodeKind, Callable[[LayoutProjector, Node], str]] = {
    NodeKind.TEXT: LayoutProjector._inline_text,
    NodeKind.EMPHASIS: LayoutProjector._inline_emphasis,
    NodeKind.STRONG: LayoutProjector._inline_strong,
    NodeKind.STRIKETHROUGH: LayoutProjector._inline_strike,
    NodeKind.INLINE_CODE: LayoutProjector._inline_code,
    NodeKind.INLINE_MATH: LayoutProjector._inline_math,
    NodeKind.LINK: LayoutProjector._inline_link,
    NodeKind.IMAGE: LayoutProjector._inline_image,
    NodeKind.SOFT_BREAK: LayoutProjector._inline_break,
    NodeKind.HARD_BREAK: LayoutProjector._inline_break,
    NodeKind.HTML_INLINE: LayoutProjector._inline_text,
    NodeKind.PARAGRAPH: LayoutProjector._inline_paragraph,
}

_missing = set(NodeKind) - set(_BLOCK_RULES) - set(_INLINE_RULES)
if _missing:
    raise RuntimeError(f"no layout rule for: {sorted(k.value for k in _missing)}")
