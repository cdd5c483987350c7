"""Inline LaTeX math to plain-text symbol substitution.

``resolve`` never fails: macros it does not know are rendered as a red
``\\name[args]`` placeholder so the user can keep editing.
"""

from __future__ import annotations

import re

_RED = "\x1b[31m"
_RESET = "\x1b[39m"

# ---------------------------------------------------------------------------
# Symbol tables
# ---------------------------------------------------------------------------

GREEK: dict[str, str] = {
    "alpha": "α",
    "beta": "β",
    "gamma": "γ",
    "delta": "δ",
    "epsilon": "ε",
    "zeta": "ζ",
    "eta": "η",
    "theta": "θ",
    "iota": "ι",
    "kappa": "κ",
    "lambda": "λ",
    "mu": "μ",
    "nu": "ν",
    "xi": "ξ",
    "omicron": "ο",
    "pi": "π",
    "rho": "ρ",
    "sigma": "σ",
    "tau": "τ",
    "upsilon": "υ",
    "phi": "φ",
    "chi": "χ",
    "psi": "ψ",
    "omega": "ω",
}

ORDINARY: dict[str, str] = {
    "neg": "¬",
    "lnot": "¬",
    "infty": "∞",
    "partial": "∂",
    "nabla": "∇",
    "forall": "∀",
    "exists": "∃",
    "emptyset": "∅",
    "hbar": "ℏ",
    "ell": "ℓ",
    "prime": "′",
    "angle": "∠",
    "degree": "°",
    "ldots": "…",
    "cdots": "⋯",
}

BINARY: dict[str, str] = {
    "pm": "±",
    "mp": "∓",
    "times": "×",
    "div": "÷",
    "cdot": "·",
    "ast": "∗",
    "circ": "∘",
    "cup": "∪",
    "cap": "∩",
    "wedge": "∧",
    "land": "∧",
    "vee": "∨",
    "lor": "∨",
    "oplus": "⊕",
    "otimes": "⊗",
    "setminus": "∖",
}

RELATION: dict[str, str] = {
    "leq": "≤",
    "le": "≤",
    "geq": "≥",
    "ge": "≥",
    "neq": "≠",
    "ne": "≠",
    "approx": "≈",
    "equiv": "≡",
    "sim": "∼",
    "propto": "∝",
    "in": "∈",
    "notin": "∉",
    "subset": "⊂",
    "subseteq": "⊆",
    "supset": "⊃",
    "supseteq": "⊇",
    "to": "→",
    "rightarrow": "→",
    "leftarrow": "←",
    "Rightarrow": "⇒",
    "Leftarrow": "⇐",
    "leftrightarrow": "↔",
    "iff": "⇔",
    "implies": "⟹",
    "mapsto": "↦",
}

BIG_OPERATOR: dict[str, str] = {
    "sum": "∑",
    "prod": "∏",
    "int": "∫",
    "oint": "∮",
    "bigcup": "⋃",
    "bigcap": "⋂",
}

SUPERSCRIPTS = str.maketrans("0123456789+-=()ni", "⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻⁼⁽⁾ⁿⁱ")
SUBSCRIPTS = str.maketrans("0123456789+-=()", "₀₁₂₃₄₅₆₇₈₉₊₋₌₍₎")
_SUPERSCRIPT_SOURCE = set("0123456789+-=()ni")
_SUBSCRIPT_SOURCE = set("0123456789+-=()")

# Macros that print their single argument unchanged
_PASSTHROUGH = frozenset({"text", "mathrm", "mathbf", "mathit", "mathsf", "mathtt", "operatorname"})

_TOKEN_RE = re.compile(
    r"(?P<macro>\\(?:[A-Za-z]+|.))"
    r"|(?P<open>\{)"
    r"|(?P<close>\})"
    r"|(?P<space>\s+)"
    r"|(?P<script>[\^_])"
    r"|(?P<char>.)",
    re.DOTALL,
)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class _Reader:
    """Cursor over the token stream of a math source string."""

    def __init__(self, source: str) -> None:
        self.tokens: list[tuple[str, str]] = [
            (m.lastgroup or "char", m.group()) for m in _TOKEN_RE.finditer(source)
        ]
        self.pos = 0

    def peek(self) -> tuple[str, str] | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> tuple[str, str]:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok


def _render_until_close(reader: _Reader) -> str:
    parts: list[str] = []
    while (tok := reader.peek()) is not None:
        if tok[0] == "close":
            reader.next()
            break
        parts.append(_render_one(reader))
    return "".join(parts)


def _read_argument(reader: _Reader) -> str:
    """Read one ``{...}`` group or a single token as an argument."""
    tok = reader.peek()
    if tok is None:
        return ""
    if tok[0] == "open":
        reader.next()
        return _render_until_close(reader)
    return _render_one(reader)


def _render_script(marker: str, arg: str) -> str:
    table, source = (SUPERSCRIPTS, _SUPERSCRIPT_SOURCE) if marker == "^" else (SUBSCRIPTS, _SUBSCRIPT_SOURCE)
    if arg and set(arg) <= source:
        return arg.translate(table)
    if len(arg) == 1:
        return f"{marker}{arg}"
    return f"{marker}({arg})"


def _render_one(reader: _Reader) -> str:
    kind, text = reader.next()
    if kind == "macro":
        return _render_macro(text[1:], reader)
    if kind == "open":
        return _render_until_close(reader)
    if kind == "close":
        return ""
    if kind == "space":
        return " "
    if kind == "script":
        return _render_script(text, _read_argument(reader))
    return text


def lookup_symbol(name: str) -> str | None:
    """Return the symbol for a known macro name, or ``None``."""
    greek = GREEK.get(name.lower())
    if greek is not None:
        return greek.upper() if name[0].isupper() else greek
    for table in (ORDINARY, BINARY, RELATION, BIG_OPERATOR):
        symbol = table.get(name)
        if symbol is not None:
            return symbol
    return None


def unknown_macro(name: str, args: list[str]) -> str:
    """Visibly flagged placeholder for a macro that cannot be resolved."""
    return f"{_RED}\\{name}{args!r}{_RESET}"


def _read_brace_args(reader: _Reader) -> list[str]:
    args: list[str] = []
    while (tok := reader.peek()) is not None and tok[0] == "open":
        reader.next()
        args.append(_render_until_close(reader))
    return args


def _render_macro(name: str, reader: _Reader) -> str:
    if not name.isalpha():
        # \, \; \! \{ \} and friends
        return {",": " ", ";": " ", ":": " ", "!": "", " ": " "}.get(name, name)

    symbol = lookup_symbol(name)
    if symbol is not None:
        return symbol

    if name in _PASSTHROUGH:
        return _read_argument(reader)
    if name == "sqrt":
        arg = _read_argument(reader)
        return f"√{arg}" if len(arg) == 1 else f"√({arg})"
    if name == "frac":
        num = _read_argument(reader)
        den = _read_argument(reader)
        return f"{num}/{den}" if len(num) == 1 and len(den) == 1 else f"({num})/({den})"

    return unknown_macro(name, _read_brace_args(reader))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve(source: str) -> str:
    """Render LaTeX math *source* as inline text."""
    reader = _Reader(source)
    parts: list[str] = []
    while reader.peek() is not None:
        parts.append(_render_one(reader))
    return "".join(parts)
