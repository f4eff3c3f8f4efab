"""Canonical selector text used for every selector comparison.

Two selectors target the same rule iff their canonical forms are identical
strings. Only whitespace and combinator spacing are normalized:

    normalize(".nav >a ,  .nav  li")  ->  ".nav > a, .nav li"

Quoted strings (attribute values) are copied through untouched, so
``[title="a>b"]`` and ``[title="a > b"]`` remain different selectors.
"""

from __future__ import annotations

import re

__all__ = ["normalize", "selectors_match", "selector_pattern"]

# Splits selector text into alternating unquoted / quoted segments.
_QUOTED_RE = re.compile(r"""("(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*')""")

_WHITESPACE_RE = re.compile(r"\s+")
_CHILD_RE = re.compile(r"\s*>\s*")
_COMMA_RE = re.compile(r"\s*,\s*")


def _normalize_segment(text: str) -> str:
    text = _WHITESPACE_RE.sub(" ", text)
    text = _CHILD_RE.sub(" > ", text)
    text = _COMMA_RE.sub(", ", text)
    # adjacent combinators leave doubled spaces behind
    return _WHITESPACE_RE.sub(" ", text)


def normalize(selector: str) -> str:
    """Return the canonical form of *selector*. Idempotent."""
    parts = _QUOTED_RE.split(selector)
    for i in range(0, len(parts), 2):
        parts[i] = _normalize_segment(parts[i])
    return "".join(parts).strip()


def selectors_match(a: str, b: str) -> bool:
    """Case-sensitive comparison of canonical forms."""
    return normalize(a) == normalize(b)


def selector_pattern(selector: str) -> str:
    """Build a regex source matching *selector* with any combinator spacing.

    The canonical form is escaped piecewise: descendant spaces require at
    least one whitespace character, child combinators and commas accept any
    spacing, and quoted segments must match literally.
    """
    out: list[str] = []
    for i, part in enumerate(_QUOTED_RE.split(normalize(selector))):
        if i % 2:
            out.append(re.escape(part))
            continue
        for token in re.split(r"( ?> ?| ?, ?| )", part):
            if token.strip() == ">":
                out.append(r"\s*>\s*")
            elif token.strip() == ",":
                out.append(r"\s*,\s*")
            elif token == " ":
                out.append(r"\s+")
            elif token:
                out.append(re.escape(token))
    return "".join(out)
