"""Regex text patcher used when a CSS fragment cannot be parsed.

Declaration blocks never nest, so a block is everything from the selector's
``{`` up to the next ``}``. The selector must make up the whole rule prelude:
``.btn`` never matches ``a.btn`` or ``div .btn``.
"""

from __future__ import annotations

import re

from visual_inspector.stylesheet.model import CssChange, MutationResult
from visual_inspector.stylesheet.selector import selector_pattern

__all__ = ["patch_css_text"]


def _block_regex(selector: str) -> re.Pattern[str]:
    return re.compile(
        r"(?:^|(?<=[{};])|(?<=\*/))"
        r"(?P<head>\s*" + selector_pattern(selector) + r"\s*\{)"
        r"(?P<body>[^}]*)\}"
    )


def _property_regex(prop: str) -> re.Pattern[str]:
    # Anchored at a declaration boundary so "color" skips "background-color".
    return re.compile(
        r"(?<=[;{])(?P<ws>\s*)" + re.escape(prop) + r"\s*:[^;}]*?(?:;|(?=\s*$))",
        re.IGNORECASE,
    )


def patch_css_text(css: str, change: CssChange) -> MutationResult:
    """Rewrite or add ``change.property`` in every block for ``change.selector``."""
    block_re = _block_regex(change.selector)
    prop_re = _property_regex(change.property)
    declaration = f"{change.property}: {change.value};"
    newline = "\r\n" if "\r\n" in css else "\n"
    modified = False

    def rewrite(match: re.Match[str]) -> str:
        nonlocal modified
        modified = True
        body = match.group("body")
        # Prefix "{" so the first declaration sits on a boundary too.
        scoped = "{" + body
        if prop_re.search(scoped):
            body = prop_re.sub(lambda m: m.group("ws") + declaration, scoped)[1:]
        else:
            body = f"{body.rstrip()}{newline}  {declaration}{newline}"
        return match.group("head") + body + "}"

    content = block_re.sub(rewrite, css)
    return MutationResult(modified=modified, content=content)
