"""Parse CSS fragments into a StyleRuleTree with tinycss2, and render them back.

Unedited nodes keep the exact text they were sliced from, so serializing a
tree only changes the rules an edit actually touched.
"""

from __future__ import annotations

import re

import tinycss2

from visual_inspector.errors import CssParseError
from visual_inspector.stylesheet.model import (
    AtRule,
    Block,
    Declaration,
    Node,
    Rule,
    StyleRuleTree,
    Verbatim,
)

__all__ = ["parse_css", "parse_value", "serialize_tree", "render_block"]

# At-rules whose block contains qualified rules rather than declarations.
GROUPING_AT_RULES = frozenset(
    {"media", "supports", "layer", "container", "document", "-moz-document", "scope"}
)

_IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)
_INDENT_RE = re.compile(r"\n([ \t]*)\S")
_CLOSING_INDENT_RE = re.compile(r"\n([ \t]*)$")


def _normalize_newlines(css: str) -> str:
    # tinycss2 reports positions against this form of the text
    return css.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n")


class _Source:
    """Maps tinycss2 (line, column) positions back to string offsets."""

    def __init__(self, text: str) -> None:
        self.text = text
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def offset(self, node) -> int:
        return self._line_starts[node.source_line - 1] + node.source_column - 1


def _raise_error(node) -> None:
    raise CssParseError(
        f"CSS parse error: {node.message}",
        line=node.source_line,
        column=node.source_column,
    )


def parse_css(css: str) -> StyleRuleTree:
    """Parse *css* into a StyleRuleTree.

    Raises CssParseError on any syntax error tinycss2 reports, either at
    rule level or inside a declaration block.
    """
    text = _normalize_newlines(css)
    source = _Source(text)
    raw_nodes = tinycss2.parse_stylesheet(text, skip_comments=False, skip_whitespace=False)
    nodes = _build_nodes(raw_nodes, source, len(text))
    # Tokens tinycss2 drops at top level (e.g. "<!--") still belong to the text.
    first = source.offset(raw_nodes[0]) if raw_nodes else len(text)
    if first > 0:
        nodes = (Verbatim(text[:first]),) + nodes
    return StyleRuleTree(nodes=nodes)


def _build_nodes(raw_nodes: list, source: _Source, end: int) -> tuple[Node, ...]:
    nodes: list[Node] = []
    offsets = [source.offset(n) for n in raw_nodes] + [end]
    for i, raw_node in enumerate(raw_nodes):
        node_start, node_end = offsets[i], offsets[i + 1]
        raw = source.text[node_start:node_end]
        if raw_node.type == "error":
            _raise_error(raw_node)
        elif raw_node.type == "qualified-rule":
            nodes.append(_build_rule(raw_node, raw))
        elif raw_node.type == "at-rule" and _is_grouping(raw_node):
            nodes.append(_build_at_rule(raw_node, source, node_end, raw))
        else:
            nodes.append(Verbatim(raw))
    return tuple(nodes)


def _is_grouping(at_rule) -> bool:
    return at_rule.content is not None and at_rule.lower_at_keyword in GROUPING_AT_RULES


def _build_at_rule(at_rule, source: _Source, end: int, raw: str) -> AtRule:
    children = tinycss2.parse_rule_list(
        at_rule.content, skip_comments=False, skip_whitespace=False
    )
    # The block's closing brace belongs to the at-rule, not its last child.
    inner_end = end - 1 if raw.endswith("}") else end
    return AtRule(
        header="@" + at_rule.at_keyword + tinycss2.serialize(at_rule.prelude),
        children=_build_nodes(children, source, inner_end),
        raw=raw,
    )


def _build_rule(rule, raw: str) -> Rule:
    content_text = tinycss2.serialize(rule.content)
    items: list[Declaration | Verbatim] = []
    for item in tinycss2.parse_blocks_contents(
        rule.content, skip_comments=False, skip_whitespace=True
    ):
        if item.type == "error":
            _raise_error(item)
        elif item.type == "declaration":
            items.append(
                Declaration(
                    name=item.name,
                    value=tinycss2.serialize(item.value).strip(),
                    important=item.important,
                )
            )
        else:
            # comments and nested rules ride along untouched
            items.append(Verbatim(tinycss2.serialize([item]).strip()))

    indent_match = _INDENT_RE.search(content_text)
    closing_match = _CLOSING_INDENT_RE.search(content_text)
    block = Block(
        items=tuple(items),
        multiline="\n" in content_text,
        indent=indent_match.group(1) if indent_match else "  ",
        closing_indent=closing_match.group(1) if closing_match else "",
    )
    return Rule(prelude=tinycss2.serialize(rule.prelude), block=block, raw=raw)


def parse_value(value: str) -> tuple[str, bool]:
    """Parse a declaration value, returning ``(value_text, important)``.

    Raises CssParseError for values that cannot stand as a declaration value.
    """
    important = bool(_IMPORTANT_RE.search(value))
    if important:
        value = _IMPORTANT_RE.sub("", value)
    tokens = tinycss2.parse_component_value_list(value, skip_comments=True)
    if not any(t.type not in ("whitespace", "comment") for t in tokens):
        raise CssParseError(f"Empty CSS value: {value!r}")
    for token in tokens:
        if token.type == "error":
            _raise_error(token)
        if token.type == "{} block" or (
            token.type == "literal" and token.value in (";", "}", "!")
        ):
            raise CssParseError(f"Invalid CSS value: {value!r}")
    return tinycss2.serialize(tokens).strip(), important


def render_block(block: Block) -> str:
    lines = [item.render() if isinstance(item, Declaration) else item.text for item in block.items]
    if not lines:
        return " "
    if block.multiline:
        body = "".join(f"\n{block.indent}{line}" for line in lines)
        return f"{body}\n{block.closing_indent}"
    return " " + " ".join(lines) + " "


def _render_node(node: Node) -> str:
    if isinstance(node, Verbatim):
        return node.text
    if node.raw is not None:
        return node.raw
    if isinstance(node, Rule):
        return node.prelude + "{" + render_block(node.block) + "}"
    return node.header + "{" + "".join(_render_node(child) for child in node.children) + "}"


def serialize_tree(tree: StyleRuleTree) -> str:
    return "".join(_render_node(node) for node in tree.nodes)
