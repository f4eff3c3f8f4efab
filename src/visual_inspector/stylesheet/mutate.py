"""CSS Mutation Engine: set one declaration on every rule matching a selector.

The structured path parses the fragment, edits a new tree and serializes it.
When the fragment cannot be parsed the whole call is handed to the text
patcher in ``visual_inspector.stylesheet.fallback``.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from visual_inspector.errors import CssParseError
from visual_inspector.stylesheet.fallback import patch_css_text
from visual_inspector.stylesheet.model import (
    AtRule,
    Block,
    CssChange,
    Declaration,
    MutationResult,
    Node,
    Rule,
    StyleRuleTree,
)
from visual_inspector.stylesheet.parser import parse_css, parse_value, serialize_tree
from visual_inspector.stylesheet.selector import normalize

__all__ = ["mutate_css", "extract_styles", "apply_to_tree"]

log = logging.getLogger(__name__)


def _same_property(name: str, wanted: str) -> bool:
    # Custom properties are case-sensitive, standard ones are not.
    if name.startswith("--"):
        return name == wanted
    return name.lower() == wanted.lower()


def _set_declaration(block: Block, change: CssChange, value: str, important: bool) -> Block:
    found = False
    items = []
    for item in block.items:
        if isinstance(item, Declaration) and _same_property(item.name, change.property):
            item = Declaration(name=item.name, value=value, important=important)
            found = True
        items.append(item)
    if not found:
        items.append(Declaration(name=change.property, value=value, important=important))
    return replace(block, items=tuple(items))


def _apply_to_nodes(
    nodes: tuple[Node, ...], target: str, change: CssChange, value: str, important: bool
) -> tuple[tuple[Node, ...], bool]:
    modified = False
    out: list[Node] = []
    for node in nodes:
        if isinstance(node, Rule) and normalize(node.prelude) == target:
            node = Rule(
                prelude=node.prelude,
                block=_set_declaration(node.block, change, value, important),
            )
            modified = True
        elif isinstance(node, AtRule):
            children, changed = _apply_to_nodes(node.children, target, change, value, important)
            if changed:
                node = AtRule(header=node.header, children=children)
                modified = True
        out.append(node)
    return tuple(out), modified


def apply_to_tree(tree: StyleRuleTree, change: CssChange) -> tuple[StyleRuleTree, bool]:
    """Return a new tree with *change* applied, and whether anything changed.

    Raises CssParseError if ``change.value`` is not a usable CSS value.
    """
    value, important = parse_value(change.value)
    nodes, modified = _apply_to_nodes(
        tree.nodes, normalize(change.selector), change, value, important
    )
    return StyleRuleTree(nodes=nodes), modified


def mutate_css(css: str, change: CssChange) -> MutationResult:
    """Apply *change* to the CSS fragment *css*.

    Every rule whose selector canonically matches gets the declaration
    updated in place, or appended when the block lacks it. Without a
    matching rule the content is returned unchanged with ``modified=False``.
    """
    try:
        tree, modified = apply_to_tree(parse_css(css), change)
    except CssParseError as exc:
        log.debug("Structured parse failed (%s); falling back to text patch", exc)
        return patch_css_text(css, change)
    if not modified:
        return MutationResult(modified=False, content=css)
    content = serialize_tree(tree)
    if "\r\n" in css:
        content = content.replace("\n", "\r\n")
    return MutationResult(modified=True, content=content)


def extract_styles(css: str, selector: str) -> dict[str, str]:
    """Declarations of every rule matching *selector*, later rules winning.

    Returns an empty mapping when the fragment cannot be parsed.
    """
    try:
        tree = parse_css(css)
    except CssParseError as exc:
        log.debug("Skipping unparseable CSS while reading styles: %s", exc)
        return {}
    target = normalize(selector)
    styles: dict[str, str] = {}
    for rule in tree.rules():
        if normalize(rule.prelude) != target:
            continue
        for decl in rule.block.declarations:
            styles[decl.name] = decl.value
    return styles
