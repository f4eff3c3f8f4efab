from visual_inspector.stylesheet.fallback import patch_css_text
from visual_inspector.stylesheet.model import (
    AtRule,
    Block,
    CssChange,
    Declaration,
    MutationResult,
    Rule,
    StyleRuleTree,
    Verbatim,
)
from visual_inspector.stylesheet.mutate import apply_to_tree, extract_styles, mutate_css
from visual_inspector.stylesheet.parser import parse_css, serialize_tree
from visual_inspector.stylesheet.selector import normalize, selector_pattern, selectors_match

__all__ = [
    "mutate_css",
    "extract_styles",
    "apply_to_tree",
    "patch_css_text",
    "parse_css",
    "serialize_tree",
    "normalize",
    "selectors_match",
    "selector_pattern",
    "CssChange",
    "MutationResult",
    "StyleRuleTree",
    "Rule",
    "AtRule",
    "Block",
    "Declaration",
    "Verbatim",
]
