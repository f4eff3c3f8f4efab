"""Style rule tree: an explicit, ephemeral view of one CSS fragment.

A tree is built per mutation or read call and never cached. Nodes carry the
exact source slice they were parsed from (``raw``); a node rebuilt by an
edit has ``raw=None`` and is rendered from its parts instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class CssChange:
    """A single declaration intent: set *property* to *value* on *selector*."""

    selector: str
    property: str
    value: str


@dataclass(frozen=True)
class MutationResult:
    modified: bool
    content: str


@dataclass(frozen=True)
class Verbatim:
    """Source text passed through unchanged (whitespace, comments, other at-rules)."""

    text: str


@dataclass(frozen=True)
class Declaration:
    name: str
    value: str
    important: bool = False

    def render(self) -> str:
        suffix = " !important" if self.important else ""
        return f"{self.name}: {self.value}{suffix};"


@dataclass(frozen=True)
class Block:
    """A declaration block, plus the layout needed to re-render it."""

    items: tuple[Declaration | Verbatim, ...]
    multiline: bool = True
    indent: str = "  "
    closing_indent: str = ""

    @property
    def declarations(self) -> tuple[Declaration, ...]:
        return tuple(item for item in self.items if isinstance(item, Declaration))


@dataclass(frozen=True)
class Rule:
    prelude: str  # selector text as written, including whitespace before "{"
    block: Block
    raw: str | None = None

    @property
    def selector(self) -> str:
        return self.prelude.strip()


@dataclass(frozen=True)
class AtRule:
    """A grouping at-rule (``@media`` and friends) whose block holds rules."""

    header: str  # "@media screen " up to, not including, "{"
    children: tuple[Node, ...]
    raw: str | None = None


Node = Union[Rule, AtRule, Verbatim]


@dataclass(frozen=True)
class StyleRuleTree:
    nodes: tuple[Node, ...]

    def rules(self) -> list[Rule]:
        """Every rule in document order, including rules nested in at-rules."""
        found: list[Rule] = []
        _collect_rules(self.nodes, found)
        return found


def _collect_rules(nodes: tuple[Node, ...], found: list[Rule]) -> None:
    for node in nodes:
        if isinstance(node, Rule):
            found.append(node)
        elif isinstance(node, AtRule):
            _collect_rules(node.children, found)
