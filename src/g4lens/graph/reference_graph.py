"""Reference graph: which rules mention which.

Nodes exist only for rules defined in the grammar.  A rule body that
mentions an undefined name (an imported token, a ``tokens {}`` entry, a
typo) keeps that name in its own ``references`` but creates no edge, so
dangling names never affect unused-rule or recursion results.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace

from g4lens.grammar.references import extract_symbol_references
from g4lens.models import RuleInfo, RuleType, UnresolvedReference

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReferenceGraphNode:
    """One rule in the reference graph.

    ``references`` and ``referenced_by`` keep insertion order.
    """

    name: str
    type: RuleType
    references: tuple[str, ...] = ()
    referenced_by: tuple[str, ...] = ()


class ReferenceGraph(Mapping[str, ReferenceGraphNode]):
    """Read-only mapping from rule name to ``ReferenceGraphNode``."""

    __slots__ = ("_nodes",)

    def __init__(self, nodes: Iterable[ReferenceGraphNode] = ()) -> None:
        self._nodes: dict[str, ReferenceGraphNode] = {node.name: node for node in nodes}

    def __getitem__(self, name: str) -> ReferenceGraphNode:
        return self._nodes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"ReferenceGraph({len(self._nodes)} nodes)"

    def references_of(self, name: str) -> tuple[str, ...]:
        """Return the names ``name`` references, or ``()`` for unknown names."""
        node = self._nodes.get(name)
        return node.references if node is not None else ()

    def reachable_from(self, name: str) -> set[str]:
        """Return every node reachable from ``name`` in one or more steps.

        Only defined rules are followed.  ``name`` itself is included only
        when it lies on a cycle.
        """
        reached: set[str] = set()
        stack = [ref for ref in self.references_of(name) if ref in self._nodes]
        while stack:
            current = stack.pop()
            if current in reached:
                continue
            reached.add(current)
            stack.extend(
                ref for ref in self._nodes[current].references
                if ref in self._nodes and ref not in reached
            )
        return reached


def build_reference_graph(rules: Iterable[RuleInfo]) -> ReferenceGraph:
    """Build the reference graph from the references extracted per rule.

    Each rule's own references are recorded in full.  An edge (and the
    matching ``referenced_by`` entry) exists only when the referenced
    name is itself a rule.
    """
    rules = list(rules)
    # Insertion-ordered sets.
    forward: dict[str, dict[str, None]] = {rule.name: {} for rule in rules}
    backward: dict[str, dict[str, None]] = {rule.name: {} for rule in rules}

    for rule in rules:
        for ref in rule.references:
            forward[rule.name].setdefault(ref, None)
            if ref in backward:
                backward[ref].setdefault(rule.name, None)

    graph = ReferenceGraph(
        ReferenceGraphNode(
            name=rule.name,
            type=rule.type,
            references=tuple(forward[rule.name]),
            referenced_by=tuple(backward[rule.name]),
        )
        for rule in rules
    )
    logger.debug("Built reference graph with %d node(s)", len(graph))
    return graph


def attach_references(rules: Iterable[RuleInfo], graph: ReferenceGraph) -> list[RuleInfo]:
    """Return copies of ``rules`` carrying the graph's final adjacency."""
    attached: list[RuleInfo] = []
    for rule in rules:
        node = graph.get(rule.name)
        if node is None:
            attached.append(rule)
            continue
        attached.append(replace(rule, references=node.references, referenced_by=node.referenced_by))
    return attached


def unresolved_references(
    rules: Iterable[RuleInfo], graph: ReferenceGraph
) -> list[UnresolvedReference]:
    """List every (rule, name) pair whose name is not a defined rule.

    Names are re-read from each rule's text with
    ``extract_symbol_references``, so character set contents, labels and
    lexer commands are not mistaken for rule names.  Tokens declared in
    ``tokens {}`` blocks or imported grammars show up here as well, since
    neither defines a rule.
    """
    unresolved: list[UnresolvedReference] = []
    for rule in rules:
        for ref in extract_symbol_references(rule.text):
            if ref not in graph:
                unresolved.append(UnresolvedReference(
                    rule=rule.name,
                    name=ref,
                    line=rule.line,
                    column=rule.column,
                ))
    return unresolved
