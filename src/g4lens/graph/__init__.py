"""Rule reference graph."""
from __future__ import annotations

from g4lens.graph.reference_graph import (
    ReferenceGraph,
    ReferenceGraphNode,
    attach_references,
    build_reference_graph,
    unresolved_references,
)

__all__ = [
    "ReferenceGraph",
    "ReferenceGraphNode",
    "attach_references",
    "build_reference_graph",
    "unresolved_references",
]
