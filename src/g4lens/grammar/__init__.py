"""Lexical layer: comment and header stripping, rule and reference extraction."""
from __future__ import annotations

from g4lens.grammar.keywords import ANTLR_KEYWORDS, is_keyword
from g4lens.grammar.references import extract_references, extract_symbol_references
from g4lens.grammar.rules import extract_rules
from g4lens.grammar.stripper import strip

__all__ = [
    "ANTLR_KEYWORDS",
    "is_keyword",
    "extract_references",
    "extract_symbol_references",
    "extract_rules",
    "strip",
]
