"""Shared test fixtures for g4lens.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from g4lens.analysis.analyzer import GrammarAnalyzer


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "g4lens"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def analyzer() -> GrammarAnalyzer:
    """Return an analyzer with its own empty cache."""
    return GrammarAnalyzer()


@pytest.fixture()
def expr_grammar() -> str:
    """A small combined grammar with recursion, a fragment and an unused rule."""
    return (
        "grammar Expr;\n"
        "expr : expr '+' term | term ;\n"
        "term : factor ;\n"
        "factor : ID | NUMBER | '(' expr ')' ;\n"
        "unused : NUMBER ;\n"
        "ID : LETTER+ ;\n"
        "NUMBER : [0-9]+ ;\n"
        "fragment LETTER : [a-zA-Z] ;\n"
    )


@pytest.fixture()
def critical_grammar() -> str:
    """A grammar whose start rule scores critical at a threshold of 50."""
    return (
        "grammar Test;\n"
        "veryComplex\n"
        "    : veryComplex '+' veryComplex\n"
        "    | veryComplex '-' veryComplex\n"
        "    | veryComplex '*' veryComplex\n"
        "    | veryComplex '/' veryComplex\n"
        "    | '(' veryComplex ')'\n"
        "    | ID\n"
        "    | NUMBER\n"
        "    | STRING\n"
        "    | CHAR\n"
        "    | BOOL\n"
        "    ;\n"
        "ID : [a-z]+ ;\n"
        "NUMBER : [0-9]+ ;\n"
        "STRING : '\"' .*? '\"' ;\n"
        "CHAR : '\\'' . '\\'' ;\n"
        "BOOL : 'true' | 'false' ;\n"
    )
