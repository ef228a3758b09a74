"""Test that the quickstart API works for g4lens."""
from __future__ import annotations


def test_quickstart_analyze_import() -> None:
    import g4lens

    assert callable(g4lens.analyze)
    assert callable(g4lens.clear_cache)
    assert callable(g4lens.decorations)


def test_quickstart_version(package_name: str, expected_version: str) -> None:
    import importlib

    module = importlib.import_module(package_name)
    assert module.__version__ == expected_version


def test_quickstart_analyze_and_summarize() -> None:
    import g4lens

    g4lens.clear_cache()
    result = g4lens.analyze(
        "grammar Expr;\n"
        "expr : expr '+' term | term ;\n"
        "term : NUMBER ;\n"
        "NUMBER : [0-9]+ ;\n"
    )
    assert result.summary.total_rules == 3
    assert [m.name for m in result.complexity if m.directly_recursive] == ["expr"]


def test_quickstart_decorations() -> None:
    import g4lens

    g4lens.clear_cache()
    result = g4lens.analyze("prog : ID ;\nextra : ID ;\nID : [a-z]+ ;\n")
    decorations = g4lens.decorations(result)
    assert isinstance(decorations, list)
    assert any(d.source.value == "unused" for d in decorations)


def test_quickstart_decorations_of_nothing() -> None:
    import g4lens

    assert g4lens.decorations(None) == []
