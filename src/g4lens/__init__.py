"""g4lens: static analysis for ANTLR4 grammars.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import g4lens

    result = g4lens.analyze('''
        grammar Expr;
        expr : expr '+' term | term ;
        term : NUMBER ;
        NUMBER : [0-9]+ ;
    ''')

    result.summary.total_rules
    3
    [m.name for m in result.complexity if m.directly_recursive]
    ['expr']

    # Editor overlays for the findings
    decorations = g4lens.decorations(result)

    g4lens.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from g4lens.analysis.decorations import Decoration
    from g4lens.analysis.options import AnalysisOptions
    from g4lens.models import AnalysisResult


def analyze(
    source: str, options: "AnalysisOptions | None" = None, **overrides: Any
) -> "AnalysisResult":
    """Analyse ANTLR4 grammar text with the shared default analyzer.

    Parameters
    ----------
    source:
        Complete grammar source text.
    options:
        Analysis options; defaults to ``AnalysisOptions()``.
    **overrides:
        Individual option values, e.g. ``start_rule="program"``.

    Returns
    -------
    AnalysisResult
        The immutable analysis report.

    Raises
    ------
    TypeError
        If ``source`` is not a string.
    g4lens.errors.InvalidOptionsError
        If an option is unknown or has an invalid value.
    """
    from g4lens.analysis.analyzer import analyze as _analyze

    return _analyze(source, options, **overrides)


def clear_cache() -> None:
    """Drop every result cached by the shared default analyzer."""
    from g4lens.analysis.analyzer import clear_cache as _clear_cache

    _clear_cache()


def decorations(result: "AnalysisResult | None") -> list["Decoration"]:
    """Project the findings of ``result`` onto editor decorations.

    Parameters
    ----------
    result:
        A report from ``analyze``, or None.

    Returns
    -------
    list[Decoration]
        1-based source ranges with severity and hover text.
    """
    from g4lens.analysis.decorations import build_decorations

    return build_decorations(result)


__all__ = [
    "__version__",
    "analyze",
    "clear_cache",
    "decorations",
]
