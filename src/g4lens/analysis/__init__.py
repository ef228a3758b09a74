"""g4lens analysis module.

Exports the ``GrammarAnalyzer`` class, the ``analyze`` and ``clear_cache``
convenience functions, ``AnalysisOptions``, the result cache, and
editor decorations.
"""
from __future__ import annotations

from g4lens.analysis.analyzer import GrammarAnalyzer, analyze, clear_cache
from g4lens.analysis.cache import AnalysisCache, CacheEntry
from g4lens.analysis.decorations import Decoration, DecorationSource, build_decorations
from g4lens.analysis.options import AnalysisOptions, load_options

__all__ = [
    "GrammarAnalyzer",
    "analyze",
    "clear_cache",
    "AnalysisCache",
    "CacheEntry",
    "AnalysisOptions",
    "load_options",
    "Decoration",
    "DecorationSource",
    "build_decorations",
]
