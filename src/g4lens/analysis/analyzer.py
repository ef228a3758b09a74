"""GrammarAnalyzer: the public entry point of the analysis pipeline.

One ``analyze()`` call runs, in order::

    strip comments/headers -> extract rules -> build reference graph
    -> unused rules -> complexity -> performance issues -> ambiguity hints
    -> summary

and returns an immutable ``AnalysisResult``.  Results are cached per
analyzer instance, keyed by the grammar hash together with the options
used, so the same grammar analysed with different options is computed
separately.
"""
from __future__ import annotations

import logging
import time
from typing import Any

from g4lens.analysis.ambiguity import detect_ambiguity_hints
from g4lens.analysis.cache import AnalysisCache
from g4lens.analysis.complexity import calculate_complexity
from g4lens.analysis.options import AnalysisOptions
from g4lens.analysis.performance import detect_performance_issues
from g4lens.analysis.summary import grammar_hash, summarize
from g4lens.analysis.unused import detect_unused_rules
from g4lens.grammar.rules import extract_rules
from g4lens.grammar.stripper import strip
from g4lens.graph.reference_graph import (
    attach_references,
    build_reference_graph,
    unresolved_references,
)
from g4lens.models import AnalysisResult

logger = logging.getLogger(__name__)


class GrammarAnalyzer:
    """Analyse ANTLR4 grammar text.

    Parameters
    ----------
    cache:
        Result cache to use.  Each analyzer gets its own
        ``AnalysisCache`` by default.

    Example
    -------
    ::

        analyzer = GrammarAnalyzer()
        result = analyzer.analyze(source, start_rule="program")
        for unused in result.unused_rules:
            print(unused.name, unused.suggestion)
    """

    def __init__(self, cache: AnalysisCache | None = None) -> None:
        self._cache = cache if cache is not None else AnalysisCache()

    @property
    def cache(self) -> AnalysisCache:
        return self._cache

    def analyze(
        self,
        source: str,
        options: AnalysisOptions | None = None,
        **overrides: Any,
    ) -> AnalysisResult:
        """Analyse ``source`` and return the report.

        Parameters
        ----------
        source:
            Grammar text.  Any string is accepted; text without rule
            definitions yields an empty report.
        options:
            Analysis options; defaults to ``AnalysisOptions()``.
        **overrides:
            Individual option values applied on top of ``options``, e.g.
            ``detect_ambiguity=False`` or ``startRule="program"``.

        Returns
        -------
        AnalysisResult

        Raises
        ------
        TypeError
            If ``source`` is not a string.
        InvalidOptionsError
            If an override names an unknown option or has a bad value.
        """
        if not isinstance(source, str):
            raise TypeError(f"source must be a str, got {type(source).__name__}")
        options = options or AnalysisOptions()
        if overrides:
            options = options.merged(overrides)

        digest = grammar_hash(source)
        key = (digest, options)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        result = self._run(source, options, digest)
        self._cache.put(key, result)
        return result

    def clear_cache(self) -> None:
        """Drop every cached result."""
        self._cache.clear()

    def _run(self, source: str, options: AnalysisOptions, digest: str) -> AnalysisResult:
        started = time.perf_counter()

        rules = extract_rules(source, strip(source))
        graph = build_reference_graph(rules)
        rules = attach_references(rules, graph)

        unused = (
            detect_unused_rules(rules, graph, options.start_rule)
            if options.detect_unused_rules
            else []
        )

        # Performance checks need metrics even when they are not reported.
        metrics = calculate_complexity(rules, graph, options)
        complexity = metrics if options.analyze_complexity else []

        issues = (
            detect_performance_issues(rules, graph, metrics)
            if options.detect_performance_issues
            else []
        )
        hints = detect_ambiguity_hints(rules) if options.detect_ambiguity else []
        unresolved = (
            unresolved_references(rules, graph)
            if options.detect_unresolved_references
            else []
        )

        summary = summarize(rules, unused, complexity, issues, hints)
        duration = (time.perf_counter() - started) * 1000.0
        logger.debug(
            "Analysed grammar %s: %d rule(s), %d issue(s) in %.2f ms",
            digest,
            len(rules),
            len(issues),
            duration,
        )

        return AnalysisResult(
            summary=summary,
            rules=tuple(rules),
            unused_rules=tuple(unused),
            complexity=tuple(complexity),
            performance_issues=tuple(issues),
            ambiguity_hints=tuple(hints),
            timestamp=time.time(),
            duration=duration,
            grammar_hash=digest,
            unresolved_references=tuple(unresolved),
        )


default_analyzer = GrammarAnalyzer()


def analyze(source: str, options: AnalysisOptions | None = None, **overrides: Any) -> AnalysisResult:
    """Analyse ``source`` with the shared default analyzer.

    See ``GrammarAnalyzer.analyze`` for the parameters.
    """
    return default_analyzer.analyze(source, options, **overrides)


def clear_cache() -> None:
    """Clear the shared default analyzer's cache."""
    default_analyzer.clear_cache()
