"""Unit tests for g4lens.analysis.analyzer: the full pipeline, caching,
option toggles and the module-level convenience functions.
"""
from __future__ import annotations

import pytest

import g4lens
from g4lens.analysis.analyzer import GrammarAnalyzer, default_analyzer
from g4lens.analysis.cache import AnalysisCache
from g4lens.analysis.options import AnalysisOptions
from g4lens.analysis.summary import grammar_hash
from g4lens.errors import InvalidOptionsError
from g4lens.models import AnalysisResult, ComplexityScore, RuleType

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_SIMPLE = "\ngrammar Test;\nexpr : ID ;\nID : [a-z]+ ;\n"

_AMBIGUOUS = "\ngrammar Test;\nstmt : 'return' expr | 'return' ;\nexpr : ID ;\nID : [a-z]+ ;\n"


def _findings(result: AnalysisResult) -> tuple[object, ...]:
    return (
        result.rules,
        result.unused_rules,
        result.complexity,
        result.performance_issues,
        result.ambiguity_hints,
    )


# ===========================================================================
# Rule extraction through the pipeline
# ===========================================================================


class TestParsing:
    def test_simple_grammar(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze(_SIMPLE)
        assert len(result.rules) == 2
        assert result.rule("expr").type is RuleType.PARSER
        assert result.rule("ID").type is RuleType.LEXER

    def test_fragment(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze(
            "grammar Test;\nexpr : ID ;\nID : LETTER+ ;\nfragment LETTER : [a-zA-Z] ;\n"
        )
        assert result.rule("LETTER").type is RuleType.FRAGMENT

    def test_alternative_counting(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze(
            "stmt: 'return' expr | 'return' ;\nfactor: NUMBER | '(' expr ')' ;\n"
        )
        assert result.rule("stmt").alternative_count == 2
        assert result.rule("factor").alternative_count == 2

    def test_references_attached(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze(
            "grammar Test;\n"
            "expr : term (('+' | '-') term)* ;\n"
            "term : factor (('*' | '/') factor)* ;\n"
            "factor : ID | NUMBER | '(' expr ')' ;\n"
            "ID : [a-z]+ ;\n"
            "NUMBER : [0-9]+ ;\n"
        )
        assert "term" in result.rule("expr").references
        assert "factor" in result.rule("term").references
        assert "expr" in result.rule("term").referenced_by
        assert set(result.rule("factor").references) >= {"ID", "NUMBER", "expr"}

    def test_lookup_helpers(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze(_SIMPLE)
        assert result.rule("missing") is None
        assert result.metrics_for("expr").name == "expr"
        assert result.metrics_for("missing") is None


# ===========================================================================
# Acceptance properties
# ===========================================================================


class TestIdempotence:
    def test_same_input_same_report(self, analyzer: GrammarAnalyzer, expr_grammar: str) -> None:
        first = analyzer.analyze(expr_grammar)
        second = analyzer.analyze(expr_grammar)
        assert first.grammar_hash == second.grammar_hash
        assert _findings(first) == _findings(second)

    def test_uncached_runs_agree(self, expr_grammar: str) -> None:
        first = GrammarAnalyzer().analyze(expr_grammar)
        second = GrammarAnalyzer().analyze(expr_grammar)
        assert first is not second
        assert _findings(first) == _findings(second)


class TestHashSensitivity:
    def test_one_token_change(self, analyzer: GrammarAnalyzer) -> None:
        first = analyzer.analyze("expr : ID ;\nID : [a-z]+ ;\n")
        second = analyzer.analyze("expr : ID ;\nID : [a-y]+ ;\n")
        assert first.grammar_hash != second.grammar_hash

    def test_hash_matches_source(self, analyzer: GrammarAnalyzer) -> None:
        assert analyzer.analyze(_SIMPLE).grammar_hash == grammar_hash(_SIMPLE)


class TestUnusedRules:
    def test_start_rule_exemption(self, analyzer: GrammarAnalyzer) -> None:
        source = (
            "expr: term ; term: factor ; factor: ID ; unused: NUMBER ; "
            "ID:[a-z]+; NUMBER:[0-9]+;"
        )
        names = [u.name for u in analyzer.analyze(source, start_rule="expr").unused_rules]
        assert "unused" in names
        assert "expr" not in names

    def test_start_rule_not_reported(self, analyzer: GrammarAnalyzer) -> None:
        source = (
            "grammar Test;\n"
            "program : statement* ;\n"
            "statement : expr ';' ;\n"
            "expr : ID ;\n"
            "ID : [a-z]+ ;\n"
        )
        result = analyzer.analyze(source, start_rule="program")
        assert "program" not in [u.name for u in result.unused_rules]

    def test_fragment_detection(self, analyzer: GrammarAnalyzer) -> None:
        source = (
            "grammar Test;\n"
            "expr : ID ;\n"
            "ID : LETTER+ ;\n"
            "fragment LETTER : [a-zA-Z] ;\n"
            "fragment UNUSED_FRAG : '_' ;\n"
        )
        result = analyzer.analyze(source, start_rule="expr")
        fragments = {u.name: u.type for u in result.unused_rules if u.type is RuleType.FRAGMENT}
        assert fragments == {"UNUSED_FRAG": RuleType.FRAGMENT}


class TestRecursion:
    def test_direct(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze("expr: expr '+' term | term ;")
        assert result.metrics_for("expr").directly_recursive

    def test_indirect(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze("a: b; b: c; c: a;")
        metrics = [result.metrics_for(name) for name in ("a", "b", "c")]
        assert any(m.indirectly_recursive for m in metrics)
        assert not any(m.directly_recursive for m in metrics)


class TestAmbiguity:
    def test_grouping(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze("stmt: 'return' expr | 'return' ;")
        hints = [h for h in result.ambiguity_hints if h.rule == "stmt"]
        assert len(hints) == 1
        assert set(hints[0].alternative_indices) == {0, 1}
        assert hints[0].common_prefix == ("'return'",)


class TestPartition:
    @pytest.mark.parametrize(
        ("source", "counts"),
        [
            (
                "grammar T;\nexpr : term ;\nterm : factor ;\nfactor : ID ;\nunused : NUMBER ;\n"
                "ID : [a-z]+ ;\nNUMBER : [0-9]+ ;\nfragment LETTER : [a-zA-Z] ;\n",
                (4, 2, 1),
            ),
            (
                "lexer grammar TestLexer;\nID : [a-z]+ ;\nNUMBER : [0-9]+ ;\n"
                "WS : [ \\t\\r\\n]+ -> skip ;\n",
                (0, 3, 0),
            ),
            (
                "parser grammar TestParser;\noptions { tokenVocab = TestLexer; }\nexpr : ID ;\n",
                (1, 0, 0),
            ),
        ],
    )
    def test_counts_add_up(
        self, analyzer: GrammarAnalyzer, source: str, counts: tuple[int, int, int]
    ) -> None:
        summary = analyzer.analyze(source).summary
        assert (summary.parser_rules, summary.lexer_rules, summary.fragment_rules) == counts
        assert summary.total_rules == sum(counts)


class TestEdgeCases:
    @pytest.mark.parametrize(
        "source",
        [
            "",
            "// just a comment",
            "\n// This is a comment\n/* This is a\n   multi-line comment */\n",
            "   \n\t\n",
        ],
    )
    def test_nothing_to_analyze(self, analyzer: GrammarAnalyzer, source: str) -> None:
        result = analyzer.analyze(source)
        assert result.rules == ()
        assert result.summary.total_rules == 0
        assert not result.has_errors

    @pytest.mark.parametrize(
        "source",
        [
            "a : ( B ;",
            "a : 'unterminated ;\nb : C ;",
            "a : { unbalanced ;",
            "a : B ) ) ;",
            "/* never closed\na : B ;",
            ":::;;;|||",
        ],
    )
    def test_malformed_input_does_not_raise(
        self, analyzer: GrammarAnalyzer, source: str
    ) -> None:
        result = analyzer.analyze(source)
        assert result.summary.total_rules == len(result.rules)

    def test_non_string_rejected(self, analyzer: GrammarAnalyzer) -> None:
        with pytest.raises(TypeError):
            analyzer.analyze(b"expr : ID ;")  # type: ignore[arg-type]


# ===========================================================================
# Cache
# ===========================================================================


class TestCaching:
    def test_cached_result_is_reused(self, analyzer: GrammarAnalyzer) -> None:
        assert analyzer.analyze(_SIMPLE) is analyzer.analyze(_SIMPLE)

    def test_changed_grammar_recomputes(self, analyzer: GrammarAnalyzer) -> None:
        first = analyzer.analyze(_SIMPLE)
        second = analyzer.analyze(_SIMPLE.replace("expr : ID ;", "expr : ID | NUMBER ;"))
        assert first.grammar_hash != second.grammar_hash

    def test_clear_cache(self, analyzer: GrammarAnalyzer) -> None:
        first = analyzer.analyze(_SIMPLE)
        analyzer.clear_cache()
        assert len(analyzer.cache) == 0
        assert analyzer.analyze(_SIMPLE) is not first

    def test_eleventh_grammar_evicts_first(self, analyzer: GrammarAnalyzer) -> None:
        sources = [f"rule{i} : TOKEN{i} ;\n" for i in range(11)]
        first = analyzer.analyze(sources[0])
        for source in sources[1:]:
            analyzer.analyze(source)
        assert len(analyzer.cache) == 10
        assert (grammar_hash(sources[0]), AnalysisOptions()) not in analyzer.cache
        assert analyzer.analyze(sources[0]) is not first

    def test_options_are_part_of_the_key(self, analyzer: GrammarAnalyzer) -> None:
        with_hints = analyzer.analyze(_AMBIGUOUS)
        without_hints = analyzer.analyze(_AMBIGUOUS, detect_ambiguity=False)
        assert with_hints.ambiguity_hints
        assert without_hints.ambiguity_hints == ()
        assert analyzer.analyze(_AMBIGUOUS) is with_hints

    def test_injected_cache(self) -> None:
        cache = AnalysisCache(max_entries=1)
        analyzer = GrammarAnalyzer(cache=cache)
        analyzer.analyze(_SIMPLE)
        assert analyzer.cache is cache
        assert len(cache) == 1


# ===========================================================================
# Option toggles
# ===========================================================================


class TestOptionToggles:
    def test_detect_unused_rules(self, analyzer: GrammarAnalyzer) -> None:
        source = "expr : ID ;\nunused : NUMBER ;\nID : [a-z]+ ;\nNUMBER : [0-9]+ ;\n"
        assert analyzer.analyze(source, start_rule="expr").unused_rules
        result = analyzer.analyze(source, detect_unused_rules=False, start_rule="expr")
        assert result.unused_rules == ()

    def test_analyze_complexity(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze(_SIMPLE, analyze_complexity=False)
        assert result.complexity == ()
        assert result.summary.high_complexity_rules == 0

    def test_detect_performance_issues(self, analyzer: GrammarAnalyzer, critical_grammar: str) -> None:
        assert analyzer.analyze(critical_grammar, critical_complexity_threshold=50).performance_issues
        result = analyzer.analyze(
            critical_grammar, critical_complexity_threshold=50, detect_performance_issues=False
        )
        assert result.performance_issues == ()

    def test_detect_ambiguity(self, analyzer: GrammarAnalyzer) -> None:
        assert analyzer.analyze(_AMBIGUOUS, detect_ambiguity=False).ambiguity_hints == ()

    def test_performance_issues_without_reported_complexity(
        self, analyzer: GrammarAnalyzer, critical_grammar: str
    ) -> None:
        result = analyzer.analyze(
            critical_grammar, analyze_complexity=False, critical_complexity_threshold=50
        )
        assert result.complexity == ()
        assert "Critical complexity" in [i.issue for i in result.performance_issues]

    def test_complexity_and_performance_both_off(
        self, analyzer: GrammarAnalyzer, critical_grammar: str
    ) -> None:
        result = analyzer.analyze(
            critical_grammar,
            analyze_complexity=False,
            detect_performance_issues=False,
            critical_complexity_threshold=50,
        )
        assert result.complexity == ()
        assert result.performance_issues == ()

    def test_unresolved_references_opt_in(self, analyzer: GrammarAnalyzer) -> None:
        source = "expr : ID PLUS ;\nID : [a-z]+ ;\n"
        assert analyzer.analyze(source).unresolved_references == ()
        result = analyzer.analyze(source, detect_unresolved_references=True)
        assert [(u.rule, u.name) for u in result.unresolved_references if u.rule == "expr"] == [
            ("expr", "PLUS"),
        ]

    def test_options_object_and_overrides(self, analyzer: GrammarAnalyzer) -> None:
        options = AnalysisOptions(detect_ambiguity=False)
        result = analyzer.analyze(_AMBIGUOUS, options, detectAmbiguity=True)
        assert result.ambiguity_hints

    def test_unknown_override(self, analyzer: GrammarAnalyzer) -> None:
        with pytest.raises(InvalidOptionsError):
            analyzer.analyze(_SIMPLE, colour=True)


# ===========================================================================
# Report contents
# ===========================================================================


class TestReport:
    def test_summary(self, analyzer: GrammarAnalyzer, expr_grammar: str) -> None:
        result = analyzer.analyze(expr_grammar, start_rule="expr")
        summary = result.summary
        assert summary.total_rules == 7
        assert (summary.parser_rules, summary.lexer_rules, summary.fragment_rules) == (4, 2, 1)
        assert summary.unused_rules == 1
        assert [u.name for u in result.unused_rules] == ["unused"]
        assert summary.issues_by_severity["warning"] >= 1

    def test_critical_rule_is_an_error(self, analyzer: GrammarAnalyzer, critical_grammar: str) -> None:
        result = analyzer.analyze(critical_grammar, criticalComplexityThreshold=50)
        assert result.metrics_for("veryComplex").score is ComplexityScore.CRITICAL
        assert result.summary.issues_by_severity["error"] == 1
        assert result.has_errors

    def test_timing_fields(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze(_SIMPLE)
        assert result.timestamp > 1_600_000_000
        assert result.duration >= 0

    def test_result_is_immutable(self, analyzer: GrammarAnalyzer) -> None:
        result = analyzer.analyze(_SIMPLE)
        with pytest.raises(AttributeError):
            result.grammar_hash = "x"  # type: ignore[misc]


# ===========================================================================
# Module-level API
# ===========================================================================


class TestModuleApi:
    def test_analyze_uses_default_analyzer(self) -> None:
        g4lens.clear_cache()
        result = g4lens.analyze(_SIMPLE)
        assert default_analyzer.analyze(_SIMPLE) is result

    def test_clear_cache(self) -> None:
        g4lens.analyze(_SIMPLE)
        g4lens.clear_cache()
        assert len(default_analyzer.cache) == 0
