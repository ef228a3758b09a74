"""Unit tests for g4lens.models."""
from __future__ import annotations

import dataclasses

import pytest

from g4lens.models import (
    AnalysisResult,
    AnalysisSummary,
    ComplexityScore,
    RuleType,
    Severity,
)


def _result(**tally: int) -> AnalysisResult:
    counts = {"info": 0, "warning": 0, "error": 0, "critical": 0, **tally}
    return AnalysisResult(
        summary=AnalysisSummary(issues_by_severity=counts),
        rules=(),
        unused_rules=(),
        complexity=(),
        performance_issues=(),
        ambiguity_hints=(),
        timestamp=0.0,
        duration=0.0,
        grammar_hash="0",
    )


class TestEnums:
    def test_string_values(self) -> None:
        assert RuleType.FRAGMENT == "fragment"
        assert Severity.WARNING.value == "warning"
        assert ComplexityScore("high") is ComplexityScore.HIGH

    def test_severity_rank(self) -> None:
        ordered = sorted(Severity, key=lambda s: s.rank, reverse=True)
        assert ordered == [Severity.INFO, Severity.WARNING, Severity.ERROR, Severity.CRITICAL]


class TestAnalysisSummary:
    def test_default_tally(self) -> None:
        assert dict(AnalysisSummary().issues_by_severity) == {
            "info": 0,
            "warning": 0,
            "error": 0,
            "critical": 0,
        }

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            AnalysisSummary().total_rules = 3  # type: ignore[misc]


class TestAnalysisResult:
    def test_has_errors(self) -> None:
        assert not _result(warning=3, info=1).has_errors
        assert _result(error=1).has_errors
        assert _result(critical=1).has_errors
