"""Summary aggregation and grammar content hashing."""
from __future__ import annotations

import struct
from collections.abc import Sequence
from types import MappingProxyType

from g4lens.models import (
    AmbiguityHint,
    AnalysisSummary,
    ComplexityMetrics,
    ComplexityScore,
    PerformanceIssue,
    RuleInfo,
    RuleType,
    Severity,
    UnusedRule,
)

_HIGH_SCORES = frozenset({ComplexityScore.HIGH, ComplexityScore.CRITICAL})


def grammar_hash(source: str) -> str:
    """Return a short content hash of ``source``.

    The classic ``h * 31 + c`` string hash over UTF-16 code units,
    wrapped to a signed 32-bit integer and rendered in hex.  Negative
    values keep their sign (``"-1a2b"``); the empty string hashes to
    ``"0"``.  This is a cache key, not a cryptographic digest.
    """
    h = 0
    for (unit,) in struct.iter_unpack("<H", source.encode("utf-16-le", "surrogatepass")):
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return format(h, "x")


def summarize(
    rules: Sequence[RuleInfo],
    unused: Sequence[UnusedRule],
    complexity: Sequence[ComplexityMetrics],
    issues: Sequence[PerformanceIssue],
    hints: Sequence[AmbiguityHint],
) -> AnalysisSummary:
    """Roll the individual findings up into an ``AnalysisSummary``.

    Parameters
    ----------
    rules:
        Every discovered rule.
    unused:
        Unused-rule findings; each counts as a warning.
    complexity:
        Reported metrics; ``high`` and ``critical`` scores are counted.
    issues:
        Performance issues, counted under their own severity.
    hints:
        Ambiguity hints; each counts as info.

    Returns
    -------
    AnalysisSummary
    """
    tally = {severity.value: 0 for severity in reversed(Severity)}
    for issue in issues:
        tally[issue.severity.value] += 1
    tally[Severity.WARNING.value] += len(unused)
    tally[Severity.INFO.value] += len(hints)

    return AnalysisSummary(
        total_rules=len(rules),
        parser_rules=sum(1 for r in rules if r.type is RuleType.PARSER),
        lexer_rules=sum(1 for r in rules if r.type is RuleType.LEXER),
        fragment_rules=sum(1 for r in rules if r.type is RuleType.FRAGMENT),
        unused_rules=len(unused),
        high_complexity_rules=sum(1 for m in complexity if m.score in _HIGH_SCORES),
        performance_issues=len(issues),
        ambiguity_hints=len(hints),
        issues_by_severity=MappingProxyType(tally),
    )
