"""Result types for the grammar analysis engine.

Every type here is a frozen dataclass holding plain data (strings,
numbers, tuples, enums, read-only mappings), so an ``AnalysisResult`` is
immutable once built and serializes without cycles.

Enumerations subclass ``str`` and use the lowercase wire values, so
``RuleType.FRAGMENT == "fragment"`` holds and JSON output needs no
translation table.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class RuleType(str, Enum):
    """Kind of grammar rule."""

    PARSER = "parser"
    LEXER = "lexer"
    FRAGMENT = "fragment"


class Severity(str, Enum):
    """Severity of a finding, most serious first."""

    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Sort rank: 0 for CRITICAL up to 3 for INFO."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.ERROR: 1,
    Severity.WARNING: 2,
    Severity.INFO: 3,
}


class ComplexityScore(str, Enum):
    """Bucketed complexity classification."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueCategory(str, Enum):
    """Category of a performance issue."""

    BACKTRACKING = "backtracking"
    LOOKAHEAD = "lookahead"
    RECURSION = "recursion"
    MEMORY = "memory"
    AMBIGUITY = "ambiguity"


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """A rule definition discovered in the grammar.

    Parameters
    ----------
    name:
        Rule name; unique within a grammar.
    type:
        Parser, lexer, or fragment rule.
    line:
        1-based line of the rule name in the original source.
    column:
        0-based column of the rule name in the original source.
    end_line:
        1-based line of the terminating ``;``.
    end_column:
        0-based column just past the terminating ``;``.
    text:
        Reconstructed definition, ``name : body ;``.
    alternative_count:
        Number of top-level alternatives.
    references:
        Identifiers mentioned in the body, in discovery order.
    referenced_by:
        Rules whose bodies mention this rule; filled in once the
        reference graph is built.
    """

    name: str
    type: RuleType
    line: int
    column: int
    end_line: int
    end_column: int
    text: str
    alternative_count: int
    references: tuple[str, ...] = ()
    referenced_by: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class UnresolvedReference:
    """A name used in a rule body that is not defined as a rule."""

    rule: str
    name: str
    line: int
    column: int


# ---------------------------------------------------------------------------
# Findings
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UnusedRule:
    """A rule that no other rule references."""

    name: str
    type: RuleType
    line: int
    column: int
    suggestion: str


@dataclass(frozen=True, slots=True)
class ComplexityMetrics:
    """Heuristic complexity figures for a single rule."""

    name: str
    type: RuleType
    line: int
    depth: int
    alternatives: int
    reference_count: int
    directly_recursive: bool
    indirectly_recursive: bool
    lookahead: int
    score: ComplexityScore
    complexity_value: int


@dataclass(frozen=True, slots=True)
class PerformanceIssue:
    """A performance risk derived from a rule's complexity metrics."""

    rule: str
    type: RuleType
    line: int
    column: int
    severity: Severity
    issue: str
    description: str
    suggestion: str
    category: IssueCategory

    def __str__(self) -> str:
        return f"{self.severity.value.upper()} at {self.line}:{self.column}: {self.rule}: {self.issue}"


@dataclass(frozen=True, slots=True)
class AmbiguityHint:
    """Alternatives of a parser rule that begin with the same token.

    ``alternative_indices`` are 0-based; ``common_prefix`` holds the
    shared, lower-cased first token.
    """

    rule: str
    line: int
    alternative_indices: tuple[int, ...]
    common_prefix: tuple[str, ...]
    description: str


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


def _empty_tally() -> Mapping[str, int]:
    return MappingProxyType({severity.value: 0 for severity in reversed(Severity)})


@dataclass(frozen=True, slots=True)
class AnalysisSummary:
    """Roll-up counts for an analysis run.

    ``issues_by_severity`` is keyed by severity value (``"info"``,
    ``"warning"``, ``"error"``, ``"critical"``) and also counts unused
    rules as warnings and ambiguity hints as info.
    """

    total_rules: int = 0
    parser_rules: int = 0
    lexer_rules: int = 0
    fragment_rules: int = 0
    unused_rules: int = 0
    high_complexity_rules: int = 0
    performance_issues: int = 0
    ambiguity_hints: int = 0
    issues_by_severity: Mapping[str, int] = field(default_factory=_empty_tally)


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Complete, immutable report for one grammar.

    Parameters
    ----------
    summary:
        Aggregated counts.
    rules:
        Every discovered rule, with references attached.
    unused_rules:
        Rules never referenced (start rule excluded).
    complexity:
        Metrics per rule, most complex first.
    performance_issues:
        Performance findings, most severe first.
    ambiguity_hints:
        Common-prefix hints for parser rules.
    timestamp:
        When the analysis ran, in seconds since the epoch.
    duration:
        How long the analysis took, in milliseconds.
    grammar_hash:
        Content hash of the analysed source.
    unresolved_references:
        Names used but never defined; only populated on request.
    """

    summary: AnalysisSummary
    rules: tuple[RuleInfo, ...]
    unused_rules: tuple[UnusedRule, ...]
    complexity: tuple[ComplexityMetrics, ...]
    performance_issues: tuple[PerformanceIssue, ...]
    ambiguity_hints: tuple[AmbiguityHint, ...]
    timestamp: float
    duration: float
    grammar_hash: str
    unresolved_references: tuple[UnresolvedReference, ...] = ()

    def rule(self, name: str) -> RuleInfo | None:
        """Return the rule called ``name``, or None."""
        return next((r for r in self.rules if r.name == name), None)

    def metrics_for(self, name: str) -> ComplexityMetrics | None:
        """Return the complexity metrics of rule ``name``, or None."""
        return next((m for m in self.complexity if m.name == name), None)

    @property
    def has_errors(self) -> bool:
        """Return True if any finding is ERROR or CRITICAL."""
        tally = self.summary.issues_by_severity
        return tally.get(Severity.ERROR.value, 0) + tally.get(Severity.CRITICAL.value, 0) > 0
