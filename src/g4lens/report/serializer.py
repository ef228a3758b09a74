"""Report serialization for g4lens.

Converts an ``AnalysisResult`` to and from plain dict/list structures
that map directly onto JSON and YAML.  Keys are the snake_case field
names and enumerations are written as their string values.

Usage
-----
::

    from g4lens.report.serializer import ReportSerializer

    serializer = ReportSerializer()
    json_text = serializer.to_json(result)
    same = serializer.from_json(json_text)
    assert same.grammar_hash == result.grammar_hash
"""
from __future__ import annotations

import json
from types import MappingProxyType
from typing import Any

import yaml

from g4lens.models import (
    AmbiguityHint,
    AnalysisResult,
    AnalysisSummary,
    ComplexityMetrics,
    ComplexityScore,
    IssueCategory,
    PerformanceIssue,
    RuleInfo,
    RuleType,
    Severity,
    UnresolvedReference,
    UnusedRule,
)


class ReportSerializer:
    """Converts between ``AnalysisResult`` objects and plain Python dicts."""

    # ------------------------------------------------------------------
    # Serialization (result -> dict)
    # ------------------------------------------------------------------

    def to_dict(self, result: AnalysisResult) -> dict[str, object]:
        """Serialize an ``AnalysisResult`` to a JSON-compatible dict."""
        return {
            "summary": self._summary_to_dict(result.summary),
            "rules": [self._rule_to_dict(r) for r in result.rules],
            "unused_rules": [self._unused_to_dict(u) for u in result.unused_rules],
            "complexity": [self._metrics_to_dict(m) for m in result.complexity],
            "performance_issues": [self._issue_to_dict(i) for i in result.performance_issues],
            "ambiguity_hints": [self._hint_to_dict(h) for h in result.ambiguity_hints],
            "unresolved_references": [
                self._unresolved_to_dict(u) for u in result.unresolved_references
            ],
            "timestamp": result.timestamp,
            "duration": result.duration,
            "grammar_hash": result.grammar_hash,
        }

    def _summary_to_dict(self, summary: AnalysisSummary) -> dict[str, object]:
        return {
            "total_rules": summary.total_rules,
            "parser_rules": summary.parser_rules,
            "lexer_rules": summary.lexer_rules,
            "fragment_rules": summary.fragment_rules,
            "unused_rules": summary.unused_rules,
            "high_complexity_rules": summary.high_complexity_rules,
            "performance_issues": summary.performance_issues,
            "ambiguity_hints": summary.ambiguity_hints,
            "issues_by_severity": dict(summary.issues_by_severity),
        }

    def _rule_to_dict(self, rule: RuleInfo) -> dict[str, object]:
        return {
            "name": rule.name,
            "type": rule.type.value,
            "line": rule.line,
            "column": rule.column,
            "end_line": rule.end_line,
            "end_column": rule.end_column,
            "text": rule.text,
            "alternative_count": rule.alternative_count,
            "references": list(rule.references),
            "referenced_by": list(rule.referenced_by),
        }

    def _unused_to_dict(self, unused: UnusedRule) -> dict[str, object]:
        return {
            "name": unused.name,
            "type": unused.type.value,
            "line": unused.line,
            "column": unused.column,
            "suggestion": unused.suggestion,
        }

    def _metrics_to_dict(self, m: ComplexityMetrics) -> dict[str, object]:
        return {
            "name": m.name,
            "type": m.type.value,
            "line": m.line,
            "depth": m.depth,
            "alternatives": m.alternatives,
            "reference_count": m.reference_count,
            "directly_recursive": m.directly_recursive,
            "indirectly_recursive": m.indirectly_recursive,
            "lookahead": m.lookahead,
            "score": m.score.value,
            "complexity_value": m.complexity_value,
        }

    def _issue_to_dict(self, issue: PerformanceIssue) -> dict[str, object]:
        return {
            "rule": issue.rule,
            "type": issue.type.value,
            "line": issue.line,
            "column": issue.column,
            "severity": issue.severity.value,
            "issue": issue.issue,
            "description": issue.description,
            "suggestion": issue.suggestion,
            "category": issue.category.value,
        }

    def _hint_to_dict(self, hint: AmbiguityHint) -> dict[str, object]:
        return {
            "rule": hint.rule,
            "line": hint.line,
            "alternative_indices": list(hint.alternative_indices),
            "common_prefix": list(hint.common_prefix),
            "description": hint.description,
        }

    def _unresolved_to_dict(self, ref: UnresolvedReference) -> dict[str, object]:
        return {"rule": ref.rule, "name": ref.name, "line": ref.line, "column": ref.column}

    # ------------------------------------------------------------------
    # Deserialization (dict -> result)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, Any]) -> AnalysisResult:
        """Rebuild an ``AnalysisResult`` from a dict produced by ``to_dict``.

        Raises
        ------
        KeyError
            If a required key is missing.
        ValueError
            If an enumeration value is not recognised.
        """
        return AnalysisResult(
            summary=self._summary_from_dict(data["summary"]),
            rules=tuple(self._rule_from_dict(r) for r in data["rules"]),
            unused_rules=tuple(self._unused_from_dict(u) for u in data["unused_rules"]),
            complexity=tuple(self._metrics_from_dict(m) for m in data["complexity"]),
            performance_issues=tuple(
                self._issue_from_dict(i) for i in data["performance_issues"]
            ),
            ambiguity_hints=tuple(self._hint_from_dict(h) for h in data["ambiguity_hints"]),
            timestamp=float(data["timestamp"]),
            duration=float(data["duration"]),
            grammar_hash=str(data["grammar_hash"]),
            unresolved_references=tuple(
                UnresolvedReference(**u) for u in data.get("unresolved_references", [])
            ),
        )

    def _summary_from_dict(self, d: dict[str, Any]) -> AnalysisSummary:
        fields = {k: int(v) for k, v in d.items() if k != "issues_by_severity"}
        tally = {severity.value: 0 for severity in reversed(Severity)}
        tally.update({k: int(v) for k, v in d.get("issues_by_severity", {}).items()})
        return AnalysisSummary(**fields, issues_by_severity=MappingProxyType(tally))

    def _rule_from_dict(self, d: dict[str, Any]) -> RuleInfo:
        return RuleInfo(
            name=d["name"],
            type=RuleType(d["type"]),
            line=d["line"],
            column=d["column"],
            end_line=d["end_line"],
            end_column=d["end_column"],
            text=d["text"],
            alternative_count=d["alternative_count"],
            references=tuple(d.get("references", ())),
            referenced_by=tuple(d.get("referenced_by", ())),
        )

    def _unused_from_dict(self, d: dict[str, Any]) -> UnusedRule:
        return UnusedRule(
            name=d["name"],
            type=RuleType(d["type"]),
            line=d["line"],
            column=d["column"],
            suggestion=d["suggestion"],
        )

    def _metrics_from_dict(self, d: dict[str, Any]) -> ComplexityMetrics:
        return ComplexityMetrics(
            name=d["name"],
            type=RuleType(d["type"]),
            line=d["line"],
            depth=d["depth"],
            alternatives=d["alternatives"],
            reference_count=d["reference_count"],
            directly_recursive=bool(d["directly_recursive"]),
            indirectly_recursive=bool(d["indirectly_recursive"]),
            lookahead=d["lookahead"],
            score=ComplexityScore(d["score"]),
            complexity_value=d["complexity_value"],
        )

    def _issue_from_dict(self, d: dict[str, Any]) -> PerformanceIssue:
        return PerformanceIssue(
            rule=d["rule"],
            type=RuleType(d["type"]),
            line=d["line"],
            column=d["column"],
            severity=Severity(d["severity"]),
            issue=d["issue"],
            description=d["description"],
            suggestion=d["suggestion"],
            category=IssueCategory(d["category"]),
        )

    def _hint_from_dict(self, d: dict[str, Any]) -> AmbiguityHint:
        return AmbiguityHint(
            rule=d["rule"],
            line=d["line"],
            alternative_indices=tuple(d["alternative_indices"]),
            common_prefix=tuple(d["common_prefix"]),
            description=d["description"],
        )

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, result: AnalysisResult, indent: int = 2) -> str:
        """Serialize an ``AnalysisResult`` to a JSON string."""
        return json.dumps(self.to_dict(result), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> AnalysisResult:
        """Deserialize an ``AnalysisResult`` from a JSON string."""
        data: dict[str, Any] = json.loads(text)
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, result: AnalysisResult) -> str:
        """Serialize an ``AnalysisResult`` to a YAML string."""
        return yaml.dump(self.to_dict(result), default_flow_style=False, allow_unicode=True)

    def from_yaml(self, text: str) -> AnalysisResult:
        """Deserialize an ``AnalysisResult`` from a YAML string."""
        data: dict[str, Any] = yaml.safe_load(text)
        return self.from_dict(data)
