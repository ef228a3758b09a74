"""Analysis options.

``AnalysisOptions`` is a frozen dataclass so that it can be part of the
result-cache key.  It can be built directly, from a mapping (accepting
either snake_case or the editor's camelCase keys), or from a YAML
settings file::

    # g4lens.yaml
    startRule: program
    detectAmbiguity: false
    highComplexityThreshold: 40
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from g4lens.errors import InvalidOptionsError

_CAMEL_ALIASES: dict[str, str] = {
    "detectUnusedRules": "detect_unused_rules",
    "analyzeComplexity": "analyze_complexity",
    "detectPerformanceIssues": "detect_performance_issues",
    "detectAmbiguity": "detect_ambiguity",
    "startRule": "start_rule",
    "highComplexityThreshold": "high_complexity_threshold",
    "criticalComplexityThreshold": "critical_complexity_threshold",
    "detectUnresolvedReferences": "detect_unresolved_references",
}

_FLAGS = (
    "detect_unused_rules",
    "analyze_complexity",
    "detect_performance_issues",
    "detect_ambiguity",
    "detect_unresolved_references",
)
_THRESHOLDS = ("high_complexity_threshold", "critical_complexity_threshold")


@dataclass(frozen=True)
class AnalysisOptions:
    """Switches and thresholds for one analysis run.

    Parameters
    ----------
    detect_unused_rules:
        Report rules that nothing references.
    analyze_complexity:
        Include per-rule complexity metrics in the report.  Turning this
        off only hides the metrics: they are still computed, so
        performance issues are reported either way.  Set
        ``detect_performance_issues=False`` as well to suppress those.
    detect_performance_issues:
        Report performance risks derived from the metrics.
    detect_ambiguity:
        Report alternatives sharing a first token.
    start_rule:
        Entry rule, exempt from unused-rule reporting.  When empty, the
        first parser rule is exempt instead.
    high_complexity_threshold:
        Complexity value from which a rule scores ``high``; half of it
        is the ``medium`` threshold.
    critical_complexity_threshold:
        Complexity value from which a rule scores ``critical``.
    detect_unresolved_references:
        Also list referenced names that are not defined as rules.
    """

    detect_unused_rules: bool = True
    analyze_complexity: bool = True
    detect_performance_issues: bool = True
    detect_ambiguity: bool = True
    start_rule: str = ""
    high_complexity_threshold: float = 50
    critical_complexity_threshold: float = 100
    detect_unresolved_references: bool = False

    def __post_init__(self) -> None:
        for name in _FLAGS:
            if not isinstance(getattr(self, name), bool):
                raise InvalidOptionsError(name, "expected a boolean")
        if not isinstance(self.start_rule, str):
            raise InvalidOptionsError("start_rule", "expected a string")
        for name in _THRESHOLDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidOptionsError(name, "expected a number")
            if value < 0:
                raise InvalidOptionsError(name, "must not be negative")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AnalysisOptions":
        """Build options from a mapping of option names to values.

        Raises
        ------
        InvalidOptionsError
            On unknown keys or values of the wrong type.
        """
        return cls().merged(data)

    def merged(self, overrides: Mapping[str, Any]) -> "AnalysisOptions":
        """Return a copy with ``overrides`` applied."""
        known = {f.name for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name not in known:
                raise InvalidOptionsError(key, "unknown option")
            changes[name] = value
        return replace(self, **changes) if changes else self


def load_options(path: str | Path) -> AnalysisOptions:
    """Read ``AnalysisOptions`` from a YAML file.

    An empty file yields the defaults.

    Raises
    ------
    InvalidOptionsError
        If the document is not a mapping or holds invalid options.
    OSError
        If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InvalidOptionsError(str(path), f"not valid YAML: {exc}") from exc
    if data is None:
        return AnalysisOptions()
    if not isinstance(data, Mapping):
        raise InvalidOptionsError(str(path), "expected a mapping of option names to values")
    return AnalysisOptions.from_mapping(data)
