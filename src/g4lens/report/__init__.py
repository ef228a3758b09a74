"""Report serialization to JSON and YAML."""
from __future__ import annotations

from g4lens.report.serializer import ReportSerializer

__all__ = ["ReportSerializer"]
