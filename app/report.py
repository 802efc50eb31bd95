#!/usr/bin/env python3
"""
Presentation of validation results.

A ``ValidationReport`` turns problems into the two streams a host consumes:
highlight commands keyed by element id and result-table rows. Hosts receive
them through the ``DiagnosticSink`` protocol; the CLI renders them as text.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from uml_types import ElementId
from core.uml_model import UmlModel
from core.problems import ValidationError, ValidationProblem, Severity

NO_PROBLEMS = "No problems found"


@dataclass(frozen=True)
class HighlightCommand:
    element_id: ElementId
    severity: Severity


@dataclass(frozen=True)
class ResultRow:
    category: str      # "Error" or "Anti-Pattern"
    code: str
    text: str
    element_id: ElementId
    label: str         # shown as the clickable element reference


class DiagnosticSink(Protocol):
    def clear(self) -> None: ...
    def highlight(self, command: HighlightCommand) -> None: ...
    def add_row(self, row: ResultRow) -> None: ...


@dataclass
class ValidationReport:
    problems: List[ValidationProblem]
    rows: List[ResultRow] = field(default_factory=list)
    highlights: List[HighlightCommand] = field(default_factory=list)

    @classmethod
    def from_problems(cls, problems: List[ValidationProblem],
                      model: Optional[UmlModel] = None) -> "ValidationReport":
        report = cls(problems=list(problems))
        for problem in report.problems:
            report.highlights.append(HighlightCommand(problem.element_id, problem.severity))
            if isinstance(problem, ValidationError):
                category, text = "Error", problem.message
            else:
                category, text = "Anti-Pattern", problem.kind.value
            report.rows.append(ResultRow(
                category=category,
                code=problem.code,
                text=text,
                element_id=problem.element_id,
                label=_element_label(model, problem.element_id),
            ))
        return report

    @property
    def is_empty(self) -> bool:
        return not self.problems

    @property
    def error_count(self) -> int:
        return sum(1 for p in self.problems if p.severity is Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for p in self.problems if p.severity is Severity.WARNING)

    def dispatch(self, sink: DiagnosticSink) -> None:
        sink.clear()
        for command in self.highlights:
            sink.highlight(command)
        for row in self.rows:
            sink.add_row(row)

    def render_table(self) -> str:
        if self.is_empty:
            return NO_PROBLEMS
        header = ("Category", "Element", "Problem")
        lines = [(r.category, r.label, f"{r.code}: {r.text}" if r.code != r.text else r.text)
                 for r in self.rows]
        widths = [max(len(row[i]) for row in [header] + lines) for i in range(2)]
        out = ["Results:"]
        for row in [header] + lines:
            out.append(f"{row[0]:<{widths[0]}}  {row[1]:<{widths[1]}}  {row[2]}".rstrip())
        out.append(f"{self.error_count} error(s), {self.warning_count} anti-pattern(s)")
        return "\n".join(out)

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [
            {
                "category": r.category,
                "code": r.code,
                "element_id": r.element_id,
                "element": r.label,
                "text": r.text,
            }
            for r in self.rows
        ]

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dicts(), indent=indent, ensure_ascii=False)


def _element_label(model: Optional[UmlModel], element_id: ElementId) -> str:
    if model is None:
        return element_id
    element = model.get(element_id)
    name = getattr(element, "name", "") if element is not None else ""
    return f"{name} ({element_id})" if name else element_id


__all__ = [
    "NO_PROBLEMS", "HighlightCommand", "ResultRow", "DiagnosticSink", "ValidationReport",
]
