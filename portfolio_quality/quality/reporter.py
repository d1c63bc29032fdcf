"""
Quality reports and dashboard scoring.

Holds the report model shared by the snapshot validator and the admin
duplicate check, plus JSON/text rendering and the 0-100 quality score.
"""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from ..core.models import AdminProject, AdminSkill

# Score penalties per counted problem
DUPLICATE_PENALTY = 10
BROKEN_REFERENCE_PENALTY = 15
UNUSED_ENTITY_PENALTY = 2


class IssueKind(str, Enum):
    DUPLICATE = "duplicate"
    MISSING_REFERENCE = "missing_reference"
    INVALID_DATA = "invalid_data"
    SCHEMA_VIOLATION = "schema_violation"
    UNUSED_ENTITY = "unused_entity"


@dataclass
class Finding:
    """A single problem found in portfolio data."""

    kind: IssueKind
    entity: str
    message: str
    field: str | None = None
    value: Any = None

    def __str__(self) -> str:
        location = f"{self.entity}.{self.field}" if self.field else self.entity
        return f"[{self.kind.value}] {location}: {self.message}"

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "type": self.kind.value,
            "entity": self.entity,
            "message": self.message,
        }
        if self.field is not None:
            data["field"] = self.field
        if self.value is not None:
            data["value"] = self.value
        return data


@dataclass
class QualityStats:
    total_entities: int = 0
    duplicates: int = 0
    broken_references: int = 0
    unused_entities: int = 0

    def to_dict(self) -> dict:
        return {
            "totalEntities": self.total_entities,
            "duplicates": self.duplicates,
            "brokenReferences": self.broken_references,
            "unusedEntities": self.unused_entities,
        }


@dataclass
class QualityReport:
    """Errors, warnings and aggregate counts from one validation run."""

    errors: list[Finding] = field(default_factory=list)
    warnings: list[Finding] = field(default_factory=list)
    stats: QualityStats = field(default_factory=QualityStats)
    generated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def score(self) -> int:
        return quality_score(self.stats)

    def add_error(self, finding: Finding):
        self.errors.append(finding)

    def add_warning(self, finding: Finding):
        self.warnings.append(finding)

    def findings(self, kind: IssueKind) -> list[Finding]:
        """All errors and warnings of one kind."""
        return [f for f in self.errors + self.warnings if f.kind == kind]

    def to_dict(self) -> dict:
        return {
            "generatedAt": self.generated_at,
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "stats": self.stats.to_dict(),
            "score": self.score,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: str | Path):
        """Save report to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_json())

    def summary_text(self) -> str:
        """Human-readable summary."""
        lines = [
            "=== Data Quality Report ===",
            f"Status: {'PASSED' if self.is_valid else 'FAILED'}",
            "",
            "Statistics:",
            f"  Total Entities:    {self.stats.total_entities:,}",
            f"  Duplicates:        {self.stats.duplicates:,}",
            f"  Broken References: {self.stats.broken_references:,}",
            f"  Unused Entities:   {self.stats.unused_entities:,}",
            f"  Quality Score:     {self.score}/100",
        ]

        if self.errors:
            lines.append("")
            lines.append(f"Errors ({len(self.errors)}):")
            for i, error in enumerate(self.errors, 1):
                lines.append(f"  {i}. {error}")

        if self.warnings:
            lines.append("")
            lines.append(f"Warnings ({len(self.warnings)}):")
            for i, warning in enumerate(self.warnings, 1):
                lines.append(f"  {i}. {warning}")

        if self.is_valid:
            lines.append("")
            lines.append("All validation checks passed!")

        return "\n".join(lines)


def quality_score(stats: QualityStats | None) -> int:
    """
    Dashboard score from report counts, clamped to 0-100.

    Returns 100 when no check has been run yet.
    """
    if stats is None:
        return 100
    score = (
        100
        - stats.duplicates * DUPLICATE_PENALTY
        - stats.broken_references * BROKEN_REFERENCE_PENALTY
        - stats.unused_entities * UNUSED_ENTITY_PENALTY
    )
    return max(0, min(100, score))


def _flag_repeated(report: QualityReport, entity: str, values: list[str], label: str):
    # One warning per repeated value, however often it repeats
    for value, count in Counter(values).items():
        if count > 1:
            report.add_warning(
                Finding(
                    kind=IssueKind.DUPLICATE,
                    entity=entity,
                    field=label.split()[-1],
                    message=f'Duplicate {label} found: "{value}" ({count} times)',
                    value=value,
                )
            )
            report.stats.duplicates += 1


def check_admin_quality(
    projects: list[AdminProject],
    skills: list[AdminSkill],
    experiences: list[dict] | None = None,
) -> QualityReport:
    """
    Duplicate title/name check over the admin panel collections.

    Comparison is exact (case-sensitive, no trimming). Findings are
    warnings, so the report stays valid.

    Args:
        projects: Admin projects
        skills: Admin skills
        experiences: Only counted towards the entity total

    Returns:
        QualityReport
    """
    report = QualityReport()
    report.stats.total_entities = len(projects) + len(skills) + len(experiences or [])
    _flag_repeated(report, "projects", [p.title for p in projects], "project title")
    _flag_repeated(report, "skills", [s.name for s in skills], "skill name")
    return report


def compare_reports(before: QualityReport, after: QualityReport) -> dict:
    """
    Compare two quality reports to track improvement.

    Args:
        before: Earlier report
        after: Later report

    Returns:
        Comparison metrics
    """
    before_stats = before.stats.to_dict()
    after_stats = after.stats.to_dict()
    return {
        "period": {
            "before": before.generated_at,
            "after": after.generated_at,
        },
        "stats": {
            key: {
                "before": before_stats[key],
                "after": after_stats[key],
                "delta": after_stats[key] - before_stats[key],
            }
            for key in after_stats
        },
        "score": {
            "before": before.score,
            "after": after.score,
            "delta": after.score - before.score,
        },
        "errors": {
            "before": len(before.errors),
            "after": len(after.errors),
            "delta": len(after.errors) - len(before.errors),
        },
    }
