"""
Data quality for portfolio snapshots.

Provides schema validation, duplicate and reference integrity checks,
deduplication, and quality reporting.
"""

from .dedup import deduplicate, merge_records
from .reporter import QualityReport, check_admin_quality, quality_score
from .schema import SchemaViolation, parse_snapshot
from .validator import validate_snapshot

__all__ = [
    "QualityReport",
    "SchemaViolation",
    "check_admin_quality",
    "deduplicate",
    "merge_records",
    "parse_snapshot",
    "quality_score",
    "validate_snapshot",
]
