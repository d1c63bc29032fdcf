"""
Quality engine.

Orchestrates a source, the schema layer, the integrity validator and
storage for one validation run.
"""

import logging
import os

from ..quality.dedup import deduplicate, duplicate_ids
from ..quality.reporter import QualityReport
from ..quality.schema import parse_snapshot
from ..quality.validator import validate_snapshot
from ..sources.base import BaseSource
from ..sources.file import FileSource
from ..sources.http import HttpSource
from .models import Snapshot
from .storage import Storage

# Registry of available sources
SOURCES = {
    "file": FileSource,
    "http": HttpSource,
}


class QualityEngine:
    """
    Load, validate and report on portfolio snapshots.

    Usage:
        with QualityEngine(source="file", data_dir="data") as engine:
            report = engine.check("data.json")
            print(report.summary_text())
    """

    def __init__(
        self,
        source: str | BaseSource | None = None,
        data_dir: str | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize engine.

        Args:
            source: Source name or instance (defaults to SNAPSHOT_SOURCE or "file")
            data_dir: Directory for generated artifacts
            logger: Sink for progress messages
        """
        source = source or os.environ.get("SNAPSHOT_SOURCE", "file")
        if isinstance(source, str):
            if source not in SOURCES:
                raise ValueError(f"Unknown source: {source}. Available: {list(SOURCES.keys())}")
            self.source = SOURCES[source]()
        else:
            self.source = source

        self.data_dir = data_dir
        self._storage = None
        self.logger = logger or logging.getLogger(__name__)
        self.runs = 0

    @property
    def storage(self) -> Storage:
        # Created lazily so read-only runs never touch the data directory
        if self._storage is None:
            self._storage = Storage(self.data_dir)
        return self._storage

    def load(self, location: str | None = None) -> Snapshot:
        """
        Fetch and structurally validate a snapshot.

        Raises:
            SnapshotLoadError: If the source cannot provide the document
            SchemaViolation: If the document does not match the schema
        """
        raw = self.source.fetch(location)
        snapshot = parse_snapshot(raw)
        self.logger.info(f"Loaded {snapshot.total_entities} entities from {location or self.source.NAME}")
        return snapshot

    def check(self, location: str | None = None, save: bool = False) -> QualityReport:
        """
        Validate a snapshot and optionally store the report.

        Args:
            location: Path or URL passed to the source
            save: Write the report and record it in the history index

        Returns:
            QualityReport
        """
        snapshot = self.load(location)
        report = self.check_snapshot(snapshot)
        if save:
            self.storage.save_report(report, source=location)
        return report

    def check_snapshot(self, snapshot: Snapshot) -> QualityReport:
        """Validate an already loaded snapshot."""
        report = validate_snapshot(snapshot)
        self.runs += 1

        if report.is_valid:
            self.logger.info(
                f"Quality check passed: {report.stats.total_entities} entities, "
                f"{len(report.warnings)} warnings, score {report.score}"
            )
        else:
            self.logger.warning(
                f"Quality check failed: {report.stats.duplicates} duplicates, "
                f"{report.stats.broken_references} broken references, score {report.score}"
            )
        return report

    def deduplicate(self, location: str | None = None, name: str | None = None) -> Snapshot:
        """
        Load a snapshot and remove repeated ids.

        Args:
            location: Path or URL passed to the source
            name: When given, save the result as snapshots/<name>.json

        Returns:
            Deduplicated snapshot
        """
        snapshot = self.load(location)
        for collection, ids in duplicate_ids(snapshot).items():
            self.logger.info(f"Removing duplicate {collection}: {', '.join(ids)}")

        result = deduplicate(snapshot)
        removed = snapshot.total_entities - result.total_entities
        self.logger.info(f"Deduplication removed {removed} entities")

        if name:
            self.storage.save_snapshot(result, name)
        return result

    def status(self) -> dict:
        """Get current engine status."""
        status = {
            **self.source.describe(),
            "runs": self.runs,
        }
        if self._storage is not None or self.data_dir:
            status.update(self.storage.get_stats())
        return status

    def close(self):
        """Clean up resources."""
        self.source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
