"""
Storage for generated artifacts.

Writes deduplicated snapshots and quality reports as JSON and keeps a
history index of every saved report.
"""

import json
import os
from datetime import datetime
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


class Storage:
    """
    Manages JSON artifacts produced by quality runs.

    Layout:
    - <data_dir>/snapshots/<name>.json
    - <data_dir>/reports/<name>.json
    - <data_dir>/history.json
    """

    def __init__(self, data_dir: str = None):
        self.data_dir = Path(data_dir or os.environ.get("DATA_DIR", "data"))
        self.snapshots_dir = self.data_dir / "snapshots"
        self.reports_dir = self.data_dir / "reports"
        self.history_file = self.data_dir / "history.json"

        self.snapshots_dir.mkdir(parents=True, exist_ok=True)
        self.reports_dir.mkdir(parents=True, exist_ok=True)

        self.history = self._load_history()

    def _load_history(self) -> dict:
        """Load the report index or create a new one."""
        if self.history_file.exists():
            with open(self.history_file, encoding="utf-8") as f:
                return json.load(f)
        return {
            "created": datetime.now().isoformat(),
            "reports": [],
        }

    def _save_history(self):
        self.history["updated"] = datetime.now().isoformat()
        with open(self.history_file, "w", encoding="utf-8") as f:
            json.dump(self.history, f, indent=2)

    def write_json(self, path: str | Path, data) -> Path:
        """Write any JSON-serializable value, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        return path

    def save_snapshot(self, snapshot, name: str = "data") -> Path:
        """Save a snapshot under snapshots/<name>.json."""
        path = self.write_json(self.snapshots_dir / f"{name}.json", snapshot.to_dict())
        logger.info(f"Saved snapshot: {path}")
        return path

    def save_report(self, report, name: str | None = None, source: str | None = None) -> Path:
        """
        Save a quality report and record it in the history index.

        Args:
            report: QualityReport
            name: File stem (defaults to a timestamp)
            source: Where the validated data came from

        Returns:
            Path of the written report
        """
        name = name or datetime.now().strftime("report_%Y%m%d_%H%M%S")
        path = self.reports_dir / f"{name}.json"
        report.save(path)

        self.history["reports"].append(
            {
                "name": name,
                "path": str(path),
                "source": source,
                "generated_at": report.generated_at,
                "valid": report.is_valid,
                "score": report.score,
                "errors": len(report.errors),
                "warnings": len(report.warnings),
            }
        )
        self._save_history()

        logger.info(f"Saved report: {path}")
        return path

    def load_report(self, name: str) -> dict | None:
        """Load a saved report as a plain dict."""
        path = self.reports_dir / f"{name}.json"
        if path.exists():
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        return None

    def latest_report(self) -> dict | None:
        """History entry of the most recently saved report."""
        reports = self.history.get("reports", [])
        return reports[-1] if reports else None

    def get_stats(self) -> dict:
        """Get storage statistics."""
        return {
            "snapshots": len(list(self.snapshots_dir.glob("*.json"))),
            "reports": len(list(self.reports_dir.glob("*.json"))),
            "data_dir": str(self.data_dir),
            "reports_tracked": len(self.history.get("reports", [])),
        }
