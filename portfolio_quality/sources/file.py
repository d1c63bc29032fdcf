"""
Local JSON file source.

Reads exports such as ``data.json`` or ``portfolio-data-export.json``.
Relative paths resolve against the base directory.
"""

import json
import logging
import os
from pathlib import Path

from .base import BaseSource, SnapshotLoadError

logger = logging.getLogger(__name__)

DEFAULT_FILE = "data.json"


class FileSource(BaseSource):
    """Load snapshots from JSON files on disk."""

    NAME = "file"

    def __init__(self, base_dir: str | None = None):
        self.base_dir = Path(base_dir or os.environ.get("DATA_DIR", "."))

    def resolve(self, location: str) -> Path:
        path = Path(location)
        if not path.is_absolute() and not path.exists():
            path = self.base_dir / path
        return path

    def fetch(self, location: str | None = None):
        path = self.resolve(location or DEFAULT_FILE)
        if not path.exists():
            raise SnapshotLoadError(f"Snapshot file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotLoadError(f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            raise SnapshotLoadError(f"Cannot read {path}: {e}") from e

        logger.info(f"Loaded snapshot from {path}")
        return data

    def describe(self) -> dict:
        return {"source": self.NAME, "base_dir": str(self.base_dir)}
