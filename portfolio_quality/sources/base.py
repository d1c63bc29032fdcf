"""
Base source for portfolio snapshots.

A source turns a location (file path, URL) into the raw JSON document the
schema layer validates. Sources never validate or transform data.
"""

from abc import ABC, abstractmethod
from typing import Any


class SnapshotLoadError(RuntimeError):
    """Raised when a snapshot document cannot be read or decoded."""


class BaseSource(ABC):
    """Abstract base class for snapshot sources."""

    # Override in subclass
    NAME = "base"

    @abstractmethod
    def fetch(self, location: str | None) -> Any:
        """
        Read the raw snapshot document.

        Args:
            location: Where the document lives (path or URL)

        Returns:
            Decoded JSON value.

        Raises:
            SnapshotLoadError: If the document is missing or not valid JSON.
        """
        pass

    def describe(self) -> dict:
        """Source details for status output."""
        return {"source": self.NAME}

    def close(self):
        """Clean up resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
