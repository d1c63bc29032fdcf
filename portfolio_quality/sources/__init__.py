"""Snapshot sources."""

from .base import BaseSource, SnapshotLoadError
from .file import FileSource
from .http import HttpSource

__all__ = ["BaseSource", "FileSource", "HttpSource", "SnapshotLoadError"]
