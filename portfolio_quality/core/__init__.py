"""Core engine, records and storage."""

from .engine import QualityEngine
from .models import Snapshot
from .storage import Storage

__all__ = ["QualityEngine", "Snapshot", "Storage"]
