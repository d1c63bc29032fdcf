"""
Portfolio Quality - schema validation, integrity checks and deduplication
for portfolio data snapshots.
"""

from .core.engine import QualityEngine
from .quality.validator import validate_snapshot

__version__ = "0.1.0"
__all__ = ["QualityEngine", "validate_snapshot"]
