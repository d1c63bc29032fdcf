"""Analytics tools for portfolio data."""

from .stats import admin_stats, generate_stats

__all__ = ["admin_stats", "generate_stats"]
