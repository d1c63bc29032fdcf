"""
HTTP source for published JSON exports.

Fetches a snapshot document (e.g. a deployed ``data.json``) over HTTP.
"""

import logging
import os

import requests

from .base import BaseSource, SnapshotLoadError

logger = logging.getLogger(__name__)


class HttpSource(BaseSource):
    """Load snapshots from a URL."""

    NAME = "http"

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or os.environ.get("SNAPSHOT_URL", "")
        self.timeout = timeout or float(os.environ.get("HTTP_TIMEOUT_SECONDS", 30))
        self.session = requests.Session()
        self.session.headers["Accept"] = "application/json"

    def resolve(self, location: str | None) -> str:
        if not location:
            if not self.base_url:
                raise SnapshotLoadError("No URL given and SNAPSHOT_URL is not set")
            return self.base_url
        if location.startswith(("http://", "https://")) or not self.base_url:
            return location
        return f"{self.base_url.rstrip('/')}/{location.lstrip('/')}"

    def fetch(self, location: str | None = None):
        url = self.resolve(location)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SnapshotLoadError(f"Failed to fetch {url}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise SnapshotLoadError(f"Invalid JSON from {url}: {e}") from e

        logger.info(f"Fetched snapshot from {url}")
        return data

    def describe(self) -> dict:
        return {"source": self.NAME, "base_url": self.base_url, "timeout": self.timeout}

    def close(self):
        self.session.close()
