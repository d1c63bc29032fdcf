"""
Shared test fixtures for portfolio_quality tests.

Provides sample snapshots, a mock source, and temporary directories.
"""

import copy

import pytest

from portfolio_quality.sources.base import BaseSource, SnapshotLoadError

# ---------------------------------------------------------------------------
# Sample snapshot data
# ---------------------------------------------------------------------------

SAMPLE_COMPANIES = [
    {"id": "acme", "name": "Acme Corp", "type": "Main Partner", "status": "active"},
    {"id": "globex", "name": "Globex", "type": "Technology Partner", "status": "inactive"},
]

SAMPLE_TECHNOLOGIES = [
    {"id": "react", "name": "React", "category": "Frontend"},
    {"id": "akeneo", "name": "Akeneo", "category": "PIM", "subcategory": "Open Source"},
]

SAMPLE_MODULES = [
    {"id": "catalog", "name": "Catalog", "type": "feature", "category": "core"},
]

SAMPLE_PROJECTS = [
    {
        "id": "pim-rollout",
        "name": "PIM Rollout",
        "status": "completed",
        "description": "Product information platform for a retailer.",
        "partners": ["acme"],
        "technologies": ["react", "akeneo"],
        "platforms": ["web"],
        "modules": ["catalog"],
        "deliverables": ["Data model", "Import pipeline"],
    },
]

SAMPLE_INTEGRATIONS = [
    {
        "id": "akeneo-sync",
        "source": "akeneo",
        "target": "system",
        "type": "api",
        "status": "active",
        "projects": ["pim-rollout"],
    },
]

SAMPLE_SNAPSHOT = {
    "companies": SAMPLE_COMPANIES,
    "technologies": SAMPLE_TECHNOLOGIES,
    "modules": SAMPLE_MODULES,
    "projects": SAMPLE_PROJECTS,
    "integrations": SAMPLE_INTEGRATIONS,
}

SAMPLE_EXPORT = {
    "projectMetadata": {
        "name": "Portfolio",
        "version": "3.0.0",
        "lastUpdated": "2024-05-01",
        "description": "Portfolio data export",
    },
    "entities": {
        "companies": SAMPLE_COMPANIES,
        "technologies": SAMPLE_TECHNOLOGIES,
        "modules": SAMPLE_MODULES,
    },
    "projects": SAMPLE_PROJECTS,
    "integrations": SAMPLE_INTEGRATIONS,
}

EMPTY_SNAPSHOT = {
    "companies": [],
    "technologies": [],
    "modules": [],
    "projects": [],
    "integrations": [],
}

SAMPLE_ADMIN_EXPORT = {
    "projects": [
        {"id": "p1", "title": "X", "featured": True, "category": "Web Application"},
        {"id": "p2", "title": "X", "featured": False},
        {"id": "p3", "title": "Y", "featured": True},
    ],
    "skills": [
        {"id": "s1", "name": "Python", "level": 90},
        {"id": "s2", "name": "TypeScript", "level": 80},
    ],
    "experiences": [
        {"id": "e1", "company": "Acme Corp", "position": "Consultant"},
    ],
}


def make_snapshot(**collections):
    """Empty raw snapshot with the given collections filled in."""
    data = copy.deepcopy(EMPTY_SNAPSHOT)
    data.update(copy.deepcopy(collections))
    return data


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


class MockSource(BaseSource):
    """A source serving in-memory documents by location."""

    NAME = "mock"

    def __init__(self, documents=None):
        self.documents = documents or {"data.json": copy.deepcopy(SAMPLE_SNAPSHOT)}
        self.closed = False

    def fetch(self, location):
        key = location or "data.json"
        if key not in self.documents:
            raise SnapshotLoadError(f"Snapshot file not found: {key}")
        return copy.deepcopy(self.documents[key])

    def close(self):
        self.closed = True


@pytest.fixture
def mock_source():
    """Return a fresh MockSource instance."""
    return MockSource()


@pytest.fixture
def tmp_data_dir(tmp_path):
    """Provide a temporary data directory."""
    return str(tmp_path / "data")


@pytest.fixture
def raw_snapshot():
    """Return a deep copy of the sample snapshot."""
    return copy.deepcopy(SAMPLE_SNAPSHOT)


@pytest.fixture
def snapshot(raw_snapshot):
    """Return the sample snapshot, parsed."""
    from portfolio_quality.quality.schema import parse_snapshot

    return parse_snapshot(raw_snapshot)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Ensure environment variables don't leak between tests."""
    env_keys = [
        "DATA_DIR",
        "SNAPSHOT_SOURCE",
        "SNAPSHOT_URL",
        "HTTP_TIMEOUT_SECONDS",
    ]
    for key in env_keys:
        monkeypatch.delenv(key, raising=False)
