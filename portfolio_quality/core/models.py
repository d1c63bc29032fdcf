"""
Domain records for portfolio data.

Snapshot entities are frozen value records. Admin records keep the fields
the quality checks inspect and carry everything else in ``extra``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

ID_PATTERN = re.compile(r"^[a-z0-9_-]+$")

# Integration endpoints may point at the platform itself instead of an entity
SYSTEM_ENDPOINT = "system"


def normalize_id(value: str) -> str:
    """Lowercase and trim an identifier."""
    return value.strip().lower()


def is_valid_id(value: str) -> bool:
    return bool(ID_PATTERN.match(value))


class CompanyType(str, Enum):
    MAIN_PARTNER = "Main Partner"
    TECHNOLOGY_PARTNER = "Technology Partner"
    SOLUTION_PROVIDER = "Solution Provider"
    CATEGORY = "Category"
    INVALID_ENTRY = "Invalid Entry"


class CompanyStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MENTIONED = "mentioned"


class ModuleCategory(str, Enum):
    CORE = "core"
    BUSINESS = "business"
    INTEGRATION = "integration"


class ProjectStatus(str, Enum):
    COMPLETED = "completed"
    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    ON_HOLD = "on-hold"


class IntegrationStatus(str, Enum):
    ACTIVE = "active"
    PLANNED = "planned"
    DEPRECATED = "deprecated"


@dataclass(frozen=True)
class Company:
    id: str
    name: str
    type: CompanyType
    status: CompanyStatus = CompanyStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class Technology:
    id: str
    name: str
    category: str
    subcategory: str | None = None

    def to_dict(self) -> dict:
        data = {"id": self.id, "name": self.name, "category": self.category}
        if self.subcategory is not None:
            data["subcategory"] = self.subcategory
        return data


@dataclass(frozen=True)
class Module:
    id: str
    name: str
    type: str
    category: ModuleCategory
    platform: str | None = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "category": self.category.value,
        }
        if self.platform is not None:
            data["platform"] = self.platform
        return data


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    status: ProjectStatus
    description: str
    partners: tuple[str, ...] = ()
    technologies: tuple[str, ...] = ()
    platforms: tuple[str, ...] = ()
    modules: tuple[str, ...] = ()
    deliverables: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "description": self.description,
            "partners": list(self.partners),
            "technologies": list(self.technologies),
            "platforms": list(self.platforms),
            "modules": list(self.modules),
            "deliverables": list(self.deliverables),
        }


@dataclass(frozen=True)
class Integration:
    id: str
    source: str
    target: str
    type: str
    status: IntegrationStatus
    projects: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "status": self.status.value,
            "projects": list(self.projects),
        }


@dataclass(frozen=True)
class Snapshot:
    """
    All portfolio entities at one point in time.

    ``metadata`` holds the export's ``projectMetadata`` block and ``extra``
    every other top-level key (``relationships``, ``dataQuality``, ...).
    Both are written back unchanged, in the layout the snapshot was read
    from (``nested`` for the ``entities`` export shape).
    """

    companies: tuple[Company, ...] = ()
    technologies: tuple[Technology, ...] = ()
    modules: tuple[Module, ...] = ()
    projects: tuple[Project, ...] = ()
    integrations: tuple[Integration, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    extra: dict[str, Any] = field(default_factory=dict, compare=False)
    nested: bool = field(default=False, compare=False)

    @property
    def total_entities(self) -> int:
        return (
            len(self.companies)
            + len(self.technologies)
            + len(self.modules)
            + len(self.projects)
            + len(self.integrations)
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.metadata:
            data["projectMetadata"] = dict(self.metadata)

        entities = {
            "companies": [c.to_dict() for c in self.companies],
            "technologies": [t.to_dict() for t in self.technologies],
            "modules": [m.to_dict() for m in self.modules],
        }
        if self.nested:
            data["entities"] = entities
        else:
            data.update(entities)

        data["projects"] = [p.to_dict() for p in self.projects]
        data["integrations"] = [i.to_dict() for i in self.integrations]
        data.update(self.extra)
        return data


# ─── Admin records ──────────────────────────────────────────────────────


def _parse_timestamp(value: Any) -> datetime | None:
    """Accept epoch milliseconds or ISO-8601 strings."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return None


@dataclass
class AdminProject:
    """A portfolio project as the admin panel stores it."""

    id: str | None
    title: str
    featured: bool = False
    updated_at: Any = None
    extra: dict[str, Any] = field(default_factory=dict)

    CORE_KEYS = ("id", "title", "featured", "updatedAt")

    @classmethod
    def from_dict(cls, data: dict) -> AdminProject:
        return cls(
            id=data.get("id"),
            title=data.get("title", ""),
            featured=bool(data.get("featured", False)),
            updated_at=data.get("updatedAt"),
            extra={k: v for k, v in data.items() if k not in cls.CORE_KEYS},
        )

    @property
    def updated(self) -> datetime | None:
        return _parse_timestamp(self.updated_at)

    def to_dict(self) -> dict:
        data = dict(self.extra)
        if self.id is not None:
            data["id"] = self.id
        data["title"] = self.title
        data["featured"] = self.featured
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data


@dataclass
class AdminSkill:
    id: str | None
    name: str
    featured: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    CORE_KEYS = ("id", "name", "featured")

    @classmethod
    def from_dict(cls, data: dict) -> AdminSkill:
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            featured=bool(data.get("featured", False)),
            extra={k: v for k, v in data.items() if k not in cls.CORE_KEYS},
        )

    def to_dict(self) -> dict:
        data = dict(self.extra)
        if self.id is not None:
            data["id"] = self.id
        data["name"] = self.name
        data["featured"] = self.featured
        return data
