"""
Structural validation for portfolio snapshots.

Each entity kind has a declarative field table. Checking collects every
violation instead of stopping at the first one, and successful checks
return fully-typed records with defaults applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..core.models import (
    Company,
    CompanyStatus,
    CompanyType,
    Integration,
    IntegrationStatus,
    Module,
    ModuleCategory,
    Project,
    ProjectStatus,
    Snapshot,
    Technology,
    is_valid_id,
    normalize_id,
)

_MISSING = object()


class EntityKind(str, Enum):
    """Snapshot collections, in the order they are always processed."""

    COMPANIES = "companies"
    TECHNOLOGIES = "technologies"
    MODULES = "modules"
    PROJECTS = "projects"
    INTEGRATIONS = "integrations"


# Collections the original export nests under "entities"
NESTED_KINDS = (EntityKind.COMPANIES, EntityKind.TECHNOLOGIES, EntityKind.MODULES)


@dataclass
class SchemaIssue:
    """One violated field."""

    path: str
    message: str
    expected: str
    value: Any = None

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "message": self.message,
            "expected": self.expected,
            "value": self.value,
        }


class SchemaViolation(ValueError):
    """Raised when input does not match the snapshot schema."""

    def __init__(self, issues: list[SchemaIssue]):
        self.issues = list(issues)
        shown = "; ".join(str(i) for i in self.issues[:5])
        more = f" (+{len(self.issues) - 5} more)" if len(self.issues) > 5 else ""
        super().__init__(f"{len(self.issues)} schema violation(s): {shown}{more}")


@dataclass
class SchemaResult:
    """Either a typed value or the issues that prevented building it."""

    value: Any = None
    issues: list[SchemaIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    def unwrap(self) -> Any:
        if self.issues:
            raise SchemaViolation(self.issues)
        return self.value


@dataclass
class FieldSpec:
    """Specification for one entity field."""

    name: str
    kind: str = "str"  # str | id | enum | id_list | str_list
    required: bool = True
    min_length: int | None = None
    max_length: int | None = None
    choices: type[Enum] | None = None
    default: Any = None


def _check_id(value: Any, path: str) -> tuple[str | None, list[SchemaIssue]]:
    if not isinstance(value, str):
        return None, [SchemaIssue(path, f"Expected string, got {type(value).__name__}", "identifier", value)]
    normalized = normalize_id(value)
    if not normalized:
        return None, [SchemaIssue(path, "ID cannot be empty", "identifier", value)]
    if not is_valid_id(normalized):
        return None, [
            SchemaIssue(
                path,
                "ID must contain only lowercase letters, numbers, underscores, and hyphens",
                "[a-z0-9_-]+",
                value,
            )
        ]
    return normalized, []


def _check_str(spec: FieldSpec, value: Any, path: str) -> tuple[str | None, list[SchemaIssue]]:
    if not isinstance(value, str):
        return None, [SchemaIssue(path, f"Expected string, got {type(value).__name__}", "string", value)]
    if spec.min_length and len(value) < spec.min_length:
        return None, [
            SchemaIssue(
                path,
                f"Too short: {len(value)} chars (min: {spec.min_length})",
                f"length >= {spec.min_length}",
                value,
            )
        ]
    if spec.max_length is not None and len(value) > spec.max_length:
        return None, [
            SchemaIssue(
                path,
                f"Too long: {len(value)} chars (max: {spec.max_length})",
                f"length <= {spec.max_length}",
                value[:100],
            )
        ]
    return value, []


def _check_enum(spec: FieldSpec, value: Any, path: str) -> tuple[Enum | None, list[SchemaIssue]]:
    allowed = [member.value for member in spec.choices]
    if isinstance(value, str) and value in allowed:
        return spec.choices(value), []
    return None, [
        SchemaIssue(
            path,
            f"Invalid value {value!r}, expected one of {allowed}",
            " | ".join(allowed),
            value,
        )
    ]


def _check_list(spec: FieldSpec, value: Any, path: str) -> tuple[tuple | None, list[SchemaIssue]]:
    if not isinstance(value, list):
        return None, [SchemaIssue(path, f"Expected array, got {type(value).__name__}", "array", value)]

    items = []
    issues: list[SchemaIssue] = []
    for i, item in enumerate(value):
        item_path = f"{path}[{i}]"
        if spec.kind == "id_list":
            checked, item_issues = _check_id(item, item_path)
        elif isinstance(item, str):
            checked, item_issues = item, []
        else:
            checked = None
            item_issues = [
                SchemaIssue(item_path, f"Expected string, got {type(item).__name__}", "string", item)
            ]
        issues.extend(item_issues)
        items.append(checked)

    if issues:
        return None, issues
    return tuple(items), []


def _check_field(spec: FieldSpec, raw: dict, path: str) -> tuple[Any, list[SchemaIssue]]:
    value = raw.get(spec.name, _MISSING)

    if value is _MISSING:
        if spec.required:
            return None, [SchemaIssue(path, "Required field is missing", spec.kind)]
        return spec.default, []

    if spec.kind == "id":
        return _check_id(value, path)
    if spec.kind == "enum":
        return _check_enum(spec, value, path)
    if spec.kind in ("id_list", "str_list"):
        return _check_list(spec, value, path)
    return _check_str(spec, value, path)


@dataclass
class EntitySchema:
    """Field table plus the record type it builds."""

    kind: EntityKind
    record_type: type
    fields: list[FieldSpec]

    def check(self, raw: Any, path: str = "") -> SchemaResult:
        """Validate one raw entity without raising."""
        where = path or self.kind.value
        if not isinstance(raw, dict):
            return SchemaResult(
                issues=[SchemaIssue(where, f"Expected object, got {type(raw).__name__}", "object", raw)]
            )

        values: dict[str, Any] = {}
        issues: list[SchemaIssue] = []
        for spec in self.fields:
            field_path = f"{path}.{spec.name}" if path else spec.name
            value, field_issues = _check_field(spec, raw, field_path)
            values[spec.name] = value
            issues.extend(field_issues)

        if issues:
            return SchemaResult(issues=issues)
        return SchemaResult(value=self.record_type(**values))


COMPANY_SCHEMA = EntitySchema(
    EntityKind.COMPANIES,
    Company,
    [
        FieldSpec("id", kind="id"),
        FieldSpec("name", min_length=1, max_length=100),
        FieldSpec("type", kind="enum", choices=CompanyType),
        FieldSpec("status", kind="enum", choices=CompanyStatus, required=False, default=CompanyStatus.ACTIVE),
    ],
)

TECHNOLOGY_SCHEMA = EntitySchema(
    EntityKind.TECHNOLOGIES,
    Technology,
    [
        FieldSpec("id", kind="id"),
        FieldSpec("name", min_length=1, max_length=100),
        FieldSpec("category", min_length=1),
        FieldSpec("subcategory", required=False),
    ],
)

MODULE_SCHEMA = EntitySchema(
    EntityKind.MODULES,
    Module,
    [
        FieldSpec("id", kind="id"),
        FieldSpec("name", min_length=1, max_length=100),
        FieldSpec("type"),
        FieldSpec("category", kind="enum", choices=ModuleCategory),
        FieldSpec("platform", required=False),
    ],
)

PROJECT_SCHEMA = EntitySchema(
    EntityKind.PROJECTS,
    Project,
    [
        FieldSpec("id", kind="id"),
        FieldSpec("name", min_length=1, max_length=200),
        FieldSpec("status", kind="enum", choices=ProjectStatus),
        FieldSpec("description", max_length=1000),
        FieldSpec("partners", kind="id_list", required=False, default=()),
        FieldSpec("technologies", kind="id_list", required=False, default=()),
        FieldSpec("platforms", kind="id_list", required=False, default=()),
        FieldSpec("modules", kind="id_list", required=False, default=()),
        FieldSpec("deliverables", kind="str_list", required=False, default=()),
    ],
)

INTEGRATION_SCHEMA = EntitySchema(
    EntityKind.INTEGRATIONS,
    Integration,
    [
        FieldSpec("id", kind="id"),
        FieldSpec("source", kind="id"),
        FieldSpec("target", kind="id"),
        FieldSpec("type"),
        FieldSpec("status", kind="enum", choices=IntegrationStatus),
        FieldSpec("projects", kind="id_list", required=False, default=()),
    ],
)

SCHEMAS: dict[EntityKind, EntitySchema] = {
    EntityKind.COMPANIES: COMPANY_SCHEMA,
    EntityKind.TECHNOLOGIES: TECHNOLOGY_SCHEMA,
    EntityKind.MODULES: MODULE_SCHEMA,
    EntityKind.PROJECTS: PROJECT_SCHEMA,
    EntityKind.INTEGRATIONS: INTEGRATION_SCHEMA,
}


def check_entity(kind: EntityKind | str, raw: Any) -> SchemaResult:
    """Validate a single raw entity of the given kind."""
    return SCHEMAS[EntityKind(kind)].check(raw)


def parse_entity(kind: EntityKind | str, raw: Any):
    """Validate a single raw entity, raising SchemaViolation on failure."""
    return check_entity(kind, raw).unwrap()


def check_snapshot(raw: Any) -> SchemaResult:
    """
    Validate a raw snapshot without raising.

    Accepts the flat shape ``{companies, technologies, modules, projects,
    integrations}`` as well as the export shape that nests the first three
    under ``entities`` and carries ``projectMetadata``. Absent collections
    default to empty; any other top-level key is kept on ``Snapshot.extra``.
    """
    if not isinstance(raw, dict):
        return SchemaResult(
            issues=[SchemaIssue("$", f"Expected object, got {type(raw).__name__}", "object", raw)]
        )

    issues: list[SchemaIssue] = []
    nested = raw.get("entities", _MISSING)
    if nested is _MISSING:
        nested = None
    elif not isinstance(nested, dict):
        issues.append(
            SchemaIssue("entities", f"Expected object, got {type(nested).__name__}", "object", nested)
        )
        nested = {}

    metadata = raw.get("projectMetadata", {})
    if not isinstance(metadata, dict):
        issues.append(
            SchemaIssue(
                "projectMetadata", f"Expected object, got {type(metadata).__name__}", "object", metadata
            )
        )

    consumed = {"entities", "projectMetadata"}
    collections: dict[str, tuple] = {}
    for kind in EntityKind:
        if nested is not None and kind in NESTED_KINDS:
            container, prefix = nested, f"entities.{kind.value}"
        else:
            container, prefix = raw, kind.value
            consumed.add(kind.value)

        items = container.get(kind.value, _MISSING)
        if items is _MISSING:
            collections[kind.value] = ()
            continue
        if not isinstance(items, list):
            issues.append(
                SchemaIssue(prefix, f"Expected array, got {type(items).__name__}", "array", items)
            )
            continue

        schema = SCHEMAS[kind]
        records = []
        for i, item in enumerate(items):
            result = schema.check(item, f"{prefix}[{i}]")
            issues.extend(result.issues)
            records.append(result.value)
        collections[kind.value] = tuple(records)

    if issues:
        return SchemaResult(issues=issues)

    return SchemaResult(
        value=Snapshot(
            **collections,
            metadata=dict(metadata),
            extra={k: v for k, v in raw.items() if k not in consumed},
            nested=nested is not None,
        )
    )


def parse_snapshot(raw: Any) -> Snapshot:
    """Validate a raw snapshot, raising SchemaViolation with every issue found."""
    return check_snapshot(raw).unwrap()
