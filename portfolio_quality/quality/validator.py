"""
Integrity validation for portfolio snapshots.

Runs three independent passes over a structurally valid snapshot:
duplicate ids, dangling references, and unused entities. Every finding
is returned as data; nothing here raises.
"""

from __future__ import annotations

from ..core.models import SYSTEM_ENDPOINT, CompanyStatus, Snapshot
from .reporter import Finding, IssueKind, QualityReport
from .schema import EntityKind


def _check_duplicates(snapshot: Snapshot, report: QualityReport):
    for kind in EntityKind:
        entities = getattr(snapshot, kind.value)
        seen: set[str] = set()
        for entity in entities:
            if entity.id in seen:
                report.add_error(
                    Finding(
                        kind=IssueKind.DUPLICATE,
                        entity=kind.value,
                        field="id",
                        message=f"Duplicate ID found: {entity.id}",
                        value=entity.id,
                    )
                )
                report.stats.duplicates += 1
            seen.add(entity.id)
        report.stats.total_entities += len(entities)


def _missing(report: QualityReport, entity: str, field_name: str, message: str, value: str):
    report.add_error(
        Finding(
            kind=IssueKind.MISSING_REFERENCE,
            entity=entity,
            field=field_name,
            message=message,
            value=value,
        )
    )
    report.stats.broken_references += 1


def _check_references(snapshot: Snapshot, report: QualityReport):
    # Built from the raw collections: a duplicated id still exists
    company_ids = {c.id for c in snapshot.companies}
    tech_ids = {t.id for t in snapshot.technologies}
    module_ids = {m.id for m in snapshot.modules}
    project_ids = {p.id for p in snapshot.projects}

    project_refs = (
        ("partners", company_ids, "company"),
        ("technologies", tech_ids, "technology"),
        ("modules", module_ids, "module"),
    )
    for project in snapshot.projects:
        for field_name, known, label in project_refs:
            for ref in getattr(project, field_name):
                if ref not in known:
                    _missing(
                        report,
                        EntityKind.PROJECTS.value,
                        field_name,
                        f'Project "{project.name}" references non-existent {label}: {ref}',
                        ref,
                    )

    for integration in snapshot.integrations:
        for field_name in ("source", "target"):
            ref = getattr(integration, field_name)
            if ref != SYSTEM_ENDPOINT and ref not in tech_ids and ref not in module_ids:
                _missing(
                    report,
                    EntityKind.INTEGRATIONS.value,
                    field_name,
                    f'Integration "{integration.id}" references non-existent entity: {ref}',
                    ref,
                )
        for ref in integration.projects:
            if ref not in project_ids:
                _missing(
                    report,
                    EntityKind.INTEGRATIONS.value,
                    "projects",
                    f'Integration "{integration.id}" references non-existent project: {ref}',
                    ref,
                )


def _unused(report: QualityReport, entity: str, message: str):
    report.add_warning(Finding(kind=IssueKind.UNUSED_ENTITY, entity=entity, message=message))
    report.stats.unused_entities += 1


def _check_unused(snapshot: Snapshot, report: QualityReport):
    used_tech: set[str] = set()
    used_modules: set[str] = set()
    used_companies: set[str] = set()

    for project in snapshot.projects:
        used_tech.update(project.technologies)
        used_modules.update(project.modules)
        used_companies.update(project.partners)

    # Integration endpoints only ever count towards technologies
    for integration in snapshot.integrations:
        for ref in (integration.source, integration.target):
            if ref != SYSTEM_ENDPOINT:
                used_tech.add(ref)

    for tech in snapshot.technologies:
        if tech.id not in used_tech:
            _unused(
                report,
                EntityKind.TECHNOLOGIES.value,
                f'Technology "{tech.name}" ({tech.id}) is not used in any project or integration',
            )

    for module in snapshot.modules:
        if module.id not in used_modules:
            _unused(
                report,
                EntityKind.MODULES.value,
                f'Module "{module.name}" ({module.id}) is not used in any project',
            )

    for company in snapshot.companies:
        if company.status == CompanyStatus.ACTIVE and company.id not in used_companies:
            _unused(
                report,
                EntityKind.COMPANIES.value,
                f'Active company "{company.name}" ({company.id}) is not associated with any project',
            )


def validate_snapshot(snapshot: Snapshot) -> QualityReport:
    """
    Compute the quality report for a snapshot.

    Args:
        snapshot: Schema-validated snapshot

    Returns:
        QualityReport; ``is_valid`` is False when any error was found
    """
    report = QualityReport()
    _check_duplicates(snapshot, report)
    _check_references(snapshot, report)
    _check_unused(snapshot, report)
    return report
