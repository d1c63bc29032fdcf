"""
Statistics over portfolio data.
"""

from collections import Counter
from datetime import datetime, timedelta, timezone

from ..quality.reporter import QualityReport, quality_score

RECENT_WINDOW = timedelta(days=30)


def generate_stats(snapshot) -> dict:
    """
    Generate statistics from a snapshot.

    Args:
        snapshot: Validated Snapshot

    Returns:
        Statistics dict
    """
    tech_usage = Counter()
    for project in snapshot.projects:
        tech_usage.update(project.technologies)

    tech_names = {t.id: t.name for t in snapshot.technologies}

    return {
        "total_entities": snapshot.total_entities,
        "counts": {
            "companies": len(snapshot.companies),
            "technologies": len(snapshot.technologies),
            "modules": len(snapshot.modules),
            "projects": len(snapshot.projects),
            "integrations": len(snapshot.integrations),
        },
        "project_status": dict(Counter(p.status.value for p in snapshot.projects)),
        "integration_status": dict(Counter(i.status.value for i in snapshot.integrations)),
        "company_status": dict(Counter(c.status.value for c in snapshot.companies)),
        "top_technologies": {
            tech_names.get(tech_id, tech_id): count
            for tech_id, count in tech_usage.most_common(10)
        },
        "technology_categories": sorted({t.category for t in snapshot.technologies}),
    }


def admin_stats(
    projects: list,
    skills: list,
    experiences: list | None = None,
    report: QualityReport | None = None,
    now: datetime | None = None,
) -> dict:
    """
    Counters shown on the admin dashboard.

    Args:
        projects: AdminProject records
        skills: AdminSkill records
        experiences: Raw experience dicts
        report: Last quality report, if a check has been run
        now: Reference time for the "recently updated" window

    Returns:
        Stats dict
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - RECENT_WINDOW

    recently_updated = sum(1 for p in projects if p.updated and p.updated > cutoff)

    return {
        "total_projects": len(projects),
        "total_skills": len(skills),
        "total_experiences": len(experiences or []),
        "featured_projects": sum(1 for p in projects if p.featured),
        "featured_skills": sum(1 for s in skills if s.featured),
        "recently_updated": recently_updated,
        "data_quality_score": quality_score(report.stats if report else None),
    }
