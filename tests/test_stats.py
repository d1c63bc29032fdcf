"""
Tests for analytics and admin records.
"""

from datetime import datetime, timedelta, timezone

from portfolio_quality.analytics import admin_stats, generate_stats
from portfolio_quality.core.models import AdminProject, AdminSkill
from portfolio_quality.quality.reporter import check_admin_quality
from tests.conftest import SAMPLE_ADMIN_EXPORT

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


class TestGenerateStats:
    def test_counts(self, snapshot):
        stats = generate_stats(snapshot)
        assert stats["total_entities"] == 7
        assert stats["counts"]["technologies"] == 2
        assert stats["project_status"] == {"completed": 1}
        assert stats["company_status"] == {"active": 1, "inactive": 1}
        assert stats["integration_status"] == {"active": 1}

    def test_top_technologies_use_names(self, snapshot):
        stats = generate_stats(snapshot)
        assert stats["top_technologies"] == {"React": 1, "Akeneo": 1}
        assert stats["technology_categories"] == ["Frontend", "PIM"]


class TestAdminRecords:
    def test_extra_fields_round_trip(self):
        raw = {"id": "p1", "title": "Site", "featured": True, "category": "Web", "tags": ["a"]}
        project = AdminProject.from_dict(raw)
        assert project.extra == {"category": "Web", "tags": ["a"]}
        assert project.to_dict() == raw

    def test_skill_round_trip(self):
        raw = {"id": "s1", "name": "Python", "featured": False, "level": 90}
        skill = AdminSkill.from_dict(raw)
        assert skill.extra == {"level": 90}
        assert skill.to_dict() == raw

    def test_updated_from_epoch_millis(self):
        project = AdminProject(id="p", title="t", updated_at=1717200000000)
        assert project.updated == datetime(2024, 6, 1, tzinfo=timezone.utc)

    def test_updated_from_iso_string(self):
        project = AdminProject(id="p", title="t", updated_at="2024-05-20T10:00:00Z")
        assert project.updated == datetime(2024, 5, 20, 10, tzinfo=timezone.utc)

    def test_updated_unparseable(self):
        assert AdminProject(id="p", title="t", updated_at="yesterday").updated is None
        assert AdminProject(id="p", title="t").updated is None

    def test_updated_out_of_range_epoch(self):
        assert AdminProject(id="p", title="t", updated_at=10**20).updated is None
        assert AdminProject(id="p", title="t", updated_at=float("inf")).updated is None
        assert AdminProject(id="p", title="t", updated_at=float("nan")).updated is None


class TestAdminStats:
    def _records(self):
        projects = [AdminProject.from_dict(p) for p in SAMPLE_ADMIN_EXPORT["projects"]]
        skills = [AdminSkill.from_dict(s) for s in SAMPLE_ADMIN_EXPORT["skills"]]
        return projects, skills

    def test_counters(self):
        projects, skills = self._records()
        stats = admin_stats(projects, skills, SAMPLE_ADMIN_EXPORT["experiences"], now=NOW)
        assert stats["total_projects"] == 3
        assert stats["total_skills"] == 2
        assert stats["total_experiences"] == 1
        assert stats["featured_projects"] == 2
        assert stats["featured_skills"] == 0

    def test_score_without_report(self):
        projects, skills = self._records()
        assert admin_stats(projects, skills, now=NOW)["data_quality_score"] == 100

    def test_score_with_report(self):
        projects, skills = self._records()
        report = check_admin_quality(projects, skills)
        assert admin_stats(projects, skills, report=report, now=NOW)["data_quality_score"] == 90

    def test_recently_updated(self):
        projects = [
            AdminProject(id="a", title="a", updated_at=(NOW - timedelta(days=2)).isoformat()),
            AdminProject(id="b", title="b", updated_at=int((NOW - timedelta(days=40)).timestamp() * 1000)),
            AdminProject(id="c", title="c"),
        ]
        assert admin_stats(projects, [], now=NOW)["recently_updated"] == 1

    def test_out_of_range_timestamps_not_counted(self):
        projects = [
            AdminProject(id="a", title="a", updated_at=10**20),
            AdminProject(id="b", title="b", updated_at=-(10**20)),
            AdminProject(id="c", title="c", updated_at=(NOW - timedelta(days=1)).isoformat()),
        ]
        assert admin_stats(projects, [], now=NOW)["recently_updated"] == 1
