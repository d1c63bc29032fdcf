#!/usr/bin/env python3
"""
Portfolio Quality CLI

Command-line interface for validating and cleaning portfolio data exports.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment
load_dotenv()

from portfolio_quality import QualityEngine
from portfolio_quality.analytics import admin_stats, generate_stats
from portfolio_quality.core.models import AdminProject, AdminSkill
from portfolio_quality.quality import SchemaViolation, check_admin_quality, merge_records
from portfolio_quality.sources import SnapshotLoadError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger("cli")


def _read_json(path):
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise SnapshotLoadError(f"File not found: {path}") from None
    except json.JSONDecodeError as e:
        raise SnapshotLoadError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise SnapshotLoadError(f"Could not read {path}: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotLoadError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def _write_json(path, data):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def _print_violation(err):
    print(f"\nSchema validation failed ({len(err.issues)} issues):\n")
    for issue in err.issues:
        print(f"  {issue.path}: {issue.message}")


def cmd_status(args):
    """Show engine status."""
    with QualityEngine(source=args.source, data_dir=args.data_dir) as engine:
        status = engine.status()
        print("\n" + "=" * 50)
        print("  PORTFOLIO QUALITY STATUS")
        print("=" * 50)
        for key, value in status.items():
            print(f"  {key}: {value}")
        latest = engine.storage.latest_report()
        if latest:
            print(f"  last_report: {latest['name']} (score {latest['score']})")
        print("=" * 50 + "\n")


def cmd_validate(args):
    """Validate a snapshot."""
    with QualityEngine(source=args.source, data_dir=args.data_dir) as engine:
        try:
            report = engine.check(args.location, save=args.save)
        except SchemaViolation as e:
            _print_violation(e)
            return 2

        if args.json:
            print(report.to_json())
        else:
            print(report.summary_text())

        return 0 if report.is_valid else 1


def cmd_dedup(args):
    """Write a deduplicated copy of a snapshot."""
    with QualityEngine(source=args.source, data_dir=args.data_dir) as engine:
        try:
            snapshot = engine.deduplicate(args.location)
        except SchemaViolation as e:
            _print_violation(e)
            return 2

        _write_json(args.output, snapshot.to_dict())
        print(f"\nSaved {snapshot.total_entities} entities to {args.output}")


def cmd_score(args):
    """Duplicate check and score for an admin export."""
    data = _read_json(args.export)
    projects = [AdminProject.from_dict(p) for p in data.get("projects", [])]
    skills = [AdminSkill.from_dict(s) for s in data.get("skills", [])]
    experiences = data.get("experiences", [])

    report = check_admin_quality(projects, skills, experiences)
    stats = admin_stats(projects, skills, experiences, report=report)

    print(report.summary_text())
    print("\nDashboard:")
    for key, value in stats.items():
        print(f"  {key}: {value}")


def cmd_merge(args):
    """Merge an admin export with local seed data."""
    primary = _read_json(args.primary)
    secondary = _read_json(args.secondary)

    merged = dict(primary)
    merged["projects"] = merge_records(
        primary.get("projects", []), secondary.get("projects", []), key="title"
    )
    merged["skills"] = merge_records(
        primary.get("skills", []), secondary.get("skills", []), key="name"
    )
    merged["experiences"] = primary.get("experiences") or secondary.get("experiences", [])

    _write_json(args.output, merged)
    print(
        f"\nMerged {len(merged['projects'])} projects and "
        f"{len(merged['skills'])} skills into {args.output}"
    )


def cmd_stats(args):
    """Print snapshot statistics."""
    with QualityEngine(source=args.source, data_dir=args.data_dir) as engine:
        try:
            snapshot = engine.load(args.location)
        except SchemaViolation as e:
            _print_violation(e)
            return 2
        print(json.dumps(generate_stats(snapshot), indent=2))


def main():
    parser = argparse.ArgumentParser(
        description="Portfolio Quality CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py validate data.json
  python cli.py --source http validate https://example.com/data.json --json
  python cli.py dedup data.json --output data.clean.json
  python cli.py score portfolio-data-export.json
  python cli.py merge portfolio-data-export.json seed.json --output merged.json
  python cli.py stats data.json
        """
    )
    parser.add_argument(
        "--source", "-s",
        default=None,
        help="Snapshot source: file or http (default: SNAPSHOT_SOURCE or file)"
    )
    parser.add_argument(
        "--data-dir", "-d",
        default=None,
        help="Directory for reports and snapshots"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # Status
    sub = subparsers.add_parser("status", help="Show engine status")
    sub.set_defaults(func=cmd_status)

    # Validate
    sub = subparsers.add_parser("validate", help="Validate a snapshot")
    sub.add_argument("location", nargs="?", help="File path or URL")
    sub.add_argument("--json", action="store_true", help="Print the report as JSON")
    sub.add_argument("--save", action="store_true", help="Store the report in the data dir")
    sub.set_defaults(func=cmd_validate)

    # Dedup
    sub = subparsers.add_parser("dedup", help="Remove duplicate ids")
    sub.add_argument("location", nargs="?", help="File path or URL")
    sub.add_argument("--output", "-o", required=True, help="Output file")
    sub.set_defaults(func=cmd_dedup)

    # Score
    sub = subparsers.add_parser("score", help="Admin duplicate check and score")
    sub.add_argument("export", help="Admin export JSON (projects/skills/experiences)")
    sub.set_defaults(func=cmd_score)

    # Merge
    sub = subparsers.add_parser("merge", help="Merge two admin exports")
    sub.add_argument("primary", help="Export whose records win on conflict")
    sub.add_argument("secondary", help="Seed data appended when new")
    sub.add_argument("--output", "-o", required=True, help="Output file")
    sub.set_defaults(func=cmd_merge)

    # Stats
    sub = subparsers.add_parser("stats", help="Snapshot statistics")
    sub.add_argument("location", nargs="?", help="File path or URL")
    sub.set_defaults(func=cmd_stats)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args) or 0
    except SnapshotLoadError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
