#!/usr/bin/env python3
"""
Export per-slot signup capacity for public projects to an Excel workbook.

Usage:
    uv run python src/scripts/create_capacity_report.py [--status upcoming] [--output PATH]

Example:
    uv run python src/scripts/create_capacity_report.py --status in-progress
"""

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH, OUTPUT_DIR
from core.database import get_connection, get_signups, list_projects
from services.projects import list_active_projects
from services.reports import save_capacity_report


def generate_capacity_report(
    db_path: Path,
    output_path: Path | None = None,
    status: str | None = None,
    now: datetime | None = None,
) -> Path:
    """Load public projects and their signups, then write the capacity workbook."""
    now = now or datetime.now(timezone.utc)

    conn = get_connection(db_path)
    try:
        projects = list_projects(conn)
        signups = get_signups(conn, [p.id for p in projects])
    finally:
        conn.close()

    summaries = list_active_projects(projects, signups, now, status=status)
    print(f"Found {len(summaries)} projects")

    if output_path is None:
        output_path = OUTPUT_DIR / "reports" / f"capacity_report_{now.strftime('%Y_%m_%d')}.xlsx"
    return save_capacity_report(summaries, output_path)


def main():
    parser = argparse.ArgumentParser(
        description="Export per-slot signup capacity to Excel"
    )
    parser.add_argument(
        "--status",
        choices=["upcoming", "in-progress", "completed", "cancelled"],
        help="Only include projects currently in this status",
    )
    parser.add_argument("--output", type=Path, help="Output .xlsx path")
    parser.add_argument("--db", type=Path, default=DB_PATH, help="Database file")

    args = parser.parse_args()

    try:
        output_path = generate_capacity_report(args.db, args.output, args.status)
        print(f"\nCapacity report saved: {output_path}")
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
