#!/usr/bin/env python3
"""Create the volunteer SQLite3 database with projects, signups and API log tables."""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH
from core.database import get_connection, init_schema


def create_database(db_path: Path = DB_PATH) -> Path:
    """Create the database and tables if they don't exist."""
    # Ensure directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        init_schema(conn)
    finally:
        conn.close()
    return db_path


def main():
    parser = argparse.ArgumentParser(description="Create the volunteer scheduling database")
    parser.add_argument(
        "--db",
        type=Path,
        default=DB_PATH,
        help=f"Database file (default: {DB_PATH})",
    )
    args = parser.parse_args()

    db_path = create_database(args.db)
    print(f"Database created successfully at: {db_path}")


if __name__ == "__main__":
    main()
