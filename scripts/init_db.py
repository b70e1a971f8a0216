"""Create the payroll records schema.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --database-url sqlite+aiosqlite:///payroll.db
    python scripts/init_db.py --drop
"""

from __future__ import annotations

import argparse
import asyncio

from payroll_records.config import get_settings
from payroll_records.database import get_engine
from payroll_records.models import Base


async def init_schema(database_url: str, drop: bool) -> None:
    """Create all tables, optionally dropping existing ones first."""
    engine = get_engine(database_url)
    target = database_url.split("@")[1] if "@" in database_url else database_url
    print(f"Target database: {target}")

    try:
        async with engine.begin() as conn:
            if drop:
                print("Dropping existing tables...")
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()

    print(f"Created tables: {', '.join(sorted(Base.metadata.tables))}")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create the payroll records schema")
    parser.add_argument(
        "--database-url",
        type=str,
        default=get_settings().database_url,
        help="Database URL (default: from settings)",
    )
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop existing tables before creating them",
    )

    args = parser.parse_args()

    asyncio.run(init_schema(args.database_url, args.drop))


if __name__ == "__main__":
    main()
