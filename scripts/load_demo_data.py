"""Load demo site data into the database.

Usage:
    python scripts/load_demo_data.py [--database-url URL] [--project-id 1] [--days 10]

Creates the schema if needed, then adds a small crew, their wage rates,
a run of approved attendance and two material bills awaiting review.
Useful for exercising the API and CLI against a local database.
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date, timedelta
from decimal import Decimal

from wage_ledger.config import get_settings
from wage_ledger.database import create_schema, get_engine, make_session_factory
from wage_ledger.models import AttendanceRecord, Labour, MaterialBill, WageRate

CREW = [
    ("Ravi Kumar", "MASON", "HOURLY", Decimal("8")),
    ("Anil Sharma", "PAINTER", "HOURLY", Decimal("7.5")),
    ("Suresh Patil", "HELPER", "DAILY", Decimal("8")),
]

RATES = {
    "MASON": Decimal("95.00"),
    "PAINTER": Decimal("80.00"),
    "HELPER": Decimal("650.00"),
}

BILLS = [
    ("CEMENT", Decimal("18500.00")),
    ("STEEL", Decimal("42750.50")),
]


async def load_demo_data(database_url: str, project_id: int, days: int) -> None:
    """Insert demo rows for one project."""
    print(f"Target database: {database_url.split('@')[1] if '@' in database_url else database_url}")

    engine = get_engine(database_url)
    try:
        await create_schema(engine)
        async with make_session_factory(engine)() as session:
            labourers = [Labour(name=name, skill_type=skill) for name, skill, _, _ in CREW]
            session.add_all(labourers)
            session.add_all(
                WageRate(project_id=project_id, skill_type=skill, rate=rate)
                for skill, rate in RATES.items()
            )
            await session.flush()

            start = date.today() - timedelta(days=days)
            attendance_count = 0
            for offset in range(days):
                day = start + timedelta(days=offset)
                if day.weekday() == 6:
                    continue
                for labour, (_, _, wage_type, hours) in zip(labourers, CREW):
                    session.add(
                        AttendanceRecord(
                            labour_id=labour.id,
                            project_id=project_id,
                            attendance_date=day,
                            worked_hours=hours,
                            wage_type=wage_type,
                        )
                    )
                    attendance_count += 1

            session.add_all(
                MaterialBill(project_id=project_id, category=category, total_amount=amount)
                for category, amount in BILLS
            )
            await session.commit()

        print("\nResults:")
        print(f"  Labourers: {len(labourers)}")
        print(f"  Wage rates: {len(RATES)}")
        print(f"  Attendance records: {attendance_count}")
        print(f"  Material bills: {len(BILLS)}")
        print("\nDemo data loaded successfully!")
    finally:
        await engine.dispose()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Load demo site data into the database")
    parser.add_argument(
        "--database-url",
        type=str,
        default=get_settings().database_url,
        help="Database URL (default: from settings)",
    )
    parser.add_argument("--project-id", type=int, default=1, help="Project to populate")
    parser.add_argument("--days", type=int, default=10, help="Days of attendance to create")

    args = parser.parse_args()

    asyncio.run(load_demo_data(args.database_url, args.project_id, args.days))


if __name__ == "__main__":
    main()
