"""Pytest fixtures for wage ledger tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from wage_ledger.api.app import create_app
from wage_ledger.api.dependencies import get_db_session
from wage_ledger.context import Actor
from wage_ledger.database import create_schema, get_engine, make_session_factory
from wage_ledger.models import (
    AttendanceRecord,
    Labour,
    LedgerEntry,
    MaterialBill,
    WageRate,
)

PROJECT_ID = 7
OTHER_PROJECT_ID = 8

MANAGER_HEADERS = {"X-Actor-Id": "1", "X-Actor-Role": "manager"}
OWNER_HEADERS = {"X-Actor-Id": "2", "X-Actor-Role": "owner"}


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite so concurrent sessions use separate connections."""
    engine = get_engine(f"sqlite+aiosqlite:///{tmp_path / 'wage_ledger.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest_asyncio.fixture(scope="function")
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def manager() -> Actor:
    return Actor(id=1, role="manager", name="Site Manager")


@pytest.fixture
def owner() -> Actor:
    return Actor(id=2, role="owner", name="Owner")


class Seeder:
    """Inserts the rows other collaborators own (labour, attendance, bills)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _save(self, *rows):
        async with self.session_factory() as session:
            session.add_all(rows)
            await session.commit()
        return rows[0] if len(rows) == 1 else list(rows)

    async def labour(self, name: str = "Ravi Kumar", skill_type: str = "MASON") -> Labour:
        return await self._save(Labour(name=name, skill_type=skill_type))

    async def attendance(
        self,
        labour: Labour,
        *,
        project_id: int = PROJECT_ID,
        attendance_date: date = date(2024, 3, 6),
        worked_hours: str = "8",
        wage_type: str = "HOURLY",
        status: str = "APPROVED",
    ) -> AttendanceRecord:
        return await self._save(
            AttendanceRecord(
                labour_id=labour.id,
                project_id=project_id,
                attendance_date=attendance_date,
                worked_hours=Decimal(worked_hours),
                wage_type=wage_type,
                status=status,
            )
        )

    async def many_attendance(self, labour: Labour, count: int, **kwargs) -> list[AttendanceRecord]:
        return [await self.attendance(labour, **kwargs) for _ in range(count)]

    async def rate(
        self, skill_type: str = "MASON", rate: str = "50", project_id: int = PROJECT_ID
    ) -> WageRate:
        return await self._save(
            WageRate(project_id=project_id, skill_type=skill_type, rate=Decimal(rate))
        )

    async def material_bill(
        self, total_amount: str = "1200.00", category: str = "CEMENT", project_id: int = PROJECT_ID
    ) -> MaterialBill:
        return await self._save(
            MaterialBill(project_id=project_id, category=category, total_amount=Decimal(total_amount))
        )

    async def ledger_entries(
        self, *specs: tuple[date, str, str], project_id: int = PROJECT_ID
    ) -> list[LedgerEntry]:
        """Insert ledger rows from (entry_date, entry_type, amount) tuples, in order."""
        rows = []
        async with self.session_factory() as session:
            for index, (entry_date, entry_type, amount) in enumerate(specs, start=1):
                row = LedgerEntry(
                    project_id=project_id,
                    entry_date=entry_date,
                    entry_type=entry_type,
                    reference_id=1000 + index,
                    description=f"{entry_type} #{index}",
                    amount=Decimal(amount),
                    approved_by=1,
                    approved_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
                )
                session.add(row)
                # Flush one by one so ids follow the given order
                await session.flush()
                rows.append(row)
            await session.commit()
        return rows


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client bound to the test database."""
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

