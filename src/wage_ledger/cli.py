"""Wage ledger command line interface.

Provides operational tools for:
- Schema creation
- Unprocessed attendance listing
- Ledger queries with running totals
- Weekly cost and period summaries

Usage:
    python -m wage_ledger.cli init-db
    python -m wage_ledger.cli unprocessed --project-id 7
    python -m wage_ledger.cli ledger --project-id 7 --start 2024-01-01 --type WAGE
    python -m wage_ledger.cli weekly-cost --project-id 7
    python -m wage_ledger.cli summary --project-id 7
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from datetime import date
from typing import Any, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger.database import create_schema, get_engine, make_session_factory
from wage_ledger.exceptions import WageLedgerError
from wage_ledger.logging_config import configure_logging
from wage_ledger.models import LedgerEntryType
from wage_ledger.services.cost_rollup import CostRollup
from wage_ledger.services.ledger_service import LedgerQuery, LedgerService
from wage_ledger.services.wage_service import WageEngine

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    """Parse ISO date string."""
    return date.fromisoformat(s)


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses and ORM rows into plain JSON-friendly data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, list):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class WageLedgerCli:
    """Wage ledger command line interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m wage_ledger.cli",
            description="Wage ledger operational tools",
        )
        parser.add_argument(
            "--database-url",
            type=str,
            help="Database URL (default: $DATABASE_URL)",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            help="Log level (default: $LOG_LEVEL)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser("init-db", help="Create all tables")

        unprocessed = subparsers.add_parser(
            "unprocessed",
            help="List attendance without a wage record",
        )
        unprocessed.add_argument("--project-id", type=int, required=True, help="Project ID")

        ledger = subparsers.add_parser(
            "ledger",
            help="Show a project's ledger with running totals",
        )
        ledger.add_argument("--project-id", type=int, required=True, help="Project ID")
        ledger.add_argument("--start", type=parse_date, help="First entry date (YYYY-MM-DD)")
        ledger.add_argument("--end", type=parse_date, help="Last entry date (YYYY-MM-DD)")
        ledger.add_argument(
            "--type",
            type=str,
            choices=[t.value for t in LedgerEntryType],
            help="Only show entries of this type",
        )
        ledger.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
        ledger.add_argument("--limit", type=int, default=100, help="Page size (default: 100)")

        weekly = subparsers.add_parser(
            "weekly-cost",
            help="Wage and material cost per week",
        )
        weekly.add_argument("--project-id", type=int, required=True, help="Project ID")

        summary = subparsers.add_parser(
            "summary",
            help="Ledger totals per entry type",
        )
        summary.add_argument("--project-id", type=int, required=True, help="Project ID")
        summary.add_argument("--start", type=parse_date, help="Period start (YYYY-MM-DD)")
        summary.add_argument("--end", type=parse_date, help="Period end (YYYY-MM-DD)")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        configure_logging(parsed.log_level)

        handlers: dict[str, Callable[[AsyncSession, argparse.Namespace], Awaitable[Any]]] = {
            "unprocessed": self._cmd_unprocessed,
            "ledger": self._cmd_ledger,
            "weekly-cost": self._cmd_weekly_cost,
            "summary": self._cmd_summary,
        }

        if parsed.command == "init-db":
            return asyncio.run(self._init_db(parsed))

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            output = asyncio.run(self._with_session(parsed, handler))
        except WageLedgerError as exc:
            print(json.dumps({"error": exc.code, "detail": str(exc)}), file=sys.stderr)
            return 2

        print(json.dumps(to_jsonable(output), indent=2, default=str))
        return 0

    async def _init_db(self, args: argparse.Namespace) -> int:
        engine = get_engine(args.database_url)
        try:
            await create_schema(engine)
        finally:
            await engine.dispose()
        logger.info("Schema created")
        return 0

    async def _with_session(
        self,
        args: argparse.Namespace,
        handler: Callable[[AsyncSession, argparse.Namespace], Awaitable[Any]],
    ) -> Any:
        engine = get_engine(args.database_url)
        try:
            async with make_session_factory(engine)() as session:
                return await handler(session, args)
        finally:
            await engine.dispose()

    async def _cmd_unprocessed(self, session: AsyncSession, args: argparse.Namespace) -> Any:
        records = await WageEngine(session).list_unprocessed(args.project_id)
        return {"attendance": records}

    async def _cmd_ledger(self, session: AsyncSession, args: argparse.Namespace) -> Any:
        page = await LedgerService(session).query(
            args.project_id,
            LedgerQuery(
                start_date=args.start,
                end_date=args.end,
                entry_type=LedgerEntryType(args.type) if args.type else None,
                page=args.page,
                limit=args.limit,
            ),
        )
        return {
            "entries": page.entries,
            "pagination": {
                "page": page.pagination.page,
                "limit": page.pagination.limit,
                "total": page.pagination.total,
                "total_pages": page.pagination.total_pages,
            },
            "opening_balance": page.opening_balance,
        }

    async def _cmd_weekly_cost(self, session: AsyncSession, args: argparse.Namespace) -> Any:
        return {"weekly_costs": await CostRollup(session).weekly_cost(args.project_id)}

    async def _cmd_summary(self, session: AsyncSession, args: argparse.Namespace) -> Any:
        summary = await CostRollup(session).period_summary(args.project_id, args.start, args.end)
        return {
            "project_id": summary.project_id,
            "totals": summary.totals,
            "grand_total": summary.grand_total,
            "entry_count": summary.entry_count,
        }


def main() -> int:
    """CLI entry point."""
    cli = WageLedgerCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
