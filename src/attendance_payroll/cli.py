"""Payroll Command Line Interface.

Provides tools for:
- Pay period lookup
- Pay calculation from a JSON document
- Pay calculation from the attendance database

Usage:
    python -m attendance_payroll period --date 2025-01-15 --frequency weekly
    python -m attendance_payroll calculate --input payroll.json --date 2025-01-15
    python -m attendance_payroll run --date 2025-01-15 --employee-id EMP001
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Callable, TextIO

from pydantic import ValidationError

from attendance_payroll.calculators.engine import PayrollEngine
from attendance_payroll.calculators.periods import (
    compute_pay_period_bounds,
    days_until,
    next_payday,
    pay_date_for_period,
)
from attendance_payroll.calculators.types import PayFrequency
from attendance_payroll.config import Settings, get_settings
from attendance_payroll.errors import AttendanceFetchError
from attendance_payroll.schemas import PayrollInput, pay_run_to_dict


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string."""
    try:
        return date.fromisoformat(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {s!r}, expected YYYY-MM-DD") from None


def parse_frequency(s: str) -> PayFrequency:
    """Parse pay frequency name."""
    try:
        return PayFrequency.parse(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


class PayrollCli:
    """Payroll Command Line Interface."""

    def __init__(
        self,
        settings: Settings | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.settings = settings
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m attendance_payroll",
            description="Attendance-based payroll tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # period command
        period = subparsers.add_parser(
            "period",
            help="Show the pay period containing a date",
        )
        period.add_argument(
            "--date",
            type=parse_date,
            default=None,
            help="Reference date (default: today)",
        )
        period.add_argument(
            "--frequency",
            type=parse_frequency,
            help="weekly, biweekly or monthly (default: PAY_FREQUENCY)",
        )

        # calculate command
        calculate = subparsers.add_parser(
            "calculate",
            help="Calculate pay from a JSON document",
        )
        calculate.add_argument(
            "--input",
            type=str,
            required=True,
            help="Path to JSON document with employees and attendance ('-' for stdin)",
        )
        calculate.add_argument(
            "--date",
            type=parse_date,
            default=None,
            help="Reference date (default: today)",
        )
        calculate.add_argument(
            "--frequency",
            type=parse_frequency,
            help="weekly, biweekly or monthly (default: PAY_FREQUENCY)",
        )

        # run command
        run = subparsers.add_parser(
            "run",
            help="Calculate pay from the attendance database",
        )
        run.add_argument(
            "--date",
            type=parse_date,
            default=None,
            help="Reference date (default: today)",
        )
        run.add_argument(
            "--frequency",
            type=parse_frequency,
            help="weekly, biweekly or monthly (default: PAY_FREQUENCY)",
        )
        run.add_argument(
            "--employee-id",
            action="append",
            dest="employee_ids",
            help="Restrict to this employee (repeatable)",
        )
        run.add_argument(
            "--database-url",
            type=str,
            help="Override DATABASE_URL",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help(self.stderr)
            return 1

        if self.settings is None:
            self.settings = get_settings()
        logging.basicConfig(
            level=self.settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=self.stderr,
        )

        handlers: dict[str, Callable[..., int]] = {
            "period": self._cmd_period,
            "calculate": self._cmd_calculate,
            "run": self._cmd_run,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=self.stderr)
        return 1

    def _frequency(self, args: argparse.Namespace) -> PayFrequency:
        return args.frequency or self.settings.pay_frequency

    def _emit(self, data: dict[str, Any]) -> None:
        json.dump(data, self.stdout, indent=2)
        self.stdout.write("\n")

    def _cmd_period(self, args: argparse.Namespace) -> int:
        """Show pay period bounds, pay date and the following payday."""
        today = date.today()
        reference = args.date or today
        frequency = self._frequency(args)

        period = compute_pay_period_bounds(
            reference, frequency, anchor=self.settings.biweekly_anchor_date
        )
        pay_date = pay_date_for_period(period.end, frequency)

        self._emit({
            "frequency": frequency.value,
            "start": period.start.isoformat(),
            "end": period.end.isoformat(),
            "days": period.days,
            "pay_date": pay_date.isoformat(),
            "next_payday": next_payday(pay_date, frequency).isoformat(),
            "days_until_pay_date": days_until(pay_date, today),
        })
        return 0

    def _cmd_calculate(self, args: argparse.Namespace) -> int:
        """Calculate a pay run from a JSON document."""
        try:
            if args.input == "-":
                raw = sys.stdin.read()
            else:
                raw = Path(args.input).read_text(encoding="utf-8")
            document = PayrollInput.model_validate_json(raw)
        except OSError as e:
            print(f"ERROR: cannot read {args.input}: {e}", file=self.stderr)
            return 2
        except ValidationError as e:
            print(f"ERROR: invalid payroll document:\n{e}", file=self.stderr)
            return 2

        entries, build_errors = document.to_pay_inputs(
            default_overtime_multiplier=self.settings.default_overtime_multiplier,
            default_tax_rate=self.settings.default_tax_rate,
            daily_overtime_threshold=self.settings.daily_overtime_threshold,
        )

        period = compute_pay_period_bounds(
            args.date or date.today(),
            self._frequency(args),
            anchor=self.settings.biweekly_anchor_date,
        )
        run = PayrollEngine(self.settings).calculate_pay_run(entries, period)
        run.errors.update(build_errors)
        self._emit(pay_run_to_dict(run))
        return 0 if run.success else 1

    def _cmd_run(self, args: argparse.Namespace) -> int:
        """Calculate a pay run from the database."""
        try:
            run = asyncio.run(self._preview_from_database(args))
        except AttendanceFetchError as e:
            print(f"ERROR: {e}", file=self.stderr)
            return 2

        self._emit(pay_run_to_dict(run))
        return 0 if run.success else 1

    async def _preview_from_database(self, args: argparse.Namespace):
        from attendance_payroll.database import dispose_db, get_session
        from attendance_payroll.services import PayrollService

        try:
            async with get_session(args.database_url or self.settings.database_url) as session:
                service = PayrollService(session, self.settings)
                return await service.preview_pay_run(
                    args.date or date.today(),
                    self._frequency(args),
                    args.employee_ids,
                )
        finally:
            await dispose_db()


def main() -> int:
    """CLI entry point."""
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
