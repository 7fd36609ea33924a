"""Validate spreadsheet rows into typed payroll rows.

Every figure is parsed into a ``Decimal``. Thousands separators, spaces and a
leading currency marker (``₦`` or ``NGN``) are tolerated; anything else that
is not a number fails the row instead of silently becoming zero.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from dataclasses import field
from datetime import date
from decimal import ROUND_HALF_UP
from decimal import Decimal
from decimal import InvalidOperation
from enum import Enum
from typing import Any

from hrms.payroll.importers.spreadsheet import SheetRow
from hrms.payroll.periods import InvalidPeriod
from hrms.payroll.periods import Period

CENTS = Decimal("0.01")
_CURRENCY_PREFIX = re.compile(r"^(₦|ngn)\s*", re.IGNORECASE)


class RequiredColumn(str, Enum):
    """Columns every payroll row must fill in, in reporting order."""

    GROSS_PAY = "Gross Pay"
    BASIC = "Basic"
    HOUSING = "Housing"
    TRANSPORT = "Transport"
    DRESSING = "Dressing"
    LEAVE_ALLOWANCE = "Leave Allowance"
    ENTERTAINMENT = "Entertainment"
    UTILITY = "Utility"
    PAYEE = "Payee"
    PENSION = "Pension"
    DEDUCTION = "Deduction"
    BONUS_KPI = "Bonus KPI"
    NET_SALARY = "Net Salary"
    FINAL_GROSS = "FINAL GROSS"
    MEDICAL_CONTRIBUTION = "Medical Contribution"
    WORKING_DAYS = "No of Working Days in the Month"
    DAYS_WORKED = "No of days Worked"


FIELD_FOR_COLUMN = {
    RequiredColumn.GROSS_PAY: "gross_pay",
    RequiredColumn.BASIC: "basic",
    RequiredColumn.HOUSING: "housing",
    RequiredColumn.TRANSPORT: "transport",
    RequiredColumn.DRESSING: "dressing",
    RequiredColumn.LEAVE_ALLOWANCE: "leave_allowance",
    RequiredColumn.ENTERTAINMENT: "entertainment",
    RequiredColumn.UTILITY: "utility",
    RequiredColumn.PAYEE: "paye",
    RequiredColumn.PENSION: "pension",
    RequiredColumn.DEDUCTION: "deductions",
    RequiredColumn.BONUS_KPI: "bonus_kpi",
    RequiredColumn.NET_SALARY: "net_salary",
    RequiredColumn.FINAL_GROSS: "final_gross",
    RequiredColumn.MEDICAL_CONTRIBUTION: "medical_contribution",
    RequiredColumn.WORKING_DAYS: "working_days",
    RequiredColumn.DAYS_WORKED: "days_worked",
}

OPTIONAL_NUMERIC_COLUMNS = {"Prorated Gross Pay": "prorated_gross_pay"}


class RowError(Exception):
    """A single payroll row is invalid; the rest of the batch carries on."""

    def __init__(self, message: str, row_number: int | None = None):
        super().__init__(message)
        self.message = message
        self.row_number = row_number


@dataclass
class PayrollRow:
    row_number: int
    name: str
    email: str
    period: Period
    gross_pay: Decimal
    prorated_gross_pay: Decimal
    basic: Decimal
    housing: Decimal
    transport: Decimal
    dressing: Decimal
    leave_allowance: Decimal
    entertainment: Decimal
    utility: Decimal
    paye: Decimal
    pension: Decimal
    deductions: Decimal
    bonus_kpi: Decimal
    net_salary: Decimal
    final_gross: Decimal
    medical_contribution: Decimal
    working_days: Decimal
    days_worked: Decimal
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def other_allowances(self) -> Decimal:
        return self.leave_allowance + self.entertainment + self.utility

    @property
    def identifier(self) -> str:
        return self.name or self.email

    def figures(self) -> dict[str, Decimal]:
        """Stored payroll amounts keyed by model field name."""
        names = [*FIELD_FOR_COLUMN.values(), *OPTIONAL_NUMERIC_COLUMNS.values()]
        return {name: getattr(self, name) for name in names}


def is_blank(value) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def parse_amount(value) -> Decimal:
    """Parse a spreadsheet cell into a Decimal rounded to kobo.

    Blank cells are zero. Raises ``ValueError`` for anything non-numeric.
    """
    if is_blank(value):
        return Decimal("0.00")
    if isinstance(value, bool):
        msg = f"Not a number: {value!r}"
        raise ValueError(msg)
    if isinstance(value, (int, float, Decimal)):
        number = Decimal(str(value))
    else:
        text = _CURRENCY_PREFIX.sub("", str(value).strip())
        text = text.replace(",", "").replace(" ", "")
        try:
            number = Decimal(text)
        except InvalidOperation:
            msg = f"Not a number: {value!r}"
            raise ValueError(msg) from None
    if not number.is_finite():
        msg = f"Not a number: {value!r}"
        raise ValueError(msg)
    return number.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_row(row: SheetRow, *, today: date | None = None) -> PayrollRow:
    """Validate one sheet row. Raises ``RowError`` describing the first problem."""
    name = _text(row.get("Name"))
    email = _text(row.get("EMAIL"))
    if not name and not email:
        msg = "Missing Name/EMAIL for staff identification"
        raise RowError(msg, row.row_number)

    missing = [
        column.value for column in RequiredColumn if is_blank(row.get(column.value))
    ]
    if missing:
        msg = f"Missing required column values: {', '.join(missing)}"
        raise RowError(msg, row.row_number)

    figures: dict[str, Decimal] = {}
    invalid: list[str] = []
    columns = [(column.value, attr) for column, attr in FIELD_FOR_COLUMN.items()]
    columns.extend(OPTIONAL_NUMERIC_COLUMNS.items())
    for column, attr in columns:
        try:
            figures[attr] = parse_amount(row.get(column))
        except ValueError:
            invalid.append(column)
    if invalid:
        msg = f"Invalid numeric values for columns: {', '.join(invalid)}"
        raise RowError(msg, row.row_number)

    try:
        period = Period.from_cells(row.get("Month"), row.get("Year"), today=today)
    except InvalidPeriod as exc:
        raise RowError(str(exc), row.row_number) from exc

    if figures["net_salary"] < 0:
        msg = "Net Salary cannot be negative. Check payroll values."
        raise RowError(msg, row.row_number)

    return PayrollRow(
        row_number=row.row_number,
        name=name,
        email=email,
        period=period,
        raw=dict(row.cells),
        **figures,
    )


def validate_row(row: SheetRow, *, today: date | None = None) -> PayrollRow | RowError:
    """Like ``parse_row`` but hands back the error instead of raising it."""
    try:
        return parse_row(row, today=today)
    except RowError as exc:
        return exc
