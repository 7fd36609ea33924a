"""
Read uploaded spreadsheets into rows keyed by canonical column names.

Supported inputs are CSV, ``.xlsx`` (openpyxl) and legacy ``.xls`` (xlrd).
Only the first worksheet of a workbook is read. Row numbers are the real
sheet row numbers, with the header on row 1, so errors can be traced back to
the file HR uploaded.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
from pathlib import PurePath
from typing import Any

import openpyxl
import xlrd

logger = logging.getLogger(__name__)

SALARY_OF_ATTENDANCE = "出勤薪资 Salary Of Attendance"

CANONICAL_HEADERS = (
    "Name",
    "Resumption Date",
    "No of Working Days in the Month",
    "No of days Worked",
    "Gross Pay",
    "Prorated Gross Pay",
    "Basic",
    "Housing",
    "Transport",
    "Dressing",
    "Leave Allowance",
    "Entertainment",
    "Utility",
    SALARY_OF_ATTENDANCE,
    "PRORATED GROSS PAY WITH EXTRA ALL'WCE",
    "TAXABLE INCOME",
    "Payee",
    "Pension",
    "Deduction",
    "Bonus KPI",
    "Net Salary",
    "FINAL GROSS",
    "Medical Contribution",
    "Employer Pension",
    "NSITF",
    "Prorated Sub Total Invoice",
    "Mgt Fee",
    "Vat on Management Fee @7.5%",
    "Total Invoice Value",
    "EMAIL",
    "Month",
    "Year",
)

# Other spellings seen in payroll sheets, keyed by normalized header.
HEADER_ALIASES = {
    "paye": "Payee",
    "bonus": "Bonus KPI",
    "bonus/kpi": "Bonus KPI",
    "deductions": "Deduction",
    "email": "EMAIL",
    "e-mail": "EMAIL",
    "email address": "EMAIL",
    "full name": "Name",
    "staff name": "Name",
    "salary of attendance": SALARY_OF_ATTENDANCE,
    "working days": "No of Working Days in the Month",
    "days worked": "No of days Worked",
}

# Columns whose template row 2 carries the percentage split (e.g. "15%").
PERCENTAGE_COLUMNS = (
    "Basic",
    "Housing",
    "Transport",
    "Dressing",
    "Leave Allowance",
    "Entertainment",
    "Utility",
    "Medical Contribution",
)

CSV_CONTENT_TYPES = {"text/csv", "application/csv"}


class SpreadsheetFileError(Exception):
    """The uploaded file cannot be processed at all."""


class UnsupportedFileFormat(SpreadsheetFileError):
    pass


class SpreadsheetParseError(SpreadsheetFileError):
    pass


class EmptySpreadsheet(SpreadsheetFileError):
    pass


class TooManyRows(SpreadsheetFileError):
    pass


@dataclass
class SheetRow:
    row_number: int
    cells: dict[str, Any] = field(default_factory=dict)

    def get(self, column: str, default=None):
        return self.cells.get(column, default)


def normalize_header(value) -> str:
    return re.sub(r"\s+", " ", str(value if value is not None else "")).strip().lower()


_CANONICAL_MAP = {normalize_header(h): h for h in CANONICAL_HEADERS}
_CANONICAL_MAP.update(HEADER_ALIASES)


def canonical_header(value) -> str:
    """Map a header cell to its canonical column name.

    Unknown headers are kept, trimmed, so they still show up in exports.
    """
    key = normalize_header(value)
    return _CANONICAL_MAP.get(key) or re.sub(r"\s+", " ", str(value or "")).strip()


def detect_format(file_name: str, content_type: str = "") -> str:
    suffix = PurePath(file_name or "").suffix.lower()
    mime = (content_type or "").split(";")[0].strip().lower()
    if suffix == ".csv" or mime in CSV_CONTENT_TYPES:
        return "csv"
    if suffix in (".xlsx", ".xls"):
        return suffix[1:]
    msg = (
        "Invalid file format. "
        "Please upload an Excel (.xlsx, .xls) or CSV (.csv) file."
    )
    raise UnsupportedFileFormat(msg)


def _read_csv(content: bytes) -> list[list[Any]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("latin-1")
    reader = csv.reader(io.StringIO(text, newline=""))
    return [[value.strip() for value in record] for record in reader]


def _read_xlsx(content: bytes) -> list[list[Any]]:
    workbook = openpyxl.load_workbook(io.BytesIO(content), data_only=True)
    try:
        if not workbook.worksheets:
            msg = "No worksheet found in Excel file"
            raise SpreadsheetParseError(msg)
        worksheet = workbook.worksheets[0]
        return [list(row) for row in worksheet.iter_rows(min_row=1, values_only=True)]
    finally:
        workbook.close()


def _read_xls(content: bytes) -> list[list[Any]]:
    book = xlrd.open_workbook(file_contents=content)
    if book.nsheets == 0:
        msg = "No worksheet found in Excel file"
        raise SpreadsheetParseError(msg)
    sheet = book.sheet_by_index(0)
    return [sheet.row_values(index) for index in range(sheet.nrows)]


_READERS = {"csv": _read_csv, "xlsx": _read_xlsx, "xls": _read_xls}


def _is_blank(value) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def looks_like_percentage_row(row: SheetRow) -> bool:
    for column in PERCENTAGE_COLUMNS:
        value = row.get(column)
        if isinstance(value, str) and "%" in value:
            return True
    return False


def read_sheet(
    content: bytes,
    file_name: str,
    content_type: str = "",
    *,
    header: Callable[[Any], str] = canonical_header,
) -> list[SheetRow]:
    """Parse the first sheet of an uploaded file into non-blank data rows.

    ``header`` turns each header cell into the key used for that column.
    """
    file_format = detect_format(file_name, content_type)

    try:
        raw_rows = _READERS[file_format](content)
    except SpreadsheetParseError:
        raise
    except Exception as exc:  # noqa: BLE001
        msg = f"Error parsing file: {exc}"
        raise SpreadsheetParseError(msg) from exc

    if not raw_rows or all(_is_blank(v) for v in raw_rows[0]):
        msg = "Error parsing file: missing header row"
        raise SpreadsheetParseError(msg)

    headers = [header(v) if not _is_blank(v) else "" for v in raw_rows[0]]

    rows: list[SheetRow] = []
    for row_number, values in enumerate(raw_rows[1:], start=2):
        if all(_is_blank(v) for v in values):
            continue
        cells: dict[str, Any] = {}
        for index, key in enumerate(headers):
            if not key:
                continue
            cells[key] = values[index] if index < len(values) else ""
        rows.append(SheetRow(row_number=row_number, cells=cells))
    return rows


def check_row_count(
    rows: list[SheetRow], *, label: str, max_rows: int | None = None
) -> None:
    if not rows:
        msg = f"No {label} data found in the file"
        raise EmptySpreadsheet(msg)
    if max_rows is not None and len(rows) > max_rows:
        msg = (
            f"File contains {len(rows)} {label} rows; "
            f"the maximum per upload is {max_rows}"
        )
        raise TooManyRows(msg)


def read_payroll_sheet(
    content: bytes,
    file_name: str,
    content_type: str = "",
    *,
    max_rows: int | None = None,
) -> list[SheetRow]:
    """Parse an uploaded payroll file into data rows.

    Raises a ``SpreadsheetFileError`` subclass when the file as a whole is
    unusable; individual row problems are left to the row validator.
    """
    rows = read_sheet(content, file_name, content_type)

    if rows and looks_like_percentage_row(rows[0]):
        logger.debug("Dropping percentage template row %s", rows[0].row_number)
        rows = rows[1:]

    check_row_count(rows, label="payroll", max_rows=max_rows)
    return rows
