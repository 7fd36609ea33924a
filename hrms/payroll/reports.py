"""Failed-row export for spreadsheet uploads."""

from __future__ import annotations

import io
from datetime import date
from decimal import Decimal
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.styles import PatternFill
from openpyxl.utils import get_column_letter

FAILED_SHEET_TITLE = "Failed Records"
ERROR_COLUMN = "error"
HEADER_FONT = Font(bold=True, color="FFFFFFFF")
HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFDC3545")
COLUMN_WIDTH = 22


def failed_record_columns(records: list[dict[str, Any]]) -> list[str]:
    """Every key seen across the records, first-seen order, ``error`` last."""
    columns: list[str] = []
    for record in records:
        for key in record:
            if key != ERROR_COLUMN and key not in columns:
                columns.append(key)
    columns.append(ERROR_COLUMN)
    return columns


def _cell_value(value):
    if value is None or isinstance(value, (str, int, float, Decimal, date)):
        return value
    return str(value)


def _append_text_row(sheet, values) -> None:
    """Append a row; uploaded text starting with "=" stays text, not a formula."""
    sheet.append(values)
    for cell in sheet[sheet.max_row]:
        if isinstance(cell.value, str) and cell.value.startswith("="):
            cell.data_type = "s"


def build_failed_records_workbook(records: list[dict[str, Any]]) -> bytes:
    """Write failed upload rows (with their error) to an ``.xlsx`` file."""
    columns = failed_record_columns(records)

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = FAILED_SHEET_TITLE
    _append_text_row(sheet, columns)
    for record in records:
        _append_text_row(sheet, [_cell_value(record.get(column)) for column in columns])

    for index, _column in enumerate(columns, start=1):
        cell = sheet.cell(row=1, column=index)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        sheet.column_dimensions[get_column_letter(index)].width = COLUMN_WIDTH

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
