import io
from unittest import mock

import pytest
from openpyxl import Workbook

from hrms.payroll.importers import spreadsheet
from hrms.payroll.importers.spreadsheet import SALARY_OF_ATTENDANCE
from hrms.payroll.importers.spreadsheet import EmptySpreadsheet
from hrms.payroll.importers.spreadsheet import SpreadsheetParseError
from hrms.payroll.importers.spreadsheet import TooManyRows
from hrms.payroll.importers.spreadsheet import UnsupportedFileFormat
from hrms.payroll.importers.spreadsheet import canonical_header
from hrms.payroll.importers.spreadsheet import detect_format
from hrms.payroll.importers.spreadsheet import read_payroll_sheet
from hrms.payroll.tests.factories import build_payroll_csv
from hrms.payroll.tests.factories import payroll_cells


def _xlsx(rows) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class TestDetectFormat:
    def test_by_extension(self):
        assert detect_format("payroll.CSV") == "csv"
        assert detect_format("payroll.xlsx") == "xlsx"
        assert detect_format("payroll.xls") == "xls"

    def test_csv_by_content_type(self):
        assert detect_format("export", "text/csv; charset=utf-8") == "csv"

    def test_rejects_other_files(self):
        with pytest.raises(UnsupportedFileFormat, match="Invalid file format"):
            detect_format("payroll.pdf", "application/pdf")


def test_header_aliases_are_canonicalized():
    assert canonical_header("  email ") == "EMAIL"
    assert canonical_header("PAYE") == "Payee"
    assert canonical_header("net   salary") == "Net Salary"
    assert canonical_header("Cost Centre") == "Cost Centre"


def test_bilingual_header_survives_irregular_whitespace():
    header = "出勤薪资  Salary\nOf Attendance"
    assert canonical_header(header) == SALARY_OF_ATTENDANCE
    assert canonical_header("salary of attendance") == SALARY_OF_ATTENDANCE


def test_csv_rows_are_numbered_from_two_and_blank_rows_skipped():
    content = build_payroll_csv(
        [payroll_cells(EMAIL="a@x.com"), {}, payroll_cells(EMAIL="b@x.com")]
    )
    rows = read_payroll_sheet(content, "payroll.csv")
    assert [row.row_number for row in rows] == [2, 4]
    assert rows[1].get("EMAIL") == "b@x.com"
    assert rows[0].get("Net Salary") == "430000"


def test_percentage_template_row_is_dropped():
    template = {column: "" for column in payroll_cells()}
    template.update({"Basic": "15%", "Housing": "10%"})
    content = build_payroll_csv(
        [template, payroll_cells(EMAIL="a@x.com"), payroll_cells(EMAIL="b@x.com")]
    )
    rows = read_payroll_sheet(content, "payroll.csv")
    assert [row.row_number for row in rows] == [3, 4]


def test_xlsx_first_sheet_is_read():
    content = _xlsx(
        [
            ["Name", "Email", "Net Salary"],
            ["Ada Obi", "ada@x.com", 1000.5],
            [None, None, None],
        ]
    )
    rows = read_payroll_sheet(content, "payroll.xlsx")
    assert len(rows) == 1
    assert rows[0].cells == {
        "Name": "Ada Obi",
        "EMAIL": "ada@x.com",
        "Net Salary": 1000.5,
    }


def test_header_only_file_is_empty():
    with pytest.raises(EmptySpreadsheet, match="No payroll data found"):
        read_payroll_sheet(build_payroll_csv([]), "payroll.csv")


def test_corrupt_workbook_is_a_parse_error():
    with pytest.raises(SpreadsheetParseError, match="Error parsing file"):
        read_payroll_sheet(b"definitely not a zip", "payroll.xlsx")


def test_row_limit():
    content = build_payroll_csv([payroll_cells(EMAIL=f"{i}@x.com") for i in range(3)])
    with pytest.raises(TooManyRows):
        read_payroll_sheet(content, "payroll.csv", max_rows=2)


def test_legacy_xls_first_sheet_is_read():
    values = [
        ["Name", "E-mail", "Net Salary"],
        ["Ada Obi", "ada@x.com", 1000.0],
        ["", "", ""],
    ]
    sheet = mock.Mock(nrows=len(values))
    sheet.row_values.side_effect = lambda index: values[index]
    book = mock.Mock(nsheets=2)
    book.sheet_by_index.return_value = sheet

    with mock.patch.object(
        spreadsheet.xlrd, "open_workbook", return_value=book
    ) as open_workbook:
        rows = read_payroll_sheet(b"\xd0\xcf\x11\xe0", "payroll.xls")

    open_workbook.assert_called_once_with(file_contents=b"\xd0\xcf\x11\xe0")
    book.sheet_by_index.assert_called_once_with(0)
    assert len(rows) == 1
    assert rows[0].row_number == 2
    assert rows[0].cells == {
        "Name": "Ada Obi",
        "EMAIL": "ada@x.com",
        "Net Salary": 1000.0,
    }


def test_xls_without_sheets_is_a_parse_error():
    book = mock.Mock(nsheets=0)
    with mock.patch.object(spreadsheet.xlrd, "open_workbook", return_value=book):
        with pytest.raises(SpreadsheetParseError, match="No worksheet found"):
            read_payroll_sheet(b"\xd0\xcf\x11\xe0", "payroll.xls")
