import io
from decimal import Decimal

from openpyxl import load_workbook

from hrms.payroll.reports import build_failed_records_workbook
from hrms.payroll.reports import failed_record_columns


def test_columns_keep_first_seen_order_with_error_last():
    records = [
        {"Name": "Ada", "error": "bad", "Basic": "x"},
        {"EMAIL": "b@x.com", "Name": "Bola", "error": "worse"},
    ]
    assert failed_record_columns(records) == ["Name", "Basic", "EMAIL", "error"]


def test_workbook_contains_every_failed_row():
    records = [
        {"Name": "Ada Obi", "Net Salary": Decimal("-5"), "error": "negative"},
        {"Name": "Bola", "Net Salary": "abc", "error": "Invalid numeric values"},
    ]
    workbook = load_workbook(io.BytesIO(build_failed_records_workbook(records)))
    sheet = workbook.active

    assert sheet.title == "Failed Records"
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0] == ("Name", "Net Salary", "error")
    assert rows[1] == ("Ada Obi", -5, "negative")
    assert rows[2] == ("Bola", "abc", "Invalid numeric values")
    assert sheet["A1"].font.bold


def test_formula_text_is_exported_as_plain_text():
    payload = '=HYPERLINK("http://evil.example.com","click")'
    records = [{"Name": payload, "EMAIL": "=1+1", "=SUM(A1)": "", "error": "not found"}]
    workbook = load_workbook(io.BytesIO(build_failed_records_workbook(records)))
    sheet = workbook.active

    assert sheet["A2"].data_type == "s"
    assert sheet["A2"].value == payload
    assert sheet["B2"].data_type == "s"
    assert sheet["B2"].value == "=1+1"
    assert sheet["C1"].data_type == "s"
    assert sheet["C1"].value == "=SUM(A1)"
