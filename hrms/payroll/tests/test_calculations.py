from decimal import Decimal

import pytest

from hrms.payroll.calculations import calculate_consolidated_relief
from hrms.payroll.calculations import calculate_paye
from hrms.payroll.calculations import prorate_amount
from hrms.payroll.calculations import split_salary_components


def test_consolidated_relief_has_a_floor():
    assert calculate_consolidated_relief(Decimal("500000")) == Decimal("200000.00")
    assert calculate_consolidated_relief(Decimal("2000000")) == Decimal("400000.00")


@pytest.mark.parametrize(
    ("income", "expected"),
    [
        ("0", "0.00"),
        ("-100", "0.00"),
        ("300000", "21000.00"),
        ("400000", "32000.00"),
        ("600000", "54000.00"),
        ("1100000", "129000.00"),
        ("2000000", "308000.00"),
        ("4200000", "800000.00"),
    ],
)
def test_paye_bands(income, expected):
    assert calculate_paye(Decimal(income)) == Decimal(expected)


def test_salary_split():
    parts = split_salary_components(Decimal("100000"))
    assert parts["basic"] == Decimal("15000.00")
    assert parts["utility"] == Decimal("20000.00")
    assert list(parts) == [
        "basic",
        "housing",
        "transport",
        "dressing",
        "leave_allowance",
        "entertainment",
        "utility",
    ]


def test_prorate_amount():
    assert prorate_amount(Decimal("22000"), 11, 22) == Decimal("11000.00")
    assert prorate_amount(Decimal("22000"), 11, 0) == Decimal("0.00")
