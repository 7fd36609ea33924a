"""Statutory payroll arithmetic (Nigeria).

These helpers are available to HR tooling; uploaded payroll sheets are
stored as provided and never recomputed with them.
"""

from decimal import ROUND_HALF_UP
from decimal import Decimal

CENTS = Decimal("0.01")
MINIMUM_CONSOLIDATED_RELIEF = Decimal("200000")
CONSOLIDATED_RELIEF_RATE = Decimal("0.20")

# (upper bound of band, tax due at the lower bound, marginal rate)
PAYE_BANDS = (
    (Decimal("300000"), Decimal("0"), Decimal("0.07")),
    (Decimal("600000"), Decimal("21000"), Decimal("0.11")),
    (Decimal("1100000"), Decimal("54000"), Decimal("0.15")),
    (Decimal("1600000"), Decimal("129000"), Decimal("0.19")),
    (Decimal("3200000"), Decimal("224000"), Decimal("0.21")),
    (None, Decimal("560000"), Decimal("0.24")),
)

SALARY_COMPONENT_SPLIT = {
    "basic": Decimal("0.15"),
    "housing": Decimal("0.10"),
    "transport": Decimal("0.10"),
    "dressing": Decimal("0.15"),
    "leave_allowance": Decimal("0.15"),
    "entertainment": Decimal("0.20"),
    "utility": Decimal("0.20"),
}


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_consolidated_relief(annual_gross: Decimal) -> Decimal:
    """Greater of 20% of annual gross pay and 200,000."""
    relief = Decimal(annual_gross) * CONSOLIDATED_RELIEF_RATE
    return _money(max(relief, MINIMUM_CONSOLIDATED_RELIEF))


def calculate_paye(taxable_income: Decimal) -> Decimal:
    """Annual PAYE on a taxable income using the graduated bands.

    Non-positive income owes nothing.
    """
    income = Decimal(taxable_income)
    if income <= 0:
        return Decimal("0.00")
    lower = Decimal("0")
    for upper, base, rate in PAYE_BANDS:
        if upper is None or income <= upper:
            break
        lower = upper
    return _money(base + (income - lower) * rate)


def split_salary_components(prorated_gross: Decimal) -> dict[str, Decimal]:
    """Break a prorated gross pay into the standard allowance components."""
    amount = Decimal(prorated_gross)
    return {
        name: _money(amount * share) for name, share in SALARY_COMPONENT_SPLIT.items()
    }


def prorate_amount(base_salary: Decimal, worked_days: int, period_days: int) -> Decimal:
    """Prorate calculation used across the payroll module.

    Formula: (worked_days / period_days) * base_salary

    Notes:
    - If period_days is zero, returns 0.
    - Uses Decimal arithmetic and rounds to 2 decimal places.
    """
    if period_days <= 0:
        return Decimal("0.00")
    ratio = Decimal(worked_days) / Decimal(period_days)
    return (Decimal(base_salary) * ratio).quantize(CENTS)
