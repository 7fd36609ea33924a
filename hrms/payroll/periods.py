"""Payroll periods.

A period is a (year, month) pair. Sheets may spell the month as "January",
"Jan" or "1"; the text as written is kept as the display label.

How a period is keyed in the database depends on
``settings.PAYROLL_PERIOD_KEY_MODE``:

* ``"normalized"``: ``"YYYY-MM"``, so every spelling of a month addresses the
  same payroll record;
* ``"label"``: the month text exactly as written, so "January" and "Jan" are
  kept as two separate records (the behaviour of older payroll sheets).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from decimal import InvalidOperation

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_MONTH_LOOKUP = {name.lower(): idx for idx, name in enumerate(MONTH_NAMES, 1)}
_MONTH_LOOKUP.update({name[:3].lower(): idx for idx, name in enumerate(MONTH_NAMES, 1)})

KEY_MODE_NORMALIZED = "normalized"
KEY_MODE_LABEL = "label"
KEY_MODES = (KEY_MODE_NORMALIZED, KEY_MODE_LABEL)


class InvalidPeriod(ValueError):
    pass


def _as_integer(value) -> int | None:
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if number != number.to_integral_value():
        return None
    return int(number)


def parse_month(value) -> int:
    """Return the month number (1-12) for a name, abbreviation or number."""
    text = str(value if value is not None else "").strip().lower()
    if text in _MONTH_LOOKUP:
        return _MONTH_LOOKUP[text]
    number = _as_integer(text) if text else None
    if number is not None and 1 <= number <= 12:
        return number
    msg = f"Invalid month value: '{value}'"
    raise InvalidPeriod(msg)


def parse_year(value) -> int:
    number = _as_integer(value) if str(value).strip() else None
    if number is None or not 1900 <= number <= 9999:
        msg = f"Invalid year value: '{value}'"
        raise InvalidPeriod(msg)
    return number


def get_key_mode() -> str:
    mode = getattr(settings, "PAYROLL_PERIOD_KEY_MODE", KEY_MODE_NORMALIZED)
    if mode not in KEY_MODES:
        msg = (
            f"PAYROLL_PERIOD_KEY_MODE must be one of {', '.join(KEY_MODES)}; "
            f"got '{mode}'"
        )
        raise ImproperlyConfigured(msg)
    return mode


@dataclass(frozen=True)
class Period:
    year: int
    month: int
    label: str = ""

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            msg = f"Month must be between 1 and 12, got {self.month}"
            raise InvalidPeriod(msg)

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def display_label(self) -> str:
        return self.label or self.month_name

    def key(self, mode: str | None = None) -> str:
        mode = mode or get_key_mode()
        if mode == KEY_MODE_LABEL:
            return self.display_label
        return f"{self.year:04d}-{self.month:02d}"

    @classmethod
    def current(cls, today: date | None = None) -> Period:
        today = today or timezone.localdate()
        return cls(
            year=today.year, month=today.month, label=MONTH_NAMES[today.month - 1]
        )

    @classmethod
    def from_cells(
        cls, month_value, year_value, *, today: date | None = None
    ) -> Period:
        """Build a period from optional Month/Year cells.

        Blank cells fall back to the current month and year.
        """
        default = cls.current(today)
        month_text = str(month_value).strip() if month_value not in (None, "") else ""
        year_text = str(year_value).strip() if year_value not in (None, "") else ""

        if month_text:
            month, label = parse_month(month_text), month_text[:20]
        else:
            month, label = default.month, default.label
        year = parse_year(year_text) if year_text else default.year
        return cls(year=year, month=month, label=label)
