"""Tests for the display formatting helpers."""

from datetime import date, datetime

import pytest

from budgetbook.core.formatting import format_currency, format_date, format_datetime, month_name


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (1234.5, "₪1,235"),
        (0, "₪0"),
        (-40, "₪-40"),
        (999.49, "₪999"),
        (2.5, "₪3"),
        (-0.2, "₪0"),
        (1250000, "₪1,250,000"),
    ],
)
def test_format_currency_ils(amount: float, expected: str) -> None:
    """Amounts are rounded half up to whole shekels with thousands separators."""
    result = format_currency(amount)
    if result != expected:
        msg = f"Expected {expected!r}, got {result!r}"
        raise AssertionError(msg)


def test_format_currency_other_codes() -> None:
    """Other currencies put the symbol or the code after the number."""
    if format_currency(1500, "USD") != "1,500 $":
        msg = f"Unexpected USD format {format_currency(1500, 'USD')!r}"
        raise AssertionError(msg)
    if format_currency(-2.5, "EUR") != "-3 €":
        msg = f"Unexpected EUR format {format_currency(-2.5, 'EUR')!r}"
        raise AssertionError(msg)
    if format_currency(7, "CHF") != "7 CHF":
        msg = f"Unexpected CHF format {format_currency(7, 'CHF')!r}"
        raise AssertionError(msg)


def test_format_date_and_datetime() -> None:
    """Dates render as DD.MM.YYYY and datetimes add the time of day."""
    if format_date(date(2025, 3, 7)) != "07.03.2025":
        msg = f"Unexpected date {format_date(date(2025, 3, 7))!r}"
        raise AssertionError(msg)
    if format_datetime(datetime(2025, 12, 31, 9, 5)) != "31.12.2025, 09:05":
        msg = f"Unexpected datetime {format_datetime(datetime(2025, 12, 31, 9, 5))!r}"
        raise AssertionError(msg)


def test_month_name_is_zero_based() -> None:
    """Index 0 is January and index 11 is December."""
    if month_name(0) != "ינואר" or month_name(11) != "דצמבר":
        msg = f"Unexpected month names {month_name(0)!r}, {month_name(11)!r}"
        raise AssertionError(msg)


@pytest.mark.parametrize("index", [-1, 12])
def test_month_name_out_of_range(index: int) -> None:
    """Indexes outside 0-11 are rejected."""
    with pytest.raises(ValueError, match="out of range"):
        month_name(index)
