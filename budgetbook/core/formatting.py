"""Display formatting for amounts, dates and month names (he-IL convention)."""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOLS = {
    "ILS": "₪",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

MONTH_NAMES = (
    "ינואר",
    "פברואר",
    "מרץ",
    "אפריל",
    "מאי",
    "יוני",
    "יולי",
    "אוגוסט",
    "ספטמבר",
    "אוקטובר",
    "נובמבר",
    "דצמבר",
)


def _group_thousands(amount: float) -> str:
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return f"{rounded:,}"


def format_currency(amount: float, currency: str = "ILS") -> str:
    """Format an amount with no decimal places.

    Shekels lead with the sign (``₪1,235``, ``₪-40``); other currencies follow the number (``1,235 $``, ``7 CHF``).
    """
    number = _group_thousands(amount)
    if currency == "ILS":
        return f"₪{number}"
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol:
        return f"{number} {symbol}"
    return f"{number} {currency}"


def format_date(value: date) -> str:
    """Format a date as ``DD.MM.YYYY``."""
    return value.strftime("%d.%m.%Y")


def format_datetime(value: datetime) -> str:
    """Format a datetime as ``DD.MM.YYYY, HH:MM``."""
    return value.strftime("%d.%m.%Y, %H:%M")


def month_name(index: int) -> str:
    """Return the display name of a zero-based month index (0 = January)."""
    if not 0 <= index < len(MONTH_NAMES):
        msg = f"Month index out of range: {index}"
        raise ValueError(msg)
    return MONTH_NAMES[index]
