"""Amount parsing for statement files and command-line input."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

CENT = Decimal("0.01")

_CURRENCY = re.compile(r"^[A-Za-z]{3}\s+|\s+[A-Za-z]{3}$|[$€£¥]")


def parse_amount(value: Union[str, int, float, Decimal]) -> Decimal:
    """Parse a money amount and round it to cents.

    Accepts plain numbers and the usual bank statement spellings:
    "1,234.56", "$12.00", "-$12.00", "USD 12.00", "(12.00)" and a trailing
    minus such as "12.00-". Floats go through ``str`` so that 0.1 stays 0.1.

    Raises:
        ValueError: If the value is empty or not a finite number
    """
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        amount = _parse_text(value)

    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number, got '{value}'")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _parse_text(text: str) -> Decimal:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValueError("Empty amount string")

    negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        negative = True
        cleaned = cleaned[1:-1]
    elif cleaned.endswith("-"):
        negative = True
        cleaned = cleaned[:-1]

    cleaned = _CURRENCY.sub("", cleaned.strip()).replace(",", "").replace(" ", "")
    if cleaned.startswith("-"):
        negative = not negative
        cleaned = _CURRENCY.sub("", cleaned[1:])

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{text}'") from None
    return -amount if negative else amount
