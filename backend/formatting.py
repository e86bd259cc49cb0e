# backend/formatting.py — prices are stored in cents and shown as "$1,234.56"
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CURRENCY_SYMBOL = "$"


class PriceFormatError(ValueError):
    pass


def format_price(cents) -> str:
    try:
        cents = int(cents or 0)
    except (TypeError, ValueError):
        return "—"
    return f"{CURRENCY_SYMBOL}{Decimal(cents) / 100:,.2f}"


def parse_price(raw: str) -> int:
    """
    Converts strings like '$1,234.56', '36.90', '36' into cents.
    Rules:
      - strips the currency symbol, spaces and thousands separators
      - rounds half up to whole cents
    """
    s = (raw or "").strip()
    if not s:
        return 0
    s = s.replace(CURRENCY_SYMBOL, "").replace(" ", "").replace(",", "")

    try:
        val = Decimal(s)
    except InvalidOperation:
        raise PriceFormatError("Invalid amount. Use something like 12.50.")
    if not val.is_finite():
        raise PriceFormatError("Invalid amount. Use something like 12.50.")

    if val < 0:
        raise PriceFormatError("Price cannot be negative.")

    return int((val * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
