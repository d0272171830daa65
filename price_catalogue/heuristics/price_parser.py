"""
Price string parsing.

Turns a free-form price-looking string ("£1,234.56", "1.234,56 EUR",
"$5") into a decimal value and, where one can be seen, an ISO currency
code. Both "," and "." are accepted as either thousands or decimal
separator: a trailing group of exactly two digits is the decimal part,
every other separator groups thousands.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from price_catalogue.models.extraction import ParsedPrice

# Scanned in order; a later symbol found in the string replaces an earlier one.
CURRENCY_SYMBOLS = {
    "£": "GBP",
    "€": "EUR",
    "$": "USD",
    "¥": "JPY",
}

ISO_CURRENCY_RE = re.compile(r"\b(GBP|USD|EUR|JPY)\b", re.I)

NUMBER_RE = re.compile(
    r"\d{1,3}(?:[.,]\d{3})*[.,]\d{2}(?!\d)"   # 1,234.56 / 1.234,56
    r"|\d+[.,]\d{2}(?!\d)"                    # 1234.56 / 1234,56
    r"|\d{1,3}(?:[.,]\d{3})+(?!\d)"           # 1,299 / 1.299
    r"|\d+"                                   # 1299
)

DECIMAL_TAIL_RE = re.compile(r"[.,](\d{2})$")
SEPARATOR_RE = re.compile(r"[.,]")
WHITESPACE_RE = re.compile(r"\s+")


def detect_currency(text: str) -> Optional[str]:
    """Currency from a symbol, overridden by an explicit ISO token."""
    currency = None
    for symbol, code in CURRENCY_SYMBOLS.items():
        if symbol in text:
            currency = code

    iso = ISO_CURRENCY_RE.search(text)
    if iso:
        currency = iso.group(1).upper()

    return currency


def normalize_number(raw: str) -> Optional[Decimal]:
    """Convert a matched number to a Decimal, resolving separators."""
    tail = DECIMAL_TAIL_RE.search(raw)
    if tail:
        whole = SEPARATOR_RE.sub("", raw[:tail.start()])
        normalized = f"{whole}.{tail.group(1)}"
    else:
        normalized = SEPARATOR_RE.sub("", raw)

    try:
        return Decimal(normalized)
    except InvalidOperation:
        return None


def parse_price(text: Optional[str]) -> ParsedPrice:
    """
    Parse a price string into value and currency.

    Never raises: text without a number yields a None value, while any
    detected currency is still reported.
    """
    if not text:
        return ParsedPrice()

    currency = detect_currency(text)

    compact = WHITESPACE_RE.sub("", text)
    match = NUMBER_RE.search(compact)
    if not match:
        return ParsedPrice(currency=currency)

    return ParsedPrice(value=normalize_number(match.group(0)), currency=currency)
