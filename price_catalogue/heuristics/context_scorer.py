"""
Context scoring for price-bearing elements.

A page usually shows several numbers that look like prices: the live
price, a struck-through RRP, a monthly finance figure, a delivery fee.
The scorer reads the words around a number (its text, class and id)
and the markup it sits in, and returns a signed integer. Higher means
more likely to be what the buyer actually pays.
"""
from typing import Iterable

from bs4 import Tag

POSITIVE_SIGNALS = (
    "current", "now", "price", "ourprice", "deal",
    "you pay", "basket", "total", "buy it now",
)

NEGATIVE_SIGNALS = (
    "was", "rrp", "list price", "listprice", "previous", "orig", "original",
    "save", "saving", "discount", "compare at", "compareto", "strike", "strikethrough",
    "per month", "/month", "month", "from", "deposit", "credit", "trade-in", "trade in",
    "postage", "shipping", "delivery", "carriage", "fee", "voucher", "coupon",
)

POSITIVE_WEIGHT = 3
NEGATIVE_WEIGHT = 6
STRUCK_PENALTY = 50
INTERACTIVE_PENALTY = 3

# Highest score context alone can produce.
MAX_CONTEXT_SCORE = POSITIVE_WEIGHT * len(POSITIVE_SIGNALS)

STRUCK_TAGS = ("s", "strike", "del")
STRUCK_CLASS_FRAGMENTS = ("a-text-strike", "old-price", "price-old", "was-price")
INTERACTIVE_TAGS = ("button", "a", "input")


def looks_negative(text_lower: str, extra: Iterable[str] = ()) -> bool:
    """True if the text mentions any negative-context keyword."""
    if any(keyword in text_lower for keyword in NEGATIVE_SIGNALS):
        return True
    return any(keyword in text_lower for keyword in extra)


def class_string(element: Tag) -> str:
    classes = element.get("class") or []
    if isinstance(classes, str):
        return classes
    return " ".join(classes)


def _marks_strikethrough(element: Tag) -> bool:
    if element.name in STRUCK_TAGS:
        return True
    if str(element.get("data-a-strike", "")).lower() == "true":
        return True
    classes = class_string(element).lower()
    return any(fragment in classes for fragment in STRUCK_CLASS_FRAGMENTS)


def is_struck(element: Tag) -> bool:
    """True if the element, or anything enclosing it, is strikethrough markup."""
    if _marks_strikethrough(element):
        return True
    return any(
        _marks_strikethrough(parent)
        for parent in element.parents
        if isinstance(parent, Tag)
    )


def contains_struck(element: Tag) -> bool:
    return element.find(list(STRUCK_TAGS)) is not None


def unstruck_text(element: Tag) -> str:
    """
    Text of an element, leaving out anything under strikethrough markup
    nested inside it.
    """
    pieces = []
    for string in element.strings:
        parent = string.parent
        struck = False
        while parent is not None and parent is not element:
            if _marks_strikethrough(parent):
                struck = True
                break
            parent = parent.parent
        if not struck and string.strip():
            pieces.append(string.strip())
    return " ".join(pieces)


def score_context(element: Tag, text_lower: str, class_lower: str, id_lower: str) -> int:
    """
    Score how likely an element is to show the live, payable price.

    Each keyword counts once however many of text, class and id mention
    it. Pure: the same inputs always give the same score.
    """
    fields = (text_lower, class_lower, id_lower)
    score = 0

    for signal in POSITIVE_SIGNALS:
        if any(signal in field for field in fields):
            score += POSITIVE_WEIGHT

    for signal in NEGATIVE_SIGNALS:
        if any(signal in field for field in fields):
            score -= NEGATIVE_WEIGHT

    if is_struck(element) or contains_struck(element):
        score -= STRUCK_PENALTY

    if element.name in INTERACTIVE_TAGS:
        score -= INTERACTIVE_PENALTY

    return score


def score_element(element: Tag, text: str) -> int:
    """Score an element using its own class and id attributes."""
    return score_context(
        element,
        (text or "").lower(),
        class_string(element).lower(),
        str(element.get("id") or "").lower(),
    )
