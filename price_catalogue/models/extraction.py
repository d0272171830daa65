"""
Extraction models for the Price Catalogue.
These are the values produced by the heuristics engine for a single page.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ParsedPrice(BaseModel):
    """Result of reading one price-looking string."""
    model_config = ConfigDict(frozen=True)

    value: Optional[Decimal] = None
    currency: Optional[str] = None


class PriceCandidate(BaseModel):
    """
    A provisional price found in one region of a document.

    Scores are only comparable within the resolution pass that created
    them. Provenance names the rule that produced the candidate and is
    used for tracing, never for scoring.
    """
    model_config = ConfigDict(frozen=True)

    value: Decimal
    currency: Optional[str] = None
    score: int
    provenance: str

    def sort_key(self) -> tuple:
        """Higher score first, then the lower value."""
        return (-self.score, self.value)


class ExtractionResult(BaseModel):
    """
    Everything the engine could learn about one product page.

    This is the only value handed to persistence and presentation.
    Any field may be None; absence is a normal outcome.
    """
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    price_value: Optional[Decimal] = None
    price_currency: Optional[str] = None

    def has_price(self) -> bool:
        return self.price_value is not None

    def has_image(self) -> bool:
        return bool(self.image)

    def is_complete(self) -> bool:
        """True when no second acquisition attempt is worth making."""
        return self.has_price() and self.has_image()

    def get_present_fields(self) -> List[str]:
        """Return list of non-empty fields."""
        return [name for name, value in self.model_dump().items() if value is not None]

    def get_missing_fields(self) -> List[str]:
        """Return list of empty fields."""
        return [name for name, value in self.model_dump().items() if value is None]

    def merged_with(self, fallback: "ExtractionResult") -> "ExtractionResult":
        """
        Fill this result's gaps from another result.

        The price value and its currency travel together so a rendered
        price is never paired with a static page's currency.
        """
        if self.price_value is not None:
            price_value, price_currency = self.price_value, self.price_currency
        else:
            price_value, price_currency = fallback.price_value, fallback.price_currency

        return ExtractionResult(
            title=self.title or fallback.title,
            image=self.image or fallback.image,
            description=self.description or fallback.description,
            price_value=price_value,
            price_currency=price_currency,
        )
