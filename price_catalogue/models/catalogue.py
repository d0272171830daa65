"""
Catalogue models for the Price Catalogue.
A tracked item is an extraction result plus the identity and user note
the catalogue keeps around it.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from price_catalogue.models.extraction import ExtractionResult


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TrackedItem(BaseModel):
    """One product link the user pasted into the catalogue."""
    id: int
    url: str
    title: str
    image: Optional[str] = None
    description: Optional[str] = None
    price_value: Optional[Decimal] = None
    price_currency: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_extraction(cls, item_id: int, url: str, result: ExtractionResult) -> "TrackedItem":
        """Create a new item; the URL stands in for a missing title."""
        return cls(
            id=item_id,
            url=url,
            title=result.title or url,
            image=result.image,
            description=result.description,
            price_value=result.price_value,
            price_currency=result.price_currency,
        )

    def refreshed(self, result: ExtractionResult) -> "TrackedItem":
        """Return a copy with every extracted field overwritten; the note is kept."""
        return self.model_copy(update={
            "title": result.title or self.url,
            "image": result.image,
            "description": result.description,
            "price_value": result.price_value,
            "price_currency": result.price_currency,
            "updated_at": utc_now(),
        })


class AddItemRequest(BaseModel):
    """Request body for adding a product link."""
    url: str


class NoteRequest(BaseModel):
    """Request body for annotating an item."""
    note: Optional[str] = None


class ExtractRequest(BaseModel):
    """Request body for running the extraction engine on supplied HTML."""
    html: str
    url: str = ""


class RefreshOutcome(BaseModel):
    """Per-item outcome of a bulk refresh."""
    id: int
    refreshed: bool
    error: Optional[str] = None
