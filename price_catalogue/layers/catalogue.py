"""
Catalogue Layer for the Price Catalogue.
Owns the lifecycle of tracked items: create on add, overwrite on refresh,
annotate, delete on removal.
"""
import itertools
from typing import Dict, List, Optional

from price_catalogue.layers.acquisition import AcquisitionError, AcquisitionLayer
from price_catalogue.models.catalogue import RefreshOutcome, TrackedItem
from price_catalogue.utils.logger import LayerLogger


class ItemNotFoundError(Exception):
    """No tracked item has the requested id."""

    def __init__(self, item_id: int):
        super().__init__(f"Item {item_id} not found")
        self.item_id = item_id


class ItemStore:
    """In-memory item storage keyed by integer id."""

    def __init__(self):
        self._items: Dict[int, TrackedItem] = {}
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        return next(self._ids)

    def create(self, item: TrackedItem) -> TrackedItem:
        self._items[item.id] = item
        return item

    def get(self, item_id: int) -> TrackedItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise ItemNotFoundError(item_id) from None

    def list(self) -> List[TrackedItem]:
        """Newest first."""
        return sorted(self._items.values(), key=lambda item: item.id, reverse=True)

    def update(self, item: TrackedItem) -> TrackedItem:
        self.get(item.id)
        self._items[item.id] = item
        return item

    def delete(self, item_id: int) -> None:
        self.get(item_id)
        del self._items[item_id]


class CatalogueService:
    """
    Catalogue operations exposed to the HTTP layer.

    Extraction never fails for lack of data; only acquisition failures
    (AcquisitionError) and unknown ids (ItemNotFoundError) propagate.
    """

    def __init__(
        self,
        acquisition: Optional[AcquisitionLayer] = None,
        store: Optional[ItemStore] = None,
    ):
        self.logger = LayerLogger("catalogue")
        self.acquisition = acquisition or AcquisitionLayer()
        self.store = store or ItemStore()

    def list_items(self) -> List[TrackedItem]:
        return self.store.list()

    async def add(self, url: str) -> TrackedItem:
        url = url.strip()
        if not url:
            raise ValueError("URL must not be empty")

        result = await self.acquisition.scrape(url)
        item = self.store.create(TrackedItem.from_extraction(self.store.next_id(), url, result))

        self.logger.log_action(
            "add_item",
            "completed",
            item_id=item.id,
            url=url,
            price_value=str(item.price_value) if item.price_value is not None else None,
            price_currency=item.price_currency,
        )
        return item

    async def refresh(self, item_id: int) -> TrackedItem:
        item = self.store.get(item_id)
        result = await self.acquisition.scrape(item.url)
        updated = self.store.update(item.refreshed(result))

        self.logger.log_action(
            "refresh_item",
            "completed",
            item_id=item_id,
            previous_price=str(item.price_value) if item.price_value is not None else None,
            price_value=str(updated.price_value) if updated.price_value is not None else None,
        )
        return updated

    async def refresh_all(self) -> List[RefreshOutcome]:
        """Refresh every item in turn; one failure does not stop the rest."""
        outcomes = []
        for item in self.store.list():
            try:
                await self.refresh(item.id)
                outcomes.append(RefreshOutcome(id=item.id, refreshed=True))
            except (AcquisitionError, ItemNotFoundError) as e:
                self.logger.log_error(str(e), error_type=type(e).__name__, item_id=item.id)
                outcomes.append(RefreshOutcome(id=item.id, refreshed=False, error=str(e)))
        return outcomes

    def annotate(self, item_id: int, note: Optional[str]) -> TrackedItem:
        item = self.store.get(item_id)
        note = note.strip() if note else None
        updated = self.store.update(item.model_copy(update={"note": note or None}))
        self.logger.log_action("annotate_item", "completed", item_id=item_id, has_note=bool(note))
        return updated

    def remove(self, item_id: int) -> None:
        self.store.delete(item_id)
        self.logger.log_action("remove_item", "completed", item_id=item_id)
