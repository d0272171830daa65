"""
Price Catalogue - FastAPI Application
Main entry point with REST API endpoints.
"""
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from price_catalogue import __version__
from price_catalogue.config import config
from price_catalogue.heuristics.resolver import extract_from_html
from price_catalogue.layers.acquisition import AcquisitionError
from price_catalogue.layers.catalogue import CatalogueService, ItemNotFoundError
from price_catalogue.models.catalogue import (
    AddItemRequest,
    ExtractRequest,
    NoteRequest,
    RefreshOutcome,
    TrackedItem,
)
from price_catalogue.models.extraction import ExtractionResult
from price_catalogue.utils.logger import get_logger, set_trace_id


# Initialize FastAPI app
app = FastAPI(
    title="Price Catalogue",
    description="Track product links and the prices they currently show",
    debug=config.DEBUG,
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

catalogue = CatalogueService()

logger = get_logger("main")


def _not_found(e: ItemNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


def _bad_gateway(e: AcquisitionError) -> HTTPException:
    logger.error("acquisition_failed", url=e.url, reason=e.reason)
    return HTTPException(status_code=502, detail=str(e))


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/api/items", response_model=List[TrackedItem])
async def list_items():
    """List tracked items, newest first."""
    return catalogue.list_items()


@app.post("/api/add", response_model=TrackedItem)
async def add_item(request: AddItemRequest):
    """Scrape a product link and add it to the catalogue."""
    trace_id = set_trace_id()
    logger.info("add_item_request", url=request.url, trace_id=trace_id)

    try:
        return await catalogue.add(request.url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AcquisitionError as e:
        raise _bad_gateway(e)


@app.post("/api/refresh/{item_id}", response_model=TrackedItem)
async def refresh_item(item_id: int):
    """Re-scrape one item and overwrite its extracted fields."""
    trace_id = set_trace_id()
    logger.info("refresh_item_request", item_id=item_id, trace_id=trace_id)

    try:
        return await catalogue.refresh(item_id)
    except ItemNotFoundError as e:
        raise _not_found(e)
    except AcquisitionError as e:
        raise _bad_gateway(e)


@app.post("/api/refresh-all", response_model=List[RefreshOutcome])
async def refresh_all():
    """Re-scrape every item, reporting failures per item."""
    trace_id = set_trace_id()
    logger.info("refresh_all_request", trace_id=trace_id)
    return await catalogue.refresh_all()


@app.patch("/api/items/{item_id}", response_model=TrackedItem)
async def annotate_item(item_id: int, request: NoteRequest):
    """Set or clear the note on an item."""
    try:
        return catalogue.annotate(item_id, request.note)
    except ItemNotFoundError as e:
        raise _not_found(e)


@app.delete("/api/items/{item_id}")
async def remove_item(item_id: int):
    """Remove an item from the catalogue."""
    try:
        catalogue.remove(item_id)
    except ItemNotFoundError as e:
        raise _not_found(e)
    return {"deleted": item_id}


@app.post("/api/extract", response_model=ExtractionResult)
async def extract(request: ExtractRequest):
    """Run the extraction engine on supplied HTML without storing anything."""
    trace_id = set_trace_id()
    logger.info("extract_request", url=request.url, html_length=len(request.html), trace_id=trace_id)
    return extract_from_html(request.html, request.url)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
