"""Shared fixtures for the Price Catalogue test suite."""
import pytest

from price_catalogue.heuristics.document import RawDocument
from price_catalogue.models.extraction import ExtractionResult


def build_page(body: str = "", head: str = "") -> str:
    return f"<!doctype html><html><head>{head}</head><body>{body}</body></html>"


class StubAcquisition:
    """Stands in for AcquisitionLayer: returns (or raises) a canned outcome per URL."""

    def __init__(self, outcomes):
        self.outcomes = dict(outcomes)
        self.calls = []

    async def scrape(self, url: str) -> ExtractionResult:
        self.calls.append(url)
        outcome = self.outcomes[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def make_page():
    return build_page


@pytest.fixture
def make_document():
    def _make(body: str = "", head: str = "", url: str = "https://shop.example.com/p/1") -> RawDocument:
        return RawDocument.from_html(build_page(body, head), url)
    return _make


@pytest.fixture
def stub_acquisition():
    return StubAcquisition
