"""
Product page resolver - the public entry point of the heuristics engine.

Given one parsed page it resolves title, image, description and price.
Each field is looked up independently and best-effort: a field that
cannot be found is None, and resolution itself never raises.

Price precedence (highest score wins, cheapest breaks ties):
    site-specific extractor  100
    JSON-LD Product offer     80
    generic selector pool    context score (at most 27)
"""
import re
from typing import List, Optional

from price_catalogue.config import config
from price_catalogue.heuristics.candidates import CandidateCollector, document_currency
from price_catalogue.heuristics.document import RawDocument
from price_catalogue.heuristics.site_extractors import extract_site_price
from price_catalogue.models.extraction import ExtractionResult, PriceCandidate
from price_catalogue.utils.logger import LayerLogger

WHITESPACE_RE = re.compile(r"\s+")
ELLIPSIS = "…"

# (selector, attribute), first present wins.
IMAGE_SOURCES = [
    ('meta[property="og:image"]', "content"),
    ('meta[name="twitter:image"]', "content"),
    ("#landingImage", "src"),
    ("img[data-old-hires]", "data-old-hires"),
    ("img.ux-image-carousel-item--image", "src"),
    ("img#icImg", "src"),
]

DESCRIPTION_SOURCES = [
    'meta[name="description"]',
    'meta[property="og:description"]',
    'meta[name="twitter:description"]',
]


def collapse_whitespace(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    collapsed = WHITESPACE_RE.sub(" ", text).strip()
    return collapsed or None


def truncate(text: str, limit: int) -> str:
    """Cut text longer than `limit`, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit - 3] + ELLIPSIS


def _dimension(value) -> int:
    """Numeric prefix of an HTML width/height attribute ("640", "640px")."""
    match = re.match(r"\s*(\d+)", str(value or ""))
    return int(match.group(1)) if match else 0


def pick_best(candidates: List[PriceCandidate]) -> Optional[PriceCandidate]:
    """Highest score, lowest value on a tie."""
    if not candidates:
        return None
    return sorted(candidates, key=PriceCandidate.sort_key)[0]


class ProductResolver:
    """
    Resolves an ExtractionResult from a RawDocument.

    Stateless between calls: the same document always resolves to the
    same result.
    """

    def __init__(self, collector: Optional[CandidateCollector] = None):
        self.collector = collector or CandidateCollector()
        self.logger = LayerLogger("product_resolver")

    def extract_all(self, document: RawDocument) -> ExtractionResult:
        price = self.resolve_price(document)

        result = ExtractionResult(
            title=self.resolve_title(document),
            image=self.resolve_image(document),
            description=self.resolve_description(document),
            price_value=price.value if price else None,
            price_currency=(price.currency or document_currency(document)) if price else None,
        )

        self.logger.log_extraction(
            url=document.url,
            fields_present=result.get_present_fields(),
            fields_missing=result.get_missing_fields(),
        )
        return result

    # =========================================================================
    # PRICE
    # =========================================================================

    def gather_candidates(self, document: RawDocument) -> List[PriceCandidate]:
        candidates = self.collector.collect(document)

        site_pick = extract_site_price(document)
        if site_pick:
            self.logger.log_decision(
                decision="site_specific_price",
                reason=f"host matched {site_pick.provenance} extractor",
                url=document.url,
                value=str(site_pick.value),
            )
            candidates.append(site_pick)

        return candidates

    def resolve_price(self, document: RawDocument) -> Optional[PriceCandidate]:
        candidates = self.gather_candidates(document)
        best = pick_best(candidates)

        self.logger.log_candidates(
            count=len(candidates),
            winner=best.provenance if best else None,
            winner_score=best.score if best else None,
            url=document.url,
        )
        return best

    # =========================================================================
    # TITLE / IMAGE / DESCRIPTION
    # =========================================================================

    def resolve_title(self, document: RawDocument) -> Optional[str]:
        """og:title, twitter:title, first <h1>, <title>, then JSON-LD product name."""
        soup = document.soup

        for selector in ('meta[property="og:title"]', 'meta[name="twitter:title"]'):
            meta = soup.select_one(selector)
            title = collapse_whitespace(meta.get("content")) if meta else None
            if title:
                return title

        for tag in ("h1", "title"):
            element = soup.find(tag)
            title = collapse_whitespace(element.get_text(" ")) if element else None
            if title:
                return title

        return self.collector.product_name(document)

    def resolve_image(self, document: RawDocument) -> Optional[str]:
        """Social image, known marketplace hero images, then the first large <img>."""
        for selector, attribute in IMAGE_SOURCES:
            element = document.soup.select_one(selector)
            if element and element.get(attribute):
                image = document.absolute_url(str(element[attribute]))
                if image:
                    return image

        min_size = config.LARGE_IMAGE_MIN_SIZE
        for img in document.soup.find_all("img"):
            if _dimension(img.get("width")) >= min_size or _dimension(img.get("height")) >= min_size:
                image = document.absolute_url(img.get("src"))
                if image:
                    return image
                # first large image has no usable src
                break

        return None

    def resolve_description(self, document: RawDocument) -> Optional[str]:
        for selector in DESCRIPTION_SOURCES:
            meta = document.soup.select_one(selector)
            description = collapse_whitespace(meta.get("content")) if meta else None
            if description:
                return truncate(description, config.DESCRIPTION_MAX_LENGTH)
        return None


_default_resolver: Optional[ProductResolver] = None


def _resolver() -> ProductResolver:
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = ProductResolver()
    return _default_resolver


def extract_all(document: RawDocument) -> ExtractionResult:
    """Resolve every field of a parsed document."""
    return _resolver().extract_all(document)


def extract_from_html(html: Optional[str], url: Optional[str] = "") -> ExtractionResult:
    """Parse raw HTML and resolve it."""
    return extract_all(RawDocument.from_html(html, url))
