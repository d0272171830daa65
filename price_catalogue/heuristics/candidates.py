"""
Price candidate collection.

Two independent evidence sources are read from a document:

1. Generic pass: an ordered pool of selectors for regions that often hold
   prices. Each region's text is parsed and scored by its context.
2. Structured-data pass: JSON-LD Product nodes and their offers. These
   are written by machines for machines, so they get a fixed score above
   anything the generic pass can reach.
"""
import json
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterator, List, Optional, Tuple

from bs4 import Tag

from price_catalogue.heuristics.context_scorer import (
    MAX_CONTEXT_SCORE,
    is_struck,
    looks_negative,
    score_element,
    unstruck_text,
)
from price_catalogue.heuristics.document import RawDocument
from price_catalogue.heuristics.price_parser import detect_currency, parse_price
from price_catalogue.models.extraction import PriceCandidate
from price_catalogue.utils.logger import LayerLogger

STRUCTURED_DATA_SCORE = 80

# (provenance, selector), evaluated in order.
GENERIC_SELECTORS: List[Tuple[str, str]] = [
    ("[itemprop='price']", "[itemprop='price']"),
    ("meta[itemprop='price']", "meta[itemprop='price']"),
    ("meta[property='product:price:amount']", "meta[property='product:price:amount']"),
    (
        ".price",
        ".price, .current-price, .price__current, .price-now, .now-price, "
        ".sale-price, .product-price__price",
    ),
    ("#price", "#price, #ourprice, #dealprice, #priceblock_ourprice, #priceblock_dealprice"),
    (".a-price .a-offscreen", ".a-price .a-offscreen"),
    (".x-price-primary", "span.x-price-primary .ux-textspans, #prcIsum, #mm-saleDscPrc"),
    ("near:price", "[class*='price'], [id*='price']"),
]

PRODUCT_TYPES = {"product", "individualproduct", "productmodel"}

DOCUMENT_CURRENCY_SELECTORS = [
    'meta[itemprop="priceCurrency"]',
    'meta[property="product:price:currency"]',
    'meta[name="currency"]',
]

ISO_CODE_RE = re.compile(r"^[A-Z]{3}$")


def currency_code(raw: Any) -> Optional[str]:
    """A 3-letter code from a declared currency, read through its symbol if need be."""
    if not _present(raw):
        return None
    text = str(raw).strip()
    if ISO_CODE_RE.match(text.upper()):
        return text.upper()
    return detect_currency(text)


def document_currency(document: RawDocument) -> Optional[str]:
    """Currency the page declares for itself in its meta tags."""
    for selector in DOCUMENT_CURRENCY_SELECTORS:
        meta = document.soup.select_one(selector)
        if meta is None:
            continue
        code = currency_code(meta.get("content"))
        if code:
            return code
    return None


def region_text(element: Tag) -> str:
    """The price-bearing text of a region."""
    if element.name == "meta":
        return str(element.get("content") or "")
    text = unstruck_text(element)
    if text:
        return text
    return str(element.get("content") or element.get("data-price") or "")


def flatten_jsonld(data: Any) -> List[Dict[str, Any]]:
    """
    Flatten a JSON-LD payload into a list of typed nodes.

    Handles single objects, top-level arrays and @graph containers,
    nested to any depth.
    """
    nodes = []

    if isinstance(data, dict):
        if "@graph" in data:
            nodes.extend(flatten_jsonld(data["@graph"]))
        if "@type" in data:
            nodes.append(data)

    elif isinstance(data, list):
        for item in data:
            nodes.extend(flatten_jsonld(item))

    return nodes


def node_types(node: Dict[str, Any]) -> List[str]:
    """Declared @type values, lower-cased with any schema.org prefix removed."""
    declared = node.get("@type")
    if not isinstance(declared, list):
        declared = [declared]
    types = []
    for value in declared:
        if isinstance(value, str) and value:
            types.append(value.rstrip("/").rsplit("/", 1)[-1].lower())
    return types


def is_product_node(node: Dict[str, Any]) -> bool:
    return any(t in PRODUCT_TYPES for t in node_types(node))


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def offer_price(offer: Dict[str, Any]) -> Tuple[Any, Optional[str]]:
    """
    Raw price and currency of an offer.

    Preference: price, priceSpecification.price, lowPrice, highPrice.
    Currency: the offer's own, else its price specification's.
    """
    spec = _first(offer.get("priceSpecification"))
    if not isinstance(spec, dict):
        spec = {}

    price = None
    for raw in (offer.get("price"), spec.get("price"), offer.get("lowPrice"), offer.get("highPrice")):
        if _present(raw):
            price = raw
            break

    currency = offer.get("priceCurrency")
    if not _present(currency):
        currency = spec.get("priceCurrency")
    return price, currency_code(currency)


def jsonld_decimal(raw: Any) -> Optional[Decimal]:
    """Read a JSON-LD price, which may be a number or a string."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            value = Decimal(str(raw))
        except InvalidOperation:
            return None
        return value if value.is_finite() else None
    if isinstance(raw, str):
        try:
            value = Decimal(raw.strip())
            if value.is_finite():
                return value
        except InvalidOperation:
            pass
        return parse_price(raw).value
    return None


class CandidateCollector:
    """
    Collects every plausible price in a document.

    Holds no per-document state; one instance can serve any number of
    documents, concurrently or not.
    """

    def __init__(self):
        self.logger = LayerLogger("candidate_collector")

    def collect(self, document: RawDocument) -> List[PriceCandidate]:
        """Return generic and structured-data candidates for a document."""
        fallback_currency = document_currency(document)

        candidates = self.collect_generic(document, fallback_currency)
        candidates.extend(self.collect_structured(document, fallback_currency))

        self.logger.log_action(
            "candidate_collection",
            "completed",
            url=document.url,
            candidate_count=len(candidates),
            document_currency=fallback_currency,
        )
        return candidates

    def collect_generic(
        self,
        document: RawDocument,
        fallback_currency: Optional[str] = None,
    ) -> List[PriceCandidate]:
        """Pattern-matched regions, each scored by its context."""
        candidates = []
        seen = set()

        for provenance, selector in GENERIC_SELECTORS:
            for element in document.soup.select(selector):
                if id(element) in seen:
                    continue
                seen.add(id(element))

                candidate = self._candidate_from_region(element, provenance, fallback_currency)
                if candidate:
                    candidates.append(candidate)

        return candidates

    def _candidate_from_region(
        self,
        element: Tag,
        provenance: str,
        fallback_currency: Optional[str],
    ) -> Optional[PriceCandidate]:
        text = region_text(element).strip()
        if not text or looks_negative(text.lower()):
            return None
        if is_struck(element):
            return None

        parsed = parse_price(text)
        if parsed.value is None:
            return None

        return PriceCandidate(
            value=parsed.value,
            currency=parsed.currency or fallback_currency,
            score=min(score_element(element, text), MAX_CONTEXT_SCORE),
            provenance=provenance,
        )

    def iter_jsonld_nodes(self, document: RawDocument) -> Iterator[Dict[str, Any]]:
        """Every typed node from every well-formed JSON-LD block."""
        for script in document.soup.find_all("script", type="application/ld+json"):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                nodes = flatten_jsonld(json.loads(raw))
            except (ValueError, RecursionError) as e:
                self.logger.log_action(
                    "jsonld_parse",
                    "skipped",
                    url=document.url,
                    reason=str(e)[:120],
                )
                continue
            yield from nodes

    def collect_structured(
        self,
        document: RawDocument,
        fallback_currency: Optional[str] = None,
    ) -> List[PriceCandidate]:
        """One candidate per JSON-LD Product node carrying a usable offer price."""
        candidates = []

        for node in self.iter_jsonld_nodes(document):
            if not is_product_node(node):
                continue

            offer = _first(node.get("offers"))
            if not isinstance(offer, dict):
                continue

            raw_price, currency = offer_price(offer)
            value = jsonld_decimal(raw_price)
            if value is None:
                continue

            candidates.append(PriceCandidate(
                value=value,
                currency=currency or fallback_currency,
                score=STRUCTURED_DATA_SCORE,
                provenance="jsonld",
            ))

        return candidates

    def product_name(self, document: RawDocument) -> Optional[str]:
        """Name of the first JSON-LD Product node, if any."""
        for node in self.iter_jsonld_nodes(document):
            if is_product_node(node):
                name = node.get("name")
                if isinstance(name, str) and name.strip():
                    return name.strip()
        return None
