"""
Site-specific price extractors.

Some marketplaces mark up their live price in a known place. For those
sites an extractor walks an ordered list of selectors and returns the
first usable price, which outranks every other kind of evidence.

The registry is a flat table from site name to extractor function. A
host reaches an entry when the site name is one of its dot-separated
labels, so "amazon.co.uk" and "smile.amazon.com" both use the Amazon
rules. New sites are added with `register_site_extractor`.
"""
from typing import Callable, Dict, Iterable, Optional, Sequence

from price_catalogue.heuristics.candidates import region_text
from price_catalogue.heuristics.context_scorer import is_struck, looks_negative
from price_catalogue.heuristics.document import RawDocument, normalize_host
from price_catalogue.heuristics.price_parser import parse_price
from price_catalogue.models.extraction import PriceCandidate

SITE_SPECIFIC_SCORE = 100

SiteExtractor = Callable[[RawDocument], Optional[PriceCandidate]]


def selector_chain(
    site: str,
    selectors: Sequence[str],
    reject: Iterable[str] = (),
) -> SiteExtractor:
    """
    Build an extractor that tries `selectors` in order.

    Within a selector, elements nested under strikethrough markup are
    passed over. Text mentioning a negative keyword, or any of the
    site's own `reject` words, is skipped.
    """
    reject = tuple(reject)

    def extract(document: RawDocument) -> Optional[PriceCandidate]:
        for selector in selectors:
            element = next(
                (el for el in document.soup.select(selector) if not is_struck(el)),
                None,
            )
            if element is None:
                continue

            text = region_text(element).strip()
            if not text or looks_negative(text.lower(), reject):
                continue

            parsed = parse_price(text)
            if parsed.value is not None:
                return PriceCandidate(
                    value=parsed.value,
                    currency=parsed.currency,
                    score=SITE_SPECIFIC_SCORE,
                    provenance=site,
                )
        return None

    extract.__name__ = f"extract_{site}"
    return extract


SITE_EXTRACTORS: Dict[str, SiteExtractor] = {
    "amazon": selector_chain(
        "amazon",
        [
            "#corePrice_feature_div .a-price .a-offscreen",
            "#corePriceDisplay_desktop_feature_div .a-price .a-offscreen",
            "#priceblock_dealprice",
            "#priceblock_ourprice",
            "#priceblock_saleprice",
            ".a-price .a-offscreen",
        ],
        reject=("list",),
    ),
    "ebay": selector_chain(
        "ebay",
        [
            "#prcIsum",
            "#mm-saleDscPrc",
            "span.x-price-primary .ux-textspans",
            'span[itemprop="price"]',
        ],
    ),
    "argos": selector_chain(
        "argos",
        [
            '[data-test="product-price"]',
            'meta[itemprop="price"]',
        ],
    ),
    "currys": selector_chain(
        "currys",
        [
            'meta[itemprop="price"]',
            ".product-price .amount, .price .amount",
        ],
    ),
    "johnlewis": selector_chain(
        "johnlewis",
        [
            'meta[itemprop="price"]',
            '[data-test="price-current"]',
        ],
    ),
}


def register_site_extractor(site: str, extractor: SiteExtractor) -> None:
    SITE_EXTRACTORS[site.lower()] = extractor


def find_site_extractor(host_or_url: str) -> Optional[SiteExtractor]:
    """Extractor whose site name appears as a label of the host."""
    host = host_or_url
    if "/" in host_or_url:
        host = normalize_host(host_or_url)
    elif host.startswith("www."):
        host = host[4:]

    labels = host.lower().split(".")
    for site, extractor in SITE_EXTRACTORS.items():
        if site in labels:
            return extractor
    return None


def extract_site_price(document: RawDocument) -> Optional[PriceCandidate]:
    """Run the extractor registered for the document's host, if any."""
    extractor = find_site_extractor(document.host)
    if extractor is None:
        return None
    return extractor(document)
