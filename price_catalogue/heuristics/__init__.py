"""Heuristics package initialization."""
from price_catalogue.heuristics.document import RawDocument, normalize_host
from price_catalogue.heuristics.price_parser import parse_price
from price_catalogue.heuristics.context_scorer import score_context
from price_catalogue.heuristics.candidates import CandidateCollector
from price_catalogue.heuristics.site_extractors import (
    SITE_EXTRACTORS,
    extract_site_price,
    find_site_extractor,
    register_site_extractor,
)
from price_catalogue.heuristics.resolver import ProductResolver, extract_all, extract_from_html

__all__ = [
    "RawDocument",
    "normalize_host",
    "parse_price",
    "score_context",
    "CandidateCollector",
    "SITE_EXTRACTORS",
    "extract_site_price",
    "find_site_extractor",
    "register_site_extractor",
    "ProductResolver",
    "extract_all",
    "extract_from_html",
]
