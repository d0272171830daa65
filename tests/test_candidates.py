"""
Tests for price candidate collection.
"""
import json
from decimal import Decimal

import pytest

from price_catalogue.heuristics.candidates import (
    STRUCTURED_DATA_SCORE,
    CandidateCollector,
    currency_code,
    document_currency,
    flatten_jsonld,
    offer_price,
)
from price_catalogue.heuristics.context_scorer import MAX_CONTEXT_SCORE


def jsonld(data) -> str:
    return f'<script type="application/ld+json">{json.dumps(data)}</script>'


@pytest.fixture
def collector():
    return CandidateCollector()


class TestGenericPass:
    """Selector pool, rejection and scoring."""

    def test_price_region_becomes_candidate(self, collector, make_document):
        doc = make_document('<span class="price-now">£89.99</span>')
        candidates = collector.collect(doc)
        assert len(candidates) == 1
        assert candidates[0].value == Decimal("89.99")
        assert candidates[0].currency == "GBP"
        assert candidates[0].provenance == ".price"

    def test_negative_text_rejected(self, collector, make_document):
        doc = make_document('<span class="price">RRP £199.99</span>')
        assert collector.collect(doc) == []

    def test_struck_region_rejected(self, collector, make_document):
        doc = make_document('<del><span class="price">£199.99</span></del>')
        assert collector.collect(doc) == []

    def test_struck_figure_inside_region_ignored(self, collector, make_document):
        doc = make_document('<p class="price"><del>£120.00</del> <ins>£89.99</ins></p>')
        assert [c.value for c in collector.collect(doc)] == [Decimal("89.99")]

    def test_unparseable_region_skipped(self, collector, make_document):
        doc = make_document('<span class="price">Call for pricing</span>')
        assert collector.collect(doc) == []

    def test_meta_content_is_read(self, collector, make_document):
        doc = make_document(head='<meta itemprop="price" content="24.50">')
        candidates = collector.collect(doc)
        assert [c.value for c in candidates] == [Decimal("24.50")]

    def test_each_element_contributes_once(self, collector, make_document):
        doc = make_document('<span class="price" id="price">£5.00</span>')
        candidates = collector.collect(doc)
        assert len(candidates) == 1
        assert candidates[0].provenance == ".price"

    def test_document_currency_fills_gaps(self, collector, make_document):
        doc = make_document(
            '<span class="price">49.00</span>',
            head='<meta itemprop="priceCurrency" content="gbp">',
        )
        candidates = collector.collect(doc)
        assert candidates[0].currency == "GBP"


class TestStructuredPass:
    """JSON-LD Product offers."""

    def test_product_offer(self, collector, make_document):
        doc = make_document(head=jsonld({
            "@context": "https://schema.org",
            "@type": "Product",
            "offers": {"@type": "Offer", "price": "49.99", "priceCurrency": "USD"},
        }))
        candidates = collector.collect_structured(doc)
        assert len(candidates) == 1
        assert candidates[0].value == Decimal("49.99")
        assert candidates[0].currency == "USD"
        assert candidates[0].score == STRUCTURED_DATA_SCORE
        assert candidates[0].provenance == "jsonld"

    def test_numeric_price(self, collector, make_document):
        doc = make_document(head=jsonld({"@type": "Product", "offers": {"price": 49.99}}))
        assert collector.collect_structured(doc)[0].value == Decimal("49.99")

    def test_graph_and_offer_list(self, collector, make_document):
        doc = make_document(head=jsonld({
            "@graph": [
                {"@type": "WebPage", "name": "page"},
                {"@type": ["Product", "Thing"], "offers": [
                    {"price": "10.00", "priceCurrency": "EUR"},
                    {"price": "5.00", "priceCurrency": "EUR"},
                ]},
            ]
        }))
        candidates = collector.collect_structured(doc)
        assert [(c.value, c.currency) for c in candidates] == [(Decimal("10.00"), "EUR")]

    def test_schema_url_type(self, collector, make_document):
        doc = make_document(head=jsonld({"@type": "http://schema.org/Product", "offers": {"price": "3"}}))
        assert len(collector.collect_structured(doc)) == 1

    def test_non_product_ignored(self, collector, make_document):
        doc = make_document(head=jsonld({"@type": "Offer", "price": "3.00"}))
        assert collector.collect_structured(doc) == []

    def test_malformed_block_skipped(self, collector, make_document):
        head = (
            '<script type="application/ld+json">{"@type": "Product", "offers": </script>'
            + jsonld({"@type": "Product", "offers": {"price": "12.00"}})
        )
        candidates = collector.collect_structured(make_document(head=head))
        assert [c.value for c in candidates] == [Decimal("12.00")]

    def test_deeply_nested_block_skipped(self, collector, make_document):
        deep = "[" * 100000 + "]" * 100000
        doc = make_document(
            '<span class="price-now">£89.99</span>'
            f'<script type="application/ld+json">{deep}</script>'
        )
        candidates = collector.collect(doc)
        assert [c.value for c in candidates] == [Decimal("89.99")]

    def test_currency_falls_back_to_document_meta(self, collector, make_document):
        doc = make_document(head=(
            '<meta property="product:price:currency" content="GBP">'
            + jsonld({"@type": "Product", "offers": {"price": "12.00"}})
        ))
        candidates = collector.collect(doc)
        assert candidates[0].currency == "GBP"

    def test_structured_score_above_generic_ceiling(self):
        assert STRUCTURED_DATA_SCORE > MAX_CONTEXT_SCORE


class TestOfferPrice:
    """Offer field preference."""

    def test_direct_price_first(self):
        assert offer_price({"price": "1", "lowPrice": "0.5"}) == ("1", None)

    def test_price_specification(self):
        offer = {"priceSpecification": [{"price": 7, "priceCurrency": "jpy"}]}
        assert offer_price(offer) == (7, "JPY")

    def test_low_then_high(self):
        assert offer_price({"lowPrice": "2", "highPrice": "9"})[0] == "2"
        assert offer_price({"highPrice": "9"})[0] == "9"

    def test_offer_currency_beats_specification(self):
        offer = {"price": "1", "priceCurrency": "EUR", "priceSpecification": {"priceCurrency": "USD"}}
        assert offer_price(offer)[1] == "EUR"

    def test_currency_symbol_read_as_code(self):
        assert offer_price({"price": "3", "priceCurrency": "$"}) == ("3", "USD")

    def test_unrecognised_currency_dropped(self):
        assert offer_price({"price": "3", "priceCurrency": "dollars"}) == ("3", None)

    def test_empty_price_skipped(self):
        assert offer_price({"price": "", "lowPrice": "4"})[0] == "4"


class TestHelpers:
    """JSON-LD flattening and document currency."""

    def test_flatten_nested(self):
        data = [{"@graph": [{"@type": "A"}, [{"@type": "B"}]]}, {"@type": "C"}]
        assert [n["@type"] for n in flatten_jsonld(data)] == ["A", "B", "C"]

    def test_document_currency_absent(self, make_document):
        assert document_currency(make_document("<p>hi</p>")) is None

    def test_document_currency_symbol(self, make_document):
        doc = make_document(head='<meta name="currency" content="£">')
        assert document_currency(doc) == "GBP"

    def test_document_currency_skips_unrecognised_tag(self, make_document):
        doc = make_document(
            head='<meta itemprop="priceCurrency" content="pounds"><meta name="currency" content="eur">'
        )
        assert document_currency(doc) == "EUR"

    @pytest.mark.parametrize("raw, expected", [
        ("gbp", "GBP"),
        (" USD ", "USD"),
        ("€", "EUR"),
        ("EURO", None),
        ("", None),
        (None, None),
    ])
    def test_currency_code(self, raw, expected):
        assert currency_code(raw) == expected
