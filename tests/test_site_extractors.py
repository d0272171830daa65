"""
Tests for site-specific price extractors.
"""
from decimal import Decimal

import pytest

from price_catalogue.heuristics import site_extractors
from price_catalogue.heuristics.site_extractors import (
    SITE_SPECIFIC_SCORE,
    extract_site_price,
    find_site_extractor,
    register_site_extractor,
    selector_chain,
)

AMAZON_PRICE_BLOCK = """
<div id="corePrice_feature_div">
  <span class="a-price a-text-price" data-a-strike="true">
    <span class="a-offscreen">£199.99</span>
  </span>
  <span class="a-price">
    <span class="a-offscreen">£149.99</span>
  </span>
</div>
"""


class TestRegistry:
    """Host to extractor dispatch."""

    @pytest.mark.parametrize("host", [
        "amazon.co.uk",
        "amazon.com",
        "www.amazon.de",
        "smile.amazon.com",
        "https://www.amazon.co.uk/dp/B000000",
    ])
    def test_amazon_hosts(self, host):
        assert find_site_extractor(host) is site_extractors.SITE_EXTRACTORS["amazon"]

    @pytest.mark.parametrize("host", ["example.com", "notamazon.com", ""])
    def test_unregistered_hosts(self, host):
        assert find_site_extractor(host) is None

    def test_register_new_site(self, monkeypatch, make_document):
        monkeypatch.setitem(site_extractors.SITE_EXTRACTORS, "tinyshop", None)
        register_site_extractor("tinyshop", selector_chain("tinyshop", [".cost"]))

        doc = make_document('<b class="cost">£3.50</b>', url="https://tinyshop.example/p")
        candidate = extract_site_price(doc)
        assert candidate.value == Decimal("3.50")
        assert candidate.provenance == "tinyshop"


class TestAmazon:
    """Offscreen price spans inside the core price block."""

    def test_skips_struck_list_price(self, make_document):
        doc = make_document(AMAZON_PRICE_BLOCK, url="https://www.amazon.co.uk/dp/X")
        candidate = extract_site_price(doc)
        assert candidate.value == Decimal("149.99")
        assert candidate.currency == "GBP"
        assert candidate.score == SITE_SPECIFIC_SCORE
        assert candidate.provenance == "amazon"

    def test_skips_list_wording(self, make_document):
        body = (
            '<span id="priceblock_dealprice">List: £30.00</span>'
            '<span id="priceblock_ourprice">£25.00</span>'
        )
        doc = make_document(body, url="https://amazon.com/dp/X")
        assert extract_site_price(doc).value == Decimal("25.00")

    def test_nothing_found(self, make_document):
        doc = make_document("<p>Currently unavailable.</p>", url="https://amazon.com/dp/X")
        assert extract_site_price(doc) is None


class TestOtherSites:
    """eBay, Argos, Currys and John Lewis selector chains."""

    def test_ebay_primary_price(self, make_document):
        body = '<span class="x-price-primary"><span class="ux-textspans">US $25.00</span></span>'
        doc = make_document(body, url="https://www.ebay.com/itm/1")
        candidate = extract_site_price(doc)
        assert candidate.value == Decimal("25.00")
        assert candidate.currency == "USD"

    def test_argos_meta_price(self, make_document):
        doc = make_document(head='<meta itemprop="price" content="59.99">', url="https://www.argos.co.uk/p/1")
        assert extract_site_price(doc).value == Decimal("59.99")

    def test_argos_ignores_struck_figure_in_price_block(self, make_document):
        body = '<div data-test="product-price"><del>£120.00</del> <span>£89.99</span></div>'
        doc = make_document(body, url="https://www.argos.co.uk/product/1")
        assert extract_site_price(doc).value == Decimal("89.99")

    def test_currys_amount(self, make_document):
        body = '<div class="product-price"><span class="amount">£429.00</span></div>'
        doc = make_document(body, url="https://www.currys.co.uk/p/1")
        assert extract_site_price(doc).value == Decimal("429.00")

    def test_johnlewis_skips_negative_text(self, make_document):
        body = '<p data-test="price-current">Was £80.00</p>'
        doc = make_document(body, url="https://www.johnlewis.com/p/1")
        assert extract_site_price(doc) is None

    def test_unregistered_host_has_no_site_price(self, make_document):
        doc = make_document('<span id="prcIsum">£10.00</span>', url="https://shop.example.com/p")
        assert extract_site_price(doc) is None
