"""
Acquisition Layer for the Price Catalogue.
Gets a product page's HTML and runs the heuristics engine over it.

Two tiers:
1. Static fetch (cheap, usually enough)
2. Rendered DOM, only when the static page yielded no price or no image
   and a renderer has been configured
"""
from typing import Optional

from price_catalogue.adapters.html_fetcher import HTMLFetcher, FetchError
from price_catalogue.adapters.renderer import DynamicRenderer, RenderError
from price_catalogue.heuristics.resolver import ProductResolver
from price_catalogue.heuristics.document import RawDocument
from price_catalogue.models.extraction import ExtractionResult
from price_catalogue.utils.logger import LayerLogger


class AcquisitionError(Exception):
    """No document could be acquired for extraction."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"could not acquire document for extraction: {reason}")
        self.url = url
        self.reason = reason


class AcquisitionLayer:
    """
    Acquisition Layer - turns a URL into an ExtractionResult.

    Fetch failures are the only errors it raises; a page that simply has
    no price is returned as a result with empty price fields.
    """

    def __init__(
        self,
        fetcher: Optional[HTMLFetcher] = None,
        renderer: Optional[DynamicRenderer] = None,
        resolver: Optional[ProductResolver] = None,
    ):
        self.logger = LayerLogger("acquisition_layer")
        self.fetcher = fetcher or HTMLFetcher()
        self.renderer = renderer
        self.resolver = resolver or ProductResolver()

    def _extract(self, html: str, url: str) -> ExtractionResult:
        return self.resolver.extract_all(RawDocument.from_html(html, url))

    async def scrape(self, url: str) -> ExtractionResult:
        """
        Acquire `url` and extract its product fields.

        Raises:
            AcquisitionError: if neither tier produced a document
        """
        self.logger.log_action("acquisition", "started", url=url)

        static_result: Optional[ExtractionResult] = None
        static_failure: Optional[str] = None

        try:
            html = await self.fetcher.fetch_static_html(url)
            static_result = self._extract(html, url)
        except FetchError as e:
            static_failure = str(e)

        if static_result is not None and static_result.is_complete():
            self.logger.log_decision(
                decision="use_static_html",
                reason="static page yielded price and image",
                url=url,
            )
            return static_result

        if self.renderer is None:
            if static_result is None:
                raise AcquisitionError(url, static_failure or "static fetch failed")
            self.logger.log_decision(
                decision="use_static_html",
                reason="no renderer configured",
                url=url,
                missing=static_result.get_missing_fields(),
            )
            return static_result

        self.logger.log_fallback(
            from_source="static_html",
            to_source="rendered_dom",
            reason=static_failure or "static page missing price or image",
            url=url,
        )

        try:
            rendered_html = await self.renderer.render(url)
        except RenderError as e:
            self.logger.log_error(
                f"Render failed: {str(e)}",
                error_type="render_error",
                url=url,
            )
            if static_result is None:
                raise AcquisitionError(url, f"{static_failure}; render failed: {e}") from e
            return static_result

        rendered_result = self._extract(rendered_html, url)
        if static_result is None:
            return rendered_result

        merged = rendered_result.merged_with(static_result)
        self.logger.log_action(
            "acquisition",
            "completed",
            url=url,
            source="rendered_dom+static_html",
            fields_present=merged.get_present_fields(),
        )
        return merged
