"""
Static HTML fetcher for the Price Catalogue.
First tier of document acquisition: a plain HTTP GET with browser-like headers.
"""
from typing import Optional

import httpx

from price_catalogue.config import config
from price_catalogue.utils.logger import LayerLogger


class FetchError(Exception):
    """The page could not be fetched over plain HTTP."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class HTMLFetcher:
    """
    Fetches raw page HTML.

    `transport` lets callers (and tests) swap the network layer, e.g. for
    an `httpx.MockTransport`.
    """

    def __init__(
        self,
        timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.transport = transport
        self.logger = LayerLogger("html_fetcher")

    async def fetch_static_html(self, url: str) -> str:
        """
        Fetch the HTML of `url`.

        Raises:
            FetchError: on any transport failure or non-2xx response
        """
        self.logger.log_action("fetch_html", "started", url=url)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(url, headers=config.request_headers())
                response.raise_for_status()
                html = response.text

        except httpx.HTTPStatusError as e:
            self.logger.log_error(
                f"Failed to fetch URL: {str(e)}",
                error_type="http_status",
                url=url,
                status_code=e.response.status_code,
            )
            raise FetchError(url, str(e), status_code=e.response.status_code) from e

        except httpx.HTTPError as e:
            self.logger.log_error(
                f"Failed to fetch URL: {str(e)}",
                error_type="http_error",
                url=url,
            )
            raise FetchError(url, str(e)) from e

        self.logger.log_action(
            "fetch_html",
            "completed",
            url=url,
            status_code=response.status_code,
            content_length=len(html),
        )
        return html
