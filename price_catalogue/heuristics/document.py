"""
Parsed document handed to every extraction component.
"""
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup


def normalize_host(url: str) -> str:
    """Lower-cased hostname of a URL with any leading 'www.' removed."""
    if not url:
        return ""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host


@dataclass(frozen=True)
class RawDocument:
    """An HTML page parsed once, together with the URL it came from."""
    soup: BeautifulSoup
    url: str = ""

    @classmethod
    def from_html(cls, html: Optional[str], url: Optional[str] = "") -> "RawDocument":
        return cls(soup=BeautifulSoup(html or "", "lxml"), url=url or "")

    @property
    def host(self) -> str:
        return normalize_host(self.url)

    def absolute_url(self, link: Optional[str]) -> Optional[str]:
        """Resolve a possibly relative link against the origin URL."""
        if not link:
            return None
        link = link.strip()
        if not link:
            return None
        try:
            if link.startswith("//"):
                scheme = urlparse(self.url).scheme if self.url else ""
                link = f"{scheme or 'https'}:{link}"
            elif self.url and not link.startswith(("http://", "https://", "data:")):
                link = urljoin(self.url, link)
            # hostname parsing rejects a malformed netloc
            urlparse(link).hostname
        except ValueError:
            return None
        return link
