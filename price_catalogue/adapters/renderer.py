"""
Rendered-DOM contract for the Price Catalogue.

Some shops only write their price into the page from JavaScript. The
second acquisition tier asks a renderer for the DOM after scripts have
run. No renderer ships with the package; an embedding application
passes one in (for example a headless browser wrapper).
"""
from typing import Protocol, runtime_checkable


class RenderError(Exception):
    """The renderer could not produce a DOM for the page."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


@runtime_checkable
class DynamicRenderer(Protocol):
    """Produces the HTML of a page after its scripts have run."""

    async def render(self, url: str) -> str:
        """
        Return rendered HTML for `url`.

        Raises:
            RenderError: if the page could not be rendered
        """
        ...
