"""Page resolvers supplying the current page and path to builders."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

DEFAULT_PAGE_NAME = "page"


@dataclass(frozen=True, slots=True)
class StaticPageResolver:
    """Resolve a fixed page and path, e.g. outside a web request."""

    page: int = 1
    path: str = "/"

    def current_page(self) -> int:
        """Return the configured page."""
        return self.page

    def current_path(self) -> str:
        """Return the configured path."""
        return self.path


@dataclass(frozen=True, slots=True)
class UrlPageResolver:
    """Resolve the page from the query string of a request URL.

    Missing, non-numeric or non-positive page values resolve to page 1.
    """

    url: str
    page_name: str = DEFAULT_PAGE_NAME

    def current_page(self) -> int:
        """Return the page parameter of the URL.

        Returns:
            int: 1-based page number.

        """
        raw = httpx.URL(self.url).params.get(self.page_name)
        if raw is None:
            return 1
        try:
            page = int(raw)
        except ValueError:
            return 1
        return max(page, 1)

    def current_path(self) -> str:
        """Return the URL without its query string and fragment."""
        return self.url.split("#", 1)[0].split("?", 1)[0]
