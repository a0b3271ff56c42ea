"""Domain contracts for index declarations and paginated search results."""

from __future__ import annotations

import math
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field


class IndexSettings(BaseModel):
    """Represent the creation settings a builder declares for its index.

    Args:
        number_of_shards: Primary shard count.
        number_of_replicas: Replica count per shard.
        mappings: Optional field mappings sent with the create call.
        extra_settings: Additional index-level settings merged as-is.

    """

    model_config = ConfigDict(frozen=True)

    number_of_shards: int = Field(default=1, ge=1)
    number_of_replicas: int = Field(default=0, ge=0)
    mappings: dict[str, Any] | None = None
    extra_settings: dict[str, Any] = Field(default_factory=dict)

    def to_body(self) -> dict[str, Any]:
        """Render the create-index request body.

        Returns:
            dict[str, Any]: Backend create-index payload.

        """
        body: dict[str, Any] = {
            "settings": {
                "number_of_shards": self.number_of_shards,
                "number_of_replicas": self.number_of_replicas,
                **self.extra_settings,
            },
        }
        if self.mappings:
            body["mappings"] = dict(self.mappings)
        return body


class IndexDescriptor(BaseModel):
    """Pair an index name with its creation settings."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    settings: IndexSettings = Field(default_factory=IndexSettings)


class PaginationLinks(BaseModel):
    """Represent page-aware link metadata for one result page."""

    model_config = ConfigDict(frozen=True)

    total: int
    per_page: int
    current_page: int
    path: str = "/"
    page_name: str = "page"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def last_page(self) -> int:
        """Return the last page number, never lower than 1."""
        if self.per_page <= 0:
            return 1
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def has_more_pages(self) -> bool:
        """Return whether pages exist after the current one."""
        return self.current_page < self.last_page

    @property
    def on_first_page(self) -> bool:
        """Return whether the current page is the first one."""
        return self.current_page <= 1

    def url(self, page: int) -> str:
        """Build the URL of one page.

        Args:
            page (int): Target page number, clamped to 1.

        Returns:
            str: Path with the page parameter merged into its query string.

        """
        target = httpx.URL(self.path).copy_merge_params({self.page_name: max(page, 1)})
        return str(target)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def previous_page_url(self) -> str | None:
        """Return the previous page URL, if any."""
        if self.on_first_page:
            return None
        return self.url(self.current_page - 1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def next_page_url(self) -> str | None:
        """Return the next page URL, if any."""
        if not self.has_more_pages:
            return None
        return self.url(self.current_page + 1)


class PageResult(BaseModel):
    """Represent one materialized page of search results.

    The untouched backend response stays reachable through `raw()` for
    fields not surfaced on the model.

    """

    model_config = ConfigDict(frozen=True)

    total_hits: int
    models: tuple[Any, ...] = ()
    links: PaginationLinks
    aggregations: dict[str, Any] = Field(default_factory=dict)

    _raw: dict[str, Any] = PrivateAttr(default_factory=dict)

    def __init__(self, *, raw: dict[str, Any] | None = None, **data: Any) -> None:
        """Build the page and keep the raw response aside from validated fields."""
        super().__init__(**data)
        self._raw = {} if raw is None else raw

    def raw(self) -> dict[str, Any]:
        """Return the raw backend response.

        Returns:
            dict[str, Any]: Response payload as received from the backend.

        """
        return self._raw
