from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from elastic_finder.builders import Builder, BuilderRegistry, finder
from elastic_finder.domain import IndexSettings
from elastic_finder.pagination import UrlPageResolver

_TICKETS = ("t1", "t2", "t3", "t4", "t5")
_PAGE_SIZE = 2


@dataclass(frozen=True)
class Ticket:
    id: str
    title: str

    store: ClassVar[dict[str, Ticket]] = {}

    @classmethod
    def searchable_as(cls) -> str:
        return "tickets"

    @classmethod
    def find_by_ids(cls, ids: list[str]) -> list[Ticket]:
        return [cls.store[key] for key in sorted(ids, reverse=True) if key in cls.store]


registry = BuilderRegistry()


@registry.register(Ticket)
class TicketBuilder(Builder):
    match_field = "title"
    number_of_replicas = 1

    def mappings(self) -> IndexSettings:
        return IndexSettings(
            number_of_shards=self.number_of_shards,
            number_of_replicas=self.number_of_replicas,
            mappings={"properties": {"title": {"type": "text"}, "status": {"type": "keyword"}}},
        )

    def aggregation_formatters(self):
        return {"status": self.format_status}

    def open_only(self) -> TicketBuilder:
        return self.set_filter("term", {"status": "open"})

    def by_status(self) -> TicketBuilder:
        return self.set_aggregation("status", {"terms": {"field": "status"}})

    def format_status(self, aggregation: dict[str, Any]) -> dict[str, int]:  # noqa: PLR6301
        return {bucket["key"]: bucket["count"] for bucket in aggregation["buckets"]}


def _seed(backend) -> None:
    Ticket.store.clear()
    Ticket.store.update({key: Ticket(id=key, title=f"ticket {key}") for key in _TICKETS})
    finder(Ticket, registry=registry, backend=backend)
    backend.add_documents("tickets", *_TICKETS)


def test_registered_builder_pages_through_entity_records(memory_backend) -> None:
    _seed(memory_backend)
    backend_indices = memory_backend.indices

    builder = finder(
        Ticket,
        registry=registry,
        backend=memory_backend,
        pages=UrlPageResolver("https://helpdesk.local/tickets?status=open&page=2"),
    )
    result = builder.match("Printer").open_only().paginate(page_size=_PAGE_SIZE)

    assert isinstance(builder, TicketBuilder)
    assert backend_indices["tickets"]["settings"]["number_of_replicas"] == 1
    assert [ticket.id for ticket in result.models] == ["t3", "t4"]
    assert result.total_hits == len(_TICKETS)
    assert result.links.last_page == 3
    assert result.links.previous_page_url == "https://helpdesk.local/tickets?page=1"
    assert result.links.next_page_url == "https://helpdesk.local/tickets?page=3"


def test_aggregation_hook_formats_status_counts(memory_backend) -> None:
    _seed(memory_backend)
    memory_backend.aggregations = {"status": {"buckets": [{"key": "open", "count": 5}]}}

    result = finder(Ticket, registry=registry, backend=memory_backend).by_status().paginate(page_size=0)

    assert result.models == ()
    assert result.aggregations == {"status": {"open": 5}}
    assert memory_backend.requests[-1].size == 0


def test_raw_response_keeps_backend_fields(memory_backend) -> None:
    _seed(memory_backend)

    result = finder(Ticket, registry=registry, backend=memory_backend).paginate(page_size=_PAGE_SIZE, page=3)

    assert [ticket.id for ticket in result.models] == ["t5"]
    assert result.raw()["hits"]["total"]["relation"] == "eq"
