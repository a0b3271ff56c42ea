from __future__ import annotations

import httpx
import pytest

from elastic_finder.builders import Builder, finder
from elastic_finder.errors import IndexMissingError
from elastic_finder.search.adapters import ElasticClientAdapter, HttpClientAdapter, OpenSearchClientAdapter
from elastic_finder.search.factory import build_search_backend

_PAGE_SIZE = 2


class Message:
    __tablename__ = "messages"


class _IndicesClient:
    def __init__(self, calls: list[tuple[str, str, dict[str, object]]]) -> None:
        self.calls = calls
        self.existing: set[str] = set()

    def exists(self, *, index: str) -> bool:
        self.calls.append(("exists", index, {}))
        return index in self.existing

    def create(self, *, index: str, **kwargs: object) -> dict[str, object]:
        self.calls.append(("create", index, kwargs))
        self.existing.add(index)
        return {"acknowledged": True}

    def delete(self, *, index: str) -> dict[str, object]:
        self.calls.append(("delete", index, {}))
        self.existing.discard(index)
        return {"acknowledged": True}


class _StubClient:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict[str, object]]] = []
        self.indices = _IndicesClient(self.calls)

    def search(self, *, index: str, body: dict[str, object]) -> dict[str, object]:
        self.calls.append(("search", index, body))
        return {"hits": {"total": {"value": 1}, "hits": [{"_id": "m1"}]}}


def _stub_client() -> _StubClient:
    return _StubClient()


def _rest_backend(server) -> HttpClientAdapter:
    return HttpClientAdapter(client=httpx.Client(base_url="http://search.local", transport=server.transport()))


@pytest.mark.parametrize("adapter_class", [ElasticClientAdapter, OpenSearchClientAdapter])
def test_builder_flow_over_client_adapters(adapter_class) -> None:
    client = _stub_client()
    backend = adapter_class(client=client)

    result = Builder(Message, backend=backend).match("Disk Full").paginate(page_size=_PAGE_SIZE)

    operations = [call[0] for call in client.calls]
    assert operations == ["exists", "create", "search"]
    assert client.calls[-1][1] == "messages"
    assert client.calls[-1][2]["query"] == {
        "bool": {"must": [{"match": {"message": {"query": "disk full", "operator": "AND"}}}]},
    }
    assert result.total_hits == 1
    assert result.models == ("m1",)


def test_builder_flow_over_rest_endpoints(search_server) -> None:
    backend = _rest_backend(search_server)

    builder = Builder(Message, backend=backend)
    search_server.documents["messages"].extend(["m1", "m2", "m3"])
    result = builder.set_filter("term", {"status": "open"}).paginate(page_size=_PAGE_SIZE, page=2)

    methods = [method for method, _, _ in search_server.requests]
    assert methods == ["HEAD", "PUT", "POST"]
    assert search_server.indices["messages"] == {"settings": {"number_of_shards": 1, "number_of_replicas": 0}}
    assert search_server.requests[-1][2]["from"] == _PAGE_SIZE
    assert result.total_hits == 3
    assert result.models == ("m3",)
    assert result.links.on_first_page is False


def test_rest_flush_then_search_is_empty(search_server) -> None:
    backend = _rest_backend(search_server)
    Builder(Message, backend=backend)
    search_server.documents["messages"].extend(["m1", "m2"])

    builder = finder(Message, backend=backend)
    message = builder.flush()
    result = builder.paginate()

    assert message == "All documents deleted from messages"
    assert result.total_hits == 0


def test_rest_search_on_deleted_index_surfaces_missing(search_server) -> None:
    backend = _rest_backend(search_server)
    builder = Builder(Message, backend=backend)
    builder.delete_index()

    with pytest.raises(IndexMissingError):
        builder.paginate()

    assert builder.spent is False


def test_backend_factory_supports_all_backends_with_client_instance() -> None:
    elastic = build_search_backend(backend="elasticsearch", client=_stub_client())
    opensearch = build_search_backend(backend="opensearch", client=_stub_client())
    rest = build_search_backend(backend="http", client=httpx.Client(base_url="http://search.local"))

    assert elastic.backend_name == "elasticsearch"
    assert opensearch.backend_name == "opensearch"
    assert rest.backend_name == "http"
