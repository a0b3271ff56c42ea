from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import pytest

from elastic_finder.errors import IndexConflictError, IndexMissingError


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            p = Path(str(item.fspath)).resolve()
        except Exception:  # noqa: S112
            continue

        if p == target_dir or target_dir in p.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


@dataclass
class InMemoryBackend:
    """Search backend keeping indices and document ids in memory."""

    backend_name: str = "memory"
    indices: dict[str, dict[str, Any]] = field(default_factory=dict)
    documents: dict[str, list[str]] = field(default_factory=dict)
    aggregations: dict[str, Any] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)
    requests: list[Any] = field(default_factory=list)

    def search(self, *, request: Any) -> dict[str, Any]:
        self.calls.append(("search", request.index))
        self.requests.append(request)
        if request.index not in self.indices:
            raise IndexMissingError(request.index)

        ids = self.documents[request.index]
        page = ids[request.from_ : request.from_ + request.size]
        response: dict[str, Any] = {
            "hits": {
                "total": {"value": len(ids), "relation": "eq"},
                "hits": [{"_index": request.index, "_id": doc_id, "_score": 1.0} for doc_id in page],
            },
        }
        if self.aggregations:
            response["aggregations"] = copy.deepcopy(self.aggregations)
        return response

    def index_exists(self, *, index: str) -> bool:
        self.calls.append(("exists", index))
        return index in self.indices

    def create_index(self, *, index: str, body: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create", index))
        if index in self.indices:
            raise IndexConflictError(index)
        self.indices[index] = body
        self.documents[index] = []
        return {"acknowledged": True, "index": index}

    def delete_index(self, *, index: str) -> dict[str, Any]:
        self.calls.append(("delete", index))
        if index not in self.indices:
            raise IndexMissingError(index)
        del self.indices[index]
        del self.documents[index]
        return {"acknowledged": True}

    def add_documents(self, index: str, *doc_ids: str) -> None:
        self.documents[index].extend(doc_ids)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@dataclass
class RecordStore:
    """Record lookup returning records sorted by id, like a primary-key scan."""

    records: dict[str, dict[str, Any]] = field(default_factory=dict)
    lookups: list[list[str]] = field(default_factory=list)

    def find_by_ids(self, ids: list[str]) -> list[dict[str, Any]]:
        self.lookups.append(list(ids))
        return [self.records[key] for key in sorted(ids) if key in self.records]


@pytest.fixture
def memory_backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def record_store() -> RecordStore:
    return RecordStore(
        records={
            "a": {"id": "a", "title": "alpha"},
            "b": {"id": "b", "title": "bravo"},
            "c": {"id": "c", "title": "charlie"},
        },
    )


@dataclass
class FakeSearchServer:
    """REST search endpoints served through `httpx.MockTransport`."""

    indices: dict[str, dict[str, Any]] = field(default_factory=dict)
    documents: dict[str, list[str]] = field(default_factory=dict)
    aggregations: dict[str, Any] = field(default_factory=dict)
    requests: list[tuple[str, str, dict[str, Any] | None]] = field(default_factory=list)

    def handle(self, request: httpx.Request) -> httpx.Response:
        segments = request.url.path.strip("/").split("/")
        index = segments[0]
        payload = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, payload))

        if request.method == "POST" and segments[1:] == ["_search"]:
            return self._search(index, payload or {})
        if request.method == "HEAD":
            return httpx.Response(200 if index in self.indices else 404)
        if request.method == "PUT":
            if index in self.indices:
                return httpx.Response(400, json={"error": {"type": "resource_already_exists_exception"}})
            self.indices[index] = payload or {}
            self.documents[index] = []
            return httpx.Response(200, json={"acknowledged": True, "index": index})
        if request.method == "DELETE":
            if index not in self.indices:
                return httpx.Response(404, json={"error": {"type": "index_not_found_exception"}})
            del self.indices[index]
            del self.documents[index]
            return httpx.Response(200, json={"acknowledged": True})
        return httpx.Response(405)

    def _search(self, index: str, body: dict[str, Any]) -> httpx.Response:
        if index not in self.indices:
            return httpx.Response(404, json={"error": {"type": "index_not_found_exception"}})
        ids = self.documents[index]
        start = body.get("from", 0)
        page = ids[start : start + body.get("size", 10)]
        response: dict[str, Any] = {
            "took": 1,
            "hits": {
                "total": {"value": len(ids), "relation": "eq"},
                "hits": [{"_index": index, "_id": doc_id} for doc_id in page],
            },
        }
        requested = body.get("aggs") or {}
        aggregations = {name: self.aggregations[name] for name in requested if name in self.aggregations}
        if aggregations:
            response["aggregations"] = aggregations
        return httpx.Response(200, json=response)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def search_server() -> FakeSearchServer:
    return FakeSearchServer()
