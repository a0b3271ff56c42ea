from __future__ import annotations

import json

import httpx
import pytest

from elastic_finder.cli import command_handlers, main
from elastic_finder.search.adapters import HttpClientAdapter

_PARSER_ERROR_EXIT_CODE = 2
_TIMEOUT_S = 3.5
_MAX_RETRIES = 4


@pytest.fixture
def patched_backend(memory_backend, monkeypatch):
    captured: dict[str, object] = {}

    def _build(**kwargs: object):
        captured.update(kwargs)
        return memory_backend

    for name in ("ELASTIC_FINDER_INDEX", "ELASTIC_FINDER_BACKEND", "ELASTIC_FINDER_PAGE_SIZE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(command_handlers, "build_search_backend", _build)
    memory_backend.factory_kwargs = captured
    return memory_backend


def test_main_without_subcommand_returns_1(capsys) -> None:
    exit_code = main([])

    assert exit_code == 1
    assert "usage:" in capsys.readouterr().out


def test_main_returns_parser_error_exit_code_for_invalid_choice() -> None:
    assert main(["index", "truncate"]) == _PARSER_ERROR_EXIT_CODE


def test_index_exists_reports_absent_index(patched_backend, capsys) -> None:
    exit_code = main(["index", "exists"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload == {"index": "documents", "action": "exists", "exists": False}


def test_index_create_uses_flags_and_connection_settings(patched_backend, capsys) -> None:
    exit_code = main(
        [
            "index",
            "create",
            "--index",
            "messages",
            "--shards",
            "2",
            "--backend",
            "http",
            "--backend-url",
            "http://search.local:9200",
            "--timeout",
            str(_TIMEOUT_S),
            "--max-retries",
            str(_MAX_RETRIES),
            "--no-verify-certs",
        ],
    )

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["response"] == {"acknowledged": True, "index": "messages"}
    assert patched_backend.indices["messages"] == {"settings": {"number_of_shards": 2, "number_of_replicas": 0}}
    assert patched_backend.factory_kwargs == {
        "backend": "http",
        "url": "http://search.local:9200",
        "timeout_s": _TIMEOUT_S,
        "verify_certs": False,
        "max_retries": _MAX_RETRIES,
    }


def test_index_flush_emits_message(patched_backend, capsys) -> None:
    patched_backend.create_index(index="documents", body={})
    patched_backend.add_documents("documents", "d1")

    exit_code = main(["index", "flush"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["message"] == "All documents deleted from documents"
    assert patched_backend.documents["documents"] == []


def test_index_delete_missing_index_returns_1(patched_backend, caplog) -> None:
    exit_code = main(["index", "delete", "--index", "ghost"])

    assert exit_code == 1
    assert "Index 'ghost' does not exist." in caplog.text


def test_search_emits_page_with_aggregations(patched_backend, capsys) -> None:
    patched_backend.create_index(index="documents", body={})
    patched_backend.add_documents("documents", "d1", "d2", "d3")
    patched_backend.aggregations = {"extension": {"buckets": [{"key": ".pdf", "doc_count": 3}]}}

    exit_code = main(
        [
            "search",
            "--query",
            "Quarterly report",
            "--fields",
            "content, filename",
            "--size",
            "2",
            "--page",
            "2",
            "--path",
            "/documents",
            "--terms-agg",
            "extension",
        ],
    )

    payload = json.loads(capsys.readouterr().out)
    request = patched_backend.requests[-1]
    assert exit_code == 0
    assert payload["total_hits"] == 3
    assert payload["models"] == ["d3"]
    assert payload["aggregations"] == {"extension": {".pdf": 3}}
    assert payload["links"]["previous_page_url"] == "/documents?page=1"
    assert request.query == {
        "bool": {
            "must": [
                {
                    "simple_query_string": {
                        "query": "Quarterly report",
                        "fields": ["content", "filename"],
                        "default_operator": "and",
                    },
                },
            ],
        },
    }


def test_search_writes_output_file(patched_backend, tmp_path) -> None:
    output_path = tmp_path / "out" / "page.json"

    exit_code = main(["search", "--index", "archive", "--output", str(output_path)])

    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert exit_code == 0
    assert payload["total_hits"] == 0
    assert "archive" in patched_backend.indices


def test_invalid_settings_file_returns_1(patched_backend, tmp_path) -> None:
    config_path = tmp_path / "finder.toml"
    config_path.write_text("backend = 'http'\n", encoding="utf-8")

    assert main(["index", "exists", "--config", str(config_path)]) == 1
    assert patched_backend.calls == []


def test_search_rejected_by_backend_returns_1(monkeypatch, caplog) -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.method == "HEAD":
            return httpx.Response(200)
        return httpx.Response(400, json={"error": {"type": "search_phase_execution_exception"}, "status": 400})

    client = httpx.Client(base_url="http://search.local", transport=httpx.MockTransport(_handler))
    monkeypatch.delenv("ELASTIC_FINDER_INDEX", raising=False)
    monkeypatch.setattr(command_handlers, "build_search_backend", lambda **_: HttpClientAdapter(client=client))

    exit_code = main(["search", "--terms-agg", "content"])

    assert exit_code == 1
    assert "status 400: search_phase_execution_exception" in caplog.text
