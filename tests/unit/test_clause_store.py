from __future__ import annotations

import pytest

from elastic_finder.domain import ClauseCategory
from elastic_finder.errors import UnsupportedClauseCategoryError
from elastic_finder.query import ClauseStore


def test_categories_are_absent_until_first_write() -> None:
    store = ClauseStore()

    for category in ClauseCategory:
        assert store.get(category) is None
        assert store.has(category) is False
    assert store.script is None


def test_set_clause_creates_category_and_overwrites_same_key() -> None:
    store = ClauseStore()

    store.set_clause(ClauseCategory.MUST, "match", {"message": {"query": "one"}})
    store.set_clause(ClauseCategory.MUST, "match", {"message": {"query": "two"}})
    store.set_clause(ClauseCategory.MUST, "term", {"status": "open"})

    must = store.get(ClauseCategory.MUST)
    assert must is not None
    assert dict(must) == {
        "match": {"message": {"query": "two"}},
        "term": {"status": "open"},
    }
    assert store.get(ClauseCategory.SHOULD) is None


def test_set_clause_accepts_category_names() -> None:
    store = ClauseStore()

    store.set_clause(" Must_Not ", "term", {"status": "closed"})

    assert store.has(ClauseCategory.MUST_NOT)


def test_set_clause_rejects_unknown_category() -> None:
    store = ClauseStore()

    with pytest.raises(UnsupportedClauseCategoryError, match="Unsupported clause category: boost"):
        store.set_clause("boost", "term", {})


def test_script_slot_keeps_last_write() -> None:
    store = ClauseStore()

    store.set_script({"source": "first"})
    store.set_script({"source": "second"})

    assert store.script == {"source": "second"}


def test_get_returns_read_only_view() -> None:
    store = ClauseStore()
    store.set_clause(ClauseCategory.FILTER, "term", {"status": "open"})

    view = store.get(ClauseCategory.FILTER)

    assert view is not None
    with pytest.raises(TypeError):
        view["range"] = {}  # type: ignore[index]


def test_sort_criteria_keep_insertion_order() -> None:
    store = ClauseStore()

    store.add_sort({"created_at": {"order": "desc"}})
    store.add_sort("title")

    assert store.sort == ({"created_at": {"order": "desc"}}, "title")
