from types import SimpleNamespace

import pytest

from classio.core.exceptions import AccessDenied
from classio.core.query_cache import QueryCache
from classio.services.access import ChildAccessGuard, child_class_key, children_key


def test_get_or_load_caches_result():
    cache = QueryCache()
    calls = []

    def loader():
        calls.append(1)
        return "value"

    assert cache.get_or_load("key", loader) == "value"
    assert cache.get_or_load("key", loader) == "value"
    assert len(calls) == 1
    assert "key" in cache


def test_invalidate_cascades_to_dependents():
    cache = QueryCache()
    cache.get_or_load("parent", lambda: 1)
    cache.get_or_load("child", lambda: 2, depends_on=["parent"])
    cache.get_or_load("grandchild", lambda: 3, depends_on=["child"])
    cache.get_or_load("other", lambda: 4)

    cache.invalidate("parent")

    assert "parent" not in cache
    assert "child" not in cache
    assert "grandchild" not in cache
    assert cache.get("other") == 4


def test_result_not_stored_when_invalidated_during_load():
    cache = QueryCache()

    def loader():
        cache.invalidate("key")
        return "stale"

    assert cache.get_or_load("key", loader) == "stale"
    assert "key" not in cache
    assert cache.get_or_load("key", lambda: "fresh") == "fresh"
    assert cache.get("key") == "fresh"


def test_clear_drops_everything():
    cache = QueryCache()
    cache.set("a", 1)
    cache.get_or_load("b", lambda: 2, depends_on=["a"])
    cache.clear()
    assert "a" not in cache
    assert "b" not in cache


def children(*ids):
    return [SimpleNamespace(id=i) for i in ids]


def test_guard_allows_own_child_and_denies_others():
    guard = ChildAccessGuard(QueryCache())
    guard.verify_child_access(1, 10, lambda: children(10, 11))
    with pytest.raises(AccessDenied) as exc:
        guard.verify_child_access(1, 12, lambda: children(10, 11))
    assert exc.value.message == "Не найдено или доступ запрещён"


def test_guard_uses_cached_list_until_refresh():
    cache = QueryCache()
    guard = ChildAccessGuard(cache)
    calls = []

    def loader():
        calls.append(1)
        return children(10) if len(calls) == 1 else children(10, 11)

    guard.verify_child_access(1, 10, loader)
    with pytest.raises(AccessDenied):
        guard.verify_child_access(1, 11, loader)
    assert len(calls) == 1

    cache.get_or_load(child_class_key(1, 10), lambda: 5, depends_on=[children_key(1)])
    guard.refresh(1)
    assert child_class_key(1, 10) not in cache

    guard.verify_child_access(1, 11, loader)
    assert len(calls) == 2
