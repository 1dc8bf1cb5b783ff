import pytest

from claim_ingest.common.bounded import BoundedStore


class TestEviction:
    def test_evicts_oldest_when_over_capacity(self) -> None:
        store: BoundedStore[str, int] = BoundedStore(2)
        store.put("a", 1)
        store.put("b", 2)

        evicted = store.put("c", 3)

        assert evicted == "a"
        assert store.keys() == ["b", "c"]

    def test_no_eviction_under_capacity(self) -> None:
        store: BoundedStore[str, int] = BoundedStore(2)
        assert store.put("a", 1) is None
        assert len(store) == 1

    def test_replacing_key_refreshes_position(self) -> None:
        store: BoundedStore[str, int] = BoundedStore(2)
        store.put("a", 1)
        store.put("b", 2)
        store.put("a", 10)

        store.put("c", 3)

        assert store.keys() == ["a", "c"]
        assert store.get("a") == 10

    def test_prefers_evictable_entries(self) -> None:
        store: BoundedStore[str, int] = BoundedStore(2, evictable=lambda v: v % 2 == 0)
        store.put("odd", 1)
        store.put("even", 2)

        store.put("new", 3)

        assert "odd" in store
        assert "even" not in store

    def test_falls_back_to_oldest_when_nothing_evictable(self) -> None:
        store: BoundedStore[str, int] = BoundedStore(2, evictable=lambda v: False)
        store.put("a", 1)
        store.put("b", 3)

        store.put("c", 5)

        assert store.keys() == ["b", "c"]

    def test_never_evicts_the_new_entry(self) -> None:
        store: BoundedStore[str, int] = BoundedStore(1, evictable=lambda v: v == 2)
        store.put("a", 1)

        store.put("b", 2)

        assert store.keys() == ["b"]


class TestAccessors:
    def test_pop_and_clear(self) -> None:
        store: BoundedStore[str, int] = BoundedStore(3)
        store.put("a", 1)
        store.put("b", 2)

        assert store.pop("a") == 1
        assert store.pop("missing") is None
        store.clear()
        assert len(store) == 0

    def test_iterates_oldest_first(self) -> None:
        store: BoundedStore[str, int] = BoundedStore(3)
        store.put("a", 1)
        store.put("b", 2)
        assert list(store) == ["a", "b"]
        assert store.values() == [1, 2]

    def test_rejects_non_positive_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            BoundedStore(0)
