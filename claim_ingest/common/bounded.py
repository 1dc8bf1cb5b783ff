from collections import OrderedDict
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class BoundedStore(Generic[K, V]):
    """Insertion-ordered mapping with a fixed capacity.

    Eviction policy: when an insert pushes the size over capacity, the oldest
    entry accepted by `evictable` is dropped; if no entry is evictable the
    oldest entry overall is dropped. The entry being inserted is never the
    victim. Replacing an existing key moves it to the newest position.
    """

    def __init__(
        self,
        capacity: int,
        evictable: Callable[[V], bool] | None = None,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._evictable = evictable
        self._items: OrderedDict[K, V] = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    def put(self, key: K, value: V) -> K | None:
        """Insert or replace `key`. Returns the evicted key, if any."""
        if key in self._items:
            del self._items[key]
        self._items[key] = value
        if len(self._items) <= self._capacity:
            return None
        victim = self._pick_victim(newest=key)
        del self._items[victim]
        return victim

    def get(self, key: K) -> V | None:
        return self._items.get(key)

    def pop(self, key: K) -> V | None:
        return self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def keys(self) -> list[K]:
        return list(self._items)

    def values(self) -> list[V]:
        return list(self._items.values())

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._items))

    def _pick_victim(self, newest: K) -> K:
        candidates = [key for key in self._items if key != newest]
        if self._evictable is not None:
            for key in candidates:
                if self._evictable(self._items[key]):
                    return key
        return candidates[0]
