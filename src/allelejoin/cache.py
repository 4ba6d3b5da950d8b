"""
Bounded memoization of annotation results.

The default policy is FIFO: entries leave the cache in the order they were
inserted, and reading an entry does not extend its lifetime. LRU is available
as an explicit opt-in.
"""

from collections import OrderedDict
from typing import Any, Generic, Hashable, Iterable, Iterator, Optional, TypeVar

from allelejoin.config import DEFAULT_CACHE_CAPACITY, CacheKeying, CachePolicy
from allelejoin.models import ContextWindow, VariantRecord

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class BoundedCache(Generic[K, V]):
    """
    A capacity-bounded map with explicit eviction order.

    After every insertion, if the number of entries has reached ``capacity``,
    the entry at the front of the order is evicted. The cache therefore holds
    at most ``capacity - 1`` entries between calls.

    With ``CachePolicy.FIFO`` the order is insertion order: ``get`` never moves
    an entry, and re-inserting an existing key replaces its value in place.
    With ``CachePolicy.LRU`` both ``get`` hits and re-insertion move the key
    to the back.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY, policy: CachePolicy = CachePolicy.FIFO):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._policy = CachePolicy(policy)
        self._entries: "OrderedDict[K, V]" = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def policy(self) -> CachePolicy:
        return self._policy

    def get(self, key: K) -> Optional[V]:
        if key not in self._entries:
            return None
        if self._policy == CachePolicy.LRU:
            self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: K, value: V) -> None:
        existed = key in self._entries
        self._entries[key] = value
        if existed and self._policy == CachePolicy.LRU:
            self._entries.move_to_end(key)
        if len(self._entries) >= self._capacity:
            self._entries.popitem(last=False)

    def keys(self) -> list[K]:
        """Keys from next-to-evict to most recent."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(capacity={self._capacity}, "
                f"policy={self._policy.value}, size={len(self)})")


class IdentityKey:
    """Compares by object identity and keeps the objects alive while the key is cached."""

    __slots__ = ("_objects", "_hash")

    def __init__(self, *objects: Any):
        self._objects = objects
        self._hash = hash(tuple(id(o) for o in objects))

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IdentityKey) or len(other._objects) != len(self._objects):
            return False
        return all(a is b for a, b in zip(self._objects, other._objects))


def _context_key(context: Optional[ContextWindow]) -> Hashable:
    if context is None or isinstance(context, Hashable):
        return context
    return IdentityKey(context)


def make_cache_key(
    query: VariantRecord,
    context: Optional[ContextWindow],
    candidates: Iterable[Optional[VariantRecord]],
    keying: CacheKeying = CacheKeying.CONTENT,
) -> Hashable:
    """
    Build the key of one annotate call.

    Content keys compare locus, alleles and INFO of the query and of each
    candidate, so equal data hits regardless of the instances. Identity keys
    hit only when the very same query, context and candidate objects recur.
    """
    candidates = tuple(candidates)
    if keying == CacheKeying.IDENTITY:
        return (IdentityKey(query), IdentityKey(context), IdentityKey(*candidates))
    return (
        query.content_key(),
        _context_key(context),
        tuple(c.content_key() if c is not None else None for c in candidates),
    )
