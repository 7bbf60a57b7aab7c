"""
=============================================================================
HASH MAP WITH OPEN CHAINING
=============================================================================

The client registry, both session registries and the command table are
all HashMaps. Keys can be any type: the caller supplies the hash and
equality functions.

=============================================================================
LAYOUT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                  HashMap(capacity=8), len=4, pop_bkts=3              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   bucket 0: []                                                       │
    │   bucket 1: [(k1, v1), (k9, v9)]     ◄── collision, chained          │
    │   bucket 2: []                                                       │
    │   bucket 3: [(k3, v3)]                                               │
    │   bucket 4: []                                                       │
    │   bucket 5: [(k5, v5)]                                               │
    │   bucket 6: []                                                       │
    │   bucket 7: []                                                       │
    │                                                                      │
    │   bucket index = hash(key) % capacity                                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

`len` counts entries, `pop_bkts` counts non-empty buckets.

=============================================================================
GROWTH POLICY
=============================================================================

Before every set(), if pop_bkts == capacity // 2 the bucket array doubles:

    1. Fresh buckets are allocated at 2 * capacity
    2. Every old entry is re-inserted using the new modulus
    3. len and pop_bkts are recounted during re-insertion
    4. The old buckets are dropped

The map never shrinks. Iteration walks buckets in index order and each
bucket in slot order, so iteration order can change after any set().

=============================================================================
"""

import operator
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, List, Optional, Tuple, TypeVar, Union

from .sequence import Sequence


K = TypeVar("K")
V = TypeVar("V")
D = TypeVar("D")

HashFunc = Callable[[K], int]
EqFunc = Callable[[K, K], bool]

DEFAULT_CAPACITY = 16
BUCKET_RESERVE = 2

_FNV_OFFSET_BASIS = 14695981039346656037
_FNV_PRIME = 1099511628211
_U64_MASK = (1 << 64) - 1


def fnv1a_hash(key: Union[str, bytes]) -> int:
    """64-bit FNV-1a hash of a string or byte string."""
    data = key.encode("utf-8") if isinstance(key, str) else key

    h = _FNV_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & _U64_MASK
    return h


def handle_hash(handle: int) -> int:
    """Identity hash for integer connection handles."""
    return handle


@dataclass
class _Entry(Generic[K, V]):
    key: K
    value: V


class HashMap(Generic[K, V]):
    """
    Open-chaining hash map with pluggable hash and equality.

    Usage:
        users: HashMap[str, Session] = HashMap(fnv1a_hash, operator.eq)
        users["alice"] = session
        "alice" in users         # True
        users.remove("bob")      # no-op when absent
    """

    def __init__(
        self,
        hash_func: Optional[HashFunc] = None,
        eq_func: Optional[EqFunc] = None,
        capacity: int = DEFAULT_CAPACITY,
    ):
        """
        Create an empty map.

        Args:
            hash_func: Maps a key to an int. Defaults to built-in hash().
            eq_func: Key equality. Defaults to ==.
            capacity: Initial number of buckets.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")

        self._hash: HashFunc = hash_func or hash
        self._eq: EqFunc = eq_func or operator.eq

        self._buckets: Sequence[Sequence[_Entry[K, V]]] = self._new_buckets(capacity)
        self.len = 0
        self.pop_bkts = 0

    @staticmethod
    def _new_buckets(capacity: int) -> "Sequence[Sequence[_Entry]]":
        return Sequence(
            (Sequence(capacity=BUCKET_RESERVE) for _ in range(capacity)),
            capacity=capacity,
        )

    @property
    def capacity(self) -> int:
        """Current number of buckets."""
        return len(self._buckets)

    def __len__(self) -> int:
        return self.len

    def __bool__(self) -> bool:
        return self.len > 0

    def _bucket_for(self, key: K, capacity: int) -> "Sequence[_Entry[K, V]]":
        return self._buckets[self._hash(key) % capacity]

    def _find(self, key: K) -> Optional[_Entry[K, V]]:
        for entry in self._bucket_for(key, self.capacity):
            if self._eq(entry.key, key):
                return entry
        return None

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def get(self, key: K, default: Optional[D] = None) -> Union[V, D, None]:
        """Return the value for `key`, or `default` if absent."""
        entry = self._find(key)
        return entry.value if entry is not None else default

    def __getitem__(self, key: K) -> V:
        entry = self._find(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    def contains(self, key: K) -> bool:
        return self._find(key) is not None

    __contains__ = contains

    # =========================================================================
    # MUTATION
    # =========================================================================

    def _set_no_rehash(self, key: K, value: V, capacity: int) -> None:
        bucket = self._bucket_for(key, capacity)

        for entry in bucket:
            if self._eq(entry.key, key):
                entry.value = value
                return

        self.len += 1
        if len(bucket) == 0:
            self.pop_bkts += 1
        bucket.append(_Entry(key, value))

    def _rehash(self) -> None:
        old_buckets = self._buckets
        new_capacity = len(old_buckets) * 2

        self._buckets = self._new_buckets(new_capacity)
        self.len = self.pop_bkts = 0

        for bucket in old_buckets:
            for entry in bucket:
                self._set_no_rehash(entry.key, entry.value, new_capacity)

    def set(self, key: K, value: V) -> None:
        """
        Insert `key` or replace its value.

        The growth check runs before the insert, so the doubling happens on
        the set() that finds the map already half-populated.
        """
        if self.pop_bkts == self.capacity // 2:
            self._rehash()

        self._set_no_rehash(key, value, self.capacity)

    __setitem__ = set

    def remove(self, key: K) -> None:
        """Remove `key` if present. Absent keys are ignored."""
        bucket = self._bucket_for(key, self.capacity)

        for index, entry in enumerate(bucket):
            if self._eq(entry.key, key):
                bucket.remove(index)
                self.len -= 1
                if len(bucket) == 0:
                    self.pop_bkts -= 1
                return

    def __delitem__(self, key: K) -> None:
        if key not in self:
            raise KeyError(key)
        self.remove(key)

    # =========================================================================
    # ITERATION (bucket-then-slot order)
    # =========================================================================

    def items(self) -> Iterator[Tuple[K, V]]:
        for bucket in self._buckets:
            for entry in bucket:
                yield entry.key, entry.value

    def keys(self) -> Iterator[K]:
        for key, _ in self.items():
            yield key

    def values(self) -> Iterator[V]:
        for _, value in self.items():
            yield value

    def __iter__(self) -> Iterator[K]:
        return self.keys()

    def bucket_lengths(self) -> List[int]:
        """Length of every bucket, in bucket order."""
        return [len(bucket) for bucket in self._buckets]

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"HashMap({{{body}}}, capacity={self.capacity})"
