"""
=============================================================================
RESIZABLE SEQUENCE
=============================================================================

A growable, index-addressable sequence with explicit length and capacity.

Every buffer in the server is one of these: the bytes a client has sent
but we haven't parsed yet, the bytes we've queued but haven't flushed yet,
and the per-bucket chains inside HashMap.

=============================================================================
LENGTH VS CAPACITY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     Sequence(capacity=8), len=5                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │     index:   0     1     2     3     4     5     6     7             │
    │           ┌─────┬─────┬─────┬─────┬─────┬─────┬─────┬─────┐         │
    │   slots:  │  a  │  b  │  c  │  d  │  e  │  -  │  -  │  -  │         │
    │           └─────┴─────┴─────┴─────┴─────┴─────┴─────┴─────┘         │
    │           ◄──────── len = 5 ────────►                                │
    │           ◄────────────── capacity = 8 ─────────────────►            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Slots past `len` are reserved storage. Appending into reserved storage is
O(1). When an insert of N elements would overflow the capacity, storage
grows to (len + N) * 2, so a run of appends costs amortized O(1).

Inserting or removing in the middle shifts the tail, which is O(n).

=============================================================================
"""

from typing import Generic, Iterable, Iterator, List, Optional, TypeVar


T = TypeVar("T")


class Sequence(Generic[T]):
    """
    Growable sequence with amortized-doubling storage.

    Usage:
        buf: Sequence[int] = Sequence()
        buf.extend(b"hello")
        buf.remove_n(0, 2)
        bytes(buf)  # b"llo"
    """

    __slots__ = ("_items", "_len")

    def __init__(self, items: Optional[Iterable[T]] = None, capacity: int = 0):
        """
        Create a sequence.

        Args:
            items: Optional initial contents.
            capacity: Storage to reserve up front.
        """
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")

        self._items: List[Optional[T]] = [None] * capacity
        self._len = 0

        if items is not None:
            self.extend(items)

    # =========================================================================
    # SIZE
    # =========================================================================

    def __len__(self) -> int:
        return self._len

    def __bool__(self) -> bool:
        return self._len > 0

    @property
    def capacity(self) -> int:
        """Number of slots currently allocated."""
        return len(self._items)

    def resize(self, n: int) -> None:
        """
        Set both length and capacity to exactly `n`.

        Growing fills the new slots with None; shrinking drops the tail.
        """
        if n < 0:
            raise ValueError(f"size must be >= 0, got {n}")

        if n > len(self._items):
            self._items.extend([None] * (n - len(self._items)))
        else:
            del self._items[n:]

        for i in range(self._len, n):
            self._items[i] = None
        self._len = n

    def clear(self) -> None:
        """Drop all elements but keep the allocated storage."""
        for i in range(self._len):
            self._items[i] = None
        self._len = 0

    # =========================================================================
    # ELEMENT ACCESS
    # =========================================================================

    def _check_index(self, index: int) -> int:
        if index < 0:
            index += self._len
        if not 0 <= index < self._len:
            raise IndexError(f"sequence index {index} out of range (len={self._len})")
        return index

    def __getitem__(self, index: int) -> T:
        return self._items[self._check_index(index)]

    def __setitem__(self, index: int, value: T) -> None:
        self._items[self._check_index(index)] = value

    def __iter__(self) -> Iterator[T]:
        for i in range(self._len):
            yield self._items[i]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Sequence):
            return list(self) == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Sequence({list(self)!r}, capacity={self.capacity})"

    def to_list(self) -> List[T]:
        return list(self)

    # =========================================================================
    # INSERTION
    # =========================================================================

    def _reserve_gap(self, index: int, n: int) -> None:
        """
        Open a gap of `n` slots at `index`, growing storage if needed.

        After this call slots [index, index + n) hold stale values that the
        caller must overwrite.
        """
        if not 0 <= index <= self._len:
            raise IndexError(f"insert index {index} out of range (len={self._len})")

        if self._len + n > len(self._items):
            new_capacity = (self._len + n) * 2
            self._items.extend([None] * (new_capacity - len(self._items)))

        # Shift the tail right, back to front so nothing is overwritten
        if index != self._len:
            for i in range(self._len - 1, index - 1, -1):
                self._items[i + n] = self._items[i]

        self._len += n

    def insert_n(self, index: int, values: Iterable[T]) -> None:
        """Insert every element of `values` starting at `index`."""
        values = list(values)
        if not values:
            return

        self._reserve_gap(index, len(values))
        for offset, value in enumerate(values):
            self._items[index + offset] = value

    def insert(self, index: int, value: T) -> None:
        """Insert a single element at `index`."""
        self._reserve_gap(index, 1)
        self._items[index] = value

    def append(self, value: T) -> None:
        """Append a single element to the end."""
        self.insert(self._len, value)

    def extend(self, values: Iterable[T]) -> None:
        """Append every element of `values` to the end."""
        self.insert_n(self._len, values)

    # =========================================================================
    # REMOVAL
    # =========================================================================

    def remove_n(self, index: int, n: int) -> None:
        """
        Remove `n` elements starting at `index`.

        Raises:
            IndexError: If the range [index, index + n) is not inside the
                        sequence.
        """
        if n == 0:
            return
        if not 0 <= index < self._len or index + n > self._len:
            raise IndexError(
                f"remove range [{index}, {index + n}) out of range (len={self._len})"
            )

        # Shift the tail left over the removed range
        for i in range(index + n, self._len):
            self._items[i - n] = self._items[i]

        for i in range(self._len - n, self._len):
            self._items[i] = None

        self._len -= n

    def remove(self, index: int) -> T:
        """Remove and return the element at `index`."""
        index = self._check_index(index)
        value = self._items[index]
        self.remove_n(index, 1)
        return value
