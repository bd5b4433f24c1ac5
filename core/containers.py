"""core/containers.py — Heap and LinkedList.

Two small containers the valuation engine is built on.

``Heap`` is a binary min-priority-queue keyed by a numeric weight::

    heap = Heap()
    heap.push("lunch", 12.0)
    heap.push("snack", 3.0)
    heap.pop()          # → "snack"

Equal weights come out in insertion order (a sequence number breaks the
tie), so replays and tests are deterministic.

``LinkedList`` is a doubly linked sequence with O(1) unlink of a known
node and a single-pass ``keep_while()`` that yields the items a
predicate accepts and unlinks the rest::

    active = LinkedList([1, 2, 3])
    total = sum(active.keep_while(lambda x: x % 2))   # 4
    list(active)                                       # [1, 3]
"""

from __future__ import annotations
import heapq
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")


# ═══════════════════════════════════════════════════════════════════
#  Heap
# ═══════════════════════════════════════════════════════════════════

class Heap(Generic[T]):
    """Min-heap of ``(weight, item)`` pairs.  Lowest weight first."""

    def __init__(self) -> None:
        # [weight, seq, item]: seq keeps heapq from ever comparing items
        self._entries: list[list[Any]] = []
        self._seq: int = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def push(self, item: T, weight: float) -> None:
        self._seq += 1
        heapq.heappush(self._entries, [weight, self._seq, item])

    def pop(self) -> T:
        """Remove and return the item with the lowest weight."""
        if not self._entries:
            raise IndexError("pop from an empty Heap")
        return heapq.heappop(self._entries)[2]

    def peek(self) -> T:
        if not self._entries:
            raise IndexError("peek at an empty Heap")
        return self._entries[0][2]

    def peek_weight(self) -> float:
        if not self._entries:
            raise IndexError("peek at an empty Heap")
        return self._entries[0][0]

    def remove(self, item: T) -> bool:
        """Drop *item* wherever it sits.  O(n).  Returns whether it was found."""
        for i, entry in enumerate(self._entries):
            if entry[2] is item:
                last = self._entries.pop()
                if i < len(self._entries):
                    self._entries[i] = last
                    heapq.heapify(self._entries)
                return True
        return False

    def clear(self) -> None:
        self._entries.clear()

    def __iter__(self) -> Iterator[T]:
        """Yield every item.  The lightest comes first, the rest unordered."""
        for entry in self._entries:
            yield entry[2]

    def items(self) -> Iterator[tuple[T, float]]:
        """Yield ``(item, weight)`` pairs in heap-array order."""
        for weight, _seq, item in self._entries:
            yield item, weight


# ═══════════════════════════════════════════════════════════════════
#  LinkedList
# ═══════════════════════════════════════════════════════════════════

class _Node:
    __slots__ = ("obj", "prev", "next")

    def __init__(self, obj, prev: _Node | None = None,
                 next: _Node | None = None):
        self.obj = obj
        self.prev = prev
        self.next = next


class LinkedList(Generic[T]):
    """Doubly linked list with in-place pruning.

    ``first`` is None iff ``last`` is None iff the list is empty.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._first: _Node | None = None
        self._last: _Node | None = None
        self._count: int = 0
        for obj in items:
            self.append(obj)

    def __len__(self) -> int:
        return self._count

    def __bool__(self) -> bool:
        return self._count > 0

    def __iter__(self) -> Iterator[T]:
        node = self._first
        while node is not None:
            yield node.obj
            node = node.next

    def __repr__(self) -> str:
        return f"LinkedList({list(self)!r})"

    # ── Insertion ────────────────────────────────────────────────────

    def append(self, obj: T) -> None:
        node = _Node(obj, prev=self._last)
        if self._last is None:
            self._first = node
        else:
            self._last.next = node
        self._last = node
        self._count += 1

    def prepend(self, obj: T) -> None:
        node = _Node(obj, next=self._first)
        if self._first is None:
            self._last = node
        else:
            self._first.prev = node
        self._first = node
        self._count += 1

    # ── Removal ──────────────────────────────────────────────────────

    def remove(self, obj: T) -> bool:
        """Unlink the last occurrence of *obj*.  Returns whether it was found.

        Scans from the tail: recently added items are the likeliest
        targets.  Worst case is a full scan.
        """
        node = self._last
        while node is not None:
            if node.obj is obj or node.obj == obj:
                self._unlink(node)
                return True
            node = node.prev
        return False

    def clear(self) -> None:
        self._first = None
        self._last = None
        self._count = 0

    def _unlink(self, node: _Node) -> None:
        # ``node.next`` is left intact so a traversal sitting on this
        # node can still step forward.
        if node is self._first:
            self._first = node.next
        if node is self._last:
            self._last = node.prev
        if node.prev is not None:
            node.prev.next = node.next
        if node.next is not None:
            node.next.prev = node.prev
        self._count -= 1

    # ── Traversal ────────────────────────────────────────────────────

    def keep_while(self, predicate: Callable[[T], bool]) -> Iterator[T]:
        """Yield items for which *predicate* holds, unlinking the others.

        Lazy and single-pass: each call starts a fresh walk from the
        head.  Items that fail the predicate are gone from the list as
        soon as the walk passes them.
        """
        node = self._first
        while node is not None:
            if predicate(node.obj):
                yield node.obj
                node = node.next
            else:
                following = node.next
                self._unlink(node)
                node = following
