"""test_containers.py — Heap and LinkedList.

Run: python test_containers.py   (or: pytest test_containers.py)
"""
from __future__ import annotations
import sys, traceback

from core.containers import Heap, LinkedList

passed = 0
failed = 0


def ok(label: str):
    global passed
    passed += 1
    print(f"  [PASS] {label}")


def fail(label: str, detail: str = ""):
    global failed
    failed += 1
    print(f"  [FAIL] {label}")
    if detail:
        for line in detail.strip().splitlines():
            print(f"         {line}")


# ════════════════════════════════════════════════════════════════════════
#  Heap
# ════════════════════════════════════════════════════════════════════════

def test_heap_pops_lowest_weight_first():
    heap = Heap()
    for weight in (10, 1, 5, -5):
        heap.push(weight, weight)
    assert [heap.pop() for _ in range(4)] == [-5, 1, 5, 10]
    assert heap.is_empty()
    ok("Weights [10, 1, 5, -5] pop as [-5, 1, 5, 10]")


def test_heap_peek_does_not_remove():
    heap = Heap()
    heap.push("b", 2.0)
    heap.push("a", 1.0)
    assert heap.peek() == "a"
    assert heap.peek_weight() == 1.0
    assert len(heap) == 2
    ok("peek / peek_weight leave the heap unchanged")


def test_heap_empty_is_an_error():
    heap = Heap()
    for op in (heap.pop, heap.peek, heap.peek_weight):
        try:
            op()
        except IndexError:
            continue
        raise AssertionError(f"{op.__name__} on an empty heap did not raise")
    assert not heap
    ok("pop / peek / peek_weight on an empty heap raise IndexError")


def test_heap_equal_weights_are_fifo():
    heap = Heap()
    for name in ("first", "second", "third"):
        heap.push(name, 7)
    assert [heap.pop() for _ in range(3)] == ["first", "second", "third"]
    ok("Equal weights come out in insertion order")


def test_heap_items_are_never_compared():
    class Opaque:
        pass

    heap = Heap()
    a, b = Opaque(), Opaque()
    heap.push(a, 1)
    heap.push(b, 1)
    assert heap.pop() is a
    ok("Unorderable items with equal weights are fine")


def test_heap_remove():
    heap = Heap()
    items = {name: object() for name in "abcd"}
    for weight, name in enumerate("abcd"):
        heap.push(items[name], weight)
    assert heap.remove(items["b"])
    assert not heap.remove(items["b"])
    assert heap.pop() is items["a"]
    assert heap.pop() is items["c"]
    assert heap.pop() is items["d"]
    ok("remove() drops an item and keeps the heap order")


# ════════════════════════════════════════════════════════════════════════
#  LinkedList
# ════════════════════════════════════════════════════════════════════════

def test_list_append_prepend():
    seq = LinkedList([2, 3])
    seq.prepend(1)
    seq.append(4)
    assert list(seq) == [1, 2, 3, 4]
    assert len(seq) == 4
    ok("append / prepend")


def test_keep_while_prunes_in_one_pass():
    seq = LinkedList([1, 2, 3])
    kept = list(seq.keep_while(lambda x: x % 2 == 1))
    assert kept == [1, 3]
    assert list(seq) == [1, 3]
    assert len(seq) == 2
    ok("keep_while(odd) over [1, 2, 3] yields and leaves [1, 3]")


def test_keep_while_is_lazy():
    seq = LinkedList([2, 1, 4])
    walk = seq.keep_while(lambda x: x % 2 == 1)
    assert list(seq) == [2, 1, 4]
    assert next(walk) == 1
    assert list(seq) == [1, 4]
    assert list(walk) == []
    assert list(seq) == [1]
    ok("keep_while only unlinks what the walk has passed")


def test_keep_while_drops_everything():
    seq = LinkedList(["a", "b"])
    assert list(seq.keep_while(lambda _x: False)) == []
    assert list(seq) == []
    assert not seq
    seq.append("c")
    assert list(seq) == ["c"]
    ok("keep_while can empty the list, which stays usable")


def test_keep_while_restarts_per_call():
    seq = LinkedList([1, 2, 3, 4])
    assert sum(seq.keep_while(lambda x: x > 1)) == 9
    assert sum(seq.keep_while(lambda x: x > 2)) == 7
    assert list(seq) == [3, 4]
    ok("Each keep_while call walks from the head")


def test_remove_reports_presence():
    seq = LinkedList(["x", "y", "z"])
    assert seq.remove("y")
    assert not seq.remove("y")
    assert list(seq) == ["x", "z"]
    assert seq.remove("z")
    assert seq.remove("x")
    assert list(seq) == [] and len(seq) == 0
    ok("remove() returns whether the item was present")


def test_remove_takes_last_occurrence():
    a, b = [1], [1]
    seq = LinkedList([a, b])
    assert seq.remove([1])
    assert list(seq)[0] is a
    ok("remove() scans from the tail")


# ════════════════════════════════════════════════════════════════════════
#  Runner
# ════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    print("\n=== Containers ===")
    for _name, _fn in list(globals().items()):
        if _name.startswith("test_") and callable(_fn):
            try:
                _fn()
            except Exception:
                fail(_name, traceback.format_exc())
    print(f"\n{passed} passed, {failed} failed")
    sys.exit(1 if failed else 0)
