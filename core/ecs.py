"""
core/ecs.py — Entity-Component store

Entities are ints.  Components are plain objects, stored by type.
NPCs and items are entities; their Variables live inside a ``Vitals``
component, so systems find them with a query:

    w = World()
    npc = w.spawn()
    w.add(npc, Identity(title="Kim"))
    w.add(npc, Vitals(hunger=make_hunger(clock)))

    for eid, ident, vitals in w.query(Identity, Vitals):
        print(ident.title, vitals.hunger.formatted())

Resources (one per type, not tied to an entity) use ``set_res`` / ``res``.
"""

from __future__ import annotations
from typing import Any, Iterator

_RESOURCE = -1


class World:
    def __init__(self):
        self._next_id = 0
        self._stores: dict[type, dict[int, Any]] = {}
        self._dead: set[int] = set()

    # -- Entities --

    def spawn(self) -> int:
        self._next_id += 1
        return self._next_id

    def kill(self, eid: int):
        """Mark *eid* dead.  Its components go away on the next ``purge()``."""
        self._dead.add(eid)

    def alive(self, eid: int) -> bool:
        return 0 < eid <= self._next_id and eid not in self._dead

    def purge(self):
        for store in self._stores.values():
            for eid in self._dead:
                store.pop(eid, None)
        self._dead.clear()

    # -- Components --

    def add(self, eid: int, comp: Any):
        self._stores.setdefault(type(comp), {})[eid] = comp

    def get(self, eid: int, comp_type: type) -> Any | None:
        return self._stores.get(comp_type, {}).get(eid)

    def has(self, eid: int, comp_type: type) -> bool:
        return eid in self._stores.get(comp_type, {})

    def remove(self, eid: int, comp_type: type):
        self._stores.get(comp_type, {}).pop(eid, None)

    # -- Queries --

    def query(self, *types: type) -> Iterator[tuple]:
        """Yield (eid, comp1, comp2, ...) for living entities that have ALL types."""
        if not types:
            return
        stores = [self._stores.get(t, {}) for t in types]
        smallest = min(stores, key=len)
        for eid in list(smallest):
            if eid == _RESOURCE or eid in self._dead:
                continue
            if all(eid in s for s in stores):
                yield (eid, *(s[eid] for s in stores))

    def all_of(self, comp_type: type) -> Iterator[tuple[int, Any]]:
        for eid, comp in list(self._stores.get(comp_type, {}).items()):
            if eid != _RESOURCE and eid not in self._dead:
                yield eid, comp

    # -- Resources --

    def set_res(self, resource: Any):
        self._stores.setdefault(type(resource), {})[_RESOURCE] = resource

    def res(self, res_type: type) -> Any | None:
        return self._stores.get(res_type, {}).get(_RESOURCE)
