"""components.item_registry — Item definitions and item spawning.

Populated by ``DataLoader.load_items()`` from ``data/items.toml``.
Stored as a world resource::

    registry = world.res(ItemRegistry)
    registry.display_name("lunchbox")        # "Lunchbox"
    eid = registry.spawn(world, clock, "lunchbox")
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from components.items import Edible, Usable
from components.npc import Identity
from components.vitals import Vitals, make_temperature
from core.tuning import get as _tun

if TYPE_CHECKING:
    from core.clock import Clock
    from core.ecs import World


@dataclass
class ItemRegistry:
    """Lookup table mapping item IDs → definition dicts."""
    _entries: dict = field(default_factory=dict)

    def register(self, item_id: str, title: str, **extra):
        self._entries[item_id] = {"title": title, **extra}

    def get_item(self, item_id: str) -> dict | None:
        return self._entries.get(item_id)

    def get_field(self, item_id: str, key: str, default=0.0):
        """Field accessor, cast to the type of *default*."""
        entry = self._entries.get(item_id)
        if not entry:
            return default
        raw = entry.get(key, default)
        if isinstance(default, float):
            return float(raw)
        if isinstance(default, int):
            return int(raw)
        return raw

    def ids(self) -> list[str]:
        return list(self._entries)

    def display_name(self, item_id: str) -> str:
        entry = self._entries.get(item_id)
        return entry["title"] if entry else item_id

    def item_type(self, item_id: str) -> str:
        """'edible', 'usable' or 'misc'."""
        entry = self._entries.get(item_id)
        return entry.get("type", "misc") if entry else "misc"

    def burn_rate(self, item_id: str) -> float:
        """Hunger-points per minute.  Accepts "standard", "fast" or a number."""
        raw = self.get_field(item_id, "burn_rate", "standard")
        if raw == "standard":
            return _tun("needs", "burn_rate_standard", 1.0 / 3.0)
        if raw == "fast":
            return _tun("needs", "burn_rate_fast", 1.0)
        return float(raw)

    def spawn(self, world: World, clock: Clock, item_id: str) -> int:
        """Create an item entity from its definition."""
        entry = self._entries.get(item_id)
        if entry is None:
            raise KeyError(f"unknown item id {item_id!r}")

        eid = world.spawn()
        world.add(eid, Identity(title=entry["title"],
                                description=entry.get("description", ""),
                                kind="item"))
        world.add(eid, Vitals(temperature=make_temperature(clock)))

        kind = self.item_type(item_id)
        if kind in ("edible", "usable"):
            world.add(eid, Usable(
                uses=self.get_field(item_id, "uses", 1),
                minutes_per_use=self.get_field(item_id, "minutes_per_use", 1.0),
                action=entry.get("action"),
            ))
        if kind == "edible":
            world.add(eid, Edible(
                hunger_points=self.get_field(item_id, "hunger_points", 20.0),
                burn_rate=self.burn_rate(item_id),
            ))
        return eid
