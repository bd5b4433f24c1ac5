"""
core/data.py — TOML → item definitions

Reads data files into the world's ItemRegistry resource.  Item content
lives in .toml files; entities are spawned from the registry later,
when the game actually needs an item.

Usage:
    loader = DataLoader(world)
    ids = loader.load_items("data/items.toml")   # ["lunchbox", "biscuit", ...]
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
from pathlib import Path
from core.ecs import World

_KNOWN_TYPES = {"edible", "usable", "misc"}


class DataLoader:
    def __init__(self, world: World):
        self.world = world

    def load_items(self, path: str | Path) -> list[str]:
        """Load items.toml into the ItemRegistry resource (created if absent).

        Each top-level table is one item; its keys become the item's
        definition.  Returns the item ids in file order.
        """
        from components.item_registry import ItemRegistry

        registry = self.world.res(ItemRegistry)
        if registry is None:
            registry = ItemRegistry()
            self.world.set_res(registry)

        with open(Path(path), "rb") as f:
            data = tomllib.load(f)

        ids: list[str] = []
        for item_id, section in data.items():
            if not isinstance(section, dict):
                continue
            kind = section.get("type", "misc")
            if kind not in _KNOWN_TYPES:
                raise ValueError(f"{path}: item {item_id!r} has unknown type {kind!r}")
            extra = {k: v for k, v in section.items() if k != "title"}
            registry.register(item_id, section.get("title", item_id), **extra)
            ids.append(item_id)

        print(f"[ITEMS] Loaded {len(ids)} item definitions from {path}")
        return ids
