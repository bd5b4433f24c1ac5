"""components — ECS component dataclasses, organised by domain.

Submodules
----------
npc            Identity, Needs, Busy, Inventory
items          Usable, Edible
vitals         Vitals (+ make_hunger / make_mood / make_temperature)
dev_log        SimLog
item_registry  ItemRegistry

All public names are re-exported here so callers can write
``from components import Vitals``.
"""

# ── NPCs ─────────────────────────────────────────────────────────────
from components.npc import Identity, Needs, Busy, Inventory

# ── Items ────────────────────────────────────────────────────────────
from components.items import Usable, Edible

# ── Vitals ───────────────────────────────────────────────────────────
from components.vitals import Vitals, make_hunger, make_mood, make_temperature

# ── World resources / singletons ─────────────────────────────────────
from components.dev_log import SimLog

# ── Registries ───────────────────────────────────────────────────────
from components.item_registry import ItemRegistry

__all__ = [
    # npc
    "Identity", "Needs", "Busy", "Inventory",
    # items
    "Usable", "Edible",
    # vitals
    "Vitals", "make_hunger", "make_mood", "make_temperature",
    # resources
    "SimLog",
    # registries
    "ItemRegistry",
]
