"""simulation/sim.py — Top-level simulation manager.

Provides the ``Simulation`` class that owns the ECS world, the virtual
clock and the event log, and exposes a single ``tick()`` method for
the game loop.

Usage in a scene::

    # In on_enter():
    self.sim = Simulation()
    self.sim.load_items("data/items.toml")
    self.sim.demo()

    # In update():
    self.sim.tick(dt * 1000, fast_forward=self.fast_forward)
"""

from __future__ import annotations
from pathlib import Path

from components import (
    Identity, Inventory, ItemRegistry, Needs, SimLog, Vitals,
    make_hunger, make_mood, make_temperature,
)
from core.clock import Clock
from core.data import DataLoader
from core.ecs import World
from core.tuning import get as _tun
from logic.needs import auto_eat_system, needs_system


class Simulation:
    """World + Clock + SimLog, advanced together.

    The clock and the log are also stored as world resources so systems
    can look them up.
    """

    def __init__(self, world: World | None = None, clock: Clock | None = None):
        self.world = world if world is not None else World()
        self.log = SimLog()
        self.clock = clock if clock is not None else Clock(log=self.log)
        if self.clock.log is None:
            self.clock.log = self.log
        else:
            self.log = self.clock.log

        self.world.set_res(self.log)
        self.world.set_res(self.clock)
        if self.world.res(ItemRegistry) is None:
            self.world.set_res(ItemRegistry())

    # ── Setup ────────────────────────────────────────────────────────

    @property
    def items(self) -> ItemRegistry:
        return self.world.res(ItemRegistry)

    def load_items(self, filepath: str | Path) -> list[str]:
        return DataLoader(self.world).load_items(filepath)

    def spawn_npc(self, title: str, description: str = "",
                  hunger: float | None = None) -> int:
        """Create an NPC with hunger, mood and temperature.

        *hunger* overrides the starting base value (100 = starving).
        """
        eid = self.world.spawn()
        hunger_var = make_hunger(self.clock, base_value=hunger)
        self.world.add(eid, Identity(title=title, description=description, kind="npc"))
        self.world.add(eid, Vitals(
            hunger=hunger_var,
            mood=make_mood(self.clock, hunger_var),
            temperature=make_temperature(self.clock),
        ))
        self.world.add(eid, Needs())
        self.world.add(eid, Inventory())
        return eid

    def spawn_item(self, item_id: str, holder: int | None = None) -> int:
        """Spawn *item_id* from the registry, optionally into *holder*'s inventory."""
        eid = self.items.spawn(self.world, self.clock, item_id)
        if holder is not None:
            inv = self.world.get(holder, Inventory)
            if inv is None:
                inv = Inventory()
                self.world.add(holder, inv)
            inv.items.append(eid)
        return eid

    def demo(self) -> int:
        """A hungry NPC carrying a lunchbox and a biscuit.  Returns the NPC."""
        npc = self.spawn_npc("Kim", "An ordinary student", hunger=80.0)
        for item_id in ("lunchbox", "biscuit"):
            if self.items.get_item(item_id) is not None:
                self.spawn_item(item_id, holder=npc)
        print(f"[SIM] Demo ready: {self._count()} entities")
        return npc

    def _count(self) -> int:
        return sum(1 for _ in self.world.all_of(Identity))

    # ── Per-frame tick ───────────────────────────────────────────────

    def tick(self, delta_ms: float, fast_forward: bool | float = False) -> int:
        """Advance the clock by *delta_ms* real milliseconds, then run systems.

        Deltas longer than ``[clock] tick_cap_ms`` are cut down so a
        stalled frame cannot jump the simulation ahead.  Returns the
        number of clock callbacks fired.
        """
        cap = _tun("clock", "tick_cap_ms", 250.0)
        fired = self.clock.advance(min(delta_ms, cap), fast_forward)
        needs_system(self.world)
        auto_eat_system(self.world, self.clock)
        self.world.purge()
        return fired

    # ── Queries ──────────────────────────────────────────────────────

    def debug_info(self) -> dict:
        return {
            "time": self.clock.now(),
            "ticks": self.clock.ticks,
            "pending_callbacks": self.clock.pending(),
            "next_due": self.clock.next_due(),
            "entities": self._count(),
            "log_entries": len(self.log.entries),
        }
