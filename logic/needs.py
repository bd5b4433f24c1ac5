"""logic/needs.py — Eating, being busy, and deciding what to do next.

Behaviour here is written as clock scripts (generators that yield
waits), started with ``clock.start(...)``::

    clock.start(use_item(world, clock, npc, lunchbox))

Eating does not touch hunger directly: it queues fuel on the NPC's
hunger FurnaceVariable, which is then digested in priority order as
game time passes.

Priority thresholds (fraction of hunger's range, 1.0 = starving):
    <  peckish_ratio   → 'none'
    >= peckish_ratio   → 'eat'  urgency 0.3
    >= hungry_ratio    → 'eat'  urgency 0.7
    >= starving_ratio  → 'eat'  urgency 1.0
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Generator

from components import Busy, Edible, Identity, Inventory, Needs, Usable, Vitals
from core.modifiers import DecayingModifier
from core.tuning import get as _tun

if TYPE_CHECKING:
    from core.clock import Clock
    from core.ecs import World

ATE_FOOD = "Ate food"
WARMED_UP = "Warmed up"


def _name(world: World, eid: int) -> str:
    ident = world.get(eid, Identity)
    return ident.title if ident else f"#{eid}"


# ── Busy ─────────────────────────────────────────────────────────────

def set_busy_for(world: World, clock: Clock, eid: int, minutes: float,
                 action: str | None = None) -> Generator:
    """Script: flag *eid* as busy for *minutes*, then clear the flag."""
    busy = world.get(eid, Busy)
    if busy is not None:
        raise RuntimeError(f"{_name(world, eid)} is already busy: {busy.action}")
    if minutes <= 0:
        return eid
    world.add(eid, Busy(action=action, started_at=clock.now(),
                        ends_at=clock.after(minutes)))
    yield clock.wait_for(minutes)
    world.remove(eid, Busy)
    return eid


# ── Using items ──────────────────────────────────────────────────────

def can_use(world: World, npc: int, item: int) -> bool:
    usable = world.get(item, Usable)
    return (usable is not None
            and world.alive(item)
            and not usable.in_use
            and usable.uses > 0
            and not world.has(npc, Busy))


def use_item(world: World, clock: Clock, npc: int, item: int) -> Generator:
    """Script: *npc* spends one use of *item*.  Returns the uses left.

    The NPC is busy for ``minutes_per_use``; the effect applies when
    that is over.  An item with no uses left is removed from the world
    and from the NPC's inventory.
    """
    if not can_use(world, npc, item):
        raise RuntimeError(f"{_name(world, item)} cannot be used by {_name(world, npc)}")

    usable = world.get(item, Usable)
    if usable.minutes_per_use > 0:
        usable.in_use = True
        yield clock.start(
            set_busy_for(world, clock, npc, usable.minutes_per_use, usable.action),
            name=f"busy:{_name(world, npc)}")
        usable.in_use = False

    usable.uses -= 1
    _on_used(world, npc, item)
    if usable.uses <= 0:
        print(f"[NEEDS] {_name(world, npc)} used up {_name(world, item)}")
        world.kill(item)
        inv = world.get(npc, Inventory)
        if inv is not None and item in inv.items:
            inv.items.remove(item)
    return usable.uses


def _on_used(world: World, npc: int, item: int) -> None:
    edible = world.get(item, Edible)
    vitals = world.get(npc, Vitals)
    if edible is None or vitals is None or vitals.hunger is None:
        return
    vitals.hunger.add_fuel(edible.hunger_points, edible.minutes_to_digest,
                           description=ATE_FOOD)
    print(f"[NEEDS] {_name(world, npc)} ate {_name(world, item)} "
          f"(-{edible.hunger_points:.0f} hunger over {edible.minutes_to_digest:.0f} min)")


def best_food(world: World, npc: int) -> int | None:
    """The carried edible with the most hunger points that can be used now."""
    inv = world.get(npc, Inventory)
    if inv is None:
        return None
    best_id = None
    best_points = 0.0
    for item in inv.items:
        edible = world.get(item, Edible)
        if edible is None or not can_use(world, npc, item):
            continue
        if edible.hunger_points > best_points:
            best_points = edible.hunger_points
            best_id = item
    return best_id


# ── Systems ──────────────────────────────────────────────────────────

def needs_system(world: World) -> None:
    """Set ``Needs.priority`` / ``urgency`` from each NPC's hunger."""
    peckish = _tun("needs", "peckish_ratio", 0.5)
    hungry = _tun("needs", "hungry_ratio", 0.75)
    starving = _tun("needs", "starving_ratio", 1.0)

    for _eid, vitals, needs in world.query(Vitals, Needs):
        if vitals.hunger is None:
            continue
        ratio = vitals.hunger.ratio()
        if ratio is None or ratio < peckish:
            needs.priority = "none"
            needs.urgency = 0.0
        elif ratio < hungry:
            needs.priority = "eat"
            needs.urgency = 0.3
        elif ratio < starving:
            needs.priority = "eat"
            needs.urgency = 0.7
        else:
            needs.priority = "eat"
            needs.urgency = 1.0


def auto_eat_system(world: World, clock: Clock) -> int:
    """Start eating for every idle NPC whose needs say 'eat'.  Returns how many started."""
    started = 0
    for npc, needs in world.all_of(Needs):
        if needs.priority != "eat" or world.has(npc, Busy):
            continue
        food = best_food(world, npc)
        if food is None:
            continue
        clock.start(use_item(world, clock, npc, food), name=f"eat:{_name(world, npc)}")
        started += 1
    return started


# ── Heat ─────────────────────────────────────────────────────────────

def warm_up(world: World, clock: Clock, eid: int, degrees: float,
            half_life: float | None = None) -> None:
    """Add *degrees* to an entity's temperature, fading with a half-life.

    Heat smaller than ``[heat] insignificant_degrees`` is dropped.
    """
    vitals = world.get(eid, Vitals)
    if vitals is None or vitals.temperature is None:
        raise ValueError(f"{_name(world, eid)} has no temperature")
    if half_life is None:
        half_life = _tun("heat", "half_life", 15.0)
    cutoff = abs(_tun("heat", "insignificant_degrees", 1.0))
    vitals.temperature.add_modifier(DecayingModifier.exponential(
        clock, degrees, half_life,
        insignificant=cutoff if degrees > 0 else -cutoff,
        description=WARMED_UP,
    ))
