"""logic/inspector.py — Text summaries of entities for the UI and the log.

    inspect(world, clock, npc)
    # ["Kim", "Eating lunchbox (40%)", "Mood: 100%", "  Peckish (+0%)",
    #  "Hunger: 40%", "  Ate food (-20%)", ...]
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components import Busy, Identity, Vitals

if TYPE_CHECKING:
    from core.clock import Clock
    from core.ecs import World
    from core.variable import BaseVariable


def summarize_modifiers(variable: BaseVariable) -> list[str]:
    """One line per modifier description, like "Ate food x3 (-15%)".

    Modifiers sharing a description are folded together and their
    contributions summed.  Modifiers without a description are left out.
    """
    summary: dict[str, list] = {}
    for modifier in variable.modifiers():
        description = modifier.description
        if description is None:
            continue
        entry = summary.setdefault(description, [0, 0.0])
        entry[0] += 1
        entry[1] += variable.contribution(modifier)

    lines = []
    for description, (count, total) in summary.items():
        times = f"x{count} " if count > 1 else ""
        sign = "+" if total > 0 else ""
        lines.append(f"{description} {times}({sign}{variable.format_value(total)})")
    return lines


def busy_text(world: World, clock: Clock, eid: int) -> str:
    """What the entity is doing, with progress when it has an end time."""
    busy = world.get(eid, Busy)
    if busy is None:
        return ""
    text = busy.action or "Busy"
    progress = busy.progress(clock.now())
    if progress is not None:
        text = f"{text} ({progress * 100:.0f}%)"
    return text


def inspect(world: World, clock: Clock, eid: int) -> list[str]:
    """Title, current action, then every variable with its modifiers."""
    ident = world.get(eid, Identity)
    lines = [ident.title if ident else f"#{eid}"]
    if ident and ident.description:
        lines.append(ident.description)

    action = busy_text(world, clock, eid)
    if action:
        lines.append(action)

    vitals = world.get(eid, Vitals)
    if vitals is not None:
        for variable in vitals.all():
            lines.append(f"{variable.title}: {variable.formatted()}")
            lines.extend(f"  {line}" for line in summarize_modifiers(variable))
    return lines
