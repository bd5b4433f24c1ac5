"""components.vitals — The variables that make up a living thing.

``Vitals`` is the component; the ``make_*`` factories build each
variable with its defaults from ``[vitals.*]`` in tuning.toml.

    hunger = make_hunger(clock)          # FurnaceVariable, food pulls it down
    mood = make_mood(clock, hunger)      # Variable, follows hunger
    temp = make_temperature(clock)       # Variable, -273…1000 °C
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.furnace import FurnaceVariable
from core.modifiers import MonitoringModifier
from core.tuning import get as _tun, section as _section
from core.variable import BaseVariable, Variable

if TYPE_CHECKING:
    from core.clock import Clock


@dataclass
class Vitals:
    """Per-NPC variables.  Items only carry a ``temperature``."""
    hunger: FurnaceVariable | None = None
    mood: Variable | None = None
    temperature: Variable | None = None

    def all(self) -> list[BaseVariable]:
        return [v for v in (self.mood, self.hunger, self.temperature) if v is not None]


_DEFAULTS: dict[str, dict] = {
    "hunger": {"title": "Hunger", "description": "How badly the person needs to eat",
               "base_value": 100.0, "minimum": 0.0, "maximum": 100.0, "unit": "%"},
    "mood": {"title": "Mood", "description": "How happy the person is",
             "base_value": 100.0, "minimum": 0.0, "maximum": 100.0, "unit": "%"},
    "temperature": {"title": "Temperature", "description": "How warm something or someone is",
                    "base_value": 20.0, "minimum": -273.0, "maximum": 1000.0, "unit": " °C"},
}


def _settings(name: str, overrides: dict) -> dict:
    tuned = _section(f"vitals.{name}")
    settings = {key: tuned.get(key, default) for key, default in _DEFAULTS[name].items()}
    settings.update({k: v for k, v in overrides.items() if v is not None})
    return settings


def make_hunger(clock: Clock, **overrides) -> FurnaceVariable:
    """Hunger: 100 = starving, 0 = full.  Food is fuel burnt in order."""
    return FurnaceVariable(clock, polarity=-1, **_settings("hunger", overrides))


def make_mood(clock: Clock, hunger: BaseVariable | None = None, **overrides) -> Variable:
    mood = Variable(clock, **_settings("mood", overrides))
    if hunger is not None:
        labels = _tun("vitals.mood", "hunger_labels",
                      ["Full", "Fairly full", "Peckish", "Hungry"])
        mood.add_modifier(MonitoringModifier.linear_map_onto(
            hunger,
            _tun("vitals.mood", "hunger_at_min", 20.0),
            _tun("vitals.mood", "hunger_at_max", -20.0),
            *labels,
        ))
    return mood


def make_temperature(clock: Clock, **overrides) -> Variable:
    return Variable(clock, **_settings("temperature", overrides))
