"""components.items — What an item can be used for.

Built from ``data/items.toml`` by ``ItemRegistry.spawn()``.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Usable:
    """Something an NPC can use a limited number of times.

    ``uses``            — uses left; the item is removed at zero.
    ``minutes_per_use`` — game-minutes one use keeps the NPC busy.
    ``action``          — busy text, e.g. "Eating lunchbox".
    ``in_use``          — set while an NPC is using it.
    """
    uses: int = 1
    minutes_per_use: float = 1.0
    action: str | None = None
    in_use: bool = False

    def __post_init__(self):
        if self.uses <= 0:
            raise ValueError(f"uses must be positive, got {self.uses}")
        if self.minutes_per_use < 0:
            raise ValueError(
                f"minutes_per_use must be non-negative, got {self.minutes_per_use}")


@dataclass
class Edible:
    """Eating one use feeds ``hunger_points`` at ``burn_rate`` points/minute."""
    hunger_points: float = 20.0
    burn_rate: float = 1.0 / 3.0

    def __post_init__(self):
        if self.hunger_points <= 0:
            raise ValueError(f"hunger_points must be positive, got {self.hunger_points}")
        if self.burn_rate <= 0:
            raise ValueError(f"burn_rate must be positive, got {self.burn_rate}")

    @property
    def minutes_to_digest(self) -> float:
        return self.hunger_points / self.burn_rate
