"""core/furnace.py — Variables whose modifiers are fuel burnt in order.

A plain Variable with several timed modifiers lets all of them run down
at once.  A FurnaceVariable instead keeps its fuel in a priority queue
and burns only the front one; the others wait their turn.  Three meals
eaten in a row are digested one after another, the fastest-burning
first, instead of all going stale together.

    hunger = FurnaceVariable(clock, "Hunger", base_value=100, polarity=-1)
    hunger.add_fuel(20, duration=60, description="Lunchbox")
    hunger.add_fuel(5, duration=5, description="Biscuit")   # burns first

Consumption is resolved lazily: each query first burns the time that
passed since the previous one, popping exhausted fuel and carrying the
leftover time into the next.  The unconsumed total is never negative
and never grows as time passes.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterator

from core.containers import Heap
from core.modifiers import ProgressModifier, describe
from core.variable import BaseVariable

if TYPE_CHECKING:
    from core.clock import Clock


class Fuel(ProgressModifier):
    """*quantity* burnt linearly over *duration* minutes of progress."""

    def __init__(self, quantity: float, duration: float,
                 description: str | None = None):
        if quantity <= 0:
            raise ValueError(f"fuel quantity must be positive, got {quantity}")
        if duration <= 0:
            raise ValueError(f"fuel duration must be positive, got {duration}")
        super().__init__(self._left_at, duration, description)
        self.quantity = quantity
        self.burn_rate = quantity / duration

    def _left_at(self, progress: float) -> float:
        return self.quantity * (1.0 - progress / self.duration)


class FurnaceVariable(BaseVariable):
    """``clamp(base_value + polarity · Σ unburnt fuel, minimum, maximum)``.

    ``polarity=-1`` makes fuel pull the value down (eating lowers
    hunger) while quantities stay positive.
    """

    def __init__(self, clock: Clock, title: str = "", base_value: float = 0.0,
                 minimum: float = 0.0, maximum: float = 100.0,
                 unit: str = "%", description: str | None = None,
                 polarity: int = 1):
        super().__init__(clock, title, base_value, minimum, maximum, unit, description)
        if polarity not in (1, -1):
            raise ValueError(f"polarity must be 1 or -1, got {polarity}")
        self.polarity = polarity
        self._fuel: Heap[Fuel] = Heap()
        self._burnt_until = clock.now()

    # ── Mutation ─────────────────────────────────────────────────────

    def add_fuel(self, quantity: float, duration: float,
                 weight: float | None = None,
                 description: str | None = None) -> Fuel:
        """Queue a new fuel and return it.

        Lowest *weight* burns first.  The default is the negated burn
        rate, so faster-burning fuel goes first.
        """
        fuel = Fuel(quantity, duration, description)
        # time already passed must not be charged to the new fuel
        self._burn()
        fuel.owner = self
        self._fuel.push(fuel, -fuel.burn_rate if weight is None else weight)
        return fuel

    def remove_modifier(self, fuel: Fuel) -> None:
        self._burn()
        if fuel.owner is not self or not self._fuel.remove(fuel):
            raise ValueError(f"{fuel!r} is not queued in {self!r}")
        fuel.owner = None

    def clear_modifiers(self) -> None:
        for fuel in self._fuel:
            fuel.owner = None
        self._fuel.clear()
        self._burnt_until = self.clock.now()

    # ── Query ────────────────────────────────────────────────────────

    def get_value(self) -> float:
        self._burn()
        return self.clamp(self._base_value + self.polarity * self.unburnt())

    def unburnt(self) -> float:
        """Total fuel quantity not yet consumed (as of the last burn)."""
        return sum(fuel.value() for fuel in self._fuel)

    def contribution(self, fuel: Fuel) -> float:
        return self.polarity * fuel.value()

    def modifiers(self) -> Iterator[Fuel]:
        """Yield queued fuel, the one burning now first."""
        self._burn()
        yield from tuple(self._fuel)

    def burning(self) -> Fuel | None:
        self._burn()
        return self._fuel.peek() if self._fuel else None

    def _burn(self) -> None:
        now = self.clock.now()
        time_left = now - self._burnt_until
        self._burnt_until = now
        while time_left > 0 and self._fuel:
            front = self._fuel.peek()
            left = front.remaining
            if time_left < left:
                front.advance(time_left)
                return
            front.advance(left)
            self._fuel.pop()
            front.owner = None
            time_left -= left
            self._record("fuel", f"{describe(front)} burnt out",
                         details={"quantity": front.quantity})
