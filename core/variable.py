"""core/variable.py — Bounded numeric attributes with lazy recompute.

A Variable is ``clamp(base_value + Σ active modifiers, minimum, maximum)``.
Its value is memoised and only recomputed when the cadence of its
modifiers says it may have changed:

    cadence      recompute when…
    NEVER        the modifier set changes (add / remove / expiry)
    EACH_TICK    the clock shows a time the memo wasn't taken at
    ALWAYS       every query

so a Variable whose only modifier is a permanent constant bonus costs
O(1) per query after the first.

    clock = Clock()
    hunger = Variable(clock, "Hunger", base_value=100)
    snack = hunger.add_modifier(ConstantModifier(clock, -30, description="Snack"))
    hunger.get_value()          # 70.0
    hunger.remove_modifier(snack)
    hunger.get_value()          # 100.0

Expired modifiers are pruned in the same pass that sums the live ones.
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING, Iterator

from core.containers import LinkedList
from core.modifiers import Cadence, Modifier, describe

if TYPE_CHECKING:
    from core.clock import Clock


class BaseVariable:
    """Query surface shared by Variable and FurnaceVariable.

    ``minimum < maximum`` is checked here; either bound may be infinite.
    """

    def __init__(self, clock: Clock, title: str = "", base_value: float = 0.0,
                 minimum: float = 0.0, maximum: float = 100.0,
                 unit: str = "%", description: str | None = None):
        if not minimum < maximum:
            raise ValueError(
                f"{title or type(self).__name__}: minimum ({minimum}) "
                f"must be less than maximum ({maximum})")
        self.clock = clock
        self.title = title
        self.description = description
        self.minimum = minimum
        self.maximum = maximum
        self.unit = unit
        self._base_value = base_value

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.title or '?'}>"

    def __str__(self) -> str:
        return self.formatted()

    @property
    def base_value(self) -> float:
        return self._base_value

    @base_value.setter
    def base_value(self, value: float) -> None:
        self._base_value = value
        self._invalidate()

    def get_value(self) -> float:
        raise NotImplementedError

    def modifiers(self) -> Iterator[Modifier]:
        """Yield the currently active modifiers.  Read-only view."""
        raise NotImplementedError

    def contribution(self, modifier: Modifier) -> float:
        """What *modifier* currently adds to this variable."""
        return modifier.value()

    def dependencies(self) -> Iterator[BaseVariable]:
        """Variables whose values feed into this one."""
        return iter(())

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))

    # ── Presentation helpers ─────────────────────────────────────────

    def format_value(self, value: float) -> str:
        return f"{value:.0f}{self.unit}"

    def formatted(self) -> str:
        return self.format_value(self.get_value())

    def ratio(self) -> float | None:
        """Position of the value within ``[minimum, maximum]`` as 0–1.

        None when a bound is infinite.
        """
        if not (math.isfinite(self.minimum) and math.isfinite(self.maximum)):
            return None
        return (self.get_value() - self.minimum) / (self.maximum - self.minimum)

    def _invalidate(self) -> None:
        pass

    def _record(self, cat: str, msg: str, details: dict | None = None) -> None:
        self.clock._record(cat, msg, subject=self.title, details=details)


class Variable(BaseVariable):
    """Base value plus modifiers, memoised per cadence."""

    def __init__(self, clock: Clock, title: str = "", base_value: float = 0.0,
                 minimum: float = 0.0, maximum: float = 100.0,
                 unit: str = "%", description: str | None = None):
        super().__init__(clock, title, base_value, minimum, maximum, unit, description)
        self._modifiers: LinkedList[Modifier] = LinkedList()
        # modifiers per cadence; the highest non-zero one rules
        self._cadence_counts: list[int] = [0] * len(Cadence)
        self._cached: float | None = None
        self._cached_at: float | None = None
        self.recomputes: int = 0

    @property
    def cadence(self) -> Cadence:
        for cadence in sorted(Cadence, reverse=True):
            if self._cadence_counts[cadence]:
                return cadence
        return Cadence.NEVER

    # ── Mutation ─────────────────────────────────────────────────────

    def add_modifier(self, modifier: Modifier) -> Modifier:
        """Attach *modifier* and return it.

        A modifier that is already removable (zero or negative lifetime)
        is not attached at all.
        """
        if modifier.owner is not None:
            raise ValueError(f"{modifier!r} already belongs to {modifier.owner!r}")
        self._check_cycle(modifier)
        if modifier.can_be_removed():
            self._record("modifier", f"ignored expired {describe(modifier)}")
            return modifier

        modifier.owner = self
        self._modifiers.append(modifier)
        self._cadence_counts[modifier.cadence] += 1
        self._cached = None
        return modifier

    def remove_modifier(self, modifier: Modifier) -> None:
        if modifier.owner is not self or not self._modifiers.remove(modifier):
            raise ValueError(f"{modifier!r} is not a modifier of {self!r}")
        self._detach(modifier)
        self._cached = None

    def clear_modifiers(self) -> None:
        for modifier in self._modifiers:
            modifier.owner = None
        self._modifiers.clear()
        self._cadence_counts = [0] * len(Cadence)
        self._cached = None

    def _detach(self, modifier: Modifier) -> None:
        modifier.owner = None
        self._cadence_counts[modifier.cadence] -= 1

    def _invalidate(self) -> None:
        self._cached = None

    # ── Query ────────────────────────────────────────────────────────

    def get_value(self) -> float:
        now = self.clock.now()
        cadence = self.cadence
        if (self._cached is None
                or cadence is Cadence.ALWAYS
                or (cadence is Cadence.EACH_TICK and self._cached_at != now)):
            self._cached = self._recompute()
            self._cached_at = now
        return self._cached

    def _recompute(self) -> float:
        def still_active(modifier: Modifier) -> bool:
            if modifier.can_be_removed():
                # detach before any later value() can raise
                self._detach(modifier)
                self._cached = None
                self._record("modifier", f"{describe(modifier)} expired")
                return False
            return True

        total = self._base_value
        for modifier in self._modifiers.keep_while(still_active):
            total += modifier.value()

        self.recomputes += 1
        return self.clamp(total)

    def modifiers(self) -> Iterator[Modifier]:
        for modifier in tuple(self._modifiers):
            if not modifier.can_be_removed():
                yield modifier

    def dependencies(self) -> Iterator[BaseVariable]:
        for modifier in self._modifiers:
            yield from modifier.sources()

    def _check_cycle(self, modifier: Modifier) -> None:
        """Refuse a modifier whose sources already depend on this variable."""
        stack = list(modifier.sources())
        seen: set[int] = set()
        while stack:
            var = stack.pop()
            if var is self:
                raise ValueError(
                    f"{describe(modifier)} would make {self!r} depend on itself")
            if id(var) in seen:
                continue
            seen.add(id(var))
            stack.extend(var.dependencies())
