"""core/modifiers.py — Value contributors for Variables.

A modifier adds ``value()`` to its owner's base value until
``can_be_removed()`` turns True, at which point the owner prunes it on
its next recompute.  Expiry is never an error.

Four shapes:

    ConstantModifier(clock, -30)                     flat, forever
    ConstantModifier(clock, +5, duration=60)         flat, for an hour
    DecayingModifier.exponential(clock, 100, 10)     f(time since creation)
    ProgressModifier(curve, duration)                f(progress the owner drives)
    MonitoringModifier.sum_of(hunger, cold)          f(other variables, live)

``cadence`` tells the owner how often the modifier's value can change,
which bounds how often the owner must recompute:

    Cadence.NEVER      only when the modifier set changes
    Cadence.EACH_TICK  once per distinct clock time
    Cadence.ALWAYS     on every query

A modifier belongs to exactly one variable (``owner``); it is never
shared.
"""

from __future__ import annotations
import math
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Callable, Sequence

from core.clock import NEVER
from core.tuning import get as _tun

if TYPE_CHECKING:
    from core.clock import Clock
    from core.variable import BaseVariable


class Cadence(IntEnum):
    """How often a value may change.  Combined with ``max()``."""
    NEVER = 0
    EACH_TICK = 1
    ALWAYS = 2


class Modifier:
    """Base class.  Subclasses override ``value()`` and usually ``can_be_removed()``."""

    cadence: Cadence = Cadence.ALWAYS

    def __init__(self, description: str | None = None):
        self._description = description
        self.owner: BaseVariable | None = None

    @property
    def description(self) -> str | None:
        """UI text only.  Has no effect on any computation."""
        return self._description

    def value(self) -> float:
        raise NotImplementedError

    def can_be_removed(self) -> bool:
        return False

    def sources(self) -> tuple[BaseVariable, ...]:
        """Variables this modifier reads.  Empty unless it monitors some."""
        return ()

    def __repr__(self) -> str:
        label = f" {self._description!r}" if self._description else ""
        return f"<{type(self).__name__}{label}>"


# ═══════════════════════════════════════════════════════════════════
#  Time-based
# ═══════════════════════════════════════════════════════════════════

class ConstantModifier(Modifier):
    """A flat bonus or malus, optionally expiring *duration* minutes after creation."""

    def __init__(self, clock: Clock, amount: float,
                 duration: float | None = None,
                 description: str | None = None):
        super().__init__(description)
        self.clock = clock
        self.amount = amount
        self.duration = duration
        self.created_at = clock.now()
        # an expiring one has to be looked at again as time passes
        self.cadence = Cadence.NEVER if duration is None else Cadence.EACH_TICK

    @property
    def expires_at(self) -> float:
        if self.duration is None:
            return NEVER
        return self.created_at + self.duration

    def value(self) -> float:
        return self.amount

    def can_be_removed(self) -> bool:
        if self.duration is None:
            return False
        return self.clock.now() - self.created_at >= self.duration


class DecayingModifier(Modifier):
    """Contributes ``curve(minutes since creation)`` over ``[0, duration]``.

    Outside that window the contribution is zero; once *duration* has
    passed the modifier is removable.  Use the factories for the usual
    curves.
    """

    cadence = Cadence.EACH_TICK

    def __init__(self, clock: Clock, curve: Callable[[float], float],
                 duration: float, description: str | None = None):
        super().__init__(description)
        self.clock = clock
        self.curve = curve
        self.duration = duration
        self.created_at = clock.now()

    def elapsed(self) -> float:
        return self.clock.now() - self.created_at

    def value(self) -> float:
        t = self.elapsed()
        if 0.0 <= t <= self.duration:
            return self.curve(t)
        return 0.0

    def can_be_removed(self) -> bool:
        return self.elapsed() >= self.duration

    @classmethod
    def exponential(cls, clock: Clock, initial_value: float, half_life: float,
                    insignificant: float | None = None,
                    description: str | None = None) -> DecayingModifier:
        """``initial_value · 2^(−t / half_life)``, dropped once it is insignificant.

        *insignificant* is the magnitude below which the modifier no
        longer matters.  It defaults to ``[modifiers] insignificant_ratio``
        (0.5) of the initial value and must have the same sign, since
        a decay toward zero never crosses a threshold on the other side.
        """
        if half_life <= 0:
            raise ValueError(f"half_life must be positive, got {half_life}")
        if initial_value == 0:
            raise ValueError("initial_value must be non-zero for a decay")
        if insignificant is None:
            insignificant = initial_value * _tun("modifiers", "insignificant_ratio", 0.5)
        if insignificant == 0 or (insignificant > 0) != (initial_value > 0):
            raise ValueError(
                f"insignificance threshold {insignificant} and initial value "
                f"{initial_value} must have the same sign")

        duration = half_life * math.log2(initial_value / insignificant)

        def curve(t: float) -> float:
            return initial_value * 2.0 ** (-t / half_life)

        return cls(clock, curve, duration, description)

    @classmethod
    def linear_ramp(cls, clock: Clock, start_amount: float, duration: float,
                    description: str | None = None) -> DecayingModifier:
        """Adds *start_amount* now, falling linearly to zero over *duration*."""
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")

        def curve(t: float) -> float:
            return start_amount * (1.0 - t / duration)

        return cls(clock, curve, duration, description)


# ═══════════════════════════════════════════════════════════════════
#  Externally driven
# ═══════════════════════════════════════════════════════════════════

class ProgressModifier(Modifier):
    """Like DecayingModifier, but the owner moves ``progress`` explicitly.

    Progress only ever moves forward.
    """

    cadence = Cadence.ALWAYS

    def __init__(self, curve: Callable[[float], float], duration: float,
                 description: str | None = None):
        super().__init__(description)
        self.curve = curve
        self.duration = duration
        self._progress = 0.0

    @property
    def progress(self) -> float:
        return self._progress

    @progress.setter
    def progress(self, value: float) -> None:
        if value < self._progress:
            raise ValueError(
                f"progress cannot move backward ({self._progress} → {value})")
        self._progress = value

    @property
    def remaining(self) -> float:
        """Progress left before the modifier is removable."""
        return max(0.0, self.duration - self._progress)

    def advance(self, amount: float) -> None:
        if amount < 0:
            raise ValueError(f"cannot advance progress by {amount}")
        self._progress += amount

    def value(self) -> float:
        p = self._progress
        if 0.0 <= p <= self.duration:
            return self.curve(p)
        return 0.0

    def can_be_removed(self) -> bool:
        return self._progress >= self.duration


# ═══════════════════════════════════════════════════════════════════
#  Monitoring
# ═══════════════════════════════════════════════════════════════════

class MonitoringModifier(Modifier):
    """``combiner(v.get_value() for v in sources)``, recomputed on every query.

    Never expires; only explicit removal takes it off.  The sources are
    strong references, so they stay alive for as long as this modifier
    does.  The owner rejects it if that would make a dependency cycle.
    """

    cadence = Cadence.ALWAYS

    def __init__(self, combiner: Callable[..., float],
                 sources: Sequence[BaseVariable],
                 description: str | None = None,
                 labeller: Callable[[], str | None] | None = None):
        if not sources:
            raise ValueError("a monitoring modifier needs at least one source variable")
        super().__init__(description)
        self.combiner = combiner
        self._sources = tuple(sources)
        self._labeller = labeller

    @property
    def description(self) -> str | None:
        if self._labeller is not None:
            return self._labeller()
        return self._description

    def sources(self) -> tuple[BaseVariable, ...]:
        return self._sources

    def value(self) -> float:
        return self.combiner(*(v.get_value() for v in self._sources))

    # ── Combinators ──────────────────────────────────────────────────

    @classmethod
    def sum_of(cls, *sources: BaseVariable, description: str | None = None) -> MonitoringModifier:
        return cls(lambda *values: sum(values), sources, description)

    @classmethod
    def min_of(cls, *sources: BaseVariable, description: str | None = None) -> MonitoringModifier:
        return cls(min, sources, description)

    @classmethod
    def max_of(cls, *sources: BaseVariable, description: str | None = None) -> MonitoringModifier:
        return cls(max, sources, description)

    @classmethod
    def linear_map_onto(cls, source: BaseVariable, at_min: float, at_max: float,
                        *labels: str, description: str | None = None) -> MonitoringModifier:
        """Remap *source*'s ``[minimum, maximum]`` linearly onto ``[at_min, at_max]``.

        With *labels*, the description follows the source: the source's
        range is cut into ``len(labels)`` equal bands, the first label
        naming the band at ``minimum``.
        """
        lo, hi = source.minimum, source.maximum
        if not (math.isfinite(lo) and math.isfinite(hi)):
            raise ValueError(
                f"cannot remap {source!r}: bounds [{lo}, {hi}] are not both finite")
        span = hi - lo

        def remap(v: float) -> float:
            return at_min + (v - lo) / span * (at_max - at_min)

        labeller = None
        if labels:
            def labeller() -> str:
                band = int((source.get_value() - lo) / span * len(labels))
                return labels[max(0, min(band, len(labels) - 1))]

        return cls(remap, (source,), description, labeller)


def describe(modifier: Any) -> str:
    """Short debug label: description or class name."""
    return getattr(modifier, "description", None) or type(modifier).__name__
