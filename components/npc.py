"""components.npc — Who an entity is and what it is doing."""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class Identity:
    title: str = "unnamed"
    description: str = ""
    kind: str = "npc"          # "npc", "item"


@dataclass
class Needs:
    """Motivation derived from vitals.

    ``priority`` is 'none' or 'eat'.  ``urgency`` is 0.0–1.0, higher =
    more desperate.  Written by ``needs_system``.
    """
    priority: str = "none"
    urgency: float = 0.0


@dataclass
class Busy:
    """The entity is occupied until ``ends_at`` (game-minutes).

    ``ends_at`` is None for open-ended actions, which have no progress.
    """
    action: str | None = None
    started_at: float = 0.0
    ends_at: float | None = None

    @property
    def duration(self) -> float | None:
        if self.ends_at is None:
            return None
        return self.ends_at - self.started_at

    def progress(self, now: float) -> float | None:
        """Fraction done, 0–1, or None without an end time."""
        duration = self.duration
        if duration is None:
            return None
        if duration <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - self.started_at) / duration))


@dataclass
class Inventory:
    """Item entities an NPC carries."""
    items: list[int] = field(default_factory=list)
