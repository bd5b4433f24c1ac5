"""components.dev_log — Structured simulation event log.

A ring-buffer resource that records what the valuation engine did and
when, in virtual time: callbacks fired by the clock, modifiers pruned
on expiry, fuel burnt out, scripts finished.  Attach one to a Clock
and everything driven by that clock records into it.

Usage:
    log = SimLog()
    clock = Clock(log=log)
    ...
    for entry in log.for_cat("fuel"):
        print(entry["t"], entry["msg"])

Each entry is a dict:
    {"t": float, "cat": str, "subject": str, "msg": str,
     "details": dict | None}
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class SimLog:
    """Ring-buffer of engine events for the inspector and tests."""

    entries: list[dict] = field(default_factory=list)
    max_entries: int = 500
    _paused: bool = False

    # If non-empty, only entries whose ``cat`` is in the set are kept.
    cat_filter: set[str] = field(default_factory=set)

    def record(self, cat: str, msg: str, *,
               subject: str = "", t: float = 0.0,
               details: dict | None = None) -> None:
        if self._paused:
            return
        if self.cat_filter and cat not in self.cat_filter:
            return
        self.entries.append({
            "t": t,
            "cat": cat,
            "subject": subject,
            "msg": msg,
            "details": details,
        })
        if len(self.entries) > self.max_entries:
            self.entries = self.entries[-self.max_entries:]

    def clear(self):
        self.entries.clear()

    def pause(self):
        self._paused = True

    def resume(self):
        self._paused = False

    def recent(self, n: int = 50) -> list[dict]:
        """Return the *n* most recent entries (newest last)."""
        return self.entries[-n:]

    def for_cat(self, cat: str, n: int = 50) -> list[dict]:
        return [e for e in self.entries if e["cat"] == cat][-n:]

    def for_subject(self, subject: str, n: int = 30) -> list[dict]:
        """Return last *n* entries about one variable or script."""
        return [e for e in self.entries if e["subject"] == subject][-n:]
