"""core/clock.py — Virtual clock with callback scheduling.

The clock is the single source of simulated time.  It only moves when
the game loop calls ``advance()`` once per tick with the real
milliseconds that passed; those are converted to game-minutes.

    clock = Clock()                       # 2000 real ms per game-minute
    clock.schedule(ring_bell, clock.after(5))
    clock.advance(10_000)                 # 5 game-minutes → ring_bell()

Behaviour logic that needs to "pause" is written as a generator and
started on the clock.  It yields waits; the clock resumes it when the
wait is over::

    def make_tea(clock):
        yield clock.wait_for(3)           # boil water
        yield clock.wait_for(4)           # steep
        return "tea"

    script = clock.start(make_tea(clock))
    ...
    script.done, script.result

Contract:
  - ``schedule()`` with a time at or before ``now()`` runs the callback
    synchronously, right away.
  - ``advance()`` fires every callback due at or before the new
    ``now()``, in non-decreasing time order, before it returns.
    Callbacks scheduled while it runs are fired too if they are due.
  - ``advance()`` is not reentrant: a callback must never call it.
  - There is no cancellation.  A callback that may have become
    irrelevant checks for that itself when it runs.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Callable, Generator

from core.containers import Heap
from core.tuning import get as _tun

if TYPE_CHECKING:
    from components.dev_log import SimLog

#: Sentinel time that is never reached.  Compares greater than any real time.
NEVER = float("inf")

_DEFAULT_REAL_MS_PER_MINUTE = 2000.0


class Wait:
    """A request, yielded by a script, to resume at ``time``."""

    __slots__ = ("time",)

    def __init__(self, time: float):
        self.time = time

    def __repr__(self) -> str:
        return f"Wait(until={self.time:.2f})"


class Script:
    """Handle for a generator started with ``Clock.start()``.

    ``done`` turns True when the generator returns (``result`` holds the
    return value) or raises (``error`` holds the exception, which is
    also re-raised to whoever resumed the script).  Scripts waiting on
    a failed script get its exception raised at their ``yield``.
    """

    def __init__(self, clock: Clock, gen: Generator, name: str = ""):
        self.clock = clock
        self.name = name or getattr(gen, "__name__", "script")
        self.done = False
        self.result: Any = None
        self.error: BaseException | None = None
        self.resume_at: float | None = None
        self._gen = gen
        self._on_done: list[Script] = []

    def __repr__(self) -> str:
        state = "done" if self.done else f"waiting until {self.resume_at}"
        return f"<Script {self.name} {state}>"

    def _resume(self, value: Any = None) -> None:
        self._step(self._gen.send, value)

    def _throw(self, exc: BaseException) -> None:
        """Raise *exc* inside the generator, at the yield it is parked on."""
        self._step(self._gen.throw, exc)

    def _step(self, step: Callable[[Any], Any], arg: Any) -> None:
        while True:
            try:
                request = step(arg)
            except StopIteration as stop:
                self._finish(stop.value)
                return
            except Exception as exc:
                self._fail(exc)
                raise

            step, arg = self._gen.send, None
            if isinstance(request, Wait):
                if request.time <= self.clock.now():
                    continue
                self.resume_at = request.time
                self.clock.schedule(self._resume, request.time)
                return
            if isinstance(request, Script):
                if request.done:
                    if request.error is not None:
                        step, arg = self._gen.throw, request.error
                    else:
                        arg = request.result
                    continue
                self.resume_at = None
                request._on_done.append(self)
                return

            exc = TypeError(
                f"script {self.name} yielded {request!r}; "
                f"expected a Wait or a Script")
            self._gen.close()
            self._fail(exc)
            raise exc

    def _finish(self, result: Any) -> None:
        self.done = True
        self.result = result
        self.resume_at = None
        self.clock._record("script", f"{self.name} finished", subject=self.name)
        errors = self._wake(lambda waiter: waiter._resume(result))
        if errors:
            raise errors[0]

    def _fail(self, exc: BaseException) -> None:
        self.done = True
        self.error = exc
        self.resume_at = None
        self.clock._record("script", f"{self.name} failed: {exc}",
                           subject=self.name,
                           details={"error": type(exc).__name__})
        # A waiter that does not handle the error fails with it and
        # keeps it in its own ``error``; the caller re-raises *exc*.
        self._wake(lambda waiter: waiter._throw(exc))

    def _wake(self, call: Callable[[Script], None]) -> list[Exception]:
        """Run *call* on every waiting script, even if an earlier one raises."""
        waiters, self._on_done = self._on_done, []
        errors: list[Exception] = []
        for waiter in waiters:
            try:
                call(waiter)
            except Exception as exc:
                errors.append(exc)
        return errors


class Clock:
    """Monotonic game time in minutes, driven by real-time deltas.

    ``real_ms_per_minute`` — real milliseconds per game-minute.
    ``fast_forward_factor`` — multiplier applied by ``advance(..., fast_forward=True)``.
    ``log`` — optional SimLog that the clock and everything it drives
    record into.
    """

    def __init__(self, real_ms_per_minute: float | None = None,
                 fast_forward_factor: float | None = None,
                 log: SimLog | None = None):
        if real_ms_per_minute is None:
            real_ms_per_minute = _tun("clock", "real_ms_per_game_minute",
                                      _DEFAULT_REAL_MS_PER_MINUTE)
        if fast_forward_factor is None:
            fast_forward_factor = _tun("clock", "fast_forward_factor", 4.0)
        if real_ms_per_minute <= 0:
            raise ValueError(
                f"real_ms_per_minute must be positive, got {real_ms_per_minute}")
        if fast_forward_factor <= 0:
            raise ValueError(
                f"fast_forward_factor must be positive, got {fast_forward_factor}")

        self.real_ms_per_minute = float(real_ms_per_minute)
        self.fast_forward_factor = float(fast_forward_factor)
        self.log = log
        self.elapsed_real_ms: float = 0.0
        self.elapsed_minutes: float = 0.0
        self.ticks: int = 0
        self.callbacks: Heap[Callable[[], Any]] = Heap()
        self._advancing = False

    def __repr__(self) -> str:
        return (f"<Clock t={self.elapsed_minutes:.2f}min "
                f"pending={len(self.callbacks)}>")

    # ── Queries ──────────────────────────────────────────────────────

    def now(self) -> float:
        """Game-minutes since the clock was created."""
        return self.elapsed_minutes

    def after(self, minutes: float) -> float:
        """The timestamp *minutes* into the future."""
        return self.elapsed_minutes + minutes

    def pending(self) -> int:
        return len(self.callbacks)

    def next_due(self) -> float:
        """Time of the earliest pending callback, or NEVER."""
        return self.callbacks.peek_weight() if self.callbacks else NEVER

    # ── Scheduling ───────────────────────────────────────────────────

    def schedule(self, callback: Callable[[], Any], time: float) -> bool:
        """Invoke *callback* at *time*.

        Past or present times fire synchronously.  ``NEVER`` is refused
        (returns False) so the queue never fills with dead entries.
        """
        if time == NEVER:
            return False
        if time <= self.elapsed_minutes:
            callback()
            return True
        self.callbacks.push(callback, time)
        return True

    def wait_for(self, minutes: float) -> Wait:
        return self.wait_until(self.after(minutes))

    def wait_until(self, time: float) -> Wait:
        if time == NEVER:
            raise ValueError("waiting until NEVER would never resume")
        return Wait(time)

    def start(self, gen: Generator, name: str = "") -> Script:
        """Run *gen* until its first pending wait and return its handle."""
        script = Script(self, gen, name)
        script._resume()
        return script

    # ── Tick ─────────────────────────────────────────────────────────

    def advance(self, delta_ms: float, fast_forward: bool | float = False) -> int:
        """Advance by *delta_ms* real milliseconds.  Call once per tick.

        ``fast_forward=True`` scales the delta by ``fast_forward_factor``;
        a number scales it by that number instead.

        Returns the number of callbacks fired.
        """
        if self._advancing:
            raise RuntimeError("Clock.advance() called from inside a clock callback")
        if delta_ms < 0:
            raise ValueError(f"delta_ms must be non-negative, got {delta_ms}")

        if fast_forward is True:
            scale = self.fast_forward_factor
        elif fast_forward is False:
            scale = 1.0
        else:
            scale = float(fast_forward)
            if scale <= 0:
                raise ValueError(f"fast_forward must be positive, got {fast_forward}")

        self._advancing = True
        fired = 0
        try:
            scaled_ms = delta_ms * scale
            self.elapsed_real_ms += scaled_ms
            self.elapsed_minutes += scaled_ms / self.real_ms_per_minute
            self.ticks += 1

            while self.callbacks and self.callbacks.peek_weight() <= self.elapsed_minutes:
                callback = self.callbacks.pop()
                callback()
                fired += 1
                if self.log is not None:
                    self._record("clock", f"fired {_callback_name(callback)}")
        finally:
            self._advancing = False
        return fired

    # ── Logging ──────────────────────────────────────────────────────

    def _record(self, cat: str, msg: str, *, subject: str = "",
                details: dict | None = None) -> None:
        if self.log is not None:
            self.log.record(cat, msg, subject=subject,
                            t=self.elapsed_minutes, details=details)


def _callback_name(callback: Callable) -> str:
    owner = getattr(callback, "__self__", None)
    if isinstance(owner, Script):
        return f"resume {owner.name}"
    return getattr(callback, "__qualname__", repr(callback))
