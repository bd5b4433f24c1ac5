"""test_variables.py — Modifiers and cached Variables.

Run: python test_variables.py   (or: pytest test_variables.py)
"""
from __future__ import annotations
import math, sys, traceback

from components.dev_log import SimLog
from core.clock import NEVER, Clock
from core.modifiers import (
    Cadence, ConstantModifier, DecayingModifier, Modifier,
    MonitoringModifier, ProgressModifier, describe,
)
from core.variable import Variable

passed = 0
failed = 0

MS = 2000.0


def ok(label: str):
    global passed
    passed += 1
    print(f"  [PASS] {label}")


def fail(label: str, detail: str = ""):
    global failed
    failed += 1
    print(f"  [FAIL] {label}")
    if detail:
        for line in detail.strip().splitlines():
            print(f"         {line}")


def raises(exc_type, fn, *args, **kw) -> bool:
    try:
        fn(*args, **kw)
    except exc_type:
        return True
    return False


def make_clock(log: SimLog | None = None) -> Clock:
    return Clock(real_ms_per_minute=MS, fast_forward_factor=4.0, log=log)


class Counting(Modifier):
    """Constant contribution that counts how often it is asked for it."""

    def __init__(self, amount: float, cadence: Cadence = Cadence.NEVER):
        super().__init__("Counting")
        self.amount = amount
        self.cadence = cadence
        self.calls = 0

    def value(self) -> float:
        self.calls += 1
        return self.amount


# ════════════════════════════════════════════════════════════════════════
#  Variable basics
# ════════════════════════════════════════════════════════════════════════

def test_add_and_remove_constant():
    clock = make_clock()
    var = Variable(clock, "Hunger", base_value=100, minimum=0, maximum=100)
    snack = var.add_modifier(ConstantModifier(clock, -30, description="Snack"))
    assert var.get_value() == 70
    var.remove_modifier(snack)
    assert var.get_value() == 100
    assert snack.owner is None
    ok("base 100 + constant(-30) = 70; removing it restores 100")


def test_bounds_are_checked_and_enforced():
    clock = make_clock()
    assert raises(ValueError, Variable, clock, "Bad", minimum=10, maximum=10)
    assert raises(ValueError, Variable, clock, "Bad", minimum=5, maximum=1)

    var = Variable(clock, "Mood", base_value=50, minimum=0, maximum=100)
    big = var.add_modifier(ConstantModifier(clock, 500))
    assert var.get_value() == 100
    var.remove_modifier(big)
    var.add_modifier(ConstantModifier(clock, -500))
    assert var.get_value() == 0
    var.base_value = 1000
    assert var.get_value() == 100
    ok("min < max is checked; values are clamped to [min, max]")


def test_formatting_and_ratio():
    clock = make_clock()
    var = Variable(clock, "Mood", base_value=70)
    assert var.formatted() == "70%"
    assert str(var) == "70%"
    assert var.ratio() == 0.7
    temp = Variable(clock, "Temp", base_value=20, minimum=-273, maximum=NEVER, unit=" °C")
    assert temp.formatted() == "20 °C"
    assert temp.ratio() is None
    ok("formatted() carries the unit; ratio() is None for an unbounded variable")


def test_remove_absent_modifier_fails():
    clock = make_clock()
    var = Variable(clock, "A")
    other = Variable(clock, "B")
    mod = other.add_modifier(ConstantModifier(clock, 1))
    assert raises(ValueError, var.remove_modifier, ConstantModifier(clock, 1))
    assert raises(ValueError, var.remove_modifier, mod)
    assert raises(ValueError, var.add_modifier, mod)
    other.remove_modifier(mod)
    assert raises(ValueError, other.remove_modifier, mod)
    ok("Removing an absent modifier or sharing one raises ValueError")


def test_clear_modifiers():
    clock = make_clock()
    var = Variable(clock, "A", base_value=10)
    mods = [var.add_modifier(ConstantModifier(clock, 5, duration=3)) for _ in range(3)]
    assert var.get_value() == 25
    assert var.cadence is Cadence.EACH_TICK
    var.clear_modifiers()
    assert var.get_value() == 10
    assert var.cadence is Cadence.NEVER
    assert all(m.owner is None for m in mods)
    ok("clear_modifiers() detaches everything and resets the cadence")


# ════════════════════════════════════════════════════════════════════════
#  Caching
# ════════════════════════════════════════════════════════════════════════

def test_never_cadence_is_memoised():
    clock = make_clock()
    var = Variable(clock, "A", base_value=10)
    counting = var.add_modifier(Counting(5))
    assert var.get_value() == 15
    assert var.get_value() == 15
    clock.advance(10 * MS)
    assert var.get_value() == 15
    assert counting.calls == 1
    assert var.recomputes == 1
    ok("NEVER cadence: value() runs once until the modifier set changes")


def test_each_tick_recomputes_once_per_time():
    clock = make_clock()
    var = Variable(clock, "A")
    counting = var.add_modifier(Counting(5, Cadence.EACH_TICK))
    var.get_value()
    var.get_value()
    assert counting.calls == 1
    clock.advance(MS)
    var.get_value()
    var.get_value()
    assert counting.calls == 2
    ok("EACH_TICK cadence: at most one recompute per distinct time")


def test_always_recomputes_every_query():
    clock = make_clock()
    var = Variable(clock, "A")
    counting = var.add_modifier(Counting(5, Cadence.ALWAYS))
    for _ in range(3):
        var.get_value()
    assert counting.calls == 3
    ok("ALWAYS cadence: every query recomputes")


def test_cadence_is_the_highest_present():
    clock = make_clock()
    var = Variable(clock, "A")
    assert var.cadence is Cadence.NEVER
    var.add_modifier(ConstantModifier(clock, 1))
    assert var.cadence is Cadence.NEVER
    timed = var.add_modifier(ConstantModifier(clock, 1, duration=5))
    assert var.cadence is Cadence.EACH_TICK
    always = var.add_modifier(Counting(1, Cadence.ALWAYS))
    assert var.cadence is Cadence.ALWAYS
    var.remove_modifier(always)
    assert var.cadence is Cadence.EACH_TICK
    var.remove_modifier(timed)
    assert var.cadence is Cadence.NEVER
    ok("Cadence follows the modifier set up and back down")


def test_base_value_change_invalidates():
    clock = make_clock()
    var = Variable(clock, "A", base_value=10)
    var.add_modifier(ConstantModifier(clock, 5))
    assert var.get_value() == 15
    var.base_value = 20
    assert var.get_value() == 25
    ok("Setting base_value invalidates the memo")


def test_failed_recompute_keeps_cadence_consistent():
    class Exploding(Modifier):
        cadence = Cadence.NEVER

        def value(self) -> float:
            raise RuntimeError("sensor broke")

    clock = make_clock()
    var = Variable(clock, "A", base_value=10)
    timed = var.add_modifier(ConstantModifier(clock, 5, duration=1))
    boom = var.add_modifier(Exploding())
    clock.advance(2 * MS)
    assert raises(RuntimeError, var.get_value)
    assert timed.owner is None
    var.remove_modifier(boom)
    assert var.cadence is Cadence.NEVER
    assert var.get_value() == 10
    ok("Expired modifiers are fully detached even if a later value() raises")


# ════════════════════════════════════════════════════════════════════════
#  Constant / decaying / progress modifiers
# ════════════════════════════════════════════════════════════════════════

def test_constant_lifetime():
    clock = make_clock()
    forever = ConstantModifier(clock, 3)
    timed = ConstantModifier(clock, 3, duration=5)
    assert forever.expires_at == NEVER and timed.expires_at == 5
    clock.advance(4 * MS)
    assert not timed.can_be_removed()
    clock.advance(MS)
    assert timed.can_be_removed()
    clock.advance(10_000 * MS)
    assert not forever.can_be_removed()
    ok("Constant with duration D is removable exactly at D; without, never")


def test_expiry_prunes_and_logs():
    log = SimLog()
    clock = make_clock(log)
    var = Variable(clock, "Mood", base_value=50)
    var.add_modifier(ConstantModifier(clock, 10, duration=5, description="Coffee"))
    assert var.get_value() == 60
    clock.advance(5 * MS)
    assert var.get_value() == 50
    assert list(var.modifiers()) == []
    assert var.cadence is Cadence.NEVER
    msgs = [e["msg"] for e in log.for_subject("Mood")]
    assert "Coffee expired" in msgs
    ok("Expired modifiers are pruned on recompute and recorded")


def test_adding_expired_modifier_is_ignored():
    log = SimLog()
    clock = make_clock(log)
    var = Variable(clock, "A", base_value=1)
    mod = ConstantModifier(clock, 100, duration=0)
    assert var.add_modifier(mod) is mod
    assert mod.owner is None
    assert var.cadence is Cadence.NEVER
    assert var.get_value() == 1
    assert log.for_cat("modifier")
    ok("A modifier with no lifetime left is not attached")


def test_exponential_decay():
    clock = make_clock()
    decay = DecayingModifier.exponential(clock, 100, 10)
    assert decay.value() == 100
    assert decay.cadence is Cadence.EACH_TICK
    clock.advance(5 * MS)
    assert math.isclose(decay.value(), 100 / math.sqrt(2))
    assert not decay.can_be_removed()
    clock.advance(5 * MS)
    assert math.isclose(decay.value(), 50)
    assert decay.can_be_removed()
    ok("decay(100, half_life=10): 100 at 0, 50 at 10, removable at the 50% cut-off")


def test_exponential_decay_custom_threshold():
    clock = make_clock()
    var = Variable(clock, "Temp", base_value=20, minimum=-273, maximum=1000)
    var.add_modifier(DecayingModifier.exponential(clock, -40, 10, insignificant=-10))
    assert var.get_value() == -20
    clock.advance(10 * MS)
    assert math.isclose(var.get_value(), 0)
    clock.advance(10 * MS)
    assert var.get_value() == 20
    assert list(var.modifiers()) == []
    ok("A cooling decay with a 25% threshold lasts two half-lives")


def test_exponential_decay_rejects_bad_input():
    clock = make_clock()
    assert raises(ValueError, DecayingModifier.exponential, clock, 100, 0)
    assert raises(ValueError, DecayingModifier.exponential, clock, 100, -1)
    assert raises(ValueError, DecayingModifier.exponential, clock, 100, 10, insignificant=-5)
    assert raises(ValueError, DecayingModifier.exponential, clock, -100, 10, insignificant=5)
    assert raises(ValueError, DecayingModifier.exponential, clock, 0, 10)
    ok("Non-positive half-life and sign mismatch raise ValueError")


def test_linear_ramp():
    clock = make_clock()
    ramp = DecayingModifier.linear_ramp(clock, -20, 10, description="Ate food")
    assert ramp.value() == -20
    clock.advance(5 * MS)
    assert ramp.value() == -10
    clock.advance(5 * MS)
    assert ramp.can_be_removed()
    assert raises(ValueError, DecayingModifier.linear_ramp, clock, 5, 0)
    ok("linear_ramp falls linearly to zero over its duration")


def test_progress_moves_forward_only():
    mod = ProgressModifier(lambda p: 10 - p, 10)
    assert mod.value() == 10
    mod.advance(4)
    assert mod.value() == 6 and mod.remaining == 6
    mod.progress = 5
    assert raises(ValueError, setattr, mod, "progress", 2)
    assert raises(ValueError, mod.advance, -1)
    mod.advance(5)
    assert mod.can_be_removed() and mod.remaining == 0
    assert mod.cadence is Cadence.ALWAYS
    ok("Progress is driven explicitly and never moves backward")


# ════════════════════════════════════════════════════════════════════════
#  Monitoring
# ════════════════════════════════════════════════════════════════════════

def test_sum_of_tracks_sources():
    clock = make_clock()
    v1 = Variable(clock, "V1", base_value=30)
    v2 = Variable(clock, "V2", base_value=40)
    total = Variable(clock, "Total", base_value=0, maximum=1000)
    mod = total.add_modifier(MonitoringModifier.sum_of(v1, v2))
    assert mod.value() == 70 and total.get_value() == 70
    v1.base_value = 35
    assert total.get_value() == 75
    v2.add_modifier(ConstantModifier(clock, -40))
    assert total.get_value() == 35
    clock.advance(MS)
    assert mod.value() == 35
    assert not mod.can_be_removed()
    ok("sum_of(30, 40) = 70 and follows its sources without invalidation")


def test_min_and_max_of():
    clock = make_clock()
    a = Variable(clock, "A", base_value=10)
    b = Variable(clock, "B", base_value=60)
    assert MonitoringModifier.min_of(a, b).value() == 10
    assert MonitoringModifier.max_of(a, b).value() == 60
    assert raises(ValueError, MonitoringModifier, min, ())
    ok("min_of / max_of; no sources is an error")


def test_linear_map_onto():
    clock = make_clock()
    hunger = Variable(clock, "Hunger", base_value=0)
    mood = Variable(clock, "Mood", base_value=50)
    mod = mood.add_modifier(MonitoringModifier.linear_map_onto(
        hunger, 20, -20, "Full", "Fairly full", "Peckish", "Hungry"))
    assert mood.get_value() == 70 and mod.description == "Full"
    hunger.base_value = 50
    assert mood.get_value() == 50 and mod.description == "Peckish"
    hunger.base_value = 100
    assert mood.get_value() == 30 and mod.description == "Hungry"

    endless = Variable(clock, "Endless", minimum=0, maximum=NEVER)
    assert raises(ValueError, MonitoringModifier.linear_map_onto, endless, 0, 1)
    ok("linear_map_onto remaps the source range and labels its band")


def test_dependency_cycles_are_rejected():
    clock = make_clock()
    a = Variable(clock, "A")
    b = Variable(clock, "B")
    c = Variable(clock, "C")
    b.add_modifier(MonitoringModifier.sum_of(a))
    c.add_modifier(MonitoringModifier.sum_of(b))
    assert raises(ValueError, a.add_modifier, MonitoringModifier.sum_of(c))
    assert raises(ValueError, a.add_modifier, MonitoringModifier.sum_of(a))
    assert list(a.dependencies()) == []
    assert list(c.dependencies()) == [b]
    ok("Monitoring modifiers that would form a cycle raise ValueError")


def test_descriptions():
    clock = make_clock()
    assert describe(ConstantModifier(clock, 1, description="Warm")) == "Warm"
    assert describe(ConstantModifier(clock, 1)) == "ConstantModifier"
    ok("describe() falls back to the class name")


# ════════════════════════════════════════════════════════════════════════
#  Runner
# ════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    print("\n=== Variables & modifiers ===")
    for _name, _fn in list(globals().items()):
        if _name.startswith("test_") and callable(_fn):
            try:
                _fn()
            except Exception:
                fail(_name, traceback.format_exc())
    print(f"\n{passed} passed, {failed} failed")
    sys.exit(1 if failed else 0)
