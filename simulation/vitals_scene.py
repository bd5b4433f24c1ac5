"""
simulation/vitals_scene.py — Live view of the simulation

Shows the clock and, for each NPC and item, the inspector lines: title,
current action, every variable with its modifiers.  Below that, the
most recent SimLog entries.

Controls:
  Space      = toggle fast-forward
  E          = feed the first NPC its best food now
  H          = warm the first NPC up
  Escape     = quit
"""

from __future__ import annotations
import pygame

from components import Identity
from core.app import App
from core.scene import Scene
from logic.inspector import inspect
from logic.needs import best_food, can_use, use_item, warm_up
from simulation.sim import Simulation

# ── UI constants ─────────────────────────────────────────────────────
_BG = (16, 20, 24)
_HEADER = (0, 255, 200)
_SUBHEADER = (100, 200, 180)
_DIM = (90, 90, 90)
_TEXT = (200, 200, 200)
_FAST = (255, 200, 80)

_CAT_COLORS: dict[str, tuple[int, int, int]] = {
    "clock":    (180, 180, 180),
    "modifier": (120, 200, 255),
    "fuel":     (200, 180, 100),
    "script":   (100, 255, 160),
}

_LINE_H = 16
_LOG_LINES = 12


class VitalsScene(Scene):
    def __init__(self, sim: Simulation):
        self.sim = sim
        self.fast_forward = False
        self.npc: int | None = None

    def on_enter(self, app: App):
        if self.npc is None:
            npcs = [eid for eid, ident in self.sim.world.all_of(Identity)
                    if ident.kind == "npc"]
            self.npc = npcs[0] if npcs else None

    def handle_event(self, event: pygame.event.Event, app: App):
        if event.type != pygame.KEYDOWN:
            return
        if event.key == pygame.K_ESCAPE:
            app.running = False
        elif event.key == pygame.K_SPACE:
            self.fast_forward = not self.fast_forward
        elif event.key == pygame.K_e and self.npc is not None:
            food = best_food(self.sim.world, self.npc)
            if food is not None and can_use(self.sim.world, self.npc, food):
                self.sim.clock.start(use_item(self.sim.world, self.sim.clock,
                                              self.npc, food), name="eat:manual")
        elif event.key == pygame.K_h and self.npc is not None:
            warm_up(self.sim.world, self.sim.clock, self.npc, 10.0)

    def update(self, dt: float, app: App):
        self.sim.tick(dt * 1000.0, fast_forward=self.fast_forward)

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill(_BG)
        clock = self.sim.clock
        hours, minutes = divmod(int(clock.now()), 60)
        header = f"Day time {hours:02d}:{minutes:02d}  (t={clock.now():.1f} min)"
        app.draw_text(surface, header, 12, 10, _HEADER, app.font_lg)
        if self.fast_forward:
            app.draw_text_bg(surface, f">> x{clock.fast_forward_factor:g}",
                             surface.get_width() - 90, 12, _FAST)

        y = 40
        for eid, _ident in list(self.sim.world.all_of(Identity)):
            lines = inspect(self.sim.world, clock, eid)
            app.draw_text(surface, lines[0], 12, y, _SUBHEADER)
            y += _LINE_H
            for line in lines[1:]:
                app.draw_text(surface, line, 24, y, _TEXT, app.font_sm)
                y += _LINE_H - 3
            y += 6

        y = max(y + 10, surface.get_height() - _LOG_LINES * _LINE_H - 10)
        for entry in self.sim.log.recent(_LOG_LINES):
            color = _CAT_COLORS.get(entry["cat"], _DIM)
            text = f"{entry['t']:7.1f}  {entry['cat']:<8} {entry['subject']}: {entry['msg']}"
            app.draw_text(surface, text, 12, y, color, app.font_sm)
            y += _LINE_H
