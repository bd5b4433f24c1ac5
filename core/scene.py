"""
core/scene.py — Scene interface

The app runs the top scene of its stack (``VitalsScene`` in this
project).  ``update`` gets real seconds since the last frame and is
where the scene ticks its Simulation; ``draw`` renders to the app's
fixed-size surface.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    def on_enter(self, app: App):
        """Pushed or revealed."""

    def on_exit(self, app: App):
        """Popped or covered."""

    def handle_event(self, event: pygame.event.Event, app: App):
        pass

    def update(self, dt: float, app: App):
        pass

    def draw(self, surface: pygame.Surface, app: App):
        pass
