"""core package initialization.

Making `core` an explicit package so imports like `import core.clock`
work reliably when running `main.py` from the project root.
"""

__all__ = [
    "app", "clock", "containers", "data", "ecs", "furnace",
    "modifiers", "scene", "tuning", "variable",
]
