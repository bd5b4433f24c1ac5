"""logic — Game systems package.

Top-level modules
-----------------
needs      — busy scripts, eating, needs priority, warming up
inspector  — text summaries of entities and their modifiers
"""
