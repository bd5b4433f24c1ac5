"""core/tuning.py — Data-driven tuning constants.

Clock rates, decay thresholds, burn rates and vital-sign bounds live in
``data/tuning.toml`` and are loaded once at startup.  Any module can
read a value with::

    from core.tuning import get
    rate = get("clock", "real_ms_per_game_minute", 2000.0)

Every caller passes its own default, so the engine runs unchanged when
the file is missing.  Explicit constructor arguments always win over
tuning values.

Hot-reload: call ``reload()`` to re-read the file.
"""

from __future__ import annotations
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    try:
        import tomli as tomllib            # pip install tomli
    except ModuleNotFoundError:
        tomllib = None                     # type: ignore[assignment]


_data: dict = {}
_path: Path | None = None


def load(path: str | Path | None = None) -> None:
    """Load (or reload) tuning constants from *path*.

    If *path* is ``None``, default to ``data/tuning.toml`` relative to
    the project root (one level above ``core/``).
    """
    global _data, _path

    if path is None:
        root = Path(__file__).resolve().parent.parent
        path = root / "data" / "tuning.toml"
    else:
        path = Path(path)

    _path = path

    if not path.exists():
        print(f"[TUNING] {path} not found — using defaults")
        _data = {}
        return

    if tomllib is None:
        print("[TUNING] No TOML parser available (need Python 3.11+ or `pip install tomli`)")
        _data = {}
        return

    with open(path, "rb") as f:
        _data = tomllib.load(f)

    print(f"[TUNING] Loaded {_count_leaves(_data)} values from {path}")


def reload() -> None:
    """Re-read the tuning file from disk."""
    load(_path)


def get(section: str, key: str, default=None):
    """Read a tuning value.

    *section* uses dot-notation to traverse nested tables, e.g.
    ``"vitals.hunger"`` looks up ``[vitals.hunger]``.

    >>> get("vitals.hunger", "no_such_key", 100.0)
    100.0
    """
    node = _lookup(section)
    if isinstance(node, dict):
        return node.get(key, default)
    return default


def section(section_path: str) -> dict:
    """Return an entire section dict (shallow copy), or empty dict."""
    node = _lookup(section_path)
    return dict(node) if isinstance(node, dict) else {}


def override(section_path: str, key: str, value) -> None:
    """Set a value in memory only (tests, debug consoles).

    Lost on the next ``load()`` / ``reload()``.
    """
    node = _data
    for part in section_path.split("."):
        node = node.setdefault(part, {})
    node[key] = value


def _lookup(section_path: str):
    node = _data
    for part in section_path.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
        if node is None:
            return None
    return node


def _count_leaves(d: dict, _n: int = 0) -> int:
    for v in d.values():
        if isinstance(v, dict):
            _n = _count_leaves(v, _n)
        else:
            _n += 1
    return _n
