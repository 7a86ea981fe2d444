"""Persistence and in-memory ownership of fire sessions."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - imported only for type checkers
    from .fire_log import FireLog
    from .persistence import create_engine
    from .persistence import init_storage
    from .persistence import get_or_create_settings

__all__ = [
    "FireLog",
    "create_engine",
    "get_or_create_settings",
    "init_storage",
]

_EXPORTS = {
    "FireLog": "cordkeeper.store.fire_log",
    "create_engine": "cordkeeper.store.persistence",
    "init_storage": "cordkeeper.store.persistence",
    "get_or_create_settings": "cordkeeper.store.persistence",
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module = import_module(_EXPORTS[name])
        value = getattr(module, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted({*globals(), *__all__})
