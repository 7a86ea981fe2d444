"""Text-based user interface components for Cordkeeper."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - imported only for type checkers
    from .app import CordkeeperApp
    from .dashboard import HistoryView
    from .dashboard import SeasonDashboard

__all__ = [
    "CordkeeperApp",
    "HistoryView",
    "SeasonDashboard",
]

_EXPORTS = {
    "CordkeeperApp": "cordkeeper.ui.app",
    "HistoryView": "cordkeeper.ui.dashboard",
    "SeasonDashboard": "cordkeeper.ui.dashboard",
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
