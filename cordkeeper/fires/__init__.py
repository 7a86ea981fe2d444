"""Fire sessions, log records and history listings."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - imported only for type checkers
    from .models import FireSession
    from .models import LogRecord
    from .models import LogSize
    from .history import MonthGroup
    from .history import group_by_month
    from .history import fire_detail

__all__ = [
    "FireSession",
    "LogRecord",
    "LogSize",
    "MonthGroup",
    "fire_detail",
    "group_by_month",
]

_EXPORTS = {
    "FireSession": "cordkeeper.fires.models",
    "LogRecord": "cordkeeper.fires.models",
    "LogSize": "cordkeeper.fires.models",
    "MonthGroup": "cordkeeper.fires.history",
    "group_by_month": "cordkeeper.fires.history",
    "fire_detail": "cordkeeper.fires.history",
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
