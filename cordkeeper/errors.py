"""Exceptions raised by the Cordkeeper domain layer."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .fires.models import FireSession


class SessionStateError(RuntimeError):
    """Raised when a fire session lifecycle operation is not allowed."""


class SessionNotFoundError(LookupError):
    """Raised when a session identifier is not present in the fire log."""


class DataIntegrityError(RuntimeError):
    """Raised when supplied records break an invariant of the record set."""


class MultipleActiveSessionsError(DataIntegrityError):
    """Raised when more than one open fire session exists in a season window."""

    def __init__(self, sessions: Sequence["FireSession"]) -> None:
        self.sessions = tuple(sessions)
        identifiers = ", ".join(session.session_id for session in self.sessions)
        super().__init__(
            f"expected at most one active fire session, found {len(self.sessions)}: {identifiers}"
        )


__all__ = [
    "DataIntegrityError",
    "MultipleActiveSessionsError",
    "SessionNotFoundError",
    "SessionStateError",
]
