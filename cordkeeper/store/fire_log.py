"""In-memory owner of all fire sessions with change notifications."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from loguru import logger

from ..errors import SessionNotFoundError, SessionStateError
from ..fires.models import FireSession, LogRecord, LogSize, local_now
from ..season.statistics import find_active_session
from . import persistence

ChangeListener = Callable[[str, FireSession], None]


class FireLog:
    """Holds every fire session and keeps an optional SQLite store in sync.

    Every create, edit and delete bumps :attr:`revision` and notifies the
    subscribed listeners with ``(event, session)``.  Events are ``"created"``,
    ``"logged"``, ``"ended"``, ``"discarded"``, ``"updated"`` and
    ``"deleted"``.
    """

    def __init__(
        self,
        sessions: Iterable[FireSession] = (),
        *,
        engine: persistence.ConnectionLike | None = None,
    ) -> None:
        self._sessions: dict[str, FireSession] = {}
        for session in sessions:
            self._sessions[session.session_id] = session
        self._engine = engine
        self._listeners: list[ChangeListener] = []
        self.revision = 0

    @classmethod
    def from_storage(cls, engine: persistence.ConnectionLike) -> "FireLog":
        sessions = persistence.load_fires(engine)
        logger.info(f"Loaded {len(sessions)} fire sessions from storage")
        return cls(sessions, engine=engine)

    # Observation -------------------------------------------------------
    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: str, session: FireSession) -> None:
        self.revision += 1
        logger.debug(f"Fire {session.session_id} {event} (revision {self.revision})")
        for listener in list(self._listeners):
            listener(event, session)

    # Queries -----------------------------------------------------------
    @property
    def sessions(self) -> tuple[FireSession, ...]:
        """All sessions, most recent first."""

        return tuple(
            sorted(self._sessions.values(), key=lambda session: session.start_time, reverse=True)
        )

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> FireSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(f"no fire session with id {session_id!r}") from None

    @property
    def active_session(self) -> FireSession | None:
        return find_active_session(list(self._sessions.values()))

    def completed_sessions(self) -> tuple[FireSession, ...]:
        return tuple(session for session in self.sessions if not session.is_active)

    # Mutations ---------------------------------------------------------
    def start_session(self, at: datetime | None = None) -> FireSession:
        """Open a new fire. Only one fire may be open at a time."""

        current = self.active_session
        if current is not None:
            raise SessionStateError(f"fire {current.session_id} is still burning")
        session = FireSession(start_time=at or local_now())
        self._sessions[session.session_id] = session
        if self._engine is not None:
            persistence.store_fire(self._engine, session)
        self._notify("created", session)
        return session

    def add_logs(
        self,
        session_id: str,
        size: LogSize | str,
        quantity: int = 1,
        *,
        timestamp: datetime | None = None,
    ) -> LogRecord:
        session = self.get(session_id)
        record = session.add_logs(size, quantity, timestamp=timestamp)
        if self._engine is not None:
            persistence.append_log(self._engine, session, record)
        self._notify("logged", session)
        return record

    def end_session(self, session_id: str, at: datetime | None = None) -> FireSession | None:
        """Close a fire; a fire with no logs is discarded instead.

        Returns the ended session, or ``None`` when it was discarded.
        """

        session = self.get(session_id)
        if not session.is_active:
            raise SessionStateError(f"fire {session_id} has already ended")
        if not session.logs:
            self._remove([session])
            logger.info(f"Discarded empty fire {session_id}")
            self._notify("discarded", session)
            return None
        session.end(at)
        if self._engine is not None:
            persistence.store_fire(self._engine, session)
        self._notify("ended", session)
        return session

    def update_session(
        self,
        session_id: str,
        *,
        notes: str | None = None,
        logs: Iterable[LogRecord] | None = None,
    ) -> FireSession | None:
        """Edit the notes or replace the log records of a session.

        An ended fire left without any logs is discarded, the same as ending
        an empty fire, and ``None`` is returned.
        """

        session = self.get(session_id)
        if notes is not None:
            session.notes = notes or None
        if logs is not None:
            session.logs = list(logs)
        if not session.is_active and not session.logs:
            self._remove([session])
            logger.info(f"Discarded fire {session_id} after its last log was removed")
            self._notify("discarded", session)
            return None
        if self._engine is not None:
            persistence.store_fire(self._engine, session)
        self._notify("updated", session)
        return session

    def delete_session(self, session_id: str) -> None:
        session = self.get(session_id)
        self._remove([session])
        self._notify("deleted", session)

    def delete_sessions(self, sessions: Iterable[FireSession]) -> int:
        """Delete several sessions, notifying once per session. Returns the count."""

        doomed = [self.get(session.session_id) for session in sessions]
        self._remove(doomed)
        for session in doomed:
            self._notify("deleted", session)
        return len(doomed)

    def _remove(self, sessions: list[FireSession]) -> None:
        if self._engine is not None:
            persistence.delete_fires(self._engine, [session.session_id for session in sessions])
        for session in sessions:
            self._sessions.pop(session.session_id, None)


__all__ = ["ChangeListener", "FireLog"]
