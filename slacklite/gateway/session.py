from __future__ import annotations

import asyncio
import json
import uuid
from enum import Enum
from typing import Any, AsyncIterator, Callable

from loguru import logger

TerminateHook = Callable[[], None]

_CLOSED = None


def sse_frame(event: str, data: str) -> str:
    lines = "".join(f"data: {line}\n" for line in data.splitlines() or [""])
    return f"event: {event}\n{lines}\n"


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSING = "closing"
    TERMINATED = "terminated"


class Session:
    """One SSE stream bound to one client."""

    def __init__(self, endpoint: str = "/messages") -> None:
        self.id = uuid.uuid4().hex
        self.endpoint = f"{endpoint}?sessionId={self.id}"
        self.close_reason = ""
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: dict[str, Any]) -> bool:
        if self._closed:
            return False
        self._queue.put_nowait(sse_frame("message", json.dumps(message, ensure_ascii=False)))
        return True

    def close(self, reason: str) -> None:
        if self._closed:
            return
        self._closed = True
        self.close_reason = reason
        self._queue.put_nowait(_CLOSED)

    async def frames(self) -> AsyncIterator[str]:
        yield sse_frame("endpoint", self.endpoint)
        while True:
            frame = await self._queue.get()
            if frame is _CLOSED:
                return
            yield frame


class SessionManager:
    """Holds the single active session.

    Opening a new session closes the previous one (reason ``superseded``).
    When the active session's client goes away the manager either returns to
    idle (serve-many) or terminates and fires ``on_terminate`` (serve-once).
    """

    def __init__(
        self,
        *,
        endpoint: str = "/messages",
        exit_on_close: bool = True,
        on_terminate: TerminateHook | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.exit_on_close = exit_on_close
        self.on_terminate = on_terminate
        self.state = SessionState.IDLE
        self._active: Session | None = None

    @property
    def active(self) -> Session | None:
        return self._active

    def open(self) -> Session:
        if self.state is SessionState.TERMINATED:
            raise RuntimeError("gateway is shutting down")
        self.state = SessionState.CONNECTING
        previous = self._active
        if previous is not None:
            logger.warning("connection superseded session={}", previous.id)
            previous.close("superseded")
        session = Session(self.endpoint)
        self._active = session
        self.state = SessionState.ACTIVE
        logger.info("connection opened session={}", session.id)
        return session

    def get(self, session_id: str | None = None) -> Session | None:
        session = self._active
        if session is None or session.closed:
            return None
        if session_id and session_id != session.id:
            return None
        return session

    def close(self, session: Session, reason: str = "client_closed") -> None:
        if session is not self._active:
            session.close(reason)
            return
        self.state = SessionState.CLOSING
        session.close(reason)
        self._active = None
        logger.info("connection closed session={} reason={}", session.id, reason)

        if not self.exit_on_close:
            self.state = SessionState.IDLE
            return
        self.state = SessionState.TERMINATED
        logger.info("serve-once mode: shutting down after session close")
        if self.on_terminate is not None:
            self.on_terminate()
