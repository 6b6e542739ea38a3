"""Socket.IO server for collaborative code sessions.

One `AsyncServer` hosts every session; each session is a Socket.IO room keyed
by the session id. The server is mounted next to the FastAPI app through
`socketio.ASGIApp` (see `codepair.main`).

Frontend convention:
- URL base: http://<host>:3001
- Socket.IO path: /socket.io/ (configurable via SOCKETIO_PATH)
- No auth; the session id is the capability.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import socketio

from codepair.schemas.session import SessionEvent
from codepair.services.session_protocol import SessionProtocolHandler

logger = logging.getLogger(__name__)


def create_socketio_server(cors_allowed_origins: Iterable[str] | str = "*") -> socketio.AsyncServer:
    origins: list[str] | str = (
        cors_allowed_origins if isinstance(cors_allowed_origins, str) else list(cors_allowed_origins)
    )
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=origins,
        logger=False,
        engineio_logger=False,
    )


class SocketIOTransport:
    """`RealtimeTransport` backed by python-socketio rooms.

    Delivery to peers that already went away is absorbed by python-socketio.
    """

    def __init__(self, sio: socketio.AsyncServer) -> None:
        self._sio = sio

    async def emit(self, sid: str, event: str, payload: dict[str, Any]) -> None:
        await self._sio.emit(event, payload, to=sid)

    async def broadcast_to_room(
        self,
        room: str,
        event: str,
        payload: dict[str, Any],
        *,
        skip_sid: str | None = None,
    ) -> None:
        await self._sio.emit(event, payload, room=room, skip_sid=skip_sid)

    async def join_room(self, sid: str, room: str) -> None:
        await self._sio.enter_room(sid, room)

    async def leave_room(self, sid: str, room: str) -> None:
        await self._sio.leave_room(sid, room)


def register_session_events(sio: socketio.AsyncServer, handler: SessionProtocolHandler) -> None:
    """Wire Socket.IO events to the session protocol.

    Return values of request/response handlers become the event ack, which is
    what the client's callback (or `AsyncClient.call`) receives.
    """

    async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None) -> None:
        handler.connect(sid)
        logger.info("Client connected: %s", sid)

    async def disconnect(sid: str, reason: Any | None = None) -> None:
        await handler.disconnect(sid)
        logger.debug("Client disconnected: %s (%s)", sid, reason)

    async def session_create(sid: str, user_name: Any = None) -> dict[str, Any]:
        return await handler.create(sid, user_name)

    async def session_join(sid: str, payload: Any = None) -> dict[str, Any]:
        return await handler.join(sid, payload)

    async def session_leave(sid: str, _payload: Any = None) -> dict[str, Any]:
        return await handler.leave(sid)

    async def code_change(sid: str, payload: Any = None) -> None:
        await handler.code_change(sid, payload)

    async def language_change(sid: str, payload: Any = None) -> None:
        await handler.language_change(sid, payload)

    async def cursor_move(sid: str, payload: Any = None) -> None:
        await handler.cursor_move(sid, payload)

    sio.on("connect", connect)
    sio.on("disconnect", disconnect)
    sio.on(SessionEvent.create.value, session_create)
    sio.on(SessionEvent.join.value, session_join)
    sio.on(SessionEvent.leave.value, session_leave)
    sio.on(SessionEvent.code_change.value, code_change)
    sio.on(SessionEvent.language_change.value, language_change)
    sio.on(SessionEvent.cursor_move.value, cursor_move)
