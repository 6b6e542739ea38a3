"""Async Socket.IO client for a collaborative code session.

Wraps `socketio.AsyncClient` so scripts, bots and tests can take part in a
session the same way the browser editor does. Inbound broadcasts feed a
`ClientStateProjector`; create/join/leave use `AsyncClient.call`, which waits
for exactly one acknowledgement (or times out).
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

import socketio

from codepair.core.exceptions import ServiceUnavailableError
from codepair.core.settings import settings
from codepair.schemas.execution import ExecutionResult
from codepair.schemas.session import (
    CodeChangeRequest,
    CreateSessionReply,
    CursorMoveRequest,
    CursorPosition,
    JoinSessionReply,
    JoinSessionRequest,
    LanguageChangeRequest,
    LeaveSessionReply,
    SessionEvent,
    dump_wire,
)
from codepair.services.client_projector import ClientStateProjector
from codepair.services.execution import ExecutionService

logger = logging.getLogger(__name__)

_INBOUND_EVENTS = (
    SessionEvent.joined,
    SessionEvent.code_change,
    SessionEvent.language_change,
    SessionEvent.user_joined,
    SessionEvent.user_left,
    SessionEvent.cursor_move,
)


class CodepairClient:
    def __init__(
        self,
        url: str,
        *,
        socketio_path: str | None = None,
        ack_timeout: float | None = None,
        projector: ClientStateProjector | None = None,
        execution: ExecutionService | None = None,
        sio_client: Any | None = None,
    ) -> None:
        self.url = url
        self.socketio_path = socketio_path or settings.socketio_path
        self.ack_timeout = ack_timeout if ack_timeout is not None else settings.client_ack_timeout_seconds
        self.projector = projector or ClientStateProjector()
        self.connected = False
        self._execution = execution
        self._sio = sio_client or socketio.AsyncClient(logger=False, engineio_logger=False)
        self._register_handlers()

    def _register_handlers(self) -> None:
        self._sio.on("connect", self._on_connect)
        self._sio.on("disconnect", self._on_disconnect)
        for event in _INBOUND_EVENTS:
            self._sio.on(event.value, self._projecting(event.value))

    def _projecting(self, event: str) -> Callable[..., Awaitable[None]]:
        async def _handler(payload: Any = None) -> None:
            self.projector.apply(event, payload)

        return _handler

    async def _on_connect(self) -> None:
        self.connected = True

    async def _on_disconnect(self, reason: Any = None) -> None:
        self.connected = False
        logger.debug("Disconnected from %s (%s)", self.url, reason)

    async def connect(self) -> None:
        await self._sio.connect(
            self.url,
            socketio_path=self.socketio_path,
            transports=["websocket"],
        )

    async def disconnect(self) -> None:
        await self._sio.disconnect()

    # Request/response
    async def create_session(self, user_name: str = "") -> str:
        reply = await self._sio.call(
            SessionEvent.create.value, user_name, timeout=self.ack_timeout
        )
        return CreateSessionReply.model_validate(reply).session_id

    async def join_session(self, session_id: str, user_name: str = "") -> JoinSessionReply:
        request = JoinSessionRequest(session_id=session_id, user_name=user_name)
        reply = await self._sio.call(
            SessionEvent.join.value, dump_wire(request), timeout=self.ack_timeout
        )
        return JoinSessionReply.model_validate(reply)

    async def leave_session(self) -> bool:
        reply = await self._sio.call(SessionEvent.leave.value, timeout=self.ack_timeout)
        left = LeaveSessionReply.model_validate(reply).success
        if left:
            self.projector.reset()
        return left

    # Fire-and-forget edits; the server does not echo these back, so the
    # local mirror is updated here.
    async def send_code_change(self, code: str) -> None:
        if self.projector.in_session:
            self.projector.code = code
        await self._sio.emit(SessionEvent.code_change.value, dump_wire(CodeChangeRequest(code=code)))

    async def send_language_change(self, language: str) -> None:
        if self.projector.in_session:
            self.projector.language = language
        await self._sio.emit(
            SessionEvent.language_change.value,
            dump_wire(LanguageChangeRequest(language=language)),
        )

    async def send_cursor_move(self, line_number: int, column: int) -> None:
        position = CursorPosition(line_number=line_number, column=column)
        await self._sio.emit(
            SessionEvent.cursor_move.value, dump_wire(CursorMoveRequest(position=position))
        )

    async def execute(self, code: Optional[str] = None) -> ExecutionResult:
        """Run `code` (default: the shared buffer) in the session's current language."""

        if self._execution is None:
            raise ServiceUnavailableError("No execution runtime is configured")
        language = self.projector.language or "javascript"
        source = code if code is not None else (self.projector.code or "")
        return await self._execution.execute(source, language)
