"""Per-connection session protocol.

Binds inbound realtime events (create, join, leave, code/language/cursor edits,
disconnect) to `SessionRegistry` operations and decides who hears about each
change. The handler is transport-agnostic: it only needs the four primitives
of `RealtimeTransport`, which the Socket.IO layer implements on top of
python-socketio rooms.

Request/response events (`create`, `join`, `leave`) return their reply as a
plain dict; the Socket.IO layer hands it back as the event acknowledgement.
Participant-facing failures are always replies, never exceptions.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from pydantic import ValidationError

from codepair.core.utils import generate_session_id
from codepair.schemas.session import (
    CodeChangeBroadcast,
    CodeChangeRequest,
    CreateSessionReply,
    CursorMoveBroadcast,
    CursorMoveRequest,
    JoinSessionReply,
    JoinSessionRequest,
    LanguageChangeBroadcast,
    LanguageChangeRequest,
    LeaveSessionReply,
    Participant,
    SessionEvent,
    UserPresence,
    dump_wire,
)
from codepair.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)

SESSION_NOT_FOUND = "Session not found"
INVALID_PAYLOAD = "Invalid payload"


class RealtimeTransport(Protocol):
    """Room-based publish/subscribe primitives the protocol relies on."""

    async def emit(self, sid: str, event: str, payload: dict[str, Any]) -> None: ...

    async def broadcast_to_room(
        self,
        room: str,
        event: str,
        payload: dict[str, Any],
        *,
        skip_sid: str | None = None,
    ) -> None: ...

    async def join_room(self, sid: str, room: str) -> None: ...

    async def leave_room(self, sid: str, room: str) -> None: ...


@dataclass
class ConnectionState:
    """The only per-connection mutable state outside the registry."""

    sid: str
    session_id: Optional[str] = None

    @property
    def participant_id(self) -> str:
        return self.sid

    @property
    def joined(self) -> bool:
        return self.session_id is not None


def _display_name(raw: Any, default: str) -> str:
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return default


class SessionProtocolHandler:
    """Enforces the join/create/broadcast rules for every connection.

    All mutations and the broadcasts they trigger run under one asyncio lock,
    so every member of a session observes events in processing order and a
    connection belongs to at most one session at a time.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        transport: RealtimeTransport,
        *,
        id_factory: Callable[[], str] | None = None,
        session_id_length: int = 10,
        creator_default_name: str = "Interviewer",
        joiner_default_name: str = "Candidate",
    ) -> None:
        self.registry = registry
        self.transport = transport
        self._id_factory = id_factory or (lambda: generate_session_id(session_id_length))
        self._creator_default_name = creator_default_name
        self._joiner_default_name = joiner_default_name
        self._connections: dict[str, ConnectionState] = {}
        self._lock = asyncio.Lock()

    # Connection lifecycle
    def connect(self, sid: str) -> ConnectionState:
        state = self._connections.get(sid)
        if state is None:
            state = ConnectionState(sid=sid)
            self._connections[sid] = state
        return state

    def connection(self, sid: str) -> ConnectionState | None:
        return self._connections.get(sid)

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def disconnect(self, sid: str) -> None:
        """Clean up membership after the transport closed the connection."""

        async with self._lock:
            state = self._connections.pop(sid, None)
            if state is None or state.session_id is None:
                return
            session_id = state.session_id
            # The room is torn down by the transport itself; only notify peers.
            await self._leave_current(state, leave_room=False)
            logger.info("Participant %s disconnected from session %s", sid, session_id)

    # Request/response events
    async def create(self, sid: str, user_name: Any = None) -> dict[str, Any]:
        """Open a new session with the caller as its only participant."""

        async with self._lock:
            state = self.connect(sid)
            if state.joined:
                await self._leave_current(state)

            name = _display_name(user_name, self._creator_default_name)
            session_id = self._id_factory()
            self.registry.open_session(session_id, Participant(id=sid, name=name))
            state.session_id = session_id
            await self.transport.join_room(sid, session_id)

            session_state = self.registry.get_session_state(session_id)
            if session_state is not None:
                await self.transport.emit(sid, SessionEvent.joined.value, dump_wire(session_state))

            logger.info("Session created: %s by %s", session_id, name)
            return dump_wire(CreateSessionReply(session_id=session_id))

    async def join(self, sid: str, payload: Any) -> dict[str, Any]:
        """Join an existing session, or report why not without changing anything."""

        try:
            request = JoinSessionRequest.model_validate(payload)
        except ValidationError:
            logger.debug("Rejected malformed join payload from %s", sid)
            return dump_wire(JoinSessionReply(success=False, error=INVALID_PAYLOAD))

        async with self._lock:
            state = self.connect(sid)
            if self.registry.get_session(request.session_id) is None:
                return dump_wire(JoinSessionReply(success=False, error=SESSION_NOT_FOUND))

            if state.joined and state.session_id != request.session_id:
                await self._leave_current(state)

            name = _display_name(request.user_name, self._joiner_default_name)
            self.registry.add_participant(request.session_id, Participant(id=sid, name=name))
            state.session_id = request.session_id
            await self.transport.join_room(sid, request.session_id)

            session_state = self.registry.get_session_state(request.session_id)
            if session_state is not None:
                await self.transport.emit(sid, SessionEvent.joined.value, dump_wire(session_state))
            await self.transport.broadcast_to_room(
                request.session_id,
                SessionEvent.user_joined.value,
                dump_wire(UserPresence(id=sid, name=name)),
                skip_sid=sid,
            )

            logger.info("User %s joined session: %s", name, request.session_id)
            return dump_wire(JoinSessionReply(success=True))

    async def leave(self, sid: str) -> dict[str, Any]:
        """Leave the current session but keep the connection open."""

        async with self._lock:
            state = self._connections.get(sid)
            if state is None or not state.joined:
                return dump_wire(LeaveSessionReply(success=False))
            session_id = state.session_id
            await self._leave_current(state)
            logger.info("Participant %s left session %s", sid, session_id)
            return dump_wire(LeaveSessionReply(success=True))

    # Fire-and-forget events
    async def code_change(self, sid: str, payload: Any) -> None:
        request = self._parse(CodeChangeRequest, sid, payload)
        if request is None:
            return
        async with self._lock:
            session_id = self._joined_session(sid, SessionEvent.code_change)
            if session_id is None:
                return
            self.registry.update_code(session_id, request.code)
            await self.transport.broadcast_to_room(
                session_id,
                SessionEvent.code_change.value,
                dump_wire(CodeChangeBroadcast(code=request.code, user_id=sid)),
                skip_sid=sid,
            )

    async def language_change(self, sid: str, payload: Any) -> None:
        request = self._parse(LanguageChangeRequest, sid, payload)
        if request is None:
            return
        async with self._lock:
            session_id = self._joined_session(sid, SessionEvent.language_change)
            if session_id is None:
                return
            self.registry.update_language(session_id, request.language)
            await self.transport.broadcast_to_room(
                session_id,
                SessionEvent.language_change.value,
                dump_wire(LanguageChangeBroadcast(language=request.language, user_id=sid)),
                skip_sid=sid,
            )

    async def cursor_move(self, sid: str, payload: Any) -> None:
        request = self._parse(CursorMoveRequest, sid, payload)
        if request is None:
            return
        async with self._lock:
            session_id = self._joined_session(sid, SessionEvent.cursor_move)
            if session_id is None:
                return
            # Cursor positions are relayed, never stored.
            participant = self.registry.get_participant(session_id, sid)
            await self.transport.broadcast_to_room(
                session_id,
                SessionEvent.cursor_move.value,
                dump_wire(
                    CursorMoveBroadcast(
                        user_id=sid,
                        position=request.position,
                        user_name=participant.name if participant else None,
                    )
                ),
                skip_sid=sid,
            )

    # Internals
    def _joined_session(self, sid: str, event: SessionEvent) -> str | None:
        state = self._connections.get(sid)
        if state is None or state.session_id is None:
            logger.debug("Ignoring %s from unjoined connection %s", event.value, sid)
            return None
        return state.session_id

    def _parse(self, model: type, sid: str, payload: Any) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError:
            logger.debug("Dropping malformed %s payload from %s", model.__name__, sid)
            return None

    async def _leave_current(self, state: ConnectionState, *, leave_room: bool = True) -> None:
        session_id = state.session_id
        if session_id is None:
            return
        participant = self.registry.get_participant(session_id, state.sid)
        name = participant.name if participant else None
        self.registry.remove_participant(session_id, state.sid)
        state.session_id = None
        if leave_room:
            await self.transport.leave_room(state.sid, session_id)
        await self.transport.broadcast_to_room(
            session_id,
            SessionEvent.user_left.value,
            dump_wire(UserPresence(id=state.sid, name=name)),
            skip_sid=state.sid,
        )
