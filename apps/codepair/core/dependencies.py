"""Central dependency providers (FastAPI + Socket.IO wiring).

The registry and protocol handler are process-scoped: constructed once, shared
by the Socket.IO server and the HTTP routes, and swappable in tests through
`app.dependency_overrides` or `cache_clear()`.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from codepair.core.settings import settings

if TYPE_CHECKING:
    import socketio

    from codepair.services.execution import ExecutionService
    from codepair.services.session_protocol import SessionProtocolHandler
    from codepair.services.session_registry import SessionRegistry


@lru_cache(maxsize=1)
def get_session_registry() -> SessionRegistry:
    from codepair.services.session_registry import SessionRegistry

    return SessionRegistry(
        default_code=settings.default_code,
        default_language=settings.default_language,
    )


@lru_cache(maxsize=1)
def get_socketio_server() -> socketio.AsyncServer:
    from codepair.realtime.socketio import create_socketio_server

    return create_socketio_server(settings.cors_allow_origins)


@lru_cache(maxsize=1)
def get_session_protocol_handler() -> SessionProtocolHandler:
    from codepair.realtime.socketio import SocketIOTransport
    from codepair.services.session_protocol import SessionProtocolHandler

    return SessionProtocolHandler(
        get_session_registry(),
        SocketIOTransport(get_socketio_server()),
        session_id_length=settings.session_id_length,
        creator_default_name=settings.creator_default_name,
        joiner_default_name=settings.joiner_default_name,
    )


@lru_cache(maxsize=1)
def get_execution_service() -> ExecutionService:
    from codepair.services.execution import ExecutionService

    # Runtimes are registered by the embedding application.
    return ExecutionService(timeout_seconds=settings.execution_timeout_seconds)
