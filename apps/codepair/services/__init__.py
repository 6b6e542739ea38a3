"""Service layer package.

Keep imports lazy so importing `codepair.services` does not pull in every
service module. Common symbols are still reachable from `codepair.services`
thanks to `__getattr__` proxies.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ClientStateProjector",
    "ExecutionService",
    "SessionProtocolHandler",
    "SessionRegistry",
]


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name == "SessionRegistry":
        from .session_registry import SessionRegistry

        return SessionRegistry
    if name == "SessionProtocolHandler":
        from .session_protocol import SessionProtocolHandler

        return SessionProtocolHandler
    if name == "ClientStateProjector":
        from .client_projector import ClientStateProjector

        return ClientStateProjector
    if name == "ExecutionService":
        from .execution import ExecutionService

        return ExecutionService
    raise AttributeError(name)
