"""Pydantic schemas shared across the app."""

from .execution import ExecutionResult, SupportedLanguage
from .session import (
    CodeChangeBroadcast,
    CodeChangeRequest,
    CreateSessionReply,
    CursorMoveBroadcast,
    CursorMoveRequest,
    CursorPosition,
    JoinSessionReply,
    JoinSessionRequest,
    LanguageChangeBroadcast,
    LanguageChangeRequest,
    LeaveSessionReply,
    Participant,
    SessionEvent,
    SessionState,
    UserPresence,
    dump_wire,
)

__all__ = [
    "CodeChangeBroadcast",
    "CodeChangeRequest",
    "CreateSessionReply",
    "CursorMoveBroadcast",
    "CursorMoveRequest",
    "CursorPosition",
    "ExecutionResult",
    "JoinSessionReply",
    "JoinSessionRequest",
    "LanguageChangeBroadcast",
    "LanguageChangeRequest",
    "LeaveSessionReply",
    "Participant",
    "SessionEvent",
    "SessionState",
    "SupportedLanguage",
    "UserPresence",
    "dump_wire",
]
