"""Wire schemas for collaborative code sessions.

Attribute names are snake_case; the JSON exchanged with Socket.IO clients keeps
the camelCase field names (`sessionId`, `userName`, `userId`, `lineNumber`) via
aliases, so always serialize with `dump_wire`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionEvent(str, Enum):
    create = "session:create"
    join = "session:join"
    leave = "session:leave"
    joined = "session:joined"
    user_joined = "user:joined"
    user_left = "user:left"
    code_change = "code:change"
    language_change = "language:change"
    cursor_move = "cursor:move"


class WireModel(BaseModel):
    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True)


class CursorPosition(WireModel):
    line_number: int = Field(alias="lineNumber")
    column: int


class Participant(WireModel):
    id: str
    name: str
    # Part of the wire shape only; the registry never reads or writes it.
    cursor_position: Optional[CursorPosition] = Field(default=None, alias="cursorPosition")


class SessionState(WireModel):
    """Externally visible projection of a session (payload of `session:joined`)."""

    id: str
    code: str
    language: str
    participants: List[Participant] = Field(default_factory=list)


class CreateSessionReply(WireModel):
    session_id: str = Field(alias="sessionId")


class JoinSessionRequest(WireModel):
    session_id: str = Field(alias="sessionId", min_length=1)
    user_name: Optional[str] = Field(default=None, alias="userName")


class JoinSessionReply(WireModel):
    success: bool
    error: Optional[str] = None


class LeaveSessionReply(WireModel):
    success: bool


class UserPresence(WireModel):
    """Payload of `user:joined` and `user:left`."""

    id: str
    name: Optional[str] = None


class CodeChangeRequest(WireModel):
    code: str


class CodeChangeBroadcast(WireModel):
    code: str
    user_id: str = Field(alias="userId")


class LanguageChangeRequest(WireModel):
    language: str


class LanguageChangeBroadcast(WireModel):
    language: str
    user_id: str = Field(alias="userId")


class CursorMoveRequest(WireModel):
    position: CursorPosition


class CursorMoveBroadcast(WireModel):
    user_id: str = Field(alias="userId")
    position: CursorPosition
    user_name: Optional[str] = Field(default=None, alias="userName")


def dump_wire(model: BaseModel) -> dict[str, Any]:
    """Serialize a schema to the camelCase JSON shape clients expect."""

    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "CodeChangeBroadcast",
    "CodeChangeRequest",
    "CreateSessionReply",
    "CursorMoveBroadcast",
    "CursorMoveRequest",
    "CursorPosition",
    "JoinSessionReply",
    "JoinSessionRequest",
    "LanguageChangeBroadcast",
    "LanguageChangeRequest",
    "LeaveSessionReply",
    "Participant",
    "SessionEvent",
    "SessionState",
    "UserPresence",
    "dump_wire",
]
