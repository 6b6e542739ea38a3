"""Client-side mirror of a session, driven purely by inbound broadcasts.

The projector never originates truth: it replays `session:joined` snapshots and
patches fields on deltas. Outbound edits made locally are applied by the caller
(the server never echoes them back).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from codepair.schemas.session import (
    CodeChangeBroadcast,
    CursorMoveBroadcast,
    CursorPosition,
    LanguageChangeBroadcast,
    Participant,
    SessionEvent,
    SessionState,
    UserPresence,
)

logger = logging.getLogger(__name__)


@dataclass
class RemoteCursor:
    position: CursorPosition
    user_name: Optional[str] = None


@dataclass
class ClientStateProjector:
    """Local view state: buffer, language, participants and remote cursors."""

    session_id: Optional[str] = None
    code: Optional[str] = None
    language: Optional[str] = None
    participants: List[Participant] = field(default_factory=list)
    remote_cursors: Dict[str, RemoteCursor] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._handlers: dict[str, Callable[[Any], None]] = {
            SessionEvent.joined.value: self.on_session_joined,
            SessionEvent.code_change.value: self.on_code_change,
            SessionEvent.language_change.value: self.on_language_change,
            SessionEvent.user_joined.value: self.on_user_joined,
            SessionEvent.user_left.value: self.on_user_left,
            SessionEvent.cursor_move.value: self.on_cursor_move,
        }

    @property
    def in_session(self) -> bool:
        return self.session_id is not None

    @property
    def participant_ids(self) -> list[str]:
        return [p.id for p in self.participants]

    def apply(self, event: str, payload: Any) -> bool:
        """Dispatch one inbound event; returns False when it was not applied."""

        handler = self._handlers.get(event)
        if handler is None:
            return False
        try:
            handler(payload)
        except ValidationError:
            logger.debug("Ignoring malformed %s payload", event)
            return False
        return True

    def reset(self) -> None:
        self.session_id = None
        self.code = None
        self.language = None
        self.participants = []
        self.remote_cursors = {}

    def on_session_joined(self, payload: Any) -> None:
        state = SessionState.model_validate(payload)
        self.session_id = state.id
        self.code = state.code
        self.language = state.language
        self.participants = list(state.participants)
        # Resync: drop cursors for anyone who is no longer a member.
        live = set(self.participant_ids)
        self.remote_cursors = {
            uid: cursor for uid, cursor in self.remote_cursors.items() if uid in live
        }

    def on_code_change(self, payload: Any) -> None:
        change = CodeChangeBroadcast.model_validate(payload)
        if self.in_session:
            self.code = change.code

    def on_language_change(self, payload: Any) -> None:
        change = LanguageChangeBroadcast.model_validate(payload)
        if self.in_session:
            self.language = change.language

    def on_user_joined(self, payload: Any) -> None:
        user = UserPresence.model_validate(payload)
        joined = Participant(id=user.id, name=user.name or "")
        for index, existing in enumerate(self.participants):
            if existing.id == joined.id:
                self.participants[index] = joined
                return
        self.participants.append(joined)

    def on_user_left(self, payload: Any) -> None:
        user = UserPresence.model_validate(payload)
        self.participants = [p for p in self.participants if p.id != user.id]
        self.remote_cursors.pop(user.id, None)

    def on_cursor_move(self, payload: Any) -> None:
        move = CursorMoveBroadcast.model_validate(payload)
        self.remote_cursors[move.user_id] = RemoteCursor(
            position=move.position, user_name=move.user_name
        )
