"""In-memory registry of live collaborative code sessions.

The registry is the single source of truth for session state. It performs no
I/O and is mutated only through its methods, which keeps the invariant that a
session exists exactly while it has at least one participant.

Every method holds one coarse lock for its whole duration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from threading import RLock
from typing import Dict, Optional

from codepair.core.exceptions import DuplicateSessionError
from codepair.core.utils import utcnow
from codepair.schemas.session import Participant, SessionState

DEFAULT_CODE = "// Start coding here...\n"
DEFAULT_LANGUAGE = "javascript"


@dataclass
class Session:
    """One shared coding room."""

    id: str
    code: str = DEFAULT_CODE
    language: str = DEFAULT_LANGUAGE
    created_at: datetime = field(default_factory=utcnow)
    participants: Dict[str, Participant] = field(default_factory=dict)


class SessionRegistry:
    """Owns every Session and Participant record in the process."""

    def __init__(
        self,
        *,
        default_code: str = DEFAULT_CODE,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._default_code = default_code
        self._default_language = default_language
        self._lock = RLock()
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def session_count(self) -> int:
        return len(self)

    def create_session(self, session_id: str) -> Session:
        """Insert an empty session with default code and language.

        Callers must add a participant straight away (see `open_session`);
        the registry only guarantees uniqueness of the id.
        """

        with self._lock:
            if session_id in self._sessions:
                raise DuplicateSessionError(session_id)
            session = Session(
                id=session_id,
                code=self._default_code,
                language=self._default_language,
            )
            self._sessions[session_id] = session
            return session

    def open_session(self, session_id: str, participant: Participant) -> Session:
        """Create a session and seat its first participant in one step."""

        with self._lock:
            session = self.create_session(session_id)
            session.participants[participant.id] = participant
            return session

    def get_session(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def add_participant(self, session_id: str, participant: Participant) -> bool:
        """Insert or overwrite `participant`; False when the session is absent."""

        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            session.participants[participant.id] = participant
            return True

    def remove_participant(self, session_id: str, participant_id: str) -> bool:
        """Remove a participant, deleting the session once it is empty.

        Returns False when the session is absent or the participant was not in it.
        """

        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            removed = session.participants.pop(participant_id, None) is not None
            if not session.participants:
                del self._sessions[session_id]
            return removed

    def update_code(self, session_id: str, code: str) -> bool:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            session.code = code
            return True

    def update_language(self, session_id: str, language: str) -> bool:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            session.language = language
            return True

    def get_session_state(self, session_id: str) -> Optional[SessionState]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            return SessionState(
                id=session.id,
                code=session.code,
                language=session.language,
                participants=[
                    p.model_copy(deep=True) for p in session.participants.values()
                ],
            )

    def get_participant(self, session_id: str, participant_id: str) -> Optional[Participant]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            return session.participants.get(participant_id)
