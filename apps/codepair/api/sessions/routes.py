from __future__ import annotations

from fastapi import APIRouter, Depends

from codepair.core.dependencies import get_session_registry
from codepair.core.exceptions import SessionNotFoundError
from codepair.schemas.session import SessionState
from codepair.services.session_registry import SessionRegistry

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get(
    "/{session_id}",
    response_model=SessionState,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
def get_session_state(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionState:
    """Read-only snapshot used by share links to check a session is still live."""
    state = registry.get_session_state(session_id)
    if state is None:
        raise SessionNotFoundError(session_id)
    return state
