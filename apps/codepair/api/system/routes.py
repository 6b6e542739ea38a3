from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from codepair.core.dependencies import get_execution_service, get_session_registry
from codepair.services.execution import ExecutionService
from codepair.services.session_registry import SessionRegistry

router = APIRouter(tags=["system"])


@router.get("/healthz")
def healthz(
    registry: SessionRegistry = Depends(get_session_registry),
    execution: ExecutionService = Depends(get_execution_service),
) -> dict[str, Any]:
    return {
        "ok": True,
        "sessions": registry.session_count(),
        "runtimes": execution.runtime_status(),
    }


@router.get("/health")
def health() -> dict[str, str]:
    """Plain liveness probe kept for load balancers that expect `status`."""
    return {"status": "ok"}
