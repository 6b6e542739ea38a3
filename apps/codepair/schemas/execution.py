from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SupportedLanguage(str, Enum):
    javascript = "javascript"
    python = "python"


class ExecutionResult(BaseModel):
    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True)

    output: str = ""
    error: Optional[str] = None
    execution_time: Optional[float] = Field(
        default=None,
        alias="executionTime",
        description="Wall-clock duration of the run in milliseconds.",
    )
