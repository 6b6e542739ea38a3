from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Unified application settings for codepair.

    Loads from env with support for repo ".env" files. Avoids manual load_dotenv().
    """

    _app_env = (os.getenv("APP_ENV") or "").strip().lower()
    _env_files = (
        []
        if _app_env in {"test", "ci"}
        else [
            str((Path(__file__).resolve().parents[1] / ".env")),  # apps/codepair/.env
            str((Path(__file__).resolve().parents[3] / ".env")),  # repo root .env
        ]
    )

    model_config = SettingsConfigDict(
        env_file=_env_files,
        case_sensitive=False,
        extra="ignore",
    )

    # --- App / Core ---
    app_env: str = Field(default="dev", alias="APP_ENV")
    app_name: str = Field(default="codepair", alias="APP_NAME")
    debug: bool = Field(default=False, alias="DEBUG")
    # Logging
    log_level: str | None = Field(default=None, alias="CODEPAIR_LOG_LEVEL")
    log_level_fallback: str | None = Field(default=None, alias="LOG_LEVEL")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3001, alias="PORT", ge=1, le=65535)

    # Vite dev server and the CRA-style fallback port.
    cors_allow_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        alias="CORS_ALLOW_ORIGINS",
    )

    # --- Realtime ---
    socketio_path: str = Field(default="socket.io", alias="SOCKETIO_PATH")
    client_ack_timeout_seconds: float = Field(
        default=5.0, alias="CLIENT_ACK_TIMEOUT_SECONDS", gt=0
    )

    # --- Sessions ---
    session_id_length: int = Field(default=10, alias="SESSION_ID_LENGTH", ge=6, le=64)
    default_code: str = Field(default="// Start coding here...\n", alias="DEFAULT_CODE")
    default_language: str = Field(default="javascript", alias="DEFAULT_LANGUAGE")
    creator_default_name: str = Field(default="Interviewer", alias="CREATOR_DEFAULT_NAME")
    joiner_default_name: str = Field(default="Candidate", alias="JOINER_DEFAULT_NAME")

    # --- Code execution collaborator ---
    execution_timeout_seconds: float = Field(
        default=5.0,
        alias="EXECUTION_TIMEOUT_SECONDS",
        gt=0,
        description="Wall-clock budget for a single run before it is reported as timed out.",
    )


settings = Settings()
