"""Boundary to the sandboxed code-execution collaborator.

Runtimes themselves (sandboxing, output capture) live outside this package; a
runtime only has to satisfy `CodeRuntime`. `ExecutionService` gates on
readiness and enforces the wall-clock budget. Failures come back as an
`ExecutionResult`, never as an exception.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, Protocol, runtime_checkable

from codepair.schemas.execution import ExecutionResult, SupportedLanguage

logger = logging.getLogger(__name__)

EXECUTION_TIMEOUT_MESSAGE = "Execution timeout"


@runtime_checkable
class CodeRuntime(Protocol):
    language: SupportedLanguage

    def is_ready(self) -> bool: ...

    async def execute(self, code: str) -> ExecutionResult: ...


class ExecutionService:
    def __init__(self, runtimes: Iterable[CodeRuntime] = (), *, timeout_seconds: float = 5.0) -> None:
        self._runtimes: dict[SupportedLanguage, CodeRuntime] = {}
        self.timeout_seconds = timeout_seconds
        for runtime in runtimes:
            self.register(runtime)

    def register(self, runtime: CodeRuntime) -> None:
        self._runtimes[SupportedLanguage(runtime.language)] = runtime

    def is_ready(self, language: str) -> bool:
        try:
            runtime = self._runtimes.get(SupportedLanguage(language))
        except ValueError:
            return False
        return runtime is not None and runtime.is_ready()

    def runtime_status(self) -> dict[str, bool]:
        return {lang.value: self.is_ready(lang.value) for lang in SupportedLanguage}

    async def execute(self, code: str, language: str) -> ExecutionResult:
        if not self.is_ready(language):
            return ExecutionResult(
                output="", error=f"{language} runtime is not ready yet. Please wait..."
            )

        runtime = self._runtimes[SupportedLanguage(language)]
        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(runtime.execute(code), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            result = ExecutionResult(output="", error=EXECUTION_TIMEOUT_MESSAGE)
        except Exception as exc:
            logger.warning("%s runtime failed: %s", language, exc)
            result = ExecutionResult(output="", error=str(exc) or exc.__class__.__name__)

        if result.execution_time is None:
            elapsed_ms = (time.perf_counter() - started) * 1000.0
            result = result.model_copy(update={"execution_time": elapsed_ms})
        return result
