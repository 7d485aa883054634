"""Prompt execution entry point: resolve config and backend, then delegate."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from cilantro.backends.registry import BackendRegistry, default_registry
from cilantro.config import CilantroConfig, load_config
from cilantro.errors import BackendNotFoundError, CilantroNotInitializedError
from cilantro.models import ExecuteOptions, ExecutionResult

logger = logging.getLogger(__name__)

BACKEND_ENV_VAR = "CILANTRO_BACKEND"


def resolve_backend_name(
    *,
    explicit: str | None,
    config: CilantroConfig,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the backend name: explicit, then environment, then config default."""

    env = os.environ if environ is None else environ
    return explicit or env.get(BACKEND_ENV_VAR) or config.default_backend


def execute_prompt(  # noqa: PLR0913
    prompt: str,
    working_directory: str | Path,
    *,
    backend: str | None = None,
    timeout_ms: int | None = None,
    registry: BackendRegistry | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ExecutionResult:
    """Execute a prompt with the configured backend.

    Raises ``CilantroNotInitializedError`` when no config file exists and
    ``BackendNotFoundError`` when the resolved backend is unknown. Failures
    of the backend process itself are returned in the result.
    """

    config = load_config(config_path)
    if config is None:
        raise CilantroNotInitializedError()

    backend_name = resolve_backend_name(explicit=backend, config=config, environ=environ)
    selected = (registry or default_registry()).get(backend_name)
    if selected is None:
        raise BackendNotFoundError(backend_name)

    effective_timeout = timeout_ms or config.timeout
    logger.debug("Executing prompt with backend=%s timeout_ms=%d", backend_name, effective_timeout)
    return selected.execute(
        ExecuteOptions(
            prompt=prompt,
            working_directory=working_directory,
            timeout_ms=effective_timeout,
        ),
    )
