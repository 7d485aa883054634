"""Built-in AI agent backends."""

from cilantro.backends.base import (
    DEFAULT_TIMEOUT_MS,
    RESPONSE_FIELDS,
    Backend,
    CliAgentBackend,
    extract_response,
)
from cilantro.backends.claude import ClaudeBackend
from cilantro.backends.codex import CodexBackend
from cilantro.backends.cursor import CursorBackend
from cilantro.backends.registry import BackendRegistry, default_registry

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "RESPONSE_FIELDS",
    "Backend",
    "BackendRegistry",
    "ClaudeBackend",
    "CliAgentBackend",
    "CodexBackend",
    "CursorBackend",
    "default_registry",
    "extract_response",
]
