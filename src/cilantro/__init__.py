"""Cilantro: one interface for locally installed AI agent CLIs."""

from cilantro.backends import Backend, BackendRegistry, default_registry
from cilantro.config import (
    BackendConfig,
    CilantroConfig,
    get_config_path,
    is_initialized,
    load_config,
    save_config,
)
from cilantro.errors import (
    BackendExecutionError,
    BackendNotFoundError,
    CilantroError,
    CilantroNotInitializedError,
    InvalidConfigurationError,
    NoBackendsDetectedError,
)
from cilantro.models import (
    EXIT_CODE_UNAVAILABLE,
    BackendCapabilities,
    DetectedBackend,
    ExecuteOptions,
    ExecutionResult,
)
from cilantro.runtime import execute_prompt

__version__ = "0.1.0"

__all__ = [
    "EXIT_CODE_UNAVAILABLE",
    "Backend",
    "BackendCapabilities",
    "BackendConfig",
    "BackendExecutionError",
    "BackendNotFoundError",
    "BackendRegistry",
    "CilantroConfig",
    "CilantroError",
    "CilantroNotInitializedError",
    "DetectedBackend",
    "ExecuteOptions",
    "ExecutionResult",
    "InvalidConfigurationError",
    "NoBackendsDetectedError",
    "__version__",
    "default_registry",
    "execute_prompt",
    "get_config_path",
    "is_initialized",
    "load_config",
    "save_config",
]
