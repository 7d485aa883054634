"""Error types raised by cilantro before any backend process is spawned."""

from __future__ import annotations

from pathlib import Path


class CilantroError(RuntimeError):
    """Base class for cilantro errors."""


class CilantroNotInitializedError(CilantroError):
    """No configuration file exists yet."""

    def __init__(self) -> None:
        super().__init__("Cilantro not initialized. Run 'cilantro init' first.")


class BackendNotFoundError(CilantroError):
    """The resolved backend name has no matching adapter."""

    def __init__(self, backend_name: str) -> None:
        super().__init__(
            f"Backend '{backend_name}' not found. Run 'cilantro init' to reconfigure.",
        )
        self.backend_name = backend_name


class InvalidConfigurationError(CilantroError):
    """Configuration file exists but cannot be parsed or validated."""

    def __init__(self, detail: str, *, path: Path | None = None) -> None:
        location = f" ({path})" if path is not None else ""
        super().__init__(f"Invalid cilantro configuration{location}: {detail}")
        self.detail = detail
        self.path = path


class NoBackendsDetectedError(CilantroError):
    """Initialization found no installed backend."""

    def __init__(self, candidates: list[str]) -> None:
        super().__init__(
            "No AI agent backend detected. Checked: " + ", ".join(candidates),
        )
        self.candidates = candidates


class BackendExecutionError(CilantroError):
    """Raised on demand for a failed execution result."""

    def __init__(self, backend_name: str, exit_code: int, stderr: str) -> None:
        super().__init__(
            f"Backend '{backend_name}' execution failed with exit code {exit_code}."
            f"\n\nDetails:\n{stderr}",
        )
        self.backend_name = backend_name
        self.exit_code = exit_code
        self.stderr = stderr
