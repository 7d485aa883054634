"""Result and capability records shared by all backends."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cilantro.errors import BackendExecutionError

# Reported when the process could not be spawned or had to be killed.
EXIT_CODE_UNAVAILABLE = -1


@dataclass(frozen=True, slots=True)
class BackendCapabilities:
    """Static description of what a backend can do."""

    can_read_codebase: bool
    supports_headless: bool
    supports_json_output: bool


@dataclass(slots=True)
class ExecuteOptions:
    """Inputs for one backend execution."""

    prompt: str
    working_directory: str | Path
    timeout_ms: int | None = None


@dataclass(slots=True)
class ExecutionResult:
    """Outcome of one backend execution.

    ``output`` is the normalized response; ``stdout`` and ``stderr`` are the
    raw process streams. ``error`` is set exactly when ``success`` is false.
    """

    success: bool
    backend: str
    output: str
    stdout: str
    stderr: str
    exit_code: int
    error: str | None = None
    timed_out: bool = False

    def raise_for_status(self) -> ExecutionResult:
        """Raise ``BackendExecutionError`` if the execution failed."""

        if not self.success:
            raise BackendExecutionError(
                self.backend,
                self.exit_code,
                self.stderr or self.error or "",
            )
        return self


@dataclass(slots=True)
class DetectedBackend:
    """One row of the backend detection report."""

    name: str
    installed: bool
    capabilities: BackendCapabilities
