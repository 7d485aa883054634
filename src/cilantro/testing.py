"""In-process test doubles for code built on cilantro."""

from __future__ import annotations

from dataclasses import replace

from cilantro.config import BackendConfig
from cilantro.models import BackendCapabilities, ExecuteOptions, ExecutionResult


class MockBackend:
    """Backend that returns canned results and records every call."""

    def __init__(
        self,
        name: str = "mock",
        *,
        installed: bool = True,
        capabilities: BackendCapabilities | None = None,
    ) -> None:
        self.name = name
        self.installed = installed
        self._capabilities = capabilities or BackendCapabilities(
            can_read_codebase=True,
            supports_headless=True,
            supports_json_output=True,
        )
        self._responses: dict[str, ExecutionResult] = {}
        self._calls: list[ExecuteOptions] = []

    def detect(self) -> bool:
        return self.installed

    def capabilities(self) -> BackendCapabilities:
        return replace(self._capabilities)

    def launch_config(self) -> BackendConfig:
        return BackendConfig(command=self.name)

    def mock_response(  # noqa: PLR0913
        self,
        prompt: str,
        *,
        output: str = "",
        success: bool = True,
        stdout: str = "",
        stderr: str = "",
        exit_code: int = 0,
        error: str | None = None,
    ) -> None:
        """Return this result when ``prompt`` is executed."""

        self._responses[prompt] = ExecutionResult(
            success=success,
            backend=self.name,
            output=output,
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
            error=error,
        )

    def mock_error(self, prompt: str, error: str, exit_code: int = 1) -> None:
        """Simulate a failed execution for ``prompt``."""

        self._responses[prompt] = ExecutionResult(
            success=False,
            backend=self.name,
            output="",
            stdout="",
            stderr=error,
            exit_code=exit_code,
            error=error,
        )

    @property
    def calls(self) -> list[ExecuteOptions]:
        return list(self._calls)

    def clear_calls(self) -> None:
        self._calls.clear()

    def execute(self, options: ExecuteOptions) -> ExecutionResult:
        self._calls.append(options)
        result = self._responses.get(options.prompt)
        if result is not None:
            return replace(result)
        text = f"Mock response for: {options.prompt}"
        return ExecutionResult(
            success=True,
            backend=self.name,
            output=text,
            stdout=text,
            stderr="",
            exit_code=0,
        )
