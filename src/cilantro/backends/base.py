"""Backend contract and the subprocess runner shared by CLI agent adapters."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import time
from typing import Protocol

from cilantro.config import DEFAULT_TIMEOUT_MS, BackendConfig
from cilantro.models import (
    EXIT_CODE_UNAVAILABLE,
    BackendCapabilities,
    ExecuteOptions,
    ExecutionResult,
)

logger = logging.getLogger(__name__)

# Fields tried in order when unwrapping a JSON response.
RESPONSE_FIELDS = ("result", "response", "output")
_TERMINATE_GRACE_SECONDS = 2


class Backend(Protocol):
    """Protocol implemented by every AI agent backend."""

    name: str

    def detect(self) -> bool:
        """Return True if the backend command is available."""

    def capabilities(self) -> BackendCapabilities:
        """Return the static capabilities of this backend."""

    def execute(self, options: ExecuteOptions) -> ExecutionResult:
        """Run a prompt and return the captured outcome."""

    def launch_config(self) -> BackendConfig:
        """Return the launch spec seeded into a new config file."""


class CliAgentBackend:
    """Base adapter that runs one external agent CLI per prompt.

    Subclasses only declare the launch command, fixed arguments, whether
    stdout is parsed as JSON, and the capability flags.
    """

    name: str = ""
    command: str = ""
    fixed_args: tuple[str, ...] = ()
    parse_json_output: bool = False
    can_read_codebase: bool = True
    supports_headless: bool = True
    supports_json_output: bool = False

    def detect(self) -> bool:
        try:
            return shutil.which(self.command) is not None
        except (OSError, ValueError):
            logger.debug("Detection failed for backend=%s", self.name, exc_info=True)
            return False

    def capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            can_read_codebase=self.can_read_codebase,
            supports_headless=self.supports_headless,
            supports_json_output=self.supports_json_output,
        )

    def launch_config(self) -> BackendConfig:
        """Default command and arguments seeded into the config file."""

        return BackendConfig(command=self.command, args=list(self.fixed_args))

    def build_args(self, prompt: str) -> list[str]:
        return [self.command, *self.fixed_args, prompt]

    def execute(self, options: ExecuteOptions) -> ExecutionResult:
        timeout_ms = options.timeout_ms or DEFAULT_TIMEOUT_MS
        run_args = self.build_args(options.prompt)
        logger.debug(
            "Spawning backend=%s cwd=%s timeout_ms=%d",
            self.name,
            options.working_directory,
            timeout_ms,
        )
        try:
            process = subprocess.Popen(  # noqa: S603
                run_args,
                cwd=options.working_directory,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, ValueError) as error:
            logger.warning("Backend %s failed to start: %s", self.name, error)
            return self._failure(str(error))

        start_monotonic = time.monotonic()
        try:
            stdout, stderr = process.communicate(timeout=timeout_ms / 1000)
        except subprocess.TimeoutExpired:
            elapsed = time.monotonic() - start_monotonic
            logger.warning(
                "Backend %s timed out after %.1fs, terminating",
                self.name,
                elapsed,
            )
            stdout, stderr = _terminate_process(process)
            return ExecutionResult(
                success=False,
                backend=self.name,
                output="",
                stdout=stdout,
                stderr=stderr,
                exit_code=EXIT_CODE_UNAVAILABLE,
                error=f"Backend '{self.name}' timed out after {timeout_ms} ms",
                timed_out=True,
            )

        exit_code = process.returncode
        if exit_code != 0:
            return ExecutionResult(
                success=False,
                backend=self.name,
                output="",
                stdout=stdout,
                stderr=stderr,
                exit_code=exit_code,
                error=stderr or "Execution failed",
            )
        return ExecutionResult(
            success=True,
            backend=self.name,
            output=self.normalize_output(stdout),
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
        )

    def normalize_output(self, stdout: str) -> str:
        if not self.parse_json_output:
            return stdout
        return extract_response(stdout)

    def _failure(self, message: str) -> ExecutionResult:
        return ExecutionResult(
            success=False,
            backend=self.name,
            output="",
            stdout="",
            stderr=message,
            exit_code=EXIT_CODE_UNAVAILABLE,
            error=message,
        )


def extract_response(stdout: str) -> str:
    """Return the first known response field from JSON stdout, else stdout."""

    try:
        payload = json.loads(stdout)
    except (ValueError, RecursionError):
        return stdout
    if not isinstance(payload, dict):
        return stdout
    for field in RESPONSE_FIELDS:
        value = payload.get(field)
        if value:
            return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    return stdout


def _terminate_process(process: subprocess.Popen[str]) -> tuple[str, str]:
    """Stop a running process and collect whatever output it produced."""

    try:
        process.terminate()
    except OSError:
        logger.debug("Terminate failed for pid=%s", process.pid, exc_info=True)
    try:
        return process.communicate(timeout=_TERMINATE_GRACE_SECONDS)
    except subprocess.TimeoutExpired:
        try:
            process.kill()
        except OSError:
            logger.debug("Kill failed for pid=%s", process.pid, exc_info=True)
    try:
        return process.communicate(timeout=_TERMINATE_GRACE_SECONDS)
    except subprocess.TimeoutExpired as error:
        # Grandchildren may still hold the pipes open.
        return _as_text(error.stdout), _as_text(error.stderr)


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
