"""Controllers behind the cilantro CLI commands."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from cilantro.backends.registry import BackendRegistry, default_registry
from cilantro.config import (
    build_default_config,
    get_config_path,
    is_initialized,
    load_config,
    save_config,
)
from cilantro.errors import CilantroNotInitializedError, NoBackendsDetectedError
from cilantro.models import ExecutionResult
from cilantro.runtime import execute_prompt, resolve_backend_name

INSTALL_HINTS = (
    "- Claude Code: https://docs.anthropic.com/claude-code",
    "- Codex CLI: https://github.com/openai/codex",
    "- Cursor Agent: https://cursor.com",
)


@dataclass(slots=True)
class InitCommand:
    """CLI input for configuration initialization."""

    config_path: Path | None = None


@dataclass(slots=True)
class BackendsCommand:
    """CLI input for the backend listing."""

    config_path: Path | None = None


@dataclass(slots=True)
class RunPromptCommand:
    """CLI input for one prompt execution."""

    prompt: str
    backend: str | None = None
    timeout_ms: int | None = None
    working_directory: Path | None = None
    config_path: Path | None = None


@dataclass(slots=True)
class CommandOutput:
    """Lines to print for a command, split by stream."""

    lines: list[str] = field(default_factory=list)
    error_lines: list[str] = field(default_factory=list)
    success: bool = True


class CilantroCliController:
    """Run CLI commands against a backend registry."""

    def __init__(self, registry: BackendRegistry | None = None) -> None:
        self.registry = registry or default_registry()

    def init(self, command: InitCommand) -> CommandOutput:
        detected = self.registry.detect_all()
        lines = ["Detecting AI agent backends...", "", "Detected backends:"]
        for entry in detected:
            marker = "[x]" if entry.installed else "[ ]"
            label = "" if entry.installed else " (not found)"
            lines.append(f"  {marker} {entry.name}{label}")

        try:
            config = build_default_config(detected=detected, backends=self.registry.all())
        except NoBackendsDetectedError:
            return CommandOutput(
                lines=lines,
                error_lines=[
                    "",
                    "No AI agent backend detected. Please install one of:",
                    *INSTALL_HINTS,
                    "",
                    "Then run 'cilantro init' again.",
                ],
                success=False,
            )

        config_path = command.config_path or get_config_path()
        save_config(config, config_path)
        lines.extend(
            [
                "",
                f"Cilantro initialized! Default backend: {config.default_backend}",
                f"Configuration written to {config_path}",
            ],
        )
        return CommandOutput(lines=lines)

    def backends(self, command: BackendsCommand) -> CommandOutput:
        if not is_initialized(command.config_path):
            raise CilantroNotInitializedError()
        config = load_config(command.config_path)
        if config is None:
            raise CilantroNotInitializedError()
        active = resolve_backend_name(explicit=None, config=config)

        lines = ["Available backends:", ""]
        for entry in self.registry.detect_all():
            status = "Installed" if entry.installed else "Not found"
            marker = " (default)" if entry.name == active else ""
            caps = entry.capabilities
            lines.extend(
                [
                    f"{entry.name}{marker}",
                    f"  Status: {status}",
                    "  Capabilities:",
                    f"    - Read codebase: {_yes_no(caps.can_read_codebase)}",
                    f"    - Headless: {_yes_no(caps.supports_headless)}",
                    f"    - JSON output: {_yes_no(caps.supports_json_output)}",
                    "",
                ],
            )
        return CommandOutput(lines=lines)

    def run(self, command: RunPromptCommand) -> ExecutionResult:
        return execute_prompt(
            command.prompt,
            command.working_directory or Path(os.getcwd()),
            backend=command.backend,
            timeout_ms=command.timeout_ms,
            registry=self.registry,
            config_path=command.config_path,
        )


def exit_code_for(result: ExecutionResult) -> int:
    """Process exit code for the CLI: 0, the backend's own code, or 1."""

    if result.success:
        return 0
    return result.exit_code if result.exit_code > 0 else 1


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"
