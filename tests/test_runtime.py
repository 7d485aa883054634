from __future__ import annotations

from pathlib import Path

import allure
import pytest

from cilantro.backends import BackendRegistry
from cilantro.config import CilantroConfig, save_config
from cilantro.errors import (
    BackendExecutionError,
    BackendNotFoundError,
    CilantroNotInitializedError,
    InvalidConfigurationError,
)
from cilantro.runtime import BACKEND_ENV_VAR, execute_prompt, resolve_backend_name
from cilantro.testing import MockBackend

pytestmark = [
    allure.epic("Prompt Execution"),
    allure.feature("Backend Resolution"),
]


def test_successful_run(mock_backend, mock_registry, mock_config, tmp_path: Path) -> None:
    mock_backend.mock_response("What is 2+2?", output="2+2 = 4", exit_code=0)

    result = execute_prompt("What is 2+2?", tmp_path, registry=mock_registry)

    assert result.success is True
    assert result.output == "2+2 = 4"
    assert result.backend == "mock"
    assert result.exit_code == 0


def test_backend_failure_is_returned(mock_backend, mock_registry, mock_config) -> None:
    mock_backend.mock_error("bad prompt", "Execution failed", 1)

    result = execute_prompt("bad prompt", ".", registry=mock_registry)

    assert result.success is False
    assert result.error == "Execution failed"
    assert result.exit_code == 1
    with pytest.raises(BackendExecutionError, match="exit code 1"):
        result.raise_for_status()


def test_not_initialized_touches_no_backend(mock_backend, mock_registry) -> None:
    with pytest.raises(CilantroNotInitializedError, match="cilantro init"):
        execute_prompt("test", ".", registry=mock_registry)

    assert mock_backend.calls == []


def test_invalid_config_is_raised(mock_backend, mock_registry, config_path: Path) -> None:
    config_path.write_text("[]", "utf-8")

    with pytest.raises(InvalidConfigurationError):
        execute_prompt("test", ".", registry=mock_registry)
    assert mock_backend.calls == []


def test_unknown_backend_is_named(mock_backend, mock_registry, mock_config) -> None:
    with pytest.raises(BackendNotFoundError, match="'gemini'") as error_info:
        execute_prompt("test", ".", backend="gemini", registry=mock_registry)

    assert error_info.value.backend_name == "gemini"
    assert mock_backend.calls == []


def test_unknown_config_default_is_named(mock_registry, config_path: Path) -> None:
    save_config(CilantroConfig(default_backend="missing"), config_path)

    with pytest.raises(BackendNotFoundError, match="'missing'"):
        execute_prompt("test", ".", registry=mock_registry)


def test_priority_explicit_then_env_then_config(config_path: Path, monkeypatch) -> None:
    backends = {name: MockBackend(name) for name in ("explicit", "env", "config")}
    registry = BackendRegistry(backends.values())
    save_config(CilantroConfig(default_backend="config"), config_path)
    monkeypatch.setenv(BACKEND_ENV_VAR, "env")

    assert execute_prompt("p", ".", backend="explicit", registry=registry).backend == "explicit"
    assert execute_prompt("p", ".", registry=registry).backend == "env"
    monkeypatch.delenv(BACKEND_ENV_VAR)
    assert execute_prompt("p", ".", registry=registry).backend == "config"
    assert [len(backend.calls) for backend in backends.values()] == [1, 1, 1]


def test_resolve_backend_name_ignores_empty_values() -> None:
    config = CilantroConfig(default_backend="claude")

    empty_env = {BACKEND_ENV_VAR: ""}
    codex_env = {BACKEND_ENV_VAR: "codex"}

    assert resolve_backend_name(explicit="", config=config, environ=empty_env) == "claude"
    assert resolve_backend_name(explicit=None, config=config, environ=codex_env) == "codex"


def test_explicit_override_selects_backend(mock_backend, mock_registry, config_path: Path) -> None:
    save_config(CilantroConfig(default_backend="claude"), config_path)
    mock_backend.mock_response("test", output="response")

    result = execute_prompt("test", ".", backend="mock", registry=mock_registry)

    assert result.success is True
    assert result.backend == "mock"


def test_timeout_defaults_to_config(mock_backend, mock_registry, config_path: Path) -> None:
    save_config(CilantroConfig(default_backend="mock", timeout=45_000), config_path)

    execute_prompt("test", ".", registry=mock_registry)
    execute_prompt("test", ".", timeout_ms=60_000, registry=mock_registry)

    assert [call.timeout_ms for call in mock_backend.calls] == [45_000, 60_000]


def test_prompt_and_working_directory_pass_through(
    mock_backend,
    mock_registry,
    mock_config,
) -> None:
    prompt = "Review this diff:\n```\n+added line\n```"

    execute_prompt(prompt, "/tmp/test", registry=mock_registry)

    [call] = mock_backend.calls
    assert call.prompt == prompt
    assert call.working_directory == "/tmp/test"


def test_unconfigured_prompt_gets_default_mock_response(
    mock_backend,
    mock_registry,
    mock_config,
) -> None:
    result = execute_prompt("anything", ".", registry=mock_registry)

    assert result.output == "Mock response for: anything"
    mock_backend.clear_calls()
    assert mock_backend.calls == []


def test_environ_mapping_overrides_process_environment(
    mock_registry,
    mock_config,
    monkeypatch,
) -> None:
    monkeypatch.setenv(BACKEND_ENV_VAR, "claude")

    result = execute_prompt("p", ".", registry=mock_registry, environ={})

    assert result.backend == "mock"
