"""Shared test fixtures."""

from __future__ import annotations

import os
import stat
import sys
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from cilantro.backends.registry import BackendRegistry
from cilantro.config import BackendConfig, CilantroConfig, get_config_path, save_config
from cilantro.testing import MockBackend

FakeAgentWriter = Callable[[str, str], Path]


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Point the per-user config location at a temp dir and clear overrides."""

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("CILANTRO_BACKEND", raising=False)
    return home


@pytest.fixture()
def config_path(isolated_home: Path) -> Path:
    path = get_config_path()
    assert path.parent == isolated_home
    return path


@pytest.fixture()
def mock_backend() -> MockBackend:
    return MockBackend()


@pytest.fixture()
def mock_registry(mock_backend: MockBackend) -> BackendRegistry:
    return BackendRegistry([mock_backend])


@pytest.fixture()
def mock_config(config_path: Path) -> CilantroConfig:
    """Initialize the config with the mock backend as default."""

    config = CilantroConfig(
        default_backend="mock",
        backends={"mock": BackendConfig(command="mock", args=[])},
        timeout=120_000,
    )
    save_config(config, config_path)
    return config


@pytest.fixture()
def bin_dir(tmp_path: Path) -> Path:
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture()
def fake_agent(bin_dir: Path, monkeypatch) -> FakeAgentWriter:
    """Return a writer that installs a fake agent executable on PATH.

    The body is Python source; ``sys`` and ``json`` are already imported and
    ``PROMPT`` holds the last command-line argument.
    """

    if os.name == "nt":
        pytest.skip("fake agent launchers are POSIX shell scripts")
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def _write(name: str, body: str) -> Path:
        implementation = bin_dir / f"{name}_impl.py"
        header = (
            "import json\nimport os\nimport sys\nimport time\n"
            "PROMPT = sys.argv[-1] if len(sys.argv) > 1 else ''\n"
        )
        implementation.write_text(header + textwrap.dedent(body).strip() + "\n", "utf-8")
        launcher = bin_dir / name
        launcher.write_text(
            f'#!/bin/sh\nexec "{sys.executable}" "{implementation}" "$@"\n',
            "utf-8",
        )
        launcher.chmod(launcher.stat().st_mode | stat.S_IXUSR)
        return launcher

    return _write
