"""Persistent configuration stored in ``~/.cilantro.json``."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from cilantro.errors import InvalidConfigurationError, NoBackendsDetectedError

if TYPE_CHECKING:
    from cilantro.backends.base import Backend
    from cilantro.models import DetectedBackend

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".cilantro.json"
DEFAULT_TIMEOUT_MS = 120_000


@dataclass(slots=True)
class BackendConfig:
    """Launch spec for one backend."""

    command: str
    args: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {"command": self.command, "args": list(self.args)}


@dataclass(slots=True)
class CilantroConfig:
    """Contents of the configuration file."""

    default_backend: str
    backends: dict[str, BackendConfig] = field(default_factory=dict)
    timeout: int = DEFAULT_TIMEOUT_MS

    def to_dict(self) -> dict[str, object]:
        """Serialize using the on-disk JSON key names."""

        return {
            "defaultBackend": self.default_backend,
            "backends": {name: spec.to_dict() for name, spec in self.backends.items()},
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, payload: object) -> CilantroConfig:
        """Validate a decoded JSON document and build the config."""

        if not isinstance(payload, dict):
            raise ValueError("Config must be a JSON object")
        default_backend = payload.get("defaultBackend")
        if not isinstance(default_backend, str) or not default_backend:
            raise ValueError("Config missing 'defaultBackend' field")
        raw_backends = payload.get("backends")
        if not isinstance(raw_backends, dict):
            raise ValueError("Config missing or invalid 'backends' field")
        timeout = payload.get("timeout")
        if isinstance(timeout, bool) or not isinstance(timeout, int | float):
            raise ValueError("Config missing or invalid 'timeout' field")
        return cls(
            default_backend=default_backend,
            backends={
                str(name): _parse_backend_config(str(name), spec)
                for name, spec in raw_backends.items()
            },
            timeout=int(timeout),
        )


def get_config_path() -> Path:
    """Return the path of the per-user configuration file."""

    return Path.home() / CONFIG_FILE_NAME


def load_config(path: Path | None = None) -> CilantroConfig | None:
    """Load the configuration, or return None if the file does not exist.

    Raises ``InvalidConfigurationError`` when the file exists but is not
    valid JSON or lacks a required field.
    """

    config_path = path or get_config_path()
    if not config_path.exists():
        return None
    try:
        payload = json.loads(config_path.read_text("utf-8"))
    except json.JSONDecodeError as error:
        raise InvalidConfigurationError(
            f"Invalid JSON in config file: {error}",
            path=config_path,
        ) from error
    except (UnicodeDecodeError, RecursionError) as error:
        raise InvalidConfigurationError(
            f"Unreadable config file: {error}",
            path=config_path,
        ) from error
    except OSError as error:
        raise InvalidConfigurationError(str(error), path=config_path) from error
    try:
        config = CilantroConfig.from_dict(payload)
    except ValueError as error:
        raise InvalidConfigurationError(str(error), path=config_path) from error
    logger.debug("Loaded config from %s (default backend=%s)", config_path, config.default_backend)
    return config


def save_config(config: CilantroConfig, path: Path | None = None) -> None:
    """Write the configuration, replacing any previous file content."""

    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", "utf-8")
    logger.debug("Saved config to %s", config_path)


def is_initialized(path: Path | None = None) -> bool:
    """Return True if a valid configuration file exists."""

    try:
        return load_config(path) is not None
    except InvalidConfigurationError:
        return False


def build_default_config(
    *,
    detected: Sequence[DetectedBackend],
    backends: Sequence[Backend],
    timeout: int = DEFAULT_TIMEOUT_MS,
) -> CilantroConfig:
    """Build the initial config: first installed backend becomes the default.

    Launch specs are seeded for every known backend, installed or not.
    """

    installed = [entry.name for entry in detected if entry.installed]
    if not installed:
        raise NoBackendsDetectedError([entry.name for entry in detected])
    return CilantroConfig(
        default_backend=installed[0],
        backends={backend.name: backend.launch_config() for backend in backends},
        timeout=timeout,
    )


def _parse_backend_config(name: str, spec: Any) -> BackendConfig:
    if not isinstance(spec, dict):
        return BackendConfig(command=name)
    command = spec.get("command")
    args = spec.get("args")
    return BackendConfig(
        command=command if isinstance(command, str) and command else name,
        args=[str(arg) for arg in args] if isinstance(args, list) else [],
    )
