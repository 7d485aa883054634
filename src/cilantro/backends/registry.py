"""Backend registry and concurrent detection."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from cilantro.backends.base import Backend
from cilantro.backends.claude import ClaudeBackend
from cilantro.backends.codex import CodexBackend
from cilantro.backends.cursor import CursorBackend
from cilantro.models import DetectedBackend

logger = logging.getLogger(__name__)


class BackendRegistry:
    """Ordered collection of backend adapters, looked up by exact name."""

    def __init__(self, backends: Iterable[Backend] = ()) -> None:
        self._backends: list[Backend] = list(backends)

    def register(self, backend: Backend) -> None:
        if self.get(backend.name) is not None:
            raise ValueError(f"Backend already registered: {backend.name!r}")
        self._backends.append(backend)

    def get(self, name: str) -> Backend | None:
        for backend in self._backends:
            if backend.name == name:
                return backend
        return None

    def all(self) -> list[Backend]:
        return list(self._backends)

    def names(self) -> list[str]:
        return [backend.name for backend in self._backends]

    def detect_all(self) -> list[DetectedBackend]:
        """Probe every backend concurrently; report rows keep registry order."""

        if not self._backends:
            return []
        with ThreadPoolExecutor(max_workers=len(self._backends)) as pool:
            installed = list(pool.map(_safe_detect, self._backends))
        return [
            DetectedBackend(
                name=backend.name,
                installed=is_installed,
                capabilities=backend.capabilities(),
            )
            for backend, is_installed in zip(self._backends, installed, strict=True)
        ]


def default_registry() -> BackendRegistry:
    """Build a registry with the built-in backends."""

    return BackendRegistry([ClaudeBackend(), CodexBackend(), CursorBackend()])


def _safe_detect(backend: Backend) -> bool:
    try:
        return bool(backend.detect())
    except Exception:  # noqa: BLE001
        logger.warning("Detection raised for backend=%s", backend.name, exc_info=True)
        return False
