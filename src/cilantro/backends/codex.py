"""Codex CLI backend."""

from __future__ import annotations

from cilantro.backends.base import CliAgentBackend


class CodexBackend(CliAgentBackend):
    """Runs ``codex exec <prompt>``; stdout is taken verbatim."""

    name = "codex"
    command = "codex"
    fixed_args = ("exec",)
    parse_json_output = False
    can_read_codebase = True
    supports_headless = True
    supports_json_output = False
