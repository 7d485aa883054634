"""Cursor Agent backend."""

from __future__ import annotations

from cilantro.backends.base import CliAgentBackend


class CursorBackend(CliAgentBackend):
    """Runs ``cursor-agent -p --output-format json <prompt>``."""

    name = "cursor"
    command = "cursor-agent"
    fixed_args = ("-p", "--output-format", "json")
    parse_json_output = True
    can_read_codebase = True
    supports_headless = True
    supports_json_output = True
