"""Claude Code backend."""

from __future__ import annotations

from cilantro.backends.base import CliAgentBackend


class ClaudeBackend(CliAgentBackend):
    """Runs ``claude -p --output-format json <prompt>``."""

    name = "claude"
    command = "claude"
    fixed_args = ("-p", "--output-format", "json")
    parse_json_output = True
    can_read_codebase = True
    supports_headless = True
    supports_json_output = True
