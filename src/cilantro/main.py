"""CLI entrypoint for cilantro."""

from __future__ import annotations

import logging

import rich_click as click
from rich.console import Console
from rich.logging import RichHandler

from cilantro import __version__
from cilantro.controllers import (
    BackendsCommand,
    CilantroCliController,
    CommandOutput,
    InitCommand,
    RunPromptCommand,
    exit_code_for,
)
from cilantro.errors import CilantroError

click.rich_click.USE_MARKDOWN = True
CONTROLLER = CilantroCliController()
# Hidden command that receives prompts.
_RUN_COMMAND = "_prompt"


class PromptGroup(click.RichGroup):
    """Command group that treats an unknown first argument as a prompt."""

    def resolve_command(self, ctx, args):
        if args and (args[0] not in self.commands or args[0] == _RUN_COMMAND):
            return _RUN_COMMAND, self.commands[_RUN_COMMAND], args
        return super().resolve_command(ctx, args)


@click.group(
    cls=PromptGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="cilantro")
@click.option(
    "--backend",
    default=None,
    help="Override the default backend (claude, codex, cursor).",
)
@click.option(
    "--timeout",
    "timeout_ms",
    type=click.IntRange(min=1),
    default=None,
    help="Timeout in milliseconds for this invocation.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log diagnostics to stderr.")
@click.pass_context
def cilantro(
    ctx: click.Context,
    backend: str | None,
    timeout_ms: int | None,
    verbose: bool,
) -> None:
    """Run a prompt through a locally installed AI agent CLI.

    Examples:

    - `cilantro init`
    - `cilantro "Explain this codebase"`
    - `cilantro --backend=codex "What is this project?"`
    """

    if verbose:
        _configure_logging()
    ctx.ensure_object(dict)
    ctx.obj["backend"] = backend
    ctx.obj["timeout_ms"] = timeout_ms
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cilantro.command("init")
@click.pass_context
def init_command(ctx: click.Context) -> None:
    """Detect installed backends and write ~/.cilantro.json."""

    output = CONTROLLER.init(InitCommand())
    _emit(output)
    if not output.success:
        ctx.exit(1)


@cilantro.command("backends")
def backends_command() -> None:
    """List known backends, their status and capabilities."""

    try:
        output = CONTROLLER.backends(BackendsCommand())
    except CilantroError as error:
        raise click.ClickException(str(error)) from error
    _emit(output)


@cilantro.command("help")
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show this help message."""

    click.echo(ctx.find_root().get_help())


@cilantro.command(_RUN_COMMAND, hidden=True)
@click.argument("prompt")
@click.option("--backend", default=None, help="Override the default backend.")
@click.option(
    "--timeout",
    "timeout_ms",
    type=click.IntRange(min=1),
    default=None,
    help="Timeout in milliseconds.",
)
@click.pass_context
def run_command(
    ctx: click.Context,
    prompt: str,
    backend: str | None,
    timeout_ms: int | None,
) -> None:
    """Execute a prompt in headless mode."""

    group_options = ctx.find_object(dict) or {}
    try:
        result = CONTROLLER.run(
            RunPromptCommand(
                prompt=prompt,
                backend=backend or group_options.get("backend"),
                timeout_ms=timeout_ms or group_options.get("timeout_ms"),
            ),
        )
    except CilantroError as error:
        raise click.ClickException(str(error)) from error

    if result.success:
        click.echo(result.output, nl=not result.output.endswith("\n"))
        return
    click.echo(result.error or "Execution failed", err=True)
    ctx.exit(exit_code_for(result))


def _emit(output: CommandOutput) -> None:
    for line in output.lines:
        click.echo(line)
    for line in output.error_lines:
        click.echo(line, err=True)


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


if __name__ == "__main__":  # pragma: no cover
    cilantro()
