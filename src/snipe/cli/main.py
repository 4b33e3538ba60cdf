"""Snipe CLI - find a test by name, then build and run it."""

from __future__ import annotations

from pathlib import Path

import click
from click.shell_completion import CompletionItem

from snipe import __version__
from snipe.cli.select import select_record
from snipe.config import ensure_user_config, get_index_dir, load_build_type, load_config
from snipe.config.models import SnipeConfig
from snipe.core.errors import ErrorCode, SnipeError
from snipe.core.logging import configure_logging, get_logger, set_run_id
from snipe.core.progress import status, suppress_console_logs
from snipe.execution import CommandRenderer, edit_commands, run_commands
from snipe.index import (
    Ambiguous,
    IndexStore,
    NotFound,
    ResolutionResult,
    Resolver,
    TestKind,
    TestRecord,
)

log = get_logger("cli")


def _build_resolver(config: SnipeConfig, *, announce: bool = True) -> Resolver:
    store = IndexStore(get_index_dir(config))

    def on_rescan(kind: TestKind, root: Path) -> None:
        status(f"test not found in cache, rescanning {kind} tests under {root}", style="warning")

    return Resolver.from_config(store, config.scan, on_rescan=on_rescan if announce else None)


def _complete_for(kind: TestKind):  # noqa: ANN202
    def complete(
        ctx: click.Context,  # noqa: ARG001
        param: click.Parameter,  # noqa: ARG001
        incomplete: str,
    ) -> list[CompletionItem]:
        try:
            resolver = _build_resolver(load_config(), announce=False)
            return [CompletionItem(name) for name in resolver.candidates(incomplete, kind)]
        except SnipeError:
            return []

    return complete


def _pick(result: ResolutionResult) -> TestRecord | None:
    if isinstance(result, NotFound):
        status(f"no test found named {result.name}", style="error")
        return None
    if isinstance(result, Ambiguous):
        record = select_record(result)
        if record is None:
            status("no test selected", style="error")
        return record
    return result.record


@click.command()
@click.version_option(version=__version__, prog_name="snipe")
@click.option(
    "--cc",
    "cc_name",
    metavar="NAME",
    help="Compiled unit test name",
    shell_complete=_complete_for(TestKind.COMPILED),
)
@click.option(
    "--py",
    "py_name",
    metavar="NAME",
    help="Scripted (ducktape) test name",
    shell_complete=_complete_for(TestKind.SCRIPTED),
)
@click.option("-e", "--edit", is_flag=True, help="Edit command before running test")
@click.option(
    "-c",
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Seed defaults from config file (and copy to default location for future runs)",
)
@click.option("--dry-run", is_flag=True, help="Print the commands instead of running them")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    cc_name: str | None,
    py_name: str | None,
    edit: bool,
    config_file: Path | None,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Locate a unit test by its bare name, then build and run it."""
    configure_logging(level="DEBUG" if verbose else "WARNING")
    set_run_id()

    if cc_name is not None and py_name is None:
        kind, name = TestKind.COMPILED, cc_name
    elif py_name is not None and cc_name is None:
        kind, name = TestKind.SCRIPTED, py_name
    else:
        raise click.UsageError("Exactly one of --cc or --py is required.")

    try:
        config_path = ensure_user_config(config_file)
        config = load_config(config_path)
        if not verbose:
            configure_logging(config=config.logging)

        resolver = _build_resolver(config)
        result = resolver.resolve(name, kind)
        if resolver.last_persist_error is not None:
            status(
                f"index cache not updated: {resolver.last_persist_error.message}",
                style="warning",
            )

        record = _pick(result)
        if record is None:
            ctx.exit(1)
        log.info("cli.resolved", kind=str(kind), name=name, location=str(record.location))

        renderer = CommandRenderer(
            config.commands.command_mappings,
            load_build_type(config.execution.default_build_type),
            test_args=config.execution.py_test_args,
        )
        commands = renderer.render(record)

        if edit:
            with suppress_console_logs():
                edited = edit_commands(commands)
            if edited is None:
                raise click.Abort()
            commands = edited

        if dry_run:
            for command in commands:
                click.echo(command)
            return

        run_commands(commands, envs=config.env.envs, wrapper=config.execution.wrapper)
    except SnipeError as e:
        if e.code is ErrorCode.EXEC_COMMAND_FAILED:
            status(e.message, style="error")
            ctx.exit(int(e.details.get("returncode", 1)))
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()
