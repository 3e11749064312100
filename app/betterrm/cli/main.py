"""Main CLI application entry point.

Defines the Typer application, maps command line flags onto
RemoveOptions and runs the SafeRemover over every target.
"""

import sys
from typing import Annotated

import click
import typer

from betterrm import __version__
from betterrm.core.audit import AuditLogger, attach_syslog
from betterrm.core.config import load_config
from betterrm.core.paths import TRASH_DIR_ENV, get_trash_dir
from betterrm.filesystem.errors import TrashDirError
from betterrm.filesystem.operator import SafeRemover
from betterrm.filesystem.trash import ensure_trash_dir
from betterrm.models.options import RemoveOptions
from betterrm.utils.formatting import (
    PROGRAM_NAME,
    console,
    create_protected_table,
    print_banner,
    print_diagnostic,
)

# Context key recording whichever of -f / -i appeared last
_PROMPT_MODE_KEY = "betterrm.prompt_mode"

app = typer.Typer(
    name=PROGRAM_NAME,
    help="Better replacement for rm with protection against deleting system directories.",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"{PROGRAM_NAME} version {__version__}")
        raise typer.Exit()


def prompt_mode_callback(ctx: typer.Context, param: typer.CallbackParam, value: bool) -> bool:
    """Remember the last of -f / -i given on the command line.

    Click invokes callbacks in command line order, so the last flag seen
    overwrites the earlier one.
    """
    if value:
        ctx.meta[_PROMPT_MODE_KEY] = param.name
    return value


@app.command()
def main(
    ctx: typer.Context,
    files: Annotated[
        list[str] | None,
        typer.Argument(help="Files or directories to remove.", show_default=False),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option(
            "--recursive",
            "-r",
            "-R",
            help="Remove directories and their contents recursively.",
        ),
    ] = False,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            callback=prompt_mode_callback,
            help="Ignore nonexistent files, never prompt.",
        ),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option(
            "-i",
            callback=prompt_mode_callback,
            help="Prompt before every removal.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Explain what is being done."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be deleted without actually removing.",
        ),
    ] = False,
    trash: Annotated[
        bool,
        typer.Option("--trash", "-t", help="Move files to trash instead of deleting."),
    ] = False,
    trash_dir: Annotated[
        str | None,
        typer.Option(
            "--trash-dir",
            metavar="DIR",
            help=f"Trash directory (implies --trash). Default: ${TRASH_DIR_ENV} or ~/.Trash.",
            show_default=False,
        ),
    ] = None,
    preserve_root: Annotated[
        bool,
        typer.Option(
            "--preserve-root/--no-preserve-root",
            help="Do not remove '/'.",
        ),
    ] = True,
    one_file_system: Annotated[
        bool,
        typer.Option("--one-file-system", help="Stay on the same filesystem."),
    ] = False,
    show_protected: Annotated[
        bool,
        typer.Option("--show-protected", help="List protected paths and exit."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Remove files and directories, refusing protected system paths.

    Protected paths come from the built-in list, /etc/better-rm.conf and
    ~/.config/better-rm/config ([bold]protect=/path[/bold] lines).
    """
    config = load_config()

    if show_protected:
        console.print(create_protected_table(config.protected.entries, config.protected.capacity))
        raise typer.Exit()

    if not files:
        print_diagnostic("missing operand")
        typer.echo(f"Try '{PROGRAM_NAME} --help' for more information.", err=True)
        raise typer.Exit(code=1)

    prompt_mode = ctx.meta.get(_PROMPT_MODE_KEY)
    use_trash = trash or trash_dir is not None
    resolved_trash_dir: str | None = None
    if use_trash:
        resolved_trash_dir = trash_dir or str(get_trash_dir(config.trash_dir))

    options = RemoveOptions(
        recursive=recursive,
        force=prompt_mode == "force",
        verbose=verbose or dry_run,
        interactive=prompt_mode == "interactive",
        dry_run=dry_run,
        preserve_root=preserve_root,
        one_file_system=one_file_system,
        use_trash=use_trash,
        no_preserve_root=not preserve_root,
        trash_dir=resolved_trash_dir,
    )

    if options.use_trash and not options.dry_run:
        try:
            ensure_trash_dir(resolved_trash_dir or "")
        except TrashDirError as e:
            print_diagnostic(str(e))
            raise typer.Exit(code=1) from e

    if options.dry_run:
        print_banner("DRY-RUN MODE: No files will be actually deleted")
        if options.use_trash:
            print_banner(f"TRASH MODE: Files would be moved to {options.trash_dir}")

    attach_syslog()
    remover = SafeRemover(config.protected, options, audit=AuditLogger())
    status = remover.remove_all(files)

    if options.dry_run:
        print_banner("DRY-RUN COMPLETE: No files were actually deleted")

    if status:
        raise typer.Exit(code=status)


def run() -> None:
    """Console script entry point.

    Runs the Typer application and maps usage errors to exit status 1.
    """
    command = typer.main.get_command(app)
    try:
        status = command.main(prog_name=PROGRAM_NAME, standalone_mode=False)
    except click.UsageError as e:
        e.show()
        sys.exit(1)
    except click.Abort:
        typer.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(status if isinstance(status, int) else 0)


if __name__ == "__main__":
    run()
