"""filehandles command line tool."""

import subprocess
from typing import List, Optional

import typer
from rich.console import Console

from filehandles import __version__
from filehandles.cli.utils.context import CLIContext
from filehandles.cli.utils.output import OutputFormatter
from filehandles.core.config import settings
from filehandles.core.exceptions import FilesError
from filehandles.core.types import FileType, Lock
from filehandles.files import Directory, File, FileSystem, Link, LockableDirectory, RegularFile
from filehandles.infrastructure.logging import bind_context, get_logger, setup_logging

app = typer.Typer(
    name="filehandles",
    help="Inspect files and hold advisory locks from the shell",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    pretty_exceptions_enable=False,
)

console = Console()


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        console.print(f"filehandles v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Log every filesystem operation to stderr",
    ),
    output_format: str = typer.Option(
        "table",
        "--output",
        "-o",
        help="Output format: table, json, yaml",
    ),
):
    """
    filehandles CLI

    Thin front end over the filehandles library.
    """
    logger = None
    if debug or settings.logging_enabled:
        if debug:
            settings.log_level = "DEBUG"
        setup_logging()
        logger = get_logger("filehandles.cli")

    ctx.obj = CLIContext(
        debug=debug,
        formatter=OutputFormatter(output_format, console=console),
        console=console,
        filesystem=FileSystem(logger=logger),
    )


def _fail(cli_ctx: CLIContext, message: str) -> None:
    cli_ctx.formatter.print_error(message)
    raise typer.Exit(1)


def _make(cli_ctx: CLIContext, path: str) -> File:
    try:
        return cli_ctx.filesystem.make(path)
    except FilesError as e:
        _fail(cli_ctx, e.message)


@app.command("stat")
def stat_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path to inspect"),
):
    """
    Show type and stat information for a path.

    Example:
        filehandles stat /etc/hosts
    """
    cli_ctx: CLIContext = ctx.obj
    file = _make(cli_ctx, path)

    stat = file.get_stat()
    if stat is None:
        _fail(cli_ctx, f"Cannot stat {path}")

    detail = {"path": file.path.path, "type": file.get_type().value, "class": type(file).__name__}
    detail.update(stat.to_dict())
    detail["mode"] = oct(stat.mode)

    cli_ctx.formatter.print_detail(detail, title=path)


@app.command("ls")
def list_command(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Directory to list"),
    lock: bool = typer.Option(False, "--lock", "-l", help="List while holding the directory lock"),
):
    """
    List the entries of a directory.

    Example:
        filehandles ls /tmp --lock
    """
    cli_ctx: CLIContext = ctx.obj
    directory = _make(cli_ctx, path)

    if not isinstance(directory, Directory):
        _fail(cli_ctx, f"Not a directory: {path}")

    if lock:
        directory = cli_ctx.filesystem.make(path, LockableDirectory)

    entries = []

    def collect(child: File) -> None:
        file_type = child.get_type()
        entries.append({
            "name": child.path.basename,
            "type": file_type.value if file_type else None,
            "size": child.get_size(),
        })

    try:
        directory.foreach_child(collect)
    except FilesError as e:
        _fail(cli_ctx, e.message)
    entries.sort(key=lambda entry: entry["name"])

    cli_ctx.formatter.print_list(entries, columns=["name", "type", "size"], title=path)


@app.command("cat")
def cat_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to print"),
):
    """
    Print a file's content, read under a shared lock.
    """
    cli_ctx: CLIContext = ctx.obj
    file = _make(cli_ctx, path)

    if isinstance(file, Link):
        try:
            file = file.readlink_recursively()
        except FilesError as e:
            _fail(cli_ctx, e.message)

    if not isinstance(file, RegularFile):
        _fail(cli_ctx, f"Not a regular file: {path}")

    content = file.get_content()
    if content is None:
        _fail(cli_ctx, f"Cannot read {path}")

    typer.echo(content, nl=False)


@app.command("readlink")
def readlink_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Symbolic link"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Follow the whole chain"),
):
    """
    Print the file a symbolic link points at.
    """
    cli_ctx: CLIContext = ctx.obj

    if FileType.of(path) is not FileType.LINK:
        _fail(cli_ctx, f"Not a symbolic link: {path}")

    link = cli_ctx.filesystem.make(path, Link)
    try:
        target = link.readlink_recursively() if recursive else link.readlink()
    except FilesError as e:
        _fail(cli_ctx, e.message)

    if target is None:
        _fail(cli_ctx, f"Broken link: {path}")

    typer.echo(target.path.path)


@app.command("lock")
def lock_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File or directory to lock"),
    command: List[str] = typer.Argument(..., help="Command to run while the lock is held"),
    shared: bool = typer.Option(False, "--shared", "-s", help="Take a shared lock instead of an exclusive one"),
    lock_file: Optional[str] = typer.Option(
        None, "--lock-file", help="Sentinel file name used when locking a directory"
    ),
    keep_lock_file: bool = typer.Option(
        False, "--keep-lock-file", help="Leave the directory sentinel file in place afterwards"
    ),
):
    """
    Run a command while holding an advisory lock, like flock(1).

    Example:
        filehandles lock ./data -- rsync -a src/ ./data/
    """
    cli_ctx: CLIContext = ctx.obj
    file = _make(cli_ctx, path)
    lock = Lock.SHARED if shared else Lock.EXCLUSIVE

    bind_context(path=path, lock=lock.value, command=" ".join(command))

    def run(handle) -> int:
        return subprocess.run(command).returncode

    if isinstance(file, Directory):
        directory = cli_ctx.filesystem.make(path, LockableDirectory)
        returncode = directory.transaction(
            run,
            lock_filename=lock_file,
            remove_lock_file_on_unlock=not keep_lock_file,
            lock=lock,
        )
    elif isinstance(file, RegularFile):
        returncode = file.transaction(run, "r", lock)
    else:
        _fail(cli_ctx, f"Cannot lock {file.get_type().value} {path}")

    raise typer.Exit(returncode)


if __name__ == "__main__":
    app()
