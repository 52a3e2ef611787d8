"""CLI context management."""

from dataclasses import dataclass

from rich.console import Console

from filehandles.cli.utils.output import OutputFormatter
from filehandles.files.registry import FileSystem


@dataclass
class CLIContext:
    """Context object passed through CLI commands."""

    debug: bool
    formatter: OutputFormatter
    console: Console
    filesystem: FileSystem
