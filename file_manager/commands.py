"""
Typed commands and the dispatcher.

Every operation has one command class carrying its typed arguments. Both
front ends (the one-shot flags and the interactive shell) build commands,
and execute() is the only place commands meet operations.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple, Union

from .config import Config, DEFAULT_CONFIG
from .errors import FileManagerError, UnknownCommandError, UsageError
from .operations import (
    OutputCallback,
    copy_file,
    create_directory,
    default_error_output,
    default_output,
    delete_file,
    file_stats,
    find_files,
    list_files,
    move_file,
    organize_by_date,
    organize_by_type,
    rename_file,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListCommand:
    directory: Path


@dataclass(frozen=True)
class DeleteCommand:
    path: Path


@dataclass(frozen=True)
class RenameCommand:
    old: Path
    new: Path


@dataclass(frozen=True)
class MoveCommand:
    source: Path
    destination: Path


@dataclass(frozen=True)
class CopyCommand:
    source: Path
    destination: Path


@dataclass(frozen=True)
class MkdirCommand:
    directory: Path


@dataclass(frozen=True)
class OrganizeCommand:
    directory: Path
    mode: str  # "type" | "date"
    recursive: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class FindCommand:
    pattern: str


@dataclass(frozen=True)
class StatsCommand:
    directory: Path


@dataclass(frozen=True)
class ExitCommand:
    pass


Command = Union[
    ListCommand,
    DeleteCommand,
    RenameCommand,
    MoveCommand,
    CopyCommand,
    MkdirCommand,
    OrganizeCommand,
    FindCommand,
    StatsCommand,
    ExitCommand,
]


# name -> (argument placeholders, builder taking exactly that many tokens)
COMMAND_TABLE: Dict[str, Tuple[Tuple[str, ...], Callable[..., Command]]] = {
    "list": (("<directory>",), lambda d: ListCommand(Path(d))),
    "delete": (("<file>",), lambda f: DeleteCommand(Path(f))),
    "rename": (("<old_name>", "<new_name>"), lambda o, n: RenameCommand(Path(o), Path(n))),
    "move": (("<source>", "<destination>"), lambda s, d: MoveCommand(Path(s), Path(d))),
    "copy": (("<source>", "<destination>"), lambda s, d: CopyCommand(Path(s), Path(d))),
    "mkdir": (("<directory>",), lambda d: MkdirCommand(Path(d))),
    "organize-by-type": (("<directory>",), lambda d: OrganizeCommand(Path(d), "type")),
    "organize-by-date": (("<directory>",), lambda d: OrganizeCommand(Path(d), "date")),
    "find": (("<pattern>",), lambda p: FindCommand(p)),
    "stats": (("<directory>",), lambda d: StatsCommand(Path(d))),
    "exit": ((), lambda: ExitCommand()),
}


def usage(name: str) -> str:
    """Usage line for a command, e.g. "Usage: rename <old_name> <new_name>"."""
    placeholders, _ = COMMAND_TABLE[name]
    return " ".join(("Usage:", name) + placeholders)


def parse_tokens(tokens: Sequence[str]) -> Command:
    """
    Build a command from whitespace-separated tokens.

    The first token names the command, the rest are its arguments. Extra
    arguments are ignored.

    Args:
        tokens: Tokens of one interactive line (must not be empty)

    Returns:
        The typed command

    Raises:
        UnknownCommandError: If the first token names no command
        UsageError: If arguments are missing
    """
    name, args = tokens[0], list(tokens[1:])
    if name not in COMMAND_TABLE:
        raise UnknownCommandError(name)

    placeholders, build = COMMAND_TABLE[name]
    if len(args) < len(placeholders):
        raise UsageError(usage(name))
    return build(*args[:len(placeholders)])


def execute(
    command: Command,
    config: Config = DEFAULT_CONFIG,
    output: OutputCallback = default_output,
    error_output: OutputCallback = default_error_output,
) -> bool:
    """
    Run one command.

    Failures are reported through error_output; nothing is raised for
    filesystem errors.

    Args:
        command: Command to run
        config: Configuration to use
        output: Callback for output messages
        error_output: Callback for error messages

    Returns:
        True if the operation completed without any reported failure
    """
    logger.debug("Executing %r", command)

    if isinstance(command, ListCommand):
        return not list_files(command.directory, output=output, error_output=error_output).errors
    if isinstance(command, DeleteCommand):
        return delete_file(command.path, output=output, error_output=error_output)
    if isinstance(command, RenameCommand):
        return rename_file(command.old, command.new, output=output, error_output=error_output)
    if isinstance(command, MoveCommand):
        return move_file(command.source, command.destination, output=output, error_output=error_output)
    if isinstance(command, CopyCommand):
        return copy_file(command.source, command.destination, output=output, error_output=error_output)
    if isinstance(command, MkdirCommand):
        return create_directory(command.directory, output=output, error_output=error_output)
    if isinstance(command, OrganizeCommand):
        return _execute_organize(command, config, output, error_output)
    if isinstance(command, FindCommand):
        try:
            find_files(command.pattern, output=output)
        except FileManagerError as e:
            error_output(f"Error reading pattern: {e}")
            return False
        return True
    if isinstance(command, StatsCommand):
        return not file_stats(command.directory, output=output, error_output=error_output).errors
    if isinstance(command, ExitCommand):
        return True
    raise TypeError(f"Not a command: {command!r}")


def _execute_organize(
    command: OrganizeCommand,
    config: Config,
    output: OutputCallback,
    error_output: OutputCallback,
) -> bool:
    organize_func = organize_by_type if command.mode == "type" else organize_by_date
    try:
        result = organize_func(
            command.directory,
            recursive=command.recursive or config.organize_recursive,
            dry_run=command.dry_run,
            config=config,
            output=output,
        )
    except ValueError as e:
        error_output(f"Error organizing '{command.directory}': {e}")
        return False

    for message in result.errors:
        error_output(f"Error organizing {message}")
    return result.error_count == 0


def run_commands(
    commands: List[Command],
    config: Config = DEFAULT_CONFIG,
    output: OutputCallback = default_output,
    error_output: OutputCallback = default_error_output,
) -> bool:
    """
    Run commands one after another; a failure does not stop the rest.

    Returns:
        True if every command succeeded
    """
    ok = True
    for command in commands:
        if not execute(command, config=config, output=output, error_output=error_output):
            ok = False
    return ok
