"""
Command-line interface for the file manager.

Handles argument parsing, builds typed commands from the flags and runs
them in a fixed order.
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from . import __version__
from .commands import (
    Command,
    CopyCommand,
    DeleteCommand,
    FindCommand,
    ListCommand,
    MkdirCommand,
    MoveCommand,
    OrganizeCommand,
    RenameCommand,
    StatsCommand,
    run_commands,
)
from .config import CollisionPolicy, Config, DEFAULT_CONFIG
from .interactive import run_interactive

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Send the package's log records to stderr.

    Args:
        verbose: If True, log at DEBUG, otherwise only warnings and errors
        stream: Stream for the handler (default: sys.stderr)

    Returns:
        The package logger
    """
    logger = logging.getLogger("file_manager")
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, "%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    return logger


def create_parser(config: Config = DEFAULT_CONFIG) -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Args:
        config: Configuration to use for default values in help text

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="file-manager",
        description="A simple CLI tool to manage files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Operations run in this order when several are given:
  list, delete, rename, move, copy, mkdir,
  organize-by-type, organize-by-date, find, stats

Organizing:
  by type  - one folder per extension ("{config.unknown_bucket}" when there is none)
  by date  - one folder per modification day (UTC), e.g. 2024-03-09
  Only files directly in DIR are organized unless --recursive is given.
  Name clashes inside a folder are resolved with --on-collision
  (default: {config.collision_policy.value}).
        """
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    ops = parser.add_argument_group("operations")
    ops.add_argument(
        "--list", "-l",
        metavar="DIRECTORY",
        help="Lists all files in the given directory"
    )
    ops.add_argument(
        "--delete", "-d",
        metavar="FILE",
        help="Deletes the specified file"
    )
    ops.add_argument(
        "--rename", "-r",
        nargs=2,
        metavar=("OLD", "NEW"),
        help="Renames a file from OLD to NEW"
    )
    ops.add_argument(
        "--move", "-m",
        nargs=2,
        metavar=("SOURCE", "DESTINATION"),
        help="Moves a file from SOURCE to DESTINATION"
    )
    ops.add_argument(
        "--copy", "-c",
        nargs=2,
        metavar=("SOURCE", "DESTINATION"),
        help="Copies a file from SOURCE to DESTINATION"
    )
    ops.add_argument(
        "--mkdir",
        metavar="DIRECTORY",
        help="Creates a new directory"
    )
    ops.add_argument(
        "--organize-by-type",
        metavar="DIRECTORY",
        help="Organizes files in the directory by type"
    )
    ops.add_argument(
        "--organize-by-date",
        metavar="DIRECTORY",
        help="Organizes files in the directory by modification date"
    )
    ops.add_argument(
        "--find",
        metavar="PATTERN",
        help="Finds files matching the given glob pattern"
    )
    ops.add_argument(
        "--stats",
        metavar="DIRECTORY",
        help="Displays file statistics (count and total size)"
    )
    ops.add_argument(
        "--interactive",
        action="store_true",
        help="Starts an interactive CLI mode (other operations are ignored)"
    )

    opts = parser.add_argument_group("options")
    opts.add_argument(
        "--recursive",
        action="store_true",
        help="Organize files in subdirectories too, flattening them into top-level folders"
    )
    opts.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Preview organizing without moving files"
    )
    opts.add_argument(
        "--on-collision",
        choices=[policy.value for policy in CollisionPolicy],
        default=config.collision_policy.value,
        help="What to do when an organized file's name is already taken"
    )
    opts.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug details to stderr"
    )

    return parser


def build_commands(args: argparse.Namespace) -> List[Command]:
    """
    Turn parsed flags into commands, in the fixed execution order.

    Args:
        args: Parsed command-line arguments

    Returns:
        Commands to run (empty if no operation flag was given)
    """
    commands: List[Command] = []

    if args.list is not None:
        commands.append(ListCommand(Path(args.list)))
    if args.delete is not None:
        commands.append(DeleteCommand(Path(args.delete)))
    if args.rename is not None:
        commands.append(RenameCommand(Path(args.rename[0]), Path(args.rename[1])))
    if args.move is not None:
        commands.append(MoveCommand(Path(args.move[0]), Path(args.move[1])))
    if args.copy is not None:
        commands.append(CopyCommand(Path(args.copy[0]), Path(args.copy[1])))
    if args.mkdir is not None:
        commands.append(MkdirCommand(Path(args.mkdir)))
    if args.organize_by_type is not None:
        commands.append(OrganizeCommand(
            Path(args.organize_by_type), "type", recursive=args.recursive, dry_run=args.dry_run
        ))
    if args.organize_by_date is not None:
        commands.append(OrganizeCommand(
            Path(args.organize_by_date), "date", recursive=args.recursive, dry_run=args.dry_run
        ))
    if args.find is not None:
        commands.append(FindCommand(args.find))
    if args.stats is not None:
        commands.append(StatsCommand(Path(args.stats)))

    return commands


def run(
    args: argparse.Namespace,
    config: Config = DEFAULT_CONFIG,
) -> int:
    """
    Run the file manager with the given arguments.

    Args:
        args: Parsed command-line arguments
        config: Configuration to use

    Returns:
        Exit code (0 for success, 1 if any operation failed)
    """
    config = dataclasses.replace(config, collision_policy=CollisionPolicy(args.on_collision))

    if args.interactive:
        return run_interactive(config)

    commands = build_commands(args)
    if not commands:
        create_parser(config).print_help()
        return 0

    return 0 if run_commands(commands, config=config) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    config = DEFAULT_CONFIG
    parser = create_parser(config)
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    return run(args, config)


if __name__ == "__main__":
    sys.exit(main())
