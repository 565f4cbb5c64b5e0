"""
Core file operations for the file manager.

These functions perform the actual file system operations (list, delete,
rename, move, copy, mkdir, organize, find, stats). They use a callback
pattern for output to separate concerns from the CLI: status lines go to
`output`, failures to `error_output`.
"""

import errno
import glob
import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .config import CollisionPolicy, Config, DEFAULT_CONFIG
from .errors import PatternError
from .utils import (
    KeyPolicy,
    format_file_size,
    generate_unique_filename,
    get_key_policy,
    printable,
)
from .walker import ErrorCollector, FileEntry, PathLike, walk_files

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """Result of an organize run with statistics."""
    success_count: int = 0
    skip_count: int = 0
    error_count: int = 0
    actions: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    # Every (entry, bucket key) pair the run decided on, in order
    plan: List[Tuple[FileEntry, str]] = field(default_factory=list)


@dataclass
class DirectoryListing:
    """Files found by list_files, plus the entries that could not be read."""
    entries: List[FileEntry] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class DirectoryStats:
    """Aggregate count and size of the regular files below a directory."""
    file_count: int = 0
    total_size: int = 0
    errors: List[str] = field(default_factory=list)


# Type alias for output callback
OutputCallback = Callable[[str], None]


def default_output(message: str) -> None:
    """Default output callback that prints to stdout."""
    print(printable(message, sys.stdout))


def default_error_output(message: str) -> None:
    """Default error callback that prints to stderr."""
    print(printable(message, sys.stderr), file=sys.stderr)


def _walk_error_messages(errors: ErrorCollector) -> List[str]:
    return [f"Error reading '{path}': {exc}" for path, exc in errors.errors]


# =============================================================================
# LISTING, SEARCH AND STATISTICS
# =============================================================================

def list_files(
    directory: PathLike,
    output: OutputCallback = default_output,
    error_output: OutputCallback = default_error_output,
) -> DirectoryListing:
    """
    Print the path of every regular file below a directory.

    Entries that cannot be read are skipped and reported on error_output.

    Args:
        directory: Directory to walk recursively
        output: Callback for output messages
        error_output: Callback for error messages

    Returns:
        DirectoryListing with the files found and the read errors
    """
    listing = DirectoryListing()
    walk_errors = ErrorCollector()

    output(f"Listing files in directory: {directory}")
    for entry in walk_files(directory, on_error=walk_errors):
        output(str(entry.path))
        listing.entries.append(entry)

    listing.errors = _walk_error_messages(walk_errors)
    for message in listing.errors:
        error_output(message)
    return listing


def find_files(
    pattern: str,
    output: OutputCallback = default_output,
) -> List[Path]:
    """
    Find paths matching a glob pattern.

    "**" matches any number of directories. Relative patterns are
    resolved against the current working directory.

    Args:
        pattern: Glob pattern, e.g. "*.txt" or "docs/**/*.md"
        output: Callback for output messages

    Returns:
        Matching paths, sorted

    Raises:
        PatternError: If the pattern is empty
    """
    if not pattern:
        raise PatternError("Search pattern must not be empty")

    # Dot-files match wildcards where glob supports it (Python 3.11+)
    options = {"include_hidden": True} if sys.version_info >= (3, 11) else {}
    matches = [Path(p) for p in sorted(glob.glob(pattern, recursive=True, **options))]
    for path in matches:
        output(str(path))
    return matches


def file_stats(
    directory: PathLike,
    output: OutputCallback = default_output,
    error_output: OutputCallback = default_error_output,
) -> DirectoryStats:
    """
    Count the regular files below a directory and sum their sizes.

    Args:
        directory: Directory to walk recursively
        output: Callback for output messages
        error_output: Callback for error messages

    Returns:
        DirectoryStats with file count and total size in bytes
    """
    stats = DirectoryStats()
    walk_errors = ErrorCollector()

    for entry in walk_files(directory, on_error=walk_errors):
        stats.file_count += 1
        stats.total_size += entry.size

    stats.errors = _walk_error_messages(walk_errors)
    for message in stats.errors:
        error_output(message)

    output(f"Total files: {stats.file_count}")
    output(f"Total size: {stats.total_size} bytes ({format_file_size(stats.total_size)})")
    return stats


# =============================================================================
# SINGLE-FILE OPERATIONS
# =============================================================================

def delete_file(
    path: PathLike,
    output: OutputCallback = default_output,
    error_output: OutputCallback = default_error_output,
) -> bool:
    """
    Delete a single file.

    Returns:
        True if the file was deleted
    """
    try:
        Path(path).unlink()
    except OSError as e:
        error_output(f"Error deleting file '{path}': {e}")
        return False
    output(f"File '{path}' deleted successfully")
    return True


def rename_file(
    old: PathLike,
    new: PathLike,
    output: OutputCallback = default_output,
    error_output: OutputCallback = default_error_output,
) -> bool:
    """
    Rename a file with the rename primitive.

    An existing destination is handled however the platform's rename
    handles it (replaced on POSIX, an error on Windows).

    Returns:
        True if the file was renamed
    """
    try:
        Path(old).rename(new)
    except OSError as e:
        error_output(f"Error renaming file: {e}")
        return False
    output(f"File '{old}' renamed to '{new}'")
    return True


def move_file(
    source: PathLike,
    destination: PathLike,
    output: OutputCallback = default_output,
    error_output: OutputCallback = default_error_output,
) -> bool:
    """
    Move a file with the rename primitive.

    Moving across filesystems is not supported and is reported as an
    error.

    Returns:
        True if the file was moved
    """
    try:
        Path(source).rename(destination)
    except OSError as e:
        error_output(f"Error moving file: {e}")
        return False
    output(f"File '{source}' moved to '{destination}'")
    return True


def copy_file(
    source: PathLike,
    destination: PathLike,
    output: OutputCallback = default_output,
    error_output: OutputCallback = default_error_output,
) -> bool:
    """
    Copy a file's content and permission bits.

    The source is opened before the destination, so a missing source never
    leaves an empty destination behind.

    Returns:
        True if the file was copied
    """
    try:
        shutil.copy(os.fspath(source), os.fspath(destination))
    except OSError as e:
        error_output(f"Error copying file: {e}")
        return False
    output(f"File '{source}' copied to '{destination}'")
    return True


def create_directory(
    directory: PathLike,
    output: OutputCallback = default_output,
    error_output: OutputCallback = default_error_output,
) -> bool:
    """
    Create a directory and any missing parents.

    An already existing directory counts as success.

    Returns:
        True if the directory exists afterwards
    """
    try:
        Path(directory).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        error_output(f"Error creating directory '{directory}': {e}")
        return False
    output(f"Directory '{directory}' created successfully")
    return True


# =============================================================================
# ORGANIZATION
# =============================================================================

def _move_into_bucket(source: Path, bucket: Path, policy: CollisionPolicy) -> Optional[Path]:
    """
    Move a file into a bucket directory, creating the bucket if needed.

    Only the bucket itself is created, never its parents.

    Returns:
        The final destination, or None if the collision policy skipped it

    Raises:
        OSError: If the bucket cannot be created, the move fails, or the
            destination exists under CollisionPolicy.ERROR
    """
    if not bucket.is_dir():
        bucket.mkdir(exist_ok=True)
        logger.debug("Created bucket %s", bucket)

    destination = bucket / source.name
    if os.path.lexists(destination):
        if policy is CollisionPolicy.SKIP:
            return None
        if policy is CollisionPolicy.ERROR:
            raise FileExistsError(errno.EEXIST, "Destination already exists", str(destination))
        if policy is CollisionPolicy.RENAME:
            destination = generate_unique_filename(destination)
        logger.debug("Collision at %s, policy %s", bucket / source.name, policy.value)

    os.replace(source, destination)
    return destination


def organize(
    directory: PathLike,
    key_policy: KeyPolicy,
    recursive: Optional[bool] = None,
    dry_run: bool = False,
    config: Config = DEFAULT_CONFIG,
    output: OutputCallback = default_output,
) -> OperationResult:
    """
    Move files into bucket subfolders named by a key policy.

    The file list is snapshotted before anything moves, so buckets created
    during the run are never walked. A file that already sits directly in
    its bucket is skipped, which makes a second run a no-op and prevents
    buckets nested inside buckets. A failure on one file is recorded and
    the run carries on with the next one.

    Args:
        directory: Path to the directory to organize
        key_policy: Maps each FileEntry to its bucket name
        recursive: If True, flatten the whole tree into top-level buckets;
            if False, organize direct children only (default:
            config.organize_recursive)
        dry_run: If True, only preview changes without moving files
        config: Configuration to use
        output: Callback for output messages

    Returns:
        OperationResult with statistics

    Raises:
        ValueError: If directory is not valid
    """
    result = OperationResult()
    directory = Path(directory)

    if not directory.is_dir():
        raise ValueError(f"'{directory}' is not a valid directory")

    if recursive is None:
        recursive = config.organize_recursive

    walk_errors = ErrorCollector()
    entries = list(walk_files(directory, recursive=recursive, on_error=walk_errors))

    for path, exc in walk_errors.errors:
        error_msg = f"{path.relative_to(directory)}: {exc}"
        output(f"  [ERROR] Could not read {error_msg}")
        result.errors.append(error_msg)
        result.error_count += 1

    if not entries:
        output("No files found to organize.")
        return result

    prefix = "[DRY RUN] " if dry_run else ""
    output(f"\n{prefix}Organizing {len(entries)} files in: {directory}\n")
    output("-" * 60)

    for entry in entries:
        relative = entry.path.relative_to(directory)

        try:
            key = key_policy(entry)
        except ValueError as e:
            error_msg = f"{relative}: {e}"
            output(f"  [ERROR] {error_msg}")
            result.errors.append(error_msg)
            result.error_count += 1
            continue

        bucket = directory / key
        if entry.path.parent == bucket:
            logger.debug("%s is already in bucket %s", entry.path, key)
            result.skip_count += 1
            continue

        action = f"{relative} -> {key}/"
        result.plan.append((entry, key))
        result.actions.append(action)

        if dry_run:
            output(f"  [WOULD MOVE] {action}")
            continue

        try:
            destination = _move_into_bucket(entry.path, bucket, config.collision_policy)
        except OSError as e:
            error_msg = f"{relative}: {e}"
            output(f"  [ERROR] {error_msg}")
            logger.warning("Could not move %s into %s: %s", entry.path, bucket, e)
            result.errors.append(error_msg)
            result.error_count += 1
            continue

        if destination is None:
            output(f"  [SKIPPED] {action} (already exists)")
            result.skip_count += 1
        else:
            output(f"  [MOVED] {relative} -> {key}/{destination.name}")
            result.success_count += 1

    output("-" * 60)

    if dry_run:
        output(f"\n[DRY RUN] Would move {len(result.actions)} files")
        output("Run without --dry-run to apply changes.")
    else:
        output(f"\nSummary: {result.success_count} moved, {result.skip_count} skipped, {result.error_count} errors")

    return result


def organize_by_type(
    directory: PathLike,
    recursive: Optional[bool] = None,
    dry_run: bool = False,
    config: Config = DEFAULT_CONFIG,
    output: OutputCallback = default_output,
) -> OperationResult:
    """Organize files into one bucket per extension ("unknown" for none)."""
    return organize(
        directory,
        get_key_policy("type", config),
        recursive=recursive,
        dry_run=dry_run,
        config=config,
        output=output,
    )


def organize_by_date(
    directory: PathLike,
    recursive: Optional[bool] = None,
    dry_run: bool = False,
    config: Config = DEFAULT_CONFIG,
    output: OutputCallback = default_output,
) -> OperationResult:
    """Organize files into one bucket per modification day (UTC)."""
    return organize(
        directory,
        get_key_policy("date", config),
        recursive=recursive,
        dry_run=dry_run,
        config=config,
        output=output,
    )
