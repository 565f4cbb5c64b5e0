"""
Pure utility functions for the file manager.

These functions are stateless and have no side effects (except checking
whether a path exists). They are easy to unit test in isolation.
"""

import os
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Callable, TextIO

from .config import Config, DEFAULT_CONFIG
from .errors import TimestampError
from .walker import FileEntry

# Maps a file entry to the name of the bucket directory it belongs in
KeyPolicy = Callable[[FileEntry], str]

ISO_DATE = "%Y-%m-%d"


def get_extension(file_name: str) -> str:
    """
    Get the extension of a file name, without the dot.

    Hidden files like ".bashrc" and names ending in a dot have no extension.

    Args:
        file_name: Name of the file (not a full path)

    Returns:
        Text after the last dot, case preserved, or "" if there is none

    Example:
        >>> get_extension("archive.tar.gz")
        'gz'
    """
    index = file_name.rfind(".")
    if 0 < index < len(file_name) - 1:
        return file_name[index + 1:]
    return ""


def bucket_by_type(entry: FileEntry, unknown: str = DEFAULT_CONFIG.unknown_bucket) -> str:
    """
    Bucket key for organizing by type: the file's extension.

    Args:
        entry: File to classify
        unknown: Key used for files without an extension

    Returns:
        Extension as given by the file name (not lower-cased), or unknown
    """
    return get_extension(entry.name) or unknown


def bucket_by_date(entry: FileEntry, date_format: str = ISO_DATE) -> str:
    """
    Bucket key for organizing by date: the modification day in UTC.

    Args:
        entry: File to classify
        date_format: strftime format for the key

    Returns:
        Date string, "YYYY-MM-DD" by default

    Raises:
        TimestampError: If the modification time is not a valid date
    """
    try:
        day = datetime.fromtimestamp(entry.mtime, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError) as e:
        raise TimestampError(f"Invalid timestamp {entry.mtime!r} for '{entry.path}': {e}") from e

    # isoformat always pads the year to four digits, strftime does not
    if date_format == ISO_DATE:
        return day.isoformat()
    return day.strftime(date_format)


def get_key_policy(mode: str, config: Config = DEFAULT_CONFIG) -> KeyPolicy:
    """
    Get the bucket key policy for an organize mode.

    Args:
        mode: "type" or "date"
        config: Configuration to use

    Returns:
        Callable mapping a FileEntry to its bucket key

    Raises:
        ValueError: If the mode is not known
    """
    if mode == "type":
        return partial(bucket_by_type, unknown=config.unknown_bucket)
    if mode == "date":
        return partial(bucket_by_date, date_format=config.date_format)
    raise ValueError(f"Unknown organize mode: {mode!r}")


def format_file_size(size_bytes: int) -> str:
    """
    Convert bytes to human-readable format (KB, MB, GB).

    Args:
        size_bytes: Size in bytes

    Returns:
        Human-readable string like "1.5 GB" or "256 MB"

    Example:
        >>> format_file_size(1536000000)
        '1.43 GB'
    """
    size = float(size_bytes)
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024:
            return f"{size:.2f} {unit}" if unit != 'B' else f"{int(size)} {unit}"
        size /= 1024
    return f"{size:.2f} PB"


def generate_unique_filename(destination: Path) -> Path:
    """
    Generate a free filename by adding a counter if the file exists.

    Args:
        destination: Proposed destination path

    Returns:
        Original path if nothing (not even a dangling symlink) holds
        that name, otherwise the first free
        "<stem>_<n><suffix>" in the same directory
    """
    if not os.path.lexists(destination):
        return destination

    counter = 1
    while True:
        candidate = destination.parent / f"{destination.stem}_{counter}{destination.suffix}"
        if not os.path.lexists(candidate):
            return candidate
        counter += 1


def printable(message: str, stream: TextIO) -> str:
    """
    Make a message safe to write to a text stream.

    File names that are not valid in the filesystem encoding come back from
    the OS as strings with lone surrogates, which a strict stream refuses to
    encode. Those characters are written as backslash escapes instead.

    Args:
        message: Text to write
        stream: Stream it will be written to

    Returns:
        Text the stream can encode
    """
    encoding = getattr(stream, "encoding", None) or "utf-8"
    return message.encode(encoding, "backslashreplace").decode(encoding)
