"""
Filesystem entries and the directory walker.

The walker yields a FileEntry snapshot for every regular file below a root.
Anything that cannot be read is handed to an injectable error callback
instead of aborting the walk.
"""

import logging
import os
import stat
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

# Called with the offending path and the error; may re-raise to stop the walk
ErrorCallback = Callable[[Path, OSError], None]


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


@dataclass(frozen=True)
class FileEntry:
    """Metadata of one filesystem item, taken when it was discovered."""

    path: Path
    kind: EntryKind
    size: int
    mtime: float

    @classmethod
    def from_path(cls, path: PathLike) -> "FileEntry":
        """
        Stat a path without following symlinks.

        Args:
            path: Path to inspect

        Returns:
            FileEntry describing the path

        Raises:
            OSError: If the path cannot be stat'ed
        """
        path = Path(path)
        st = path.lstat()
        if stat.S_ISREG(st.st_mode):
            kind = EntryKind.FILE
        elif stat.S_ISDIR(st.st_mode):
            kind = EntryKind.DIRECTORY
        elif stat.S_ISLNK(st.st_mode):
            kind = EntryKind.SYMLINK
        else:
            kind = EntryKind.OTHER
        return cls(path=path, kind=kind, size=st.st_size, mtime=st.st_mtime)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE


@dataclass
class ErrorCollector:
    """
    Error callback that remembers every failure for later reporting.

    Example:
        errors = ErrorCollector()
        files = list(walk_files(root, on_error=errors))
        for path, exc in errors.errors:
            print(f"{path}: {exc}")
    """

    errors: List[Tuple[Path, OSError]] = field(default_factory=list)

    def __call__(self, path: Path, exc: OSError) -> None:
        self.errors.append((path, exc))

    def __len__(self) -> int:
        return len(self.errors)


def raise_errors(path: Path, exc: OSError) -> None:
    """Error callback that makes the walk fail on the first error."""
    raise exc


def _report(on_error: Optional[ErrorCallback], path: Path, exc: OSError) -> None:
    logger.debug("Skipping %s: %s", path, exc)
    if on_error is not None:
        on_error(path, exc)


def _scan(
    directory: Path,
    recursive: bool,
    on_error: Optional[ErrorCallback],
) -> Iterator[FileEntry]:
    try:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        _report(on_error, directory, exc)
        return

    for child in children:
        path = Path(child.path)
        try:
            is_dir = child.is_dir(follow_symlinks=False)
            entry = None if is_dir else FileEntry.from_path(path)
        except OSError as exc:
            _report(on_error, path, exc)
            continue

        if is_dir:
            if recursive:
                yield from _scan(path, recursive, on_error)
        elif entry.is_file:
            yield entry


def walk_files(
    root: PathLike,
    recursive: bool = True,
    on_error: Optional[ErrorCallback] = None,
) -> Iterator[FileEntry]:
    """
    Lazily yield every regular file below a directory.

    A root that is itself a regular file yields just that file.
    Directories, symlinks and special files are never yielded. Entries are
    visited in name order within each directory. The tree is not
    snapshotted, so changes made while iterating may or may not be seen;
    materialize the walk first when that matters.

    Args:
        root: Directory (or single file) to walk
        recursive: If False, only the direct children of root are visited
        on_error: Called with (path, error) for anything that cannot be
            read. None drops such entries silently.

    Yields:
        FileEntry for each regular file
    """
    root = Path(root)
    if not root.is_dir():
        try:
            top = FileEntry.from_path(root)
        except OSError as exc:
            _report(on_error, root, exc)
            return
        if top.is_file:
            yield top
        return

    yield from _scan(root, recursive, on_error)
