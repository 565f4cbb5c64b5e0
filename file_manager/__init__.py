"""
File Manager - Everyday filesystem housekeeping from the command line.

This package lists, deletes, renames, moves and copies files, creates
directories, organizes files into folders by extension or date, searches
with glob patterns and reports size statistics.
"""

__version__ = "1.0.0"

from .config import CollisionPolicy, Config
from .operations import (
    copy_file,
    create_directory,
    delete_file,
    file_stats,
    find_files,
    list_files,
    move_file,
    organize,
    organize_by_date,
    organize_by_type,
    rename_file,
)
from .walker import FileEntry, walk_files

__all__ = [
    "CollisionPolicy",
    "Config",
    "FileEntry",
    "copy_file",
    "create_directory",
    "delete_file",
    "file_stats",
    "find_files",
    "list_files",
    "move_file",
    "organize",
    "organize_by_date",
    "organize_by_type",
    "rename_file",
    "walk_files",
]
