"""Exceptions raised by the file manager."""


class FileManagerError(Exception):
    """Base class for file manager errors."""


class UsageError(FileManagerError):
    """A command was invoked with missing arguments."""

    def __init__(self, usage: str):
        super().__init__(usage)
        self.usage = usage


class UnknownCommandError(FileManagerError):
    """The first token of an interactive line names no command."""

    def __init__(self, name: str):
        super().__init__(f"Unknown command: {name}")
        self.name = name


class PatternError(FileManagerError, ValueError):
    """A search pattern cannot be used."""


class TimestampError(FileManagerError, ValueError):
    """A modification time cannot be turned into a calendar date."""
