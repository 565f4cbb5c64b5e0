"""
Interactive shell.

Reads one command per line and runs it through the same dispatcher as the
one-shot flags. Mistakes print a message and the loop carries on; only
'exit' or end of input ends it.
"""

import cmd
import logging
import sys
from typing import Optional, TextIO

from .commands import COMMAND_TABLE, ExitCommand, execute, parse_tokens, usage
from .config import Config, DEFAULT_CONFIG
from .errors import UnknownCommandError, UsageError
from .utils import printable

logger = logging.getLogger(__name__)


class InteractiveShell(cmd.Cmd):
    """
    Line-oriented shell over the file manager commands.

    The streams are owned by the caller and used as a context manager, so
    output is flushed when the session ends:

        with InteractiveShell(stdin, stdout) as shell:
            shell.cmdloop()
    """

    def __init__(
        self,
        stdin: TextIO,
        stdout: TextIO,
        stderr: Optional[TextIO] = None,
        config: Config = DEFAULT_CONFIG,
    ):
        super().__init__(stdin=stdin, stdout=stdout)
        self.use_rawinput = False
        self.stderr = stderr if stderr is not None else stdout
        self.config = config
        self.prompt = config.prompt
        self.intro = config.banner

    def __enter__(self) -> "InteractiveShell":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stdout.flush()
        self.stderr.flush()

    def say(self, message: str) -> None:
        self.stdout.write(printable(message, self.stdout) + "\n")

    def warn(self, message: str) -> None:
        self.stderr.write(printable(message, self.stderr) + "\n")

    def emptyline(self) -> bool:
        # cmd.Cmd repeats the last command on an empty line by default
        return False

    def onecmd(self, line: str) -> bool:
        """Run one line; returns True when the loop should stop."""
        if line == "EOF":
            self.say("")
            return True

        tokens = line.split()
        if not tokens:
            return self.emptyline()
        if tokens[0] == "help":
            self.print_usage()
            return False

        try:
            command = parse_tokens(tokens)
        except (UsageError, UnknownCommandError) as e:
            self.say(str(e))
            return False

        if isinstance(command, ExitCommand):
            return True

        execute(command, config=self.config, output=self.say, error_output=self.warn)
        return False

    def print_usage(self) -> None:
        self.say("Commands:")
        for name in COMMAND_TABLE:
            self.say("  " + usage(name)[len("Usage: "):])


def run_interactive(
    config: Config = DEFAULT_CONFIG,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    """
    Run the interactive shell until 'exit' or end of input.

    Args:
        config: Configuration to use
        stdin: Input stream (default: sys.stdin)
        stdout: Output stream (default: sys.stdout)
        stderr: Error stream (default: sys.stderr)

    Returns:
        Exit code (always 0)
    """
    with InteractiveShell(
        stdin if stdin is not None else sys.stdin,
        stdout if stdout is not None else sys.stdout,
        stderr if stderr is not None else sys.stderr,
        config=config,
    ) as shell:
        try:
            shell.cmdloop()
        except KeyboardInterrupt:
            shell.say("")
    logger.debug("Interactive session ended")
    return 0
