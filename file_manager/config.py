"""
Configuration for the file manager.

Uses a dataclass to make configuration testable and injectable.
Default values match the behaviour of the plain command-line tool.
"""

from dataclasses import dataclass
from enum import Enum


class CollisionPolicy(Enum):
    """What organizing does when a bucket already holds a file of the same name."""

    RENAME = "rename"        # move to a free name: report_1.txt, report_2.txt, ...
    SKIP = "skip"            # leave the source where it is
    OVERWRITE = "overwrite"  # replace the existing file
    ERROR = "error"          # record an error for the file and carry on


@dataclass
class Config:
    """
    Configuration for file manager operations.

    All settings can be overridden when creating a Config instance,
    making it easy to test with different values.

    Example:
        # Use defaults
        config = Config()

        # Override for testing
        config = Config(collision_policy=CollisionPolicy.ERROR)
    """

    # Bucket naming
    unknown_bucket: str = "unknown"
    date_format: str = "%Y-%m-%d"

    # Organize settings
    collision_policy: CollisionPolicy = CollisionPolicy.RENAME
    organize_recursive: bool = False

    # Interactive shell
    prompt: str = "> "
    banner: str = "Entering interactive mode. Type 'exit' to quit."


# Default configuration instance
DEFAULT_CONFIG = Config()
