"""dirmark - persistent directory shortcuts for the shell.

By default, dirmark's internal logging is disabled when used as a library.
Library users can enable logging by calling dirmark.enable_logging().
"""

from dirmark.common import disable_library_logging, enable_library_logging

disable_library_logging()

enable_logging = enable_library_logging

__all__ = [
    "enable_logging",
]
