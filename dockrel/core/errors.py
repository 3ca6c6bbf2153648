"""Process exit codes.

These values are used as process exit codes and should remain stable:
- 0: every selected channel was built (and published)
- 1: a channel failed; the release stopped at that channel
- 2: configuration could not be loaded (manifest, environment, flags)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    RELEASE_FAILED = 1
    CONFIG_ERROR = 2
