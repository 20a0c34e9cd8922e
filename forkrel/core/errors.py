"""Error codes for CLI exit status.

These values are used as process exit codes and should remain stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the release command.

    - 0: Success (including dry-run and --help)
    - 1: User error (bad version string, bad arguments, bad config)
    - 2: Precondition error (dirty tree, duplicate tag, not a repository)
    - 3: Resolution error (no changelog base)
    - 4: Network error (push failed)
    - 5: I/O or VCS error while applying the release
    """

    OK = 0
    USER_ERROR = 1
    PRECONDITION_ERROR = 2
    RESOLUTION_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
