"""Git operations module.

Usage:
    from forkrel.git import Repository

    repo = Repository(Path("/path/to/fork"))
    tags = repo.list_tags("fork-v*")
"""

from forkrel.git.repository import (
    GitError,
    LogEntry,
    Repository,
)
from forkrel.git.mock import MockRepository

__all__ = [
    "GitError",
    "LogEntry",
    "MockRepository",
    "Repository",
]
