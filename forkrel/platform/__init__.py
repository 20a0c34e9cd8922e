"""Platform abstraction layer."""

from .files import atomic_write_many
from .process import ProcessError, run

__all__ = [
    # files
    "atomic_write_many",
    # process
    "ProcessError",
    "run",
]
