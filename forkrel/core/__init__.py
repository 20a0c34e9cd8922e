"""Core primitives shared by every layer: results, exit codes, config."""

from forkrel.core.errors import ErrorCode
from forkrel.core.result import Err, Ok, Result

__all__ = [
    "Err",
    "ErrorCode",
    "Ok",
    "Result",
]
