"""Core types shared by every layer."""

from .errors import ErrorCode
from .result import Err, Ok, Recovered, Result, tolerate

__all__ = [
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Recovered",
    "Result",
    "tolerate",
]
