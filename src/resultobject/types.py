"""Type definitions for resultobject."""

from __future__ import annotations

from enum import Enum


class MessageKind(str, Enum):
    """Closed set of message kinds carried by a result.

    The value is the kebab-cased wire name used when a message is
    serialized.
    """

    INFORMATION = "information"
    WARNING = "warning"
    ERROR = "error"
    VALIDATION_ERROR = "validation-error"
    UNAUTHORIZED = "unauthorized"  # caller is not authenticated
    FORBIDDEN = "forbidden"  # caller is authenticated but not allowed
    NOT_FOUND = "not-found"

    def __str__(self) -> str:
        return self.value


class RangeBoundaries(str, Enum):
    """Inclusive/exclusive configuration of a min/max range check."""

    ALL_INCLUSIVE = "all_inclusive"
    MIN_INCLUSIVE = "min_inclusive"  # min <= value < max
    MAX_INCLUSIVE = "max_inclusive"  # min < value <= max
    EXCLUSIVE = "exclusive"


class ErrorMode(str, Enum):
    """How many validator errors a failure builder attaches."""

    FIRST_ERROR = "first_error"
    ALL_ERRORS = "all_errors"
