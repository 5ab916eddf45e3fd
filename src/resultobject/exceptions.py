"""Exception hierarchy for resultobject.

Domain outcomes (not found, validation failures, ...) are expressed through
``Result`` state and never raised. The exceptions below are reserved for
programming-contract violations and for opt-in strict modes.
"""

from __future__ import annotations

from typing import Any


class ResultObjectError(Exception):
    """Base class for all resultobject errors."""


class ContractViolationError(ResultObjectError):
    """Raised when a caller breaks the API contract.

    These are implementer bugs, not user input, and must never be turned
    into a failed ``Result``.
    """


class InvalidBoundsError(ContractViolationError, ValueError):
    """Raised when range or length bounds are inconsistent."""

    def __init__(self, message: str, *, minimum: Any = None, maximum: Any = None):
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(message)


class UnsupportedAccessorError(ContractViolationError, TypeError):
    """Raised when a property selector cannot be resolved."""

    def __init__(self, selector: Any, reason: str = ""):
        self.selector = selector
        message = f"Unsupported property selector: {selector!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ResultValueError(ContractViolationError, ValueError):
    """Raised when a value is set on a result that has no content."""

    def __init__(self) -> None:
        super().__init__(
            "You cannot set a value on the result object when has_content is false."
        )


class BuilderCommittedError(ContractViolationError, RuntimeError):
    """Raised when a builder is mutated after ``build()``."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Cannot call '{operation}' on a builder whose result has already been built."
        )


class MissingTokenError(ResultObjectError, KeyError):
    """Raised in strict token mode when a template references unknown tokens."""

    def __init__(self, template: str, missing: list[str]):
        self.template = template
        self.missing = missing
        super().__init__(
            "The message template references tokens that have not been supplied. "
            f"template: {template} missing token values: {', '.join(missing)}"
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class CatalogLoadError(ResultObjectError):
    """Raised when an explicitly requested catalog file cannot be loaded."""

    def __init__(self, path: Any, error: str):
        self.path = path
        self.error = error
        super().__init__(f"Failed to load catalog '{path}': {error}")
