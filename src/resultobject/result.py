"""Operation results and their builders.

A ``Result`` is the outcome of a service operation: success or failure, an
optional payload, and an ordered list of localized messages. Results are
created only through builders and are read-only once ``build()`` returns.

    >>> result = (
    ...     Result.success(user)
    ...     .with_info(APP_MESSAGES, "user_loaded", {"name": user.name})
    ...     .build()
    ... )
    >>> result.is_success, result.has_content
    (True, True)

    >>> result = Result.failure(User).not_found(user_id).build()
    >>> result.is_not_found
    True

Several outcomes can coexist on one failed result, for example a
validation failure carrying warnings and log messages for operators.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from resultobject.exceptions import BuilderCommittedError, ContractViolationError, ResultValueError
from resultobject.i18n.catalog import ResourceSource
from resultobject.message import Message
from resultobject.types import ErrorMode, MessageKind
from resultobject.validation.validator import Validator
from resultobject.verbosity import MessageVerbosity

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _NoPayload:
    def __repr__(self) -> str:
        return "<no payload>"


NO_PAYLOAD: Any = _NoPayload()


# =============================================================================
# Result
# =============================================================================


class Result(Generic[T]):
    """Read-only outcome of an operation.

    Use ``Result.success(...)`` or ``Result.failure(...)`` to obtain a
    builder; do not instantiate directly.
    """

    __slots__ = (
        "_is_success",
        "_has_content",
        "_value",
        "_attempt_retry",
        "_messages",
        "_log_messages",
    )

    def __init__(
        self,
        *,
        is_success: bool,
        has_content: bool = False,
        value: T | None = None,
        attempt_retry: bool = False,
        messages: Iterable[Message] = (),
        log_messages: Iterable[str] = (),
    ):
        if not has_content and value is not None:
            raise ResultValueError()

        self._is_success = is_success
        self._has_content = has_content
        self._value = value
        self._attempt_retry = attempt_retry
        self._messages: tuple[Message, ...] = tuple(messages)
        self._log_messages: tuple[str, ...] = tuple(log_messages)

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    @classmethod
    def success(cls, payload: Any = NO_PAYLOAD) -> "ResultBuilder[Any]":
        """Start a successful result.

        Passing a payload, even None, marks the result as having content.
        """
        if payload is NO_PAYLOAD:
            return ResultBuilder(is_success=True)
        return ResultBuilder(is_success=True, has_content=True, value=payload)

    @classmethod
    def failure(cls, entity_type: Any = None) -> "FailureResultBuilder[Any]":
        """Start a failed result.

        Args:
            entity_type: Entity type reported by ``not_found``.
        """
        return FailureResultBuilder(entity_type=entity_type)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_success(self) -> bool:
        return self._is_success

    @property
    def has_content(self) -> bool:
        return self._has_content

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def attempt_retry(self) -> bool:
        return self._attempt_retry

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._messages

    @property
    def log_messages(self) -> tuple[str, ...]:
        return self._log_messages

    # -------------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------------

    def has_messages_of(self, kind: MessageKind) -> bool:
        return any(message.kind == kind for message in self._messages)

    def get_messages(self, kind: MessageKind) -> tuple[Message, ...]:
        return tuple(message for message in self._messages if message.kind == kind)

    @property
    def is_unauthorized(self) -> bool:
        return self.has_messages_of(MessageKind.UNAUTHORIZED)

    @property
    def is_forbidden(self) -> bool:
        return self.has_messages_of(MessageKind.FORBIDDEN)

    @property
    def is_not_found(self) -> bool:
        return self.has_messages_of(MessageKind.NOT_FOUND)

    @property
    def has_information_messages(self) -> bool:
        return self.has_messages_of(MessageKind.INFORMATION)

    @property
    def information_messages(self) -> tuple[Message, ...]:
        return self.get_messages(MessageKind.INFORMATION)

    @property
    def has_warnings(self) -> bool:
        return self.has_messages_of(MessageKind.WARNING)

    @property
    def warning_messages(self) -> tuple[Message, ...]:
        return self.get_messages(MessageKind.WARNING)

    @property
    def has_errors(self) -> bool:
        return self.has_messages_of(MessageKind.ERROR)

    @property
    def error_messages(self) -> tuple[Message, ...]:
        return self.get_messages(MessageKind.ERROR)

    @property
    def has_validation_errors(self) -> bool:
        return self.has_messages_of(MessageKind.VALIDATION_ERROR)

    @property
    def validation_errors(self) -> tuple[Message, ...]:
        return self.get_messages(MessageKind.VALIDATION_ERROR)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def get_invariant_messages(self, delimiter: str | None = None) -> str:
        """Join invariant message content and log messages for logging.

        Each message renders as ``kind(code): invariant content``; log
        messages follow in order. Never send this to external consumers.
        """
        lines = [
            f"{message.kind.value}({message.code}): {message.invariant_content}"
            for message in self._messages
        ]
        lines.extend(self._log_messages)
        return (os.linesep if delimiter is None else delimiter).join(lines)

    def to_dict(self, options: MessageVerbosity | None = None) -> dict[str, Any]:
        """Boundary representation: ``data`` (when there is content) and ``messages``."""
        data: dict[str, Any] = {}
        if self._has_content:
            data["data"] = self._value
        data["messages"] = [message.to_dict(options) for message in self._messages]
        return data

    def __repr__(self) -> str:
        state = "success" if self._is_success else "failure"
        kinds = ", ".join(message.kind.value for message in self._messages)
        return f"Result({state}, has_content={self._has_content}, messages=[{kinds}])"


# =============================================================================
# Builders
# =============================================================================


def _flatten(items: tuple[Any, ...], item_type: type) -> list[Any]:
    flat: list[Any] = []
    for item in items:
        if isinstance(item, item_type):
            flat.append(item)
        else:
            flat.extend(item)
    return flat


class ResultBuilder(Generic[T]):
    """Accumulates messages for a result until ``build()`` is called.

    Every method returns the same builder. After ``build()`` the builder is
    committed: further mutation raises ``BuilderCommittedError`` and
    ``build()`` returns the same result again.
    """

    def __init__(
        self,
        *,
        is_success: bool,
        has_content: bool = False,
        value: T | None = None,
    ):
        if not has_content and value is not None:
            raise ResultValueError()

        self._is_success = is_success
        self._has_content = has_content
        self._value = value
        self._attempt_retry = False
        self._messages: list[Message] = []
        self._log_messages: list[str] = []
        self._result: Result[T] | None = None

    @property
    def committed(self) -> bool:
        return self._result is not None

    def _ensure_open(self, operation: str) -> None:
        if self._result is not None:
            raise BuilderCommittedError(operation)

    def _append(self, operation: str, message: Message) -> "ResultBuilder[T]":
        self._ensure_open(operation)
        self._messages.append(message)
        return self

    def with_info(
        self, resource: ResourceSource, key: str, tokens: Any = None, locale: str | None = None
    ) -> "ResultBuilder[T]":
        return self._append("with_info", Message.info(resource, key, tokens, locale))

    def with_warning(
        self, resource: ResourceSource, key: str, tokens: Any = None, locale: str | None = None
    ) -> "ResultBuilder[T]":
        return self._append("with_warning", Message.warning(resource, key, tokens, locale))

    def with_validation_error(
        self, resource: ResourceSource, key: str, tokens: Any = None, locale: str | None = None
    ) -> "ResultBuilder[T]":
        return self._append(
            "with_validation_error", Message.validation_error(resource, key, tokens, locale)
        )

    def with_messages(self, *messages: Message | Iterable[Message]) -> "ResultBuilder[T]":
        """Append messages, given individually or as iterables."""
        self._ensure_open("with_messages")
        self._messages.extend(_flatten(messages, Message))
        return self

    def with_log_message(self, log_message: str) -> "ResultBuilder[T]":
        return self.with_log_messages(log_message)

    def with_log_messages(self, *log_messages: str | Iterable[str]) -> "ResultBuilder[T]":
        """Append internal log messages, given individually or as iterables."""
        self._ensure_open("with_log_messages")
        self._log_messages.extend(_flatten(log_messages, str))
        return self

    def build(self) -> Result[T]:
        """Freeze the accumulated state into a ``Result``."""
        if self._result is None:
            self._result = Result(
                is_success=self._is_success,
                has_content=self._has_content,
                value=self._value,
                attempt_retry=self._attempt_retry,
                messages=self._messages,
                log_messages=self._log_messages,
            )
            if not self._is_success:
                logger.debug(
                    "Built failed result: %s", self._result.get_invariant_messages("; ")
                )
        return self._result

    def __repr__(self) -> str:
        state = "committed" if self.committed else "open"
        return f"{type(self).__name__}({state}, {len(self._messages)} messages)"


class FailureResultBuilder(ResultBuilder[T]):
    """Builder for failed results, adding the failure-only operations."""

    def __init__(self, *, entity_type: Any = None):
        super().__init__(is_success=False)
        self.entity_type = entity_type

    def with_error(
        self, resource: ResourceSource, key: str, tokens: Any = None, locale: str | None = None
    ) -> "FailureResultBuilder[T]":
        self._append("with_error", Message.error(resource, key, tokens, locale))
        return self

    def not_found(self, identity: Any, entity_type: Any = None) -> "FailureResultBuilder[T]":
        """Append a not-found message for ``identity``.

        The entity type comes from ``Result.failure`` or from this call:

            >>> Result.failure(User).not_found(42)
            >>> Result.failure().not_found(42, User)

        Raises:
            ContractViolationError: If no entity type was given here or to
                ``Result.failure``.
        """
        entity_type = entity_type if entity_type is not None else self.entity_type
        if entity_type is None:
            raise ContractViolationError(
                "not_found requires an entity type: pass it to Result.failure() or not_found()."
            )
        self._append("not_found", Message.not_found(entity_type, identity))
        return self

    def unauthorized(
        self,
        resource: ResourceSource | None = None,
        key: str | None = None,
        tokens: Any = None,
    ) -> "FailureResultBuilder[T]":
        self._append("unauthorized", Message.unauthorized(resource, key, tokens))
        return self

    def forbidden(
        self,
        resource: ResourceSource | None = None,
        key: str | None = None,
        tokens: Any = None,
    ) -> "FailureResultBuilder[T]":
        self._append("forbidden", Message.forbidden(resource, key, tokens))
        return self

    def with_validator(
        self,
        validator: Validator,
        error_mode: ErrorMode | str = ErrorMode.ALL_ERRORS,
    ) -> "FailureResultBuilder[T]":
        """Append the validator's errors: the first one or all of them."""
        self._ensure_open("with_validator")
        errors = validator.errors
        if ErrorMode(error_mode) is ErrorMode.FIRST_ERROR:
            errors = errors[:1]
        self._messages.extend(errors)
        return self

    def attempt_retry(self) -> "FailureResultBuilder[T]":
        """Flag the failure as worth retrying."""
        self._ensure_open("attempt_retry")
        self._attempt_retry = True
        return self
