"""Tests for results and their builders."""

from __future__ import annotations

import logging
import os

import pytest

from resultobject import (
    ErrorMode,
    Message,
    MessageKind,
    MessageVerbosity,
    Result,
    ResultBuilder,
    FailureResultBuilder,
    use_verbosity,
)
from resultobject.exceptions import (
    BuilderCommittedError,
    ContractViolationError,
    ResultValueError,
)


class User:
    def __init__(self, name: str):
        self.name = name


@pytest.fixture
def failing_validator(validator, source_factory):
    source = source_factory()
    validator.for_(source).int_property("int_property").is_required()
    validator.for_(source).string_property("string_property").is_not_null_or_white_space()
    return validator


# =============================================================================
# Success Tests
# =============================================================================


class TestSuccess:
    """Test successful results."""

    def test_without_payload(self):
        result = Result.success().build()

        assert result.is_success
        assert not result.has_content
        assert result.value is None
        assert result.messages == ()
        assert not result.attempt_retry

    def test_with_payload(self):
        user = User("Ada")
        result = Result.success(user).build()

        assert result.has_content
        assert result.value is user

    def test_none_payload_has_content(self):
        result = Result.success(None).build()
        assert result.is_success
        assert result.has_content
        assert result.value is None

    def test_falsy_payload_has_content(self):
        assert Result.success(0).build().has_content
        assert Result.success([]).build().value == []

    def test_info_and_warnings(self, app_messages):
        result = (
            Result.success(User("Ada"))
            .with_info(app_messages, "greeting", {"name": "Ada"})
            .with_warning(app_messages, "cache_stale")
            .build()
        )

        assert result.is_success
        assert result.has_information_messages
        assert result.has_warnings
        assert not result.has_errors
        assert [m.content for m in result.information_messages] == ["Hello Ada"]
        assert [m.content for m in result.warning_messages] == ["The cache is stale."]

    def test_validation_error_on_success(self, app_messages):
        result = Result.success().with_validation_error(app_messages, "cache_stale").build()
        assert result.is_success
        assert result.has_validation_errors

    def test_builder_types(self):
        assert isinstance(Result.success(), ResultBuilder)
        assert isinstance(Result.failure(), FailureResultBuilder)
        assert not hasattr(Result.success(), "not_found")


# =============================================================================
# Failure Tests
# =============================================================================


class TestFailure:
    """Test failed results and the failure-only operations."""

    def test_plain_failure(self):
        result = Result.failure().build()
        assert not result.is_success
        assert not result.has_content
        assert result.messages == ()

    def test_not_found(self):
        result = Result.failure(User).not_found(42).build()

        assert result.is_not_found
        assert not result.has_content
        message = result.messages[0]
        assert message.kind is MessageKind.NOT_FOUND
        assert message.content == 'The type "User" with identifier "42" does not exist.'

    def test_not_found_type_override(self):
        result = Result.failure(User).not_found("ident", "String").build()
        assert result.messages[0].content == 'The type "String" with identifier "ident" does not exist.'

    def test_not_found_unwraps_result_type(self):
        result = Result.failure(Result[User]).not_found(1).build()
        assert result.messages[0].content == 'The type "User" with identifier "1" does not exist.'

    def test_not_found_type_at_call(self):
        result = Result.failure().not_found(7, User).build()
        assert result.messages[0].content == 'The type "User" with identifier "7" does not exist.'

    def test_not_found_requires_type(self):
        with pytest.raises(ContractViolationError):
            Result.failure().not_found(1)

    def test_unauthorized_and_forbidden(self):
        result = Result.failure().unauthorized().forbidden().build()

        assert result.is_unauthorized
        assert result.is_forbidden
        assert [m.content for m in result.messages] == [
            "The operation requires authorization.",
            "The operation is forbidden.",
        ]

    def test_custom_forbidden(self, app_messages):
        result = Result.failure().forbidden(app_messages, "greeting", {"name": "Bob"}).build()
        assert result.is_forbidden
        assert result.messages[0].content == "Hello Bob"

    def test_errors(self, app_messages):
        result = (
            Result.failure()
            .with_error(app_messages, "cache_stale")
            .with_warning(app_messages, "greeting", {"name": "x"})
            .build()
        )
        assert result.has_errors
        assert result.has_warnings
        assert len(result.error_messages) == 1

    def test_attempt_retry(self):
        result = Result.failure().attempt_retry().build()
        assert result.attempt_retry

    def test_with_validator_all_errors(self, failing_validator):
        result = Result.failure().with_validator(failing_validator).build()

        assert result.has_validation_errors
        assert result.validation_errors == failing_validator.errors
        assert len(result.validation_errors) == 2

    def test_with_validator_first_error(self, failing_validator):
        result = Result.failure().with_validator(failing_validator, ErrorMode.FIRST_ERROR).build()
        assert result.validation_errors == failing_validator.errors[:1]

    def test_with_validator_mode_by_name(self, failing_validator):
        result = Result.failure().with_validator(failing_validator, "first_error").build()
        assert len(result.validation_errors) == 1

    def test_with_empty_validator(self, validator):
        result = Result.failure().with_validator(validator, ErrorMode.FIRST_ERROR).build()
        assert result.messages == ()

    def test_multiple_outcomes(self, failing_validator, app_messages):
        result = (
            Result.failure()
            .with_validator(failing_validator)
            .with_warning(app_messages, "cache_stale")
            .with_log_message("validation failed for request 17")
            .build()
        )

        assert result.has_validation_errors
        assert result.has_warnings
        assert result.log_messages == ("validation failed for request 17",)


# =============================================================================
# Builder Tests
# =============================================================================


class TestBuilder:
    """Test builder state handling."""

    def test_messages_in_order(self, app_messages):
        first = Message.info(app_messages, "greeting", {"name": "1"})
        second = Message.warning(app_messages, "greeting", {"name": "2"})
        third = Message.error(app_messages, "greeting", {"name": "3"})

        result = Result.failure().with_messages(first, [second, third]).build()
        assert result.messages == (first, second, third)

    def test_log_messages_flatten(self):
        result = (
            Result.success()
            .with_log_messages("a", ["b", "c"])
            .with_log_message("d")
            .build()
        )
        assert result.log_messages == ("a", "b", "c", "d")

    def test_build_is_idempotent(self):
        builder = Result.success(1)
        assert builder.build() is builder.build()
        assert builder.committed

    def test_mutation_after_build(self, app_messages):
        builder = Result.failure()
        builder.build()

        with pytest.raises(BuilderCommittedError) as exc_info:
            builder.with_error(app_messages, "cache_stale")
        assert exc_info.value.operation == "with_error"

        with pytest.raises(BuilderCommittedError):
            builder.attempt_retry()

    def test_result_is_read_only(self):
        result = Result.success(1).build()
        with pytest.raises(AttributeError):
            result.value = 2

    def test_value_without_content(self):
        with pytest.raises(ResultValueError):
            Result(is_success=True, has_content=False, value=1)

    def test_failed_build_is_logged(self, app_messages, caplog):
        with caplog.at_level(logging.DEBUG, logger="resultobject.result"):
            Result.failure().with_error(app_messages, "cache_stale").build()
        assert "error(cache-stale): The cache is stale." in caplog.text


# =============================================================================
# Output Tests
# =============================================================================


class TestOutput:
    """Test invariant logging output and boundary serialization."""

    def test_get_invariant_messages(self, app_messages):
        result = (
            Result.failure(User)
            .not_found(3)
            .with_error(app_messages, "greeting", {"name": "Ada"}, locale="fr")
            .with_log_message("lookup took 3ms")
            .build()
        )

        assert result.get_invariant_messages() == os.linesep.join(
            [
                'not-found(not-found): The type "User" with identifier "3" does not exist.',
                "error(greeting): Hello Ada",
                "lookup took 3ms",
            ]
        )

    def test_get_invariant_messages_delimiter(self, app_messages):
        result = Result.failure().unauthorized().with_log_message("token expired").build()
        assert (
            result.get_invariant_messages(" | ")
            == "unauthorized(unauthorized): The operation requires authorization. | token expired"
        )

    def test_empty_invariant_messages(self):
        assert Result.success().build().get_invariant_messages() == ""

    def test_to_dict_minimal(self, app_messages):
        result = Result.success({"id": 1}).with_info(app_messages, "greeting", {"name": "Ada"}).build()
        assert result.to_dict() == {
            "data": {"id": 1},
            "messages": [{"type": "information", "content": "Hello Ada"}],
        }

    def test_to_dict_without_content(self):
        assert Result.failure().forbidden().build().to_dict() == {
            "messages": [{"type": "forbidden", "content": "The operation is forbidden."}]
        }

    def test_to_dict_none_payload(self):
        assert Result.success(None).build().to_dict() == {"data": None, "messages": []}

    def test_to_dict_with_scoped_verbosity(self):
        result = Result.failure("Order").not_found(9).build()

        with use_verbosity("code,tokens"):
            data = result.to_dict()

        assert data["messages"] == [
            {
                "type": "not-found",
                "code": "not-found",
                "tokens": {"type": "Order", "id": 9},
                "content": 'The type "Order" with identifier "9" does not exist.',
            }
        ]

    def test_to_dict_explicit_options(self):
        result = Result.failure().unauthorized().build()
        data = result.to_dict(MessageVerbosity(language_code=True))
        assert data["messages"][0]["languageCode"] == "en-US"
