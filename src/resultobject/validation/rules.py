"""Fluent property rule builders.

Each rule builder wraps one resolved property (name and value) of the
source object and appends at most one validation error per rule call to
the owning ``Validator``. Every method returns the builder so rules chain:

    validator.for_(user).string_property("email").is_required().has_max_length(254)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sized
from typing import TYPE_CHECKING, Any, ClassVar

from resultobject.exceptions import InvalidBoundsError
from resultobject.i18n.catalog import ResourceSource
from resultobject.resources import VALIDATOR_MESSAGES

if TYPE_CHECKING:
    from resultobject.validation.validator import Validator


Condition = bool | Callable[[], bool]


class PropertyRule:
    """Base rule builder with the checks every property family supports.

    Attributes:
        validator: Accumulator receiving the failures.
        source: Object the property was read from.
        name: Property name used in messages.
        value: Resolved property value.
    """

    # Values other than None that do not satisfy ``is_required``.
    empty_values: ClassVar[tuple[Any, ...]] = ()

    def __init__(
        self,
        validator: "Validator",
        source: Any,
        name: str,
        value: Any,
        *,
        nullable: bool = False,
    ):
        self.validator = validator
        self.source = source
        self.name = name
        self.value = value
        self.nullable = nullable

    def _is_empty(self) -> bool:
        if self.value is None:
            return True
        if self.nullable:
            return False
        return any(self.value == empty for empty in self.empty_values)

    def is_required(self) -> "PropertyRule":
        """Fail when the value is None or its type's default/empty value."""
        self.validator.validate(
            VALIDATOR_MESSAGES,
            "property_required",
            {"propertyName": self.name},
            not self._is_empty(),
        )
        return self

    def is_valid(
        self,
        condition: Condition,
        resource: ResourceSource | None = None,
        key: str | None = None,
        tokens: Any = None,
    ) -> "PropertyRule":
        """Fail when ``condition`` (a bool or a zero-argument callable) is false.

        Without a resource the generic "field is not valid" message is used.
        """
        if resource is None:
            resource, key, tokens = VALIDATOR_MESSAGES, "value_invalid", {"propertyName": self.name}
        elif key is None:
            raise TypeError("A resource key is required when a resource is given")

        self.validator.validate(resource, key, tokens, condition)
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}={self.value!r})"


class BasicRule(PropertyRule):
    """Rule builder for values of no particular family (required means not None)."""


class BoolRule(PropertyRule):
    """Rule builder for booleans. ``False`` does not satisfy ``is_required`` unless nullable."""

    empty_values = (False,)


class StringRule(PropertyRule):
    """Rule builder for string properties.

    A None string passes every length rule; only ``is_required`` and
    ``is_not_null_or_white_space`` reject it.
    """

    empty_values = ("",)

    def _is_empty(self) -> bool:
        # Nullability never makes an empty string acceptable.
        return self.value is None or self.value == ""

    def is_not_null_or_white_space(self) -> "StringRule":
        self.validator.validate_property_is_required(self.name, self.value)
        return self

    def has_min_length(self, min_length: int) -> "StringRule":
        self.validator.validate_string_min_length(self.name, self.value, min_length)
        return self

    def has_max_length(self, max_length: int) -> "StringRule":
        self.validator.validate_string_length(self.name, self.value, max_length)
        return self

    def has_length_in_range(self, min_length: int, max_length: int) -> "StringRule":
        self.validator.validate_string_length(self.name, self.value, max_length, min_length)
        return self


def count_values(value: Any) -> int:
    """Count the items of a collection; None counts as empty."""
    if value is None:
        return 0
    if isinstance(value, Sized):
        return len(value)
    if isinstance(value, Iterable):
        return sum(1 for _ in value)
    raise TypeError(f"Expected a collection, got {type(value).__name__}")


class CollectionRule(PropertyRule):
    """Rule builder for collections. A None collection counts as empty.

    An iterable without a length (a generator, say) is read into a tuple
    once, so every chained rule sees the same items.
    """

    def __init__(self, validator: "Validator", source: Any, name: str, value: Any, **kwargs: Any):
        if isinstance(value, Iterable) and not isinstance(value, Sized):
            value = tuple(value)
        super().__init__(validator, source, name, value, **kwargs)

    def has_values(self) -> "CollectionRule":
        self.validator.validate_collection_has_values(self.name, self.value)
        return self

    def has_min_values(self, count: int) -> "CollectionRule":
        if count < 0:
            raise InvalidBoundsError("Minimum value count cannot be negative.", minimum=count)

        self.validator.validate(
            VALIDATOR_MESSAGES,
            "collection_not_enough_values",
            {"collectionName": self.name, "count": count},
            count_values(self.value) >= count,
        )
        return self

    def has_max_values(self, count: int) -> "CollectionRule":
        if count < 0:
            raise InvalidBoundsError("Maximum value count cannot be negative.", maximum=count)

        self.validator.validate(
            VALIDATOR_MESSAGES,
            "collection_too_many_values",
            {"collectionName": self.name, "count": count},
            count_values(self.value) <= count,
        )
        return self
