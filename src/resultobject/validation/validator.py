"""Validation error accumulator and the fluent entry point.

Example:
    >>> validator = Validator()
    >>> (
    ...     validator.for_(order)
    ...     .int_property("quantity").is_required().has_value_in_range(1, 100)
    ... )
    >>> validator.for_(order).string_property("reference").has_max_length(32)
    >>> validator.has_errors
    False

The validator only accumulates: errors are never removed during a
validation pass. It is not safe to share between concurrent operations.
"""

from __future__ import annotations

import logging
import types
import typing
from collections.abc import Callable, Iterable, Iterator, Mapping
from datetime import date
from decimal import Decimal
from functools import lru_cache
from typing import Any, Generic, TypeVar

from resultobject.exceptions import InvalidBoundsError
from resultobject.i18n.catalog import ResourceSource
from resultobject.message import Message
from resultobject.resources import VALIDATOR_MESSAGES
from resultobject.validation.accessors import Selector, resolve
from resultobject.validation.comparable import DateTimeRule, DecimalRule, FloatRule, IntRule
from resultobject.validation.rules import (
    BasicRule,
    BoolRule,
    CollectionRule,
    PropertyRule,
    StringRule,
    count_values,
)

logger = logging.getLogger(__name__)

S = TypeVar("S")
R = TypeVar("R", bound=PropertyRule)

# Checked in order: bool before int, datetime is a date.
_FAMILIES: tuple[tuple[type, type[PropertyRule]], ...] = (
    (bool, BoolRule),
    (int, IntRule),
    (float, FloatRule),
    (Decimal, DecimalRule),
    (date, DateTimeRule),
    (str, StringRule),
)


def _family(kind: Any) -> type[PropertyRule] | None:
    kind = typing.get_origin(kind) or kind
    if not isinstance(kind, type):
        return None
    for base, family in _FAMILIES:
        if issubclass(kind, base):
            return family
    if issubclass(kind, Iterable) and not issubclass(kind, (bytes, bytearray)):
        return CollectionRule
    return None


@lru_cache(maxsize=256)
def _class_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError) as e:
        logger.debug("Cannot resolve annotations of %s: %s", cls.__qualname__, e)
        return {}


def declared_type(source: Any, name: str) -> tuple[Any, bool] | None:
    """Get the annotation of ``name`` on the source's class.

    Returns:
        ``(type, nullable)`` with ``Optional[X]`` / ``X | None`` unwrapped to
        ``(X, True)``, or None when the source is a mapping, the attribute is
        not annotated, or the annotation is a union of several types.
    """
    if source is None or isinstance(source, (Mapping, type)):
        return None
    annotation = _class_hints(type(source)).get(name)
    if annotation is None:
        return None

    nullable = False
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = typing.get_args(annotation)
        kinds = [arg for arg in args if arg is not type(None)]
        nullable = len(kinds) < len(args)
        if len(kinds) != 1:
            return None
        annotation = kinds[0]
    return annotation, nullable


def _is_nullable(source: Any, name: str) -> bool:
    declared = declared_type(source, name)
    return declared is not None and declared[1]


def rule_for(validator: "Validator", source: Any, name: str, value: Any) -> PropertyRule:
    """Pick the rule family for a property.

    The family and nullability follow the annotation declared on the source's
    class, so an ``Optional[int]`` property holding None still gets an
    ``IntRule``. Without a usable annotation the runtime type of ``value``
    decides, and a None value gets a ``BasicRule``.
    """
    declared = declared_type(source, name)
    if declared is not None:
        family = _family(declared[0])
        if family is not None:
            return family(validator, source, name, value, nullable=declared[1])
    family = _family(type(value)) or BasicRule
    return family(validator, source, name, value)



class PropertyNamed:
    """A property selected by name whose value is supplied explicitly."""

    def __init__(self, validator: "Validator", source: Any, name: str):
        self.validator = validator
        self.source = source
        self.name = name

    def with_value(self, value: Any) -> PropertyRule:
        return rule_for(self.validator, self.source, self.name, value)


class ObjectValidator(Generic[S]):
    """Fluent rule selection over one source object.

    Typed selectors take ``nullable`` explicitly; left as None it follows the
    property's annotation (``Optional[...]`` is nullable).
    """

    def __init__(self, source: S, validator: "Validator"):
        self.source = source
        self.validator = validator

    def property(self, selector: Selector) -> PropertyRule:
        """Select a property; the rule family follows its declared or runtime type."""
        name, value = resolve(self.source, selector)
        return rule_for(self.validator, self.source, name, value)

    def property_named(self, name: str) -> PropertyNamed:
        """Select a property by name and supply its value with ``with_value``."""
        return PropertyNamed(self.validator, self.source, name)

    def _typed(self, family: type[R], selector: Selector, nullable: bool | None) -> R:
        name, value = resolve(self.source, selector)
        if nullable is None:
            nullable = _is_nullable(self.source, name)
        return family(self.validator, self.source, name, value, nullable=nullable)

    def int_property(self, selector: Selector, *, nullable: bool | None = None) -> IntRule:
        return self._typed(IntRule, selector, nullable)

    def float_property(self, selector: Selector, *, nullable: bool | None = None) -> FloatRule:
        return self._typed(FloatRule, selector, nullable)

    def decimal_property(self, selector: Selector, *, nullable: bool | None = None) -> DecimalRule:
        return self._typed(DecimalRule, selector, nullable)

    def datetime_property(self, selector: Selector, *, nullable: bool | None = None) -> DateTimeRule:
        return self._typed(DateTimeRule, selector, nullable)

    def bool_property(self, selector: Selector, *, nullable: bool | None = None) -> BoolRule:
        return self._typed(BoolRule, selector, nullable)

    def string_property(self, selector: Selector) -> StringRule:
        name, value = resolve(self.source, selector)
        return StringRule(self.validator, self.source, name, value)

    def collection(self, selector: Selector) -> CollectionRule:
        """Select a collection; an iterable without a length is read once into a tuple."""
        name, value = resolve(self.source, selector)
        return CollectionRule(self.validator, self.source, name, value)



class Validator:
    """Accumulates validation-error messages for one validation pass."""

    def __init__(self) -> None:
        self._errors: list[Message] = []

    @property
    def errors(self) -> tuple[Message, ...]:
        """Errors in the order they were added."""
        return tuple(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def for_(self, source: S) -> ObjectValidator[S]:
        """Start fluent validation of ``source``."""
        return ObjectValidator(source, self)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.errors)

    def __repr__(self) -> str:
        return f"Validator({len(self._errors)} errors)"

    def _add(self, message: Message) -> None:
        logger.debug("Validation failed: %s", message.invariant_content)
        self._errors.append(message)

    # -------------------------------------------------------------------------
    # Imperative checks
    # -------------------------------------------------------------------------

    def validate(
        self,
        resource: ResourceSource,
        key: str,
        tokens: Any,
        condition: bool | Callable[[], bool],
    ) -> "Validator":
        """Add a validation error from ``resource``/``key`` unless ``condition`` holds."""
        passed = condition() if callable(condition) else condition
        if not passed:
            self._add(Message.validation_error(resource, key, tokens))
        return self

    def validate_property_is_required(self, property_name: str, value: Any) -> "Validator":
        """Fail when the value is None, empty or only whitespace."""
        if value is None or not str(value).strip():
            self._add(
                Message.validation_error(
                    VALIDATOR_MESSAGES, "property_required", {"propertyName": property_name}
                )
            )
        return self

    def validate_string_min_length(self, property_name: str, value: str | None, min_length: int) -> "Validator":
        """Fail when a non-None string is shorter than ``min_length``.

        Raises:
            InvalidBoundsError: If ``min_length`` is not positive.
        """
        if min_length <= 0:
            raise InvalidBoundsError("MinLength must be greater than zero.", minimum=min_length)

        if value is not None and len(value) < min_length:
            self._add(
                Message.validation_error(
                    VALIDATOR_MESSAGES,
                    "min_string_length_violation",
                    {"propertyName": property_name, "minLength": min_length},
                )
            )
        return self

    def validate_string_length(
        self,
        property_name: str,
        value: str | None,
        max_length: int,
        min_length: int = 0,
    ) -> "Validator":
        """Check the length of a non-None string against its bounds.

        With ``min_length == 0`` only the maximum applies and a too-long
        string gets the "maximum length" message; otherwise both bounds
        apply and a violation gets the "length range" message.

        Raises:
            InvalidBoundsError: If a bound is negative or
                ``min_length > max_length``.
        """
        if max_length < 0:
            raise InvalidBoundsError("Invalid MaxLength.", maximum=max_length)
        if min_length < 0:
            raise InvalidBoundsError(
                "MinLength must be greater than or equal to zero.", minimum=min_length
            )
        if min_length > max_length:
            raise InvalidBoundsError(
                "MinLength cannot be greater than MaxLength.",
                minimum=min_length,
                maximum=max_length,
            )

        if value is None:
            return self

        length = len(value)
        if min_length == 0:
            if length > max_length:
                self._add(
                    Message.validation_error(
                        VALIDATOR_MESSAGES,
                        "max_string_length_exceeded",
                        {"propertyName": property_name, "maxLength": max_length},
                    )
                )
        elif length < min_length or length > max_length:
            self._add(
                Message.validation_error(
                    VALIDATOR_MESSAGES,
                    "string_length_range_violation",
                    {"propertyName": property_name, "minLength": min_length, "maxLength": max_length},
                )
            )
        return self

    def validate_collection_has_values(self, collection_name: str, collection: Any) -> "Validator":
        """Fail when the collection is None or empty.

        An iterable without a length is consumed to count it.
        """
        if count_values(collection) == 0:
            self._add(
                Message.validation_error(
                    VALIDATOR_MESSAGES, "collection_empty", {"collectionName": collection_name}
                )
            )
        return self
