"""Comparison and range rules for ordered value types.

One generic ``ComparableRule`` implements every comparison; the concrete
families only differ by which values count as "empty" for ``is_required``:

    IntRule        0
    FloatRule      0.0
    DecimalRule    Decimal("0")
    DateTimeRule   datetime.min / date.min

Comparisons come in three forms:

    rule.is_greater_than(prop("floor"))           other property, immediate
    rule.is_greater_than("floor").with_value(3)   other property, two-step
    rule.is_greater_than_value(3)                 literal value

Property comparisons name both properties in the message; literal
comparisons name the value. A None on either side fails the rule.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar

from resultobject.exceptions import InvalidBoundsError
from resultobject.resources import VALIDATOR_MESSAGES
from resultobject.types import RangeBoundaries
from resultobject.validation.accessors import Selector, resolve
from resultobject.validation.rules import PropertyRule

T = TypeVar("T")
R = TypeVar("R")

_Op = Callable[[Any, Any], bool]

# operator -> (literal value key, other property key)
_MESSAGE_KEYS: dict[_Op, tuple[str, str]] = {
    operator.gt: ("value_not_greater_than_value", "value_not_greater_than"),
    operator.ge: ("value_not_greater_than_or_equal_to_value", "value_not_greater_than_or_equal"),
    operator.lt: ("value_not_less_than_value", "value_not_less_than"),
    operator.le: ("value_not_less_than_or_equal_to_value", "value_not_less_than_or_equal"),
}

_RANGE_KEYS = {
    RangeBoundaries.ALL_INCLUSIVE: "value_not_within_inclusive_range",
    RangeBoundaries.MIN_INCLUSIVE: "value_not_within_min_inclusive_range",
    RangeBoundaries.MAX_INCLUSIVE: "value_not_within_max_inclusive_range",
    RangeBoundaries.EXCLUSIVE: "value_not_within_exclusive_range",
}


class PropertyValueComparison(Generic[R]):
    """Pending comparison against a named property whose value comes next."""

    def __init__(self, property_name: str, handle_value: Callable[[Any], R]):
        self.property_name = property_name
        self._handle_value = handle_value

    def with_value(self, value: Any) -> R:
        return self._handle_value(value)

    def __repr__(self) -> str:
        return f"PropertyValueComparison({self.property_name!r})"


class ComparableRule(PropertyRule, Generic[T]):
    """Rule builder for ordered values."""

    def _passes(self, op: _Op, other: Any) -> bool:
        if self.value is None or other is None:
            return False
        return bool(op(self.value, other))

    def _against_value(self, op: _Op, value: Any) -> "ComparableRule[T]":
        self.validator.validate(
            VALIDATOR_MESSAGES,
            _MESSAGE_KEYS[op][0],
            {"propertyName": self.name, "value": value},
            self._passes(op, value),
        )
        return self

    def _against_property(self, op: _Op, other_name: str, other_value: Any) -> "ComparableRule[T]":
        self.validator.validate(
            VALIDATOR_MESSAGES,
            _MESSAGE_KEYS[op][1],
            {"propertyNameOne": self.name, "propertyNameTwo": other_name},
            self._passes(op, other_value),
        )
        return self

    def _compare(self, op: _Op, other: Selector) -> Any:
        if isinstance(other, str):
            return PropertyValueComparison(
                other, lambda value: self._against_property(op, other, value)
            )
        name, value = resolve(self.source, other)
        return self._against_property(op, name, value)

    # -------------------------------------------------------------------------
    # Against another property
    # -------------------------------------------------------------------------

    def is_greater_than(self, other: Selector) -> Any:
        """Compare with another property.

        Returns the rule for a ``prop(...)`` selector, or a
        ``PropertyValueComparison`` awaiting ``with_value`` for a bare name.
        """
        return self._compare(operator.gt, other)

    def is_greater_than_or_equal_to(self, other: Selector) -> Any:
        return self._compare(operator.ge, other)

    def is_less_than(self, other: Selector) -> Any:
        return self._compare(operator.lt, other)

    def is_less_than_or_equal_to(self, other: Selector) -> Any:
        return self._compare(operator.le, other)

    # -------------------------------------------------------------------------
    # Against a literal value
    # -------------------------------------------------------------------------

    def is_greater_than_value(self, value: T | None) -> "ComparableRule[T]":
        return self._against_value(operator.gt, value)

    def is_greater_than_or_equal_to_value(self, value: T | None) -> "ComparableRule[T]":
        return self._against_value(operator.ge, value)

    def is_less_than_value(self, value: T | None) -> "ComparableRule[T]":
        return self._against_value(operator.lt, value)

    def is_less_than_or_equal_to_value(self, value: T | None) -> "ComparableRule[T]":
        return self._against_value(operator.le, value)

    # -------------------------------------------------------------------------
    # Ranges
    # -------------------------------------------------------------------------

    def has_value_in_range(
        self,
        minimum: T,
        maximum: T,
        boundaries: RangeBoundaries | str = RangeBoundaries.ALL_INCLUSIVE,
    ) -> "ComparableRule[T]":
        """Check ``minimum <(=) value <(=) maximum``.

        Raises:
            InvalidBoundsError: If a bound is None or ``minimum > maximum``.
        """
        if minimum is None or maximum is None:
            raise InvalidBoundsError(
                "Range bounds cannot be None.", minimum=minimum, maximum=maximum
            )
        if minimum > maximum:
            raise InvalidBoundsError(
                f"Range minimum {minimum!r} cannot be greater than maximum {maximum!r}.",
                minimum=minimum,
                maximum=maximum,
            )

        boundaries = RangeBoundaries(boundaries)
        lower = operator.ge if boundaries in (RangeBoundaries.ALL_INCLUSIVE, RangeBoundaries.MIN_INCLUSIVE) else operator.gt
        upper = operator.le if boundaries in (RangeBoundaries.ALL_INCLUSIVE, RangeBoundaries.MAX_INCLUSIVE) else operator.lt

        self.validator.validate(
            VALIDATOR_MESSAGES,
            _RANGE_KEYS[boundaries],
            {"propertyName": self.name, "min": minimum, "max": maximum},
            self._passes(lower, minimum) and self._passes(upper, maximum),
        )
        return self


class IntRule(ComparableRule[int]):
    empty_values = (0,)


class FloatRule(ComparableRule[float]):
    empty_values = (0.0,)


class DecimalRule(ComparableRule[Decimal]):
    empty_values = (Decimal("0"),)


class DateTimeRule(ComparableRule[datetime]):
    empty_values = (datetime.min, date.min)
