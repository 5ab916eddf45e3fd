"""Fluent validation of object properties.

    >>> from resultobject.validation import Validator, prop
    >>> validator = Validator()
    >>> validator.for_(order).int_property("quantity").is_greater_than(prop("minimum"))
"""

from resultobject.validation.accessors import PropertyAccessor, Selector, prop, resolve
from resultobject.validation.comparable import (
    ComparableRule,
    DateTimeRule,
    DecimalRule,
    FloatRule,
    IntRule,
    PropertyValueComparison,
)
from resultobject.validation.rules import BasicRule, BoolRule, CollectionRule, PropertyRule, StringRule
from resultobject.validation.validator import (
    ObjectValidator,
    PropertyNamed,
    Validator,
    declared_type,
    rule_for,
)

__all__ = [
    "Validator",
    "ObjectValidator",
    "PropertyNamed",
    "rule_for",
    "declared_type",
    # Selectors
    "PropertyAccessor",
    "Selector",
    "prop",
    "resolve",
    # Rule families
    "PropertyRule",
    "BasicRule",
    "BoolRule",
    "StringRule",
    "CollectionRule",
    "ComparableRule",
    "IntRule",
    "FloatRule",
    "DecimalRule",
    "DateTimeRule",
    "PropertyValueComparison",
]
