"""Property selectors for the fluent validator.

A selector names the property being validated and knows how to read its
value from the source object. Two shapes are accepted:

    "email"                                 attribute or mapping key
    prop("total", lambda order: order.net)  explicit name + getter

Bare callables are rejected: a lambda carries no property name to put in
messages.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from resultobject.exceptions import UnsupportedAccessorError


@dataclass(frozen=True)
class PropertyAccessor:
    """A property name paired with the function that reads it.

    Attributes:
        name: Name used in validation messages.
        get_value: Callable taking the source object. When None the value
            is read from the source by name.
    """

    name: str
    get_value: Callable[[Any], Any] | None = None

    def read(self, source: Any) -> Any:
        if self.get_value is not None:
            return self.get_value(source)
        return read_named(source, self.name)


Selector = Union[str, PropertyAccessor]


def prop(name: str, getter: Callable[[Any], Any] | None = None) -> PropertyAccessor:
    """Create a property accessor.

    Example:
        >>> validator.for_(order).int_property(prop("quantity", lambda o: o.lines[0].qty))
    """
    if not isinstance(name, str) or not name:
        raise UnsupportedAccessorError(name, "property name must be a non-empty string")
    if getter is not None and not callable(getter):
        raise UnsupportedAccessorError(getter, "getter must be callable")
    return PropertyAccessor(name, getter)


def read_named(source: Any, name: str) -> Any:
    """Read a property by name from a mapping or an object."""
    if isinstance(source, Mapping):
        if name in source:
            return source[name]
        raise UnsupportedAccessorError(name, "source mapping has no such key")

    try:
        return getattr(source, name)
    except AttributeError:
        raise UnsupportedAccessorError(
            name, f"{type(source).__name__} has no attribute {name!r}"
        ) from None


def resolve(source: Any, selector: Selector) -> tuple[str, Any]:
    """Resolve a selector against a source to ``(name, value)``.

    Raises:
        UnsupportedAccessorError: If the selector has an unsupported shape
            or the source does not expose the property.
    """
    if isinstance(selector, PropertyAccessor):
        return selector.name, selector.read(source)
    if isinstance(selector, str) and selector:
        return selector, read_named(source, selector)
    if callable(selector):
        raise UnsupportedAccessorError(
            selector, "callables carry no property name, use prop(name, getter)"
        )
    raise UnsupportedAccessorError(selector, "expected a property name or prop(...)")
