"""Named-token template formatting.

Templates reference tokens by name, optionally with a format specifier:

    "The field \"{propertyName}\" must be greater than {value}."
    "Total: {amount:F2}"

Token names match case-insensitively and tolerate whitespace inside the
braces (``{ Amount : F2 }``). Escaped braces (``{{`` / ``}}``) are never
treated as tokens and pass through literally, so ``{{{name}}}`` renders the
value between two literal pairs: ``{{value}}``.

Formatting works in two steps. Every placeholder naming a supplied token is
first rewritten to a positional placeholder carrying the token index and its
format specifier (``{amount:F2}`` -> ``{0:F2}``). Positional placeholders are
then substituted with the token values rendered with invariant (culture
independent) rules, so the output never depends on the active locale.

If placeholders remain that no token consumed, the template is returned
unchanged (or ``MissingTokenError`` is raised when ``tokens.strict`` is on).

Example:
    >>> format_template("Hello {monkey:F1} {balls:F2}", {"monkey": 9.987654321, "balls": 0.123456789})
    'Hello 10.0 0.12'
"""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Context, Decimal, localcontext
from typing import Any

from resultobject.config import get_settings
from resultobject.exceptions import MissingTokenError

logger = logging.getLogger(__name__)


# A placeholder may sit inside escaped braces ("{{{name}}}"): an even run of
# "{" before it and of "}" after it is kept as literal text.
_OPEN = r"(?<!\{)(?P<lead>(?:\{\{)*)\{"
_CLOSE = r"\}(?P<trail>(?:\}\})*)(?!\})"

_POSITIONAL = re.compile(_OPEN + r"(?P<index>\d+)(?P<format>:[^{}]*)?" + _CLOSE)
_UNRESOLVED = re.compile(_OPEN + r"(?P<placeholder>\s*[A-Za-z_][^{}]*)" + _CLOSE)
_TEMPLATE_TOKEN = re.compile(_OPEN + r"(?P<token>[^{}]+?)" + _CLOSE)
_STANDARD_NUMERIC = re.compile(r"^(?P<code>[CcDdEeFfGgNnPpXx])(?P<precision>\d{1,2})?$")


def _token_pattern(name: str) -> re.Pattern[str]:
    return re.compile(
        _OPEN + r"(?P<token>\s*" + re.escape(name) + r"\s*)(?P<format>:[^{}]+)?" + _CLOSE,
        re.IGNORECASE,
    )


# =============================================================================
# Token bags
# =============================================================================


def token_items(tokens: Any) -> list[tuple[str, Any]]:
    """Get the ``(name, value)`` pairs of a token bag in iteration order.

    Accepts mappings, dataclass instances, named tuples and plain objects
    (public instance attributes).
    """
    if tokens is None:
        return []
    if isinstance(tokens, Mapping):
        return [(str(key), value) for key, value in tokens.items()]
    if dataclasses.is_dataclass(tokens) and not isinstance(tokens, type):
        return [(f.name, getattr(tokens, f.name)) for f in dataclasses.fields(tokens)]
    if isinstance(tokens, tuple) and hasattr(tokens, "_asdict"):
        return list(tokens._asdict().items())
    if hasattr(tokens, "__dict__"):
        return [(key, value) for key, value in vars(tokens).items() if not key.startswith("_")]
    raise TypeError(
        f"Tokens must be a mapping or an object with attributes, got {type(tokens).__name__}"
    )


# =============================================================================
# Template formatting
# =============================================================================


def format_template(template: str, tokens: Any, *, strict: bool | None = None) -> str:
    """Interpolate named tokens into a template.

    Args:
        template: Template with ``{name}`` / ``{name:spec}`` placeholders.
        tokens: Token bag (see ``token_items``) or None.
        strict: Raise ``MissingTokenError`` for unresolved placeholders.
            Defaults to the ``tokens.strict`` setting.

    Returns:
        The interpolated string, or ``template`` unchanged when tokens is
        None or when a placeholder has no matching token.
    """
    if tokens is None:
        return template

    values: list[Any] = []
    message = template
    for name, value in token_items(tokens):
        values.append(value)
        index = len(values) - 1
        message = _token_pattern(name).sub(
            lambda m, i=index: "%s{%d%s}%s"
            % (m.group("lead"), i, m.group("format") or "", m.group("trail")),
            message,
        )

    unresolved = ["{" + m.group("placeholder") + "}" for m in _UNRESOLVED.finditer(message)]
    if unresolved:
        if strict is None:
            strict = get_settings().get_bool("tokens.strict")
        if strict:
            raise MissingTokenError(template, unresolved)
        logger.warning(
            "The message template references tokens that have not been supplied. "
            "template: %s missing token values: %s",
            template,
            ", ".join(unresolved),
        )
        return template

    def substitute(match: re.Match[str]) -> str:
        index = int(match.group("index"))
        if index >= len(values):
            return match.group(0)
        spec = (match.group("format") or "")[1:]
        return match.group("lead") + format_value(values[index], spec) + match.group("trail")

    return _POSITIONAL.sub(substitute, message)


def lower_camel_case_tokens(template: str) -> str:
    """Lower-case the first letter of every token name in a template.

    Format specifiers are left untouched:
    ``"{FirstName} owes {Amount:F2}"`` -> ``"{firstName} owes {amount:F2}"``.
    """

    def lower(match: re.Match[str]) -> str:
        token = match.group("token")
        stripped = token.lstrip()
        if not stripped:
            return match.group(0)
        offset = len(token) - len(stripped)
        return (
            match.group("lead") + "{" + token[:offset] + stripped[0].lower() + stripped[1:] + "}"
            + match.group("trail")
        )

    return _TEMPLATE_TOKEN.sub(lower, template)


def template_tokens(template: str) -> list[str]:
    """List the token names referenced by a template, in order."""
    names = []
    for match in _TEMPLATE_TOKEN.finditer(template):
        name = match.group("token").split(":", 1)[0].strip()
        if name and not name.isdigit() and name not in names:
            names.append(name)
    return names


# =============================================================================
# Invariant value formatting
# =============================================================================


def format_value(value: Any, spec: str = "") -> str:
    """Render a single token value with invariant formatting rules.

    Supported specifiers:
        - Standard numeric: ``F``, ``N``, ``D``, ``P``, ``E``, ``X``, ``G``,
          ``C`` with optional precision (``F2``, ``N0``, ``D5``).
          Rounding is half away from zero.
        - Dates: standard ``d``, ``D``, ``g``, ``G``, ``s``, ``u``, ``o``,
          ``t``, ``T``; custom patterns (``yyyy-MM-dd HH:mm``); strftime
          patterns containing ``%``.
        - Anything else is handed to Python's ``format()``.
    """
    spec = spec.strip()
    if value is None:
        return ""

    if isinstance(value, bool):
        return str(value)

    if not spec:
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()
        return str(value)

    if isinstance(value, (int, float, Decimal)):
        match = _STANDARD_NUMERIC.match(spec)
        if match:
            rendered = _format_standard_numeric(
                value, match.group("code"), match.group("precision")
            )
            if rendered is not None:
                return rendered

    if isinstance(value, (datetime, date, time)):
        return _format_datetime(value, spec)

    try:
        return format(value, spec)
    except (ValueError, TypeError):
        return str(value)


def _to_decimal(value: int | float | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def _fixed(number: Decimal, digits: int, *, grouping: bool = False) -> str:
    quantized = number.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    return format(quantized, f"{',' if grouping else ''}.{digits}f")


def _significant(number: Decimal, digits: int) -> Decimal:
    if not number:
        return number
    return Context(prec=digits, rounding=ROUND_HALF_UP).plus(number)


def _format_standard_numeric(value: int | float | Decimal, code: str, precision: str | None) -> str | None:
    if isinstance(value, float) and (value != value or value in (float("inf"), float("-inf"))):
        return None

    upper = code.upper()
    digits = int(precision) if precision is not None else None
    number = _to_decimal(value)

    with localcontext() as ctx:
        ctx.rounding = ROUND_HALF_UP
        # Wide enough for every integer digit (plus two for P) and the fraction.
        ctx.prec = max(60, max(number.adjusted(), 0) + 3 + (digits or 0) + 6)

        if upper == "F":
            return _fixed(number, 2 if digits is None else digits)

        if upper == "N":
            return _fixed(number, 2 if digits is None else digits, grouping=True)

        if upper == "P":
            return _fixed(number * 100, 2 if digits is None else digits, grouping=True) + " %"

        if upper == "C":
            rendered = _fixed(abs(number), 2 if digits is None else digits, grouping=True)
            return ("-" if number < 0 else "") + "¤" + rendered

        if upper == "E":
            digits = 6 if digits is None else digits
            if number.is_zero():
                mantissa, exponent = format(Decimal(0), f".{digits}f"), "+0"
            else:
                rounded = _significant(number, digits + 1)
                mantissa, exponent = format(rounded, f".{digits}E").split("E")
            sign = "-" if exponent.startswith("-") else "+"
            exponent = exponent.lstrip("+-").rjust(3, "0")
            separator = "E" if code == "E" else "e"
            return f"{mantissa}{separator}{sign}{exponent}"

        if upper == "G":
            if digits:
                return format(_significant(number, digits), code)
            return str(value)

        if number != number.to_integral_value():
            return None

        integer = int(number)

        if upper == "D":
            rendered = str(abs(integer)).rjust(digits or 0, "0")
            return ("-" if integer < 0 else "") + rendered

        if upper == "X":
            if integer < 0:
                return None
            rendered = format(integer, "X" if code == "X" else "x")
            return rendered.rjust(digits or 0, "0")

    return None


_MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_STANDARD_DATE_PATTERNS = {
    "d": "MM/dd/yyyy",
    "D": "dddd, dd MMMM yyyy",
    "g": "MM/dd/yyyy HH:mm",
    "G": "MM/dd/yyyy HH:mm:ss",
    "s": "yyyy-MM-ddTHH:mm:ss",
    "u": "yyyy-MM-dd HH:mm:ssZ",
    "t": "HH:mm",
    "T": "HH:mm:ss",
}

_DATE_FIELD = re.compile(
    r"yyyy|yy|MMMM|MMM|MM|M|dddd|ddd|dd|d|HH|H|hh|h|mm|m|ss|s|fff|ff|f|tt|'[^']*'|\"[^\"]*\"|\\.|."
)


def _date_field(value: datetime | date | time, field: str) -> str:
    year = getattr(value, "year", 1)
    month = getattr(value, "month", 1)
    day = getattr(value, "day", 1)
    hour = getattr(value, "hour", 0)
    minute = getattr(value, "minute", 0)
    second = getattr(value, "second", 0)
    micro = getattr(value, "microsecond", 0)
    hour12 = hour % 12 or 12

    fields = {
        "yyyy": lambda: f"{year:04d}",
        "yy": lambda: f"{year % 100:02d}",
        "MMMM": lambda: _MONTHS[month - 1],
        "MMM": lambda: _MONTHS[month - 1][:3],
        "MM": lambda: f"{month:02d}",
        "M": lambda: str(month),
        "dddd": lambda: _DAYS[date(year, month, day).weekday()],
        "ddd": lambda: _DAYS[date(year, month, day).weekday()][:3],
        "dd": lambda: f"{day:02d}",
        "d": lambda: str(day),
        "HH": lambda: f"{hour:02d}",
        "H": lambda: str(hour),
        "hh": lambda: f"{hour12:02d}",
        "h": lambda: str(hour12),
        "mm": lambda: f"{minute:02d}",
        "m": lambda: str(minute),
        "ss": lambda: f"{second:02d}",
        "s": lambda: str(second),
        "fff": lambda: f"{micro // 1000:03d}",
        "ff": lambda: f"{micro // 10000:02d}",
        "f": lambda: str(micro // 100000),
        "tt": lambda: "AM" if hour < 12 else "PM",
    }
    if field in fields:
        return fields[field]()
    if len(field) >= 2 and field[0] == field[-1] and field[0] in "'\"":
        return field[1:-1]
    if field.startswith("\\"):
        return field[1:]
    return field


def _format_datetime(value: datetime | date | time, spec: str) -> str:
    if "%" in spec:
        return value.strftime(spec)
    if spec in ("o", "O"):
        return value.isoformat()
    pattern = _STANDARD_DATE_PATTERNS.get(spec, spec)
    return "".join(_date_field(value, m.group(0)) for m in _DATE_FIELD.finditer(pattern))

