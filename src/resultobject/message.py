"""Localized diagnostic messages.

A ``Message`` pairs localized content (in the active or requested locale)
with invariant content rendered from the reference locale. Both are
computed once, when the message is created.

Example:
    >>> from resultobject.resources import VALIDATOR_MESSAGES
    >>> message = Message.validation_error(
    ...     VALIDATOR_MESSAGES, "property_required", {"propertyName": "email"}, locale="fr"
    ... )
    >>> message.content
    'Le champ "email" est obligatoire.'
    >>> message.invariant_content
    'The "email" field is required.'
"""

from __future__ import annotations

import logging
import typing
from dataclasses import dataclass, field
from typing import Any

from resultobject.config import REFERENCE_LOCALE, get_settings
from resultobject.i18n.casing import to_kebab_case
from resultobject.i18n.catalog import ResourceSource
from resultobject.i18n.formatting import format_template, lower_camel_case_tokens, token_items
from resultobject.i18n.locale import get_locale, with_locale
from resultobject.resources import CORE_MESSAGES
from resultobject.types import MessageKind
from resultobject.verbosity import MessageVerbosity, get_verbosity

logger = logging.getLogger(__name__)


def _type_name(entity_type: Any) -> str:
    """Name used for the ``type`` token of not-found messages.

    ``Result[User]`` unwraps to ``User``; strings are used as given.
    """
    if isinstance(entity_type, str):
        return entity_type

    from resultobject.result import Result

    origin = typing.get_origin(entity_type)
    if isinstance(origin, type) and issubclass(origin, Result):
        args = typing.get_args(entity_type)
        if args:
            return _type_name(args[0])

    return getattr(entity_type, "__name__", str(entity_type))


@dataclass(frozen=True)
class Message:
    """An immutable, localized diagnostic entry.

    Attributes:
        kind: Message category.
        code: Locale-independent kebab-case identifier of the resource key.
        template: Localized template with lower-camel-cased token names,
            or None when the resource is missing.
        tokens: Token bag supplied by the caller, as given.
        language_code: Locale used to produce ``content``.
        content: Localized, interpolated text.
        invariant_content: Reference-locale rendering, for logs only.
    """

    kind: MessageKind
    code: str
    template: str | None
    tokens: Any = field(default=None, hash=False, compare=False)
    language_code: str = ""
    content: str = ""
    invariant_content: str = ""

    @classmethod
    def create(
        cls,
        kind: MessageKind,
        resource: ResourceSource,
        key: str,
        locale: str | None = None,
        tokens: Any = None,
    ) -> "Message":
        """Build a message from a resource key.

        A missing resource does not raise: content and invariant content
        are both set to a diagnostic naming the key and the resource. A
        blank or whitespace-only entry counts as missing.
        """
        code = to_kebab_case(key)

        with with_locale(locale):
            language_code = get_locale()
            raw_template = resource.get_string(key, language_code)

            if _is_blank(raw_template):
                diagnostic = _missing_resource(resource, key)
                logger.warning(diagnostic)
                return cls(
                    kind=kind,
                    code=code,
                    template=None,
                    tokens=tokens,
                    language_code=language_code,
                    content=diagnostic,
                    invariant_content=diagnostic,
                )

            content = format_template(raw_template, tokens)

        reference = get_settings().get_str("locale.reference", REFERENCE_LOCALE)
        invariant_template = resource.get_string(key, reference)
        if _is_blank(invariant_template):
            invariant_content = _missing_resource(resource, key)
            logger.warning(invariant_content)
        else:
            invariant_content = format_template(invariant_template, tokens)

        return cls(
            kind=kind,
            code=code,
            template=lower_camel_case_tokens(raw_template),
            tokens=tokens,
            language_code=language_code,
            content=content,
            invariant_content=invariant_content,
        )

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def info(cls, resource: ResourceSource, key: str, tokens: Any = None, locale: str | None = None) -> "Message":
        return cls.create(MessageKind.INFORMATION, resource, key, locale, tokens)

    @classmethod
    def warning(cls, resource: ResourceSource, key: str, tokens: Any = None, locale: str | None = None) -> "Message":
        return cls.create(MessageKind.WARNING, resource, key, locale, tokens)

    @classmethod
    def error(cls, resource: ResourceSource, key: str, tokens: Any = None, locale: str | None = None) -> "Message":
        return cls.create(MessageKind.ERROR, resource, key, locale, tokens)

    @classmethod
    def validation_error(
        cls, resource: ResourceSource, key: str, tokens: Any = None, locale: str | None = None
    ) -> "Message":
        return cls.create(MessageKind.VALIDATION_ERROR, resource, key, locale, tokens)

    @classmethod
    def unauthorized(
        cls,
        resource: ResourceSource | None = None,
        key: str | None = None,
        tokens: Any = None,
        locale: str | None = None,
    ) -> "Message":
        """Unauthorized message, from the core catalog unless a resource is given."""
        resource, key = _core_default(resource, key, "unauthorized")
        return cls.create(MessageKind.UNAUTHORIZED, resource, key, locale, tokens)

    @classmethod
    def forbidden(
        cls,
        resource: ResourceSource | None = None,
        key: str | None = None,
        tokens: Any = None,
        locale: str | None = None,
    ) -> "Message":
        """Forbidden message, from the core catalog unless a resource is given."""
        resource, key = _core_default(resource, key, "forbidden")
        return cls.create(MessageKind.FORBIDDEN, resource, key, locale, tokens)

    @classmethod
    def not_found(cls, entity_type: Any, identity: Any, locale: str | None = None) -> "Message":
        """Not-found message naming the entity type and its identifier.

        Example:
            >>> Message.not_found("String", "ident").invariant_content
            'The type "String" with identifier "ident" does not exist.'
        """
        tokens = {"type": _type_name(entity_type), "id": identity}
        return cls.create(MessageKind.NOT_FOUND, CORE_MESSAGES, "not_found", locale, tokens)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self, options: MessageVerbosity | None = None) -> dict[str, Any]:
        """Boundary representation honoring the verbosity options.

        Optional fields are omitted, never emitted as null placeholders.
        """
        if options is None:
            options = get_verbosity()

        data: dict[str, Any] = {"type": self.kind.value}
        if options.code:
            data["code"] = self.code
        if options.template and self.template is not None:
            data["template"] = self.template
        if options.tokens and self.tokens is not None:
            data["tokens"] = dict(token_items(self.tokens))
        if options.language_code:
            data["languageCode"] = self.language_code
        data["content"] = self.content
        return data

    def __str__(self) -> str:
        return self.invariant_content


def _is_blank(template: str | None) -> bool:
    return template is None or not template.strip()


def _missing_resource(resource: ResourceSource, key: str) -> str:
    name = getattr(resource, "name", type(resource).__name__)
    return f'Missing resource "{key}" from resource file: "{name}"'


def _core_default(resource: ResourceSource | None, key: str | None, default_key: str) -> tuple[ResourceSource, str]:
    if resource is None:
        return CORE_MESSAGES, key or default_key
    if key is None:
        raise TypeError("A resource key is required when a resource is given")
    return resource, key
