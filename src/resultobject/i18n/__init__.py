"""Localization primitives: locale scopes, catalogs and token formatting."""

from resultobject.i18n.casing import lower_camel, to_kebab_case, to_snake_case
from resultobject.i18n.catalog import (
    DictMessageLoader,
    FileMessageLoader,
    MessageCatalog,
    MessageLoader,
    ResourceCatalog,
    ResourceSource,
    read_catalog_file,
)
from resultobject.i18n.formatting import (
    format_template,
    format_value,
    lower_camel_case_tokens,
    template_tokens,
    token_items,
)
from resultobject.i18n.locale import (
    NEUTRAL_LOCALE,
    LocaleInfo,
    ScopedLocale,
    get_fallback_chain,
    get_locale,
    normalize_locale,
    reset_locale,
    set_locale,
    with_locale,
)

__all__ = [
    # Locale
    "NEUTRAL_LOCALE",
    "LocaleInfo",
    "ScopedLocale",
    "get_fallback_chain",
    "get_locale",
    "normalize_locale",
    "reset_locale",
    "set_locale",
    "with_locale",
    # Catalogs
    "DictMessageLoader",
    "FileMessageLoader",
    "MessageCatalog",
    "MessageLoader",
    "ResourceCatalog",
    "ResourceSource",
    "read_catalog_file",
    # Formatting
    "format_template",
    "format_value",
    "lower_camel_case_tokens",
    "template_tokens",
    "token_items",
    # Casing
    "lower_camel",
    "to_kebab_case",
    "to_snake_case",
]
