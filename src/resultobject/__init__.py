"""resultobject - outcome objects with localized, structured messages.

Build results through builders, attach messages from resource catalogs,
and validate inputs with a fluent rule engine:

    >>> from resultobject import Result, Validator
    >>> validator = Validator()
    >>> validator.for_(order).int_property("quantity").has_value_in_range(1, 100)
    >>> if validator.has_errors:
    ...     result = Result.failure().with_validator(validator).build()
    ... else:
    ...     result = Result.success(order).build()

A not-found failure names the missing entity type:

    >>> Result.failure(Order).not_found(order_id).build()
"""

from resultobject.config import Settings, get_settings, load_settings, reset_settings
from resultobject.exceptions import (
    BuilderCommittedError,
    CatalogLoadError,
    ContractViolationError,
    InvalidBoundsError,
    MissingTokenError,
    ResultObjectError,
    ResultValueError,
    UnsupportedAccessorError,
)
from resultobject.i18n import (
    DictMessageLoader,
    FileMessageLoader,
    MessageCatalog,
    ResourceCatalog,
    ResourceSource,
    format_template,
    get_locale,
    set_locale,
    with_locale,
)
from resultobject.message import Message
from resultobject.resources import CORE_MESSAGES, VALIDATOR_MESSAGES
from resultobject.result import FailureResultBuilder, Result, ResultBuilder
from resultobject.types import ErrorMode, MessageKind, RangeBoundaries
from resultobject.validation import PropertyAccessor, Validator, prop
from resultobject.verbosity import (
    HEADER_NAME,
    MessageVerbosity,
    get_verbosity,
    set_default_verbosity,
    use_verbosity,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Results
    "Result",
    "ResultBuilder",
    "FailureResultBuilder",
    "Message",
    "MessageKind",
    "ErrorMode",
    # Validation
    "Validator",
    "PropertyAccessor",
    "prop",
    "RangeBoundaries",
    # Localization
    "CORE_MESSAGES",
    "VALIDATOR_MESSAGES",
    "DictMessageLoader",
    "FileMessageLoader",
    "MessageCatalog",
    "ResourceCatalog",
    "ResourceSource",
    "format_template",
    "get_locale",
    "set_locale",
    "with_locale",
    # Verbosity
    "HEADER_NAME",
    "MessageVerbosity",
    "get_verbosity",
    "set_default_verbosity",
    "use_verbosity",
    # Configuration
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    # Errors
    "ResultObjectError",
    "ContractViolationError",
    "InvalidBoundsError",
    "UnsupportedAccessorError",
    "ResultValueError",
    "BuilderCommittedError",
    "MissingTokenError",
    "CatalogLoadError",
]
