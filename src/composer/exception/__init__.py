"""Exception handling package.

This package provides the composer exception hierarchy. Startup errors end
the process; request errors are mapped to the fixed error page.
"""

from composer.exception.api_exceptions import (
    ComposerException,
    CompositionNotReadyError,
    ConfigUnavailableError,
    HandlerUnexpectedError,
    ObjectNotFoundError,
    ObjectStoreUnavailableError,
    StartupError,
    TemplateMalformedError,
)

__all__ = [
    "ComposerException",
    "CompositionNotReadyError",
    "ConfigUnavailableError",
    "HandlerUnexpectedError",
    "ObjectNotFoundError",
    "ObjectStoreUnavailableError",
    "StartupError",
    "TemplateMalformedError",
]
