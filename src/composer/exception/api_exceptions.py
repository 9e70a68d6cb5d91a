"""Custom exceptions for the UI composer.

All custom exceptions inherit from ComposerException for consistent error
handling. Startup errors are fatal and end the process; request errors are
converted into the fixed server-error page by the error middleware.
"""

from typing import Any, Dict, Optional


class ComposerException(Exception):
    """Base exception for all composer errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize composer exception.

        Args:
            message: Human-readable error message (logged, never rendered)
            code: Error code for programmatic handling
            status_code: HTTP status code
            details: Additional error context
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


# Startup errors (fatal)
class StartupError(ComposerException):
    """Failure while loading the registry or the template."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            code=kwargs.pop("code", "STARTUP_ERROR"),
            status_code=500,
            **kwargs,
        )


class ConfigUnavailableError(StartupError):
    """Required configuration is missing or the configuration store is unreachable."""

    def __init__(self, message: str, keys: Optional[list] = None, **kwargs):
        details = kwargs.pop("details", {})
        if keys:
            details["keys"] = list(keys)

        super().__init__(
            message=message, code="CONFIG_UNAVAILABLE", details=details, **kwargs
        )


class ObjectNotFoundError(StartupError):
    """Requested object does not exist in the object store."""

    def __init__(self, bucket: str, key: str, **kwargs):
        super().__init__(
            message=f"Object not found: s3://{bucket}/{key}",
            code="OBJECT_NOT_FOUND",
            details={"bucket": bucket, "key": key},
            **kwargs,
        )


class ObjectStoreUnavailableError(StartupError):
    """Object store transport or authorization failure."""

    def __init__(self, bucket: str, key: str, reason: str = "", **kwargs):
        message = f"Object store unavailable for s3://{bucket}/{key}"
        if reason:
            message = f"{message}: {reason}"

        super().__init__(
            message=message,
            code="OBJECT_STORE_UNAVAILABLE",
            details={"bucket": bucket, "key": key},
            **kwargs,
        )


# Request errors (500)
class TemplateMalformedError(ComposerException):
    """Template cannot be parsed as HTML markup."""

    def __init__(self, message: str, line: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        if line is not None:
            details["line"] = line

        super().__init__(
            message=message,
            code="TEMPLATE_MALFORMED",
            status_code=500,
            details=details,
            **kwargs,
        )


class HandlerUnexpectedError(ComposerException):
    """Unexpected failure inside a route handler."""

    def __init__(self, message: str = "Unexpected handler error", **kwargs):
        super().__init__(
            message=message,
            code="HANDLER_UNEXPECTED_ERROR",
            status_code=500,
            **kwargs,
        )


class CompositionNotReadyError(ComposerException):
    """Composition state was read before startup completed."""

    def __init__(self, state: str, **kwargs):
        super().__init__(
            message=f"Composition state not ready (state={state})",
            code="COMPOSITION_NOT_READY",
            status_code=500,
            details={"state": state},
            **kwargs,
        )
