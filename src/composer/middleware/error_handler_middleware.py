"""Error handling for the composer gateway.

ErrorHandlerMiddleware catches every exception escaping a route handler and
answers with the fixed server-error page. http_exception_handler renders
routing errors (404, 405) with the fixed pages as well.
"""

import logging
import uuid

from fastapi import Request, status
from starlette.datastructures import MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Receive, Scope, Send

from composer.controller.static_pages import not_found_page, server_error_page
from composer.exception.api_exceptions import ComposerException
from composer.infrastructure.streaming.html_response import HtmlStreamResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ErrorHandlerMiddleware:
    """Pure ASGI middleware converting unhandled errors into the 500 page."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive)
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        response_started = False

        async def send_with_request_id(message: dict) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                headers = MutableHeaders(scope=message)
                headers.append(REQUEST_ID_HEADER, request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception as exc:
            if response_started:
                raise
            response = self.handle_exception(request, exc, request_id)
            await response(scope, receive, send)

    @staticmethod
    def handle_exception(
        request: Request, exc: Exception, request_id: str
    ) -> HtmlStreamResponse:
        """Log the failure and build the fixed error response.

        Args:
            request: Request that caused the exception
            exc: Exception that was raised
            request_id: Request ID for tracing

        Returns:
            HtmlStreamResponse with the server-error page
        """
        extra = {
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        }
        if isinstance(exc, ComposerException):
            extra["error_code"] = exc.code
            extra["details"] = exc.details

        logger.error(
            f"Error processing request: {request.method} {request.url.path}",
            extra=extra,
            exc_info=exc,
        )

        return HtmlStreamResponse(
            server_error_page(),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers={REQUEST_ID_HEADER: request_id},
        )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> HtmlStreamResponse:
    """Render routing errors with the fixed pages."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.info(f"No route for {request.method} {request.url.path}")
        return HtmlStreamResponse(not_found_page(), status_code=exc.status_code)

    return HtmlStreamResponse(
        server_error_page(),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )
