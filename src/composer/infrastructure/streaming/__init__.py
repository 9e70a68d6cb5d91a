"""Streaming response infrastructure."""

from composer.infrastructure.streaming.html_response import (
    HtmlStreamResponse,
    ResponseChannel,
)

__all__ = ["HtmlStreamResponse", "ResponseChannel"]
