"""Streamed HTML delivery.

ResponseChannel wraps the ASGI ``send`` callable as a scoped write channel:
opening it sends the response head, and leaving the ``async with`` block
always terminates the body, also when a write raises.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Tuple

from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from composer.constants import HTML_MEDIA_TYPE

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 16384


class ResponseChannel:
    """Write channel over one HTTP response.

    Attributes:
        status_code: Status sent with the response head
        raw_headers: Encoded header pairs sent with the response head
    """

    def __init__(
        self, send: Send, status_code: int, raw_headers: List[Tuple[bytes, bytes]]
    ):
        self._send = send
        self.status_code = status_code
        self.raw_headers = raw_headers
        self._started = False
        self._closed = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def closed(self) -> bool:
        return self._closed

    async def open(self) -> None:
        """Send the response head."""
        await self._send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self.raw_headers,
            }
        )
        self._started = True

    async def write(self, chunk: bytes) -> None:
        """Send one body chunk."""
        if self._closed:
            raise RuntimeError("Response channel is closed")
        if not self._started:
            raise RuntimeError("Response channel is not open")
        await self._send({"type": "http.response.body", "body": chunk, "more_body": True})

    async def close(self) -> None:
        """Terminate the body. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if not self._started:
            return

        try:
            await self._send({"type": "http.response.body", "body": b"", "more_body": False})
        except Exception as e:
            logger.debug(f"Could not terminate response body (client gone?): {e}")

    async def __aenter__(self) -> ResponseChannel:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.close()
        return False


class HtmlStreamResponse(Response):
    """HTML response written through a ResponseChannel in chunks."""

    media_type = HTML_MEDIA_TYPE

    def __init__(
        self,
        content: str,
        status_code: int = 200,
        headers: Optional[Mapping[str, str]] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        super().__init__(content=content, status_code=status_code, headers=headers)
        self.chunk_size = chunk_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        async with ResponseChannel(send, self.status_code, self.raw_headers) as channel:
            for start in range(0, len(self.body), self.chunk_size):
                await channel.write(self.body[start : start + self.chunk_size])

        if self.background is not None:
            await self.background()
