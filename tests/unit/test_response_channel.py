"""Unit tests for ResponseChannel and HtmlStreamResponse.

Verifies the ASGI messages sent for a streamed page and that the body is
always terminated exactly once, including when writes fail.
"""

from unittest.mock import AsyncMock

import pytest

from composer.infrastructure.streaming.html_response import (
    HtmlStreamResponse,
    ResponseChannel,
)

END_OF_BODY = {"type": "http.response.body", "body": b"", "more_body": False}


def _make_recorder():
    messages = []

    async def send(message):
        messages.append(message)

    return messages, send


# ---------------------------------------------------------------------------
# ResponseChannel
# ---------------------------------------------------------------------------


class TestResponseChannel:
    """Tests for the scoped write channel."""

    @pytest.mark.asyncio
    async def test_sends_head_chunks_and_end(self) -> None:
        """Open, write and close produce start, body chunks and the terminator."""
        messages, send = _make_recorder()

        async with ResponseChannel(send, 200, [(b"x-test", b"1")]) as channel:
            await channel.write(b"<html>")
            await channel.write(b"</html>")

        assert messages == [
            {"type": "http.response.start", "status": 200, "headers": [(b"x-test", b"1")]},
            {"type": "http.response.body", "body": b"<html>", "more_body": True},
            {"type": "http.response.body", "body": b"</html>", "more_body": True},
            END_OF_BODY,
        ]

    @pytest.mark.asyncio
    async def test_body_is_terminated_when_block_raises(self) -> None:
        """An error inside the block still ends the body, then propagates."""
        messages, send = _make_recorder()

        with pytest.raises(ValueError):
            async with ResponseChannel(send, 200, []) as channel:
                await channel.write(b"partial")
                raise ValueError("writer failed")

        assert messages[-1] == END_OF_BODY

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self) -> None:
        """Closing twice sends one terminator."""
        messages, send = _make_recorder()
        channel = ResponseChannel(send, 200, [])
        await channel.open()

        await channel.close()
        await channel.close()

        assert messages.count(END_OF_BODY) == 1
        assert channel.closed

    @pytest.mark.asyncio
    async def test_close_without_open_sends_nothing(self) -> None:
        """A channel that never started sends no messages."""
        send = AsyncMock()
        channel = ResponseChannel(send, 200, [])

        await channel.close()

        send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_tolerates_disconnected_client(self) -> None:
        """A failure sending the terminator is not raised."""
        send = AsyncMock(side_effect=[None, ConnectionResetError("gone")])
        channel = ResponseChannel(send, 200, [])
        await channel.open()

        await channel.close()

        assert channel.closed

    @pytest.mark.asyncio
    async def test_write_after_close_raises(self) -> None:
        """Writes are rejected once the channel is closed."""
        _, send = _make_recorder()
        channel = ResponseChannel(send, 200, [])
        await channel.open()
        await channel.close()

        with pytest.raises(RuntimeError):
            await channel.write(b"late")

    @pytest.mark.asyncio
    async def test_write_before_open_raises(self) -> None:
        """Writes require the response head to be sent first."""
        _, send = _make_recorder()

        with pytest.raises(RuntimeError):
            await ResponseChannel(send, 200, []).write(b"early")


# ---------------------------------------------------------------------------
# HtmlStreamResponse
# ---------------------------------------------------------------------------


class TestHtmlStreamResponse:
    """Tests for the chunked HTML response."""

    @pytest.mark.asyncio
    async def test_streams_body_in_chunks(self) -> None:
        """The body is split into chunk_size pieces followed by the terminator."""
        messages, send = _make_recorder()
        response = HtmlStreamResponse("<p>hello</p>", chunk_size=5)

        await response({"type": "http"}, AsyncMock(), send)

        chunks = [m["body"] for m in messages if m["type"] == "http.response.body"]
        assert chunks == [b"<p>he", b"llo</", b"p>", b""]

    @pytest.mark.asyncio
    async def test_sets_html_content_type(self) -> None:
        """The response is served as UTF-8 HTML with its status code."""
        messages, send = _make_recorder()

        await HtmlStreamResponse("<p></p>", status_code=404)({"type": "http"}, AsyncMock(), send)

        start = messages[0]
        assert start["status"] == 404
        assert (b"content-type", b"text/html; charset=utf-8") in start["headers"]

    @pytest.mark.asyncio
    async def test_runs_background_task_after_body(self) -> None:
        """A background task runs once the body is terminated."""
        messages, send = _make_recorder()
        background = AsyncMock()
        response = HtmlStreamResponse("<p></p>")
        response.background = background

        await response({"type": "http"}, AsyncMock(), send)

        background.assert_awaited_once()
        assert messages[-1] == END_OF_BODY
