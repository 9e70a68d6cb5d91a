"""Composed page endpoints.

The page is fully composed before the response starts, so a composition
failure never leaks partial output: it surfaces as the fixed 500 page.
"""

import logging

from fastapi import APIRouter, Request

from composer.infrastructure.streaming.html_response import HtmlStreamResponse
from composer.service.composition_service import CompositionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])


@router.get(
    "/productdetails",
    response_class=HtmlStreamResponse,
    summary="Product details page",
    responses={
        200: {"description": "Composed page", "content": {"text/html": {}}},
        500: {"description": "Fixed server error page", "content": {"text/html": {}}},
    },
)
async def product_details(request: Request) -> HtmlStreamResponse:
    """Compose the product details page from the cached template and registry.

    Args:
        request: FastAPI request

    Returns:
        Streamed HTML page

    Raises:
        ComposerException: If the composition state is not ready or the
            template cannot be composed (rendered as the 500 page)
    """
    composition_service: CompositionService = request.app.state.composition_service
    chunk_size = request.app.state.app_settings.stream_chunk_size

    page = composition_service.compose()
    logger.debug(f"Composed product details page ({len(page)} chars)")

    return HtmlStreamResponse(page, status_code=200, chunk_size=chunk_size)


@router.get("/error", include_in_schema=False)
async def raise_error() -> None:
    """Always fail; exercises the error page path end to end."""
    raise RuntimeError("Error")
