"""Liveness and greeting endpoints.

Neither endpoint touches the composition state, so both answer even while
startup is still in progress.
"""

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from composer.constants import HELLO_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    healthy: bool = Field(True, description="Always true while the process serves")


class HelloResponse(BaseModel):
    """Greeting response model."""

    message: str = Field(..., description="Greeting text")


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    response_model=HealthResponse,
    summary="Liveness check",
)
async def health_check() -> HealthResponse:
    """Report that the process is up; used by the load balancer target group."""
    return HealthResponse(healthy=True)


@router.get(
    "/hello",
    status_code=status.HTTP_200_OK,
    response_model=HelloResponse,
    summary="Greeting",
)
async def hello() -> HelloResponse:
    return HelloResponse(message=HELLO_MESSAGE)
