"""API controllers.

This package provides the health, greeting and composed page endpoints.
"""

from composer.controller import health_controller, page_controller

__all__ = [
    "health_controller",
    "page_controller",
]
