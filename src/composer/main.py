"""UI Composer FastAPI application.

This module wires the composition gateway: settings, AWS clients, the
startup sequencer, error handling and routers. ``run()`` is the process
entry point; it loads the registry and template before the server binds its
socket and exits with status 1 if either cannot be loaded.
"""

# ruff: noqa: E402  load_dotenv() must run before any composer imports that read env

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import aioboto3
import uvicorn
from botocore.config import Config
from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from composer import __version__
from composer.config.app_settings import AppSettings, get_settings
from composer.controller import health_controller, page_controller
from composer.engine.process_cache import ProcessCache
from composer.infrastructure.persistence.s3.client import S3Client
from composer.infrastructure.persistence.ssm.client import ParameterStoreClient
from composer.middleware import ErrorHandlerMiddleware, http_exception_handler
from composer.repository.registry_repository import RegistryLoader
from composer.service.composition_service import CompositionService
from composer.service.startup_service import StartupSequencer

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(app_settings: AppSettings) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=app_settings.log_level.upper(), format=LOG_FORMAT)


def create_boto_config(app_settings: AppSettings) -> Config:
    """Create botocore config with explicit startup timeouts and retry policy."""
    return Config(**app_settings.boto_config_kwargs())


def create_startup_sequencer(
    app_settings: AppSettings, cache: ProcessCache
) -> StartupSequencer:
    """Create the sequencer with Parameter Store and S3 clients."""
    session = aioboto3.Session()
    boto_config = create_boto_config(app_settings)

    parameter_store = ParameterStoreClient(
        region=app_settings.region,
        endpoint_url=app_settings.aws_endpoint_url,
        config=boto_config,
        session=session,
    )
    template_store = S3Client(
        region=app_settings.region,
        endpoint_url=app_settings.aws_endpoint_url,
        config=boto_config,
        session=session,
    )
    logger.info(
        f"AWS clients configured: region={app_settings.region}, "
        f"endpoint={app_settings.aws_endpoint_url or 'AWS'}"
    )

    return StartupSequencer(
        registry_loader=RegistryLoader.from_settings(parameter_store, app_settings),
        template_store=template_store,
        cache=cache,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    When the app is served by an external ASGI server the registry and
    template have not been loaded yet; load them here. A failure aborts
    server startup before any socket is bound.
    """
    configure_logging(app.state.app_settings)
    logger.info("=== UI Composer Startup ===")

    cache: ProcessCache = app.state.process_cache
    if not cache.is_ready():
        sequencer = create_startup_sequencer(app.state.app_settings, cache)
        await sequencer.start()

    logger.info("=== UI Composer Ready ===")

    yield

    logger.info("=== UI Composer Stopped ===")


def configure_error_handlers(application: FastAPI) -> None:
    """Set up the fixed not-found and server-error pages."""
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_middleware(ErrorHandlerMiddleware)
    logger.debug("Error handling middleware configured")


def register_api_routers(application: FastAPI) -> None:
    """Register all route controllers."""
    application.include_router(health_controller.router)
    application.include_router(page_controller.router)


def create_app(
    app_settings: Optional[AppSettings] = None,
    cache: Optional[ProcessCache] = None,
) -> FastAPI:
    """Build the gateway application.

    Args:
        app_settings: Settings, defaults to the process singleton
        cache: Process cache, already loaded by ``run()`` or empty

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or get_settings()
    cache = cache or ProcessCache()

    application = FastAPI(
        title="UI Composer",
        description="Micro-frontend composition gateway.",
        version=__version__,
        lifespan=lifespan,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )

    application.state.app_settings = app_settings
    application.state.process_cache = cache
    application.state.composition_service = CompositionService(cache)

    configure_error_handlers(application)
    register_api_routers(application)

    return application


def run() -> None:
    """Process entry point: load, then serve.

    The registry and template are loaded before uvicorn starts, so a failed
    load never opens a listening socket.
    """
    app_settings = get_settings()
    configure_logging(app_settings)

    cache = ProcessCache()
    sequencer = create_startup_sequencer(app_settings, cache)

    try:
        asyncio.run(sequencer.start())
    except Exception as e:
        logger.error(f"UI Composer failed to start: {e}", exc_info=True)
        sys.exit(1)

    application = create_app(app_settings, cache)

    uvicorn.run(
        application,
        host=app_settings.api_host,
        port=app_settings.api_port,
        log_level=app_settings.log_level.lower(),
    )


app = create_app()

if __name__ == "__main__":
    run()
