"""Startup sequencing.

Loads the registry, fetches the template it points to and publishes both to
the ProcessCache. Every failure is fatal: the caller must not start serving.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from composer.engine.html_transformer import (
    decode_template,
    parse_template,
    unmatched_entries,
)
from composer.engine.process_cache import CompositionState, ProcessCache

if TYPE_CHECKING:
    from composer.infrastructure.persistence.s3.client import S3Client
    from composer.repository.registry_repository import RegistryLoader

logger = logging.getLogger(__name__)


class StartupSequencer:
    """Runs Registry Loader -> Template Store -> ProcessCache once.

    Attributes:
        registry_loader: Reads the registry from the Parameter Store
        template_store: Fetches the template object
        cache: Process cache to populate
    """

    def __init__(
        self,
        registry_loader: RegistryLoader,
        template_store: S3Client,
        cache: ProcessCache,
    ):
        self.registry_loader = registry_loader
        self.template_store = template_store
        self.cache = cache

    async def start(self) -> CompositionState:
        """Load the composition state.

        Returns:
            The ready composition state

        Raises:
            ConfigUnavailableError: Registry could not be loaded
            ObjectNotFoundError: Template object does not exist
            ObjectStoreUnavailableError: Template store could not be reached
            TemplateMalformedError: Template is not parseable HTML
        """
        self.cache.begin_loading()

        try:
            logger.info("Loading micro-frontend registry")
            registry = await self.registry_loader.load()

            logger.info(
                f"Fetching template s3://{registry.template_bucket}/{registry.template_key}"
            )
            raw_template = await self.template_store.fetch(
                registry.template_bucket, registry.template_key
            )
            template = parse_template(decode_template(raw_template))

            for entry in unmatched_entries(template, registry):
                logger.warning(
                    f"Micro-frontend '{entry.name}' has no mount point matching "
                    f"'{entry.mount_selector}' in the template; it will not be injected"
                )
        except Exception as e:
            self.cache.fail(e)
            logger.error(f"Startup failed: {e}")
            raise

        state = self.cache.set(registry, template)
        logger.info(
            f"Composition state ready: {len(registry.entries)} micro-frontends, "
            f"template {len(template.source)} chars"
        )
        return state
