"""Per-request page composition."""

import logging

from composer.engine.html_transformer import transform
from composer.engine.process_cache import ProcessCache
from composer.exception.api_exceptions import (
    ComposerException,
    HandlerUnexpectedError,
)

logger = logging.getLogger(__name__)


class CompositionService:
    """Composes the page from the cached registry and template.

    Attributes:
        cache: Process cache populated at startup
    """

    def __init__(self, cache: ProcessCache):
        self.cache = cache

    def compose(self) -> str:
        """Build the full page.

        Returns:
            Composed HTML document

        Raises:
            CompositionNotReadyError: If startup has not completed
            TemplateMalformedError: If the template cannot be parsed
            HandlerUnexpectedError: For any other failure while composing
        """
        state = self.cache.get()
        try:
            return transform(state.template, state.registry)
        except ComposerException:
            raise
        except Exception as e:
            raise HandlerUnexpectedError(f"Page composition failed: {e}") from e
