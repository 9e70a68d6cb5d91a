"""Process-wide composition state.

Holds the registry and parsed template loaded at startup. The cache is
written exactly once by the StartupSequencer and only read afterwards, so the
request path needs no locking.

Lifecycle: uninitialized -> loading -> ready, or loading -> failed.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from composer.engine.html_transformer import ParsedTemplate
from composer.engine.registry import Registry
from composer.exception.api_exceptions import CompositionNotReadyError

logger = logging.getLogger(__name__)


class CacheState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class CompositionState:
    """Immutable (registry, template) pair consumed by every request."""

    registry: Registry
    template: ParsedTemplate


class ProcessCache:
    """Write-once holder for the composition state.

    Attributes:
        _state: Current lifecycle state
        _value: Composition state once ready
        _failure: Error that moved the cache to failed
    """

    def __init__(self):
        self._state = CacheState.UNINITIALIZED
        self._value: Optional[CompositionState] = None
        self._failure: Optional[BaseException] = None

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def failure(self) -> Optional[BaseException]:
        return self._failure

    def is_ready(self) -> bool:
        return self._state is CacheState.READY

    def _transition(self, expected: CacheState, target: CacheState) -> None:
        if self._state is not expected:
            raise RuntimeError(
                f"Invalid cache transition {self._state.value} -> {target.value}"
            )
        logger.debug(f"Process cache {self._state.value} -> {target.value}")
        self._state = target

    def begin_loading(self) -> None:
        """Mark the start of the startup load."""
        self._transition(CacheState.UNINITIALIZED, CacheState.LOADING)

    def set(self, registry: Registry, template: ParsedTemplate) -> CompositionState:
        """Store the loaded pair and mark the cache ready.

        Args:
            registry: Loaded registry
            template: Parsed page template

        Returns:
            The stored composition state
        """
        self._transition(CacheState.LOADING, CacheState.READY)
        self._value = CompositionState(registry=registry, template=template)
        return self._value

    def fail(self, error: BaseException) -> None:
        """Mark the cache permanently failed."""
        self._transition(CacheState.LOADING, CacheState.FAILED)
        self._failure = error

    def get(self) -> CompositionState:
        """Read the composition state.

        Raises:
            CompositionNotReadyError: If startup has not completed successfully
        """
        if self._state is not CacheState.READY:
            raise CompositionNotReadyError(self._state.value)
        return self._value
