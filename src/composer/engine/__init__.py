"""Composition engine.

This package provides the registry models, the selector matcher, the
template transformer and the process-wide cache of startup state.

count_fragment_references is a public helper for checking composed pages:
it counts the fragment references a document carries, e.g. to assert that
a page holds one reference per mounted micro-frontend.
"""

from composer.engine.html_transformer import (
    ParsedTemplate,
    count_fragment_references,
    decode_template,
    parse_template,
    transform,
    unmatched_entries,
)
from composer.engine.process_cache import CacheState, CompositionState, ProcessCache
from composer.engine.registry import MicroFrontendEntry, Registry

__all__ = [
    "CacheState",
    "CompositionState",
    "MicroFrontendEntry",
    "ParsedTemplate",
    "ProcessCache",
    "Registry",
    "count_fragment_references",
    "decode_template",
    "parse_template",
    "transform",
    "unmatched_entries",
]
