"""Simple CSS selectors for micro-frontend mount points.

Only simple selectors are supported: an optional tag name (or ``*``), an
optional ``#id``, any number of ``.class`` parts and any number of
``[attr]`` / ``[attr=value]`` parts. Combinators are rejected.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Sequence, Tuple

Attributes = Sequence[Tuple[str, Optional[str]]]

_TAG_RE = re.compile(r"\*|[a-zA-Z][a-zA-Z0-9-]*")
_PART_RE = re.compile(
    r"""
    \#(?P<id>[\w-]+)
    |\.(?P<cls>[\w-]+)
    |\[\s*(?P<attr>[\w:.-]+)\s*
        (?:=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[\w-]+))\s*)?
     \]
    """,
    re.VERBOSE,
)


class SelectorSyntaxError(ValueError):
    """Selector is empty or uses unsupported syntax."""


@dataclass(frozen=True)
class SimpleSelector:
    """Parsed simple selector.

    Attributes:
        tag: Lowercased tag name, None for any element
        element_id: Required id attribute value
        classes: Required class names
        attributes: Required attributes as (name, value or None for presence)
    """

    tag: Optional[str] = None
    element_id: Optional[str] = None
    classes: Tuple[str, ...] = ()
    attributes: Tuple[Tuple[str, Optional[str]], ...] = ()

    def matches(self, tag: str, attrs: Attributes) -> bool:
        """Check whether an element satisfies every part of the selector."""
        if self.tag is not None and tag.lower() != self.tag:
            return False

        values = {}
        for name, value in attrs:
            values.setdefault(name.lower(), value)

        if self.element_id is not None and values.get("id") != self.element_id:
            return False

        if self.classes:
            present = set((values.get("class") or "").split())
            if not present.issuperset(self.classes):
                return False

        for name, expected in self.attributes:
            if name not in values:
                return False
            if expected is not None and values[name] != expected:
                return False

        return True


@lru_cache(maxsize=256)
def parse_selector(text: str) -> SimpleSelector:
    """Parse a simple selector.

    Args:
        text: Selector such as ``#reviews``, ``div.slot`` or ``[data-mfe=cart]``

    Returns:
        Parsed selector

    Raises:
        SelectorSyntaxError: If the selector is empty or unsupported
    """
    source = text.strip()
    if not source:
        raise SelectorSyntaxError("Selector is empty")

    tag = None
    position = 0
    tag_match = _TAG_RE.match(source)
    if tag_match:
        tag = None if tag_match.group() == "*" else tag_match.group().lower()
        position = tag_match.end()

    element_id = None
    classes = []
    attributes = []

    while position < len(source):
        part = _PART_RE.match(source, position)
        if part is None:
            raise SelectorSyntaxError(
                f"Unsupported selector syntax at position {position}: {text!r}"
            )

        if part.group("id") is not None:
            if element_id is not None and element_id != part.group("id"):
                raise SelectorSyntaxError(f"Selector has two ids: {text!r}")
            element_id = part.group("id")
        elif part.group("cls") is not None:
            classes.append(part.group("cls"))
        else:
            value = next(
                (
                    part.group(group)
                    for group in ("dq", "sq", "bare")
                    if part.group(group) is not None
                ),
                None,
            )
            attributes.append((part.group("attr").lower(), value))

        position = part.end()

    return SimpleSelector(
        tag=tag,
        element_id=element_id,
        classes=tuple(classes),
        attributes=tuple(attributes),
    )
