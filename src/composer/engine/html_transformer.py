"""Page composition: inject micro-frontend references into the template.

The template is tokenized once with the standard library HTML parser to
locate every element and the offset where a child may be appended. Output is
built by splicing fragment references into the original text at those
offsets, so everything else in the template is preserved byte-for-byte.

Policy for entries whose selector matches no element: the entry is skipped.

count_fragment_references is exported for callers that verify composed
output; composition itself never calls it.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple, Union

from composer.engine.registry import MicroFrontendEntry, Registry
from composer.engine.selectors import parse_selector
from composer.exception.api_exceptions import TemplateMalformedError

FRAGMENT_REFERENCE_ATTRIBUTE = "data-micro-frontend"

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

_BLOCK_ELEMENTS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "details",
        "div",
        "dl",
        "fieldset",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "ul",
    }
)

# Elements whose end tag may be omitted, mapped to the start tags that close them
_IMPLICITLY_CLOSED_BY = {
    "p": _BLOCK_ELEMENTS,
    "li": frozenset({"li"}),
    "dt": frozenset({"dt", "dd"}),
    "dd": frozenset({"dt", "dd"}),
    "option": frozenset({"option", "optgroup"}),
    "optgroup": frozenset({"optgroup"}),
    "tr": frozenset({"tr", "tbody", "tfoot"}),
    "td": frozenset({"td", "th", "tr", "tbody", "tfoot"}),
    "th": frozenset({"td", "th", "tr", "tbody", "tfoot"}),
    "thead": frozenset({"tbody", "tfoot"}),
    "tbody": frozenset({"tbody", "tfoot"}),
    "head": frozenset({"body"}),
    "rt": frozenset({"rt", "rp"}),
    "rp": frozenset({"rt", "rp"}),
}

OPTIONAL_END_TAG_ELEMENTS = frozenset(_IMPLICITLY_CLOSED_BY) | {
    "html",
    "body",
    "tfoot",
    "colgroup",
    "caption",
}


@dataclass(frozen=True)
class TemplateElement:
    """An element of the parsed template.

    Attributes:
        tag: Lowercased tag name
        attrs: Attributes as reported by the parser
        start: Offset of the start tag
        insert_at: Offset where an appended child is inserted
    """

    tag: str
    attrs: Tuple[Tuple[str, Optional[str]], ...]
    start: int
    insert_at: int


@dataclass(frozen=True)
class ParsedTemplate:
    """Template text plus its elements in document order."""

    source: str
    elements: Tuple[TemplateElement, ...]

    def find(self, selector: str) -> Optional[TemplateElement]:
        """Return the first element matching a simple selector."""
        parsed = parse_selector(selector)
        for element in self.elements:
            if parsed.matches(element.tag, element.attrs):
                return element
        return None


class _OpenElement:
    __slots__ = ("tag", "attrs", "start", "insert_at")

    def __init__(self, tag, attrs, start, insert_at=None):
        self.tag = tag
        self.attrs = tuple(attrs)
        self.start = start
        self.insert_at = insert_at

    def freeze(self) -> TemplateElement:
        return TemplateElement(self.tag, self.attrs, self.start, self.insert_at)


class _TemplateParser(HTMLParser):
    """Tracks element boundaries and rejects unbalanced markup."""

    def __init__(self, source: str):
        super().__init__(convert_charrefs=False)
        self.source = source
        self.line_offsets = [0]
        self.line_offsets.extend(
            index + 1 for index, char in enumerate(source) if char == "\n"
        )
        self.stack: List[_OpenElement] = []
        self.elements: List[_OpenElement] = []

    def _offset(self) -> int:
        line, column = self.getpos()
        return self.line_offsets[line - 1] + column

    def _malformed(self, message: str) -> TemplateMalformedError:
        return TemplateMalformedError(message, line=self.getpos()[0])

    def _implied_target(self, tag: str) -> Optional[int]:
        # Only elements with optional end tags may be skipped; any other open
        # element (ul, ol, table, select...) bounds the search.
        for index in range(len(self.stack) - 1, -1, -1):
            open_tag = self.stack[index].tag
            if tag in _IMPLICITLY_CLOSED_BY.get(open_tag, ()):
                return index
            if open_tag not in OPTIONAL_END_TAG_ELEMENTS:
                return None
        return None

    def _close_implied(self, tag: str, position: int) -> None:
        target = self._implied_target(tag)
        while target is not None:
            for unclosed in self.stack[target:]:
                unclosed.insert_at = position
            del self.stack[target:]
            target = self._implied_target(tag)

    def handle_starttag(self, tag, attrs):
        start = self._offset()
        end = start + len(self.get_starttag_text())
        self._close_implied(tag, start)

        element = _OpenElement(tag, attrs, start)
        self.elements.append(element)
        if tag in VOID_ELEMENTS:
            element.insert_at = end
        else:
            self.stack.append(element)

    def handle_startendtag(self, tag, attrs):
        start = self._offset()
        end = start + len(self.get_starttag_text())
        self._close_implied(tag, start)
        self.elements.append(_OpenElement(tag, attrs, start, insert_at=end))

    def handle_endtag(self, tag):
        if tag in VOID_ELEMENTS:
            return

        position = self._offset()
        if not any(element.tag == tag for element in self.stack):
            raise self._malformed(f"Unexpected end tag </{tag}>")

        while self.stack[-1].tag != tag:
            unclosed = self.stack.pop()
            if unclosed.tag not in OPTIONAL_END_TAG_ELEMENTS:
                raise self._malformed(f"Unclosed <{unclosed.tag}> before </{tag}>")
            unclosed.insert_at = position

        self.stack.pop().insert_at = position

    def finish(self) -> Tuple[TemplateElement, ...]:
        self.close()
        for unclosed in reversed(self.stack):
            if unclosed.tag not in OPTIONAL_END_TAG_ELEMENTS:
                raise self._malformed(f"Unclosed <{unclosed.tag}> at end of template")
            unclosed.insert_at = len(self.source)
        self.stack.clear()
        return tuple(element.freeze() for element in self.elements)


def decode_template(raw: bytes) -> str:
    """Decode a fetched template blob.

    Raises:
        TemplateMalformedError: If the blob is not UTF-8 text
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise TemplateMalformedError(f"Template is not valid UTF-8: {e}") from e


def parse_template(source: str) -> ParsedTemplate:
    """Parse template text into elements.

    Raises:
        TemplateMalformedError: If the markup is unbalanced or has no elements
    """
    parser = _TemplateParser(source)
    parser.feed(source)
    elements = parser.finish()
    if not elements:
        raise TemplateMalformedError("Template contains no HTML elements")
    return ParsedTemplate(source=source, elements=elements)


def render_fragment_reference(entry: MicroFrontendEntry) -> str:
    """Render the markup that loads one micro-frontend."""
    return (
        f'<script type="module" {FRAGMENT_REFERENCE_ATTRIBUTE}="{html.escape(entry.name)}" '
        f'src="{html.escape(entry.remote_url)}"></script>'
    )


def _ensure_parsed(template: Union[str, ParsedTemplate]) -> ParsedTemplate:
    if isinstance(template, ParsedTemplate):
        return template
    return parse_template(template)


def transform(template: Union[str, ParsedTemplate], registry: Registry) -> str:
    """Compose the final page.

    For each entry, in registry order, a fragment reference is appended as
    the last child of the first element matching its mount selector (right
    after the tag for void or self-closing elements). Entries without a
    matching element are skipped.

    Args:
        template: Template text or an already parsed template
        registry: Loaded registry

    Returns:
        Composed HTML

    Raises:
        TemplateMalformedError: If the template cannot be parsed
    """
    parsed = _ensure_parsed(template)

    insertions: Dict[int, List[str]] = {}
    for entry in registry.entries:
        element = parsed.find(entry.mount_selector)
        if element is None:
            continue
        insertions.setdefault(element.insert_at, []).append(
            render_fragment_reference(entry)
        )

    if not insertions:
        return parsed.source

    pieces = []
    cursor = 0
    for offset in sorted(insertions):
        pieces.append(parsed.source[cursor:offset])
        pieces.extend(insertions[offset])
        cursor = offset
    pieces.append(parsed.source[cursor:])
    return "".join(pieces)


def unmatched_entries(
    template: Union[str, ParsedTemplate], registry: Registry
) -> List[MicroFrontendEntry]:
    """List entries whose mount selector matches no template element."""
    parsed = _ensure_parsed(template)
    return [
        entry for entry in registry.entries if parsed.find(entry.mount_selector) is None
    ]


def count_fragment_references(document: str) -> int:
    """Count fragment references present in a composed page."""
    parsed = parse_template(document)
    return sum(
        1
        for element in parsed.elements
        if any(name == FRAGMENT_REFERENCE_ATTRIBUTE for name, _ in element.attrs)
    )
