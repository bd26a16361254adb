"""
Lightweight scanning of the XISF XML header.

The header is treated as text, not parsed as XML: lookups are literal,
case-sensitive substring searches that return the first match. Attribute
values are assumed free of '"', tags free of '>' and '/>' inside values,
and no entity decoding is done ('&amp;' stays '&amp;').

Element iteration is modelled as restartable sequences of tag-text slices
produced by a pure search function that takes a start offset and returns
the match together with the offset to resume from.
"""

from typing import Iterator, Optional, Tuple

XML_DECLARATION = b"<?xml"


def extract_markup(header: bytes) -> str:
    """
    Recover the XML text from a raw header block.

    Bytes before the XML declaration are dropped (position 0 is used when
    there is no declaration). The text ends at the first NUL after that
    point, since containers pad the block with NULs. Invalid UTF-8 is
    replaced rather than rejected.
    """
    start = header.find(XML_DECLARATION)
    if start < 0:
        start = 0

    end = header.find(b"\x00", start)
    if end < 0:
        end = len(header)

    return header[start:end].decode('utf-8', errors='replace')


def find_attribute(text: str, name: str) -> Optional[str]:
    """Value of the first ``name="..."`` in text, or None."""
    pattern = f'{name}="'
    start = text.find(pattern)
    if start < 0:
        return None

    start += len(pattern)
    end = text.find('"', start)
    if end < 0:
        return None
    return text[start:end]


def find_tag(text: str, prefix: str, terminator: str, start: int = 0) -> Optional[Tuple[str, int]]:
    """
    Find the next tag opening with prefix and ending at terminator.

    Args:
        text: Header text
        prefix: Literal opening, e.g. '<FITSKeyword '
        terminator: Literal end of the tag text, '/>' or '>'
        start: Offset to search from

    Returns:
        (tag text including the terminator, offset just past it), or None
    """
    tag_start = text.find(prefix, start)
    if tag_start < 0:
        return None

    tag_end = text.find(terminator, tag_start)
    if tag_end < 0:
        return None

    tag_end += len(terminator)
    return text[tag_start:tag_end], tag_end


class TagSequence:
    """Restartable sequence of tag texts; every iteration scans from the start."""

    def __init__(self, text: str, prefix: str, terminator: str):
        self.text = text
        self.prefix = prefix
        self.terminator = terminator

    def __iter__(self) -> Iterator[str]:
        position = 0
        while (match := find_tag(self.text, self.prefix, self.terminator, position)) is not None:
            tag, position = match
            yield tag

    def first(self) -> Optional[str]:
        return next(iter(self), None)


def iter_self_closing_elements(text: str, prefix: str) -> TagSequence:
    """Self-closing elements such as ``<FITSKeyword .../>``."""
    return TagSequence(text, prefix, "/>")


def iter_open_tags(text: str, prefix: str) -> TagSequence:
    """Opening tags only (element content is not scanned), e.g. ``<Image ...>``."""
    return TagSequence(text, prefix, ">")


def find_property_value(text: str, property_id: str) -> Optional[str]:
    """
    Value of a named ``<Property id="..." type="...">``.

    The value is the element content up to ``</Property>``, trimmed. A
    self-closing property tag carries it in a ``value`` attribute instead.
    """
    start = text.find(f'id="{property_id}" type="')
    if start < 0:
        return None

    tag_end = text.find('>', start)
    if tag_end < 0:
        return None

    tag = text[start:tag_end + 1]
    if tag.endswith('/>'):
        return find_attribute(tag, "value")

    content_start = tag_end + 1
    content_end = text.find('</Property>', content_start)
    if content_end < 0:
        return None
    return text[content_start:content_end].strip()
