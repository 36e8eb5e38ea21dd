"""Delimiter grammar: split raw text into block and free-text nodes

Recognized delimiters:
    <!-- wp:NAME {JSON} -->  ...  <!-- /wp:NAME -->    balanced block
    <!-- wp:NAME {JSON} /-->                           void block

The JSON object is optional. A balanced block ends at the first closing
delimiter after its opener; if that closer carries another name (or none
exists) the opener is kept as ordinary text.
"""

import json
import logging
import re
from typing import Any, Optional

from blockparse.core.models import IntermediateNode


logger = logging.getLogger(__name__)

NAME_PATTERN = r'[a-z][a-z0-9_-]*(?:/[a-z][a-z0-9_-]*)?'

OPENER_RE = re.compile(
    r'<!--\s+wp:(?P<name>' + NAME_PATTERN + r')\s+'
    r'(?:(?P<attrs>\{(?:(?!-->).)*?\})\s+)?'
    r'(?P<void>/)?-->',
    re.DOTALL,
)
CLOSER_RE = re.compile(r'<!--\s+/wp:(?P<name>' + NAME_PATTERN + r')\s+-->')


def decode_attributes(payload: Optional[str]) -> dict[str, Any]:
    """Decode a delimiter JSON payload; malformed or non-object payloads yield {}."""
    if not payload:
        return {}
    try:
        attrs = json.loads(payload)
    except (ValueError, RecursionError) as e:
        logger.warning("Ignoring malformed block attributes %r: %s", payload[:80], e)
        return {}
    if not isinstance(attrs, dict):
        logger.warning("Ignoring block attributes that are not an object: %r", payload[:80])
        return {}
    return attrs


def _free_text(text: str, start: int, end: int) -> list[IntermediateNode]:
    if start >= end:
        return []
    chunk = text[start:end]
    return [IntermediateNode(raw_content=chunk, source=chunk)]


def parse_document(text: str) -> list[IntermediateNode]:
    """Scan text into an ordered list of nodes; free text gets block_name None."""
    nodes: list[IntermediateNode] = []
    text_start = 0      # start of the pending free-text run
    pos = 0
    closer = None       # first closer at or after the last search position
    closers_exhausted = False

    while (opener := OPENER_RE.search(text, pos)) is not None:
        name = opener.group('name')

        if opener.group('void'):
            nodes.extend(_free_text(text, text_start, opener.start()))
            nodes.append(IntermediateNode(
                block_name=name,
                raw_content="",
                delimiter_attributes=decode_attributes(opener.group('attrs')),
                source=opener.group(0),
            ))
            pos = text_start = opener.end()
            continue

        # Closers are searched forward only; a later opener reuses the pending one.
        if not closers_exhausted and (closer is None or closer.start() < opener.end()):
            closer = CLOSER_RE.search(text, opener.end())
            closers_exhausted = closer is None
        if closer is None or closer.group('name') != name:
            logger.debug("Unterminated block delimiter for %s at offset %d", name, opener.start())
            pos = opener.start() + 1
            continue

        nodes.extend(_free_text(text, text_start, opener.start()))
        nodes.append(IntermediateNode(
            block_name=name,
            raw_content=text[opener.end():closer.start()],
            delimiter_attributes=decode_attributes(opener.group('attrs')),
            source=text[opener.start():closer.end()],
        ))
        pos = text_start = closer.end()

    nodes.extend(_free_text(text, text_start, len(text)))
    return nodes
