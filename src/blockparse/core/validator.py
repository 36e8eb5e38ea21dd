"""Round-trip validation: re-derive markup from attributes and compare to the source"""

import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, Optional

from blockparse.core.utils.diff import unified_diff

if TYPE_CHECKING:
    from blockparse.core.models import BlockType


logger = logging.getLogger(__name__)

_BETWEEN_TAGS_RE = re.compile(r'>\s+<')
_WHITESPACE_RE = re.compile(r'\s+')


def normalize_markup(markup: str) -> str:
    """Collapse formatting whitespace so equivalent markup compares equal."""
    markup = _BETWEEN_TAGS_RE.sub('><', markup.strip())
    return _WHITESPACE_RE.sub(' ', markup)


def log_invalid_block(name: str, expected: str, actual: str) -> None:
    """Default diagnostics sink: log expected vs actual with a unified diff."""
    diff = unified_diff(actual, expected, from_label="actual", to_label="expected")
    logger.error(
        "Invalid block parse (%s)\n\tExpected: %s\n\tActual:   %s\n%s",
        name, expected, actual, "".join(diff),
    )


def get_save_content(block_type: "BlockType", attributes: Mapping[str, Any]) -> str:
    """Return the type's markup for attributes; None counts as empty markup."""
    return block_type.to_markup(attributes) or ""


def validate(
    block_type: "BlockType",
    attributes: Mapping[str, Any],
    raw_content: str,
    normalize: Callable[[str], str] = normalize_markup,
    diagnostics: Optional[Callable[[str, str, str], None]] = None,
    ) -> tuple[bool, Optional[str]]:
    """Return (is_valid, original_content); original_content is set only when invalid.

    diagnostics, when given, receives (name, expected, actual) for each mismatch.
    """
    try:
        expected = normalize(get_save_content(block_type, attributes))
        actual = normalize(raw_content)
    except Exception as e:
        logger.warning("Round-trip check for %s failed: %s", block_type.name, e)
        return False, raw_content

    if expected == actual:
        return True, None

    if diagnostics is not None:
        diagnostics(block_type.name, expected, actual)
    return False, raw_content
