"""Attribute resolution: merge defaults, delimiter attributes, and matcher results"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from blockparse.core.models import BlockType, DirectAttributes, IntermediateNode, MatcherAttributes
from blockparse.core.query import FragmentParser, parse_fragment


logger = logging.getLogger(__name__)


def parse_block_attributes(
    raw_content: str,
    spec: MatcherAttributes,
    parse: FragmentParser = parse_fragment,
    ) -> dict[str, Any]:
    """Evaluate every matcher against one parse of raw_content; None results are omitted."""
    if not spec.matchers:
        return {}
    tree = parse(raw_content)
    results = {}
    for key, matcher in spec.matchers.items():
        value = matcher.evaluate(tree)
        if value is not None:
            results[key] = value
    return results


def _direct_attributes(block_type: BlockType, raw_content: str) -> dict[str, Any]:
    try:
        attrs = block_type.spec.fn(raw_content)
    except Exception as e:
        logger.warning("Attribute function for %s failed: %s", block_type.name, e)
        return {}
    if not isinstance(attrs, Mapping):
        logger.warning("Attribute function for %s returned %s, not a mapping",
                       block_type.name, type(attrs).__name__)
        return {}
    return dict(attrs)


def resolve_attributes(
    block_type: Optional[BlockType],
    node: IntermediateNode,
    parse: FragmentParser = parse_fragment,
    ) -> dict[str, Any]:
    """Return the full attribute set for node under block_type.

    A direct spec returns its function's result as-is. A matcher spec layers
    defaults, then delimiter attributes, then matcher results; matcher results
    win key collisions with the delimiter JSON (kept for compatibility).
    """
    if block_type is None:
        return {}
    if isinstance(block_type.spec, DirectAttributes):
        return _direct_attributes(block_type, node.raw_content)
    return {
        **block_type.default_attributes,
        **node.delimiter_attributes,
        **parse_block_attributes(node.raw_content, block_type.spec, parse),
    }
