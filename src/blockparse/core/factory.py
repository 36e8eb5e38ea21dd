"""Block materialization with legacy renames and fallback-type substitution"""

import logging
from collections.abc import Mapping
from typing import Any, Optional
from uuid import uuid4

from blockparse.core.attributes import resolve_attributes
from blockparse.core.models import Block, BlockType, IntermediateNode, ParseConfig, get_block_type
from blockparse.core.query import FragmentParser, parse_fragment
from blockparse.core.validator import log_invalid_block, validate


logger = logging.getLogger(__name__)

LEGACY_NAMES = {
    'core/text': 'core/paragraph',
}


def create_block(
    block_type: BlockType,
    attributes: Optional[Mapping[str, Any]] = None,
    is_valid: bool = True,
    original_content: Optional[str] = None,
    ) -> Block:
    """Return a new Block of block_type with a fresh unique id."""
    return Block(
        id=str(uuid4()),
        name=block_type.name,
        attributes=dict(attributes or {}),
        is_valid=is_valid,
        original_content=original_content,
    )


def materialize(
    node: IntermediateNode,
    config: ParseConfig,
    parse: FragmentParser = parse_fragment,
    ) -> Optional[Block]:
    """Build a validated Block from node, or None when no usable type exists."""
    name = node.block_name or config.fallback_block_name
    name = LEGACY_NAMES.get(name, name)

    block_type = get_block_type(name, config)
    if block_type is None:
        name = config.fallback_block_name
        block_type = get_block_type(name, config)

    if block_type is None:
        logger.debug("Dropping %s node: no registered type", node.block_name or "free-text")
        return None
    if name == config.fallback_block_name and not node.raw_content and node.block_name is None:
        return None

    attributes = resolve_attributes(block_type, node, parse)
    diagnostics = (config.diagnostics or log_invalid_block) if config.dev_mode else None
    is_valid, original = validate(
        block_type, attributes, node.raw_content,
        normalize=config.normalize, diagnostics=diagnostics,
    )
    return create_block(block_type, attributes, is_valid, original)
