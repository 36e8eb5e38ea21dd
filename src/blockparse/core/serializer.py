"""Serialize blocks back into delimited document markup"""

import json
from collections.abc import Iterable
from typing import Any

from blockparse.core.models import Block, BlockType, MatcherAttributes, ParseConfig, get_block_type
from blockparse.core.validator import get_save_content


def get_block_default_classname(name: str) -> str:
    """Return the default CSS class for a block name, e.g. core/verse -> wp-block-verse."""
    classname = 'wp-block-' + name.replace('/', '-', 1)
    return classname.replace('wp-block-core-', 'wp-block-', 1)


def get_comment_attributes(block_type: BlockType, attributes: dict[str, Any]) -> dict[str, Any]:
    """Return the attributes that cannot be recovered from the block's markup."""
    if not isinstance(block_type.spec, MatcherAttributes):
        return {}
    defaults = block_type.default_attributes
    return {
        key: value for key, value in attributes.items()
        if key not in block_type.spec.matchers
        and not (key in defaults and defaults[key] == value)
    }


def serialize_attributes(attributes: dict[str, Any]) -> str:
    """Compact JSON safe to embed in an HTML comment."""
    payload = json.dumps(attributes, separators=(',', ':'), ensure_ascii=False)
    return (
        payload.replace('--', '\\u002d\\u002d')
               .replace('<', '\\u003c')
               .replace('>', '\\u003e')
    )


def serialize_block(block: Block, config: ParseConfig) -> str:
    """Return the delimited markup for one block.

    Invalid blocks keep their original content. Blocks of the fallback type are
    written without delimiters.
    """
    block_type = get_block_type(block.name, config)
    if block_type is None:
        raise ValueError(f"Block type {block.name!r} is not registered")

    if block.is_valid:
        content = get_save_content(block_type, block.attributes)
    else:
        content = block.original_content

    if block.name == config.fallback_block_name:
        return content

    opener = f"wp:{block.name}"
    attrs = get_comment_attributes(block_type, block.attributes)
    if attrs:
        opener += ' ' + serialize_attributes(attrs)

    if not content:
        return f"<!-- {opener} /-->"
    return f"<!-- {opener} -->\n{content}\n<!-- /wp:{block.name} -->"


def serialize(blocks: Iterable[Block], config: ParseConfig) -> str:
    """Serialize blocks in order, separated by blank lines."""
    return "\n\n".join(serialize_block(b, config) for b in blocks)
