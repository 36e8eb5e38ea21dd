"""Shared block type fixtures"""

import pytest

from blockparse.core.models import BlockType, ParseConfig


@pytest.fixture(name="test_block_type")
def test_block_type_fixture():
    """A type whose markup is its 'fruit' attribute and whose attributes come only from delimiters."""
    return BlockType(name="core/test-block", to_markup=lambda attrs: attrs.get("fruit"))


@pytest.fixture(name="unknown_block_type")
def unknown_block_type_fixture():
    """A fallback type that keeps the whole fragment as its content."""
    return BlockType(
        name="core/unknown-block",
        attributes=lambda raw: {"content": raw},
        to_markup=lambda attrs: attrs["content"],
    )


@pytest.fixture(name="fallback_config")
def fallback_config_fixture(test_block_type, unknown_block_type):
    return ParseConfig(
        block_types=(test_block_type, unknown_block_type),
        fallback_block_name="core/unknown-block",
    )
