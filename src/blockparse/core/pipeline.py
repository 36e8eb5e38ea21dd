"""Pipeline entry points: document parsing, file discovery, and file parsing"""

import logging
from pathlib import Path

from blockparse.core.factory import materialize
from blockparse.core.grammar import parse_document
from blockparse.core.models import Block, ParseConfig
from blockparse.core.query import FragmentParser, parse_fragment


logger = logging.getLogger(__name__)

DOCUMENT_EXTENSIONS = {'.html', '.htm', '.txt'}


def parse(content: str, config: ParseConfig, parse_tree: FragmentParser = parse_fragment) -> list[Block]:
    """Parse document content into an ordered list of blocks."""
    blocks = []
    for node in parse_document(content):
        node = node.model_copy(update={"raw_content": node.raw_content.strip()})
        block = materialize(node, config, parse_tree)
        if block is not None:
            blocks.append(block)
    invalid = sum(1 for b in blocks if not b.is_valid)
    logger.debug("Parsed %d block(s), %d invalid", len(blocks), invalid)
    return blocks


def discover_files(path: Path) -> list[Path]:
    """Return sorted document files under path, or [path] if a single document file."""
    if path.is_file():
        return [path] if path.suffix in DOCUMENT_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in DOCUMENT_EXTENSIONS)


def parse_file(path: Path, config: ParseConfig) -> list[Block]:
    """Read a UTF-8 document and parse it into blocks."""
    return parse(path.read_text(encoding='utf-8'), config)


def parse_dir(path: Path, config: ParseConfig) -> dict[Path, list[Block]]:
    """Parse every document under path (file or directory), keyed by file path."""
    return {p: parse_file(p, config) for p in discover_files(path)}
