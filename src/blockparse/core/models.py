"""Data models for the grammar, materialize, and validate pipeline"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from blockparse.core.query import Matcher
from blockparse.core.validator import normalize_markup


logger = logging.getLogger(__name__)


class IntermediateNode(BaseModel):
    """One scanned region of a document: a delimited block or a run of free text."""
    model_config = ConfigDict(frozen=True)

    block_name: Optional[str] = None    # None for free text outside delimiters
    raw_content: str = ""
    delimiter_attributes: dict[str, Any] = {}
    source: str = ""                    # exact span scanned, delimiters included


class Block(BaseModel):
    """A materialized block; original_content is kept only when the round trip failed."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    attributes: dict[str, Any] = {}
    is_valid: bool = True
    original_content: Optional[str] = None

    @model_validator(mode="after")
    def _check_original_content(self) -> "Block":
        if self.is_valid and self.original_content is not None:
            raise ValueError("original_content must be empty for a valid block")
        if not self.is_valid and self.original_content is None:
            raise ValueError("original_content is required for an invalid block")
        return self


@dataclass(frozen=True)
class DirectAttributes:
    """Attribute spec computed by a function of the whole raw fragment."""
    fn: Callable[[str], Mapping[str, Any]]


@dataclass(frozen=True)
class MatcherAttributes:
    """Attribute spec computed per key by evaluating matchers on the parsed fragment."""
    matchers: Mapping[str, Matcher] = field(default_factory=dict)


AttributeSpec = Union[DirectAttributes, MatcherAttributes]


def attribute_spec(raw) -> AttributeSpec:
    """Resolve a raw attribute spec (callable, mapping, or None) into its tagged variant."""
    if isinstance(raw, (DirectAttributes, MatcherAttributes)):
        return raw
    if raw is None:
        return MatcherAttributes()
    if isinstance(raw, Mapping):
        matchers = {k: v for k, v in raw.items() if isinstance(v, Matcher)}
        ignored = sorted(set(raw) - set(matchers))
        if ignored:
            logger.debug("Ignoring non-matcher attribute entries: %s", ", ".join(ignored))
        return MatcherAttributes(matchers)
    if callable(raw):
        return DirectAttributes(raw)
    raise TypeError(f"Unsupported attribute spec: {type(raw).__name__}")


@dataclass(frozen=True)
class BlockType:
    """Read-only block type descriptor supplied by the caller's registry."""
    name:               str
    to_markup:          Callable[[Mapping[str, Any]], Optional[str]]
    attributes:         Any = None      # callable, mapping of matchers, or None
    default_attributes: Mapping[str, Any] = field(default_factory=dict)
    spec:               AttributeSpec = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "spec", attribute_spec(self.attributes))


@dataclass(frozen=True)
class ParseConfig:
    """Per-call parse inputs: registered block types and fallback handling."""
    block_types:         tuple[BlockType, ...] = ()
    fallback_block_name: Optional[str] = None
    dev_mode:            bool = False
    normalize:           Callable[[str], str] = normalize_markup
    diagnostics:         Optional[Callable[[str, str, str], None]] = None


def get_block_type(name: Optional[str], config: ParseConfig) -> Optional[BlockType]:
    """Return the registered block type with the given name, else None."""
    if not name:
        return None
    return next((t for t in config.block_types if t.name == name), None)
