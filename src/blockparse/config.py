"""Application configuration: settings schema, config.yaml loader, and parse config"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from blockparse.blocks.library import FREEFORM, default_block_types
from blockparse.core.models import BlockType, ParseConfig


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "BLOCKPARSE_"


class Settings(BaseModel):
    app_name:            str = "blockparse"
    fallback_block_name: Optional[str] = Field(default=FREEFORM, description="Type for free text and unknown names")
    dev_mode:            bool = Field(default=False, description="Report round-trip mismatches to diagnostics")
    log_level:           str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    indent:              int = Field(default=2, ge=0, description="JSON output indent")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then BLOCKPARSE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)


def build_config(settings: Settings, block_types: tuple[BlockType, ...] = None) -> ParseConfig:
    """Return a ParseConfig for settings, using the built-in block types by default."""
    return ParseConfig(
        block_types=tuple(block_types) if block_types is not None else default_block_types(),
        fallback_block_name=settings.fallback_block_name,
        dev_mode=settings.dev_mode,
    )
