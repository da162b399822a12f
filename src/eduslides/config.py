"""
Editor Configuration

Settings that callers pass into the registry and the layout engines:
metadata stamped on new blocks, the unknown-block-type policy and the
automatic layout mode. Loaded from YAML or JSON.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field

from .models import BlockTypeName, Difficulty


class UnknownBlockPolicy(str, Enum):
    """What ``BlockTypeRegistry.create_block`` does with an unregistered type."""
    fail = "fail"
    fallback = "fallback"


class LayoutMode(str, Enum):
    """How the ad-hoc arrangement generator places blocks."""
    auto = "auto"
    vertical_stack = "vertical-stack"


class BlockDefaults(BaseModel):
    """Classification metadata stamped on every new block."""
    author: str = ""
    topic: str = ""
    difficulty: Difficulty = Difficulty.core


class EditorConfig(BaseModel):
    """Top-level configuration."""
    defaults: BlockDefaults = Field(default_factory=BlockDefaults)
    unknown_block_policy: UnknownBlockPolicy = UnknownBlockPolicy.fail
    fallback_block_type: BlockTypeName = BlockTypeName.text
    layout_mode: LayoutMode = LayoutMode.auto
    has_title_zone: bool = False
    include_deprecated_layouts: bool = False


def create_minimal_config(author: str = "") -> EditorConfig:
    """Return a config with every setting at its default."""
    return EditorConfig(defaults=BlockDefaults(author=author))


def load_config(path: Optional[Union[str, Path]] = None) -> EditorConfig:
    """Load configuration from a YAML or JSON file.

    Args:
        path: Path to a .yaml/.yml/.json file. None returns the defaults.

    Returns:
        The validated EditorConfig.
    """
    if path is None:
        return EditorConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    with open(path, "r", encoding="utf-8") as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix} (use .yaml, .yml or .json)")

    return EditorConfig.model_validate(data or {})


def save_config(config: EditorConfig, path: Union[str, Path]) -> None:
    """Save configuration as YAML or JSON, chosen by file extension."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".yaml", ".yml", ".json"):
        raise ValueError(f"Unsupported config format: {path.suffix} (use .yaml, .yml or .json)")

    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        if suffix == ".json":
            json.dump(data, f, indent=2)
        else:
            yaml.safe_dump(data, f, sort_keys=False)
