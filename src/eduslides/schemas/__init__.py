"""JSON Schemas for the exported lesson data, generated from the models."""

from typing import Any, Dict, List

from pydantic import TypeAdapter

from ..models import Block, BlockTemplate, Slide, SlideTemplate

SCHEMA_TYPES = {
    "block": Block,
    "slide": Slide,
    "block-template": BlockTemplate,
    "slide-template": SlideTemplate,
}


def list_schemas() -> List[str]:
    return list(SCHEMA_TYPES)


def get_schema(name: str) -> Dict[str, Any]:
    """Return the JSON Schema (camelCase keys) for one exported type."""
    if name not in SCHEMA_TYPES:
        raise KeyError(f"Unknown schema '{name}'. Available: {', '.join(SCHEMA_TYPES)}")
    return TypeAdapter(SCHEMA_TYPES[name]).json_schema(by_alias=True)
