"""
Block Type Registry

One BlockTypeDefinition per block kind: display metadata, a zero-argument
content factory, the field list (with the templateable flags) and an
optional validator. The registry is the only place new block instances
are created. It is built once at startup, frozen, and passed explicitly
to whatever needs it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

from .config import BlockDefaults, UnknownBlockPolicy
from .errors import DuplicateBlockTypeError, RegistryFrozenError
from .models import (
    BLOCK_MODELS,
    CONTENT_MODELS,
    BlockBase,
    BlockContent,
    BlockTypeName,
    new_id,
    parse_block_type,
    utc_now,
)

logger = logging.getLogger(__name__)

BlockTypeRef = Union[BlockTypeName, str]
ContentFactory = Callable[[], BlockContent]
BlockValidator = Callable[[BlockBase], Optional[str]]


# ============================================================
# DEFINITIONS
# ============================================================

class BlockCategory(str, Enum):
    """Menu grouping for a block kind."""
    content = "content"
    interactive = "interactive"
    assessment = "assessment"
    media = "media"


class FieldKind(str, Enum):
    string = "string"
    number = "number"
    boolean = "boolean"
    enum = "enum"
    list = "list"


@dataclass(frozen=True)
class BlockField:
    """One content field of a block kind."""
    name: str
    kind: FieldKind
    required: bool = False
    templateable: bool = False  # kept when the block is saved as a template
    enum_options: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BlockTypeDefinition:
    """Static schema for one block kind."""
    type: BlockTypeName
    label: str
    description: str
    icon: str
    category: BlockCategory
    create_content: ContentFactory
    fields: Tuple[BlockField, ...] = ()
    validate: Optional[BlockValidator] = None
    keywords: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", BlockTypeName(self.type))
        model_fields = self.content_model.model_fields
        unknown = [f.name for f in self.fields if f.name not in model_fields]
        if unknown:
            raise ValueError(
                f"Fields {unknown} are not part of the '{self.type.value}' content"
            )

    @property
    def content_model(self):
        return CONTENT_MODELS[self.type]

    @property
    def templateable_fields(self) -> List[str]:
        return [f.name for f in self.fields if f.templateable]

    def create_default(self, defaults: Optional[BlockDefaults] = None) -> BlockBase:
        """Build a fresh instance with a new id and timestamps."""
        defaults = defaults or BlockDefaults()
        now = utc_now()
        return BLOCK_MODELS[self.type](
            id=new_id("block"),
            content=self.create_content(),
            topic=defaults.topic,
            difficulty=defaults.difficulty,
            author=defaults.author,
            created_at=now,
            updated_at=now,
        )


# ============================================================
# REGISTRY
# ============================================================

class BlockTypeRegistry:
    """Holds the block type definitions, keyed by type.

    Register every kind at startup, then call ``freeze()``. After that the
    registry is read-only and can be shared between threads.
    """

    def __init__(
        self,
        defaults: Optional[BlockDefaults] = None,
        unknown_block_policy: UnknownBlockPolicy = UnknownBlockPolicy.fail,
        fallback_block_type: BlockTypeName = BlockTypeName.text,
    ):
        self.defaults = defaults or BlockDefaults()
        self.unknown_block_policy = UnknownBlockPolicy(unknown_block_policy)
        self.fallback_block_type = BlockTypeName(fallback_block_type)
        self._definitions: Dict[BlockTypeName, BlockTypeDefinition] = {}
        self._frozen = False

    def register(self, definition: BlockTypeDefinition) -> "BlockTypeRegistry":
        """Add a definition. Returns the registry so calls can be chained."""
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register '{definition.type.value}': registry is frozen"
            )
        if definition.type in self._definitions:
            raise DuplicateBlockTypeError(definition.type.value)

        self._definitions[definition.type] = definition
        logger.debug("Registered block type %s", definition.type.value)
        return self

    def freeze(self) -> "BlockTypeRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, block_type: BlockTypeRef) -> Optional[BlockTypeDefinition]:
        """Look up a definition. Returns None for unknown tags."""
        key = parse_block_type(block_type)
        if key is None:
            return None
        return self._definitions.get(key)

    def get_all(self) -> List[BlockTypeDefinition]:
        """All definitions in registration order."""
        return list(self._definitions.values())

    def get_all_by_category(self, category: Union[BlockCategory, str]) -> List[BlockTypeDefinition]:
        return [d for d in self._definitions.values() if d.category == category]

    def search(self, query: str) -> List[BlockTypeDefinition]:
        """Case-insensitive match against label, description and keywords."""
        needle = query.lower()
        results = []
        for definition in self._definitions.values():
            haystack = " ".join(
                [definition.label, definition.description, *definition.keywords]
            ).lower()
            if needle in haystack:
                results.append(definition)
        return results

    def templateable_fields(self, block_type: BlockTypeRef) -> List[str]:
        definition = self.get(block_type)
        return definition.templateable_fields if definition else []

    def create_default_block(self, block_type: BlockTypeRef) -> Optional[BlockBase]:
        """Create a default instance, or None if the type is not registered."""
        definition = self.get(block_type)
        if definition is None:
            logger.warning("Cannot create block: unknown block type %r", block_type)
            return None
        return definition.create_default(self.defaults)

    def create_block(self, block_type: BlockTypeRef) -> Optional[BlockBase]:
        """Create a default instance, applying the unknown-type policy.

        With ``UnknownBlockPolicy.fail`` this behaves like
        ``create_default_block``. With ``fallback`` an unknown type yields a
        default block of ``fallback_block_type`` instead.
        """
        block = self.create_default_block(block_type)
        if block is not None or self.unknown_block_policy == UnknownBlockPolicy.fail:
            return block

        logger.warning(
            "Falling back to a %s block for unknown type %r",
            self.fallback_block_type.value,
            block_type,
        )
        return self.create_default_block(self.fallback_block_type)

    def validate(self, block: BlockBase) -> Optional[str]:
        """Return a reason string if the block is invalid, else None."""
        definition = self.get(block.type)
        if definition is None:
            return f"Unknown block type: {block.type}"
        if definition.validate is None:
            return None
        return definition.validate(block)

    def __contains__(self, block_type: object) -> bool:
        return self.get(block_type) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[BlockTypeDefinition]:
        return iter(self.get_all())
