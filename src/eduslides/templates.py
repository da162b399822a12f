"""
Template Manager

Saves the templateable fields of a block or a whole slide as reusable
scaffolding, and expands stored templates back into new blocks and
slides. Templates keep instructions and structure, never lesson content:
fields that are not templateable come from the type's defaults on
expansion. Every expansion produces new ids.
"""

import copy
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from .errors import (
    EmptySlideError,
    InvalidTemplateContentError,
    NoTemplateableContentError,
    TemplateImportError,
    UnknownBlockTypeError,
)
from .layouts import assign_blocks_to_slots, get_layout
from .models import (
    BlockBase,
    BlockTemplate,
    BlockTypeName,
    Slide,
    SlideTemplate,
    SlideTemplateBlock,
    to_dict,
    to_field_names,
)
from .registry import BlockTypeRegistry

logger = logging.getLogger(__name__)

DefaultFactory = Callable[[BlockTypeName], Optional[BlockBase]]


class TemplateManager:
    """Creates and expands templates using an injected block registry."""

    def __init__(self, registry: BlockTypeRegistry):
        self.registry = registry

    # ------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------

    def extract_templateable_content(self, block: BlockBase) -> Dict[str, Any]:
        """Copy the block's templateable fields that hold a value."""
        definition = self.registry.get(block.type)
        if definition is None:
            raise UnknownBlockTypeError(block.type)

        content = block.content.model_dump(mode="json")
        return {
            name: copy.deepcopy(content[name])
            for name in definition.templateable_fields
            if content.get(name) is not None
        }

    def create_template_from_block(
        self,
        block: BlockBase,
        name: str,
        description: Optional[str] = None,
    ) -> BlockTemplate:
        """Save a block's scaffolding as a template.

        Raises:
            NoTemplateableContentError: the block has nothing templateable.
            UnknownBlockTypeError: the block's type is not registered.
        """
        template_content = self.extract_templateable_content(block)
        if not template_content:
            raise NoTemplateableContentError(
                f"A {block.type} block has no templateable content to save"
            )

        return BlockTemplate(
            block_type=block.type,
            name=name,
            description=description,
            template_content=template_content,
        )

    def create_template_from_slide(
        self,
        slide: Slide,
        blocks: List[BlockBase],
        name: str,
        description: Optional[str] = None,
    ) -> SlideTemplate:
        """Save a slide's layout and the scaffolding of each filled slot.

        Slots are filled the same way the layout engine fills them, so a
        block that would not be displayed is not captured either.

        Raises:
            EmptySlideError: there are no blocks to capture.
        """
        if not blocks:
            raise EmptySlideError("Cannot save a template from a slide with no blocks")

        layout = get_layout(slide.layout)
        blocks_by_id = {block.id: block for block in blocks}
        template_blocks = []

        for slot_id, block_id in assign_blocks_to_slots(slide.block_ids, layout).items():
            block = blocks_by_id.get(block_id)
            if block is None:
                logger.warning("Slot %s refers to block %s which was not provided", slot_id, block_id)
                continue
            template_blocks.append(SlideTemplateBlock(
                type=block.type,
                template_content=self.extract_templateable_content(block),
                slot=slot_id,
            ))

        if not template_blocks:
            raise EmptySlideError("None of the provided blocks are placed on the slide")

        return SlideTemplate(
            name=name,
            description=description,
            layout=slide.layout,
            blocks=template_blocks,
        )

    # ------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------

    def create_block_from_template(
        self,
        template: BlockTemplate,
        default_factory: Optional[DefaultFactory] = None,
    ) -> BlockBase:
        """Create a new block: type defaults overlaid with the templated fields.

        ``default_factory`` defaults to the registry's ``create_default_block``.
        The new block keeps the fresh id and timestamps from the factory.

        Raises:
            UnknownBlockTypeError: the factory could not create the type.
            InvalidTemplateContentError: a stored value does not fit the content.
        """
        return self._expand(template.block_type, template.template_content, default_factory)

    def create_slide_from_template(
        self,
        template: SlideTemplate,
        default_factory: Optional[DefaultFactory] = None,
    ) -> Tuple[Slide, List[BlockBase]]:
        """Create a new slide and new blocks, in slot order."""
        blocks = [
            self._expand(entry.type, entry.template_content, default_factory)
            for entry in template.blocks
        ]
        slide = Slide(layout=template.layout, block_ids=[block.id for block in blocks])
        return slide, blocks

    def _expand(
        self,
        block_type: BlockTypeName,
        template_content: Dict[str, Any],
        default_factory: Optional[DefaultFactory],
    ) -> BlockBase:
        factory = default_factory or self.registry.create_default_block
        block = factory(block_type)
        if block is None:
            raise UnknownBlockTypeError(block_type.value)

        content_model = type(block.content)
        overrides = self._templateable_only(block_type, to_field_names(content_model, template_content))
        try:
            content = content_model.model_validate({
                **block.content.model_dump(),
                **copy.deepcopy(overrides),
            })
        except ValidationError as exc:
            raise InvalidTemplateContentError(
                f"Template values do not fit a {block_type.value} block: {_describe(exc.errors()[0])}"
            ) from exc
        return block.model_copy(update={"content": content})

    def _templateable_only(self, block_type: BlockTypeName, template_content: Dict[str, Any]) -> Dict[str, Any]:
        definition = self.registry.get(block_type)
        if definition is None:
            return dict(template_content)

        allowed = set(definition.templateable_fields)
        dropped = sorted(set(template_content) - allowed)
        if dropped:
            logger.warning("Ignoring non-templateable fields %s for %s blocks", dropped, block_type.value)
        return {k: v for k, v in template_content.items() if k in allowed}

    # ------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------

    def validate_template(self, template: BlockTemplate) -> List[str]:
        """Return a list of problems with a stored block template."""
        definition = self.registry.get(template.block_type)
        if definition is None:
            return [f"Unknown block type: {template.block_type}"]

        content_model = definition.content_model
        stored = to_field_names(content_model, template.template_content)
        allowed = set(definition.templateable_fields)
        problems = [
            f"Field '{name}' is not templateable for {template.block_type.value} blocks"
            for name in stored
            if name not in allowed
        ]

        try:
            content_model.model_validate({k: v for k, v in stored.items() if k in allowed})
        except ValidationError as exc:
            problems.extend(f"Invalid value for {_describe(error)}" for error in exc.errors())
        return problems


def _describe(error: Dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"])
    return f"'{location}': {error['msg']}"


# ============================================================
# PREVIEWS
# ============================================================

def template_has_content(template: BlockTemplate) -> bool:
    return len(template.template_content) > 0


def get_template_preview(template: BlockTemplate, max_length: int = 50) -> str:
    """Short text for template pickers: the first string value, truncated."""
    values = list(template.template_content.values())
    if not values:
        return "Empty template"

    text = next((v for v in values if isinstance(v, str) and v), None)
    if text is not None:
        return text if len(text) <= max_length else text[:max_length] + "..."

    return f"{len(values)} field{'' if len(values) == 1 else 's'}"


def get_slide_template_preview(template: SlideTemplate) -> str:
    count = len(template.blocks)
    types = ", ".join(entry.type.value for entry in template.blocks)
    return f"{count} block{'' if count == 1 else 's'}: {types}"


# ============================================================
# SERIALIZATION
# ============================================================

_BLOCK_TEMPLATE_LIST = TypeAdapter(List[BlockTemplate])


def dump_block_template(template: BlockTemplate) -> str:
    return json.dumps(to_dict(template), indent=2, ensure_ascii=False)


def dump_slide_template(template: SlideTemplate) -> str:
    return json.dumps(to_dict(template), indent=2, ensure_ascii=False)


def load_block_template(text: str) -> BlockTemplate:
    try:
        return BlockTemplate.model_validate_json(text)
    except ValidationError as exc:
        raise TemplateImportError(f"Invalid block template JSON: {exc}") from exc


def load_block_templates(text: str) -> List[BlockTemplate]:
    """Parse a JSON array of block templates."""
    try:
        return _BLOCK_TEMPLATE_LIST.validate_json(text)
    except ValidationError as exc:
        raise TemplateImportError(f"Invalid block templates JSON: {exc}") from exc


def load_slide_template(text: str) -> SlideTemplate:
    try:
        return SlideTemplate.model_validate_json(text)
    except ValidationError as exc:
        raise TemplateImportError(f"Invalid slide template JSON: {exc}") from exc
