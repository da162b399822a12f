"""
Storage Interfaces

The core never touches durable storage. Callers hand it objects loaded
through these interfaces, keyed by id. The in-memory implementations back
the CLI and the tests.
"""

from typing import Dict, List, Optional, Protocol, Union

from .models import BlockBase, BlockTemplate, BlockTypeName, SlideTemplate


class BlockStore(Protocol):
    def save(self, block: BlockBase) -> None:
        ...

    def load(self, block_id: str) -> Optional[BlockBase]:
        ...

    def delete(self, block_id: str) -> None:
        ...

    def list(self) -> List[BlockBase]:
        ...


class TemplateStore(Protocol):
    def save_block_template(self, template: BlockTemplate) -> None:
        ...

    def load_block_template(self, template_id: str) -> Optional[BlockTemplate]:
        ...

    def list_block_templates(self, block_type: Optional[BlockTypeName] = None) -> List[BlockTemplate]:
        ...

    def save_slide_template(self, template: SlideTemplate) -> None:
        ...

    def load_slide_template(self, template_id: str) -> Optional[SlideTemplate]:
        ...

    def list_slide_templates(self) -> List[SlideTemplate]:
        ...

    def delete(self, template_id: str) -> None:
        ...


class InMemoryBlockStore:
    """Dict-backed BlockStore. Saving an existing id replaces it."""

    def __init__(self) -> None:
        self._blocks: Dict[str, BlockBase] = {}

    def save(self, block: BlockBase) -> None:
        self._blocks[block.id] = block

    def load(self, block_id: str) -> Optional[BlockBase]:
        return self._blocks.get(block_id)

    def delete(self, block_id: str) -> None:
        self._blocks.pop(block_id, None)

    def list(self) -> List[BlockBase]:
        return list(self._blocks.values())


class InMemoryTemplateStore:
    """Dict-backed TemplateStore for block and slide templates."""

    def __init__(self) -> None:
        self._block_templates: Dict[str, BlockTemplate] = {}
        self._slide_templates: Dict[str, SlideTemplate] = {}

    def save_block_template(self, template: BlockTemplate) -> None:
        self._block_templates[template.id] = template

    def load_block_template(self, template_id: str) -> Optional[BlockTemplate]:
        return self._block_templates.get(template_id)

    def list_block_templates(
        self, block_type: Optional[Union[BlockTypeName, str]] = None
    ) -> List[BlockTemplate]:
        templates = list(self._block_templates.values())
        if block_type is None:
            return templates
        return [t for t in templates if t.block_type == block_type]

    def save_slide_template(self, template: SlideTemplate) -> None:
        self._slide_templates[template.id] = template

    def load_slide_template(self, template_id: str) -> Optional[SlideTemplate]:
        return self._slide_templates.get(template_id)

    def list_slide_templates(self) -> List[SlideTemplate]:
        return list(self._slide_templates.values())

    def delete(self, template_id: str) -> None:
        self._block_templates.pop(template_id, None)
        self._slide_templates.pop(template_id, None)
