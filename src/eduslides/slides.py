"""
Slide and Block Editing

Operations the editor applies when the author changes a slide or a block.
Every function returns a new object; inputs are left untouched.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from .layouts import empty_slots, get_default_layout, get_layout, unplaced_blocks
from .models import BlockBase, Difficulty, Slide, SlideLayout, to_field_names, utc_now
from .storage import BlockStore

logger = logging.getLogger(__name__)


# ============================================================
# LAYOUT FIT
# ============================================================

@dataclass(frozen=True)
class LayoutFit:
    """How a slide's block count compares with its layout's range.

    A mismatch is never an error: extra blocks are not displayed and
    missing blocks leave slots empty.
    """
    layout: SlideLayout
    block_count: int
    min_blocks: int
    max_blocks: int
    unplaced_block_ids: Tuple[str, ...] = ()
    empty_slot_ids: Tuple[str, ...] = ()

    @property
    def fits(self) -> bool:
        return self.min_blocks <= self.block_count <= self.max_blocks

    def describe(self) -> str:
        if self.fits:
            return f"{self.block_count} blocks fit layout '{self.layout.value}'"
        return (
            f"Layout '{self.layout.value}' is designed for {self.min_blocks}-{self.max_blocks} "
            f"blocks but the slide has {self.block_count}"
        )


def check_layout_fit(slide: Slide) -> LayoutFit:
    layout = get_layout(slide.layout)
    return LayoutFit(
        layout=layout.id,
        block_count=len(slide.block_ids),
        min_blocks=layout.min_blocks,
        max_blocks=layout.max_blocks,
        unplaced_block_ids=tuple(unplaced_blocks(slide.block_ids, layout)),
        empty_slot_ids=tuple(slot.id for slot in empty_slots(slide.block_ids, layout)),
    )


def _warn_if_mismatched(slide: Slide) -> None:
    fit = check_layout_fit(slide)
    if not fit.fits:
        logger.warning("Slide %s: %s", slide.id, fit.describe())


# ============================================================
# SLIDE OPERATIONS
# ============================================================

def create_slide(layout: Optional[Union[SlideLayout, str]] = None, title: Optional[str] = None) -> Slide:
    """Create an empty slide with the default layout for zero blocks."""
    layout = SlideLayout(layout) if layout is not None else get_default_layout(0)
    return Slide(layout=layout, title=title)


def insert_block(
    slide: Slide,
    block_id: str,
    index: Optional[int] = None,
    relayout: bool = True,
) -> Slide:
    """Insert a block id (appended when index is None).

    With ``relayout`` the slide switches to the default layout for its new
    block count; otherwise the current layout is kept.
    """
    block_ids = list(slide.block_ids)
    if index is None:
        block_ids.append(block_id)
    else:
        block_ids.insert(index, block_id)

    layout = get_default_layout(len(block_ids)) if relayout else slide.layout
    updated = slide.model_copy(update={"block_ids": block_ids, "layout": layout})
    _warn_if_mismatched(updated)
    return updated


def remove_block(slide: Slide, block_id: str) -> Slide:
    """Remove every reference to a block. The block itself is not deleted."""
    block_ids = [b for b in slide.block_ids if b != block_id]
    return slide.model_copy(update={"block_ids": block_ids})


def move_block(slide: Slide, from_index: int, to_index: int) -> Slide:
    """Reorder one block, which changes the slot it lands in."""
    block_ids = list(slide.block_ids)
    if not (0 <= from_index < len(block_ids)) or not (0 <= to_index < len(block_ids)):
        raise IndexError(
            f"Cannot move block from {from_index} to {to_index} on a slide with {len(block_ids)} blocks"
        )
    block_ids.insert(to_index, block_ids.pop(from_index))
    return slide.model_copy(update={"block_ids": block_ids})


def set_layout(slide: Slide, layout: Union[SlideLayout, str]) -> Slide:
    """Choose a layout explicitly. Raises ValueError for unknown ids."""
    updated = slide.model_copy(update={"layout": SlideLayout(layout)})
    _warn_if_mismatched(updated)
    return updated


def resolve_blocks(slide: Slide, store: BlockStore) -> List[BlockBase]:
    """Load the slide's blocks in order, skipping ids the store lacks."""
    blocks = []
    for block_id in slide.block_ids:
        block = store.load(block_id)
        if block is None:
            logger.warning("Slide %s references missing block %s", slide.id, block_id)
            continue
        blocks.append(block)
    return blocks


# ============================================================
# BLOCK OPERATIONS
# ============================================================

def update_block_content(block: BlockBase, **changes: Any) -> BlockBase:
    """Return the block with content fields replaced and updated_at refreshed.

    The new content is validated against the block's own content model, so
    a change can never alter the content's shape. Keys may be given in
    either spelling (``font_size`` or ``fontSize``).
    """
    content_model = type(block.content)
    content = content_model.model_validate({
        **block.content.model_dump(),
        **to_field_names(content_model, changes),
    })
    return block.model_copy(update={"content": content, "updated_at": utc_now()})


def update_block_metadata(
    block: BlockBase,
    topic: Optional[str] = None,
    difficulty: Optional[Union[Difficulty, str]] = None,
    author: Optional[str] = None,
) -> BlockBase:
    """Change classification metadata. Fields left as None are kept."""
    update = {"updated_at": utc_now()}
    if topic is not None:
        update["topic"] = topic
    if difficulty is not None:
        update["difficulty"] = Difficulty(difficulty)
    if author is not None:
        update["author"] = author
    return block.model_copy(update=update)
