"""
Layout Providers

Two placement strategies behind one interface. Both return LayoutOption
values, but their row coordinates are not interchangeable:

- CatalogueLayoutProvider places blocks into catalogue slots on the fixed
  12x6 grid (``rows`` is always 6).
- AdHocLayoutProvider uses the count-based arrangements, whose ``rows``
  are logical units sized to the option.

Consumers should read ``option.rows`` rather than assume a grid height.
"""

import logging
from typing import Dict, List, Optional, Protocol, Sequence

from .arrangements import LayoutOption, Placement, get_current_layout, get_layout_options
from .config import EditorConfig, LayoutMode
from .layouts import (
    GRID_ROWS,
    LAYOUT_CATALOGUE,
    LayoutDefinition,
    LayoutRef,
    assign_blocks_to_slots,
    get_default_layout,
    get_layout,
    get_layouts_for_block_count,
)
from .models import SlideLayout

logger = logging.getLogger(__name__)


class LayoutProvider(Protocol):
    """Anything that can arrange an ordered list of block ids."""
    name: str

    def grid_rows(self, block_count: int) -> int:
        ...

    def arrange(self, block_ids: Sequence[str], pattern: int = 0) -> LayoutOption:
        ...


# ============================================================
# CATALOGUE STRATEGY
# ============================================================

class CatalogueLayoutProvider:
    """Places blocks into the slots of a catalogue layout."""
    name = "catalogue"

    def __init__(
        self,
        catalogue: Optional[Dict[SlideLayout, LayoutDefinition]] = None,
        include_deprecated: bool = False,
    ):
        self.catalogue = LAYOUT_CATALOGUE if catalogue is None else catalogue
        self.include_deprecated = include_deprecated

    def grid_rows(self, block_count: int) -> int:
        return GRID_ROWS

    def choices(self, block_count: int) -> List[LayoutDefinition]:
        """The default layout first, then every other layout that fits."""
        default = get_layout(get_default_layout(block_count), self.catalogue)
        fitting = get_layouts_for_block_count(block_count, self.include_deprecated, self.catalogue)
        ordered = [default] if default is not None else []
        ordered += [layout for layout in fitting if layout is not default]
        return ordered

    def arrange_layout(self, block_ids: Sequence[str], layout_id: LayoutRef) -> LayoutOption:
        """Arrange blocks in a specific layout (a slide's chosen one)."""
        layout = get_layout(layout_id, self.catalogue)
        if layout is None:
            logger.warning("Unknown layout %r, using the default layout", layout_id)
            return self.arrange(block_ids)
        return self._to_option(block_ids, layout)

    def arrange(self, block_ids: Sequence[str], pattern: int = 0) -> LayoutOption:
        candidates = self.choices(len(block_ids))
        if not candidates:
            raise ValueError(f"No layout in the catalogue can hold {len(block_ids)} blocks")
        layout = candidates[pattern] if 0 <= pattern < len(candidates) else candidates[0]
        return self._to_option(block_ids, layout)

    def _to_option(self, block_ids: Sequence[str], layout: LayoutDefinition) -> LayoutOption:
        if not layout.accepts(len(block_ids)):
            logger.warning(
                "Layout %s is designed for %d-%d blocks, got %d",
                layout.id.value, layout.min_blocks, layout.max_blocks, len(block_ids),
            )
        slots = {slot.id: slot for slot in layout.slots}
        positions = tuple(
            Placement(
                block_id=block_id,
                column=slots[slot_id].column,
                column_span=slots[slot_id].column_span,
                row=slots[slot_id].row,
                row_span=slots[slot_id].row_span,
            )
            for slot_id, block_id in assign_blocks_to_slots(block_ids, layout).items()
        )
        return LayoutOption(layout.name, layout.description, GRID_ROWS, positions)


# ============================================================
# AD-HOC STRATEGY
# ============================================================

class AdHocLayoutProvider:
    """Count-based arrangements in logical row units."""
    name = "adhoc"

    def __init__(self, mode: LayoutMode = LayoutMode.auto, has_title_zone: bool = False):
        self.mode = LayoutMode(mode)
        self.has_title_zone = has_title_zone

    def grid_rows(self, block_count: int) -> int:
        return self.arrange(["_"] * block_count).rows

    def options(self, block_ids: Sequence[str]) -> List[LayoutOption]:
        return get_layout_options(block_ids, self.has_title_zone)

    def arrange(self, block_ids: Sequence[str], pattern: int = 0) -> LayoutOption:
        if self.mode == LayoutMode.vertical_stack:
            positions = tuple(get_current_layout(block_ids, self.mode, pattern, self.has_title_zone))
            return LayoutOption(
                "Vertical Stack",
                f"{len(block_ids)} blocks stacked vertically",
                len(positions),
                positions,
            )
        options = self.options(block_ids)
        return options[pattern] if 0 <= pattern < len(options) else options[0]


def create_provider(kind: str, config: Optional[EditorConfig] = None) -> LayoutProvider:
    """Build a provider by name ('catalogue' or 'adhoc') from a config."""
    config = config or EditorConfig()
    if kind == CatalogueLayoutProvider.name:
        return CatalogueLayoutProvider(include_deprecated=config.include_deprecated_layouts)
    if kind == AdHocLayoutProvider.name:
        return AdHocLayoutProvider(mode=config.layout_mode, has_title_zone=config.has_title_zone)
    raise ValueError(f"Unknown layout provider: {kind}")
