"""
Slide Layout Catalogue

Named layouts on a fixed 12-column x 6-row grid, plus the functions the
editor calls whenever a slide's block list changes: pick a default layout
for a block count, list the alternatives, and assign blocks to slots.

Grid coordinates are 1-based. A slot starting at column 7 with a span of
6 covers columns 7..12.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from .models import SlideLayout

GRID_COLUMNS = 12
GRID_ROWS = 6

LayoutRef = Union[SlideLayout, str]


# ============================================================
# DATA CLASSES
# ============================================================

@dataclass(frozen=True)
class Slot:
    """A rectangular region of the grid."""
    id: str
    column: int
    column_span: int
    row: int
    row_span: int
    label: Optional[str] = None

    @property
    def last_column(self) -> int:
        return self.column + self.column_span - 1

    @property
    def last_row(self) -> int:
        return self.row + self.row_span - 1

    def cells(self) -> FrozenSet[Tuple[int, int]]:
        """All (column, row) cells covered by this slot."""
        return frozenset(
            (c, r)
            for c in range(self.column, self.column + self.column_span)
            for r in range(self.row, self.row + self.row_span)
        )

    def overlaps(self, other: "Slot") -> bool:
        return not (
            self.last_column < other.column
            or other.last_column < self.column
            or self.last_row < other.row
            or other.last_row < self.row
        )

    def in_bounds(self, columns: int = GRID_COLUMNS, rows: int = GRID_ROWS) -> bool:
        return (
            self.column >= 1
            and self.row >= 1
            and self.column_span >= 1
            and self.row_span >= 1
            and self.last_column <= columns
            and self.last_row <= rows
        )


@dataclass(frozen=True)
class LayoutDefinition:
    """A named layout and the block-count range it is designed for."""
    id: SlideLayout
    name: str
    description: str
    min_blocks: int
    max_blocks: int
    icon: str
    slots: Tuple[Slot, ...]
    deprecated: bool = False

    def accepts(self, block_count: int) -> bool:
        return self.min_blocks <= block_count <= self.max_blocks

    @property
    def slot_ids(self) -> List[str]:
        return [slot.id for slot in self.slots]


def _slots(*regions: Tuple[int, int, int, int]) -> Tuple[Slot, ...]:
    """Build slot-1, slot-2, ... from (column, column_span, row, row_span)."""
    return tuple(
        Slot(id=f"slot-{i}", column=c, column_span=cs, row=r, row_span=rs)
        for i, (c, cs, r, rs) in enumerate(regions, start=1)
    )


# ============================================================
# BUILT-IN LAYOUTS
# ============================================================

def _build_layouts() -> Dict[SlideLayout, LayoutDefinition]:
    """Build all 17 built-in layouts."""
    layouts: Dict[SlideLayout, LayoutDefinition] = {}

    def add(layout_id, name, description, count, icon, slots, deprecated=False):
        layouts[layout_id] = LayoutDefinition(
            id=layout_id,
            name=name,
            description=description,
            min_blocks=count,
            max_blocks=count,
            icon=icon,
            slots=slots,
            deprecated=deprecated,
        )

    # 1 block
    add(SlideLayout.single, "Single Block", "One block fills the entire slide", 1, "▭",
        _slots((1, 12, 1, 6)))

    # 2 blocks
    add(SlideLayout.two_horizontal, "Two Columns", "Two blocks side by side (50/50)", 2, "▮▮",
        _slots((1, 6, 1, 6), (7, 6, 1, 6)))
    add(SlideLayout.two_vertical, "Two Rows", "Two blocks stacked (50/50)", 2, "▬",
        _slots((1, 12, 1, 3), (1, 12, 4, 3)))
    add(SlideLayout.sidebar_left, "Sidebar Left", "Narrow left sidebar (25/75)", 2, "▌▭",
        _slots((1, 3, 1, 6), (4, 9, 1, 6)))
    add(SlideLayout.sidebar_right, "Sidebar Right", "Narrow right sidebar (75/25)", 2, "▭▐",
        _slots((1, 9, 1, 6), (10, 3, 1, 6)))

    # 3 blocks
    add(SlideLayout.three_columns, "Three Columns", "Three blocks side by side", 3, "▮▮▮",
        _slots((1, 4, 1, 6), (5, 4, 1, 6), (9, 4, 1, 6)))
    add(SlideLayout.three_rows, "Three Rows", "Three blocks stacked", 3, "▬",
        _slots((1, 12, 1, 2), (1, 12, 3, 2), (1, 12, 5, 2)))
    add(SlideLayout.big_top, "Big Top", "Top: 1 full, Bottom: 2 side-by-side", 3, "▬",
        _slots((1, 12, 1, 3), (1, 6, 4, 3), (7, 6, 4, 3)))
    add(SlideLayout.big_bottom, "Big Bottom", "Top: 2 side-by-side, Bottom: 1 full", 3, "▬",
        _slots((1, 6, 1, 3), (7, 6, 1, 3), (1, 12, 4, 3)))
    add(SlideLayout.sidebar_left_stack, "Sidebar Left + Stack",
        "Left: narrow sidebar, Right: 2 stacked (25/75)", 3, "▌▬",
        _slots((1, 3, 1, 6), (4, 9, 1, 3), (4, 9, 4, 3)))
    add(SlideLayout.sidebar_right_stack, "Sidebar Right + Stack",
        "Left: 2 stacked, Right: narrow sidebar (75/25)", 3, "▬▐",
        _slots((1, 9, 1, 3), (1, 9, 4, 3), (10, 3, 1, 6)))
    add(SlideLayout.wide_left_stack, "Wide Left + Stack",
        "Left: wide block, Right: 2 stacked (50/50)", 3, "▮▬",
        _slots((1, 6, 1, 6), (7, 6, 1, 3), (7, 6, 4, 3)))
    add(SlideLayout.wide_right_stack, "Wide Right + Stack",
        "Left: 2 stacked, Right: wide block (50/50)", 3, "▬▮",
        _slots((1, 6, 1, 3), (1, 6, 4, 3), (7, 6, 1, 6)))

    # 4 blocks
    add(SlideLayout.grid_2x2, "Grid 2×2", "Four blocks in a grid", 4, "▦",
        _slots((1, 6, 1, 3), (7, 6, 1, 3), (1, 6, 4, 3), (7, 6, 4, 3)))
    add(SlideLayout.four_columns, "Four Columns", "Four blocks side by side", 4, "▮▮▮▮",
        _slots((1, 3, 1, 6), (4, 3, 1, 6), (7, 3, 1, 6), (10, 3, 1, 6)))
    add(SlideLayout.four_rows, "Four Rows", "Four blocks stacked", 4, "▬",
        _slots((1, 12, 1, 1), (1, 12, 2, 2), (1, 12, 4, 2), (1, 12, 6, 1)))

    # Deprecated: the slide title replaced the title slot
    add(SlideLayout.title_single, "Title + Content (Deprecated)",
        "Use slide title feature instead", 2, "▬",
        _slots((1, 12, 1, 1), (1, 12, 2, 5)), deprecated=True)

    return layouts


# Global layout catalogue, read-only after import
LAYOUT_CATALOGUE: Dict[SlideLayout, LayoutDefinition] = _build_layouts()


def parse_layout_id(layout_id: LayoutRef) -> Optional[SlideLayout]:
    try:
        return SlideLayout(layout_id)
    except ValueError:
        return None


def get_layout(
    layout_id: LayoutRef,
    catalogue: Optional[Dict[SlideLayout, LayoutDefinition]] = None,
) -> Optional[LayoutDefinition]:
    """Get a layout by id. Returns None if not found."""
    catalogue = LAYOUT_CATALOGUE if catalogue is None else catalogue
    key = parse_layout_id(layout_id)
    if key is None:
        return None
    return catalogue.get(key)


def list_layouts(
    include_deprecated: bool = False,
    catalogue: Optional[Dict[SlideLayout, LayoutDefinition]] = None,
) -> List[LayoutDefinition]:
    """Return catalogue layouts in definition order."""
    catalogue = LAYOUT_CATALOGUE if catalogue is None else catalogue
    return [layout for layout in catalogue.values() if include_deprecated or not layout.deprecated]


# ============================================================
# LAYOUT ENGINE
# ============================================================

def get_default_layout(block_count: int) -> SlideLayout:
    """Pick the layout a slide gets when its block count changes.

    Only 1, 2 and 4 blocks have a dedicated default. Every other count
    falls back to the single-slot layout, so a valid layout always exists
    even though some blocks may not be displayed.
    """
    if block_count < 0:
        raise ValueError(f"block_count must be non-negative, got {block_count}")
    if block_count <= 1:
        return SlideLayout.single
    if block_count == 2:
        return SlideLayout.two_horizontal
    if block_count == 4:
        return SlideLayout.grid_2x2
    return SlideLayout.single


def get_layouts_for_block_count(
    block_count: int,
    include_deprecated: bool = False,
    catalogue: Optional[Dict[SlideLayout, LayoutDefinition]] = None,
) -> List[LayoutDefinition]:
    """All layouts whose [min_blocks, max_blocks] range contains block_count.

    An empty list means there is nothing to offer, which is not an error.
    """
    return [
        layout
        for layout in list_layouts(include_deprecated, catalogue)
        if layout.accepts(block_count)
    ]


def assign_blocks_to_slots(block_ids: Sequence[str], layout: LayoutDefinition) -> Dict[str, str]:
    """Map slot id -> block id by zipping the two sequences in order.

    Slots past the last block stay empty; blocks past the last slot are not
    placed. Block order is the only placement signal.
    """
    return {slot.id: block_id for slot, block_id in zip(layout.slots, block_ids)}


def unplaced_blocks(block_ids: Sequence[str], layout: LayoutDefinition) -> List[str]:
    """Block ids that do not get a slot in this layout."""
    return list(block_ids[len(layout.slots):])


def empty_slots(block_ids: Sequence[str], layout: LayoutDefinition) -> List[Slot]:
    """Slots left without a block."""
    return list(layout.slots[len(block_ids):])
