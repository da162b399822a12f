"""
Ad-hoc Arrangements

Candidate arrangements computed from the block count alone, for slides
that are not tied to a catalogue layout. Each count has one or more named
options the user can cycle through.

Rows here are logical row units: an option's ``rows`` is however many
rows it needs (one per block for a vertical stack), not the catalogue's
fixed 6-row grid. Columns still use the 12-column grid.
"""

from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple, Union

from .config import LayoutMode


@dataclass(frozen=True)
class Placement:
    """Where one block sits in an arrangement."""
    block_id: str
    column: int
    column_span: int
    row: int
    row_span: int
    is_title: bool = False


@dataclass(frozen=True)
class LayoutOption:
    """One named candidate arrangement."""
    name: str
    description: str
    rows: int
    positions: Tuple[Placement, ...]


Region = Tuple[int, int, int, int]  # column, column_span, row, row_span

# count -> [(name, description, rows, regions)]
_STANDARD_OPTIONS = {
    1: [
        ("Full Width", "Single block fills entire area", 1,
         [(1, 12, 1, 1)]),
    ],
    2: [
        ("Side by Side", "Two blocks split horizontally", 1,
         [(1, 6, 1, 1), (7, 6, 1, 1)]),
        ("Stacked", "Two blocks stacked vertically", 2,
         [(1, 12, 1, 1), (1, 12, 2, 1)]),
    ],
    3: [
        ("Left + Right Split", "One block left, two stacked right", 2,
         [(1, 6, 1, 2), (7, 6, 1, 1), (7, 6, 2, 1)]),
        ("Top + Bottom Split", "One block top, two side-by-side bottom", 2,
         [(1, 12, 1, 1), (1, 6, 2, 1), (7, 6, 2, 1)]),
        ("Three Columns", "Three blocks side by side", 1,
         [(1, 4, 1, 1), (5, 4, 1, 1), (9, 4, 1, 1)]),
    ],
    4: [
        ("2x2 Grid", "Four blocks in a square grid", 2,
         [(1, 6, 1, 1), (7, 6, 1, 1), (1, 6, 2, 1), (7, 6, 2, 1)]),
        ("Four Columns", "Four blocks side by side", 1,
         [(1, 3, 1, 1), (4, 3, 1, 1), (7, 3, 1, 1), (10, 3, 1, 1)]),
        ("Stacked", "Four blocks stacked vertically", 4,
         [(1, 12, 1, 1), (1, 12, 2, 1), (1, 12, 3, 1), (1, 12, 4, 1)]),
    ],
}


def _place(block_ids: Sequence[str], regions: Sequence[Region]) -> Tuple[Placement, ...]:
    return tuple(
        Placement(block_id=block_id, column=c, column_span=cs, row=r, row_span=rs)
        for block_id, (c, cs, r, rs) in zip(block_ids, regions)
    )


def _vertical_stack(block_ids: Sequence[str]) -> Tuple[Placement, ...]:
    return tuple(
        Placement(block_id=block_id, column=1, column_span=12, row=index, row_span=1)
        for index, block_id in enumerate(block_ids, start=1)
    )


def _content_options(block_ids: Sequence[str]) -> List[LayoutOption]:
    count = len(block_ids)

    if count == 0:
        return [LayoutOption("Empty", "No content blocks", 0, ())]

    if count in _STANDARD_OPTIONS:
        return [
            LayoutOption(name, description, rows, _place(block_ids, regions))
            for name, description, rows, regions in _STANDARD_OPTIONS[count]
        ]

    return [
        LayoutOption(
            "Stacked",
            f"{count} blocks stacked vertically",
            count,
            _vertical_stack(block_ids),
        )
    ]


def _with_title_row(title_id: str, option: LayoutOption) -> LayoutOption:
    """Put the title block on its own full-width row above the option."""
    title = Placement(block_id=title_id, column=1, column_span=12, row=1, row_span=1, is_title=True)
    shifted = tuple(replace(p, row=p.row + 1) for p in option.positions)
    return replace(option, rows=option.rows + 1, positions=(title,) + shifted)


def get_layout_options(block_ids: Sequence[str], has_title_zone: bool = False) -> List[LayoutOption]:
    """All candidate arrangements for these blocks, in display order.

    With ``has_title_zone`` the first block becomes the title and the rest
    are arranged underneath it.
    """
    if has_title_zone and block_ids:
        return [
            _with_title_row(block_ids[0], option)
            for option in _content_options(block_ids[1:])
        ]
    return _content_options(block_ids)


def get_current_layout(
    block_ids: Sequence[str],
    mode: Union[LayoutMode, str] = LayoutMode.auto,
    pattern: int = 0,
    has_title_zone: bool = False,
) -> List[Placement]:
    """Resolve the placements for a slide's current arrangement choice.

    ``vertical-stack`` gives every block its own full-width row. ``auto``
    uses option number ``pattern``, or the first option when the pattern
    is out of range.
    """
    if LayoutMode(mode) == LayoutMode.vertical_stack:
        positions = _vertical_stack(block_ids)
        if has_title_zone and positions:
            positions = (replace(positions[0], is_title=True),) + positions[1:]
        return list(positions)

    options = get_layout_options(block_ids, has_title_zone)
    selected = options[pattern] if 0 <= pattern < len(options) else options[0]
    return list(selected.positions)
