"""
Command Line Interface for EduSlides

Inspect the block type registry and the layout engines:
- block-types: List registered block types
- layouts: List catalogue layouts, optionally for a block count
- default-layout: Show the default layout for a block count
- arrange: Show where N blocks would be placed
- diagnose: Check the layout catalogue and the block registry
- schema: Print the JSON Schema of an exported type
"""

import sys
import json
import logging
import argparse
from typing import List

from .block_types import create_default_registry
from .config import EditorConfig, LayoutMode, load_config
from .diagnose import diagnose_catalogue, diagnose_registry
from .errors import EduSlidesError
from .layouts import get_default_layout, get_layout, get_layouts_for_block_count, list_layouts
from .providers import AdHocLayoutProvider, CatalogueLayoutProvider
from .schemas import get_schema, list_schemas


def _banner(title: str) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)


def _placeholder_ids(count: int) -> List[str]:
    return [f"block-{i}" for i in range(1, count + 1)]


def block_types_command(args: argparse.Namespace, config: EditorConfig) -> int:
    """Execute block-types command."""
    registry = create_default_registry(config)

    if args.search:
        definitions = registry.search(args.search)
    elif args.category:
        definitions = registry.get_all_by_category(args.category)
    else:
        definitions = registry.get_all()

    if args.json:
        print(json.dumps([
            {
                "type": d.type.value,
                "label": d.label,
                "description": d.description,
                "category": d.category.value,
                "templateableFields": d.templateable_fields,
            }
            for d in definitions
        ], indent=2))
        return 0

    _banner("Block Types")
    for d in definitions:
        templateable = ", ".join(d.templateable_fields) or "-"
        print(f"  {d.icon} {d.type.value:<11} {d.label:<20} [{d.category.value}]  templateable: {templateable}")
    return 0


def layouts_command(args: argparse.Namespace, config: EditorConfig) -> int:
    """Execute layouts command."""
    include_deprecated = args.all or config.include_deprecated_layouts
    if args.blocks is not None:
        layouts = get_layouts_for_block_count(args.blocks, include_deprecated)
    else:
        layouts = list_layouts(include_deprecated)

    if args.json:
        print(json.dumps([
            {
                "id": layout.id.value,
                "name": layout.name,
                "minBlocks": layout.min_blocks,
                "maxBlocks": layout.max_blocks,
                "slots": [
                    {
                        "id": s.id,
                        "column": s.column,
                        "columnSpan": s.column_span,
                        "row": s.row,
                        "rowSpan": s.row_span,
                    }
                    for s in layout.slots
                ],
            }
            for layout in layouts
        ], indent=2))
        return 0

    _banner("Layouts")
    if not layouts:
        print("  No layouts available for this block count")
        return 0
    for layout in layouts:
        print(f"  {layout.icon:<4} {layout.id.value:<16} {layout.name:<28} "
              f"{layout.min_blocks}-{layout.max_blocks} blocks")
    return 0


def default_layout_command(args: argparse.Namespace, config: EditorConfig) -> int:
    """Execute default-layout command."""
    layout = get_layout(get_default_layout(args.blocks))
    print(f"{args.blocks} blocks -> {layout.id.value} ({layout.name})")
    return 0


def arrange_command(args: argparse.Namespace, config: EditorConfig) -> int:
    """Execute arrange command."""
    block_ids = _placeholder_ids(args.blocks)

    if args.strategy == "adhoc":
        provider = AdHocLayoutProvider(
            mode=args.mode or config.layout_mode,
            has_title_zone=args.title_zone or config.has_title_zone,
        )
        option = provider.arrange(block_ids, args.pattern)
    else:
        provider = CatalogueLayoutProvider(include_deprecated=config.include_deprecated_layouts)
        if args.layout:
            option = provider.arrange_layout(block_ids, args.layout)
        else:
            option = provider.arrange(block_ids, args.pattern)

    if args.json:
        print(json.dumps({
            "strategy": provider.name,
            "name": option.name,
            "rows": option.rows,
            "positions": [
                {
                    "blockId": p.block_id,
                    "column": p.column,
                    "columnSpan": p.column_span,
                    "row": p.row,
                    "rowSpan": p.row_span,
                    "isTitle": p.is_title,
                }
                for p in option.positions
            ],
        }, indent=2))
        return 0

    _banner(f"Arrangement: {option.name} ({provider.name}, {option.rows} rows)")
    for p in option.positions:
        title = "  [title]" if p.is_title else ""
        print(f"  {p.block_id:<10} col {p.column:>2} span {p.column_span:>2} | "
              f"row {p.row:>2} span {p.row_span:>2}{title}")
    unplaced = block_ids[len(option.positions):]
    if unplaced:
        print(f"  Not displayed: {', '.join(unplaced)}")
    return 0


def diagnose_command(args: argparse.Namespace, config: EditorConfig) -> int:
    """Execute diagnose command."""
    report = diagnose_catalogue().merge(diagnose_registry(create_default_registry(config)))

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        report.print_report()

    if args.strict and report.has_blocking_issues:
        return 1
    return 0


def schema_command(args: argparse.Namespace, config: EditorConfig) -> int:
    """Execute schema command."""
    print(json.dumps(get_schema(args.name), indent=2))
    return 0


COMMANDS = {
    'block-types': block_types_command,
    'layouts': layouts_command,
    'default-layout': default_layout_command,
    'arrange': arrange_command,
    'diagnose': diagnose_command,
    'schema': schema_command,
}


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='eduslides',
        description='EduSlides - block registry and slide layout tools',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s block-types --json
  %(prog)s layouts --blocks 3
  %(prog)s default-layout 4
  %(prog)s arrange 3 --strategy adhoc --pattern 1
  %(prog)s --config editor.yaml diagnose --strict
  %(prog)s schema block-template
        """
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Show detailed output')
    parser.add_argument('--config', '-c', help='Editor configuration file (YAML/JSON)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Block types command
    types_parser = subparsers.add_parser('block-types', help='List registered block types')
    types_parser.add_argument('--category', help='Only show one category')
    types_parser.add_argument('--search', help='Filter by keyword')
    types_parser.add_argument('--json', action='store_true', help='Output results as JSON')

    # Layouts command
    layouts_parser = subparsers.add_parser('layouts', help='List catalogue layouts')
    layouts_parser.add_argument('--blocks', '-n', type=_non_negative, help='Only layouts that fit this many blocks')
    layouts_parser.add_argument('--all', action='store_true', help='Include deprecated layouts')
    layouts_parser.add_argument('--json', action='store_true', help='Output results as JSON')

    # Default layout command
    default_parser = subparsers.add_parser('default-layout', help='Show the default layout for a block count')
    default_parser.add_argument('blocks', type=_non_negative, help='Number of blocks')

    # Arrange command
    arrange_parser = subparsers.add_parser('arrange', help='Show where blocks would be placed')
    arrange_parser.add_argument('blocks', type=_non_negative, help='Number of blocks')
    arrange_parser.add_argument('--strategy', choices=['catalogue', 'adhoc'], default='catalogue',
                                help='Placement strategy (default: catalogue)')
    arrange_parser.add_argument('--pattern', '-p', type=int, default=0, help='Which candidate to use')
    arrange_parser.add_argument('--layout', '-l', help='Catalogue layout id (catalogue strategy only)')
    arrange_parser.add_argument('--mode', choices=[m.value for m in LayoutMode],
                                help='Ad-hoc layout mode (overrides config)')
    arrange_parser.add_argument('--title-zone', action='store_true', help='Reserve a title row (ad-hoc only)')
    arrange_parser.add_argument('--json', action='store_true', help='Output results as JSON')

    # Diagnose command
    diagnose_parser = subparsers.add_parser('diagnose', help='Check the layout catalogue and block registry')
    diagnose_parser.add_argument('--strict', action='store_true', help='Exit with error if blocking issues found')
    diagnose_parser.add_argument('--json', action='store_true', help='Output results as JSON')

    # Schema command
    schema_parser = subparsers.add_parser('schema', help='Print the JSON Schema of an exported type')
    schema_parser.add_argument('name', choices=list_schemas(), help='Exported type')

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
        return COMMANDS[args.command](args, config)
    except (EduSlidesError, ValueError, OSError) as e:
        print(f"\nError: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
