"""
EduSlides

Typed content blocks for lesson slides, a registry that creates and
validates them, and the engines that place them on a 12x6 slide grid.
"""

__version__ = "0.1.0"

from .models import (
    Block,
    BlockTypeName,
    BlockTemplate,
    Difficulty,
    Slide,
    SlideLayout,
    SlideTemplate,
    parse_block,
    to_dict,
)

from .registry import (
    BlockCategory,
    BlockField,
    BlockTypeDefinition,
    BlockTypeRegistry,
    FieldKind,
)

from .block_types import (
    BUILTIN_BLOCK_TYPES,
    create_default_registry,
)

from .layouts import (
    LAYOUT_CATALOGUE,
    LayoutDefinition,
    Slot,
    assign_blocks_to_slots,
    get_default_layout,
    get_layout,
    get_layouts_for_block_count,
)

from .arrangements import (
    LayoutOption,
    Placement,
    get_current_layout,
    get_layout_options,
)

from .providers import (
    AdHocLayoutProvider,
    CatalogueLayoutProvider,
    LayoutProvider,
)

from .slides import (
    LayoutFit,
    check_layout_fit,
    create_slide,
    insert_block,
    remove_block,
    update_block_content,
)

from .templates import TemplateManager

from .config import (
    EditorConfig,
    load_config,
    save_config,
)

from .errors import (
    EduSlidesError,
    EmptySlideError,
    InvalidTemplateContentError,
    NoTemplateableContentError,
    UnknownBlockTypeError,
)

from .diagnose import (
    DiagnosticReport,
    diagnose_catalogue,
    diagnose_registry,
    diagnose_slide,
)

__all__ = [
    # Data model
    'Block',
    'BlockTypeName',
    'BlockTemplate',
    'Difficulty',
    'Slide',
    'SlideLayout',
    'SlideTemplate',
    'parse_block',
    'to_dict',
    # Registry
    'BlockCategory',
    'BlockField',
    'BlockTypeDefinition',
    'BlockTypeRegistry',
    'FieldKind',
    'BUILTIN_BLOCK_TYPES',
    'create_default_registry',
    # Layout catalogue
    'LAYOUT_CATALOGUE',
    'LayoutDefinition',
    'Slot',
    'assign_blocks_to_slots',
    'get_default_layout',
    'get_layout',
    'get_layouts_for_block_count',
    # Ad-hoc arrangements
    'LayoutOption',
    'Placement',
    'get_current_layout',
    'get_layout_options',
    # Providers
    'AdHocLayoutProvider',
    'CatalogueLayoutProvider',
    'LayoutProvider',
    # Slides
    'LayoutFit',
    'check_layout_fit',
    'create_slide',
    'insert_block',
    'remove_block',
    'update_block_content',
    # Templates
    'TemplateManager',
    # Config
    'EditorConfig',
    'load_config',
    'save_config',
    # Errors
    'EduSlidesError',
    'EmptySlideError',
    'InvalidTemplateContentError',
    'NoTemplateableContentError',
    'UnknownBlockTypeError',
    # Diagnostics
    'DiagnosticReport',
    'diagnose_catalogue',
    'diagnose_registry',
    'diagnose_slide',
]
