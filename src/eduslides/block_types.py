"""
Built-in Block Types

The six platform-defined block kinds and the factory that registers them.

Templateable fields are instructional scaffolding that is kept when a
block is saved as a template (a timer's duration and label, a question's
instructions). Everything else is lesson-specific and is reset to the
default on template expansion.
"""

from typing import Optional

from .config import EditorConfig
from .models import (
    BlockBase,
    BlockTypeName,
    ImageContent,
    ObjectivesContent,
    QuestionContent,
    SequenceContent,
    TextContent,
    TimerContent,
)
from .registry import (
    BlockCategory,
    BlockField,
    BlockTypeDefinition,
    BlockTypeRegistry,
    FieldKind,
)

MAX_TEXT_LENGTH = 5000
MAX_TIMER_SECONDS = 86400


# ============================================================
# VALIDATORS
# ============================================================

def _validate_text(block: BlockBase) -> Optional[str]:
    text = block.content.text
    if not text.strip():
        return "Text content cannot be empty"
    if len(text) > MAX_TEXT_LENGTH:
        return f"Text is too long (max {MAX_TEXT_LENGTH} characters)"
    return None


def _validate_timer(block: BlockBase) -> Optional[str]:
    duration = block.content.duration
    if duration <= 0:
        return "Duration must be greater than 0"
    if duration > MAX_TIMER_SECONDS:
        return "Duration cannot exceed 24 hours"
    return None


def _validate_question(block: BlockBase) -> Optional[str]:
    questions = [q for q in block.content.questions if q.strip()]
    answers = [a for a in block.content.answers if a.strip()]
    if not questions or not answers:
        return "Must have at least one question and answer"
    if len(questions) != len(answers):
        return "Each question must have a corresponding answer"
    return None


# ============================================================
# DEFINITIONS
# ============================================================

TEXT = BlockTypeDefinition(
    type=BlockTypeName.text,
    label="Text",
    description="Add text with formatting",
    icon="📝",
    category=BlockCategory.content,
    create_content=TextContent,
    fields=(
        BlockField("text", FieldKind.string, required=True),
        BlockField("font_size", FieldKind.enum, required=True,
                   enum_options=("small", "medium", "large")),
        BlockField("alignment", FieldKind.enum, required=True,
                   enum_options=("left", "center", "right")),
        BlockField("background_color", FieldKind.enum),
        BlockField("instructions", FieldKind.string, templateable=True),
    ),
    validate=_validate_text,
    keywords=("paragraph", "writing", "content", "note"),
)

TIMER = BlockTypeDefinition(
    type=BlockTypeName.timer,
    label="Timer",
    description="Countdown timer for activities",
    icon="⏱️",
    category=BlockCategory.interactive,
    create_content=TimerContent,
    fields=(
        BlockField("duration", FieldKind.number, required=True, templateable=True),
        BlockField("label", FieldKind.string, templateable=True),
        BlockField("auto_start", FieldKind.boolean),
    ),
    validate=_validate_timer,
    keywords=("countdown", "time", "stopwatch", "clock"),
)

OBJECTIVES = BlockTypeDefinition(
    type=BlockTypeName.objectives,
    label="Learning Objectives",
    description="Display lesson objectives with checkboxes",
    icon="🎯",
    category=BlockCategory.content,
    create_content=ObjectivesContent,
    fields=(
        BlockField("objectives", FieldKind.list, required=True),
        BlockField("show_checkboxes", FieldKind.boolean),
    ),
    keywords=("goals", "aims", "targets", "learning outcomes"),
)

QUESTION = BlockTypeDefinition(
    type=BlockTypeName.question,
    label="Questions",
    description="Add questions with hidden answers",
    icon="❓",
    category=BlockCategory.assessment,
    create_content=QuestionContent,
    fields=(
        BlockField("questions", FieldKind.list, required=True),
        BlockField("answers", FieldKind.list, required=True),
        BlockField("instructions", FieldKind.string, templateable=True),
    ),
    validate=_validate_question,
    keywords=("quiz", "test", "q&a", "assessment"),
)

IMAGE = BlockTypeDefinition(
    type=BlockTypeName.image,
    label="Image",
    description="Add an image to your slide",
    icon="🖼️",
    category=BlockCategory.media,
    create_content=ImageContent,
    fields=(
        BlockField("resource_id", FieldKind.string, required=True),
        BlockField("caption", FieldKind.string),
        BlockField("width", FieldKind.number),
    ),
    keywords=("picture", "photo", "graphic", "visual"),
)

SEQUENCE = BlockTypeDefinition(
    type=BlockTypeName.sequence,
    label="Sequence",
    description="Display information step-by-step",
    icon="📋",
    category=BlockCategory.content,
    create_content=SequenceContent,
    fields=(
        BlockField("items", FieldKind.list, required=True),
        BlockField("reveal_mode", FieldKind.enum, required=True,
                   enum_options=("all", "one-by-one", "click-to-reveal")),
    ),
    keywords=("steps", "list", "ordered", "process"),
)

BUILTIN_BLOCK_TYPES = (TEXT, TIMER, OBJECTIVES, QUESTION, IMAGE, SEQUENCE)


def create_default_registry(config: Optional[EditorConfig] = None) -> BlockTypeRegistry:
    """Build a frozen registry holding the built-in block types."""
    config = config or EditorConfig()
    registry = BlockTypeRegistry(
        defaults=config.defaults,
        unknown_block_policy=config.unknown_block_policy,
        fallback_block_type=config.fallback_block_type,
    )
    for definition in BUILTIN_BLOCK_TYPES:
        registry.register(definition)
    return registry.freeze()
