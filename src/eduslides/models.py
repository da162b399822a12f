"""
Lesson Data Models

Pydantic v2 models for the lesson data that gets stored and exported:
block instances (one class per block kind), slides and templates.
Serialized keys are camelCase so exported lessons keep their field names;
attribute names are snake_case and both spellings validate.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


def new_id(prefix: str) -> str:
    """Return a collision-resistant id such as ``block-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex}"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LessonModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python. Assignments are validated."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, validate_assignment=True)


# ============================================================
# ENUMS
# ============================================================

class BlockTypeName(str, Enum):
    """The closed set of block kinds."""
    text = "text"
    timer = "timer"
    objectives = "objectives"
    question = "question"
    image = "image"
    sequence = "sequence"


class Difficulty(str, Enum):
    foundation = "foundation"
    core = "core"
    extension = "extension"


class FontSize(str, Enum):
    small = "small"
    medium = "medium"
    large = "large"


class Alignment(str, Enum):
    left = "left"
    center = "center"
    right = "right"


class BackgroundColor(str, Enum):
    """Pastel background palette for text blocks."""
    none = "none"
    warm_yellow = "warm-yellow"
    warm_peach = "warm-peach"
    warm_pink = "warm-pink"
    warm_blue = "warm-blue"
    warm_green = "warm-green"
    warm_purple = "warm-purple"


class RevealMode(str, Enum):
    all = "all"
    one_by_one = "one-by-one"
    click_to_reveal = "click-to-reveal"


class SlideLayout(str, Enum):
    """Named grid layouts. See ``layouts.LAYOUT_CATALOGUE``."""
    # 1 block
    single = "single"
    # 2 blocks
    two_horizontal = "two-h"
    two_vertical = "two-v"
    sidebar_left = "sidebar-l"
    sidebar_right = "sidebar-r"
    # 3 blocks
    three_columns = "three-col"
    three_rows = "three-rows"
    big_top = "big-top"
    big_bottom = "big-bottom"
    sidebar_left_stack = "sidebar-l-stack"
    sidebar_right_stack = "sidebar-r-stack"
    wide_left_stack = "wide-l-stack"
    wide_right_stack = "wide-r-stack"
    # 4 blocks
    grid_2x2 = "grid-2x2"
    four_columns = "four-col"
    four_rows = "four-rows"
    # Deprecated, kept so old lessons still load
    title_single = "title-single"


# ============================================================
# BLOCK CONTENT
# ============================================================

class BlockContent(LessonModel):
    """Base for the per-kind content records. Unknown keys are rejected."""
    model_config = ConfigDict(extra="forbid")


class TextContent(BlockContent):
    text: str = ""
    font_size: FontSize = FontSize.medium
    alignment: Alignment = Alignment.left
    background_color: BackgroundColor = BackgroundColor.none
    instructions: Optional[str] = None


class TimerContent(BlockContent):
    duration: int = 300  # seconds
    label: str = "Activity Timer"
    auto_start: bool = False


class ObjectivesContent(BlockContent):
    objectives: List[str] = Field(default_factory=list)
    show_checkboxes: bool = True


class QuestionContent(BlockContent):
    questions: List[str] = Field(default_factory=lambda: [""])
    answers: List[str] = Field(default_factory=lambda: [""])
    instructions: Optional[str] = None


class ImageContent(BlockContent):
    resource_id: str = ""
    caption: str = ""
    width: Optional[int] = None


class SequenceContent(BlockContent):
    items: List[str] = Field(default_factory=lambda: [""])
    reveal_mode: RevealMode = RevealMode.all


# ============================================================
# BLOCK INSTANCES
# ============================================================

class BlockBase(LessonModel):
    """Fields shared by every block kind."""
    id: str = Field(frozen=True)
    topic: str = ""
    difficulty: Difficulty = Difficulty.core
    author: str = ""
    created_at: str = Field(default_factory=utc_now)
    updated_at: str = Field(default_factory=utc_now)


class TextBlock(BlockBase):
    type: Literal["text"] = Field("text", frozen=True)
    content: TextContent


class TimerBlock(BlockBase):
    type: Literal["timer"] = Field("timer", frozen=True)
    content: TimerContent


class ObjectivesBlock(BlockBase):
    type: Literal["objectives"] = Field("objectives", frozen=True)
    content: ObjectivesContent


class QuestionBlock(BlockBase):
    type: Literal["question"] = Field("question", frozen=True)
    content: QuestionContent


class ImageBlock(BlockBase):
    type: Literal["image"] = Field("image", frozen=True)
    content: ImageContent


class SequenceBlock(BlockBase):
    type: Literal["sequence"] = Field("sequence", frozen=True)
    content: SequenceContent


Block = Annotated[
    Union[TextBlock, TimerBlock, ObjectivesBlock, QuestionBlock, ImageBlock, SequenceBlock],
    Field(discriminator="type"),
]

BLOCK_MODELS: Dict[BlockTypeName, Type[BlockBase]] = {
    BlockTypeName.text: TextBlock,
    BlockTypeName.timer: TimerBlock,
    BlockTypeName.objectives: ObjectivesBlock,
    BlockTypeName.question: QuestionBlock,
    BlockTypeName.image: ImageBlock,
    BlockTypeName.sequence: SequenceBlock,
}

CONTENT_MODELS: Dict[BlockTypeName, Type[BlockContent]] = {
    BlockTypeName.text: TextContent,
    BlockTypeName.timer: TimerContent,
    BlockTypeName.objectives: ObjectivesContent,
    BlockTypeName.question: QuestionContent,
    BlockTypeName.image: ImageContent,
    BlockTypeName.sequence: SequenceContent,
}

_BLOCK_ADAPTER: TypeAdapter = TypeAdapter(Block)


def parse_block_type(value: Any) -> Optional[BlockTypeName]:
    """Coerce a tag to BlockTypeName, or None if it is not a known kind."""
    try:
        return BlockTypeName(value)
    except ValueError:
        return None


def parse_block(data: Dict[str, Any]) -> BlockBase:
    """Validate a serialized block, dispatching on its ``type`` tag."""
    return _BLOCK_ADAPTER.validate_python(data)


# ============================================================
# SLIDES AND TEMPLATES
# ============================================================

class Slide(LessonModel):
    """An ordered list of block ids plus the layout they are placed in."""
    id: str = Field(default_factory=lambda: new_id("slide"), frozen=True)
    layout: SlideLayout = SlideLayout.single
    block_ids: List[str] = Field(default_factory=list)
    title: Optional[str] = None


class BlockTemplate(LessonModel):
    """Reusable scaffolding for one block: its templateable fields only."""
    id: str = Field(default_factory=lambda: new_id("template"))
    block_type: BlockTypeName
    name: str
    description: Optional[str] = None
    template_content: Dict[str, Any] = Field(default_factory=dict)
    created_at: str = Field(default_factory=utc_now)


class SlideTemplateBlock(LessonModel):
    """The templated fields of the block that filled one slot."""
    type: BlockTypeName
    template_content: Dict[str, Any] = Field(default_factory=dict)
    slot: Optional[str] = None


class SlideTemplate(LessonModel):
    """Reusable scaffolding for a whole slide, one entry per filled slot."""
    id: str = Field(default_factory=lambda: new_id("slide-template"))
    name: str
    description: Optional[str] = None
    layout: SlideLayout
    blocks: List[SlideTemplateBlock] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    created_at: str = Field(default_factory=utc_now)


# ============================================================
# SERIALIZATION
# ============================================================

def to_dict(model: BaseModel) -> Dict[str, Any]:
    """Dump a model in its exported (camelCase, JSON-safe) form."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def to_field_names(model: Type[BaseModel], data: Dict[str, Any]) -> Dict[str, Any]:
    """Rename camelCase keys to attribute names. Unknown keys are kept as is."""
    names = {}
    for name, field in model.model_fields.items():
        names[field.alias or to_camel(name)] = name
        names[name] = name
    return {names.get(key, key): value for key, value in data.items()}
