"""Tests for block and slide templates."""

import logging

import pytest

from eduslides.block_types import create_default_registry
from eduslides.errors import (
    EmptySlideError,
    InvalidTemplateContentError,
    NoTemplateableContentError,
    TemplateError,
    TemplateImportError,
    UnknownBlockTypeError,
)
from eduslides.models import (
    BlockTemplate,
    BlockTypeName,
    QuestionContent,
    Slide,
    SlideLayout,
    SlideTemplate,
    SlideTemplateBlock,
    TextContent,
    TimerContent,
)
from eduslides.registry import (
    BlockCategory,
    BlockField,
    BlockTypeDefinition,
    BlockTypeRegistry,
    FieldKind,
)
from eduslides.slides import update_block_content
from eduslides.templates import (
    TemplateManager,
    dump_block_template,
    dump_slide_template,
    get_slide_template_preview,
    get_template_preview,
    load_block_template,
    load_block_templates,
    load_slide_template,
    template_has_content,
)


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def manager(registry):
    return TemplateManager(registry)


# ============================================================
# BLOCK TEMPLATES
# ============================================================

def test_template_from_timer_keeps_templateable_fields(manager, registry):
    block = update_block_content(
        registry.create_default_block("timer"), duration=120, label="Think Time", auto_start=True,
    )
    template = manager.create_template_from_block(block, "Think time", "Two minutes of quiet")
    assert template.block_type == BlockTypeName.timer
    assert template.template_content == {"duration": 120, "label": "Think Time"}
    assert template.name == "Think time"
    assert template.description == "Two minutes of quiet"
    assert template.id.startswith("template-")


def test_template_from_block_without_templateable_fields(manager, registry):
    with pytest.raises(NoTemplateableContentError):
        manager.create_template_from_block(registry.create_default_block("image"), "Picture")


def test_template_from_block_with_empty_templateable_fields(manager, registry):
    block = registry.create_default_block("question")
    assert block.content.instructions is None
    with pytest.raises(NoTemplateableContentError) as exc_info:
        manager.create_template_from_block(block, "Questions")
    assert isinstance(exc_info.value, TemplateError)
    assert "no templateable content" in exc_info.value.reason


def test_template_from_unregistered_block_type(registry):
    manager = TemplateManager(BlockTypeRegistry())
    with pytest.raises(UnknownBlockTypeError):
        manager.create_template_from_block(registry.create_default_block("timer"), "Timer")


def test_extracted_content_is_a_copy(manager, registry):
    block = update_block_content(registry.create_default_block("question"), instructions="Discuss")
    content = manager.extract_templateable_content(block)
    content["instructions"] = "Changed"
    assert block.content.instructions == "Discuss"


def test_block_from_template(manager):
    template = BlockTemplate(
        block_type="question",
        name="Full sentences",
        template_content={"instructions": "Answer in full sentences"},
    )
    block = manager.create_block_from_template(template)
    assert block.type == "question"
    assert block.content.instructions == "Answer in full sentences"
    assert block.content.questions == [""]
    assert block.id.startswith("block-")


def test_block_from_template_never_reuses_ids(manager):
    template = BlockTemplate(block_type="timer", name="Think", template_content={"duration": 60})
    ids = {manager.create_block_from_template(template).id for _ in range(5)}
    assert len(ids) == 5


def test_block_from_template_with_custom_factory(manager, registry):
    calls = []

    def factory(block_type):
        calls.append(block_type)
        return registry.create_default_block(block_type)

    template = BlockTemplate(block_type="timer", name="Think", template_content={"duration": 45})
    block = manager.create_block_from_template(template, factory)
    assert calls == [BlockTypeName.timer]
    assert block.content.duration == 45


def test_block_from_template_factory_returns_nothing(manager):
    template = BlockTemplate(block_type="timer", name="Think", template_content={"duration": 45})
    with pytest.raises(UnknownBlockTypeError):
        manager.create_block_from_template(template, lambda block_type: None)


def test_expansion_ignores_non_templateable_fields(manager, caplog):
    template = BlockTemplate(
        block_type="timer",
        name="Think",
        template_content={"duration": 60, "auto_start": True},
    )
    with caplog.at_level(logging.WARNING, logger="eduslides.templates"):
        block = manager.create_block_from_template(template)
    assert block.content.duration == 60
    assert block.content.auto_start is False
    assert "auto_start" in caplog.text


def test_validate_template(manager):
    good = BlockTemplate(block_type="timer", name="Think", template_content={"duration": 60})
    bad = BlockTemplate(block_type="timer", name="Think", template_content={"auto_start": True})
    assert manager.validate_template(good) == []
    problems = manager.validate_template(bad)
    assert len(problems) == 1
    assert "auto_start" in problems[0]


def test_block_from_template_with_invalid_value(manager):
    template = BlockTemplate(block_type="timer", name="Later", template_content={"duration": "soon"})
    with pytest.raises(InvalidTemplateContentError) as exc_info:
        manager.create_block_from_template(template)
    assert isinstance(exc_info.value, TemplateError)
    assert "duration" in exc_info.value.reason
    assert "timer" in exc_info.value.reason


def test_validate_template_reports_invalid_values(manager):
    template = BlockTemplate(block_type="timer", name="Later", template_content={"duration": "soon"})
    problems = manager.validate_template(template)
    assert len(problems) == 1
    assert problems[0].startswith("Invalid value for 'duration'")


def test_camel_case_template_keys_are_kept(caplog):
    registry = BlockTypeRegistry()
    registry.register(BlockTypeDefinition(
        type="timer",
        label="Timer",
        description="Timer that starts on its own",
        icon="T",
        category=BlockCategory.interactive,
        create_content=TimerContent,
        fields=(
            BlockField("duration", FieldKind.number, required=True, templateable=True),
            BlockField("label", FieldKind.string, templateable=True),
            BlockField("auto_start", FieldKind.boolean, templateable=True),
        ),
    ))
    manager = TemplateManager(registry.freeze())
    template = BlockTemplate(
        block_type="timer", name="Go", template_content={"autoStart": True, "duration": 30},
    )

    assert manager.validate_template(template) == []
    with caplog.at_level(logging.WARNING, logger="eduslides.templates"):
        block = manager.create_block_from_template(template)
    assert block.content.auto_start is True
    assert block.content.duration == 30
    assert "Ignoring" not in caplog.text


# ============================================================
# SLIDE TEMPLATES
# ============================================================

def _pair_work_slide(registry):
    timer = update_block_content(registry.create_default_block("timer"), duration=60, label="Pair")
    question = update_block_content(
        registry.create_default_block("question"),
        instructions="Discuss with a partner",
        questions=["Q1"],
        answers=["A1"],
    )
    slide = Slide(layout="two-h", block_ids=[timer.id, question.id])
    return slide, [timer, question]


def test_slide_template_captures_each_slot(manager, registry):
    slide, blocks = _pair_work_slide(registry)
    template = manager.create_template_from_slide(slide, blocks, "Pair work")
    assert template.layout == SlideLayout.two_horizontal
    assert [entry.slot for entry in template.blocks] == ["slot-1", "slot-2"]
    assert [entry.type for entry in template.blocks] == [BlockTypeName.timer, BlockTypeName.question]
    assert template.blocks[1].template_content == {"instructions": "Discuss with a partner"}


def test_slide_template_expands_to_equivalent_slide(manager, registry):
    slide, blocks = _pair_work_slide(registry)
    template = manager.create_template_from_slide(slide, blocks, "Pair work")
    new_slide, new_blocks = manager.create_slide_from_template(template)

    assert new_slide.layout == slide.layout
    assert new_slide.id != slide.id
    assert new_slide.block_ids == [block.id for block in new_blocks]
    assert not set(new_slide.block_ids) & set(slide.block_ids)

    for original, expanded in zip(blocks, new_blocks):
        assert expanded.type == original.type
        for name in registry.templateable_fields(original.type):
            assert getattr(expanded.content, name) == getattr(original.content, name)

    # Lesson content is not carried over
    assert new_blocks[1].content.questions == [""]


def test_slide_template_from_slide_without_blocks(manager):
    with pytest.raises(EmptySlideError):
        manager.create_template_from_slide(Slide(), [], "Empty")


def test_slide_template_only_captures_placed_blocks(manager, registry):
    slide, blocks = _pair_work_slide(registry)
    single = slide.model_copy(update={"layout": SlideLayout.single})
    template = manager.create_template_from_slide(single, blocks, "Timer only")
    assert len(template.blocks) == 1
    assert template.blocks[0].type == BlockTypeName.timer


def test_slide_template_keeps_blocks_without_templateable_content(manager, registry):
    image = registry.create_default_block("image")
    slide = Slide(layout="single", block_ids=[image.id])
    template = manager.create_template_from_slide(slide, [image], "Picture slide")
    assert template.blocks == [SlideTemplateBlock(type="image", template_content={}, slot="slot-1")]

    _, new_blocks = manager.create_slide_from_template(template)
    assert new_blocks[0].type == "image"
    assert new_blocks[0].content.resource_id == ""


def test_slide_from_template_with_unknown_type():
    manager = TemplateManager(BlockTypeRegistry())
    template = SlideTemplate(
        name="Starter", layout="single", blocks=[SlideTemplateBlock(type="timer")],
    )
    with pytest.raises(UnknownBlockTypeError):
        manager.create_slide_from_template(template)


def test_templateable_flags_come_from_the_registry():
    registry = BlockTypeRegistry()
    registry.register(BlockTypeDefinition(
        type="text",
        label="Text",
        description="Text with classroom instructions",
        icon="T",
        category=BlockCategory.content,
        create_content=TextContent,
        fields=(
            BlockField("text", FieldKind.string, required=True),
            BlockField("instructions", FieldKind.string, templateable=True),
        ),
    ))
    registry.register(BlockTypeDefinition(
        type="question",
        label="Questions",
        description="Questions without templateable fields",
        icon="?",
        category=BlockCategory.assessment,
        create_content=QuestionContent,
        fields=(
            BlockField("questions", FieldKind.list, required=True),
            BlockField("answers", FieldKind.list, required=True),
            BlockField("instructions", FieldKind.string),
        ),
    ))
    manager = TemplateManager(registry.freeze())

    question = update_block_content(registry.create_default_block("question"), instructions="Think first")
    with pytest.raises(NoTemplateableContentError):
        manager.create_template_from_block(question, "Questions")

    text = update_block_content(
        registry.create_default_block("text"),
        text="Lesson notes",
        instructions="Discuss with partner",
    )
    template = manager.create_template_from_block(text, "Partner talk")
    assert template.template_content == {"instructions": "Discuss with partner"}

    expanded = manager.create_block_from_template(template)
    assert expanded.content.instructions == "Discuss with partner"
    assert expanded.content.text == ""
    assert expanded.id != text.id


# ============================================================
# PREVIEWS
# ============================================================

def test_template_preview_truncates_text():
    template = BlockTemplate(block_type="text", name="Long", template_content={"instructions": "x" * 80})
    assert get_template_preview(template) == "x" * 50 + "..."


def test_template_preview_short_text():
    template = BlockTemplate(block_type="timer", name="Think", template_content={"duration": 60, "label": "Think"})
    assert get_template_preview(template) == "Think"


def test_template_preview_without_text():
    template = BlockTemplate(block_type="timer", name="Think", template_content={"duration": 60})
    assert get_template_preview(template) == "1 field"


def test_template_preview_empty():
    template = BlockTemplate(block_type="timer", name="Empty")
    assert get_template_preview(template) == "Empty template"
    assert not template_has_content(template)


def test_slide_template_preview():
    template = SlideTemplate(
        name="Starter",
        layout="two-h",
        blocks=[SlideTemplateBlock(type="timer"), SlideTemplateBlock(type="question")],
    )
    assert get_slide_template_preview(template) == "2 blocks: timer, question"


# ============================================================
# SERIALIZATION
# ============================================================

def test_block_template_json(manager):
    template = BlockTemplate(
        block_type="timer", name="Think", description="Quiet time", template_content={"duration": 60},
    )
    text = dump_block_template(template)
    assert '"blockType": "timer"' in text
    assert load_block_template(text) == template


def test_slide_template_json(manager, registry):
    slide, blocks = _pair_work_slide(registry)
    template = manager.create_template_from_slide(slide, blocks, "Pair work")
    loaded = load_slide_template(dump_slide_template(template))
    assert loaded == template


def test_load_block_templates_list():
    text = '[{"blockType": "timer", "name": "A"}, {"blockType": "text", "name": "B"}]'
    templates = load_block_templates(text)
    assert [t.block_type for t in templates] == [BlockTypeName.timer, BlockTypeName.text]


def test_load_invalid_template_json():
    with pytest.raises(TemplateImportError):
        load_block_template("{not json")
    with pytest.raises(TemplateImportError):
        load_block_template('{"name": "missing type"}')
    with pytest.raises(TemplateImportError):
        load_slide_template('{"name": "x", "layout": "bogus"}')
