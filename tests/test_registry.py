"""Tests for the block type registry and the built-in block types."""

import pytest

from eduslides.block_types import (
    BUILTIN_BLOCK_TYPES,
    TEXT,
    TIMER,
    create_default_registry,
)
from eduslides.config import BlockDefaults, EditorConfig
from eduslides.errors import DuplicateBlockTypeError, RegistryFrozenError
from eduslides.models import (
    BlockTypeName,
    Difficulty,
    RevealMode,
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


@pytest.fixture
def registry():
    return create_default_registry()


# ============================================================
# LOOKUP
# ============================================================

def test_default_registry_holds_builtin_types(registry):
    assert [d.type.value for d in registry.get_all()] == [
        "text", "timer", "objectives", "question", "image", "sequence",
    ]
    assert len(registry) == len(BUILTIN_BLOCK_TYPES)
    assert registry.frozen


def test_get_returns_same_definition(registry):
    for block_type in BlockTypeName:
        assert registry.get(block_type) is registry.get(block_type.value)
        assert registry.get(block_type) is not None


def test_get_unknown_returns_none(registry):
    assert registry.get("video") is None
    assert registry.get("") is None


def test_contains(registry):
    assert "timer" in registry
    assert BlockTypeName.image in registry
    assert "video" not in registry


def test_iterates_in_registration_order(registry):
    assert [d.type for d in registry] == [d.type for d in BUILTIN_BLOCK_TYPES]


def test_get_all_by_category(registry):
    content_types = [d.type.value for d in registry.get_all_by_category(BlockCategory.content)]
    assert content_types == ["text", "objectives", "sequence"]
    assert [d.type.value for d in registry.get_all_by_category("media")] == ["image"]


def test_search(registry):
    assert [d.type.value for d in registry.search("quiz")] == ["question"]
    assert [d.type.value for d in registry.search("COUNTDOWN")] == ["timer"]
    assert registry.search("zzz") == []


def test_templateable_fields(registry):
    assert registry.templateable_fields("timer") == ["duration", "label"]
    assert registry.templateable_fields("question") == ["instructions"]
    assert registry.templateable_fields("text") == ["instructions"]
    assert registry.templateable_fields("image") == []
    assert registry.templateable_fields("video") == []


# ============================================================
# REGISTRATION
# ============================================================

def test_register_is_chainable():
    registry = BlockTypeRegistry().register(TEXT).register(TIMER)
    assert len(registry) == 2
    assert not registry.frozen


def test_register_duplicate_raises():
    registry = BlockTypeRegistry().register(TEXT)
    with pytest.raises(DuplicateBlockTypeError):
        registry.register(TEXT)


def test_register_after_freeze_raises(registry):
    with pytest.raises(RegistryFrozenError):
        registry.register(TEXT)


def test_definition_rejects_fields_missing_from_content():
    with pytest.raises(ValueError, match="not part of"):
        BlockTypeDefinition(
            type="timer",
            label="Timer",
            description="",
            icon="",
            category=BlockCategory.interactive,
            create_content=TimerContent,
            fields=(BlockField("colour", FieldKind.string),),
        )


def test_definition_coerces_type_tag():
    definition = BlockTypeDefinition(
        type="timer",
        label="Timer",
        description="",
        icon="",
        category=BlockCategory.interactive,
        create_content=TimerContent,
    )
    assert definition.type == BlockTypeName.timer
    assert definition.templateable_fields == []


# ============================================================
# BLOCK CREATION
# ============================================================

def test_default_blocks_get_fresh_ids(registry):
    a = registry.create_default_block("timer")
    b = registry.create_default_block("timer")
    assert a.id != b.id
    assert a.id.startswith("block-")
    assert a.content == b.content


def test_default_block_content(registry):
    assert registry.create_default_block("text").content.text == ""
    timer = registry.create_default_block("timer")
    assert timer.content.duration == 300
    assert timer.content.label == "Activity Timer"
    assert registry.create_default_block("objectives").content.objectives == []
    assert registry.create_default_block("question").content.questions == [""]
    assert registry.create_default_block("image").content.resource_id == ""
    assert registry.create_default_block("sequence").content.reveal_mode == RevealMode.all


def test_default_content_is_not_shared(registry):
    first = registry.create_default_block("objectives")
    first.content.objectives.append("Name the planets")
    second = registry.create_default_block("objectives")
    assert second.content.objectives == []


def test_default_block_unknown_returns_none(registry):
    assert registry.create_default_block("video") is None


def test_default_block_uses_configured_metadata():
    config = EditorConfig(defaults=BlockDefaults(author="ms-khan", topic="forces", difficulty="extension"))
    block = create_default_registry(config).create_default_block("text")
    assert block.author == "ms-khan"
    assert block.topic == "forces"
    assert block.difficulty == Difficulty.extension
    assert block.created_at == block.updated_at


def test_create_block_fail_policy(registry):
    assert registry.create_block("video") is None
    assert registry.create_block("timer").type == "timer"


def test_create_block_fallback_policy():
    config = EditorConfig(unknown_block_policy="fallback", fallback_block_type="sequence")
    registry = create_default_registry(config)
    block = registry.create_block("video")
    assert block is not None
    assert block.type == "sequence"
    # The plain factory is unaffected by the policy
    assert registry.create_default_block("video") is None


# ============================================================
# VALIDATION
# ============================================================

def test_validate_text(registry):
    block = registry.create_default_block("text")
    assert registry.validate(block) == "Text content cannot be empty"
    assert registry.validate(update_block_content(block, text="Hello")) is None
    assert "too long" in registry.validate(update_block_content(block, text="x" * 5001))


def test_validate_timer(registry):
    block = registry.create_default_block("timer")
    assert registry.validate(block) is None
    assert registry.validate(update_block_content(block, duration=0)) == "Duration must be greater than 0"
    assert registry.validate(update_block_content(block, duration=90000)) == "Duration cannot exceed 24 hours"


def test_validate_question(registry):
    block = registry.create_default_block("question")
    assert registry.validate(block) == "Must have at least one question and answer"
    mismatched = update_block_content(block, questions=["Q1", "Q2"], answers=["A1"])
    assert registry.validate(mismatched) == "Each question must have a corresponding answer"
    complete = update_block_content(block, questions=["Q1"], answers=["A1"])
    assert registry.validate(complete) is None


def test_validate_without_validator(registry):
    assert registry.validate(registry.create_default_block("image")) is None


def test_validate_unregistered_type():
    block = create_default_registry().create_default_block("timer")
    registry = BlockTypeRegistry().register(TEXT)
    assert registry.validate(block) == "Unknown block type: timer"
