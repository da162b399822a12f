"""
Error Types

Failures raised by the registry and the template manager. Lookups never
raise: unknown tags come back as ``None`` and the caller decides what to
show. Layout mismatches are reported, not raised (see ``slides.LayoutFit``).
"""


class EduSlidesError(Exception):
    """Base class for all eduslides errors."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class UnknownBlockTypeError(EduSlidesError):
    """A block type tag is not registered."""

    def __init__(self, block_type: str):
        super().__init__(f"Unknown block type: {block_type}")
        self.block_type = block_type


class DuplicateBlockTypeError(EduSlidesError):
    """A block type was registered twice."""

    def __init__(self, block_type: str):
        super().__init__(f"Block type already registered: {block_type}")
        self.block_type = block_type


class RegistryFrozenError(EduSlidesError):
    """Registration attempted after the registry was frozen."""


class TemplateError(EduSlidesError):
    """A template could not be created or expanded."""


class NoTemplateableContentError(TemplateError):
    """The block has no templateable content to save."""


class EmptySlideError(TemplateError):
    """A slide template was requested for a slide without blocks."""


class InvalidTemplateContentError(TemplateError):
    """A stored template value does not fit the block's content model."""


class TemplateImportError(EduSlidesError):
    """Serialized template data could not be parsed."""
