"""Internal schema definitions."""

from .blocks import (  # noqa: F401
    Block,
    CodeBlock,
    Heading,
    ImageBlock,
    InlineRun,
    PageBreak,
    Paragraph,
    RequirementRecord,
    Table,
)
from .document import CoverInfo, DocumentStructure  # noqa: F401
from .validation import (  # noqa: F401
    IframeSrcReport,
    PathCheck,
    ValidationSummary,
    ValidatorOutcome,
)

__all__ = [
    "Block",
    "CodeBlock",
    "CoverInfo",
    "DocumentStructure",
    "Heading",
    "IframeSrcReport",
    "ImageBlock",
    "InlineRun",
    "PageBreak",
    "Paragraph",
    "PathCheck",
    "RequirementRecord",
    "Table",
    "ValidationSummary",
    "ValidatorOutcome",
]
