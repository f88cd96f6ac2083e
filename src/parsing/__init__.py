"""Markdown structural parser."""

from parsing.blocks import iter_blocks, parse_blocks, parse_markdown
from parsing.inline import parse_inline
from parsing.pagination import apply_page_breaks
from parsing.structure import parse_document

__all__ = [
    "apply_page_breaks",
    "iter_blocks",
    "parse_blocks",
    "parse_document",
    "parse_inline",
    "parse_markdown",
]
