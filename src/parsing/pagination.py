"""Heading page-break assignment."""

from __future__ import annotations

import re
from typing import Sequence

from schemas.internal.blocks import Block, Heading

MAIN_SECTION_RE = re.compile(r"^\d+[.\s]")


def heading_group_sizes(blocks: Sequence[Block]) -> list[int]:
    """Return, per block, the length of the heading group it starts (0 otherwise)."""
    sizes = [0] * len(blocks)
    index = 0
    while index < len(blocks):
        if not isinstance(blocks[index], Heading):
            index += 1
            continue
        end = index
        while end < len(blocks) and isinstance(blocks[end], Heading):
            end += 1
        sizes[index] = end - index
        index = end
    return sizes


def needs_page_break(heading: Heading, group_size: int) -> bool:
    if heading.level == 1:
        return True
    if heading.level == 2:
        return bool(MAIN_SECTION_RE.match(heading.text))
    if heading.level in (3, 4):
        return group_size > 1
    return False


def apply_page_breaks(blocks: Sequence[Block]) -> list[Block]:
    """Set ``page_break_before`` on every heading of a block sequence.

    A heading group is a maximal run of consecutive headings. Level 3-4
    headings break only when they open a group of two or more, so a cluster
    of headings moves to the next page together while a lone heading stays
    in the flow.
    """
    sizes = heading_group_sizes(blocks)
    result: list[Block] = []
    for block, size in zip(blocks, sizes):
        if isinstance(block, Heading):
            flag = needs_page_break(block, size)
            if flag != block.page_break_before:
                block = block.model_copy(update={"page_break_before": flag})
        result.append(block)
    return result


__all__ = [
    "MAIN_SECTION_RE",
    "apply_page_breaks",
    "heading_group_sizes",
    "needs_page_break",
]
