"""Single-pass Markdown block scanner."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from parsing.inline import parse_inline
from parsing.pagination import apply_page_breaks
from parsing.requirements import (
    RequirementBuilder,
    ends_requirement,
    match_requirement_heading,
)
from parsing.tables import TableBuffer, is_table_line
from schemas.internal.blocks import (
    Block,
    CodeBlock,
    Heading,
    ImageBlock,
    PageBreak,
    Paragraph,
)

FENCE = "```"

_HEADING_RE = re.compile(r"^(#{1,5})\s+(.+)$")
_RULE_RE = re.compile(r"^(?:-{3,}|\*{3,})$")
_IMAGE_RE = re.compile(r"^!\[([^\]]*)\]\(\s*([^)\s]+)(?:\s+\"[^\"]*\")?\s*\)$")
_PAGE_BREAK_RE = re.compile(
    r"^(?:<!--\s*pagebreak\s*-->|<div\s+class=[\"']page-break[\"']\s*>\s*</div>|"
    r"<div\s+class=[\"']page-break[\"']\s*/?>)$",
    re.IGNORECASE,
)


@dataclass
class _Cursor:
    """Position and mode flags for one scan."""

    lines: Sequence[str]
    index: int = 0
    code_language: str | None = None
    code_lines: list[str] = field(default_factory=list)
    in_code: bool = False
    table: TableBuffer | None = None

    def done(self) -> bool:
        return self.index >= len(self.lines)

    def current(self) -> str:
        return self.lines[self.index]


def iter_blocks(text: str) -> Iterator[Block]:
    """Yield blocks in source order. Never raises on malformed input."""
    cursor = _Cursor(lines=text.splitlines())
    while not cursor.done():
        line = cursor.current()
        stripped = line.strip()

        if cursor.in_code:
            if stripped.startswith(FENCE):
                yield _close_code(cursor)
            else:
                cursor.code_lines.append(line)
            cursor.index += 1
            continue

        if cursor.table is not None:
            if is_table_line(line):
                cursor.table.add(line)
                cursor.index += 1
                continue
            table = cursor.table.build()
            cursor.table = None
            if table is not None:
                yield table

        if stripped.startswith(FENCE):
            cursor.in_code = True
            language = stripped[len(FENCE):].strip().lower()
            cursor.code_language = language or None
            cursor.code_lines = []
            cursor.index += 1
            continue

        if is_table_line(line):
            cursor.table = TableBuffer()
            cursor.table.add(line)
            cursor.index += 1
            continue

        requirement = match_requirement_heading(stripped)
        if requirement is not None:
            yield _read_requirement(cursor, *requirement)
            continue

        cursor.index += 1
        if not stripped or _RULE_RE.match(stripped):
            continue

        heading = _HEADING_RE.match(stripped)
        if heading:
            yield Heading(level=len(heading.group(1)), text=heading.group(2))
            continue

        if _PAGE_BREAK_RE.match(stripped):
            yield PageBreak()
            continue

        image = _IMAGE_RE.match(stripped)
        if image:
            yield ImageBlock(path=image.group(2), alt=image.group(1).strip())
            continue

        yield Paragraph(runs=parse_inline(stripped))

    if cursor.in_code:
        yield _close_code(cursor)
    if cursor.table is not None:
        table = cursor.table.build()
        if table is not None:
            yield table


def _close_code(cursor: _Cursor) -> CodeBlock:
    block = CodeBlock(language=cursor.code_language, text="\n".join(cursor.code_lines))
    cursor.in_code = False
    cursor.code_language = None
    cursor.code_lines = []
    return block


def _read_requirement(cursor: _Cursor, req_id: str, name: str) -> Block:
    builder = RequirementBuilder(req_id, name)
    cursor.index += 1
    while not cursor.done():
        line = cursor.current()
        if ends_requirement(line):
            break
        builder.feed(line)
        cursor.index += 1
    return builder.build()


def parse_blocks(text: str) -> list[Block]:
    return list(iter_blocks(text))


def parse_markdown(text: str) -> list[Block]:
    """Parse Markdown into blocks with heading page breaks assigned."""
    return apply_page_breaks(parse_blocks(text))


__all__ = ["iter_blocks", "parse_blocks", "parse_markdown"]
