"""Split a regulatory Markdown document into cover, TOC, revision history and body."""

from __future__ import annotations

import re
from enum import Enum

from parsing.blocks import parse_markdown
from parsing.tables import TableBuffer, is_table_line
from schemas.internal.document import CoverInfo, DocumentStructure

_ORGANIZATION_RE = re.compile(r"^[A-Z].*\s+(Inc\.|Corp\.|Ltd\.|Co\.)$", re.IGNORECASE)
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_VERSION_LABEL_RE = re.compile(r"^(?:document\s+)?(?:version|版本)\s*[:：]?\s*", re.IGNORECASE)
_AUTHOR_LABEL_RE = re.compile(r"^(?:prepared\s+by|作者)\s*[:：]?\s*", re.IGNORECASE)
_SUBTITLE_RE = re.compile(r"^(?:##\s*|\*\*)For\s+(.*?)(?:\*\*)?$")

_TOC_MARKER_RE = re.compile(
    r"^(?:#{1,3}\s*)?(?:\*\*)?\s*(?:table of contents|目錄|目录)\s*(?:\*\*)?$",
    re.IGNORECASE,
)
_REVISION_MARKER_RE = re.compile(
    r"^(?:#{1,3}\s*)?(?:\*\*)?\s*(?:revision history|修訂歷史|修订历史)\s*(?:\*\*)?$",
    re.IGNORECASE,
)


class _Section(str, Enum):
    COVER = "cover"
    TOC = "toc"
    REVISION = "revision"
    MAIN = "main"


def _clean(text: str) -> str:
    return text.replace("**", "").strip()


def _is_toc_marker(stripped: str) -> bool:
    """A heading or standalone line naming the table of contents."""
    return bool(_TOC_MARKER_RE.match(stripped))


def _is_revision_marker(stripped: str) -> bool:
    return bool(_REVISION_MARKER_RE.match(stripped))


def _has_toc(lines: list[str]) -> bool:
    # Only front matter may carry the marker: stop at the first section heading.
    for line in lines:
        stripped = line.strip()
        if _is_toc_marker(stripped):
            return True
        if stripped.startswith("## ") and not _SUBTITLE_RE.match(stripped):
            return False
    return False


def _read_cover_line(stripped: str, cover: dict[str, str]) -> None:
    lowered = stripped.lower()
    if stripped.startswith("# "):
        cover["title"] = stripped[2:].strip()
        return
    subtitle = _SUBTITLE_RE.match(stripped)
    if subtitle:
        cover["subtitle"] = _clean(subtitle.group(1))
        return
    cleaned = _clean(stripped)
    if "version" in lowered or "版本" in stripped:
        cover["version"] = _VERSION_LABEL_RE.sub("", cleaned).strip()
    elif "prepared by" in lowered or "作者" in stripped:
        cover["author"] = _AUTHOR_LABEL_RE.sub("", cleaned).strip()
    elif _ORGANIZATION_RE.match(cleaned):
        cover["organization"] = cleaned
    elif _DATE_RE.match(cleaned):
        cover["date"] = cleaned


def split_document(text: str) -> tuple[dict[str, str], list[str], list[str], list[str]]:
    """Return cover fields, TOC lines, revision rows and body lines.

    The front matter runs until a "Table of Contents" heading or standalone
    marker line. The TOC section ends at the next ``##`` heading. Documents
    without a marker in their front matter treat every line before the
    first ``##`` heading as cover text and the rest as body.
    """
    lines = text.splitlines()
    if not _has_toc(lines):
        return _split_without_toc(lines)

    cover: dict[str, str] = {}
    toc_lines: list[str] = []
    revision_rows: list[str] = []
    body: list[str] = []
    section = _Section.COVER
    index = 0
    while index < len(lines):
        line = lines[index]
        stripped = line.strip()

        if section is _Section.COVER:
            if _is_toc_marker(stripped):
                section = _Section.TOC
            else:
                _read_cover_line(stripped, cover)
            index += 1
            continue

        if section is _Section.TOC:
            if _is_revision_marker(stripped):
                section = _Section.REVISION
                index += 1
                continue
            if stripped == "---":
                index += 1
                continue
            if stripped.startswith("## "):
                section = _Section.MAIN
                continue
            toc_lines.append(line)
            index += 1
            continue

        if section is _Section.REVISION:
            if stripped == "---":
                index += 1
                continue
            if stripped.startswith("## ") and not _is_revision_marker(stripped):
                section = _Section.MAIN
                continue
            if is_table_line(stripped):
                revision_rows.append(stripped)
            index += 1
            continue

        body.append(line)
        index += 1

    return cover, toc_lines, revision_rows, body


def _split_without_toc(
    lines: list[str],
) -> tuple[dict[str, str], list[str], list[str], list[str]]:
    cover: dict[str, str] = {}
    for index, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("## ") and not _SUBTITLE_RE.match(stripped):
            return cover, [], [], lines[index:]
        _read_cover_line(stripped, cover)

    # No section headings at all: only the title line is front matter.
    cover = {}
    body: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not cover and stripped.startswith("# "):
            cover["title"] = stripped[2:].strip()
            continue
        body.append(line)
    return cover, [], [], body


def parse_document(text: str) -> DocumentStructure:
    """Parse a full source document into a :class:`DocumentStructure`."""
    cover, toc_lines, revision_rows, body = split_document(text)
    revision = None
    if revision_rows:
        buffer = TableBuffer()
        for row in revision_rows:
            buffer.add(row)
        revision = buffer.build()
    return DocumentStructure(
        cover=CoverInfo(**cover),
        toc_lines=toc_lines,
        revision_history=revision,
        blocks=parse_markdown("\n".join(body)),
    )


__all__ = ["parse_document", "split_document"]
