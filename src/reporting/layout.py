"""Table geometry and text measurement."""

from __future__ import annotations

import re
from typing import Sequence

from parsing.requirements import REQUIREMENT_ID_RE

CJK_RE = re.compile(r"[\u4e00-\u9fff]")
_ID_HEADER_RE = re.compile(r"(?<![a-z])id(?![a-z])", re.IGNORECASE)


def contains_cjk(text: str) -> bool:
    return bool(CJK_RE.search(text))


def display_length(text: str) -> int:
    """Approximate rendered width in Latin characters; CJK glyphs count double."""
    cleaned = text.replace("**", "")
    return sum(2 if CJK_RE.match(char) else 1 for char in cleaned)


def minimum_column_width(column_count: int) -> int:
    if column_count <= 2:
        return 2000
    if column_count <= 4:
        return 1500
    return 1000


ID_COLUMN_MIN_WIDTH = 1800


def is_id_column(header: str, cells: Sequence[str]) -> bool:
    if _ID_HEADER_RE.search(header):
        return True
    return any(REQUIREMENT_ID_RE.match(cell.replace("**", "").strip()) for cell in cells)


def compute_column_widths(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    total_width: int,
) -> list[int]:
    """Split ``total_width`` across columns in proportion to content length.

    Every column gets at least its minimum width (scaled down when the
    minimums alone would overflow). The remaining width is shared by the
    columns whose proportional share exceeds their minimum, and the last
    column takes whatever is left, so the result always sums to
    ``total_width``.
    """
    count = len(headers)
    if count == 0:
        return []
    if count == 1:
        return [total_width]

    columns: list[list[str]] = [[headers[i]] for i in range(count)]
    for row in rows:
        for i in range(count):
            columns[i].append(row[i] if i < len(row) else "")

    lengths = [max(1, max(display_length(cell) for cell in column)) for column in columns]
    base_min = minimum_column_width(count)
    mins = [
        max(base_min, ID_COLUMN_MIN_WIDTH) if is_id_column(headers[i], columns[i][1:]) else base_min
        for i in range(count)
    ]
    if sum(mins) > total_width:
        scale = total_width / sum(mins)
        mins = [max(1, int(value * scale)) for value in mins]

    length_total = sum(lengths)
    desired = [
        max(0.0, total_width * length / length_total - minimum)
        for length, minimum in zip(lengths, mins)
    ]
    free = total_width - sum(mins)
    desired_total = sum(desired)

    widths = list(mins)
    if free > 0 and desired_total > 0:
        for i in range(count):
            widths[i] += int(desired[i] * free / desired_total)
    widths[-1] = total_width - sum(widths[:-1])
    return widths


__all__ = [
    "CJK_RE",
    "compute_column_widths",
    "contains_cjk",
    "display_length",
    "is_id_column",
    "minimum_column_width",
]
