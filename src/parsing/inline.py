"""Inline bold/code span detection."""

from __future__ import annotations

import re

from schemas.internal.blocks import InlineRun

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_CODE_RE = re.compile(r"`([^`]+)`")


def parse_inline(text: str) -> list[InlineRun]:
    """Split a line into styled runs.

    Bold and code spans are collected separately, ordered by start offset and
    accepted first-match-by-position; a span overlapping an accepted one is
    dropped and its characters stay in the surrounding plain run.
    """
    spans: list[tuple[int, int, str, bool, bool]] = []
    for match in _BOLD_RE.finditer(text):
        spans.append((match.start(), match.end(), match.group(1), True, False))
    for match in _CODE_RE.finditer(text):
        spans.append((match.start(), match.end(), match.group(1), False, True))

    if not spans:
        return [InlineRun(text=text)]

    spans.sort(key=lambda span: (span[0], span[1]))
    runs: list[InlineRun] = []
    cursor = 0
    for start, end, inner, bold, monospace in spans:
        if start < cursor:
            continue
        if start > cursor:
            runs.append(InlineRun(text=text[cursor:start]))
        runs.append(InlineRun(text=inner, bold=bold, monospace=monospace))
        cursor = end
    if cursor < len(text):
        runs.append(InlineRun(text=text[cursor:]))
    return runs


def strip_inline_markup(text: str) -> str:
    """Return text with bold markers and backticks removed."""
    return "".join(run.text for run in parse_inline(text))


__all__ = ["parse_inline", "strip_inline_markup"]
