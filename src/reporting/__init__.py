"""Reporting module exports."""

from __future__ import annotations

from pathlib import Path

from schemas.internal.document import DocumentStructure


def render_document(
    structure: DocumentStructure,
    title: str,
    *,
    options=None,
    base_dir: Path | None = None,
) -> bytes:
    from reporting.docx import render_document as _render_document

    return _render_document(structure, title, options=options, base_dir=base_dir)


__all__ = ["render_document"]
