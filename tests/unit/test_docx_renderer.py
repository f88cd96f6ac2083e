from __future__ import annotations

from io import BytesIO
from pathlib import Path

from docx import Document
from docx.oxml.ns import qn

from parsing.structure import parse_document
from reporting.docx import DocxRenderer, render_document, requirement_rows
from reporting.schemas import FontOptions, RenderOptions
from schemas.internal.blocks import CodeBlock, Heading, ImageBlock, RequirementRecord
from schemas.internal.document import DocumentStructure

SOURCE = """\
# Software Design Description
## For Smart Clinic App
Version: 1.0
## Table of Contents
- 1. Overview
## Revision History
| Version | Date |
|---|---|
| 1.0 | 2024-05-01 |
## 1. Overview

Intro with **bold** and `code`.

- first bullet

| Name | Value |
|---|---|
| alpha | 1 |

#### SRS-AUTH-001 User Login
**Priority:** P0
**Acceptance Criteria:**
- AC1: works
- AC2: also works
"""


def _open(data: bytes):
    return Document(BytesIO(data))


def _texts(document) -> list[str]:
    return [paragraph.text for paragraph in document.paragraphs]


def _render(structure: DocumentStructure, **kwargs) -> bytes:
    return render_document(structure, "SDD-Test", **kwargs)


def test_render_produces_four_sections() -> None:
    document = _open(_render(parse_document(SOURCE)))

    assert len(document.sections) == 4
    texts = _texts(document)
    assert "Software Design Description" in texts
    assert "For Smart Clinic App" in texts
    assert "Version 1.0" in texts
    assert "Table of Contents" in texts
    assert "Revision History" in texts
    assert "1. Overview" in texts


def test_cover_has_no_header_and_later_sections_do() -> None:
    document = _open(_render(parse_document(SOURCE)))

    toc_section = document.sections[1]
    assert toc_section.header.is_linked_to_previous is False
    assert toc_section.header.paragraphs[0].text == "SDD-Test"
    footer_xml = toc_section.footer._element.xml
    assert "NUMPAGES" in footer_xml
    assert "PAGE" in footer_xml
    assert document.sections[3].header.is_linked_to_previous is True


def test_toc_field_and_update_on_open() -> None:
    document = _open(_render(parse_document(SOURCE)))

    body_xml = document.element.body.xml
    assert 'TOC \\o "1-4" \\h \\z \\u' in body_xml
    update = document.settings.element.find(qn("w:updateFields"))
    assert update is not None
    assert update.get(qn("w:val")) == "true"


def test_update_fields_can_be_disabled() -> None:
    options = RenderOptions(update_fields_on_open=False)
    document = _open(_render(parse_document(SOURCE), options=options))

    assert document.settings.element.find(qn("w:updateFields")) is None


def test_requirement_table_round_trip() -> None:
    document = _open(_render(parse_document(SOURCE)))

    requirement = next(
        table for table in document.tables if table.rows[0].cells[0].text == "SRS-AUTH-001"
    )
    assert requirement.rows[0].cells[1].text == "User Login"
    rows = [(row.cells[0].text, row.cells[1].text) for row in requirement.rows[1:]]
    assert rows[0] == ("Priority", "P0")
    assert rows[1][0] == "Acceptance Criteria"
    criteria = [p.text for p in requirement.rows[2].cells[1].paragraphs]
    assert criteria == ["• AC1: works", "• AC2: also works"]


def test_requirement_columns_follow_page_width() -> None:
    options = RenderOptions(page_content_width=8000)
    document = _open(_render(parse_document(SOURCE), options=options))

    requirement = next(
        table for table in document.tables if table.rows[0].cells[0].text == "SRS-AUTH-001"
    )
    for row in requirement.rows:
        assert row.cells[0].width.twips == options.requirement_label_width
        assert row.cells[0].width.twips + row.cells[1].width.twips == 8000


def test_revision_and_data_tables() -> None:
    document = _open(_render(parse_document(SOURCE)))

    headers = [[cell.text for cell in table.rows[0].cells] for table in document.tables]
    assert ["Version", "Date"] in headers
    assert ["Name", "Value"] in headers
    data = next(t for t in document.tables if t.rows[0].cells[0].text == "Name")
    assert data.rows[1].cells[0].text == "alpha"


def test_inline_runs_and_bullets() -> None:
    document = _open(_render(parse_document(SOURCE)))

    intro = next(p for p in document.paragraphs if p.text.startswith("Intro with"))
    bold = [run.text for run in intro.runs if run.bold]
    mono = [run.text for run in intro.runs if run.font.name == "Consolas"]
    assert bold == ["bold"]
    assert mono == ["code"]

    bullet = next(p for p in document.paragraphs if p.text == "first bullet")
    assert bullet.style.name == "List Bullet"


def test_cjk_runs_use_east_asian_font() -> None:
    structure = DocumentStructure(blocks=[Heading(level=2, text="系統概述")])
    options = RenderOptions(fonts=FontOptions(cjk="Noto Sans TC"))
    document = _open(_render(structure, options=options))

    heading = next(p for p in document.paragraphs if p.text == "系統概述")
    run = heading.runs[0]
    assert run.font.name == "Noto Sans TC"
    assert run._element.rPr.rFonts.get(qn("w:eastAsia")) == "Noto Sans TC"


def test_first_body_heading_does_not_double_break() -> None:
    structure = DocumentStructure(
        blocks=[
            Heading(level=1, text="Start", page_break_before=True),
            Heading(level=1, text="Next", page_break_before=True),
        ]
    )
    document = _open(_render(structure))

    start = next(p for p in document.paragraphs if p.text == "Start")
    following = next(p for p in document.paragraphs if p.text == "Next")
    assert not start.paragraph_format.page_break_before
    assert following.paragraph_format.page_break_before


def test_unrendered_diagram_is_monospace_source() -> None:
    structure = DocumentStructure(blocks=[CodeBlock(language="mermaid", text="graph TD\nA-->B")])
    document = _open(_render(structure))

    lines = [p for p in document.paragraphs if p.text in ("graph TD", "A-->B")]
    assert len(lines) == 2
    assert all(p.runs[0].font.name == "Consolas" for p in lines)


def test_rendered_diagram_is_embedded_and_scaled(make_png) -> None:
    png = make_png("diagram.png", (1100, 400))
    structure = DocumentStructure(
        blocks=[ImageBlock(path=str(png), image_kind="diagram", source="graph TD")]
    )
    document = _open(_render(structure))

    shapes = document.inline_shapes
    assert len(shapes) == 1
    assert shapes[0].width == 550 * 9525
    assert shapes[0].height == 200 * 9525


def test_figure_path_is_relative_to_base_dir(make_png, tmp_path: Path) -> None:
    make_png("images/screen.png", (300, 600))
    structure = DocumentStructure(blocks=[ImageBlock(path="images/screen.png")])
    document = _open(_render(structure, base_dir=tmp_path))

    assert len(document.inline_shapes) == 1


def test_missing_figure_placeholder(tmp_path: Path) -> None:
    structure = DocumentStructure(blocks=[ImageBlock(path="nowhere.png")])
    document = _open(_render(structure, base_dir=tmp_path))

    assert "[Image not found: nowhere.png]" in _texts(document)


def test_missing_diagram_image_falls_back_to_source(tmp_path: Path) -> None:
    structure = DocumentStructure(
        blocks=[
            ImageBlock(path=str(tmp_path / "gone.png"), image_kind="diagram", source="graph LR")
        ]
    )
    document = _open(_render(structure))

    assert "graph LR" in _texts(document)


def test_block_failure_degrades_to_literal_text(monkeypatch) -> None:
    def explode(self, doc, record):
        raise RuntimeError("table failure")

    monkeypatch.setattr(DocxRenderer, "_add_requirement", explode)
    record = RequirementRecord(id="SRS-X-001", name="Broken", fields={"priority": "P1"})
    document = _open(_render(DocumentStructure(blocks=[record])))

    texts = _texts(document)
    assert "SRS-X-001 Broken" in texts
    assert "Priority: P1" in texts


def test_requirement_rows_order_and_labels() -> None:
    record = RequirementRecord(
        id="SRS-A-1",
        fields={
            "verification_method": "Test",
            "Owner": "Team",
            "priority": "P2",
            "description": "Desc",
        },
        labels={"description": "描述"},
    )

    assert requirement_rows(record) == [
        ("描述", "Desc"),
        ("Priority", "P2"),
        ("Owner", "Team"),
        ("Verification Method", "Test"),
    ]
