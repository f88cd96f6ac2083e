"""Docx renderer for parsed regulatory documents."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING

from docx import Document
from docx.enum.section import WD_SECTION
from docx.enum.table import WD_CELL_VERTICAL_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Emu, Pt, Twips

from diagrams.imaging import fit_within, pixels_to_emu, read_image_size
from parsing.inline import parse_inline, strip_inline_markup
from reporting.layout import compute_column_widths
from reporting.schemas import RenderOptions
from reporting.styles import (
    BODY_SIZE,
    CODE_FILL,
    CODE_SIZE,
    COVER_DETAIL_SIZE,
    COVER_SUBTITLE_SIZE,
    COVER_TITLE_SIZE,
    GRAY,
    HEADING_COLOR,
    HEADING_SIZES,
    REQUIREMENT_HEADER_FILL,
    REQUIREMENT_LABEL_FILL,
    SMALL_SIZE,
    TABLE_HEADER_FILL,
    TABLE_SIZE,
    WHITE,
    add_field,
    add_page_number_footer,
    add_text_run,
    add_title_header,
    enable_update_fields,
    set_style_fonts,
    set_table_borders,
    shade_cell,
    shade_paragraph,
)
from schemas.internal.blocks import (
    Block,
    CodeBlock,
    Heading,
    ImageBlock,
    PageBreak,
    Paragraph,
    RequirementRecord,
    Table,
)
from schemas.internal.document import CoverInfo, DocumentStructure

if TYPE_CHECKING:
    from docx.document import Document as DocxDocument

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Document Title"
TOC_TITLE = "Table of Contents"
TOC_INSTRUCTION = 'TOC \\o "1-4" \\h \\z \\u'
TOC_NOTE = (
    'Note: Press F9 in Word or right-click and select "Update Field" '
    "to display TOC content and page numbers"
)
REVISION_TITLE = "Revision History"
BULLET = "• "

FIELD_ORDER_HEAD = ("description", "statement", "rationale", "priority", "safety_class")
FIELD_ORDER_TAIL = ("verification_method",)
DEFAULT_FIELD_LABELS = {
    "description": "Description",
    "statement": "Statement",
    "rationale": "Rationale",
    "priority": "Priority",
    "safety_class": "Safety Class",
    "verification_method": "Verification Method",
    "acceptance_criteria": "Acceptance Criteria",
}
_LIST_PREFIXES = ("- ", "* ", "+ ")


def requirement_rows(record: RequirementRecord) -> list[tuple[str, str]]:
    """Label/value rows of a requirement table, in display order."""
    known = set(FIELD_ORDER_HEAD) | set(FIELD_ORDER_TAIL)
    keys = [key for key in FIELD_ORDER_HEAD if key in record.fields]
    keys += [key for key in record.fields if key not in known]
    keys += [key for key in FIELD_ORDER_TAIL if key in record.fields]
    return [
        (record.labels.get(key) or DEFAULT_FIELD_LABELS.get(key, key), record.fields[key])
        for key in keys
    ]


class DocxRenderer:
    """Build a four-section Word document: cover, TOC, revision history, body."""

    def __init__(
        self,
        options: RenderOptions | None = None,
        *,
        base_dir: str | Path | None = None,
    ) -> None:
        self.options = options or RenderOptions()
        self.fonts = self.options.fonts
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def render(self, structure: DocumentStructure, title: str) -> bytes:
        doc = Document()
        self._setup_document(doc)

        self._add_cover(doc, structure.cover)

        toc_section = doc.add_section(WD_SECTION.NEW_PAGE)
        toc_section.header.is_linked_to_previous = False
        toc_section.footer.is_linked_to_previous = False
        add_title_header(toc_section.header, title, self.fonts)
        add_page_number_footer(toc_section.footer, self.fonts)
        self._add_toc(doc)

        doc.add_section(WD_SECTION.NEW_PAGE)
        self._add_revision_history(doc, structure.revision_history)

        doc.add_section(WD_SECTION.NEW_PAGE)
        self._add_body(doc, structure.blocks)

        if self.options.update_fields_on_open:
            enable_update_fields(doc)

        buffer = BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    # -- document setup -----------------------------------------------------

    def _setup_document(self, doc: "DocxDocument") -> None:
        set_style_fonts(doc.styles["Normal"], self.fonts, size=BODY_SIZE)
        for level, size in HEADING_SIZES.items():
            style = doc.styles[f"Heading {level}"]
            set_style_fonts(style, self.fonts, size=size)
            style.font.bold = True
            style.font.color.rgb = HEADING_COLOR
            style.paragraph_format.keep_with_next = True

        section = doc.sections[0]
        margin = Twips(self.options.page_margin)
        section.top_margin = margin
        section.bottom_margin = margin
        section.left_margin = margin
        section.right_margin = margin

    # -- front matter -------------------------------------------------------

    def _add_cover(self, doc: "DocxDocument", cover: CoverInfo) -> None:
        for _ in range(6):
            doc.add_paragraph()

        self._centered(doc, cover.title or DEFAULT_TITLE, COVER_TITLE_SIZE, bold=True)
        if cover.subtitle:
            self._centered(doc, f"For {cover.subtitle}", COVER_SUBTITLE_SIZE)

        for _ in range(4):
            doc.add_paragraph()

        details = [
            f"Version {cover.version}" if cover.version else "",
            f"Prepared by {cover.author}" if cover.author else "",
            cover.organization,
            cover.date,
        ]
        for text in details:
            if text:
                self._centered(doc, text, COVER_DETAIL_SIZE)

    def _centered(self, doc: "DocxDocument", text: str, size: float, *, bold: bool = False) -> None:
        paragraph = doc.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        paragraph.paragraph_format.space_after = Pt(12)
        add_text_run(paragraph, text, self.fonts, size=size, bold=bold or None)

    def _add_toc(self, doc: "DocxDocument") -> None:
        title = doc.add_paragraph()
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        add_text_run(
            title, TOC_TITLE, self.fonts, size=HEADING_SIZES[1], bold=True, color=HEADING_COLOR
        )

        field_paragraph = doc.add_paragraph()
        add_field(field_paragraph, TOC_INSTRUCTION, placeholder="")

        note = doc.add_paragraph()
        add_text_run(note, TOC_NOTE, self.fonts, size=SMALL_SIZE, italic=True, color=GRAY)

    def _add_revision_history(self, doc: "DocxDocument", table: Table | None) -> None:
        heading = doc.add_paragraph(style="Heading 1")
        add_text_run(heading, REVISION_TITLE, self.fonts, size=HEADING_SIZES[1])
        if table is not None and table.headers:
            self._add_data_table(doc, table)

    # -- body ---------------------------------------------------------------

    def _add_body(self, doc: "DocxDocument", blocks: list[Block]) -> None:
        at_page_top = True
        for block in blocks:
            try:
                self._add_block(doc, block, at_page_top=at_page_top)
            except Exception as exc:
                logger.warning("Rendering %s block failed, using literal text: %s", block.kind, exc)
                self._add_literal(doc, block)
            at_page_top = isinstance(block, PageBreak)

    def _add_block(self, doc: "DocxDocument", block: Block, *, at_page_top: bool) -> None:
        if isinstance(block, Heading):
            self._add_heading(doc, block, suppress_break=at_page_top)
        elif isinstance(block, Paragraph):
            self._add_paragraph(doc, block)
        elif isinstance(block, Table):
            self._add_data_table(doc, block)
        elif isinstance(block, RequirementRecord):
            self._add_requirement(doc, block)
        elif isinstance(block, CodeBlock):
            self._add_code(doc, block.text)
        elif isinstance(block, ImageBlock):
            self._add_image(doc, block)
        elif isinstance(block, PageBreak):
            doc.add_page_break()

    def _add_heading(self, doc: "DocxDocument", block: Heading, *, suppress_break: bool) -> None:
        paragraph = doc.add_paragraph(style=f"Heading {block.level}")
        add_text_run(
            paragraph,
            strip_inline_markup(block.text),
            self.fonts,
            size=HEADING_SIZES[block.level],
            bold=True,
            color=HEADING_COLOR,
        )
        fmt = paragraph.paragraph_format
        fmt.keep_with_next = True
        fmt.page_break_before = block.page_break_before and not suppress_break

    def _add_paragraph(self, doc: "DocxDocument", block: Paragraph) -> None:
        runs = list(block.runs)
        style = None
        if runs and not runs[0].bold and not runs[0].monospace:
            lead = runs[0].text
            prefix = next((p for p in _LIST_PREFIXES if lead.startswith(p)), None)
            if prefix is not None:
                style = "List Bullet"
                runs[0] = runs[0].model_copy(update={"text": lead[len(prefix):]})

        paragraph = doc.add_paragraph(style=style)
        for run in runs:
            if not run.text:
                continue
            add_text_run(
                paragraph,
                run.text,
                self.fonts,
                size=BODY_SIZE,
                bold=True if run.bold else None,
                monospace=run.monospace,
            )
        visible = [run for run in runs if run.text.strip()]
        if visible and all(run.bold for run in visible):
            paragraph.paragraph_format.keep_with_next = True

    def _add_code(self, doc: "DocxDocument", text: str) -> None:
        for line in text.split("\n"):
            paragraph = doc.add_paragraph()
            shade_paragraph(paragraph, CODE_FILL)
            fmt = paragraph.paragraph_format
            fmt.space_before = Pt(0)
            fmt.space_after = Pt(0)
            add_text_run(paragraph, line, self.fonts, size=CODE_SIZE, monospace=True)
        doc.add_paragraph()

    def _add_data_table(self, doc: "DocxDocument", block: Table) -> None:
        column_count = len(block.headers)
        widths = compute_column_widths(
            block.headers, block.rows, self.options.page_content_width
        )
        table = doc.add_table(rows=1, cols=column_count)
        table.style = "Table Grid"
        table.autofit = False
        set_table_borders(table)

        for index, header in enumerate(block.headers):
            cell = table.rows[0].cells[index]
            shade_cell(cell, TABLE_HEADER_FILL)
            paragraph = cell.paragraphs[0]
            paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
            add_text_run(
                paragraph, strip_inline_markup(header), self.fonts, size=TABLE_SIZE, bold=True
            )

        for row in block.rows:
            cells = table.add_row().cells
            for index in range(column_count):
                value = row[index] if index < len(row) else ""
                self._fill_inline(cells[index].paragraphs[0], value, TABLE_SIZE)

        for row in table.rows:
            for index, cell in enumerate(row.cells):
                cell.width = Twips(widths[index])
                cell.vertical_alignment = WD_CELL_VERTICAL_ALIGNMENT.CENTER
        doc.add_paragraph()

    def _add_requirement(self, doc: "DocxDocument", record: RequirementRecord) -> None:
        table = doc.add_table(rows=1, cols=2)
        table.style = "Table Grid"
        table.autofit = False
        set_table_borders(table)

        id_cell, name_cell = table.rows[0].cells
        for cell, text in ((id_cell, record.id), (name_cell, record.name)):
            shade_cell(cell, REQUIREMENT_HEADER_FILL)
            add_text_run(
                cell.paragraphs[0], text, self.fonts, size=TABLE_SIZE, bold=True, color=WHITE
            )

        for label, value in requirement_rows(record):
            label_cell, value_cell = table.add_row().cells
            self._fill_label(label_cell, label)
            self._fill_inline(value_cell.paragraphs[0], value, TABLE_SIZE)

        if record.acceptance_criteria:
            label_cell, value_cell = table.add_row().cells
            self._fill_label(
                label_cell,
                record.labels.get("acceptance_criteria")
                or DEFAULT_FIELD_LABELS["acceptance_criteria"],
            )
            for index, criterion in enumerate(record.acceptance_criteria):
                paragraph = value_cell.paragraphs[0] if index == 0 else value_cell.add_paragraph()
                self._fill_inline(paragraph, f"{BULLET}{criterion}", TABLE_SIZE)

        label_width = Twips(self.options.requirement_label_width)
        value_width = Twips(self.options.requirement_value_width)
        for row in table.rows:
            row.cells[0].width = label_width
            row.cells[1].width = value_width
        doc.add_paragraph()

    def _fill_label(self, cell, label: str) -> None:
        shade_cell(cell, REQUIREMENT_LABEL_FILL)
        add_text_run(cell.paragraphs[0], label, self.fonts, size=TABLE_SIZE, bold=True)

    def _fill_inline(self, paragraph, text: str, size: float) -> None:
        for run in parse_inline(text):
            if run.text:
                add_text_run(
                    paragraph,
                    run.text,
                    self.fonts,
                    size=size,
                    bold=True if run.bold else None,
                    monospace=run.monospace,
                )

    def _add_image(self, doc: "DocxDocument", block: ImageBlock) -> None:
        path = Path(block.path)
        if block.image_kind == "figure" and not path.is_absolute():
            path = self.base_dir / path
        size = read_image_size(path) if path.is_file() else None
        if size is None:
            self._add_missing_image(doc, block)
            return

        if block.image_kind == "diagram":
            box = (self.options.diagram_max_width, self.options.diagram_max_height)
        else:
            box = (self.options.figure_max_width, self.options.figure_max_height)
        width, height = fit_within(size[0], size[1], *box)

        paragraph = doc.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        paragraph.add_run().add_picture(
            str(path), width=Emu(pixels_to_emu(width)), height=Emu(pixels_to_emu(height))
        )

    def _add_missing_image(self, doc: "DocxDocument", block: ImageBlock) -> None:
        if block.image_kind == "diagram" and block.source:
            logger.warning("Diagram image unreadable, using source: %s", block.path)
            self._add_code(doc, block.source)
            return
        logger.warning("Image not found: %s", block.path)
        paragraph = doc.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        add_text_run(
            paragraph, f"[Image not found: {block.path}]", self.fonts, italic=True, color=GRAY
        )

    def _add_literal(self, doc: "DocxDocument", block: Block) -> None:
        if isinstance(block, CodeBlock):
            text = block.text
        elif isinstance(block, ImageBlock):
            text = block.source or f"[Image not found: {block.path}]"
        elif isinstance(block, Heading):
            text = block.text
        elif isinstance(block, Paragraph):
            text = block.text
        elif isinstance(block, Table):
            lines = [" | ".join(block.headers)] + [" | ".join(row) for row in block.rows]
            text = "\n".join(lines)
        elif isinstance(block, RequirementRecord):
            lines = [f"{block.id} {block.name}".strip()]
            lines += [f"{label}: {value}" for label, value in requirement_rows(block)]
            lines += [f"- {item}" for item in block.acceptance_criteria]
            text = "\n".join(lines)
        else:
            return
        self._add_code(doc, text)


def render_document(
    structure: DocumentStructure,
    title: str,
    *,
    options: RenderOptions | None = None,
    base_dir: str | Path | None = None,
) -> bytes:
    """Render a parsed document to ``.docx`` bytes."""
    return DocxRenderer(options, base_dir=base_dir).render(structure, title)


__all__ = ["DocxRenderer", "render_document", "requirement_rows"]
