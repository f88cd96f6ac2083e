"""Low-level python-docx styling helpers (fonts, shading, field codes)."""

from __future__ import annotations

from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from reporting.layout import contains_cjk
from reporting.schemas import FontOptions

# Sizes in points.
HEADING_SIZES = {1: 18, 2: 16, 3: 14, 4: 13, 5: 12}
BODY_SIZE = 11
TABLE_SIZE = 11
CODE_SIZE = 10
SMALL_SIZE = 9
COVER_TITLE_SIZE = 28
COVER_SUBTITLE_SIZE = 18
COVER_DETAIL_SIZE = 14

HEADING_COLOR = RGBColor(0x1F, 0x38, 0x64)
WHITE = RGBColor(0xFF, 0xFF, 0xFF)
GRAY = RGBColor(0x66, 0x66, 0x66)

TABLE_HEADER_FILL = "D5E8F0"
REQUIREMENT_HEADER_FILL = "4472C4"
REQUIREMENT_LABEL_FILL = "F2F2F2"
CODE_FILL = "F5F5F5"
BORDER_COLOR = "CCCCCC"

# OOXML child order: new elements go before these siblings.
_P_PR_AFTER_SHD = (
    "w:tabs",
    "w:suppressAutoHyphens",
    "w:kinsoku",
    "w:wordWrap",
    "w:overflowPunct",
    "w:topLinePunct",
    "w:autoSpaceDE",
    "w:autoSpaceDN",
    "w:bidi",
    "w:adjustRightInd",
    "w:snapToGrid",
    "w:spacing",
    "w:ind",
    "w:contextualSpacing",
    "w:mirrorIndents",
    "w:suppressOverlap",
    "w:jc",
    "w:textDirection",
    "w:textAlignment",
    "w:textboxTightWrap",
    "w:outlineLvl",
    "w:divId",
    "w:cnfStyle",
    "w:rPr",
    "w:sectPr",
    "w:pPrChange",
)
_TC_PR_AFTER_SHD = (
    "w:noWrap",
    "w:tcMar",
    "w:textDirection",
    "w:tcFitText",
    "w:vAlign",
    "w:hideMark",
    "w:headers",
    "w:cellIns",
    "w:cellDel",
    "w:cellMerge",
    "w:tcPrChange",
)
_TBL_PR_AFTER_BORDERS = (
    "w:shd",
    "w:tblLayout",
    "w:tblCellMar",
    "w:tblLook",
    "w:tblCaption",
    "w:tblDescription",
    "w:tblPrChange",
)
_SETTINGS_AFTER_UPDATE_FIELDS = (
    "w:hdrShapeDefaults",
    "w:footnotePr",
    "w:endnotePr",
    "w:compat",
    "w:docVars",
    "w:rsids",
    "w:attachedSchema",
    "w:themeFontLang",
    "w:clrSchemeMapping",
    "w:doNotIncludeSubdocsInStats",
    "w:doNotAutoCompressPictures",
    "w:forceUpgrade",
    "w:captions",
    "w:readModeInkLockDown",
    "w:smartTagType",
    "w:shapeDefaults",
    "w:doNotEmbedSmartTags",
    "w:decimalSymbol",
    "w:listSeparator",
)


def font_for(text: str, fonts: FontOptions) -> str:
    return fonts.cjk if contains_cjk(text) else fonts.latin


def apply_font(run, fonts: FontOptions, *, name: str | None = None) -> None:
    """Set the run font by script and always pin the East Asian slot."""
    run.font.name = name or font_for(run.text, fonts)
    rfonts = run._element.get_or_add_rPr().get_or_add_rFonts()
    rfonts.set(qn("w:eastAsia"), fonts.cjk)


def add_text_run(
    paragraph,
    text: str,
    fonts: FontOptions,
    *,
    size: float | None = None,
    bold: bool | None = None,
    italic: bool | None = None,
    color: RGBColor | None = None,
    monospace: bool = False,
):
    run = paragraph.add_run(text)
    apply_font(run, fonts, name=fonts.code if monospace else None)
    if size is not None:
        run.font.size = Pt(size)
    if bold is not None:
        run.bold = bold
    if italic is not None:
        run.italic = italic
    if color is not None:
        run.font.color.rgb = color
    return run


def set_style_fonts(style, fonts: FontOptions, *, size: float | None = None) -> None:
    style.font.name = fonts.latin
    if size is not None:
        style.font.size = Pt(size)
    rfonts = style.element.get_or_add_rPr().get_or_add_rFonts()
    rfonts.set(qn("w:ascii"), fonts.latin)
    rfonts.set(qn("w:hAnsi"), fonts.latin)
    rfonts.set(qn("w:eastAsia"), fonts.cjk)


def shade_cell(cell, fill: str) -> None:
    tc_pr = cell._element.get_or_add_tcPr()
    for existing in tc_pr.findall(qn("w:shd")):
        tc_pr.remove(existing)
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    tc_pr.insert_element_before(shd, *_TC_PR_AFTER_SHD)


def shade_paragraph(paragraph, fill: str) -> None:
    p_pr = paragraph._p.get_or_add_pPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    p_pr.insert_element_before(shd, *_P_PR_AFTER_SHD)


def set_table_borders(table, color: str = BORDER_COLOR, size: int = 4) -> None:
    tbl_pr = table._tbl.tblPr
    borders = OxmlElement("w:tblBorders")
    for edge in ("top", "left", "bottom", "right", "insideH", "insideV"):
        element = OxmlElement(f"w:{edge}")
        element.set(qn("w:val"), "single")
        element.set(qn("w:sz"), str(size))
        element.set(qn("w:space"), "0")
        element.set(qn("w:color"), color)
        borders.append(element)
    for existing in tbl_pr.findall(qn("w:tblBorders")):
        tbl_pr.remove(existing)
    tbl_pr.insert_element_before(borders, *_TBL_PR_AFTER_BORDERS)


def add_field(paragraph, instruction: str, *, placeholder: str | None = None):
    """Append a complex field (``begin``/``instrText``/``end``) as one run."""
    run = paragraph.add_run()
    begin = OxmlElement("w:fldChar")
    begin.set(qn("w:fldCharType"), "begin")
    instr = OxmlElement("w:instrText")
    instr.set(qn("xml:space"), "preserve")
    instr.text = instruction
    run._r.append(begin)
    run._r.append(instr)
    if placeholder is not None:
        separate = OxmlElement("w:fldChar")
        separate.set(qn("w:fldCharType"), "separate")
        text = OxmlElement("w:t")
        text.text = placeholder
        run._r.append(separate)
        run._r.append(text)
    end = OxmlElement("w:fldChar")
    end.set(qn("w:fldCharType"), "end")
    run._r.append(end)
    return run


def add_page_number_footer(footer, fonts: FontOptions) -> None:
    """Fill a footer with a centered ``Page N of M`` line."""
    paragraph = footer.paragraphs[0] if footer.paragraphs else footer.add_paragraph()
    paragraph.clear()
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    for piece in ("Page ", "PAGE", " of ", "NUMPAGES"):
        if piece in ("PAGE", "NUMPAGES"):
            run = add_field(paragraph, piece, placeholder="1")
        else:
            run = paragraph.add_run(piece)
        apply_font(run, fonts, name=fonts.latin)
        run.font.size = Pt(SMALL_SIZE)


def add_title_header(header, title: str, fonts: FontOptions) -> None:
    paragraph = header.paragraphs[0] if header.paragraphs else header.add_paragraph()
    paragraph.clear()
    paragraph.alignment = WD_ALIGN_PARAGRAPH.RIGHT
    add_text_run(paragraph, title, fonts, size=SMALL_SIZE, italic=True, color=GRAY)


def enable_update_fields(document) -> None:
    """Ask Word to refresh fields (TOC, page counts) when the file opens."""
    settings = document.settings.element
    element = settings.find(qn("w:updateFields"))
    if element is None:
        element = OxmlElement("w:updateFields")
        settings.insert_element_before(element, *_SETTINGS_AFTER_UPDATE_FIELDS)
    element.set(qn("w:val"), "true")


__all__ = [
    "BODY_SIZE",
    "CODE_FILL",
    "CODE_SIZE",
    "HEADING_SIZES",
    "REQUIREMENT_HEADER_FILL",
    "REQUIREMENT_LABEL_FILL",
    "SMALL_SIZE",
    "TABLE_HEADER_FILL",
    "add_field",
    "add_page_number_footer",
    "add_text_run",
    "add_title_header",
    "apply_font",
    "enable_update_fields",
    "font_for",
    "set_style_fonts",
    "set_table_borders",
    "shade_cell",
    "shade_paragraph",
]
