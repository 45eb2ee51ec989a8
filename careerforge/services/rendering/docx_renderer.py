"""DOCX export: layout blocks -> python-docx paragraphs and runs."""
from io import BytesIO
from typing import Dict, Optional

import docx
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from careerforge.schemas.resume import ResumeContent
from careerforge.services.rendering.layout import Block, DocumentLayout, build_layout

GREY = "666666"
LINK_BLUE = "0066CC"

# kind -> (font size pt, colour, italic, centered)
BLOCK_STYLES: Dict[str, tuple] = {
    "name": (24, None, False, True),
    "contact": (10, None, False, True),
    "links": (9, LINK_BLUE, False, True),
    "title": (12, None, False, False),
    "subtitle": (10, GREY, True, False),
    "meta": (10, GREY, False, False),
    "body": (11, None, False, False),
    "bullet": (11, None, False, False),
    "link": (10, LINK_BLUE, False, False),
}


def _add_bottom_border(paragraph, color: str) -> None:
    p_pr = paragraph._p.get_or_add_pPr()
    borders = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), "6")
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), color)
    borders.append(bottom)
    p_pr.append(borders)


def _color(value: Optional[str]) -> Optional[RGBColor]:
    return RGBColor.from_string(value) if value else None


def _emit_block(document, block: Block):
    size, color, italic, centered = BLOCK_STYLES[block.kind]
    paragraph = document.add_paragraph()
    paragraph.paragraph_format.space_after = Pt(0)
    if centered:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    if block.kind == "bullet":
        paragraph.paragraph_format.left_indent = Pt(18)

    for run_spec in block.runs:
        run = paragraph.add_run(run_spec.text)
        run.bold = run_spec.bold
        run.italic = italic
        run.font.size = Pt(size)
        if color:
            run.font.color.rgb = _color(color)
    return paragraph


def _emit_heading(document, heading: str, accent: str) -> None:
    paragraph = document.add_paragraph()
    paragraph.paragraph_format.space_before = Pt(15)
    paragraph.paragraph_format.space_after = Pt(7)
    run = paragraph.add_run(heading)
    run.bold = True
    run.font.size = Pt(13)
    run.font.color.rgb = _color(accent)
    _add_bottom_border(paragraph, accent)


def build_document(layout: DocumentLayout):
    document = docx.Document()

    last = None
    for block in layout.header:
        last = _emit_block(document, block)
    if last is not None:
        last.paragraph_format.space_after = Pt(15)

    for section in layout.sections:
        _emit_heading(document, section.heading, layout.accent)
        for entry in section.entries:
            for block in entry:
                last = _emit_block(document, block)
            last.paragraph_format.space_after = Pt(8)
    return document


def render_docx(resume: ResumeContent) -> bytes:
    """Render a resume to DOCX bytes. Library errors propagate to the caller."""
    document = build_document(build_layout(resume))
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()
