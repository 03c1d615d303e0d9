"""DOCX exporter: (record, template) to an in-memory .docx."""

from __future__ import annotations

import logging
from io import BytesIO

from docx import Document
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Mm, Pt, RGBColor, Twips

from resume_studio.errors import ExportError
from resume_studio.layout.contract import (
    BODY_PT,
    CONTACT_PT,
    ENTRY_SEPARATOR,
    HEADER_RULE_COLOR,
    HEADING_PT,
    MARGIN_MM,
    PAGE_HEIGHT_MM,
    PAGE_WIDTH_MM,
    PERIOD_PT,
    SHADED_HEADING_FILL,
    metrics_for,
)
from resume_studio.layout.outline import (
    BulletBlock,
    ContactBlock,
    EntryHeading,
    NameBlock,
    ParagraphBlock,
    SectionHeading,
    SkillsBlock,
    build_outline,
)
from resume_studio.models.resume import ResumeRecord
from resume_studio.models.template import TemplateConfiguration
from resume_studio.templates.loader import DEFAULT_TEMPLATE_ID, get_template

logger = logging.getLogger(__name__)

BULLET_STYLE = "Resume Bullet"

# Elements that must follow w:pBdr / w:shd inside w:pPr
_PBDR_SUCCESSORS = (
    "w:shd", "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap",
    "w:overflowPunct", "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN",
    "w:bidi", "w:adjustRightInd", "w:snapToGrid", "w:spacing", "w:ind",
    "w:contextualSpacing", "w:mirrorIndents", "w:suppressOverlap", "w:jc",
    "w:textDirection", "w:textAlignment", "w:textboxTightWrap",
    "w:outlineLvl", "w:divId", "w:cnfStyle", "w:rPr", "w:sectPr",
    "w:pPrChange",
)
_SHD_SUCCESSORS = _PBDR_SUCCESSORS[1:]


def render_docx(
    record: ResumeRecord,
    template_id: str = DEFAULT_TEMPLATE_ID,
    creator: str = "resume-studio",
) -> bytes:
    """Serialize a resume to .docx bytes.

    Raises ExportError (with the original exception chained) if anything
    fails, including an unknown template id. No partial bytes are returned.
    """
    try:
        template = get_template(template_id)
        doc = build_document(record, template, creator=creator)
        buf = BytesIO()
        doc.save(buf)
    except Exception as exc:
        logger.exception("DOCX export failed (template=%s)", template_id)
        raise ExportError("DOCX", str(exc)) from exc
    data = buf.getvalue()
    logger.debug("DOCX export finished: %d bytes", len(data))
    return data


def build_document(record: ResumeRecord, template: TemplateConfiguration, creator: str = "resume-studio"):
    """Assemble the python-docx Document without serializing it."""
    doc = Document()

    props = doc.core_properties
    props.title = record.full_name or "Resume"
    props.author = creator
    props.subject = "Resume"

    section = doc.sections[0]
    section.page_width = Mm(PAGE_WIDTH_MM)
    section.page_height = Mm(PAGE_HEIGHT_MM)
    section.top_margin = section.bottom_margin = Mm(MARGIN_MM)
    section.left_margin = section.right_margin = Mm(MARGIN_MM)

    _configure_styles(doc, template)

    for block in build_outline(record, template):
        if isinstance(block, NameBlock):
            _add_name(doc, block, template)
        elif isinstance(block, ContactBlock):
            _add_contact(doc, block, template)
        elif isinstance(block, SectionHeading):
            _add_section_heading(doc, block, template)
        elif isinstance(block, ParagraphBlock):
            _add_summary(doc, block, template)
        elif isinstance(block, SkillsBlock):
            _add_skills(doc, block, template)
        elif isinstance(block, EntryHeading):
            _add_entry_heading(doc, block, template, has_bullets=_has_bullets(record, block))
        elif isinstance(block, BulletBlock):
            _add_bullet(doc, block, template)

    return doc


def _configure_styles(doc, template: TemplateConfiguration) -> None:
    normal = doc.styles["Normal"]
    normal.font.name = template.fonts.body
    normal.font.size = Pt(BODY_PT)
    normal.font.color.rgb = RGBColor.from_string(template.colors.text)
    normal.paragraph_format.line_spacing = metrics_for("docx").line_spacing

    # Hanging-indent bullets with no spacing after, for single-page density
    bullet = doc.styles.add_style(BULLET_STYLE, WD_STYLE_TYPE.PARAGRAPH)
    bullet.base_style = doc.styles["List Bullet"]
    bullet.font.name = template.fonts.body
    bullet.font.size = Pt(BODY_PT)
    bullet.font.color.rgb = RGBColor.from_string(template.colors.text)
    fmt = bullet.paragraph_format
    fmt.left_indent = Twips(240)
    fmt.first_line_indent = Twips(-160)
    fmt.space_before = Pt(0)
    fmt.space_after = Pt(0)
    fmt.line_spacing = metrics_for("docx").line_spacing


def _alignment(template: TemplateConfiguration):
    return WD_ALIGN_PARAGRAPH.CENTER if template.is_centered else WD_ALIGN_PARAGRAPH.LEFT


def _add_name(doc, block: NameBlock, template: TemplateConfiguration) -> None:
    p = doc.add_paragraph()
    p.alignment = _alignment(template)
    p.paragraph_format.space_after = Pt(2)
    run = p.add_run(block.text)
    run.bold = True
    run.font.name = template.fonts.heading
    run.font.size = Pt(metrics_for("docx").title_pt)
    run.font.color.rgb = RGBColor.from_string(template.colors.primary)


def _add_contact(doc, block: ContactBlock, template: TemplateConfiguration) -> None:
    p = doc.add_paragraph()
    p.alignment = _alignment(template)
    p.paragraph_format.space_after = Pt(4)
    _set_bottom_border(p, HEADER_RULE_COLOR, size=2, space=4)

    for i, item in enumerate(block.items):
        if i > 0:
            _add_plain_run(p, block.separator, template.colors.secondary, CONTACT_PT)
        if item.url:
            add_hyperlink(p, item.label, item.url, template.colors.primary, CONTACT_PT)
        else:
            _add_plain_run(p, item.label, template.colors.secondary, CONTACT_PT)


def _add_plain_run(p, text: str, color: str, size_pt: float):
    run = p.add_run(text)
    run.font.size = Pt(size_pt)
    run.font.color.rgb = RGBColor.from_string(color)
    return run


def add_hyperlink(paragraph, text: str, url: str, color: str, size_pt: float):
    """Append a clickable external link run to a paragraph."""
    r_id = paragraph.part.relate_to(url, RT.HYPERLINK, is_external=True)

    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("r:id"), r_id)

    run = OxmlElement("w:r")
    rPr = OxmlElement("w:rPr")
    color_el = OxmlElement("w:color")
    color_el.set(qn("w:val"), color)
    rPr.append(color_el)
    size_el = OxmlElement("w:sz")
    size_el.set(qn("w:val"), str(int(round(size_pt * 2))))
    rPr.append(size_el)
    underline = OxmlElement("w:u")
    underline.set(qn("w:val"), "single")
    rPr.append(underline)
    run.append(rPr)

    t = OxmlElement("w:t")
    t.set(qn("xml:space"), "preserve")
    t.text = text
    run.append(t)

    hyperlink.append(run)
    paragraph._p.append(hyperlink)
    return hyperlink


def _set_bottom_border(paragraph, color: str, size: int, space: int) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    pBdr = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), str(size))
    bottom.set(qn("w:space"), str(space))
    bottom.set(qn("w:color"), color)
    pBdr.append(bottom)
    pPr.insert_element_before(pBdr, *_PBDR_SUCCESSORS)


def _set_shading(paragraph, fill: str) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    pPr.insert_element_before(shd, *_SHD_SUCCESSORS)


def _add_section_heading(doc, block: SectionHeading, template: TemplateConfiguration) -> None:
    p = doc.add_heading("", level=2)
    fmt = p.paragraph_format
    fmt.space_before = Pt(4)
    fmt.space_after = Pt(2)
    fmt.keep_with_next = True

    style = template.layout.section_header_style
    if style == "border-bottom":
        _set_bottom_border(p, template.colors.primary, size=4, space=1)
    elif style == "shaded":
        _set_shading(p, SHADED_HEADING_FILL)

    run = p.add_run(block.text)
    run.bold = True
    run.font.all_caps = True
    run.font.name = template.fonts.heading
    run.font.size = Pt(HEADING_PT)
    run.font.color.rgb = RGBColor.from_string(template.colors.primary)


def _add_summary(doc, block: ParagraphBlock, template: TemplateConfiguration) -> None:
    p = doc.add_paragraph()
    p.alignment = WD_ALIGN_PARAGRAPH.JUSTIFY
    p.paragraph_format.space_after = Pt(4)
    run = p.add_run(block.text)
    run.font.name = template.fonts.body
    run.font.size = Pt(BODY_PT)


def _add_skills(doc, block: SkillsBlock, template: TemplateConfiguration) -> None:
    # One joined run, no per-item bullet formatting
    p = doc.add_paragraph()
    p.alignment = _alignment(template)
    p.paragraph_format.space_after = Pt(4)
    run = p.add_run(block.text)
    run.font.name = template.fonts.body
    run.font.size = Pt(BODY_PT)


def _has_bullets(record: ResumeRecord, block: EntryHeading) -> bool:
    if block.kind != "experience":
        return False
    return bool(record.experience[block.index].description)


def _add_entry_heading(doc, block: EntryHeading, template: TemplateConfiguration, has_bullets: bool) -> None:
    p = doc.add_paragraph()
    fmt = p.paragraph_format
    content_width = Mm(PAGE_WIDTH_MM - 2 * MARGIN_MM)
    fmt.tab_stops.add_tab_stop(content_width, WD_TAB_ALIGNMENT.RIGHT)
    if block.kind == "experience":
        fmt.space_before = Pt(0 if block.index == 0 else 5)
        fmt.space_after = Pt(2)
    else:
        fmt.space_before = Pt(0 if block.index == 0 else 3)
        fmt.space_after = Pt(1.5)
    fmt.keep_with_next = has_bullets

    primary = p.add_run(block.primary_text)
    primary.bold = True
    primary.font.name = template.fonts.heading
    primary.font.size = Pt(BODY_PT)
    primary.font.color.rgb = RGBColor.from_string(template.colors.primary)

    if block.show_separator:
        sep = p.add_run(ENTRY_SEPARATOR)
        sep.font.size = Pt(BODY_PT)
        sep.font.color.rgb = RGBColor.from_string(template.colors.secondary)

    secondary = p.add_run(block.secondary)
    secondary.font.name = template.fonts.body
    secondary.font.size = Pt(BODY_PT)
    if block.kind == "experience":
        secondary.bold = True
    else:
        secondary.italic = True

    period = p.add_run(f"\t{block.period}")
    period.bold = True
    period.font.name = template.fonts.body
    period.font.size = Pt(PERIOD_PT)


def _add_bullet(doc, block: BulletBlock, template: TemplateConfiguration) -> None:
    # Empty bullets stay as empty list items
    p = doc.add_paragraph(style=BULLET_STYLE)
    run = p.add_run(block.text)
    run.font.name = template.fonts.body
    run.font.size = Pt(BODY_PT)
