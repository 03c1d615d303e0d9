"""Interactive HTML preview of a resume.

Every field is emitted as an editable region tagged with its model path
(``data-path``). When a region loses focus the page posts
``{"type": "resume-edit", "path": [...], "value": "..."}`` to its host, which
commits it through :class:`resume_studio.editing.EditSession`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from resume_studio.layout.contract import (
    BODY_PT,
    CONTACT_PT,
    ENTRY_SEPARATOR,
    HEADING_PT,
    LINKEDIN_LABEL,
    MARGIN_MM,
    PAGE_BREAK_MARKER_MM,
    PAGE_HEIGHT_MM,
    PAGE_WIDTH_MM,
    PERIOD_PT,
    SHADED_HEADING_FILL,
    SKILL_SEPARATOR,
    css_color,
    css_font_stack,
    metrics_for,
)
from resume_studio.layout.outline import (
    Block,
    BulletBlock,
    ContactBlock,
    ContactItem,
    EntryHeading,
    NameBlock,
    ParagraphBlock,
    SectionHeading,
    SkillsBlock,
    build_outline,
)
from resume_studio.models.resume import ResumeRecord
from resume_studio.templates.loader import DEFAULT_TEMPLATE_ID, get_template

logger = logging.getLogger(__name__)

HTML_TEMPLATES_DIR = Path(__file__).parent / "html"


@dataclass(frozen=True)
class EditableRegion:
    """One editable text field of the preview and the path it writes back to."""

    path: tuple
    value: str
    label: str


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(HTML_TEMPLATES_DIR)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _group_sections(blocks: tuple[Block, ...]) -> list[dict[str, Any]]:
    sections: list[dict[str, Any]] = []
    for block in blocks:
        if isinstance(block, SectionHeading):
            sections.append({"heading": block, "items": []})
        elif isinstance(block, EntryHeading):
            sections[-1]["items"].append({"kind": "entry", "entry": block, "bullets": []})
        elif isinstance(block, BulletBlock):
            sections[-1]["items"][-1]["bullets"].append(block)
        elif isinstance(block, ParagraphBlock):
            sections[-1]["items"].append({"kind": "paragraph", "block": block})
        elif isinstance(block, SkillsBlock):
            sections[-1]["items"].append({"kind": "skills", "block": block})
    return sections


def render_preview(
    record: ResumeRecord,
    template_id: str = DEFAULT_TEMPLATE_ID,
    interactive: bool = False,
    linkedin_editing: bool = False,
    show_page_break: bool = True,
) -> str:
    """Render the resume as a standalone HTML page.

    With ``interactive`` set, fields are contenteditable, empty sections stay
    visible as edit targets and the advisory end-of-page marker is drawn.
    ``linkedin_editing`` switches the LinkedIn field from its labelled link
    to the raw stored value; neither mode changes the record.
    """
    template = get_template(template_id)
    blocks = build_outline(record, template, keep_empty=interactive)
    name, contact = blocks[0], blocks[1]

    items = list(contact.items)
    editing_linkedin = interactive and linkedin_editing
    if editing_linkedin and not any(item.kind == "linkedin" for item in items):
        items.append(ContactItem("linkedin", "", ("linkedin",), raw=""))

    colors = template.colors
    style = {
        "font_body": css_font_stack(template.fonts.body),
        "font_heading": css_font_stack(template.fonts.heading),
        "primary": css_color(colors.primary),
        "secondary": css_color(colors.secondary),
        "text": css_color(colors.text),
        "shade": css_color(SHADED_HEADING_FILL),
        "align": "center" if template.is_centered else "left",
        "justify": "center" if template.is_centered else "flex-start",
        "page_width_mm": PAGE_WIDTH_MM,
        "page_height_mm": PAGE_HEIGHT_MM,
        "margin_mm": MARGIN_MM,
        "marker_mm": PAGE_BREAK_MARKER_MM,
        "body_pt": BODY_PT,
        "heading_pt": HEADING_PT,
        "title_pt": metrics_for("preview").title_pt,
        "contact_pt": CONTACT_PT,
        "period_pt": PERIOD_PT,
        "line_spacing": metrics_for("preview").line_spacing,
    }

    html = _environment().get_template("preview.html").render(
        title=record.full_name or "Resume",
        template=template,
        style=style,
        name=name,
        contact_items=items,
        contact_separator=contact.separator,
        sections=_group_sections(blocks[2:]),
        interactive=interactive,
        linkedin_editing=editing_linkedin,
        show_page_break=interactive and show_page_break,
        entry_separator=ENTRY_SEPARATOR,
        skill_separator=SKILL_SEPARATOR,
    )
    logger.debug("Rendered preview (%s, interactive=%s)", template.id, interactive)
    return html


def editable_regions(record: ResumeRecord, template_id: str = DEFAULT_TEMPLATE_ID) -> list[EditableRegion]:
    """List every editable field in reading order, for hosts that build their own inputs."""
    template = get_template(template_id)
    regions: list[EditableRegion] = []
    for block in build_outline(record, template, keep_empty=True):
        if isinstance(block, NameBlock):
            regions.append(EditableRegion(block.path, block.value, "Full name"))
        elif isinstance(block, SkillsBlock):
            regions.append(EditableRegion(block.path, block.text, "Skills"))
        elif isinstance(block, ParagraphBlock):
            regions.append(EditableRegion(block.path, block.value, "Summary"))
        elif isinstance(block, EntryHeading):
            n = block.index + 1
            if block.kind == "experience":
                labels = (f"Company {n}", f"Role {n}", f"Period {n}")
            else:
                labels = (f"Institution {n}", f"Degree {n}", f"Period {n}")
            regions.append(EditableRegion(block.primary_path, block.primary, labels[0]))
            regions.append(EditableRegion(block.secondary_path, block.secondary, labels[1]))
            regions.append(EditableRegion(block.period_path, block.period, labels[2]))
        elif isinstance(block, BulletBlock):
            label = f"Bullet {block.entry_index + 1}.{block.index + 1}"
            regions.append(EditableRegion(block.path, block.value, label))
        elif isinstance(block, ContactBlock):
            for item in block.items:
                label = LINKEDIN_LABEL if item.kind == "linkedin" else item.kind.capitalize()
                regions.append(EditableRegion(item.path, item.raw, label))
            if not record.has_linkedin:
                regions.append(EditableRegion(("linkedin",), "", LINKEDIN_LABEL))
    return regions


def save_html(html_content: str, output_path: str) -> Path:
    """Save HTML content to file."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html_content, encoding="utf-8")
    return path
