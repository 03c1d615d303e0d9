"""Physical layout shared by the preview, DOCX and PDF renderers.

All sizes are defined once here in renderer-neutral units (millimetres for
the page, points for type). Each renderer converts to its own unit system
with the helpers below.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from resume_studio.models.template import TemplateConfiguration

MM_PER_INCH = 25.4
PT_PER_INCH = 72.0
TWIPS_PER_PT = 20

# ISO A4, 0.5in margins on every side
PAGE_WIDTH_MM = 210.0
PAGE_HEIGHT_MM = 297.0
MARGIN_MM = 12.7

BODY_PT = 10.0
HEADING_PT = 11.0
CONTACT_PT = 9.0
PERIOD_PT = 9.0

# Advisory marker in the interactive preview only
PAGE_BREAK_MARKER_MM = 290.0

SKILL_SEPARATOR = "  •  "
SKILL_SPLIT_GLYPH = "•"
ENTRY_SEPARATOR = " | "
CONTACT_SEPARATOR_LEFT = " • "
CONTACT_SEPARATOR_CENTER = " | "

LINKEDIN_LABEL = "LinkedIn"

SECTION_SUMMARY = "Professional Summary"
SECTION_SKILLS = "Core Competencies"
SECTION_EXPERIENCE = "Professional Experience"
SECTION_EDUCATION = "Education"

HEADER_RULE_COLOR = "E2E8F0"
SHADED_HEADING_FILL = "F3F4F6"


@dataclass(frozen=True)
class RendererMetrics:
    """Per-renderer values that are allowed to differ from the shared contract."""

    title_pt: float
    line_spacing: float


# The PDF writer targets a denser single-page layout and sets the name at
# 12pt instead of 20pt. This is an accepted deviation, kept explicit here.
RENDERER_METRICS = MappingProxyType({
    "preview": RendererMetrics(title_pt=20.0, line_spacing=1.25),
    "docx": RendererMetrics(title_pt=20.0, line_spacing=1.0),
    "pdf": RendererMetrics(title_pt=12.0, line_spacing=1.3),
})


def metrics_for(renderer: str) -> RendererMetrics:
    return RENDERER_METRICS[renderer]


def mm_to_pt(mm: float) -> float:
    return mm / MM_PER_INCH * PT_PER_INCH


def pt_to_mm(pt: float) -> float:
    return pt / PT_PER_INCH * MM_PER_INCH


def pt_to_twips(pt: float) -> int:
    return int(round(pt * TWIPS_PER_PT))


def mm_to_twips(mm: float) -> int:
    return pt_to_twips(mm_to_pt(mm))


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert a marker-less hex triple like ``2563EB`` to an RGB tuple."""
    value = hex_color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def css_color(hex_color: str) -> str:
    return f"#{hex_color.lstrip('#')}"


def contact_separator(template: TemplateConfiguration) -> str:
    return CONTACT_SEPARATOR_CENTER if template.is_centered else CONTACT_SEPARATOR_LEFT


def content_width_pt() -> float:
    return mm_to_pt(PAGE_WIDTH_MM - 2 * MARGIN_MM)


# Template faces mapped onto the PDF core fonts; also picks the CSS generic family
_CORE_FONTS = {
    "times new roman": "Times",
    "times": "Times",
    "georgia": "Times",
    "garamond": "Times",
    "courier new": "Courier",
    "courier": "Courier",
}

_GENERIC_FAMILIES = {"Times": "serif", "Courier": "monospace", "Helvetica": "sans-serif"}


def core_font(face: str) -> str:
    return _CORE_FONTS.get(face.strip().lower(), "Helvetica")


def css_font_stack(face: str) -> str:
    """``Arial`` -> ``"Arial", Helvetica, sans-serif``."""
    core = core_font(face)
    return f'"{face}", {core}, {_GENERIC_FAMILIES[core]}'
