"""PDF exporter using fpdf2 with explicit cursor placement.

fpdf2 has no paragraph/style cascade, so every block is measured first and
then drawn at a vertical cursor ``y`` (the top of the next free line, in
points). Fit is checked per logical block before drawing: a heading is only
placed when the block that follows it fits too, and a bullet is never split
across pages unless it is taller than a whole page, in which case it breaks
at line boundaries.

Text is set in a Unicode TrueType face (DejaVu, Arial or a configured file)
when one is installed; otherwise the core fonts are used and characters
outside windows-1252 are replaced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from fpdf import FPDF

from resume_studio.errors import ExportError
from resume_studio.layout.contract import (
    BODY_PT,
    CONTACT_PT,
    ENTRY_SEPARATOR,
    HEADER_RULE_COLOR,
    HEADING_PT,
    MARGIN_MM,
    PERIOD_PT,
    SHADED_HEADING_FILL,
    core_font,
    hex_to_rgb,
    metrics_for,
    mm_to_pt,
)
from resume_studio.layout.outline import (
    Block,
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

_CORE_ENCODING = "windows-1252"

BULLET_GLYPH = "•"
BULLET_INDENT = 8.0
BULLET_TEXT_INDENT = 18.0
BULLET_GAP = 3.0
SECTION_GAP = 8.0

_FONT_DIRS = [
    "/usr/share/fonts/truetype/dejavu",  # Debian/Ubuntu (fonts-dejavu-core)
    "/usr/share/fonts/dejavu",  # Fedora
    "/usr/share/fonts/TTF",  # Arch
    "/System/Library/Fonts/Supplemental",  # macOS
    "C:/Windows/Fonts",
]

# (regular, bold, italic) file names standing in for each core family
_UNICODE_FACES = {
    "Helvetica": [
        ("DejaVuSans.ttf", "DejaVuSans-Bold.ttf", "DejaVuSans-Oblique.ttf"),
        ("Arial.ttf", "Arial Bold.ttf", "Arial Italic.ttf"),
        ("arial.ttf", "arialbd.ttf", "ariali.ttf"),
    ],
    "Times": [
        ("DejaVuSerif.ttf", "DejaVuSerif-Bold.ttf", "DejaVuSerif-Italic.ttf"),
        ("Times New Roman.ttf", "Times New Roman Bold.ttf", "Times New Roman Italic.ttf"),
        ("times.ttf", "timesbd.ttf", "timesi.ttf"),
    ],
    "Courier": [
        ("DejaVuSansMono.ttf", "DejaVuSansMono-Bold.ttf", "DejaVuSansMono-Oblique.ttf"),
        ("Courier New.ttf", "Courier New Bold.ttf", "Courier New Italic.ttf"),
        ("cour.ttf", "courbd.ttf", "couri.ttf"),
    ],
}


def find_unicode_font(core: str, font_path: str | None = None) -> dict[str, str] | None:
    """Search for a Unicode TrueType face to use in place of a core font.

    Returns a style -> file mapping ("" regular, "B" bold, "I" italic).
    Styles without their own file reuse the regular one. A configured
    ``font_path`` wins over the system search and serves every style.
    """
    if font_path:
        if Path(font_path).expanduser().exists():
            path = str(Path(font_path).expanduser())
            return {"": path, "B": path, "I": path}
        logger.warning("Configured PDF font %s not found, searching system fonts", font_path)
    for regular, bold, italic in _UNICODE_FACES.get(core, []):
        for directory in _FONT_DIRS:
            base = Path(directory)
            if not (base / regular).exists():
                continue
            styles = {"": base / regular, "B": base / bold, "I": base / italic}
            return {style: str(p if p.exists() else base / regular) for style, p in styles.items()}
    return None


@dataclass
class Placement:
    """Where a block landed; ``top``/``bottom`` are in points from the page top.

    ``end_page`` differs from ``page`` only for a block taller than a page.
    """

    kind: str
    text: str
    page: int
    top: float
    bottom: float
    end_page: int


@dataclass
class LinkArea:
    url: str
    page: int
    x: float
    y: float
    w: float
    h: float


@dataclass
class _Layout:
    placements: list[Placement] = field(default_factory=list)
    links: list[LinkArea] = field(default_factory=list)


class PdfResumeWriter:
    """Draws one resume onto a fresh FPDF instance."""

    def __init__(
        self,
        template: TemplateConfiguration,
        compress: bool = True,
        font_path: str | None = None,
    ):
        self.template = template
        self.metrics = metrics_for("pdf")
        self.pdf = FPDF(orientation="P", unit="pt", format="A4")
        self.pdf.core_fonts_encoding = _CORE_ENCODING
        self.pdf.set_compression(compress)
        self.pdf.set_auto_page_break(auto=False)
        self.margin = mm_to_pt(MARGIN_MM)
        self.pdf.set_margins(self.margin, self.margin, self.margin)
        self.pdf.add_page()

        self.page_width = self.pdf.w
        self.page_height = self.pdf.h
        self.content_width = self.page_width - 2 * self.margin
        self.line_height = BODY_PT * self.metrics.line_spacing
        self.y = self.margin

        self._families: set[str] = set()
        self.heading_font = self._load_family(core_font(template.fonts.heading), font_path)
        self.body_font = self._load_family(core_font(template.fonts.body), font_path)
        self.layout = _Layout()
        self._replaced_chars = False

    def _load_family(self, core: str, font_path: str | None) -> str:
        """Register a Unicode face for ``core`` and return its family name."""
        files = find_unicode_font(core, font_path)
        if files is None:
            logger.debug("No Unicode font found for %s, using the core font", core)
            return core
        family = Path(files[""]).stem
        if family in self._families:
            return family
        try:
            for style, path in files.items():
                self.pdf.add_font(family, style=style, fname=path)
        except Exception:
            logger.warning("Failed to load font %s, using the core font %s", files[""], core)
            return core
        self._families.add(family)
        return family

    @property
    def placements(self) -> list[Placement]:
        return self.layout.placements

    @property
    def links(self) -> list[LinkArea]:
        return self.layout.links

    @property
    def page_count(self) -> int:
        return self.pdf.page_no()

    @property
    def bottom_limit(self) -> float:
        return self.page_height - self.margin

    # -- public ----------------------------------------------------------

    def write(self, blocks: tuple[Block, ...]) -> None:
        usable = self.bottom_limit - self.margin
        i = 0
        while i < len(blocks):
            end = self._chain_end(blocks, i)
            group = blocks[i:end + 1]
            needed = sum(self.measure(b) for b in group)
            if needed > usable:
                # The last block breaks at line boundaries; keep its first line with the lead-in
                needed -= self.measure(group[-1]) - self.line_height
            self.ensure_space(needed)
            for block in group:
                self.draw(block)
            i = end + 1

    @staticmethod
    def _keeps_with_next(block: Block, following: Block) -> bool:
        if isinstance(block, SectionHeading):
            return True
        return isinstance(block, EntryHeading) and isinstance(following, BulletBlock)

    def _chain_end(self, blocks: tuple[Block, ...], start: int) -> int:
        """Index of the last block that must share a page with ``blocks[start]``."""
        end = start
        while end + 1 < len(blocks) and self._keeps_with_next(blocks[end], blocks[end + 1]):
            end += 1
        return end

    def output(self) -> bytes:
        return bytes(self.pdf.output())

    def ensure_space(self, needed: float) -> None:
        """Start a new page when ``needed`` points do not fit below the cursor."""
        if self.y + needed > self.bottom_limit and self.y > self.margin:
            self.pdf.add_page()
            self.y = self.margin

    def _break_if_full(self) -> None:
        """Move to a new page when the next text line would cross the bottom margin.

        Only fires inside a block taller than a page; every other block was
        already given enough room by ``ensure_space``.
        """
        if self.y + self.line_height > self.bottom_limit + 1e-6:
            self.pdf.add_page()
            self.y = self.margin

    # -- measurement -----------------------------------------------------

    def measure(self, block: Block) -> float:
        if isinstance(block, NameBlock):
            return self.metrics.title_pt + 4
        if isinstance(block, ContactBlock):
            return CONTACT_PT + 3 + 10
        if isinstance(block, SectionHeading):
            return SECTION_GAP + HEADING_PT + 7
        if isinstance(block, ParagraphBlock):
            lines = self.wrap(block.text, self.content_width, self.body_font, "", BODY_PT)
            return len(lines) * self.line_height
        if isinstance(block, SkillsBlock):
            lines = self.wrap(block.text, self.content_width, self.body_font, "", BODY_PT)
            return len(lines) * self.line_height
        if isinstance(block, EntryHeading):
            gap = 0.0 if block.index == 0 else (12.0 if block.kind == "experience" else 10.0)
            return gap + self.line_height + (2 if block.kind == "experience" else 4)
        if isinstance(block, BulletBlock):
            width = self.content_width - BULLET_TEXT_INDENT
            lines = self.wrap(block.text, width, self.body_font, "", BODY_PT)
            return len(lines) * self.line_height + BULLET_GAP
        raise TypeError(f"Unknown block: {type(block).__name__}")

    def wrap(self, text: str, width: float, family: str, style: str, size: float) -> list[str]:
        """Greedy word wrap using the font's string widths.

        Always returns at least one line so an empty value still occupies
        one line of height.
        """
        self.pdf.set_font(family, style=style, size=size)
        lines: list[str] = []
        for paragraph in self._safe_text(text).split("\n"):
            current = ""
            for word in paragraph.split(" "):
                candidate = f"{current} {word}" if current else word
                if self.pdf.get_string_width(candidate) <= width:
                    current = candidate
                    continue
                if current:
                    lines.append(current)
                current = word
                while self.pdf.get_string_width(current) > width and len(current) > 1:
                    cut = self._fit_chars(current, width)
                    lines.append(current[:cut])
                    current = current[cut:]
            lines.append(current)
        return lines or [""]

    def _fit_chars(self, word: str, width: float) -> int:
        cut = 1
        while cut < len(word) and self.pdf.get_string_width(word[: cut + 1]) <= width:
            cut += 1
        return cut

    def _safe_text(self, text: str) -> str:
        """Replace characters the core fonts cannot encode."""
        if self.pdf.is_ttf_font:
            return text
        try:
            text.encode(_CORE_ENCODING)
            return text
        except UnicodeEncodeError:
            if not self._replaced_chars:
                logger.warning("Replacing characters outside %s in PDF output", _CORE_ENCODING)
                self._replaced_chars = True
            return text.encode(_CORE_ENCODING, errors="replace").decode(_CORE_ENCODING)

    # -- drawing ---------------------------------------------------------

    def draw(self, block: Block) -> None:
        top = self.y
        page = self.pdf.page_no()
        if isinstance(block, NameBlock):
            self._draw_name(block)
        elif isinstance(block, ContactBlock):
            self._draw_contact(block)
        elif isinstance(block, SectionHeading):
            self._draw_heading(block)
        elif isinstance(block, (ParagraphBlock, SkillsBlock)):
            self._draw_paragraph(block)
        elif isinstance(block, EntryHeading):
            self._draw_entry(block)
        elif isinstance(block, BulletBlock):
            self._draw_bullet(block)
        kind = type(block).__name__
        self.layout.placements.append(
            Placement(kind, block.text, page, top, self.y, self.pdf.page_no())
        )

    def _set_color(self, hex_color: str) -> None:
        self.pdf.set_text_color(*hex_to_rgb(hex_color))

    def _text(self, x: float, baseline: float, text: str) -> None:
        if text:
            self.pdf.text(x, baseline, self._safe_text(text))

    def _width(self, text: str) -> float:
        return self.pdf.get_string_width(self._safe_text(text))

    def _draw_name(self, block: NameBlock) -> None:
        size = self.metrics.title_pt
        self.pdf.set_font(self.heading_font, style="B", size=size)
        self._set_color(self.template.colors.primary)
        x = self.margin
        if self.template.is_centered:
            x = (self.page_width - self._width(block.text)) / 2
        self._text(x, self.y + size, block.text)
        self.y += size + 4

    def _draw_contact(self, block: ContactBlock) -> None:
        self.pdf.set_font(self.body_font, style="", size=CONTACT_PT)
        sep_width = self._width(block.separator)
        total = sum(self._width(item.label) for item in block.items)
        total += sep_width * max(len(block.items) - 1, 0)

        x = self.margin
        if self.template.is_centered:
            x = (self.page_width - total) / 2
        baseline = self.y + CONTACT_PT

        for i, item in enumerate(block.items):
            if i > 0:
                self._set_color(self.template.colors.secondary)
                self._text(x, baseline, block.separator)
                x += sep_width
            width = self._width(item.label)
            if item.url:
                self._set_color(self.template.colors.primary)
                self._text(x, baseline, item.label)
                self._link(item.url, x, self.y, width, CONTACT_PT + 2)
            else:
                self._set_color(self.template.colors.secondary)
                self._text(x, baseline, item.label)
            x += width

        self.y += CONTACT_PT + 3
        self.pdf.set_draw_color(*hex_to_rgb(HEADER_RULE_COLOR))
        self.pdf.set_line_width(1)
        self.pdf.line(self.margin, self.y, self.page_width - self.margin, self.y)
        self.y += 10

    def _link(self, url: str, x: float, y: float, w: float, h: float) -> None:
        self.pdf.link(x, y, w, h, url)
        self.layout.links.append(LinkArea(url, self.pdf.page_no(), x, y, w, h))

    def _draw_heading(self, block: SectionHeading) -> None:
        self.y += SECTION_GAP
        style = self.template.layout.section_header_style
        if style == "shaded":
            self.pdf.set_fill_color(*hex_to_rgb(SHADED_HEADING_FILL))
            self.pdf.rect(self.margin, self.y - 1, self.content_width, HEADING_PT + 5, style="F")

        self.pdf.set_font(self.heading_font, style="B", size=HEADING_PT)
        self._set_color(self.template.colors.primary)
        x = self.margin + (3 if style == "shaded" else 0)
        self._text(x, self.y + HEADING_PT, block.text)

        if style == "border-bottom":
            rule_y = self.y + HEADING_PT + 3
            self.pdf.set_draw_color(*hex_to_rgb(self.template.colors.primary))
            self.pdf.set_line_width(0.75)
            self.pdf.line(self.margin, rule_y, self.page_width - self.margin, rule_y)
        self.y += HEADING_PT + 7

    def _draw_paragraph(self, block: ParagraphBlock | SkillsBlock) -> None:
        lines = self.wrap(block.text, self.content_width, self.body_font, "", BODY_PT)
        self._set_color(self.template.colors.text)
        centered = isinstance(block, SkillsBlock) and self.template.is_centered
        for line in lines:
            self._break_if_full()
            x = self.margin
            if centered:
                x = (self.page_width - self.pdf.get_string_width(line)) / 2
            self._text(x, self.y + BODY_PT, line)
            self.y += self.line_height

    def _draw_entry(self, block: EntryHeading) -> None:
        if block.index > 0:
            self.y += 12.0 if block.kind == "experience" else 10.0
        baseline = self.y + BODY_PT

        self.pdf.set_font(self.body_font, style="B", size=PERIOD_PT)
        self._set_color(self.template.colors.text)
        period_width = self._width(block.period)
        self._text(self.page_width - self.margin - period_width, baseline, block.period)

        x = self.margin
        self.pdf.set_font(self.heading_font, style="B", size=BODY_PT)
        self._set_color(self.template.colors.primary)
        self._text(x, baseline, block.primary_text)
        x += self._width(block.primary_text)

        if block.show_separator:
            self.pdf.set_font(self.body_font, style="", size=BODY_PT)
            self._set_color(self.template.colors.secondary)
            self._text(x, baseline, ENTRY_SEPARATOR)
            x += self._width(ENTRY_SEPARATOR)

        secondary_style = "B" if block.kind == "experience" else "I"
        self.pdf.set_font(self.body_font, style=secondary_style, size=BODY_PT)
        self._set_color(self.template.colors.text)
        self._text(x, baseline, block.secondary)

        self.y += self.line_height + (2 if block.kind == "experience" else 4)

    def _draw_bullet(self, block: BulletBlock) -> None:
        width = self.content_width - BULLET_TEXT_INDENT
        lines = self.wrap(block.text, width, self.body_font, "", BODY_PT)
        self._set_color(self.template.colors.text)
        for i, line in enumerate(lines):
            self._break_if_full()
            if i == 0:
                self._text(self.margin + BULLET_INDENT, self.y + BODY_PT, BULLET_GLYPH)
            self._text(self.margin + BULLET_TEXT_INDENT, self.y + BODY_PT, line)
            self.y += self.line_height
        self.y += BULLET_GAP


def layout_pdf(
    record: ResumeRecord,
    template: TemplateConfiguration,
    compress: bool = True,
    font_path: str | None = None,
) -> PdfResumeWriter:
    """Lay out a resume and return the writer (for inspection or output)."""
    writer = PdfResumeWriter(template, compress=compress, font_path=font_path)
    writer.write(build_outline(record, template))
    return writer


def render_pdf(
    record: ResumeRecord,
    template_id: str = DEFAULT_TEMPLATE_ID,
    compress: bool = True,
    font_path: str | None = None,
) -> bytes:
    """Serialize a resume to PDF bytes.

    Raises ExportError (with the original exception chained) on any failure,
    including an unknown template id. No partial bytes are returned.
    """
    try:
        template = get_template(template_id)
        writer = layout_pdf(record, template, compress=compress, font_path=font_path)
        data = writer.output()
    except Exception as exc:
        logger.exception("PDF export failed (template=%s)", template_id)
        raise ExportError("PDF", str(exc)) from exc
    logger.debug("PDF export finished: %d pages, %d bytes", writer.page_count, len(data))
    return data

