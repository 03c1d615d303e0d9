"""Tests for the DOCX exporter."""

from __future__ import annotations

from io import BytesIO

import pytest
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.oxml.ns import qn
from docx.shared import Pt

from resume_studio.errors import ExportError, TemplateNotFoundError
from resume_studio.layout.outline import build_outline, outline_lines
from resume_studio.models.resume import ExperienceEntry, ResumeRecord
from resume_studio.models.template import TemplateConfiguration
from resume_studio.templates import docx_renderer
from resume_studio.templates.docx_renderer import BULLET_STYLE, build_document, render_docx
from resume_studio.templates.loader import get_template


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _open(data: bytes):
    return Document(BytesIO(data))


def _texts(doc) -> list[str]:
    return [p.text for p in doc.paragraphs if p.text]


def _paragraph(doc, text: str):
    return next(p for p in doc.paragraphs if p.text == text)


# ---------------------------------------------------------------------------
# render_docx tests
# ---------------------------------------------------------------------------

class TestRenderDocx:
    def test_returns_docx_bytes(self, sample_record):
        data = render_docx(sample_record)
        assert isinstance(data, bytes)
        assert data[:2] == b"PK"

    @pytest.mark.parametrize("template_id", ["modern", "classic", "minimalist"])
    def test_text_matches_outline(self, sample_record, template_id):
        doc = _open(render_docx(sample_record, template_id))
        expected = outline_lines(build_outline(sample_record, get_template(template_id)))
        assert _texts(doc) == [line for line in expected if line]

    def test_core_properties(self, sample_record):
        doc = _open(render_docx(sample_record, creator="tester"))
        assert doc.core_properties.title == "Jane Doe"
        assert doc.core_properties.author == "tester"

    def test_a4_with_half_inch_margins(self, sample_record):
        section = _open(render_docx(sample_record)).sections[0]
        assert section.page_width.mm == pytest.approx(210, abs=0.1)
        assert section.page_height.mm == pytest.approx(297, abs=0.1)
        assert section.left_margin.mm == pytest.approx(12.7, abs=0.1)
        assert section.top_margin.mm == pytest.approx(12.7, abs=0.1)

    def test_name(self, sample_record):
        doc = _open(render_docx(sample_record))
        name = doc.paragraphs[0]
        assert name.text == "JANE DOE"
        assert name.runs[0].bold
        assert name.runs[0].font.size == Pt(20)
        assert name.alignment == WD_ALIGN_PARAGRAPH.LEFT

    def test_classic_is_centered(self, sample_record):
        doc = _open(render_docx(sample_record, "classic"))
        assert doc.paragraphs[0].alignment == WD_ALIGN_PARAGRAPH.CENTER
        assert doc.styles["Normal"].font.name == "Times New Roman"

    def test_unknown_template_raises_export_error(self, sample_record):
        with pytest.raises(ExportError) as exc_info:
            render_docx(sample_record, "nonexistent")
        assert exc_info.value.format == "DOCX"
        assert isinstance(exc_info.value.__cause__, TemplateNotFoundError)

    def test_failure_wrapped(self, sample_record, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(docx_renderer, "build_document", boom)
        with pytest.raises(ExportError, match="DOCX export failed: disk full"):
            render_docx(sample_record)

    def test_empty_record(self):
        doc = _open(render_docx(ResumeRecord()))
        assert not any(p.style.name.startswith("Heading") for p in doc.paragraphs)


class TestContactLine:
    def test_linkedin_shown_as_label(self, sample_record):
        doc = _open(render_docx(sample_record))
        contact = doc.paragraphs[1]
        assert contact.text == "+1 555 0100 • jane@example.com • LinkedIn"
        assert "linkedin.com/in/jane" not in "\n".join(_texts(doc))

    def test_hyperlinks(self, sample_record):
        contact = _open(render_docx(sample_record)).paragraphs[1]
        addresses = [h.address for h in contact.hyperlinks]
        assert addresses == ["mailto:jane@example.com", "https://linkedin.com/in/jane"]
        assert contact.hyperlinks[-1].text == "LinkedIn"

    def test_no_linkedin(self, record_without_linkedin):
        doc = _open(render_docx(record_without_linkedin))
        contact = doc.paragraphs[1]
        assert contact.text == "+1 555 0100 • jane@example.com"
        assert "LinkedIn" not in "\n".join(_texts(doc))
        assert [h.address for h in contact.hyperlinks] == ["mailto:jane@example.com"]

    def test_centered_separator(self, sample_record):
        contact = _open(render_docx(sample_record, "classic")).paragraphs[1]
        assert contact.text == "+1 555 0100 | jane@example.com | LinkedIn"

    def test_header_rule(self, sample_record):
        contact = _open(render_docx(sample_record)).paragraphs[1]
        assert contact._p.pPr.find(qn("w:pBdr")) is not None


class TestSections:
    def test_skills_single_normal_paragraph(self, sample_record):
        doc = _open(render_docx(sample_record))
        skills = [p for p in doc.paragraphs if "Rust" in p.text]
        assert len(skills) == 1
        assert skills[0].text == "Go  •  Rust  •  SQL"
        assert skills[0].style.name == "Normal"

    def test_heading_keeps_with_next(self, sample_record):
        heading = _paragraph(_open(render_docx(sample_record)), "PROFESSIONAL EXPERIENCE")
        assert heading.style.name == "Heading 2"
        assert heading.paragraph_format.keep_with_next

    def test_border_bottom_heading(self, sample_record):
        heading = _paragraph(_open(render_docx(sample_record, "classic")), "EDUCATION")
        assert heading._p.pPr.find(qn("w:pBdr")) is not None

    def test_uppercase_bold_heading_has_no_border(self, sample_record):
        heading = _paragraph(_open(render_docx(sample_record, "modern")), "EDUCATION")
        assert heading._p.pPr.find(qn("w:pBdr")) is None

    def test_shaded_heading(self, sample_record):
        shaded = get_template("modern").model_copy(
            update={"layout": get_template("modern").layout.model_copy(update={"section_header_style": "shaded"})}
        )
        assert isinstance(shaded, TemplateConfiguration)
        doc = build_document(sample_record, shaded)
        heading = _paragraph(doc, "EDUCATION")
        shd = heading._p.pPr.find(qn("w:shd"))
        assert shd is not None
        assert shd.get(qn("w:fill")) == "F3F4F6"

    def test_entry_heading_right_tab(self, sample_record):
        doc = _open(render_docx(sample_record))
        entry = _paragraph(doc, "ACME CORP | Senior Engineer\t2021 - Present")
        stops = entry.paragraph_format.tab_stops
        assert len(stops) == 1
        assert stops[0].alignment == WD_TAB_ALIGNMENT.RIGHT
        assert entry.paragraph_format.keep_with_next

    def test_education_entry(self, sample_record):
        doc = _open(render_docx(sample_record))
        entry = _paragraph(doc, "TU Berlin | MSc Computer Science\t2015 - 2017")
        degree = next(r for r in entry.runs if r.text == "MSc Computer Science")
        assert degree.italic

    def test_bullets_use_bullet_style(self, sample_record):
        doc = _open(render_docx(sample_record))
        bullets = [p for p in doc.paragraphs if p.style.name == BULLET_STYLE]
        assert [p.text for p in bullets] == [
            "Led the migration of the billing service to Go.",
            "Cut p99 latency by 40% with a new caching layer.",
            "Maintained the TPS report pipeline.",
        ]
        assert doc.styles[BULLET_STYLE].base_style.name == "List Bullet"

    def test_blank_bullet_kept(self):
        record = ResumeRecord(experience=[ExperienceEntry(company="A", description=("one", "", "three"))])
        doc = _open(render_docx(record))
        bullets = [p.text for p in doc.paragraphs if p.style.name == BULLET_STYLE]
        assert bullets == ["one", "", "three"]
