"""Tests for the shared layout contract and the renderer-neutral outline."""

import pytest

from resume_studio.layout.contract import (
    PAGE_BREAK_MARKER_MM,
    SKILL_SEPARATOR,
    contact_separator,
    content_width_pt,
    core_font,
    css_color,
    css_font_stack,
    hex_to_rgb,
    metrics_for,
    mm_to_pt,
    mm_to_twips,
    pt_to_mm,
    pt_to_twips,
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
    contact_items,
    outline_lines,
)
from resume_studio.models.resume import ExperienceEntry, ResumeRecord
from resume_studio.templates.loader import get_template


class TestUnits:
    def test_inch(self):
        assert mm_to_pt(25.4) == pytest.approx(72.0)
        assert pt_to_mm(72.0) == pytest.approx(25.4)

    def test_twips(self):
        assert pt_to_twips(12) == 240
        assert mm_to_twips(25.4) == 1440

    def test_margin_in_points(self):
        assert mm_to_pt(12.7) == pytest.approx(36.0)

    def test_content_width(self):
        assert content_width_pt() == pytest.approx(mm_to_pt(210 - 2 * 12.7))

    def test_page_break_marker_inside_page(self):
        assert PAGE_BREAK_MARKER_MM == 290
        assert PAGE_BREAK_MARKER_MM < 297

    def test_colors(self):
        assert hex_to_rgb("2563EB") == (0x25, 0x63, 0xEB)
        assert css_color("2563EB") == "#2563EB"


class TestRendererMetrics:
    def test_pdf_title_deviation(self):
        assert metrics_for("pdf").title_pt == 12
        assert metrics_for("docx").title_pt == 20
        assert metrics_for("preview").title_pt == 20

    def test_unknown_renderer(self):
        with pytest.raises(KeyError):
            metrics_for("svg")


class TestFonts:
    @pytest.mark.parametrize("face,expected", [
        ("Arial", "Helvetica"),
        ("Calibri", "Helvetica"),
        ("Times New Roman", "Times"),
        ("Georgia", "Times"),
    ])
    def test_core_font(self, face, expected):
        assert core_font(face) == expected

    def test_css_font_stack(self):
        assert css_font_stack("Times New Roman") == '"Times New Roman", Times, serif'
        assert css_font_stack("Arial") == '"Arial", Helvetica, sans-serif'


class TestContact:
    def test_separator_follows_alignment(self):
        assert contact_separator(get_template("modern")) == " • "
        assert contact_separator(get_template("classic")) == " | "

    def test_order_phone_email_linkedin(self, sample_record):
        items = contact_items(sample_record)
        assert [i.kind for i in items] == ["phone", "email", "linkedin"]

    def test_linkedin_label_and_normalized_url(self, sample_record):
        linkedin = contact_items(sample_record)[-1]
        assert linkedin.label == "LinkedIn"
        assert linkedin.url == "https://linkedin.com/in/jane"
        assert linkedin.raw == "linkedin.com/in/jane"

    def test_linkedin_scheme_kept(self, sample_record):
        record = sample_record.model_copy(update={"linkedin": "http://linkedin.com/in/jane"})
        assert contact_items(record)[-1].url == "http://linkedin.com/in/jane"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_no_linkedin_item_when_blank(self, sample_record, value):
        record = sample_record.model_copy(update={"linkedin": value})
        assert "linkedin" not in [i.kind for i in contact_items(record)]

    def test_email_is_mailto(self, sample_record):
        email = contact_items(sample_record)[1]
        assert email.url == "mailto:jane@example.com"

    def test_empty_fields_skipped(self, minimal_record):
        assert contact_items(minimal_record) == ()

    def test_keep_empty(self, minimal_record):
        kinds = [i.kind for i in contact_items(minimal_record, keep_empty=True)]
        assert kinds == ["phone", "email"]

    def test_block_text_has_no_dangling_separator(self, sample_record):
        record = sample_record.model_copy(update={"phone": "", "linkedin": None})
        block = build_outline(record, get_template("modern"))[1]
        assert block.text == "jane@example.com"


class TestOutline:
    def test_reading_order(self, sample_record):
        blocks = build_outline(sample_record, get_template("modern"))
        kinds = [type(b) for b in blocks]
        assert kinds == [
            NameBlock, ContactBlock,
            SectionHeading, ParagraphBlock,
            SectionHeading, SkillsBlock,
            SectionHeading, EntryHeading, BulletBlock, BulletBlock, EntryHeading, BulletBlock,
            SectionHeading, EntryHeading,
        ]

    def test_name_upper_cased(self, sample_record):
        name = build_outline(sample_record, get_template("modern"))[0]
        assert name.text == "JANE DOE"
        assert name.value == "Jane Doe"

    def test_empty_name_stays_empty(self):
        name = build_outline(ResumeRecord(), get_template("modern"))[0]
        assert name.text == ""

    def test_skills_joined(self, sample_record):
        skills = next(b for b in build_outline(sample_record, get_template("modern")) if isinstance(b, SkillsBlock))
        assert skills.text == "Go  •  Rust  •  SQL"
        assert SKILL_SEPARATOR == "  •  "

    def test_entry_heading(self, sample_record):
        entry = next(b for b in build_outline(sample_record, get_template("modern")) if isinstance(b, EntryHeading))
        assert entry.primary_text == "ACME CORP"
        assert entry.label == "ACME CORP | Senior Engineer"
        assert entry.text == "ACME CORP | Senior Engineer\t2021 - Present"
        assert entry.primary_path == ("experience", 0, "company")
        assert entry.period_path == ("experience", 0, "period")

    def test_education_entry_not_upper_cased(self, sample_record):
        entries = [b for b in build_outline(sample_record, get_template("modern")) if isinstance(b, EntryHeading)]
        edu = entries[-1]
        assert edu.kind == "education"
        assert edu.label == "TU Berlin | MSc Computer Science"
        assert edu.secondary_path == ("education", 0, "degree")

    def test_entry_separator_only_between_values(self):
        entry = EntryHeading("experience", 0, "Acme", "", "2020")
        assert not entry.show_separator
        assert entry.label == "ACME"

    def test_bullet_paths(self, sample_record):
        bullets = [b for b in build_outline(sample_record, get_template("modern")) if isinstance(b, BulletBlock)]
        assert [b.path for b in bullets] == [
            ("experience", 0, "description", 0),
            ("experience", 0, "description", 1),
            ("experience", 1, "description", 0),
        ]

    def test_blank_bullets_kept(self):
        record = ResumeRecord(experience=[ExperienceEntry(company="A", description=("one", "", "three"))])
        bullets = [b for b in build_outline(record, get_template("modern")) if isinstance(b, BulletBlock)]
        assert [b.text for b in bullets] == ["one", "", "three"]

    def test_empty_sections_omitted(self, minimal_record):
        blocks = build_outline(minimal_record, get_template("modern"))
        assert not any(isinstance(b, SectionHeading) for b in blocks)

    def test_keep_empty_sections(self, minimal_record):
        blocks = build_outline(minimal_record, get_template("modern"), keep_empty=True)
        keys = [b.key for b in blocks if isinstance(b, SectionHeading)]
        assert keys == ["summary", "skills", "experience", "education"]

    def test_section_titles_upper_cased(self, sample_record):
        headings = [b for b in build_outline(sample_record, get_template("modern")) if isinstance(b, SectionHeading)]
        assert headings[0].text == "PROFESSIONAL SUMMARY"

    def test_same_text_for_every_template(self, sample_record):
        """Templates change styling, never content or order (apart from the contact separator)."""
        modern = outline_lines(build_outline(sample_record, get_template("modern")))
        minimalist = outline_lines(build_outline(sample_record, get_template("minimalist")))
        assert modern == minimalist
        classic = outline_lines(build_outline(sample_record, get_template("classic")))
        assert modern[2:] == classic[2:]
