"""Renderer-neutral block sequence for a resume.

Every renderer walks the same outline, so text content and reading order are
identical across the preview, the DOCX and the PDF by construction. Blocks
carry the model path of each editable value so the preview can bind edits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from resume_studio.layout.contract import (
    ENTRY_SEPARATOR,
    LINKEDIN_LABEL,
    SECTION_EDUCATION,
    SECTION_EXPERIENCE,
    SECTION_SKILLS,
    SECTION_SUMMARY,
    SKILL_SEPARATOR,
    contact_separator,
)
from resume_studio.models.resume import ResumeRecord
from resume_studio.models.template import TemplateConfiguration
from resume_studio.utils.urls import mailto_url, normalize_url

FieldPath = tuple[Union[str, int], ...]


@dataclass(frozen=True)
class NameBlock:
    value: str
    path: FieldPath = ("full_name",)

    @property
    def text(self) -> str:
        return self.value.upper()


@dataclass(frozen=True)
class ContactItem:
    kind: str  # "phone" | "email" | "linkedin"
    label: str
    path: FieldPath
    url: str | None = None
    raw: str = ""


@dataclass(frozen=True)
class ContactBlock:
    items: tuple[ContactItem, ...]
    separator: str

    @property
    def text(self) -> str:
        return self.separator.join(item.label for item in self.items)


@dataclass(frozen=True)
class SectionHeading:
    key: str
    title: str

    @property
    def text(self) -> str:
        return self.title.upper()


@dataclass(frozen=True)
class ParagraphBlock:
    value: str
    path: FieldPath

    @property
    def text(self) -> str:
        return self.value


@dataclass(frozen=True)
class SkillsBlock:
    items: tuple[str, ...]
    path: FieldPath = ("skills",)

    @property
    def text(self) -> str:
        return SKILL_SEPARATOR.join(self.items)


@dataclass(frozen=True)
class EntryHeading:
    """Company/role or institution/degree line with a right-aligned period."""

    kind: str  # "experience" | "education"
    index: int
    primary: str
    secondary: str
    period: str

    @property
    def primary_text(self) -> str:
        return self.primary.upper() if self.kind == "experience" else self.primary

    @property
    def show_separator(self) -> bool:
        return bool(self.primary.strip() and self.secondary.strip())

    @property
    def primary_path(self) -> FieldPath:
        field = "company" if self.kind == "experience" else "institution"
        return (self.kind, self.index, field)

    @property
    def secondary_path(self) -> FieldPath:
        field = "role" if self.kind == "experience" else "degree"
        return (self.kind, self.index, field)

    @property
    def period_path(self) -> FieldPath:
        return (self.kind, self.index, "period")

    @property
    def label(self) -> str:
        sep = ENTRY_SEPARATOR if self.show_separator else ""
        return f"{self.primary_text}{sep}{self.secondary}"

    @property
    def text(self) -> str:
        return f"{self.label}\t{self.period}"


@dataclass(frozen=True)
class BulletBlock:
    value: str
    entry_index: int
    index: int

    @property
    def path(self) -> FieldPath:
        return ("experience", self.entry_index, "description", self.index)

    @property
    def text(self) -> str:
        return self.value


Block = Union[NameBlock, ContactBlock, SectionHeading, ParagraphBlock, SkillsBlock, EntryHeading, BulletBlock]


def contact_items(record: ResumeRecord, keep_empty: bool = False) -> tuple[ContactItem, ...]:
    """Phone, email and LinkedIn in display order; unpopulated fields are skipped."""
    items: list[ContactItem] = []
    if record.phone.strip() or keep_empty:
        items.append(ContactItem("phone", record.phone, ("phone",), raw=record.phone))
    if record.email.strip() or keep_empty:
        items.append(
            ContactItem("email", record.email, ("email",), url=mailto_url(record.email), raw=record.email)
        )
    if record.has_linkedin:
        items.append(
            ContactItem(
                "linkedin",
                LINKEDIN_LABEL,
                ("linkedin",),
                url=normalize_url(record.linkedin),
                raw=record.linkedin or "",
            )
        )
    return tuple(items)


def build_outline(
    record: ResumeRecord,
    template: TemplateConfiguration,
    keep_empty: bool = False,
) -> tuple[Block, ...]:
    """Flatten a record into display-ordered blocks.

    Sections without content are dropped unless ``keep_empty`` is set, which
    the interactive preview uses so empty fields stay editable.
    """
    blocks: list[Block] = [
        NameBlock(record.full_name),
        ContactBlock(contact_items(record, keep_empty), contact_separator(template)),
    ]

    if record.summary.strip() or keep_empty:
        blocks.append(SectionHeading("summary", SECTION_SUMMARY))
        blocks.append(ParagraphBlock(record.summary, ("summary",)))

    if record.skills or keep_empty:
        blocks.append(SectionHeading("skills", SECTION_SKILLS))
        blocks.append(SkillsBlock(record.skills))

    if record.experience or keep_empty:
        blocks.append(SectionHeading("experience", SECTION_EXPERIENCE))
        for i, exp in enumerate(record.experience):
            blocks.append(EntryHeading("experience", i, exp.company, exp.role, exp.period))
            for j, desc in enumerate(exp.description):
                blocks.append(BulletBlock(desc, i, j))

    if record.education or keep_empty:
        blocks.append(SectionHeading("education", SECTION_EDUCATION))
        for i, edu in enumerate(record.education):
            blocks.append(EntryHeading("education", i, edu.institution, edu.degree, edu.period))

    return tuple(blocks)


def outline_lines(blocks: tuple[Block, ...]) -> list[str]:
    """Canonical text of each block, in reading order."""
    return [block.text for block in blocks]
