"""Field-by-field plain-text reconstruction of a resume, used as diff input."""

from __future__ import annotations

from resume_studio.layout.contract import (
    ENTRY_SEPARATOR,
    SECTION_EDUCATION,
    SECTION_EXPERIENCE,
    SECTION_SKILLS,
    SECTION_SUMMARY,
)
from resume_studio.models.resume import ResumeRecord


def _present(*values: str | None) -> list[str]:
    return [v for v in values if v and v.strip()]


def to_plain_text(record: ResumeRecord) -> str:
    """Rebuild the record as text, one non-empty field per line, in record order.

    Blank bullets inside an experience entry are kept as empty lines so that
    bullet positions line up between two versions of the same resume.
    """
    blocks: list[list[str]] = []

    header = _present(record.full_name)
    contact = _present(record.email, record.phone, record.location, record.linkedin)
    if contact:
        header.append(ENTRY_SEPARATOR.join(contact))
    if header:
        blocks.append(header)

    if record.summary.strip():
        blocks.append([SECTION_SUMMARY.upper(), record.summary])

    skills = _present(*record.skills)
    if skills:
        blocks.append([SECTION_SKILLS.upper(), ", ".join(skills)])

    if record.experience:
        lines = [SECTION_EXPERIENCE.upper()]
        for i, exp in enumerate(record.experience):
            if i > 0:
                lines.append("")
            title = ENTRY_SEPARATOR.join(_present(exp.company, exp.role))
            if exp.period.strip():
                title = f"{title} ({exp.period})" if title else f"({exp.period})"
            if title:
                lines.append(title)
            lines.extend(exp.description)
        blocks.append(lines)

    if record.education:
        lines = [SECTION_EDUCATION.upper()]
        for edu in record.education:
            title = ENTRY_SEPARATOR.join(_present(edu.institution, edu.degree))
            if edu.period.strip():
                title = f"{title} ({edu.period})" if title else f"({edu.period})"
            if title:
                lines.append(title)
        blocks.append(lines)

    return "\n\n".join("\n".join(lines) for lines in blocks)
