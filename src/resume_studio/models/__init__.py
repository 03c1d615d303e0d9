"""Data models for the resume rendering core."""

from resume_studio.models.resume import (
    EducationEntry,
    ExperienceEntry,
    ResumeRecord,
    load_record,
)
from resume_studio.models.template import (
    FontPairing,
    LayoutFlags,
    Palette,
    TemplateConfiguration,
)

__all__ = [
    "EducationEntry",
    "ExperienceEntry",
    "FontPairing",
    "LayoutFlags",
    "Palette",
    "ResumeRecord",
    "TemplateConfiguration",
    "load_record",
]
