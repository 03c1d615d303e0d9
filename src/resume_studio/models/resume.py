"""Pydantic models for the canonical resume record."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    extra="ignore",
)


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _coerce_texts(value: Any) -> tuple[str, ...]:
    # Upstream collaborators send null or omit arrays entirely
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(_coerce_text(v) for v in value)


class ExperienceEntry(BaseModel):
    model_config = _MODEL_CONFIG

    company: str = ""
    role: str = ""
    period: str = ""
    description: tuple[str, ...] = ()

    @field_validator("company", "role", "period", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("description", mode="before")
    @classmethod
    def _bullets(cls, value: Any) -> tuple[str, ...]:
        return _coerce_texts(value)


class EducationEntry(BaseModel):
    model_config = _MODEL_CONFIG

    institution: str = ""
    degree: str = ""
    period: str = ""

    @field_validator("institution", "degree", "period", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_text(value)


class ResumeRecord(BaseModel):
    """The single source of truth every renderer consumes.

    Instances are immutable; edits go through
    :func:`resume_studio.editing.apply_update`, which returns a new record
    sharing every untouched branch with the old one.
    """

    model_config = _MODEL_CONFIG

    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str | None = None
    summary: str = ""
    skills: tuple[str, ...] = ()
    experience: tuple[ExperienceEntry, ...] = ()
    education: tuple[EducationEntry, ...] = ()

    @field_validator("full_name", "email", "phone", "location", "summary", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("linkedin", mode="before")
    @classmethod
    def _linkedin(cls, value: Any) -> str | None:
        # None stays None: an absent LinkedIn is never rendered
        return None if value is None else _coerce_text(value)

    @field_validator("skills", mode="before")
    @classmethod
    def _skills(cls, value: Any) -> tuple[str, ...]:
        return _coerce_texts(value)

    @field_validator("experience", "education", mode="before")
    @classmethod
    def _entries(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def has_linkedin(self) -> bool:
        return bool(self.linkedin and self.linkedin.strip())

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None) -> ResumeRecord:
        """Build a record from upstream JSON (camelCase or snake_case keys)."""
        return cls.model_validate(payload or {})

    def to_payload(self) -> dict[str, Any]:
        """Dump to the camelCase JSON shape upstream collaborators exchange."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def load_record(path: str | Path) -> ResumeRecord:
    """Read a resume record from a JSON file."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Resume file not found: {p}")
    return ResumeRecord.from_payload(json.loads(p.read_text(encoding="utf-8")))
