"""Pydantic models for named visual templates."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

HeaderAlignment = Literal["left", "center"]
SectionHeaderStyle = Literal["border-bottom", "uppercase-bold", "shaded"]

_HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    extra="forbid",
)


class FontPairing(BaseModel):
    model_config = _MODEL_CONFIG

    heading: str
    body: str


class LayoutFlags(BaseModel):
    model_config = _MODEL_CONFIG

    header_alignment: HeaderAlignment = "left"
    section_header_style: SectionHeaderStyle = "border-bottom"


class Palette(BaseModel):
    """Three hex colors stored without a leading ``#``."""

    model_config = _MODEL_CONFIG

    primary: str
    secondary: str
    text: str

    @field_validator("primary", "secondary", "text", mode="before")
    @classmethod
    def _hex(cls, value: object) -> str:
        text = str(value).strip()
        if not _HEX_COLOR.match(text):
            raise ValueError(f"expected six hex digits without '#', got {value!r}")
        return text.upper()


class TemplateConfiguration(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str
    description: str = ""
    fonts: FontPairing
    layout: LayoutFlags
    colors: Palette

    @property
    def is_centered(self) -> bool:
        return self.layout.header_alignment == "center"
