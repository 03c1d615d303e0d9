"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from resume_studio.templates.loader import DEFAULT_TEMPLATE_ID


@dataclass(frozen=True)
class RenderConfig:
    default_template: str = DEFAULT_TEMPLATE_ID
    show_page_break: bool = True


@dataclass(frozen=True)
class ExportConfig:
    docx_creator: str = "resume-studio"
    pdf_compress: bool = True
    pdf_font_path: str | None = None
    output_dir: str = "./output"

    @property
    def resolved_output_dir(self) -> Path:
        return Path(self.output_dir).expanduser()


@dataclass(frozen=True)
class AppConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        render=RenderConfig(**(raw.get("render") or {})),
        export=ExportConfig(**(raw.get("export") or {})),
    )
