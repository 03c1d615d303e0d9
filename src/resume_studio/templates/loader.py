"""Fixed registry of named template configurations.

Configurations ship as YAML files under ``styles/`` and are loaded once.
Nothing else in the package constructs a ``TemplateConfiguration``, so every
renderer sees exactly the same values for a given id.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import yaml

from resume_studio.errors import TemplateNotFoundError
from resume_studio.models.template import TemplateConfiguration

STYLES_DIR = Path(__file__).parent / "styles"

DEFAULT_TEMPLATE_ID = "modern"


@lru_cache(maxsize=1)
def _registry() -> Mapping[str, TemplateConfiguration]:
    entries: list[tuple[int, TemplateConfiguration]] = []
    for path in STYLES_DIR.glob("*.yaml"):
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        order = int(data.pop("order", 99))
        entries.append((order, TemplateConfiguration(**data)))
    entries.sort(key=lambda e: (e[0], e[1].id))
    return MappingProxyType({tmpl.id: tmpl for _, tmpl in entries})


def get_template(template_id: str) -> TemplateConfiguration:
    """Look up a template by id."""
    registry = _registry()
    try:
        return registry[template_id]
    except KeyError:
        raise TemplateNotFoundError(template_id, tuple(registry)) from None


def list_templates() -> list[str]:
    """List template ids in display order."""
    return list(_registry())


def all_templates() -> list[TemplateConfiguration]:
    return list(_registry().values())
