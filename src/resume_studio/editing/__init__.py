"""Path-addressed editing of the resume record."""

from resume_studio.editing.paths import (
    apply_update,
    get_at,
    join_skills,
    normalize_path,
    split_skills,
)
from resume_studio.editing.session import EditSession

__all__ = [
    "EditSession",
    "apply_update",
    "get_at",
    "join_skills",
    "normalize_path",
    "split_skills",
]
