"""Streamlit component hosting the interactive preview.

The preview page posts ``resume-edit`` and ``linkedin-mode`` messages to its
parent window. The component frame forwards each one to Python as the
component value, tagged with a unique ``id`` so a value Streamlit replays on
a later rerun is not applied twice.
"""

from __future__ import annotations

from pathlib import Path

import streamlit.components.v1 as components

_FRONTEND_DIR = Path(__file__).parent / "frontend"

_preview_component = components.declare_component("resume_preview", path=str(_FRONTEND_DIR))


def preview_editor(html: str, height: int = 1150, key: str = "preview") -> dict | None:
    """Show the interactive preview; returns the newest message it posted."""
    return _preview_component(html=html, height=height, key=key, default=None)


class MessageTracker:
    """Remembers the last handled message id so replays are skipped."""

    def __init__(self):
        self.last_id: str | None = None

    def is_new(self, message: dict | None) -> bool:
        if not message or message.get("id") is None:
            return False
        if message["id"] == self.last_id:
            return False
        self.last_id = message["id"]
        return True
