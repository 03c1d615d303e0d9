"""Two-way binding between the preview and the in-memory record."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Sequence

from resume_studio.editing.paths import FieldPath, apply_update, normalize_path, split_skills
from resume_studio.errors import InvalidPathError
from resume_studio.export.pdf_renderer import render_pdf
from resume_studio.models.resume import ResumeRecord
from resume_studio.models.template import TemplateConfiguration
from resume_studio.templates.docx_renderer import render_docx
from resume_studio.templates.loader import DEFAULT_TEMPLATE_ID, get_template
from resume_studio.templates.renderer import render_preview

logger = logging.getLogger(__name__)

Listener = Callable[[ResumeRecord, FieldPath], None]


class EditSession:
    """Owns the session's record and serializes every edit to it.

    Each update is copy-then-replace under a lock, so two rapid edits can
    never interleave. Subscribers are called with the new record and the
    normalized path after each change that actually altered the record.
    """

    def __init__(
        self,
        record: ResumeRecord | dict | None = None,
        template_id: str = DEFAULT_TEMPLATE_ID,
    ):
        if not isinstance(record, ResumeRecord):
            record = ResumeRecord.from_payload(record)
        self._record = record
        self._template = get_template(template_id)
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()
        self.linkedin_editing = False

    @property
    def record(self) -> ResumeRecord:
        return self._record

    @property
    def template(self) -> TemplateConfiguration:
        return self._template

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def apply(self, path: Sequence[str | int], value: Any) -> ResumeRecord:
        steps = normalize_path(path)
        with self._lock:
            updated = apply_update(self._record, steps, value)
            if updated == self._record:
                return self._record
            self._record = updated
            logger.debug("Applied edit at %s", list(steps))
            for listener in list(self._listeners):
                listener(updated, steps)
            return updated

    def commit_text(self, path: Sequence[str | int], text: str) -> ResumeRecord:
        """Commit the text of an editable region when it loses focus."""
        steps = normalize_path(path)
        value: Any = text
        if steps == ("skills",):
            value = split_skills(text)
        return self.apply(steps, value)

    def replace_record(self, record: ResumeRecord | dict) -> ResumeRecord:
        """Swap in a record from an upstream collaborator (upload, rewrite)."""
        if not isinstance(record, ResumeRecord):
            record = ResumeRecord.from_payload(record)
        with self._lock:
            self._record = record
            for listener in list(self._listeners):
                listener(record, ())
            return record

    def select_template(self, template_id: str) -> TemplateConfiguration:
        self._template = get_template(template_id)
        return self._template

    def start_linkedin_edit(self) -> None:
        self.linkedin_editing = True

    def finish_linkedin_edit(self) -> None:
        self.linkedin_editing = False

    def handle_message(self, message: dict) -> bool:
        """Apply a message posted by the interactive preview.

        ``resume-edit`` carries the ``path`` and ``value`` of a region that
        lost focus; ``linkedin-mode`` switches the LinkedIn field between
        display and edit mode. Returns True when the record or the mode
        changed, so the host knows to re-render.
        """
        kind = message.get("type")
        if kind == "resume-edit":
            if not message.get("path"):
                raise InvalidPathError((), "preview edit without a path")
            before = self._record
            return self.commit_text(message["path"], str(message.get("value") or "")) is not before
        if kind == "linkedin-mode":
            before = self.linkedin_editing
            if message.get("editing"):
                self.start_linkedin_edit()
            else:
                self.finish_linkedin_edit()
            return self.linkedin_editing != before
        logger.debug("Ignoring preview message of type %r", kind)
        return False

    def render_preview(self, interactive: bool = True, show_page_break: bool = True) -> str:
        return render_preview(
            self._record,
            self._template.id,
            interactive=interactive,
            linkedin_editing=self.linkedin_editing,
            show_page_break=show_page_break,
        )

    def export_docx(self) -> bytes:
        return render_docx(self._record, self._template.id)

    def export_pdf(self, font_path: str | None = None) -> bytes:
        return render_pdf(self._record, self._template.id, font_path=font_path)
