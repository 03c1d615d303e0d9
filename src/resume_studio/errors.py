"""Exception types raised by the rendering core."""

from __future__ import annotations


class ResumeStudioError(Exception):
    """Base class for all resume-studio errors."""


class TemplateNotFoundError(ResumeStudioError, KeyError):
    """Raised when a template id is not in the registry."""

    def __init__(self, template_id: str, available: tuple[str, ...] = ()):
        self.template_id = template_id
        self.available = available
        super().__init__(template_id)

    def __str__(self) -> str:
        known = ", ".join(self.available) or "none"
        return f"Template not found: {self.template_id!r} (available: {known})"


class ExportError(ResumeStudioError):
    """Raised when a document exporter fails. No partial output accompanies it."""

    def __init__(self, fmt: str, message: str):
        self.format = fmt
        super().__init__(f"{fmt} export failed: {message}")


class InvalidPathError(ResumeStudioError, LookupError):
    """Raised when a path-addressed update does not resolve to a field."""

    def __init__(self, path: tuple, reason: str):
        self.path = path
        super().__init__(f"Invalid path {list(path)!r}: {reason}")
