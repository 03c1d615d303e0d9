"""PDF export module for resume-studio."""
from resume_studio.export.pdf_renderer import (
    PdfResumeWriter,
    layout_pdf,
    render_pdf,
)

__all__ = ["render_pdf", "layout_pdf", "PdfResumeWriter"]
