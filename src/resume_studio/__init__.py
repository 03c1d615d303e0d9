"""Render one resume record into an editable preview, a DOCX and a PDF."""

__version__ = "0.3.0"
