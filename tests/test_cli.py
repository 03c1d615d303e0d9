"""Tests for the typer CLI."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from resume_studio.cli import app

runner = CliRunner()


class TestCli:
    def test_templates(self):
        result = runner.invoke(app, ["templates"])
        assert result.exit_code == 0
        for template_id in ("modern", "classic", "minimalist"):
            assert template_id in result.output

    def test_docx(self, record_file, tmp_path):
        out = tmp_path / "out" / "jane.docx"
        result = runner.invoke(app, ["docx", str(record_file), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_bytes()[:2] == b"PK"

    def test_pdf(self, record_file, tmp_path):
        out = tmp_path / "jane.pdf"
        result = runner.invoke(app, ["pdf", str(record_file), "--template", "classic", "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_bytes()[:4] == b"%PDF"

    def test_preview(self, record_file, tmp_path):
        out = tmp_path / "jane.html"
        result = runner.invoke(app, ["preview", str(record_file), "-o", str(out), "--interactive"])
        assert result.exit_code == 0, result.output
        html = out.read_text(encoding="utf-8")
        assert "contenteditable" in html
        assert "Jane Doe" in html

    def test_text(self, record_file):
        result = runner.invoke(app, ["text", str(record_file)])
        assert result.exit_code == 0
        assert "Jane Doe" in result.output
        assert "PROFESSIONAL EXPERIENCE" in result.output

    def test_diff(self, record_file, tmp_path, sample_payload):
        revised = dict(sample_payload, summary="Staff engineer focused on payments.")
        revised_file = tmp_path / "revised.json"
        revised_file.write_text(json.dumps(revised), encoding="utf-8")
        result = runner.invoke(app, ["diff", str(record_file), str(revised_file)])
        assert result.exit_code == 0, result.output
        assert "added" in result.output
        assert "removed" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["docx", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_json(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{nope")
        result = runner.invoke(app, ["pdf", str(bad)])
        assert result.exit_code == 1
        assert "Invalid resume record" in result.output

    @pytest.mark.parametrize("command", ["docx", "pdf", "preview"])
    def test_unknown_template(self, record_file, command):
        result = runner.invoke(app, [command, str(record_file), "-t", "nope"])
        assert result.exit_code == 1
        assert "Template not found" in result.output
