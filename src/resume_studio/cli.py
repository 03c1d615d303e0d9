"""CLI interface using typer + rich."""

from __future__ import annotations

import json
import webbrowser
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text

from resume_studio.config import load_config
from resume_studio.errors import ExportError, TemplateNotFoundError
from resume_studio.export.pdf_renderer import render_pdf
from resume_studio.models.resume import ResumeRecord, load_record
from resume_studio.templates.docx_renderer import render_docx
from resume_studio.templates.loader import all_templates, get_template
from resume_studio.templates.renderer import render_preview, save_html
from resume_studio.utils.diffing import diff_words
from resume_studio.utils.plaintext import to_plain_text

app = typer.Typer(
    name="resume-studio",
    help="Render one resume record as an HTML preview, DOCX or PDF",
    no_args_is_help=True,
)
console = Console()

_DIFF_STYLES = {"added": "bold green", "removed": "red strike", "unchanged": "dim"}


def _load(file: Path) -> ResumeRecord:
    if not file.exists():
        console.print(f"[red]Resume file not found: {file}[/red]")
        raise typer.Exit(1)
    try:
        return load_record(file)
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Invalid resume record {file}: {e}[/red]")
        raise typer.Exit(1)


def _resolve_template(template: str | None) -> str:
    template_id = template or load_config().render.default_template
    try:
        get_template(template_id)
    except TemplateNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return template_id


def _output_path(file: Path, output: Path | None, suffix: str) -> Path:
    if output is not None:
        return output
    return load_config().export.resolved_output_dir / file.with_suffix(suffix).name


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


@app.command()
def templates() -> None:
    """List the available visual templates."""
    table = Table(title="Templates")
    table.add_column("id", style="bold")
    table.add_column("name")
    table.add_column("fonts")
    table.add_column("header")
    table.add_column("sections")
    for tmpl in all_templates():
        table.add_row(
            tmpl.id,
            tmpl.name,
            f"{tmpl.fonts.heading} / {tmpl.fonts.body}",
            tmpl.layout.header_alignment,
            tmpl.layout.section_header_style,
        )
    console.print(table)


@app.command()
def preview(
    file: Path = typer.Argument(help="Resume record (.json)"),
    template: str = typer.Option(None, "--template", "-t", help="Template id"),
    output: Path = typer.Option(None, "--output", "-o", help="Output path (.html)"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Emit editable regions"),
    open_browser: bool = typer.Option(False, "--open", help="Open the result in a browser"),
) -> None:
    """Render the resume as an HTML preview."""
    record = _load(file)
    template_id = _resolve_template(template)
    config = load_config()

    html = render_preview(
        record,
        template_id,
        interactive=interactive,
        show_page_break=config.render.show_page_break,
    )
    html_path = save_html(html, str(_output_path(file, output, ".html")))
    console.print(f"[green]HTML written: {html_path}[/green]")
    if open_browser:
        webbrowser.open(html_path.resolve().as_uri())


@app.command()
def docx(
    file: Path = typer.Argument(help="Resume record (.json)"),
    template: str = typer.Option(None, "--template", "-t", help="Template id"),
    output: Path = typer.Option(None, "--output", "-o", help="Output path (.docx)"),
) -> None:
    """Export the resume as a Word document."""
    record = _load(file)
    template_id = _resolve_template(template)
    config = load_config()

    try:
        data = render_docx(record, template_id, creator=config.export.docx_creator)
    except ExportError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    path = _output_path(file, output, ".docx")
    _write_bytes(path, data)
    console.print(f"[green]DOCX written: {path} ({len(data):,} bytes)[/green]")


@app.command()
def pdf(
    file: Path = typer.Argument(help="Resume record (.json)"),
    template: str = typer.Option(None, "--template", "-t", help="Template id"),
    output: Path = typer.Option(None, "--output", "-o", help="Output path (.pdf)"),
) -> None:
    """Export the resume as a PDF."""
    record = _load(file)
    template_id = _resolve_template(template)
    config = load_config()

    try:
        data = render_pdf(
            record,
            template_id,
            compress=config.export.pdf_compress,
            font_path=config.export.pdf_font_path,
        )
    except ExportError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    path = _output_path(file, output, ".pdf")
    _write_bytes(path, data)
    console.print(f"[green]PDF written: {path} ({len(data):,} bytes)[/green]")


@app.command()
def text(
    file: Path = typer.Argument(help="Resume record (.json)"),
) -> None:
    """Print the plain-text reconstruction of the resume."""
    record = _load(file)
    console.print(to_plain_text(record), markup=False, highlight=False)


@app.command()
def diff(
    original: Path = typer.Argument(help="Original resume record (.json)"),
    revised: Path = typer.Argument(help="Revised resume record (.json)"),
) -> None:
    """Show a word-level diff between two resume records."""
    before = to_plain_text(_load(original))
    after = to_plain_text(_load(revised))

    segments = diff_words(before, after)
    rendered = Text()
    for seg in segments:
        rendered.append(seg.text, style=_DIFF_STYLES[seg.kind])
    console.print(rendered)

    added = sum(1 for s in segments if s.added)
    removed = sum(1 for s in segments if s.removed)
    console.print(f"\n[dim]{added} added, {removed} removed[/dim]")


if __name__ == "__main__":
    app()
