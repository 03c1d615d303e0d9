"""Streamlit Web UI for resume-studio.

Upload a resume record (.json), edit it in the live preview or field by
field, then download it as DOCX or PDF.
"""

from __future__ import annotations

import html
import json
import logging

logger = logging.getLogger(__name__)

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from resume_studio.config import load_config
from resume_studio.editing import EditSession
from resume_studio.errors import ExportError, InvalidPathError
from resume_studio.models.resume import ResumeRecord
from resume_studio.templates.loader import all_templates
from resume_studio.templates.renderer import editable_regions
from resume_studio.utils.diffing import diff_records
from resume_studio.web.preview_component import MessageTracker, preview_editor

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Resume Studio",
    page_icon=":page_facing_up:",
    layout="wide",
)

config = load_config()

if "session" not in st.session_state:
    st.session_state.session = EditSession(template_id=config.render.default_template)
    st.session_state.original = st.session_state.session.record
    st.session_state.revision = 0
    st.session_state.preview_messages = MessageTracker()

session: EditSession = st.session_state.session

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

with st.sidebar:
    st.title("Resume Studio")
    st.caption("Preview, edit and export one resume")

    uploaded = st.file_uploader("Resume record", type=["json"], help="camelCase or snake_case JSON")
    if uploaded is not None and st.session_state.get("uploaded_name") != uploaded.name:
        try:
            record = ResumeRecord.from_payload(json.loads(uploaded.getvalue().decode("utf-8")))
        except ValueError as e:
            st.error(f"Could not read {uploaded.name}: {e}")
        else:
            session.replace_record(record)
            st.session_state.original = record
            st.session_state.uploaded_name = uploaded.name
            st.session_state.revision += 1

    st.divider()

    templates = all_templates()
    ids = [t.id for t in templates]
    chosen = st.selectbox(
        "Template",
        ids,
        index=ids.index(session.template.id),
        format_func=lambda tid: next(t.name for t in templates if t.id == tid),
    )
    if chosen != session.template.id:
        session.select_template(chosen)
    st.caption(session.template.description)

    show_page_break = st.checkbox("Show end-of-page marker", value=config.render.show_page_break)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _field_key(path: tuple) -> str:
    return f"field-{st.session_state.revision}-" + ".".join(str(step) for step in path)


def _commit(path: tuple) -> None:
    try:
        session.commit_text(path, st.session_state[_field_key(path)])
    except InvalidPathError as e:
        st.error(str(e))


def _diff_html() -> str:
    colors = {"added": "#bbf7d0", "removed": "#fecaca", "unchanged": "transparent"}
    spans = []
    for seg in diff_records(st.session_state.original, session.record):
        deco = "line-through" if seg.removed else "none"
        spans.append(
            f'<span style="background:{colors[seg.kind]};text-decoration:{deco}">'
            f"{html.escape(seg.text)}</span>"
        )
    return '<div style="white-space:pre-wrap;font-family:monospace;font-size:12px">' + "".join(spans) + "</div>"


def _file_stem() -> str:
    name = session.record.full_name.strip() or "resume"
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in name)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

col_edit, col_preview = st.columns([2, 3])

with col_edit:
    st.header("Fields")

    link_label = "Done editing LinkedIn" if session.linkedin_editing else "Edit LinkedIn URL"
    if st.button(link_label):
        if session.linkedin_editing:
            session.finish_linkedin_edit()
        else:
            session.start_linkedin_edit()
        st.rerun()

    for region in editable_regions(session.record, session.template.id):
        if region.path == ("linkedin",) and not session.linkedin_editing:
            continue
        key = _field_key(region.path)
        widget = st.text_area if region.path in (("summary",), ("skills",)) else st.text_input
        widget(region.label, value=region.value, key=key, on_change=_commit, args=(region.path,))

    st.divider()
    dl_cols = st.columns(2)
    with dl_cols[0]:
        try:
            st.download_button(
                label="Download DOCX",
                data=session.export_docx(),
                file_name=f"{_file_stem()}.docx",
                mime=DOCX_MIME,
                type="secondary",
            )
        except ExportError as e:
            logger.exception("DOCX export failed")
            st.warning(str(e))
    with dl_cols[1]:
        try:
            st.download_button(
                label="Download PDF",
                data=session.export_pdf(font_path=config.export.pdf_font_path),
                file_name=f"{_file_stem()}.pdf",
                mime="application/pdf",
                type="secondary",
            )
        except ExportError as e:
            logger.exception("PDF export failed")
            st.warning(str(e))

with col_preview:
    tab_preview, tab_diff = st.tabs(["Preview", "Changes"])
    with tab_preview:
        st.caption("Click any field in the preview to edit it; changes apply when it loses focus.")
        message = preview_editor(session.render_preview(interactive=True, show_page_break=show_page_break))
        if st.session_state.preview_messages.is_new(message):
            try:
                changed = session.handle_message(message)
            except InvalidPathError as e:
                st.error(str(e))
            else:
                if changed:
                    # Field inputs are keyed by revision; bump it so they show the new values
                    st.session_state.revision += 1
                    st.rerun()
    with tab_diff:
        st.markdown(_diff_html(), unsafe_allow_html=True)
