from __future__ import annotations

from typing import Optional

import streamlit as st

from manpoweradmin.managers.review_manager import ReviewManager
from manpoweradmin.records.submission_schema import ManpowerDocument
from manpoweradmin.services.document_service import DocumentError, classify_document, prepare_download
from manpoweradmin.services.format_service import format_date, format_file_size


# ----------------------------
# Banners
# ----------------------------
def render_banners(manager: ReviewManager, key: str) -> None:
    n = manager.notifications
    err = n.active_error
    if err is not None:
        c1, c2 = st.columns([12, 1])
        c1.error(err.message)
        if c2.button("✕", key=f"{key}_dismiss_error", help="Dismiss"):
            n.clear_error()
            st.rerun()
    ok = n.active_success
    if ok is not None:
        st.success(ok.message)
    skipped = manager.state.skipped_ids
    if skipped:
        st.warning(f"Skipped {len(skipped)} malformed {manager.label}: {', '.join(skipped)}")


def stat_tile(col, label: str, value) -> None:
    with col.container(border=True):
        st.metric(label, value)


# ----------------------------
# Document preview + download
# ----------------------------
def render_download_button(document: Optional[ManpowerDocument], key: str) -> None:
    try:
        payload = prepare_download(document)
    except DocumentError as e:
        st.error(f"Error downloading document: {e}")
        return
    st.download_button(
        "⬇️ Download",
        data=payload.data,
        file_name=payload.file_name,
        mime=payload.mime_type,
        key=key,
        use_container_width=True,
    )


def render_document_preview(document: Optional[ManpowerDocument], key: str) -> None:
    try:
        preview = classify_document(document)
    except DocumentError as e:
        st.warning(str(e))
        return

    if preview.mode == "image":
        try:
            st.image(prepare_download(document).data, caption=f"Preview of {preview.file_name}")
        except DocumentError as e:
            st.error(str(e))
    elif preview.mode == "pdf":
        st.markdown(
            f'<iframe src="{preview.data_url}" width="100%" height="500px" title="PDF: {preview.file_name}"></iframe>',
            unsafe_allow_html=True,
        )
        st.caption("PDF Preview")
    elif preview.mode == "text":
        st.code(preview.text or "", language=None)
        st.caption("Text Content Preview")
    else:
        st.info(f"Preview not available for this file type ({preview.mime_type or 'unknown'}).")

    render_download_button(document, key=f"{key}_download")


def render_document_meta(document: ManpowerDocument) -> None:
    st.markdown(f"**File Name:** {document.file_name or 'N/A'}")
    st.markdown(f"**File Type:** {document.file_type or 'N/A'}")
    st.markdown(f"**Uploaded:** {format_date(document.uploaded_at)}")
    st.markdown(f"**File Size:** {format_file_size(document.file_size)}")
