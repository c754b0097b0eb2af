from __future__ import annotations

from typing import List

import streamlit as st

from app.ui.session_keys import forget_row_selects, row_status_key, take_pending
from app.ui.shared import submission_manager
from app.ui.widgets import render_banners, render_document_meta, render_document_preview, stat_tile
from manpoweradmin.managers.review_manager import SubmissionReviewManager
from manpoweradmin.records.submission_schema import (
    DESTINATION_COUNTRIES,
    SERVICE_TYPES,
    SUBMISSION_STATUSES,
    ManpowerSubmission,
)
from manpoweradmin.services.filter_service import ALL
from manpoweradmin.services.format_service import (
    badge,
    calculate_age,
    format_date,
    format_label,
    format_status,
    service_type_color,
    submission_status_color,
)

KEY = "subm"


# ----------------------------
# Callbacks
# ----------------------------
def _on_status_change(manager: SubmissionReviewManager, submission_id: str, widget_key: str) -> None:
    new_status = st.session_state.get(widget_key)
    if not new_status:
        return
    if not manager.update_status(submission_id, new_status):
        # Re-create the select from the unchanged record on the next run.
        st.session_state.pop(widget_key, None)


def _on_verify(manager: SubmissionReviewManager, submission: ManpowerSubmission) -> None:
    manager.toggle_verified(submission.id, submission.verified)


def _ask_delete(submission_id: str) -> None:
    st.session_state[f"{KEY}_confirm_delete"] = submission_id


# ----------------------------
# Dialogs
# ----------------------------
@st.dialog("Manpower Submission Details", width="large")
def _details_dialog(submission: ManpowerSubmission) -> None:
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("#### Personal Information")
        st.markdown(f"**Full Name:** {submission.full_name or 'N/A'}")
        st.markdown(f"**Date of Birth:** {format_date(submission.date_of_birth)}")
        st.markdown(f"**Age:** {calculate_age(submission.date_of_birth)}")
        st.markdown(f"**Nationality:** {submission.nationality or 'N/A'}")
        st.markdown(f"**Passport Number:** {submission.passport_number or 'N/A'}")
        st.markdown("#### Contact Information")
        st.markdown(f"**Email:** {submission.email or 'N/A'}")
        st.markdown(f"**Contact Number:** {submission.contact_number or 'N/A'}")
        st.markdown(f"**User Email:** {submission.user_email or 'N/A'}")
        st.markdown(f"**User ID:** {submission.user_id or 'N/A'}")
    with c2:
        st.markdown("#### Service Information")
        st.markdown(f"**Submission ID:** {submission.submission_id or 'N/A'}")
        st.markdown(f"**Destination Country:** {submission.destination_country or 'N/A'}")
        st.markdown(
            "**Service Type:** "
            + badge(format_label(submission.service_type), service_type_color(submission.service_type))
        )
        st.markdown(
            "**Status:** " + badge(format_status(submission.status), submission_status_color(submission.status))
        )
        st.markdown(f"**Verified:** {'✅ Verified' if submission.verified else '⏳ Pending'}")
        st.markdown(f"**Submitted:** {format_date(submission.submitted_at)}")

    if submission.additional_notes:
        st.markdown("#### Additional Notes")
        st.write(submission.additional_notes)

    if submission.document is not None:
        st.markdown("#### Uploaded Document")
        render_document_meta(submission.document)
        render_document_preview(submission.document, key=f"{KEY}_detail_doc_{submission.id}")


@st.dialog("Document Preview", width="large")
def _document_dialog(submission: ManpowerSubmission) -> None:
    name = submission.document.file_name if submission.document else None
    st.caption(name or "Unknown file")
    render_document_preview(submission.document, key=f"{KEY}_doc_{submission.id}")


@st.dialog("Delete submission")
def _confirm_delete_dialog(manager: SubmissionReviewManager, submission_id: str) -> None:
    st.warning("Are you sure you want to delete this manpower submission? This action cannot be undone.")
    c1, c2 = st.columns(2)
    if c1.button("Delete", type="primary", use_container_width=True, disabled=manager.is_busy(submission_id)):
        manager.delete(submission_id, confirmed=True)
        st.rerun()
    if c2.button("Cancel", use_container_width=True):
        st.rerun()


# ----------------------------
# Table
# ----------------------------
def _render_row(manager: SubmissionReviewManager, s: ManpowerSubmission) -> None:
    busy = manager.is_busy(s.id)
    with st.container(border=True):
        c1, c2, c3, c4, c5 = st.columns([2.2, 2.0, 1.6, 1.4, 2.0])
        with c1:
            st.markdown(f"**{s.full_name or 'N/A'}**")
            st.caption(
                f"Passport: {s.passport_number or 'N/A'} · Nationality: {s.nationality or 'N/A'} · "
                f"Age: {calculate_age(s.date_of_birth)}"
            )
        with c2:
            st.markdown(f"**Email:** {s.email or 'N/A'}  \n**Phone:** {s.contact_number or 'N/A'}")
            st.caption(f"User: {s.user_email or 'N/A'}")
        with c3:
            st.markdown(f"🌍 {s.destination_country or 'N/A'}")
            st.markdown(badge(format_label(s.service_type), service_type_color(s.service_type)))
        with c4:
            st.markdown(badge(format_status(s.status), submission_status_color(s.status)))
            st.markdown("✅ Verified" if s.verified else "⏳ Pending")
            st.caption(format_date(s.submitted_at))
        with c5:
            b1, b2, b3, b4 = st.columns(4)
            if b1.button("👁", key=f"{KEY}_view_{s.id}", help="View Details"):
                _details_dialog(s)
            if s.document is not None and b2.button("📄", key=f"{KEY}_docbtn_{s.id}", help=s.document.file_name):
                _document_dialog(s)
            b3.button(
                "✖" if s.verified else "✔",
                key=f"{KEY}_verify_{s.id}",
                help="Unverify" if s.verified else "Verify",
                disabled=busy,
                on_click=_on_verify,
                args=(manager, s),
            )
            b4.button(
                "🗑",
                key=f"{KEY}_delete_{s.id}",
                help="Delete",
                disabled=busy,
                on_click=_ask_delete,
                args=(s.id,),
            )
            widget_key = row_status_key(KEY, s.id)
            options: List[str] = list(SUBMISSION_STATUSES)
            st.selectbox(
                "Status",
                options,
                index=options.index(s.status) if s.status in options else None,
                key=widget_key,
                format_func=format_label,
                placeholder=format_label(s.status),
                label_visibility="collapsed",
                disabled=busy,
                on_change=_on_status_change,
                args=(manager, s.id, widget_key),
            )


def render() -> None:
    manager = submission_manager()
    state = manager.state
    f = state.filters

    h1, h2 = st.columns([5, 1])
    h1.markdown("## 👥 Manpower Submissions Management")
    h1.caption("Manage and review manpower service applications")
    h2.markdown(f"### Total: {len(state.records)}")

    render_banners(manager, KEY)

    c1, c2, c3, c4, c5 = st.columns([3, 2, 2, 2, 1])
    f.search_term = c1.text_input(
        "Search",
        value=f.search_term,
        placeholder="Search by name, email, passport, submission ID...",
        key=f"{KEY}_search",
    )
    f.status = c2.selectbox(
        "Status",
        [ALL, *SUBMISSION_STATUSES],
        format_func=lambda v: "All Status" if v == ALL else format_label(v),
        key=f"{KEY}_status_filter",
    )
    f.destination_country = c3.selectbox(
        "Country",
        [ALL, *DESTINATION_COUNTRIES],
        format_func=lambda v: "All Countries" if v == ALL else v,
        key=f"{KEY}_country_filter",
    )
    f.service_type = c4.selectbox(
        "Service Type",
        [ALL, *SERVICE_TYPES],
        format_func=lambda v: "All Services" if v == ALL else format_label(v),
        key=f"{KEY}_service_filter",
    )
    c5.write("")
    if c5.button("🔄 Refresh", key=f"{KEY}_refresh", use_container_width=True, disabled=state.loading):
        with st.spinner("Loading manpower submissions..."):
            manager.load()
        forget_row_selects(st.session_state, KEY)
        st.rerun()

    stats = manager.stats()
    t = st.columns(6)
    stat_tile(t[0], "Total Submissions", stats.total)
    stat_tile(t[1], "Pending", stats.pending)
    stat_tile(t[2], "Approved", stats.approved)
    stat_tile(t[3], "Rejected", stats.rejected)
    stat_tile(t[4], "Verified", stats.verified)
    stat_tile(t[5], "Countries", stats.countries)

    rows = manager.view()
    st.markdown(f"### Manpower Submissions ({len(rows)})")
    if not rows:
        st.info("No manpower submissions found")
    for s in rows:
        _render_row(manager, s)

    pending_delete = take_pending(st.session_state, f"{KEY}_confirm_delete")
    if pending_delete:
        _confirm_delete_dialog(manager, pending_delete)
