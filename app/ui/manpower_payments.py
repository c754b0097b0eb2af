from __future__ import annotations

from typing import List

import streamlit as st

from app.ui.session_keys import forget_row_selects, row_status_key
from app.ui.shared import payment_manager
from app.ui.widgets import render_banners, stat_tile
from manpoweradmin.managers.review_manager import PaymentReviewManager
from manpoweradmin.records.payment_schema import PAYMENT_STATUSES, SERVICE_CATEGORIES, ManpowerPayment
from manpoweradmin.services.filter_service import ALL
from manpoweradmin.services.format_service import (
    badge,
    format_currency,
    format_date,
    format_label,
    format_status,
    payment_status_color,
    service_category_color,
)

KEY = "pay"


def _on_status_change(manager: PaymentReviewManager, payment_id: str, widget_key: str) -> None:
    new_status = st.session_state.get(widget_key)
    if not new_status:
        return
    if not manager.update_status(payment_id, new_status):
        st.session_state.pop(widget_key, None)


def _on_verify(manager: PaymentReviewManager, payment: ManpowerPayment) -> None:
    manager.toggle_verified(payment.id, payment.verified)


@st.dialog("Payment Details", width="large")
def _details_dialog(p: ManpowerPayment) -> None:
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("#### User Information")
        st.markdown(f"**Email:** {p.user_email or 'N/A'}")
        st.markdown(f"**User ID:** {p.user_id or 'N/A'}")
        st.markdown("#### Payment Information")
        st.markdown(f"**Payment ID:** {p.payment_id or 'N/A'}")
        st.markdown(f"**Payment Method:** {p.payment_method or 'N/A'}")
        st.markdown(f"**Transaction ID:** {p.transaction_id or 'N/A'}")
        st.markdown(
            "**Service Category:** "
            + badge(format_label(p.service_category), service_category_color(p.service_category))
        )
    with c2:
        st.markdown("#### Transaction Details")
        st.markdown(f"**Amount:** {format_currency(p.amount)}")
        st.markdown(f"**Submitted:** {format_date(p.submitted_at, with_time=True)}")
        st.markdown(f"**Transaction Date:** {format_date(p.transaction_date, with_time=True)}")
        st.markdown("**Status:** " + badge(format_status(p.status), payment_status_color(p.status)))
        st.markdown(f"**Verified:** {'✅ Verified' if p.verified else '⏳ Pending'}")

    if p.additional_notes:
        st.markdown("#### Additional Notes")
        st.write(p.additional_notes)


def _render_row(manager: PaymentReviewManager, p: ManpowerPayment) -> None:
    busy = manager.is_busy(p.id)
    with st.container(border=True):
        c1, c2, c3, c4, c5 = st.columns([2.4, 1.6, 1.4, 1.4, 2.0])
        with c1:
            st.markdown(f"**{p.user_email or 'N/A'}**")
            st.caption(f"User ID: {p.user_id or 'N/A'}")
            st.markdown(f"**Method:** {p.payment_method or 'N/A'}")
            if p.transaction_id:
                st.caption(f"TXN: {p.transaction_id}")
        with c2:
            st.markdown(badge(format_label(p.service_category), service_category_color(p.service_category)))
            st.markdown(f"**{format_currency(p.amount)}**")
        with c3:
            st.markdown(badge(format_status(p.status), payment_status_color(p.status)))
            st.markdown("✅ Verified" if p.verified else "⏳ Pending")
        with c4:
            st.caption(format_date(p.submitted_at, with_time=True))
        with c5:
            b1, b2 = st.columns(2)
            if b1.button("👁", key=f"{KEY}_view_{p.id}", help="View Details"):
                _details_dialog(p)
            b2.button(
                "✖" if p.verified else "✔",
                key=f"{KEY}_verify_{p.id}",
                help=("Unverify" if p.verified else "Verify") if p.can_verify else "Complete payment first",
                disabled=busy or not p.can_verify,
                on_click=_on_verify,
                args=(manager, p),
            )
            widget_key = row_status_key(KEY, p.id)
            options: List[str] = list(PAYMENT_STATUSES)
            st.selectbox(
                "Status",
                options,
                index=options.index(p.status) if p.status in options else None,
                key=widget_key,
                format_func=format_label,
                placeholder=format_label(p.status),
                label_visibility="collapsed",
                disabled=busy,
                on_change=_on_status_change,
                args=(manager, p.id, widget_key),
            )


def render() -> None:
    manager = payment_manager()
    state = manager.state
    f = state.filters

    h1, h2 = st.columns([5, 1])
    h1.markdown("## 💳 Manpower Service Payments")
    h1.caption("Manage manpower service payment transactions")
    h2.markdown(f"### Total: {len(state.records)}")

    render_banners(manager, KEY)

    c1, c2, c3, c4 = st.columns([4, 3, 3, 2])
    f.search_term = c1.text_input(
        "Search",
        value=f.search_term,
        placeholder="Search by email, transaction ID, payment ID...",
        key=f"{KEY}_search",
    )
    f.status = c2.selectbox(
        "Status",
        [ALL, *PAYMENT_STATUSES],
        format_func=lambda v: "All Status" if v == ALL else format_label(v),
        key=f"{KEY}_status_filter",
    )
    f.service_category = c3.selectbox(
        "Service Category",
        [ALL, *SERVICE_CATEGORIES],
        format_func=lambda v: "All Services" if v == ALL else format_label(v),
        key=f"{KEY}_category_filter",
    )
    c4.write("")
    if c4.button("🔄 Refresh", key=f"{KEY}_refresh", use_container_width=True, disabled=state.loading):
        with st.spinner("Loading manpower payments..."):
            manager.load()
        forget_row_selects(st.session_state, KEY)
        st.rerun()

    stats = manager.stats()
    t = st.columns(6)
    stat_tile(t[0], "Total", stats.total)
    stat_tile(t[1], "Pending", stats.pending)
    stat_tile(t[2], "Processing", stats.processing)
    stat_tile(t[3], "Approved", stats.approved)
    stat_tile(t[4], "Completed", stats.completed)
    stat_tile(t[5], "Total Amount", format_currency(stats.total_amount))

    rows = manager.view()
    st.markdown(f"### Manpower Service Payments ({len(rows)})")
    if not rows:
        st.info("No payments found")
    for p in rows:
        _render_row(manager, p)
