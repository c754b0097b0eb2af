from __future__ import annotations

import streamlit as st

from manpoweradmin.config import get_settings
from manpoweradmin.core.store import DocumentStore, build_store
from manpoweradmin.managers.review_manager import PaymentReviewManager, SubmissionReviewManager


@st.cache_resource
def get_store() -> DocumentStore:
    """One store client per Streamlit server process."""
    return build_store(get_settings())


def submission_manager() -> SubmissionReviewManager:
    if "submission_manager" not in st.session_state:
        m = SubmissionReviewManager(get_store())
        m.load()
        st.session_state["submission_manager"] = m
    return st.session_state["submission_manager"]


def payment_manager() -> PaymentReviewManager:
    if "payment_manager" not in st.session_state:
        m = PaymentReviewManager(get_store())
        m.load()
        st.session_state["payment_manager"] = m
    return st.session_state["payment_manager"]
