from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# --- Path bootstrap (keep stable imports no matter how streamlit is launched)
REPO_ROOT = Path(__file__).resolve().parents[2]
SRC = REPO_ROOT / "src"
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from app.ui import manpower_payments, manpower_submissions  # noqa: E402
from manpoweradmin.config import configure_logging, get_settings  # noqa: E402

SCREENS = {
    "Manpower Submissions": manpower_submissions.render,
    "Manpower Payments": manpower_payments.render,
}


def main() -> None:
    configure_logging()
    st.set_page_config(page_title="Manpower Admin", layout="wide")

    s = get_settings()
    st.sidebar.title("Manpower Admin")
    screen = st.sidebar.radio("Screen", list(SCREENS), key="screen")
    st.sidebar.divider()
    st.sidebar.caption(f"Store: `{s.store_backend}` · Env: `{s.environment}`")

    SCREENS[screen]()


if __name__ == "__main__":
    main()
