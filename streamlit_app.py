# streamlit_app.py
# Company Scout: company intelligence lookup
# Run: streamlit run streamlit_app.py

import streamlit as st

from company_scout import view_state as vs
from company_scout.analysis import get_company_details
from company_scout.config import Settings, configure_logging
from company_scout.dashboard import render_company_info, render_error, render_landing
from company_scout.errors import AnalysisFailedError

settings = Settings.from_env()
configure_logging(settings.log_level)

# ---------------------------
# Streamlit config + layout
# ---------------------------
st.set_page_config(page_title="Scout Pro — 公司情报", page_icon="⚡", layout="wide")
st.markdown(
    """
    <style>
      .block-container { max-width: 1200px; margin: auto; }
      .stCaption { opacity: .8 }
    </style>
    """,
    unsafe_allow_html=True,
)
st.title("⚡ Scout Pro")
st.caption(f"OpenAI key loaded: {'yes' if settings.api_key else 'no'}")

# ===============================================================
# UI state
# ===============================================================
if "view" not in st.session_state:
    st.session_state.view = vs.Idle()

# A Loading view at script start belongs to a run that was interrupted
# (rerun, stop, crash) before it settled.
st.session_state.view = vs.abandon(st.session_state.view)


def _run(state: vs.ViewState) -> None:
    """Drive one Loading state to Ready/Failed and store the result."""
    st.session_state.view = state
    if not isinstance(state, vs.Loading):
        return
    try:
        with st.spinner(f"正在全网扫描 {state.query} ..."):
            info = get_company_details(state.query, settings=settings)
    except AnalysisFailedError:
        st.session_state.view = vs.fail(st.session_state.view, state.token)
    except Exception:
        # Streamlit rerun/stop signals are BaseException and pass through.
        st.session_state.view = vs.fail(st.session_state.view, state.token)
        raise
    else:
        st.session_state.view = vs.succeed(st.session_state.view, state.token, info)


def search(query: str) -> None:
    _run(vs.submit(st.session_state.view, query))


def pick_example(query: str) -> None:
    search(query)
    st.rerun()


def retry() -> None:
    _run(vs.retry(st.session_state.view))
    st.rerun()


with st.sidebar:
    st.caption("Scout Pro")
    if st.button("清空结果", use_container_width=True):
        st.session_state.view = vs.reset(st.session_state.view)
        st.rerun()

with st.form("company_form", clear_on_submit=False):
    query = st.text_input("公司名称", placeholder="输入公司全名，例如：字节跳动")
    submitted = st.form_submit_button(
        "全网扫描",
        use_container_width=True,
        disabled=isinstance(st.session_state.view, vs.Loading),
    )

if submitted:
    if query.strip():
        search(query)
    else:
        st.warning("请输入公司名称。")

# ===============================================================
# Main view
# ===============================================================
view = st.session_state.view

if isinstance(view, vs.Idle):
    render_landing(on_pick=pick_example)
elif isinstance(view, vs.Failed):
    render_error(view.message, on_retry=retry)
elif isinstance(view, vs.Ready):
    render_company_info(view.info)

st.divider()
st.caption("Professional Career Intelligence Tool")
