# company_scout/dashboard.py
# Renders a CompanyInfo: header + 500强 card, radar + score bars,
# benefits / history cards, news + source list.

from __future__ import annotations

import html
import re
from typing import Callable, Dict, List, Optional, Tuple

import plotly.graph_objects as go
import streamlit as st

try:
    import pandas as pd
except Exception:
    pd = None

from company_scout.models import SCORE_SUBJECTS, CompanyInfo, RadarScore
from company_scout.snapshot import snapshot_filename, to_markdown

EXAMPLES = ["华为", "小米", "微软", "美团"]

ACCENT = "#10b981"
_POINT_RE = re.compile(r"●\s*\[(.*?)\]:\s*(.*)")


def bullet_points(text: str) -> List[Tuple[Optional[str], str]]:
    """'● [label]: body' -> (label, body); other non-blank lines -> (None, line)."""
    out: List[Tuple[Optional[str], str]] = []
    for line in (text or "").split("\n"):
        m = _POINT_RE.search(line)
        if m:
            out.append((m.group(1), m.group(2)))
        elif line.strip():
            out.append((None, line.strip()))
    return out


def radar_figure(scores: Tuple[RadarScore, ...]) -> go.Figure:
    subjects = [s.subject for s in scores]
    values = [s.value for s in scores]
    fig = go.Figure()
    fig.add_trace(go.Scatterpolar(
        # close the polygon
        r=values + values[:1],
        theta=subjects + subjects[:1],
        fill="toself",
        name="综合评分",
        line=dict(color=ACCENT),
        fillcolor="rgba(16,185,129,0.4)",
    ))
    fig.update_layout(
        polar=dict(radialaxis=dict(visible=True, range=[0, 10])),
        showlegend=False,
        margin=dict(l=30, r=30, t=20, b=20),
        height=260,
    )
    return fig


def score_rows(info: CompanyInfo) -> List[Dict[str, str]]:
    return [
        {
            "维度": subject,
            "评分": f"{info.score_for(subject)}/10",
            "解读": info.explanation_for(subject) or "—",
        }
        for subject in SCORE_SUBJECTS
    ]


def _chip(text: str, bg: str = "#ecfdf5", border: str = "#a7f3d0", color: str = "#047857") -> str:
    return (
        f"<span style='background:{bg};border:1px solid {border};border-radius:999px;"
        f"padding:2px 10px;font-size:12px;color:{color};margin-right:6px'>{html.escape(text)}</span>"
    )


def render_points(text: str) -> None:
    for label, body in bullet_points(text):
        if label is None:
            st.caption(body)
        else:
            st.markdown(f"**● {label}:** {body}")


# --------------------- Views ---------------------

def render_landing(on_pick: Callable[[str], None]) -> None:
    st.markdown("## 找工作前，先看 **公司底牌**")
    st.caption("基于生成式模型与实时搜索增强，为您透视企业的 500 强排名、真实福利与未来潜力。")
    cols = st.columns(len(EXAMPLES))
    for col, tag in zip(cols, EXAMPLES):
        if col.button(tag, use_container_width=True, key=f"example_{tag}"):
            on_pick(tag)


def render_error(message: str, on_retry: Callable[[], None]) -> None:
    st.error(message)
    if st.button("点击重试", key="retry"):
        on_retry()


def render_company_info(info: CompanyInfo) -> None:
    elite = info.confirmed_fortune500

    left, right = st.columns([2, 1])
    with left:
        st.markdown(f"## {html.escape(info.name)}")
        badge = _chip("Fortune 500 Elite") if elite else _chip("Scanned Status: Active", "#f1f5f9", "#e2e8f0", "#334155")
        st.markdown(badge + _chip("Grounding: Live", "#eff6ff", "#bfdbfe", "#1d4ed8"), unsafe_allow_html=True)
        with st.container(border=True):
            st.markdown("**500强地位 / 行业地位**")
            render_points(info.is_fortune500)

    with right:
        st.markdown("**就业体验**")
        st.plotly_chart(radar_figure(info.scores), use_container_width=True)
        for subject in SCORE_SUBJECTS:
            val = info.score_for(subject)
            st.caption(f"{subject} · {val}/10")
            st.progress(min(max(val, 0), 10) / 10)
            explain = info.explanation_for(subject)
            if explain:
                st.caption(f"_{explain}_")
        st.caption("评分基于全网公开资讯及商业报表，由 AI 模型生成的加权参考。")

    c1, c2 = st.columns(2)
    with c1, st.container(border=True):
        st.markdown("#### 福利待遇与职级晋升")
        render_points(info.benefits_and_career)
    with c2, st.container(border=True):
        st.markdown("#### 历史背景与趋势预测")
        render_points(info.history_and_future)

    with st.container(border=True):
        news, refs = st.columns([2, 1]) if info.sources else (st.container(), None)
        with news:
            st.markdown("#### 实时企业最新动态")
            render_points(info.latest_news)
        if refs is not None:
            with refs:
                st.markdown("**情报数据溯源**")
                for src in info.sources:
                    st.markdown(f"- [{src.title}]({src.uri})")

    with st.expander("评分明细", expanded=False):
        rows = score_rows(info)
        if pd is not None:
            st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
        else:
            st.table(rows)

    st.download_button(
        "Download snapshot (Markdown)",
        to_markdown(info),
        file_name=snapshot_filename(info),
        use_container_width=True,
    )
