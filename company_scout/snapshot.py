# company_scout/snapshot.py
# Markdown export of one result (download button on the dashboard).

from __future__ import annotations

import datetime as dt
from typing import Optional

from company_scout.models import SCORE_SUBJECTS, CompanyInfo


def _section(title: str, body: str) -> str:
    return f"## {title}\n{body.strip()}\n"


def to_markdown(info: CompanyInfo, now: Optional[dt.datetime] = None) -> str:
    now = now or dt.datetime.now()
    status = "Fortune 500 Elite" if info.confirmed_fortune500 else "Scanned Status: Active"

    rows = ["| 维度 | 评分 | 解读 |", "|---|---|---|"]
    for subject in SCORE_SUBJECTS:
        rows.append(f"| {subject} | {info.score_for(subject)}/10 | {info.explanation_for(subject) or '—'} |")

    sources = "\n".join(f"- [{s.title}]({s.uri})" for s in info.sources) or "_No sources_"

    return "\n".join([
        f"# {info.name} — 公司情报快照",
        f"_Last updated: {now.strftime('%Y-%m-%d %H:%M')} · {status}_\n",
        _section("500强地位 / 行业地位", info.is_fortune500),
        _section("就业体验评分", "\n".join(rows)),
        _section("福利待遇与职级晋升", info.benefits_and_career),
        _section("历史背景与趋势预测", info.history_and_future),
        _section("实时企业最新动态", info.latest_news),
        _section("情报数据溯源", sources),
    ])


def snapshot_filename(info: CompanyInfo) -> str:
    safe = "".join(ch if ch.isalnum() else "_" for ch in info.name).strip("_") or "company"
    return f"{safe}_snapshot.md"
