# company_scout/response_parser.py
# Turns the model's free-text reply into a CompanyInfo.
#
# Pipeline:
#   1. strip '#' and '*' everywhere (blunt, lossy on purpose)
#   2. pull [RADAR_DATA]...[/RADAR_DATA]  -> scores
#   3. pull [EXPLAIN]...[/EXPLAIN]        -> explanations
#   4. keep '●' lines, bucket them by keyword
#   5. map grounding chunks -> sources
# Nothing in here raises; every gap falls back to a default.

from __future__ import annotations

import logging
import re
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from company_scout.models import (
    DEFAULT_SCORE,
    SCORE_SUBJECTS,
    CompanyInfo,
    RadarScore,
    Source,
    default_scores,
    is_confirmed_fortune500,  # re-exported
)
from company_scout.prompt_builder import (
    BULLET,
    EXPLAIN_CLOSE,
    EXPLAIN_OPEN,
    RADAR_CLOSE,
    RADAR_OPEN,
)

log = logging.getLogger(__name__)

EMPTY_REPLY_TEXT = "扫描失败，未发现有效数据。"

# ----------------------------- Buckets -----------------------------

BUCKET_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "is_fortune500":       ("500强", "地位", "排名", "量级"),
    "benefits_and_career": ("福利", "晋升", "薪", "待遇", "职级"),
    "history_and_future":  ("历史", "愿景", "趋势", "预测", "发展"),
    "latest_news":         ("动态", "新闻", "商业", "裁员", "财报"),
}

BUCKET_DEFAULTS: Dict[str, str] = {
    "is_fortune500":       "未发现明确的500强排名信息。",
    "benefits_and_career": "相关福利待遇数据暂缺。",
    "history_and_future":  "历史与未来趋势分析正在生成中...",
    "latest_news":         "近期暂无重大动态记录。",
}

FALLBACK_SOURCE_TITLE = "外部来源"
FALLBACK_SOURCE_URI = "#"
WEB_CHUNK_TYPE = "url_citation"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# ----------------------------- Steps -----------------------------

def strip_markdown(text: str) -> str:
    return text.replace("#", "").replace("*", "")


def extract_block(text: str, open_tag: str, close_tag: str) -> Tuple[Optional[str], str]:
    """
    Return (content of the first open/close pair, text with every pair removed).
    Content is None when no complete pair exists; the text is then unchanged.
    Only the first block is read, but all of them are removed.
    """
    start = text.find(open_tag)
    if start < 0:
        return None, text
    end = text.find(close_tag, start + len(open_tag))
    if end < 0:
        return None, text
    content = text[start + len(open_tag):end]

    kept: List[str] = []
    pos = 0
    while True:
        s = text.find(open_tag, pos)
        if s < 0:
            break
        e = text.find(close_tag, s + len(open_tag))
        if e < 0:
            break
        kept.append(text[pos:s])
        pos = e + len(close_tag)
    kept.append(text[pos:])
    return content, "".join(kept)


def _split_pair(piece: str) -> Tuple[str, Optional[str]]:
    label, sep, rest = piece.partition(":")
    return label.strip(), (rest if sep else None)


def _parse_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    m = _LEADING_INT.match(raw)
    return int(m.group(1)) if m else None


def parse_scores(content: Optional[str]) -> Tuple[RadarScore, ...]:
    """
    'a:8,b:x,c:6,d:7' -> four RadarScores; unparsable values become 5 per pair.
    Anything other than exactly four labelled pairs -> the all-5 default.
    """
    if content is None:
        log.debug("no %s block; using default scores", RADAR_OPEN)
        return default_scores()

    scores: List[RadarScore] = []
    for piece in content.split(","):
        label, raw = _split_pair(piece)
        value = _parse_int(raw)
        scores.append(RadarScore(label, DEFAULT_SCORE if value is None else value))

    if len(scores) != len(SCORE_SUBJECTS) or any(not s.subject for s in scores):
        log.info("malformed %s block (%r); using default scores", RADAR_OPEN, content[:120])
        return default_scores()
    return tuple(scores)


def parse_explanations(content: Optional[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    if content is None:
        return out
    for piece in content.split(","):
        label, raw = _split_pair(piece)
        text = (raw or "").strip()
        if label and text:
            out[label] = text
    return out


def classify_line(line: str, table: Mapping[str, Iterable[str]] = BUCKET_KEYWORDS) -> FrozenSet[str]:
    return frozenset(bucket for bucket, words in table.items() if any(w in line for w in words))


def bullet_lines(text: str) -> List[str]:
    return [ln for ln in text.splitlines() if ln.strip().startswith(BULLET)]


def bucket_lines(
    lines: Sequence[str],
    table: Mapping[str, Iterable[str]] = BUCKET_KEYWORDS,
    defaults: Mapping[str, str] = BUCKET_DEFAULTS,
) -> Dict[str, str]:
    grouped: Dict[str, List[str]] = {bucket: [] for bucket in table}
    for line in lines:
        for bucket in classify_line(line, table):
            grouped[bucket].append(line)

    out: Dict[str, str] = {}
    for bucket, matched in grouped.items():
        if matched:
            out[bucket] = "\n".join(matched)
        else:
            log.debug("bucket %s empty; using sentinel", bucket)
            out[bucket] = defaults[bucket]
    return out


def _field(chunk: Any, name: str) -> Any:
    if isinstance(chunk, Mapping):
        return chunk.get(name)
    return getattr(chunk, name, None)


def assemble_sources(chunks: Optional[Iterable[Any]]) -> Tuple[Source, ...]:
    out: List[Source] = []
    for chunk in chunks or []:
        if _field(chunk, "type") != WEB_CHUNK_TYPE:
            continue
        out.append(Source(
            title=_field(chunk, "title") or FALLBACK_SOURCE_TITLE,
            uri=_field(chunk, "url") or FALLBACK_SOURCE_URI,
        ))
    return tuple(out)


# ----------------------------- Entry point -----------------------------

def normalize_response(
    raw_text: Optional[str],
    chunks: Optional[Iterable[Any]],
    company_name: str,
) -> CompanyInfo:
    text = strip_markdown(raw_text or EMPTY_REPLY_TEXT)

    radar, text = extract_block(text, RADAR_OPEN, RADAR_CLOSE)
    scores = parse_scores(radar)

    explain, text = extract_block(text, EXPLAIN_OPEN, EXPLAIN_CLOSE)
    explanations = parse_explanations(explain)

    buckets = bucket_lines(bullet_lines(text))

    return CompanyInfo(
        name=company_name,
        is_fortune500=buckets["is_fortune500"],
        benefits_and_career=buckets["benefits_and_career"],
        history_and_future=buckets["history_and_future"],
        latest_news=buckets["latest_news"],
        scores=scores,
        score_explanations=explanations,
        sources=assemble_sources(chunks),
    )
