# company_scout/models.py
# Data contract between the parser and the dashboard.

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

# Fixed order = radar axis order.
SCORE_SUBJECTS: Tuple[str, ...] = ("薪资待遇", "工作福利", "工作强度", "晋升空间")

DEFAULT_SCORE = 5


@dataclass(frozen=True)
class RadarScore:
    subject: str
    value: int


@dataclass(frozen=True)
class Source:
    title: str
    uri: str


def is_confirmed_fortune500(text: str) -> bool:
    claims = (
        "是世界500强" in text
        or "是中国500强" in text
        or ("500强" in text and "排名第" in text)
    )
    return claims and "不属于" not in text and "暂未进入" not in text


def default_scores() -> Tuple[RadarScore, ...]:
    return tuple(RadarScore(s, DEFAULT_SCORE) for s in SCORE_SUBJECTS)


@dataclass(frozen=True)
class CompanyInfo:
    name: str
    is_fortune500: str
    benefits_and_career: str
    history_and_future: str
    latest_news: str
    scores: Tuple[RadarScore, ...] = field(default_factory=default_scores)
    score_explanations: Dict[str, str] = field(default_factory=dict)
    sources: Tuple[Source, ...] = ()

    def score_for(self, subject: str) -> int:
        for s in self.scores:
            if s.subject == subject:
                return s.value
        return 0

    def explanation_for(self, subject: str) -> Optional[str]:
        return self.score_explanations.get(subject) or None

    @property
    def confirmed_fortune500(self) -> bool:
        # Recomputed on access, not stored.
        return is_confirmed_fortune500(self.is_fortune500)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["scores"] = [asdict(s) for s in self.scores]
        d["sources"] = [asdict(s) for s in self.sources]
        d["score_explanations"] = dict(self.score_explanations)
        return d
