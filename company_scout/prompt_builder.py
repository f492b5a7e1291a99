# company_scout/prompt_builder.py
# Fixed instruction template. Tag literals are shared with response_parser.

from __future__ import annotations

from company_scout.models import SCORE_SUBJECTS

RADAR_OPEN, RADAR_CLOSE = "[RADAR_DATA]", "[/RADAR_DATA]"
EXPLAIN_OPEN, EXPLAIN_CLOSE = "[EXPLAIN]", "[/EXPLAIN]"

BULLET = "●"

# Dimension label -> what the model must cover under it.
DIMENSIONS = [
    ("500强地位", "明确是否为世界/中国500强。如果是，请在第一行明确写出“是世界/中国500强企业”并给出具体排名。"),
    ("福利待遇与晋升", "详细列出薪酬福利（五险一金、补贴、假期等）及职级晋升机制。"),
    ("历史与愿景", "关键发展历史简报，以及未来3-5年的行业发展趋势预测。"),
    ("最新动态", "总结最近3个月内的重大商业新闻、裁员/扩招情况或财报核心数据。"),
]

_EXAMPLE_SCORES = (8, 7, 6, 7)


def _radar_example() -> str:
    pairs = ",".join(f"{s}:{v}" for s, v in zip(SCORE_SUBJECTS, _EXAMPLE_SCORES))
    return f"{RADAR_OPEN}{pairs}{RADAR_CLOSE}"


def _explain_example() -> str:
    pairs = ",".join(f"{s}:解释" for s in SCORE_SUBJECTS)
    return f"{EXPLAIN_OPEN}{pairs}{EXPLAIN_CLOSE}"


def build_prompt(company_name: str) -> str:
    """Caller guarantees a trimmed, non-empty company name."""
    dims = "\n".join(f"     - [{label}]: {rule}" for label, rule in DIMENSIONS)
    return f"""
你是一名资深的商业分析专家。请为我全网搜索并深度调查 "{company_name}" 的情报。

  请务必严格遵守以下输出规范：
  1. 禁用所有 Markdown 标题符（如 #, ##, ###）和加粗符（**）。
  2. 每一条核心内容必须以 "{BULLET} [内容提炼]: [具体解释内容]" 的格式独立成行。
  3. 中括号内的 [内容提炼] 必须是对该条目内容的 4-6 字精炼总结，严禁直接重复大类别标题。
  4. 回报内容必须覆盖以下四个维度：
{dims}
  5. 就业体验评分模型：返回以下四个维度的评分（1-10分），格式固定为：
     {_radar_example()}
  6. 维度解读：在评分后紧跟以下格式提供四个维度的极简解释（每项15字以内）：
     {_explain_example()}

  请确保分析基于真实搜索数据，观点客观专业。
""".strip()
