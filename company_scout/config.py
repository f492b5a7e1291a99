# company_scout/config.py
# Environment-driven settings + logging setup.
#
# In Streamlit Cloud, set these under App → Settings → Secrets / Environment:
#   OPENAI_API_KEY      (required)
#   OPENAI_MODEL        default gpt-4.1-mini (must support web_search_preview)
#   SCOUT_WEB_SEARCH    true/false, default true
#   SCOUT_MAX_ATTEMPTS  default 5
#   SCOUT_CACHE_TTL     seconds, default 3600
#   SCOUT_LOG_LEVEL     default INFO

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MODEL = "gpt-4.1-mini"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _as_int(raw: Optional[str], default: int) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default


def _as_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None or not str(raw).strip():
        return default
    return str(raw).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    web_search: bool = True
    max_attempts: int = 5
    cache_ttl: int = 3600
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            api_key=(env.get("OPENAI_API_KEY") or "").strip() or None,
            model=(env.get("OPENAI_MODEL") or "").strip() or DEFAULT_MODEL,
            web_search=_as_bool(env.get("SCOUT_WEB_SEARCH"), True),
            max_attempts=max(1, _as_int(env.get("SCOUT_MAX_ATTEMPTS"), 5)),
            cache_ttl=max(0, _as_int(env.get("SCOUT_CACHE_TTL"), 3600)),
            log_level=(env.get("SCOUT_LOG_LEVEL") or "INFO").strip().upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """
    Attach one stream handler to the package logger.
    Safe to call on every Streamlit rerun.
    """
    logger = logging.getLogger("company_scout")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(getattr(h, "_scout_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._scout_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
