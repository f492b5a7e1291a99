# company_scout/analysis.py
# One query: prompt -> grounded model call -> CompanyInfo.

from __future__ import annotations

import logging
from typing import Callable, Optional

from company_scout.config import Settings
from company_scout.errors import AnalysisFailedError
from company_scout.model_client import ModelResponse, cached_generate
from company_scout.models import CompanyInfo
from company_scout.prompt_builder import build_prompt
from company_scout.response_parser import normalize_response

log = logging.getLogger(__name__)

Generate = Callable[..., ModelResponse]


def get_company_details(
    company_name: str,
    *,
    generate: Optional[Generate] = None,
    settings: Optional[Settings] = None,
) -> CompanyInfo:
    """
    Look up one company. Parsing never fails; only AnalysisFailedError
    from the model call reaches the caller, unmodified.
    """
    settings = settings or Settings.from_env()
    generate = generate or cached_generate
    prompt = build_prompt(company_name)

    log.info("analysing %r (web_search=%s)", company_name, settings.web_search)
    try:
        response = generate(prompt, use_web_search=settings.web_search)
    except AnalysisFailedError:
        log.exception("analysis failed for %r", company_name)
        raise

    info = normalize_response(response.text, response.sources, company_name)
    log.info(
        "parsed %r: %d sources, confirmed_fortune500=%s",
        company_name, len(info.sources), info.confirmed_fortune500,
    )
    return info
