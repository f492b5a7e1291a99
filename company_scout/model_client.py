# company_scout/model_client.py
# Guarded OpenAI call with web-search grounding.
# - one shared semaphore serializes outbound calls
# - retries transient errors with exponential backoff, honouring Retry-After
# - any final failure surfaces as AnalysisFailedError

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import openai  # for catching the transient SDK errors
import streamlit as st
from openai import OpenAI

from company_scout.config import Settings
from company_scout.errors import AnalysisFailedError

log = logging.getLogger(__name__)

WEB_SEARCH_TOOL = {"type": "web_search_preview"}
MAX_BACKOFF_SECONDS = 20

# Worth another attempt; anything else fails at once.
TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APIConnectionError,
    openai.APITimeoutError,
    openai.InternalServerError,
)


@dataclass(frozen=True)
class ModelResponse:
    text: str
    sources: List[Dict[str, Any]] = field(default_factory=list)


# One shared semaphore to serialize outbound calls and avoid bursts
@st.cache_resource
def _rate_limit_lock() -> threading.BoundedSemaphore:
    return threading.BoundedSemaphore(value=1)


def _get_client(settings: Settings) -> OpenAI:
    """
    Lazy-create the OpenAI client so missing keys do not crash import time.
    """
    if not settings.api_key:
        raise AnalysisFailedError(
            "OPENAI_API_KEY is not set. Add it in Streamlit Cloud → Manage app → Settings → Secrets."
        )
    return OpenAI(api_key=settings.api_key)


def _retry_after_seconds(exc: Exception) -> Optional[int]:
    """
    Try to read Retry-After from the SDK error response, if present.
    """
    resp = getattr(exc, "response", None)
    headers = getattr(resp, "headers", None)
    val = headers.get("retry-after") if headers else None
    if val is None:
        return None
    try:
        # Some environments give str, some int-like
        return int(float(str(val)))
    except (ValueError, OverflowError):
        return None


def _get(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _chunk_from_annotation(annotation: Any) -> Dict[str, Any]:
    return {
        "type": _get(annotation, "type"),
        "url": _get(annotation, "url"),
        "title": _get(annotation, "title"),
    }


def grounding_chunks(resp: Any) -> List[Dict[str, Any]]:
    """Flatten the annotations on every output-text part into chunk dicts."""
    chunks: List[Dict[str, Any]] = []
    for item in _get(resp, "output") or []:
        if _get(item, "type") != "message":
            continue
        for part in _get(item, "content") or []:
            for annotation in _get(part, "annotations") or []:
                chunks.append(_chunk_from_annotation(annotation))
    return chunks


def generate_grounded(
    prompt: str,
    *,
    use_web_search: bool = True,
    settings: Optional[Settings] = None,
    client: Any = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ModelResponse:
    """
    Single grounded generation with retries.
    Raises AnalysisFailedError once attempts are exhausted or the key is missing.
    """
    settings = settings or Settings.from_env()
    client = client or _get_client(settings)
    tools = [WEB_SEARCH_TOOL] if use_web_search else []

    lock = _rate_limit_lock()
    with lock:
        attempt = 0
        wait_default = 1

        while True:
            attempt += 1
            try:
                resp = client.responses.create(
                    model=settings.model,
                    input=prompt,
                    tools=tools,
                )
                text = _get(resp, "output_text") or ""
                chunks = grounding_chunks(resp)
                log.info("model reply: %d chars, %d grounding chunks (attempt %d)", len(text), len(chunks), attempt)
                return ModelResponse(text=text, sources=chunks)

            except TRANSIENT_ERRORS as e:
                if attempt >= settings.max_attempts:
                    log.error("model call failed after %d attempts: %s", attempt, e)
                    raise AnalysisFailedError(str(e)) from e

                # Respect server-provided backoff when available
                retry_after = _retry_after_seconds(e)
                wait = retry_after if retry_after is not None else wait_default
                log.warning("model call failed (attempt %d/%d), retrying in %ss: %s",
                            attempt, settings.max_attempts, wait, e)
                sleep(wait)

                # Exponential backoff with a reasonable cap
                wait_default = min(wait_default * 2, MAX_BACKOFF_SECONDS)

            except Exception as e:
                log.error("model call failed, not retrying: %s", e)
                raise AnalysisFailedError(str(e)) from e


@st.cache_data(ttl=Settings.from_env().cache_ttl, show_spinner=False)
def cached_generate(prompt: str, use_web_search: bool = True) -> ModelResponse:
    """Cached by (prompt, use_web_search). Failures are not cached."""
    return generate_grounded(prompt, use_web_search=use_web_search)
