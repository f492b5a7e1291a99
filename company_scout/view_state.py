# company_scout/view_state.py
# UI state as an immutable value: Idle -> Loading -> Ready | Failed.
#
# Every submit gets a fresh token. A success/failure carrying an older token
# is dropped, so a superseded query can never overwrite the newest one.

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from company_scout.models import CompanyInfo

ERROR_MESSAGE = "情报调取失败。可能是网络波动或 API 限制，请稍后再试。"


@dataclass(frozen=True)
class Idle:
    token: int = 0


@dataclass(frozen=True)
class Loading:
    query: str
    token: int


@dataclass(frozen=True)
class Failed:
    query: str
    message: str
    token: int


@dataclass(frozen=True)
class Ready:
    query: str
    info: CompanyInfo
    token: int


ViewState = Union[Idle, Loading, Failed, Ready]


def submit(state: ViewState, query: str) -> ViewState:
    """Blank queries are ignored (the form never submits them)."""
    q = (query or "").strip()
    if not q:
        return state
    return Loading(query=q, token=state.token + 1)


def succeed(state: ViewState, token: int, info: CompanyInfo) -> ViewState:
    if not isinstance(state, Loading) or state.token != token:
        return state
    return Ready(query=state.query, info=info, token=token)


def fail(state: ViewState, token: int, message: str = ERROR_MESSAGE) -> ViewState:
    if not isinstance(state, Loading) or state.token != token:
        return state
    return Failed(query=state.query, message=message, token=token)


def abandon(state: ViewState, message: str = ERROR_MESSAGE) -> ViewState:
    """A Loading state whose run never finished becomes Failed, so it can be retried."""
    if isinstance(state, Loading):
        return Failed(query=state.query, message=message, token=state.token)
    return state


def retry(state: ViewState) -> ViewState:
    if isinstance(state, (Failed, Ready)):
        return submit(state, state.query)
    return state


def reset(state: ViewState) -> ViewState:
    return Idle(token=state.token)
