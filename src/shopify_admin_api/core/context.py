"""Request context using ContextVars."""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Iterable, Optional

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_shop_var: ContextVar[str | None] = ContextVar("shop", default=None)


@dataclass(frozen=True)
class RequestContext:
    request_id: str
    shop: Optional[str] = None


def ensure_request_id(candidate: Optional[str] = None) -> str:
    return candidate or uuid.uuid4().hex


def apply_request_context(
    request_id: Optional[str] = None, shop: Optional[str] = None
) -> Iterable[Token]:
    """Set ContextVars for the duration of a call; returns tokens for reset()."""
    tokens = []
    tokens.append(_request_id_var.set(ensure_request_id(request_id)))
    tokens.append(_shop_var.set(shop))
    return tokens


def reset_context(tokens: Iterable[Token]) -> None:
    for token in tokens:
        token.var.reset(token)


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def get_context() -> RequestContext:
    return RequestContext(
        request_id=ensure_request_id(_request_id_var.get()),
        shop=_shop_var.get(),
    )


__all__ = [
    "RequestContext",
    "apply_request_context",
    "reset_context",
    "get_request_id",
    "get_context",
    "ensure_request_id",
]
