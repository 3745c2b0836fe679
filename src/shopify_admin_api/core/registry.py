from __future__ import annotations

import inspect
import logging
import time
from typing import Callable, Iterable, List, Set, get_type_hints

from .admin_api import AdminAPI
from .context import apply_request_context, get_request_id, reset_context
from .errors import (
    AdminAbort,
    AdminAPIError,
    AdminClientError,
    ConfigurationMissing,
    ToolFailure,
)
from .observability import log_event

log = logging.getLogger("shopify_admin_api.core.registry")

ApiProvider = Callable[[], AdminAPI]


# --- Failure rendering ------------------------------------------------------ #


def tool_failure(exc: Exception) -> ToolFailure:
    """
    Render a facade failure as the message a tool caller sees.
    - Aborts keep their user-facing message ("authentication failed", ...)
    - HTTP errors name their kind and status, never the request URL
    """
    if isinstance(exc, AdminAbort):
        return ToolFailure(exc.message, category="abort")
    if isinstance(exc, ConfigurationMissing):
        return ToolFailure(str(exc), category="configuration")
    if isinstance(exc, AdminAPIError):
        status = f" ({exc.status_code})" if exc.status_code else ""
        return ToolFailure(
            f"{exc.kind.value}{status}: {exc.message}",
            category=exc.kind.value,
            status_code=exc.status_code,
        )
    return ToolFailure(f"{type(exc).__name__}: {exc}", category="client")


# --- Wrapping / registration ---------------------------------------------- #


def _check_tool(func: Callable) -> None:
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"Tool {func.__name__} must be a coroutine function")
    params = list(inspect.signature(func).parameters)
    if not params or params[0] != "api":
        raise TypeError(f"Tool {func.__name__}: first parameter must be 'api'")


def _public_signature(func: Callable) -> inspect.Signature:
    """Signature with resolved annotations and without the injected facade."""
    sig = inspect.signature(func)
    hints = get_type_hints(func)
    params = [
        p.replace(annotation=hints.get(name, p.annotation))
        for name, p in list(sig.parameters.items())[1:]
    ]
    return inspect.Signature(
        parameters=params,
        return_annotation=hints.get("return", sig.return_annotation),
    )


def wrap_tool(func: Callable, api_provider: ApiProvider) -> Callable:
    """
    Return the callable registered on the app.
    Each invocation runs in its own request context (one request id shared by
    every Admin API call the tool makes) and logs a ``tool_call`` event.
    """
    _check_tool(func)
    name = func.__name__

    async def wrapped(*args, **kwargs):
        tokens = []
        if get_request_id() is None:
            tokens = list(apply_request_context(shop=kwargs.get("shop")))
        start = time.perf_counter()
        try:
            result = await func(api_provider(), *args, **kwargs)
        except (AdminAbort, AdminClientError, ConfigurationMissing) as exc:
            _log_call(name, start, status="error", error_type=type(exc).__name__)
            raise tool_failure(exc) from exc
        else:
            _log_call(name, start, status="ok")
            return result
        finally:
            reset_context(tokens)

    wrapped.__name__ = name
    wrapped.__doc__ = func.__doc__
    wrapped.__module__ = func.__module__
    wrapped.__signature__ = _public_signature(func)  # type: ignore[attr-defined]
    return wrapped


def _log_call(tool: str, start: float, **fields) -> None:
    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    log_event("tool_call", logger=log, tool=tool, duration_ms=duration_ms, **fields)


def register_admin_tools(
    app,
    api_provider: ApiProvider | AdminAPI,
    tools: Iterable[Callable] | None = None,
) -> List[str]:
    """Register the Admin API tools on an app that exposes a .tool decorator."""
    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    if isinstance(api_provider, AdminAPI):
        _api = api_provider

        def api_provider():
            return _api

    if tools is None:
        from .tools.admin import TOOLS

        tools = TOOLS

    names: List[str] = []
    seen: Set[str] = set()
    for func in tools:
        name = func.__name__
        if name in seen:
            raise ValueError(f"Duplicate tool name detected: {name}")
        app.tool(name=name)(wrap_tool(func, api_provider))
        seen.add(name)
        names.append(name)
        log.info("Registered tool: %s", name)
    return names


__all__ = ["register_admin_tools", "tool_failure", "wrap_tool"]
