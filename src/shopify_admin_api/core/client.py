import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..models import ExecutorResult, RequestDescriptor
from .context import get_request_id
from .errors import (
    AdminAPIError,
    ResponseParseError,
    TransportError,
    error_for_status,
)
from .observability import log_event

LEGACY_TOKEN_HEADER = "X-Shopify-Access-Token"


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 2  # extra attempts for network/timeout faults only
    backoff_base_seconds: float = 0.3  # 0.3, 0.6, 1.2...


def auth_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        # TODO: drop once private apps no longer authenticate with this header
        LEGACY_TOKEN_HEADER: token,
    }


class AdminHTTPClient:
    """
    Request executor for the Admin API.
    - Sends one request per call (network faults retried, HTTP statuses never)
    - Returns ExecutorResult with the status code and decoded JSON body
    - Raises TransportError on network/timeout errors after retries
    - Raises ResponseParseError if a body isn't a JSON object
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        retry: Optional[RetryConfig] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self.log = logger or logging.getLogger("shopify_admin_api.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "AdminHTTPClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def execute(
        self,
        method: str,
        url: str,
        *,
        token: str,
        json: Optional[Any] = None,
        tool: Optional[str] = None,
    ) -> ExecutorResult:
        method = method.upper()
        start = time.perf_counter()
        endpoint = httpx.URL(url).path
        attempt = 0

        while True:
            try:
                resp = await self.http.request(
                    method, url, json=json, headers=auth_headers(token)
                )
            except (httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout) as exc:
                if attempt < self.retry.max_retries:
                    await asyncio.sleep(self.retry.backoff_base_seconds * (2**attempt))
                    attempt += 1
                    continue
                self._log_call(
                    tool, method, endpoint, "exception", start, attempt, exc
                )
                raise TransportError(
                    f"Network/timeout error calling {method} {url}: {exc}"
                ) from exc
            except httpx.HTTPError as exc:
                # Other httpx exceptions (rare) - do not blindly retry
                self._log_call(
                    tool, method, endpoint, "exception", start, attempt, exc
                )
                raise TransportError(
                    f"HTTPX error calling {method} {url}: {exc}"
                ) from exc

            self._log_call(tool, method, endpoint, resp.status_code, start, attempt)
            if 200 <= resp.status_code < 300:
                return ExecutorResult(
                    status_code=resp.status_code, body=self._safe_json(resp)
                )
            return ExecutorResult(
                status_code=resp.status_code, body=self._error_body(resp)
            )

    async def request(
        self,
        descriptor: RequestDescriptor,
        *,
        token: str,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Execute a descriptor and raise the classified error on non-2xx."""
        result = await self.execute(
            descriptor.method,
            descriptor.url,
            token=token,
            json=descriptor.body,
            tool=tool,
        )
        if not result.ok:
            raise self._to_api_error(
                result, method=descriptor.method, url=descriptor.url
            )
        return result.body

    def _log_call(
        self,
        tool: Optional[str],
        method: str,
        endpoint: str,
        status: Any,
        start: float,
        attempt: int,
        exc: Optional[BaseException] = None,
    ) -> None:
        fields: Dict[str, Any] = {
            "request_id": get_request_id(),
            "tool": tool,
            "method": method,
            "endpoint": endpoint,
            "status": status,
            "duration_ms": int((time.perf_counter() - start) * 1000),
            "attempt": attempt,
        }
        if exc is not None:
            fields["error_type"] = type(exc).__name__
        log_event("admin_call", **fields)

    def _safe_json(self, resp: httpx.Response) -> Dict[str, Any]:
        # Handle empty responses (204 No Content, etc.)
        if not resp.content:
            return {}

        try:
            data = resp.json()
        except ValueError as exc:
            snippet = (resp.text or "")[:500]
            raise ResponseParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url}, got non-JSON body snippet: "
                f"{snippet!r}"
            ) from exc

        if isinstance(data, list):
            return {"items": data}
        if not isinstance(data, dict):
            raise ResponseParseError(
                f"Expected top-level JSON object from "
                f"{resp.request.method} {resp.request.url}, "
                f"got {type(data).__name__}"
            )
        return data

    @staticmethod
    def _error_body(resp: httpx.Response) -> Dict[str, Any]:
        try:
            parsed = resp.json()
        except ValueError:
            return {"text": (resp.text or "")[:500]}
        return parsed if isinstance(parsed, dict) else {"errors": parsed}

    @staticmethod
    def _to_api_error(
        result: ExecutorResult, *, method: str, url: str
    ) -> AdminAPIError:
        body = result.body
        message = "request failed"
        response_text = body.get("text") if set(body) == {"text"} else None
        errors = body.get("errors") or body.get("error") or body.get("message")
        if isinstance(errors, str):
            message = errors
        elif errors:
            message = str(errors)
        return error_for_status(
            result.status_code,
            message=message,
            method=method,
            url=url,
            response_json=None if response_text is not None else body,
            response_text=response_text,
        )


__all__ = ["AdminHTTPClient", "RetryConfig", "auth_headers", "LEGACY_TOKEN_HEADER"]
