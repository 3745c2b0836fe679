from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Type

FAILED_AUTH_MESSAGE = "authentication failed"
FORBIDDEN_MESSAGE = "access forbidden for this tool ({tool_name})"
NO_SHOP_MESSAGE = (
    "No shop available. Configure a shop for {tool_name} before calling the Admin API."
)

TOOL_NAME = "shopify-admin-api"


class ApiErrorKind(str, Enum):
    NOT_FOUND = "NotFound"
    CLIENT_ERROR = "ClientError"
    SERVER_ERROR = "ServerError"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    UNEXPECTED = "Unexpected"


class AdminClientError(Exception):
    """Base error for client failures."""


class TransportError(AdminClientError):
    """Network or timeout fault raised by the request executor."""


class ResponseParseError(AdminClientError):
    pass


class QueryNotFoundError(AdminClientError):
    pass


class AdminAPIError(AdminClientError):
    """Classified HTTP failure returned by the Admin API."""

    kind: ApiErrorKind = ApiErrorKind.UNEXPECTED

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
        response_json: Optional[Dict[str, Any]] = None,
        response_text: Optional[str] = None,
    ):
        prefix = " ".join(str(p) for p in (status_code, method, url) if p)
        super().__init__(f"{prefix}: {message}" if prefix else message)
        self.message = message
        self.status_code = status_code
        self.method = method
        self.url = url
        self.response_json = response_json
        self.response_text = response_text


class NotFoundError(AdminAPIError):
    kind = ApiErrorKind.NOT_FOUND


class ClientRequestError(AdminAPIError):
    kind = ApiErrorKind.CLIENT_ERROR


class ServerRequestError(AdminAPIError):
    kind = ApiErrorKind.SERVER_ERROR


class UnauthorizedError(AdminAPIError):
    kind = ApiErrorKind.UNAUTHORIZED


class ForbiddenError(AdminAPIError):
    kind = ApiErrorKind.FORBIDDEN


class UnexpectedError(AdminAPIError):
    kind = ApiErrorKind.UNEXPECTED


class AuthenticationError(Exception):
    """Raised by a reauthenticator that could not obtain a token."""


class AdminAbort(Exception):
    """Fatal, user-visible failure. Callers should stop rather than retry."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class AuthenticationFailed(AdminAbort):
    def __init__(self, *, cause: Optional[BaseException] = None):
        super().__init__(FAILED_AUTH_MESSAGE, cause=cause)


class AccessForbidden(AdminAbort):
    def __init__(
        self, *, tool_name: str = TOOL_NAME, cause: Optional[BaseException] = None
    ):
        super().__init__(FORBIDDEN_MESSAGE.format(tool_name=tool_name), cause=cause)


class ConfigurationMissing(Exception):
    """No persisted shop; the caller must run setup, not retry."""

    def __init__(self, *, tool_name: str = TOOL_NAME):
        super().__init__(NO_SHOP_MESSAGE.format(tool_name=tool_name))


class ToolFailure(AdminClientError):
    """A facade failure rendered for a tool caller (message plus category)."""

    def __init__(
        self, message: str, *, category: str, status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.status_code = status_code


def error_class_for_status(status_code: int) -> Type[AdminAPIError]:
    if status_code == 404:
        return NotFoundError
    if status_code == 401:
        return UnauthorizedError
    if status_code == 403:
        return ForbiddenError
    if 400 <= status_code <= 499:
        return ClientRequestError
    if 500 <= status_code <= 599:
        return ServerRequestError
    return UnexpectedError


def error_kind_for_status(status_code: int) -> ApiErrorKind:
    return error_class_for_status(status_code).kind


def error_for_status(
    status_code: int,
    *,
    message: str = "request failed",
    method: Optional[str] = None,
    url: Optional[str] = None,
    response_json: Optional[Dict[str, Any]] = None,
    response_text: Optional[str] = None,
) -> AdminAPIError:
    cls = error_class_for_status(status_code)
    return cls(
        message,
        status_code=status_code,
        method=method,
        url=url,
        response_json=response_json,
        response_text=response_text,
    )


__all__ = [
    "ApiErrorKind",
    "AdminClientError",
    "TransportError",
    "ResponseParseError",
    "QueryNotFoundError",
    "AdminAPIError",
    "NotFoundError",
    "ClientRequestError",
    "ServerRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "UnexpectedError",
    "AuthenticationError",
    "AdminAbort",
    "AuthenticationFailed",
    "AccessForbidden",
    "ConfigurationMissing",
    "ToolFailure",
    "error_class_for_status",
    "error_kind_for_status",
    "error_for_status",
    "FAILED_AUTH_MESSAGE",
    "FORBIDDEN_MESSAGE",
    "NO_SHOP_MESSAGE",
    "TOOL_NAME",
]
