"""Core domain surface for shopify-admin-api (transport-agnostic)."""

from .admin_api import AdminAPI
from .auth import EnvTokenAuthenticator, Reauthenticator
from .client import AdminHTTPClient, RetryConfig, auth_headers
from .config import AdminConfig, create_admin_api_from_env, load_env_config
from .context import (
    RequestContext,
    apply_request_context,
    ensure_request_id,
    get_context,
    reset_context,
)
from .errors import (
    AccessForbidden,
    AdminAbort,
    AdminAPIError,
    AdminClientError,
    ApiErrorKind,
    AuthenticationError,
    AuthenticationFailed,
    ClientRequestError,
    ConfigurationMissing,
    ForbiddenError,
    NotFoundError,
    QueryNotFoundError,
    ResponseParseError,
    ServerRequestError,
    ToolFailure,
    TransportError,
    UnauthorizedError,
    UnexpectedError,
    error_for_status,
    error_kind_for_status,
)
from .queries import QueryLoader, load_query
from .registry import register_admin_tools, tool_failure, wrap_tool
from .retry import with_reauth_retry
from .store import (
    EXCHANGE_TOKEN_KEY,
    SHOP_KEY,
    CredentialStore,
    FileCredentialStore,
    InMemoryCredentialStore,
)
from .versions import LATEST_MARKER, VersionResolver

__all__ = [
    # Facade
    "AdminAPI",
    "VersionResolver",
    "with_reauth_retry",
    "LATEST_MARKER",
    # Collaborators
    "AdminHTTPClient",
    "RetryConfig",
    "auth_headers",
    "Reauthenticator",
    "EnvTokenAuthenticator",
    "CredentialStore",
    "InMemoryCredentialStore",
    "FileCredentialStore",
    "EXCHANGE_TOKEN_KEY",
    "SHOP_KEY",
    "QueryLoader",
    "load_query",
    # Exceptions
    "ApiErrorKind",
    "AdminClientError",
    "AdminAPIError",
    "NotFoundError",
    "ClientRequestError",
    "ServerRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "UnexpectedError",
    "TransportError",
    "ResponseParseError",
    "QueryNotFoundError",
    "ToolFailure",
    "AuthenticationError",
    "AdminAbort",
    "AuthenticationFailed",
    "AccessForbidden",
    "ConfigurationMissing",
    "error_for_status",
    "error_kind_for_status",
    # Config helpers
    "AdminConfig",
    "create_admin_api_from_env",
    "load_env_config",
    # Registry helpers
    "register_admin_tools",
    "tool_failure",
    "wrap_tool",
    # Context
    "RequestContext",
    "get_context",
    "apply_request_context",
    "reset_context",
    "ensure_request_id",
]
