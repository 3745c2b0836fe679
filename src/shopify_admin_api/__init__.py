"""shopify_admin_api package exports."""

from .core import (
    AccessForbidden,
    AdminAbort,
    AdminAPI,
    AdminAPIError,
    AdminHTTPClient,
    ApiErrorKind,
    AuthenticationFailed,
    ClientRequestError,
    ConfigurationMissing,
    EnvTokenAuthenticator,
    FileCredentialStore,
    ForbiddenError,
    InMemoryCredentialStore,
    NotFoundError,
    RetryConfig,
    ServerRequestError,
    UnauthorizedError,
    UnexpectedError,
    create_admin_api_from_env,
)
from .models import ApiVersion, ExecutorResult, RequestDescriptor

__all__ = [
    # Facade
    "AdminAPI",
    "create_admin_api_from_env",
    # Collaborators
    "AdminHTTPClient",
    "RetryConfig",
    "EnvTokenAuthenticator",
    "InMemoryCredentialStore",
    "FileCredentialStore",
    # Models
    "ApiVersion",
    "ExecutorResult",
    "RequestDescriptor",
    # Exceptions
    "ApiErrorKind",
    "AdminAPIError",
    "NotFoundError",
    "ClientRequestError",
    "ServerRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "UnexpectedError",
    "AdminAbort",
    "AuthenticationFailed",
    "AccessForbidden",
    "ConfigurationMissing",
]
