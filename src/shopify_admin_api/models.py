from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

ADMIN_API_PREFIX = "/admin/api"
GRAPHQL_PATH = "graphql.json"
UNSTABLE_VERSION = "unstable"


class ApiVersion(BaseModel):
    handle: str
    display_name: str = Field(alias="displayName")
    supported: Optional[bool] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ApiVersionList(BaseModel):
    """Shape of the ``publicApiVersions`` query response."""

    public_api_versions: List[ApiVersion] = Field(alias="publicApiVersions")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ExecutorResult(BaseModel):
    status_code: int
    body: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class RequestDescriptor(BaseModel):
    """
    Fully resolved outgoing call.
    - Built fresh for every attempt; frozen so a retry rebuilds rather than mutates
    - ``path`` is relative to the versioned admin prefix (e.g. "orders.json")
    """

    shop: str
    version: str
    path: str = GRAPHQL_PATH
    method: str = "GET"
    body: Optional[Any] = None
    query: Optional[Dict[str, Any] | str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def admin_path(self) -> str:
        return f"{ADMIN_API_PREFIX}/{self.version}/{self.path.lstrip('/')}"

    @property
    def url(self) -> str:
        url = f"https://{self.shop}{self.admin_path}"
        if self.query:
            qs = self.query if isinstance(self.query, str) else urlencode(self.query)
            url = f"{url}?{qs}"
        return url

    @classmethod
    def graphql(
        cls,
        *,
        shop: str,
        version: str,
        document: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> "RequestDescriptor":
        variables = dict(variables or {})
        return cls(
            shop=shop,
            version=version,
            path=GRAPHQL_PATH,
            method="POST",
            body={"query": document, "variables": variables},
        )


__all__ = [
    "ADMIN_API_PREFIX",
    "GRAPHQL_PATH",
    "UNSTABLE_VERSION",
    "ApiVersion",
    "ApiVersionList",
    "ExecutorResult",
    "RequestDescriptor",
]
