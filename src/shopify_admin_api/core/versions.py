from __future__ import annotations

from typing import Awaitable, Callable, Optional

from pydantic import ValidationError

from ..models import UNSTABLE_VERSION, ApiVersionList, RequestDescriptor
from .client import AdminHTTPClient
from .context import get_request_id
from .errors import UnexpectedError
from .observability import log_event
from .queries import QueryLoader
from .retry import with_reauth_retry

LATEST_MARKER = "Latest"
API_VERSIONS_QUERY = "api_versions"


class VersionResolver:
    """Resolves the Admin API version to target for a shop."""

    def __init__(
        self,
        *,
        executor: AdminHTTPClient,
        token_provider: Callable[[str], Awaitable[str]],
        recover: Callable[[], Awaitable[None]],
        query_loader: Optional[QueryLoader] = None,
        retries: int = 1,
    ):
        self.executor = executor
        self.token_provider = token_provider
        self.recover = recover
        self.query_loader = query_loader or QueryLoader()
        self.retries = retries

    async def resolve(self, explicit: Optional[str], shop: str) -> str:
        # An explicit pin always wins
        if explicit:
            return explicit

        document = self.query_loader.load(API_VERSIONS_QUERY)

        async def attempt():
            token = await self.token_provider(shop)
            descriptor = RequestDescriptor.graphql(
                shop=shop, version=UNSTABLE_VERSION, document=document
            )
            return await self.executor.request(
                descriptor, token=token, tool=API_VERSIONS_QUERY
            )

        payload = await with_reauth_retry(attempt, self.recover, retries=self.retries)
        handle = self.latest_handle(payload)
        log_event(
            "api_version_resolved",
            request_id=get_request_id(),
            shop=shop,
            api_version=handle,
        )
        return handle

    @staticmethod
    def latest_handle(payload: dict) -> str:
        data = payload.get("data") if isinstance(payload, dict) else None
        try:
            versions = ApiVersionList.model_validate(data or {})
        except ValidationError as exc:
            raise UnexpectedError(
                f"Malformed publicApiVersions response: {exc}"
            ) from exc

        for version in versions.public_api_versions:
            if LATEST_MARKER in version.display_name:
                return version.handle
        raise UnexpectedError(
            f"No API version marked {LATEST_MARKER!r} in publicApiVersions response"
        )


__all__ = ["VersionResolver", "LATEST_MARKER", "API_VERSIONS_QUERY"]
