from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from contextvars import ContextVar
from typing import Any, AsyncIterator, Dict, Iterator, Optional

from ..models import RequestDescriptor
from .auth import Reauthenticator
from .client import AdminHTTPClient
from .context import apply_request_context, get_request_id, reset_context
from .errors import (
    TOOL_NAME,
    AccessForbidden,
    AuthenticationError,
    AuthenticationFailed,
    ConfigurationMissing,
    ForbiddenError,
    UnauthorizedError,
)
from .queries import QueryLoader
from .retry import with_reauth_retry
from .store import EXCHANGE_TOKEN_KEY, SHOP_KEY, CredentialStore
from .versions import VersionResolver

# Explicit token for the current call; set only inside _token_override
_override_token_var: ContextVar[Optional[str]] = ContextVar(
    "override_token", default=None
)


class AdminAPI:
    """
    Authenticated facade over the Admin API (GraphQL and REST).
    - Reads the access token from the credential store on every attempt
    - Retries once after reauthenticating when the platform answers 401
    - Resolves the API version (explicit pin or the platform's "Latest")
    - Converts auth failures that survive the retry into fatal aborts
    """

    def __init__(
        self,
        *,
        store: CredentialStore,
        reauthenticator: Reauthenticator,
        executor: Optional[AdminHTTPClient] = None,
        query_loader: Optional[QueryLoader] = None,
        retries: int = 1,
        api_version: Optional[str] = None,
        tool_name: str = TOOL_NAME,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.reauthenticator = reauthenticator
        self.executor = executor or AdminHTTPClient()
        self.query_loader = query_loader or QueryLoader()
        self.retries = retries
        self.api_version = api_version
        self.tool_name = tool_name
        self.log = logger or logging.getLogger("shopify_admin_api.admin_api")
        self.versions = VersionResolver(
            executor=self.executor,
            token_provider=self.access_token,
            recover=self.reauthenticate,
            query_loader=self.query_loader,
            retries=retries,
        )

    async def aclose(self) -> None:
        await self.executor.aclose()

    async def __aenter__(self) -> "AdminAPI":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # --- Public operations -------------------------------------------------- #

    async def query(
        self,
        query_name: str,
        *,
        shop: Optional[str] = None,
        api_version: Optional[str] = None,
        **variables: Any,
    ) -> Dict[str, Any]:
        """
        Issue a named GraphQL query or mutation against the shop's Admin API.

        Raises:
            NotFoundError / ClientRequestError / ServerRequestError / UnexpectedError
            AuthenticationFailed if the token is still rejected after reauthenticating
            AccessForbidden if the platform denies access (never retried)
        """
        shop = shop or self.get_shop_or_abort()
        document = self.query_loader.load(query_name)

        with self._call_scope(shop), self._abort_on_auth_failure():
            version = await self._resolve_version(api_version, shop)

            async def attempt() -> Dict[str, Any]:
                token = await self.access_token(shop)
                descriptor = RequestDescriptor.graphql(
                    shop=shop, version=version, document=document, variables=variables
                )
                return await self.executor.request(
                    descriptor, token=token, tool=query_name
                )

            return await with_reauth_retry(
                attempt, self.reauthenticate, retries=self.retries
            )

    async def rest_request(
        self,
        *,
        shop: Optional[str] = None,
        path: str,
        query: Optional[Dict[str, Any] | str] = None,
        body: Optional[Any] = None,
        method: str = "GET",
        api_version: Optional[str] = None,
        token: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Call a REST endpoint, e.g. ``path="orders.json"`` for
        ``/admin/api/{version}/orders.json``.

        An explicit ``token`` is held in the credential store only for this call and
        the key is cleared afterwards, whether the call succeeded or not.
        """
        shop = shop or self.get_shop_or_abort()

        with self._call_scope(shop), self._abort_on_auth_failure():
            async with self._token_override(token):
                version = await self._resolve_version(api_version, shop)

                async def attempt() -> Dict[str, Any]:
                    current = await self.access_token(shop)
                    descriptor = RequestDescriptor(
                        shop=shop,
                        version=version,
                        path=path,
                        method=(method or "GET").upper(),
                        body=body,
                        query=query,
                    )
                    return await self.executor.request(
                        descriptor, token=current, tool=path
                    )

                return await with_reauth_retry(
                    attempt, self.reauthenticate, retries=self.retries
                )

    def get_shop_or_abort(self) -> str:
        if not self.store.exists(SHOP_KEY):
            raise ConfigurationMissing(tool_name=self.tool_name)
        return self.store.get(SHOP_KEY)

    async def fetch_api_version(self, api_version: Optional[str], shop: str) -> str:
        with self._abort_on_auth_failure():
            return await self._resolve_version(api_version, shop)

    # --- Credentials ------------------------------------------------------- #

    async def access_token(self, shop: str) -> str:
        """
        Token for the next attempt.
        - Inside an explicit-token call, that call's token (never another call's)
        - Otherwise the stored token, read once no override of the key is active;
          authenticates first when none is stored
        """
        override = _override_token_var.get()
        if override:
            return override

        async with self.store.guard(EXCHANGE_TOKEN_KEY):
            token = self.store.get(EXCHANGE_TOKEN_KEY)
            if not token:
                self.log.info("No stored access token for %s; authenticating", shop)
                await self.reauthenticator.authenticate()
                token = self.store.get(EXCHANGE_TOKEN_KEY)
        if not token:
            raise AuthenticationFailed()
        return token

    async def reauthenticate(self) -> None:
        self.log.info("Access token rejected; reauthenticating")
        if _override_token_var.get() is None:
            async with self.store.guard(EXCHANGE_TOKEN_KEY):
                await self.reauthenticator.reauthenticate()
            return

        # The override lock is already held by this call
        await self.reauthenticator.reauthenticate()
        refreshed = self.store.get(EXCHANGE_TOKEN_KEY)
        if refreshed:
            _override_token_var.set(refreshed)

    # --- Helpers ------------------------------------------------------------ #

    async def _resolve_version(self, api_version: Optional[str], shop: str) -> str:
        return await self.versions.resolve(api_version or self.api_version, shop)

    @asynccontextmanager
    async def _token_override(self, token: Optional[str]) -> AsyncIterator[None]:
        if not token:
            yield
            return
        async with self.store.override(EXCHANGE_TOKEN_KEY, token):
            ctx_token = _override_token_var.set(token)
            try:
                yield
            finally:
                _override_token_var.reset(ctx_token)

    @contextmanager
    def _abort_on_auth_failure(self) -> Iterator[None]:
        try:
            yield
        except UnauthorizedError as exc:
            raise AuthenticationFailed(cause=exc) from exc
        except ForbiddenError as exc:
            raise AccessForbidden(tool_name=self.tool_name, cause=exc) from exc
        except AuthenticationError as exc:
            raise AuthenticationFailed(cause=exc) from exc

    @contextmanager
    def _call_scope(self, shop: str) -> Iterator[None]:
        # Nested calls (e.g. from a tool) keep the outer request id
        if get_request_id() is not None:
            yield
            return
        tokens = list(apply_request_context(shop=shop))
        try:
            yield
        finally:
            reset_context(tokens)


__all__ = ["AdminAPI"]
