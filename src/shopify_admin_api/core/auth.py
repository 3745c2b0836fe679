from __future__ import annotations

import logging
import os
from typing import Callable, Optional, Protocol

from .errors import AuthenticationError
from .store import EXCHANGE_TOKEN_KEY, CredentialStore

ACCESS_TOKEN_ENV = "SHOPIFY_ACCESS_TOKEN"

log = logging.getLogger("shopify_admin_api.core.auth")


class Reauthenticator(Protocol):
    """Obtains a fresh access token and writes it into the credential store."""

    async def authenticate(self) -> None: ...

    async def reauthenticate(self) -> None: ...


class EnvTokenAuthenticator:
    """
    Non-interactive authenticator.
    Reads a token from ``token_source`` (default: SHOPIFY_ACCESS_TOKEN) and stores it
    under the exchange-token key. Raises AuthenticationError when none is available.
    """

    def __init__(
        self,
        store: CredentialStore,
        *,
        token_source: Optional[Callable[[], Optional[str]]] = None,
        key: str = EXCHANGE_TOKEN_KEY,
    ):
        self.store = store
        self.key = key
        self.token_source = token_source or (
            lambda: os.getenv(ACCESS_TOKEN_ENV, "").strip() or None
        )

    async def authenticate(self) -> None:
        token = self.token_source()
        if not token:
            raise AuthenticationError(
                f"No access token available; set {ACCESS_TOKEN_ENV}."
            )
        self.store.set(self.key, token)
        log.info("Stored access token for Admin API calls")

    async def reauthenticate(self) -> None:
        previous = self.store.get(self.key)
        await self.authenticate()
        if self.store.get(self.key) == previous:
            log.warning("Reauthentication returned the token that was just rejected")


__all__ = ["Reauthenticator", "EnvTokenAuthenticator", "ACCESS_TOKEN_ENV"]
