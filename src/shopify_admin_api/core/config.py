from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .admin_api import AdminAPI
from .auth import EnvTokenAuthenticator
from .client import AdminHTTPClient
from .store import (
    EXCHANGE_TOKEN_KEY,
    SHOP_KEY,
    FileCredentialStore,
    InMemoryCredentialStore,
)

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class AdminConfig:
    shop: Optional[str] = None
    access_token: Optional[str] = None
    api_version: Optional[str] = None
    store_path: Optional[str] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


def _env(name: str) -> Optional[str]:
    val = os.getenv(name, "").strip()
    return val or None


def load_env_config(*, use_dotenv: bool = True) -> AdminConfig:
    """Load Admin API settings from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()

    timeout_raw = _env("SHOPIFY_TIMEOUT_SECONDS")
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
    except ValueError as exc:
        raise ValueError(
            f"SHOPIFY_TIMEOUT_SECONDS must be a number, got {timeout_raw!r}"
        ) from exc

    return AdminConfig(
        shop=_env("SHOPIFY_SHOP"),
        access_token=_env("SHOPIFY_ACCESS_TOKEN"),
        api_version=_env("SHOPIFY_API_VERSION"),
        store_path=_env("SHOPIFY_ADMIN_STORE_PATH"),
        timeout_seconds=timeout,
    )


def create_admin_api_from_env(
    config: Optional[AdminConfig] = None, **kwargs
) -> AdminAPI:
    """Create an AdminAPI wired from environment variables."""
    config = config or load_env_config()

    if config.store_path:
        store = FileCredentialStore(config.store_path)
    else:
        store = InMemoryCredentialStore()
    if config.shop:
        store.set(SHOP_KEY, config.shop)
    if config.access_token and not store.exists(EXCHANGE_TOKEN_KEY):
        store.set(EXCHANGE_TOKEN_KEY, config.access_token)

    reauthenticator = EnvTokenAuthenticator(store)
    executor = AdminHTTPClient(timeout_seconds=config.timeout_seconds)
    kwargs.setdefault("api_version", config.api_version)
    return AdminAPI(
        store=store, reauthenticator=reauthenticator, executor=executor, **kwargs
    )


__all__ = [
    "AdminConfig",
    "load_env_config",
    "create_admin_api_from_env",
    "DEFAULT_TIMEOUT_SECONDS",
]
