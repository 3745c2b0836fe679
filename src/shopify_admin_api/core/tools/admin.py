from __future__ import annotations

import time
from typing import Any, Dict, Optional

from shopify_admin_api.core.admin_api import AdminAPI


async def admin_graphql_query(
    api: AdminAPI,
    query_name: str,
    *,
    shop: Optional[str] = None,
    api_version: Optional[str] = None,
    variables: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Run a named GraphQL query (e.g. "shop_info") against the Admin API.
    Variables are passed through unchanged.
    """
    return await api.query(
        query_name, shop=shop, api_version=api_version, **(variables or {})
    )


async def admin_rest_request(
    api: AdminAPI,
    path: str,
    *,
    shop: Optional[str] = None,
    method: str = "GET",
    query: Optional[Dict[str, Any]] = None,
    body: Optional[Dict[str, Any]] = None,
    api_version: Optional[str] = None,
) -> Dict[str, Any]:
    """Call a versioned REST endpoint such as "orders.json"."""
    return await api.rest_request(
        shop=shop,
        path=path,
        query=query,
        body=body,
        method=method,
        api_version=api_version,
    )


async def admin_api_version(api: AdminAPI, *, shop: Optional[str] = None) -> dict:
    """Return the API version calls will target (pinned, or the platform's latest)."""
    shop = shop or api.get_shop_or_abort()
    version = await api.fetch_api_version(None, shop)
    return {"shop": shop, "api_version": version, "pinned": bool(api.api_version)}


async def admin_shop_info(api: AdminAPI, *, shop: Optional[str] = None) -> dict:
    """
    Connectivity and latency check.
    Returns the shop's name and domain as reported by the Admin API.
    """
    start = time.perf_counter()

    payload = await api.query("shop_info", shop=shop)

    latency_ms = (time.perf_counter() - start) * 1000
    shop_data = (payload.get("data") or {}).get("shop") or {}

    return {
        "status": "ok",
        "latency_ms": round(latency_ms, 2),
        "name": shop_data.get("name", "Unknown"),
        "domain": shop_data.get("myshopifyDomain"),
        "id": shop_data.get("id"),
    }


TOOLS = (admin_graphql_query, admin_rest_request, admin_api_version, admin_shop_info)
