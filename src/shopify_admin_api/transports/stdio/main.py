from __future__ import annotations

import asyncio

from mcp.server.fastmcp import FastMCP

from shopify_admin_api.core.config import create_admin_api_from_env
from shopify_admin_api.core.logging import setup_logging
from shopify_admin_api.core.registry import register_admin_tools


async def main() -> None:
    setup_logging()
    api = create_admin_api_from_env()

    app = FastMCP("shopify-admin-api")
    register_admin_tools(app, lambda: api)

    try:
        await app.run_stdio_async()
    finally:
        await api.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
