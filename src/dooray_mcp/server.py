from __future__ import annotations

import asyncio
import os
from typing import Any, Callable, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult

from dooray_mcp.client import DoorayClient
from dooray_mcp.config import EnvClientProvider
from dooray_mcp.logging import setup_logging
from dooray_mcp.registry import error_result, register_discovered_tools


class DoorayMCP(FastMCP):
    """
    FastMCP server whose tool calls go straight to the registry wrappers.

    The wrappers validate raw arguments themselves, so malformed input comes
    back as the usual "Error: ..." result instead of FastMCP's own message.
    """

    def __init__(
        self, name: str, client_provider: Callable[[], DoorayClient] | DoorayClient
    ):
        super().__init__(name)
        self.handlers = register_discovered_tools(self, client_provider)

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]]
    ) -> CallToolResult:
        handler = self.handlers.get(name)
        if handler is None:
            return error_result(ValueError(f"Unknown tool: {name}"))
        return await handler(**(arguments or {}))


def create_app(client_provider) -> DoorayMCP:
    return DoorayMCP("dooray-mcp", client_provider)


# --- Entry point ----------------------------------------------------------- #


async def main() -> None:
    setup_logging(os.getenv("DOORAY_LOG_LEVEL", "INFO"))
    # The token is read on the first tool call; a missing one fails that call
    # only.
    provider = EnvClientProvider()

    app = create_app(provider)
    try:
        await app.run_stdio_async()
    finally:
        await provider.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
