from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Any, List, Mapping, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from odoo_common.errors import ConfigError, OdooMCPError
from odoo_common.tooling import InstrumentConfig, instrument_sync_tool
from odoo_config.settings import OdooSettings, init_runtime, load_odoo_settings
from odoo_mcp.connectors.odoo_connector import OdooConnector
from odoo_mcp.dispatcher import ToolDispatcher, ToolReply


logger = logging.getLogger(__name__)

SERVER_NAME = "odoo-mcp"
SERVER_INSTRUCTIONS = "Read-only access to Odoo customers, products, sale orders and users."
MCP_CLIENT_ID = os.getenv("MCP_CLIENT_ID", "odoo_mcp")

SUPPORTED_TRANSPORTS = ("stdio",)


def _cfg(tool_name: str) -> InstrumentConfig:
    return InstrumentConfig(
        kind="tool",
        name=tool_name,
        client_id=MCP_CLIENT_ID,
        on_exception=ToolReply.from_exception,
    )


def tool_definitions(dispatcher: ToolDispatcher) -> List[Tool]:
    """Protocol tool list, with each tool's catalog input schema published as is."""
    return [
        Tool(name=t.name, description=t.description, inputSchema=t.input_schema())
        for t in dispatcher.list_tools()
    ]


def handle_call(dispatcher: ToolDispatcher, name: str, arguments: Mapping[str, Any] | None) -> List[TextContent]:
    """
    Answer one tools/call request.

    Every name goes to the dispatcher, unknown ones included, and the raw
    arguments are passed through untouched so the dispatcher alone decides
    how ``limit`` is read. The result is always a single text block.
    """

    @instrument_sync_tool(_cfg(name))
    def invoke(**args: Any) -> ToolReply:
        return dispatcher.call_tool(name, args)

    return invoke(**dict(arguments or {})).content()


def build_server(dispatcher: ToolDispatcher) -> Server:
    """Low-level MCP server whose list/call handlers both delegate to ``dispatcher``."""
    server = Server(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return tool_definitions(dispatcher)

    # Argument checking is the dispatcher's job; a bad limit falls back to the default.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict) -> List[TextContent]:
        return handle_call(dispatcher, name, arguments)

    logger.debug("Registered tools: %s", ", ".join(t.name for t in dispatcher.list_tools()))
    return server


async def run_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def connect(settings: Optional[OdooSettings] = None) -> OdooConnector:
    """Load settings and authenticate once. Raises ConfigError or AuthenticationError."""
    settings = settings or load_odoo_settings()
    logger.info("Connecting to %s (database=%s, user=%s)", settings.url, settings.db, settings.username)
    connector = OdooConnector.from_settings(settings)
    connector.authenticate()
    return connector


def _transport() -> str:
    transport = os.environ.get("MCP_TRANSPORT", "stdio").strip().lower() or "stdio"
    if transport not in SUPPORTED_TRANSPORTS:
        raise ConfigError(f"Unsupported MCP_TRANSPORT {transport!r}; supported: {', '.join(SUPPORTED_TRANSPORTS)}")
    return transport


def _serve() -> int:
    try:
        transport = _transport()
        connector = connect()
    except OdooMCPError as e:
        logger.error("Startup failed: %s", e)
        return 1

    server = build_server(ToolDispatcher(connector))
    logger.info("Odoo MCP server ready (transport=%s)", transport)
    asyncio.run(run_stdio(server))
    return 0


def main() -> None:
    # Entry points (console_scripts) call main() directly, so runtime
    # initialization (dotenv + logging) happens here.
    init_runtime()
    logger.info("=" * 60)
    logger.info("Odoo MCP server starting")
    logger.info("=" * 60)

    try:
        code = _serve()
    except KeyboardInterrupt:
        logger.info("Goodbye!")
        code = 0
    except Exception:
        logger.exception("Fatal server error")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
