"""BIM Bridge MCP Server - Model Context Protocol interface to the command catalog"""

import asyncio
import json
import logging
import time
from pathlib import Path
from types import ModuleType
from typing import Any, Iterable

from bim_bridge.config.bridge import BridgeConfig
from bim_bridge.config.log_setup import configure_logging
from bim_bridge.core.catalog import BuildReport, build_catalog
from bim_bridge.core.dispatcher import Dispatcher
from bim_bridge.handlers import handler_modules
from bim_bridge.session import BridgeSession

try:
    from mcp.server import Server
    from mcp.server.stdio import stdio_server
    from mcp.types import Tool, TextContent
    HAS_MCP = True
except ImportError:
    HAS_MCP = False

logger = logging.getLogger(__name__)


def _succeeded(result: str) -> bool:
    """A result counts as failed only if it is a JSON object with success=false"""
    try:
        payload = json.loads(result)
    except ValueError:
        return True
    return not (isinstance(payload, dict) and payload.get("success") is False)


class BridgeServer:
    """Builds the command catalog once and serves tool calls against it"""

    def __init__(self, config_manager: BridgeConfig | None = None,
                 modules: Iterable[ModuleType | str] | None = None,
                 host: Any = None):
        self.config_manager = config_manager or BridgeConfig()
        settings = self.config_manager.load()

        if modules is None:
            modules = handler_modules(settings.get("handler_modules"))

        registry, self.build_report = build_catalog(modules)
        dispatcher = Dispatcher(
            registry,
            include_traceback=bool(settings["dispatch"].get("include_traceback", True)),
        )
        self.session = BridgeSession(
            dispatcher=dispatcher,
            config_manager=self.config_manager,
            settings=settings,
            host=host,
        )

    @property
    def report(self) -> BuildReport:
        return self.build_report

    def get_tools(self) -> list[dict]:
        """One tool description per distinct command"""
        return [
            {
                "name": descriptor.primary_name,
                "description": f"[{descriptor.category}] {descriptor.description}",
                "inputSchema": {"type": "object", "additionalProperties": True},
            }
            for descriptor in self.session.registry.list_commands()
        ]

    def call_tool(self, name: str, arguments: dict | None) -> str:
        """Execute a command and return its JSON result text"""
        started = time.perf_counter()
        result = self.session.dispatcher.invoke(name, self.session, arguments or {})
        elapsed_ms = (time.perf_counter() - started) * 1000

        succeeded = _succeeded(result)
        self.session.stats.record(elapsed_ms, succeeded)
        logger.debug("%s finished in %.1f ms (success=%s)", name, elapsed_ms, succeeded)
        return result

    async def call_tool_async(self, name: str, arguments: dict | None) -> str:
        """call_tool() on a worker thread so the event loop keeps serving requests"""
        return await asyncio.to_thread(self.call_tool, name, arguments)


# MCP Server setup (when run as main)
def create_mcp_server(bridge: BridgeServer | None = None):
    """Create and configure MCP server"""
    if not HAS_MCP:
        raise ImportError("mcp package is required: pip install mcp")

    bridge = bridge or BridgeServer()
    server = Server(bridge.session.settings["server"]["name"])

    @server.list_tools()
    async def list_tools():
        return [
            Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["inputSchema"]
            )
            for tool in bridge.get_tools()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict):
        result = await bridge.call_tool_async(name, arguments)
        return [TextContent(type="text", text=result)]

    return server


async def main():
    """Run the MCP server"""
    config_manager = BridgeConfig(Path.cwd())
    settings = config_manager.load()
    configure_logging(settings["logging"], config_manager.get_log_directory(settings))

    bridge = BridgeServer(config_manager)
    server = create_mcp_server(bridge)
    options = server.create_initialization_options()
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, options)


def main_sync():
    """Synchronous entry point for CLI"""
    asyncio.run(main())


if __name__ == "__main__":
    main_sync()
