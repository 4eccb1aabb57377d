import asyncio
import contextlib
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import uvicorn

# Starlette imports
from starlette.applications import Starlette
from starlette.routing import Route, Mount

# MCP imports
from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from azure_tools.clients import get_azure_clients
from azure_tools.dependency import injector
from azure_tools.plugin import registry, discover_and_register_tools, time_plugin_operation
from azure_tools.plugin_config import config

from config import env

from server.tool_history import get_new_invocation_dir, record_tool_invocation
from server.tool_result_processor import process_tool_result

logger = logging.getLogger(__name__)

# Create the server
server = Server("azure-mcp-tools")


def initialize_tools() -> None:
    """Discover the plugins and create the tool instances."""
    injector.register_provider("azure_clients", get_azure_clients)

    with time_plugin_operation("Tool Discovery and Registration"):
        discover_and_register_tools()

    with time_plugin_operation("Dependency Resolution"):
        active_tool_instances = list(injector.resolve_all_dependencies().values())

    logger.info("=" * 60)
    logger.info("TOOL REGISTRATION AND ACTIVATION SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Plugin configuration: {config.describe()}")
    logger.info(
        f"Registered {len(registry.tools)} total tools, {len(active_tool_instances)} active tools"
    )
    for tool in active_tool_instances:
        logger.info(f"  {tool.name}: {tool.description}")
    logger.info("=" * 60)


@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
        for tool in injector.get_filtered_instances().values()
    ]


@server.call_tool()
async def call_tool_handler(name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
    arguments = arguments or {}
    logger.info(f"TOOL CALL HANDLER INVOKED: {name} with arguments: {arguments}")

    invocation_dir = get_new_invocation_dir(name)

    registered_name = registry.find_tool_name(name)
    tool = injector.get_filtered_instances().get(registered_name) if registered_name else None
    if tool is None:
        available_tools = sorted(injector.get_filtered_instances())
        error_msg = (
            f"Error: Tool '{name}' not found. Available tools: "
            f"{', '.join(available_tools) if available_tools else 'None'}"
        )
        logger.error(error_msg)
        record_tool_invocation(name, arguments, error_msg, 0, False, error_msg, invocation_dir)
        return [TextContent(type="text", text=error_msg)]

    start_time = time.time()
    try:
        result = await tool.execute_tool(arguments)
    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.exception(f"Error executing tool {name}")
        record_tool_invocation(
            name, arguments, None, duration_ms, False,
            f"{type(e).__name__}: {e}", invocation_dir,
        )
        raise

    duration_ms = (time.time() - start_time) * 1000
    logger.info(f"Tool '{name}' executed successfully in {duration_ms:.2f}ms")
    record_tool_invocation(name, arguments, result, duration_ms, True, None, invocation_dir)
    return process_tool_result(result)


# Setup SSE transport
sse = SseServerTransport("/messages/")


async def handle_sse(request):
    async with sse.connect_sse(
        request.scope, request.receive, request._send
    ) as streams:
        try:
            await server.run(
                streams[0], streams[1], server.create_initialization_options(),
                raise_exceptions=False,
            )
        except Exception as e:
            # A failed session closes only its own connection
            logger.error(f"SSE handler error: {type(e).__name__}: {e}")


@contextlib.asynccontextmanager
async def lifespan(app):
    yield
    await get_azure_clients().close()


def create_app() -> Starlette:
    routes = [
        Route("/sse", endpoint=handle_sse),
        Mount("/messages/", app=sse.handle_post_message),
    ]
    return Starlette(routes=routes, lifespan=lifespan)


async def run_stdio() -> None:
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )
    finally:
        await get_azure_clients().close()


def setup() -> None:
    """Configure logging and load the environment."""
    log_dir = Path(__file__).resolve().parent / ".logs"
    log_dir.mkdir(exist_ok=True)
    log_file = log_dir / "server.log"

    # basicConfig is a no-op once the root logger has handlers
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
        handler.close()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(str(log_file.absolute()), encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)

    # stdout carries the MCP stream in stdio mode
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Azure SDK HTTP logging is very chatty at INFO
    logging.getLogger("azure").setLevel(logging.WARNING)

    env.load()
    logger.info("Initialized environment")
    if env.is_tool_history_enabled():
        logger.info(f"Tool history recording is enabled. Recording to: {env.get_tool_history_path()}")
    else:
        logger.info("Tool history recording is disabled")


@click.command()
@click.option("--port", default=None, type=int, help="Port to run the SSE server on")
@click.option(
    "--transport",
    default=None,
    type=click.Choice(["sse", "stdio"]),
    help="MCP transport (defaults to SERVER_TRANSPORT or 'sse')",
)
def main(port: Optional[int] = None, transport: Optional[str] = None) -> None:
    setup()
    transport = transport or env.get_setting("server_transport", "sse")
    logger.info(f"Using {transport} transport")
    initialize_tools()

    if transport == "stdio":
        asyncio.run(run_stdio())
        return

    if port is None:
        port = int(env.get_setting("server_port", 8000))
    logger.info(f"Starting server on port {port}")
    uvicorn.run(create_app(), host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
