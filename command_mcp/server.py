#!/usr/bin/env python
"""
Command MCP Server

Main entry point for the MCP server that lets MCP clients execute
allow-listed host commands, either directly or as background tasks.
"""
import argparse
import logging
from typing import Dict, List, Optional

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from command_mcp import config
from command_mcp.config import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TRANSPORT,
    HEALTH_PATH,
    LOG_FORMAT,
    SERVER_NAME,
    SUPPORTED_TRANSPORTS,
    load_environment_config,
)
from command_mcp.core.server_initialization import InitializationConfig, ServerComponents, ServerInitializer
from command_mcp.tools import get_tool_info, register_all_tools


def _configure_logging() -> logging.Logger:
    load_environment_config()
    logging.basicConfig(level=getattr(logging, config.LOG_LEVEL), format=LOG_FORMAT)
    logger = logging.getLogger(__name__)
    if config.DEBUG_ENABLED:
        logger.setLevel(logging.DEBUG)
        logging.getLogger("fastmcp").setLevel(logging.DEBUG)
    return logger


class CommandMCPServer:
    """Main Command MCP Server class."""

    def __init__(
        self,
        init_config: Optional[InitializationConfig] = None,
        transport: str = DEFAULT_TRANSPORT,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ) -> None:
        self.mcp = FastMCP(SERVER_NAME)
        self.initializer = ServerInitializer(init_config or InitializationConfig())
        self.transport = transport
        self.host = host
        self.port = port
        self.components: Optional[ServerComponents] = None
        self.logger = logging.getLogger(__name__)

    def start(self) -> None:
        """Start the Command MCP Server and block until it exits."""
        try:
            self._log_startup_banner()
            self.components = self.initializer.initialize()
            self._register_tools()
            self.logger.info(f"MCP server ready. Listening on {self._describe_transport()}.")
            self._run_server()
        except Exception as e:  # pragma: no cover - startup path
            self.logger.error(f"Failed to start server: {e}")
            raise
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        """Stop the scheduler and drop all background tasks."""
        if self.components is not None:
            self.logger.info("Shutting down background task scheduler")
            self.components.shutdown()
            self.components = None

    def _log_startup_banner(self) -> None:
        tool_info: Dict = get_tool_info()
        self.logger.info("Command MCP Server")
        self.logger.info("=" * 40)
        self.logger.info(f"Total tools: {tool_info['total_tools']}")
        self.logger.info("Tool categories:")
        for category, details in tool_info["categories"].items():
            self.logger.info(f"  {category}: {len(details['tools'])} tools")

    def _register_tools(self) -> None:
        self.logger.debug("Registering tools…")
        register_all_tools(self.mcp, self.components)
        self._register_health_route()

    def health_status(self) -> Dict:
        """Liveness payload for the /health route."""
        running = self.components is not None and self.components.scheduler.is_running
        return {"status": "ok", "running": running}

    def _register_health_route(self) -> None:
        @self.mcp.custom_route(HEALTH_PATH, methods=["GET"])
        async def health(request: Request) -> JSONResponse:
            return JSONResponse(self.health_status())

    def _describe_transport(self) -> str:
        if self.transport == "stdio":
            return "stdio"
        return f"{self.transport}://{self.host}:{self.port}"

    def _run_server(self) -> None:
        try:
            if self.transport == "stdio":
                self.mcp.run()
            else:
                self.mcp.run(transport=self.transport, host=self.host, port=self.port)
        except KeyboardInterrupt:
            pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="command-mcp", description="Command MCP server")
    parser.add_argument("--config", metavar="PATH", help="JSON settings file (allowedCommands, asyncExecution, ...)")
    parser.add_argument("--transport", choices=SUPPORTED_TRANSPORTS, default=DEFAULT_TRANSPORT,
                        help=f"MCP transport (default: {DEFAULT_TRANSPORT})")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Bind address for http/sse transports")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port for http/sse transports")
    parser.add_argument("--list-tools", action="store_true", help="Print available tools and exit")
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    _configure_logging()
    args = build_parser().parse_args(argv)

    if args.version:
        from command_mcp import __version__
        print(__version__)
        return 0

    if args.list_tools:
        info = get_tool_info()
        print(f"Total tools: {info['total_tools']}")
        for cat, details in info["categories"].items():
            print(f"- {cat}: {', '.join(details['tools'])}")
        return 0

    server = CommandMCPServer(
        InitializationConfig(config_path=args.config),
        transport=args.transport,
        host=args.host,
        port=args.port,
    )
    server.start()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
