"""
Command MCP Server.

Exposes an application's named commands to MCP clients, gated by an
allow-list, with optional deferred background execution.
"""

__version__ = "0.1.0"
