#!/usr/bin/env python
"""
Entry point for command_mcp when run as a module.
"""
from command_mcp.server import main

if __name__ == "__main__":
    raise SystemExit(main())
