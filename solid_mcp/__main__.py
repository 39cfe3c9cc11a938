"""Entry point for running the Solid MCP Server as a module.

Usage:
    python -m solid_mcp
    python -m solid_mcp --transport sse --log-level DEBUG
"""

from solid_mcp.server import main

if __name__ == "__main__":
    main()
