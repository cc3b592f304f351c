"""Main entry point for fluent-mcp.

This script can be used to run the MCP server directly.
"""

import asyncio
import sys

from .server import create_server


async def main() -> None:
    """Main entry point for running the MCP server."""
    try:
        server = create_server()
        await server.start()
    except KeyboardInterrupt:
        print("\nServer interrupted by user", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Failed to start server: {e}", file=sys.stderr)
        sys.exit(1)


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
