#!/usr/bin/env python3
"""Convenience script to run an MCP server with an echo tool.

Usage:
    python run_mcp_server.py

Or make it executable:
    chmod +x run_mcp_server.py
    ./run_mcp_server.py
"""

import asyncio
import sys
from pathlib import Path
from typing import Annotated

from pydantic import Field

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from fluent_mcp import create_server


async def echo(msg: str, repeat: int = 1) -> dict:
    """Echo the message back."""
    return {"content": [{"type": "text", "text": " ".join([msg] * repeat)}]}


async def main() -> None:
    """Main entry point for running the MCP server."""
    try:
        server = create_server().tool(
            "echo",
            {
                "msg": Annotated[str, Field(description="Message to echo", min_length=1)],
                "repeat": (int, 1),
            },
            echo,
            description="Echoes input",
        )
        await server.start()
    except KeyboardInterrupt:
        print("\nServer interrupted by user", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Failed to start server: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
