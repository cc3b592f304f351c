"""Pytest configuration and shared fixtures."""

import logging
import os
import sys
from pathlib import Path

import pytest

# Add src to Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

# Set test environment variables
os.environ.setdefault("TESTING", "true")


@pytest.fixture
def server_config():
    """Minimal server configuration with quiet text logging."""
    return {
        "name": "test-server",
        "version": "0.1.0",
        "logging": {"level": "WARNING", "format": "text"},
    }


@pytest.fixture
def server(server_config):
    """Fresh MCPServer instance."""
    from fluent_mcp.server import MCPServer

    return MCPServer(server_config)


@pytest.fixture(autouse=True)
def reset_root_logging():
    """Drop the handlers MCPServer installs on the root logger."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)
