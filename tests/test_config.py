"""Tests for server configuration loading."""

import pytest

from fluent_mcp.config import ENV_MAPPINGS, ServerConfig, load_server_config

CONFIG_YAML = """
server:
  name: notes
  version: "2.0.0"
  description: Note taking tools

transport:
  type: sse
  host: 0.0.0.0
  port: 8100

logging:
  level: DEBUG
  format: text
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "server.yaml"
    path.write_text(CONFIG_YAML)
    return path


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for env_var in ENV_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)


@pytest.mark.unit
class TestServerConfig:
    """Test ServerConfig."""

    def test_load_yaml(self, config_file):
        config = ServerConfig(str(config_file)).get_server_config()

        assert config == {
            "name": "notes",
            "version": "2.0.0",
            "description": "Note taking tools",
            "transport": {"type": "sse", "host": "0.0.0.0", "port": 8100},
            "logging": {"level": "DEBUG", "format": "text"},
        }

    def test_missing_file(self, tmp_path):
        config = load_server_config(str(tmp_path / "absent.yaml"))
        assert config == {"transport": {}, "logging": {}}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("server: [unclosed\n")
        assert load_server_config(str(path)) == {"transport": {}, "logging": {}}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_server_config(str(path)) == {"transport": {}, "logging": {}}

    def test_default_config_file(self):
        config = load_server_config(use_env=False)
        assert config["name"] == "fluent-mcp"
        assert config["transport"]["type"] == "stdio"


@pytest.mark.unit
class TestEnvironmentOverrides:
    """Test environment variable overrides."""

    def test_env_overrides_yaml(self, config_file, monkeypatch):
        monkeypatch.setenv("FLUENT_MCP_NAME", "override")
        monkeypatch.setenv("FLUENT_MCP_TRANSPORT", "stdio")
        monkeypatch.setenv("FLUENT_MCP_PORT", "9000")
        monkeypatch.setenv("FLUENT_MCP_LOG_LEVEL", "ERROR")

        config = load_server_config(str(config_file))

        assert config["name"] == "override"
        assert config["transport"]["type"] == "stdio"
        assert config["transport"]["port"] == 9000
        assert config["transport"]["host"] == "0.0.0.0"
        assert config["logging"]["level"] == "ERROR"

    def test_env_ignored_when_disabled(self, config_file, monkeypatch):
        monkeypatch.setenv("FLUENT_MCP_NAME", "override")
        assert load_server_config(str(config_file), use_env=False)["name"] == "notes"

    def test_non_integer_port_ignored(self, config_file, monkeypatch):
        monkeypatch.setenv("FLUENT_MCP_PORT", "not-a-port")
        assert load_server_config(str(config_file))["transport"]["port"] == 8100

    def test_empty_value_ignored(self, config_file, monkeypatch):
        monkeypatch.setenv("FLUENT_MCP_NAME", "")
        assert load_server_config(str(config_file))["name"] == "notes"

    def test_log_file_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FLUENT_MCP_LOG_FILE", str(tmp_path / "out.log"))
        config = load_server_config(str(tmp_path / "absent.yaml"))
        assert config["logging"] == {"file": str(tmp_path / "out.log")}
