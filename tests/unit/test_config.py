"""
Unit tests for ServerConfig.
"""

import logging

import pytest

from chatserver.config import ServerConfig, DEFAULT_PORT, DEFAULT_MAX_CLIENTS


class TestServerConfig:
    """Tests for defaults, environment loading and validation."""

    def test_defaults(self):
        config = ServerConfig()
        assert config.host == "0.0.0.0"
        assert config.port == DEFAULT_PORT == 2000
        assert config.max_clients == DEFAULT_MAX_CLIENTS == 50
        assert config.server_name == "AuroraComms"
        assert config.log_file is None
        config.validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CHAT_HOST", "127.0.0.1")
        monkeypatch.setenv("CHAT_PORT", "3000")
        monkeypatch.setenv("CHAT_MAX_CLIENTS", "5")
        monkeypatch.setenv("CHAT_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CHAT_LOG_FILE", "chat.log")

        config = ServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 3000
        assert config.max_clients == 5
        assert config.log_level_value == logging.DEBUG
        assert config.log_file == "chat.log"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("CHAT_HOST", "CHAT_PORT", "CHAT_MAX_CLIENTS", "CHAT_LOG_LEVEL", "CHAT_LOG_FILE"):
            monkeypatch.delenv(name, raising=False)

        config = ServerConfig.from_env()
        assert config.port == DEFAULT_PORT
        assert config.log_file is None

    def test_port_zero_is_allowed(self):
        ServerConfig(port=0).validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 65536},
        {"max_clients": 0},
        {"buffer_size": 0},
        {"log_level": "LOUD"},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()

    def test_log_level_is_case_insensitive(self):
        config = ServerConfig(log_level="warning")
        config.validate()
        assert config.log_level_value == logging.WARNING
