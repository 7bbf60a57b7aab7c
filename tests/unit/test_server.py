"""
Unit tests for the ChatServer orchestrator and the CLI.
"""

import socket

import pytest

from chatserver import ChatServer, ServerConfig, create_app, __version__
from chatserver.__main__ import build_parser, main


class TestChatServer:
    """Tests for ChatServer."""

    def test_invalid_config_fails_fast(self):
        with pytest.raises(ValueError):
            ChatServer(ServerConfig(max_clients=0))

    def test_create_app(self, config):
        server = create_app(config)
        assert server.config is config
        assert server.app.multiplexer is server.multiplexer
        server.multiplexer.close()

    def test_tick_serves_a_client(self, config):
        server = ChatServer(config)
        server.multiplexer.listen()
        client = socket.create_connection(server.multiplexer.address, timeout=2)
        try:
            server.tick()  # accept, spawn session
            server.tick()  # flush welcome
            assert client.recv(4096).startswith(b"Welcome to AuroraComms!")
        finally:
            client.close()
            server.multiplexer.close()


class TestCLI:
    """Tests for argument parsing and exit status."""

    def test_defaults(self):
        args = build_parser(ServerConfig()).parse_args([])
        assert args.port == 2000
        assert args.host == "0.0.0.0"
        assert args.max_clients == 50
        assert args.log_level == "INFO"

    def test_arguments(self):
        args = build_parser(ServerConfig()).parse_args(
            ["3000", "--host", "127.0.0.1", "--max-clients", "5", "-l", "debug", "--log-file", "x.log"]
        )
        assert args.port == 3000
        assert args.host == "127.0.0.1"
        assert args.max_clients == 5
        assert args.log_level == "DEBUG"
        assert args.log_file == "x.log"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_invalid_config_exits_1(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["--max-clients", "0"])
        assert exc_info.value.code == 1

    def test_port_in_use_exits_1(self):
        blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        blocker.bind(("127.0.0.1", 0))
        blocker.listen(1)
        try:
            port = blocker.getsockname()[1]
            with pytest.raises(SystemExit) as exc_info:
                main([str(port), "--host", "127.0.0.1", "-l", "CRITICAL"])
            assert exc_info.value.code == 1
        finally:
            blocker.close()
