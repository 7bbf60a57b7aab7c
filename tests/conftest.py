"""
pytest configuration and fixtures.
"""

import socket
from typing import Generator, List
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from chatserver import ServerConfig
from chatserver.core import Multiplexer
from chatserver.chat import ChatApp


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        max_clients=8,
        log_level="WARNING",
    )


class TestClient:
    """The far end of a socketpair registered with the multiplexer."""

    __test__ = False  # Not a test class

    def __init__(self, sock: socket.socket, identity: int):
        self.sock = sock
        self.identity = identity
        self.sock.setblocking(False)

    def send_line(self, text: str, ending: str = "\r\n"):
        self.sock.sendall((text + ending).encode("ascii"))

    def recv(self) -> str:
        """Everything the server has flushed so far."""
        chunks = []
        while True:
            try:
                data = self.sock.recv(65536)
            except (BlockingIOError, ConnectionResetError):
                break
            if not data:
                break
            chunks.append(data)
        return b"".join(chunks).decode("ascii")

    def is_closed(self) -> bool:
        """True once the server side has been closed (EOF)."""
        try:
            data = self.sock.recv(65536, socket.MSG_PEEK)
        except BlockingIOError:
            return False
        except ConnectionResetError:
            return True
        return data == b""

    def close(self):
        self.sock.close()


class ChatHarness:
    """
    A listening Multiplexer + ChatApp driven tick by tick from the test.

    Clients are socketpairs registered directly, so no real accept() is
    involved. connect() runs the app update that follows an accept, then
    one more tick to flush the welcome.
    """

    __test__ = False

    def __init__(self, config: ServerConfig):
        self.config = config
        self.mux = Multiplexer(config)
        self.mux.listen()
        self.app = ChatApp(self.mux, config)
        self.clients: List[TestClient] = []

    def connect(self) -> TestClient:
        server_end, client_end = socket.socketpair()
        conn = self.mux.register(server_end, ("127.0.0.1", 0))
        client = TestClient(client_end, conn.identity)
        self.clients.append(client)

        self.app.update()
        self.tick()
        return client

    def login(self, name: str) -> TestClient:
        client = self.connect()
        client.send_line(name)
        self.tick(2)
        client.recv()
        return client

    def tick(self, times: int = 1):
        """poll() + update(). Skipped with no connections (poll would block)."""
        for _ in range(times):
            if len(self.mux) == 0:
                return
            self.mux.poll()
            self.app.update()

    def say(self, client: TestClient, text: str):
        """Send one line and run enough ticks to see the replies."""
        client.send_line(text)
        self.tick(2)

    def session(self, client: TestClient):
        return self.app.registry.get(client.identity)

    def close(self):
        self.mux.close()
        for client in self.clients:
            client.close()


@pytest.fixture
def harness(config: ServerConfig) -> Generator[ChatHarness, None, None]:
    """A running chat app with no clients yet."""
    h = ChatHarness(config)
    yield h
    h.close()


@pytest.fixture
def make_harness(config: ServerConfig):
    """Factory for harnesses with config overrides, e.g. max_clients=1."""
    made = []

    def factory(**overrides) -> ChatHarness:
        cfg = ServerConfig(**{**config.__dict__, **overrides})
        h = ChatHarness(cfg)
        made.append(h)
        return h

    yield factory

    for h in made:
        h.close()


@pytest.fixture
def alice_and_bob(harness: ChatHarness):
    """Two logged-in clients, both in CHAT, with empty receive buffers."""
    alice = harness.login("alice")
    bob = harness.login("bob")
    harness.tick()
    alice.recv()
    bob.recv()
    return alice, bob
