"""
=============================================================================
CHATSERVER - Multi-User Text Chat Server Over Raw TCP
=============================================================================

A telnet-friendly chat server: users connect with any line-based TCP
client, pick a username, and talk to everyone else who is online.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CHAT SERVER ARCHITECTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. SINGLE-THREADED I/O MULTIPLEXING                               │
    │      - Non-blocking sockets, one readiness wait per tick            │
    │      - Per-connection inbound/outbound byte buffers                 │
    │      - Two-phase teardown (flag now, close next tick)               │
    │                                                                      │
    │   2. CHAT PROTOCOL                                                  │
    │      - LOGIN → CHAT → EXIT state machine                            │
    │      - Broadcasts and private messages                              │
    │      - Slash commands with short aliases                            │
    │                                                                      │
    │   3. CONTAINERS                                                     │
    │      - Growable Sequence[T]                                         │
    │      - Open-chaining HashMap[K, V] with pluggable hashing           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    chatserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m chatserver)
    ├── server.py            # ChatServer orchestrator
    ├── config.py            # ServerConfig dataclass
    ├── containers/          # Sequence and HashMap
    ├── core/                # Multiplexer and Connection
    └── chat/                # Sessions, states, commands, output

=============================================================================
QUICK START
=============================================================================

    from chatserver import ChatServer, ServerConfig

    server = ChatServer(ServerConfig(port=2000, max_clients=50))
    server.run()

    # then, from another terminal:
    #   telnet localhost 2000

=============================================================================
"""

__version__ = "1.0.0"

from .server import ChatServer, create_app
from .config import ServerConfig

__all__ = ["ChatServer", "ServerConfig", "create_app", "__version__"]
