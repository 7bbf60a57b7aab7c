"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration management for the chat server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m chatserver 3000                                  │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── CHAT_PORT=3000 python -m chatserver                        │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional


DEFAULT_PORT = 2000
DEFAULT_MAX_CLIENTS = 50

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the chat server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, max_clients, buffer_size

    LOGGING
    - log_level, log_file

    IDENTITY
    - server_name

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to.
    - "0.0.0.0" - All network interfaces (default, like a telnet-style service)
    - "127.0.0.1" - Localhost only
    """

    port: int = DEFAULT_PORT
    """
    The port number to listen on. 0 lets the OS pick a free port (tests).
    """

    max_clients: int = DEFAULT_MAX_CLIENTS
    """
    Maximum number of simultaneous connections.
    The next connection gets "Server is full" and is closed immediately.
    Also used as the listen() backlog and the registries' initial bucket count.
    """

    buffer_size: int = 512
    """
    Maximum bytes read from one client per tick.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    log_file: Optional[str] = None
    """
    Also write log records to this file. None = terminal only.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "AuroraComms"
    """
    Name shown in the welcome banner, /help and /info.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        CHAT_HOST         Server host (default: 0.0.0.0)
        CHAT_PORT         Server port (default: 2000)
        CHAT_MAX_CLIENTS  Connection limit (default: 50)
        CHAT_LOG_LEVEL    Logging level (default: INFO)
        CHAT_LOG_FILE     Log file path (default: none)

        =====================================================================
        """
        return cls(
            host=os.getenv("CHAT_HOST", "0.0.0.0"),
            port=int(os.getenv("CHAT_PORT", str(DEFAULT_PORT))),
            max_clients=int(os.getenv("CHAT_MAX_CLIENTS", str(DEFAULT_MAX_CLIENTS))),
            log_level=os.getenv("CHAT_LOG_LEVEL", "INFO"),
            log_file=os.getenv("CHAT_LOG_FILE") or None,
        )

    @property
    def log_level_value(self) -> int:
        """The log level as a `logging` constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Validate configuration values.

        Fail fast at startup rather than on the first client.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.max_clients < 1:
            raise ValueError("max_clients must be >= 1")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.log_level}. Must be one of {', '.join(LOG_LEVELS)}."
            )
