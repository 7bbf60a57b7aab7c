"""
=============================================================================
MAIN CHAT SERVER
=============================================================================

The orchestrator that ties the networking core and the chat layer into
one running process.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CHAT SERVER ARCHITECTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   ChatServer    │                          │
    │                        │ (Orchestrator)  │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │                 ┌───────────────┴───────────────┐                   │
    │                 │                               │                   │
    │                 ▼                               ▼                   │
    │         ┌──────────────┐                ┌──────────────┐            │
    │         │ Multiplexer  │ ◄───identity── │   ChatApp    │            │
    │         │ (Networking) │ ───inbound───► │  (Protocol)  │            │
    │         └──────┬───────┘                └──────┬───────┘            │
    │                │                               │                    │
    │                ▼                               ▼                    │
    │         ┌──────────────┐         ┌───────────────────────────┐      │
    │         │  Connection  │         │ Sessions, StateMachine,   │      │
    │         │  (buffers)   │         │ CommandDispatcher         │      │
    │         └──────────────┘         └───────────────────────────┘      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THE CONTROL LOOP
=============================================================================

    listen()
    loop:
        multiplexer.poll()    accept, read, promote, reap, flush
        app.update()          spawn sessions, handle lines, tear down

There is no graceful shutdown beyond Ctrl+C: KeyboardInterrupt ends the
loop and every socket is closed on the way out.

=============================================================================
"""

import sys
import logging
from typing import Optional

from .config import ServerConfig
from .core import Multiplexer
from .chat import ChatApp


logger = logging.getLogger(__name__)


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ChatServer:
    """
    A complete chat server.

    Usage:
        server = ChatServer(ServerConfig(port=2000))
        server.run()  # Blocks until Ctrl+C
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Initialize the server.

        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self.multiplexer = Multiplexer(self.config)
        self.app = ChatApp(self.multiplexer, self.config)

        self._running = False

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self) -> None:
        """
        Start the server (blocking).

        Raises:
            ServerSetupError: If the listening socket can't be set up.
            PollError: If waiting for socket readiness fails.
        """
        self._setup_logging()

        try:
            self.multiplexer.listen()
            self._running = True
            self._print_startup_banner()

            while self._running:
                self.tick()
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def tick(self) -> None:
        """One pass of the control loop."""
        self.multiplexer.poll()
        self.app.update()

    def _print_startup_banner(self):
        host, port = self.multiplexer.address
        print()
        print("╔══════════════════════════════════════════════════════════════╗")
        print(f"║  {self.config.server_name} running")
        print(f"║  telnet {host} {port}")
        print(f"║  Max clients: {self.config.max_clients}")
        print("║  Press Ctrl+C to stop")
        print("╚══════════════════════════════════════════════════════════════╝")
        print()

    def _setup_logging(self):
        """Terminal logging, plus a log file when one is configured."""
        level = self.config.log_level_value

        handlers = [logging.StreamHandler(sys.stdout)]
        if self.config.log_file:
            handlers.append(logging.FileHandler(self.config.log_file))

        logging.basicConfig(
            level=level,
            format=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            handlers=handlers,
        )

        logging.getLogger("chatserver").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False

        self.multiplexer.close()

        logger.info("Server stopped")


def create_app(config: Optional[ServerConfig] = None) -> ChatServer:
    """
    Create a chat server instance.

    Example:
        server = create_app(ServerConfig(port=3000, max_clients=10))
        server.run()
    """
    return ChatServer(config)
