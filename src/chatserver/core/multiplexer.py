"""
=============================================================================
CONNECTION MULTIPLEXER
=============================================================================

Single-threaded, readiness-based I/O over the listening socket and every
client socket. The whole server is one loop:

    while True:
        multiplexer.poll()   ← this module
        app.update()         ← chat layer

=============================================================================
ONE THREAD, MANY SOCKETS
=============================================================================

Blocking I/O needs a thread per client: recv() on a quiet client would
freeze everyone else. Instead every socket is non-blocking and we ask the
OS which ones are ready before touching them:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         poll() in one tick                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   selector.select()     Which sockets are readable?                  │
    │        │                  └─ blocks only if NO clients are           │
    │        │                     connected, otherwise returns at once    │
    │        │                                                             │
    │        ├──► listener readable?   accept() one client                 │
    │        │                                                             │
    │        ├──► client readable?     recv() → inbound buffer             │
    │        │                          └─ 0 bytes / error → flag it       │
    │        │                                                             │
    │        ├──► promote last tick's NEW connections to ONLINE            │
    │        │                                                             │
    │        ├──► reap connections flagged before this poll()              │
    │        │                                                             │
    │        └──► flush every non-empty outbound buffer                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

We use the stdlib `selectors` module, which picks the best mechanism the
platform has (epoll on Linux, kqueue on BSD/macOS, plain select elsewhere).

=============================================================================
BACKPRESSURE
=============================================================================

There isn't any. Outbound buffers are unbounded, and a send() that fails
just leaves the buffer for next tick. A client that stops reading makes
its buffer grow until it disconnects.

=============================================================================
"""

import errno
import selectors
import socket
import logging
from typing import List, Optional

from ..config import ServerConfig
from ..containers import HashMap, handle_hash
from .connection import Connection, ConnectionState, ConnectionNotFoundError


logger = logging.getLogger(__name__)


SERVER_FULL_MESSAGE = b"\r\nConnection refused. Server is full.\r\n"
GOODBYE_MESSAGE = b"\r\nGoodbye!\r\n"


class ChatServerError(Exception):
    """Base class for fatal server errors."""


class ServerSetupError(ChatServerError):
    """The listening socket could not be created, bound or listened on."""


class PollError(ChatServerError):
    """Waiting for socket readiness failed."""


class Multiplexer:
    """
    Owns the listening socket and every client Connection.

    Other components never hold a Connection: they hold its integer
    identity and go through send()/disconnect()/get().

    Usage:
        mux = Multiplexer(ServerConfig(port=2000))
        mux.listen()
        while True:
            mux.poll()
            app.update()
    """

    def __init__(self, config: ServerConfig):
        """
        Initialize the multiplexer.

        Args:
            config: Server configuration (host, port, max_clients, buffer_size).

        Note: This does NOT create the listening socket. Call listen().
        """
        self.config = config

        self._listener: Optional[socket.socket] = None
        self._selector = selectors.DefaultSelector()

        # identity → Connection
        self._clients: HashMap[int, Connection] = HashMap(
            handle_hash, capacity=config.max_clients
        )

    # =========================================================================
    # REGISTRY ACCESS
    # =========================================================================

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, identity: int) -> bool:
        return identity in self._clients

    def get(self, identity: int) -> Connection:
        """
        Look up a registered connection.

        Raises:
            ConnectionNotFoundError: If `identity` is not registered.
        """
        conn = self._clients.get(identity)
        if conn is None:
            raise ConnectionNotFoundError(identity)
        return conn

    def connections(self) -> List[Connection]:
        """Snapshot of every registered connection, in registry order."""
        return list(self._clients.values())

    @property
    def address(self):
        """The listener's bound (host, port), or None before listen()."""
        if self._listener is None:
            return None
        return self._listener.getsockname()

    # =========================================================================
    # SETUP
    # =========================================================================

    def listen(self) -> None:
        """
        Create, bind and listen on the server socket.

        Raises:
            ServerSetupError: On any socket setup failure. There is no
                              retry: a port conflict is a configuration
                              problem, not a transient one.
        """
        host, port = self.config.host, self.config.port

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            logger.error(f"Failed to create listener socket: {e}")
            raise ServerSetupError(f"socket(): {e}") from e

        try:
            sock.setblocking(False)

            # SO_REUSEADDR: restart immediately without waiting out TIME_WAIT
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

            sock.bind((host, port))
            sock.listen(self.config.max_clients)
        except OSError as e:
            sock.close()
            logger.error(f"Failed to listen on {host}:{port}: {e}")
            raise ServerSetupError(f"{host}:{port}: {e}") from e

        self._listener = sock
        self._selector.register(sock, selectors.EVENT_READ, data=None)

        logger.info(f"Server listening on port {self.address[1]}.")

    def register(self, sock: socket.socket, address) -> Connection:
        """
        Register an already-accepted client socket.

        The socket is switched to non-blocking mode and the Connection
        starts in state NEW.

        Raises:
            OSError: If the socket can't be made non-blocking.
        """
        sock.setblocking(False)

        conn = Connection(socket=sock, address=address)
        self._clients[conn.identity] = conn
        self._selector.register(sock, selectors.EVENT_READ, data=conn.identity)

        logger.info(f"Client connected ({conn.ip}).")
        return conn

    # =========================================================================
    # THE TICK
    # =========================================================================

    def poll(self) -> None:
        """
        Run one tick of I/O.

        Blocks only while there are zero registered connections.

        Raises:
            PollError: If the readiness wait itself fails.
        """
        # ─────────────────────────────────────────────────────────────────
        # SNAPSHOT STATE FROM BEFORE THIS CALL
        # ─────────────────────────────────────────────────────────────────
        # Connections accepted during this poll() must stay NEW so the chat
        # layer sees them, and connections flagged during this poll() must
        # survive until the chat layer has torn their sessions down.

        to_promote = []
        to_reap = []
        for conn in self._clients.values():
            if conn.state is ConnectionState.NEW:
                to_promote.append(conn)
            elif conn.state is ConnectionState.PENDING_REMOVAL:
                to_reap.append(conn)

        # ─────────────────────────────────────────────────────────────────
        # WAIT FOR READINESS
        # ─────────────────────────────────────────────────────────────────
        # timeout=None blocks until something happens, timeout=0 returns
        # immediately. Only block when there's nobody to service.

        timeout = None if len(self._clients) == 0 else 0

        try:
            events = self._selector.select(timeout=timeout)
        except OSError as e:
            logger.error(f"poll(): {e}")
            raise PollError(str(e)) from e

        for key, mask in events:
            if not mask & selectors.EVENT_READ:
                continue

            if key.data is None:
                self._handle_accept()
            else:
                self._handle_read(key.data)

        for conn in to_promote:
            if conn.state is ConnectionState.NEW:
                conn.state = ConnectionState.ONLINE

        for conn in to_reap:
            self._reap(conn)

        self._flush()

    def _handle_accept(self) -> None:
        """Accept one pending connection, or turn it away if full."""
        try:
            client_socket, client_address = self._listener.accept()
        except OSError:
            # Would-block (client gave up between select and accept) etc.
            return

        if len(self._clients) >= self.config.max_clients:
            logger.warning(f"Server full, rejecting {client_address[0]}.")
            try:
                client_socket.send(SERVER_FULL_MESSAGE)
            except OSError:
                pass
            client_socket.close()
            return

        try:
            self.register(client_socket, client_address)
        except OSError as e:
            logger.warning(
                f"Failed to set up client socket ({client_address[0]}): {e}. "
                f"Disconnecting client."
            )
            client_socket.close()

    def _handle_read(self, identity: int) -> None:
        conn = self._clients[identity]

        try:
            data = conn.socket.recv(self.config.buffer_size)
        except BlockingIOError:
            logger.warning(f"recv(): would block for client ({conn.ip}).")
            return
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EWOULDBLOCK):
                logger.warning(f"recv(): would block for client ({conn.ip}).")
                return
            self._flag(conn)
            return

        if not data:
            # Graceful close from the client
            self._flag(conn)
            return

        conn.inbound.extend(data)

    def _flag(self, conn: Connection) -> None:
        """Flag a connection and stop polling its socket."""
        if conn.is_flagged:
            return

        conn.flag_for_removal()
        try:
            self._selector.unregister(conn.socket)
        except (KeyError, ValueError):
            pass  # Not registered

    def _reap(self, conn: Connection) -> None:
        """Destroy a flagged connection: last-chance flush, close, erase."""
        conn.flush()
        conn.close()
        self._clients.remove(conn.identity)

        logger.info(f"Client disconnected ({conn.ip}).")
        logger.debug(f"Client ({conn.ip}) was connected for {conn.connected_for:.1f}s.")

    def _flush(self) -> None:
        for conn in self._clients.values():
            conn.flush()

    # =========================================================================
    # OPERATIONS FOR THE CHAT LAYER
    # =========================================================================

    def send(self, identity: int, data: bytes) -> None:
        """
        Queue bytes for a connection. They go out on the next flush.

        Raises:
            ConnectionNotFoundError: If `identity` is not registered.
        """
        self.get(identity).queue(data)

    def disconnect(self, identity: int) -> None:
        """
        Say goodbye and flag the connection for teardown.

        The socket is closed by the next poll(), after the goodbye has had
        a final chance to flush.
        """
        conn = self.get(identity)
        conn.queue(GOODBYE_MESSAGE)
        self._flag(conn)

    # =========================================================================
    # SHUTDOWN
    # =========================================================================

    def close(self) -> None:
        """Close every client socket and the listener."""
        for conn in self.connections():
            conn.flush()
            conn.close()
            self._clients.remove(conn.identity)

        if self._listener is not None:
            try:
                self._listener.close()
            except OSError:
                pass
            self._listener = None

        self._selector.close()
